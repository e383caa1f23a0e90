import argparse
import logging

from .errors import ConfigurationError
from .params import REFERENCE_FORCING, Forcing, Params

logger = logging.getLogger("fluid_simulator")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="fluid_simulator",
        description="Interactive 2D stable-fluids simulation.",
    )
    parser.add_argument("--grid-size", type=int, default=50, help="active cells per axis")
    parser.add_argument("--visc", type=float, default=0.1, help="viscosity")
    parser.add_argument("--diff", type=float, default=0.1, help="density diffusion")
    parser.add_argument("--dt", type=float, default=0.01, help="time step")
    parser.add_argument("--iters", type=int, default=20, help="relaxation sweeps per solve")
    parser.add_argument("--relaxation", choices=("gauss-seidel", "jacobi"), default="gauss-seidel")
    parser.add_argument("--vel-x", type=float, help="forcing X velocity (default 500)")
    parser.add_argument("--vel-y", type=float, help="forcing Y velocity (default 0)")
    parser.add_argument("--force-cell", type=int, nargs=2, metavar=("I", "J"),
                        help="cell receiving the forcing term (default 5 25)")
    parser.add_argument("--no-forcing", action="store_true", help="disable the forcing term")
    parser.add_argument("--window", type=int, default=500, help="window size in pixels")
    parser.add_argument("--headless", action="store_true", help="run without a window and save a snapshot")
    parser.add_argument("--steps", type=int, default=100, help="ticks to run in headless mode")
    parser.add_argument("--click", type=float, nargs=2, metavar=("X", "Y"),
                        help="pixel position of a held density source in headless mode")
    parser.add_argument("--show-vels", action="store_true", help="draw velocity vectors")
    parser.add_argument("--show-grid", action="store_true", help="draw grid lines")
    parser.add_argument("--output", default="density.png", help="snapshot path in headless mode")
    parser.add_argument("--log-level", default="INFO",
                        choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    return parser


def params_from_args(args):
    forcing = None
    if not args.no_forcing:
        forcing = REFERENCE_FORCING
        # an explicitly placed forcing must fit the grid
        if (args.force_cell, args.vel_x, args.vel_y) != (None, None, None):
            cell = args.force_cell or REFERENCE_FORCING.cell
            vx, vy = REFERENCE_FORCING.value
            if args.vel_x is not None:
                vx = args.vel_x
            if args.vel_y is not None:
                vy = args.vel_y
            forcing = Forcing(cell=tuple(cell), value=(vx, vy))
    return Params(
        N=args.grid_size,
        width=float(args.window),
        height=float(args.window),
        visc=args.visc,
        diff=args.diff,
        dt=args.dt,
        iters=args.iters,
        relaxation=args.relaxation,
        forcing=forcing,
    ).validate()


def run_headless(params, steps, output, click=None, show_grid=False, show_vels=False):
    from .simulator import Simulator
    from .snapshot import FigureRenderer

    sim = Simulator.from_params(params)
    if click is not None:
        sim.register_click(*click)
    renderer = FigureRenderer()
    try:
        for n in range(steps):
            last = n == steps - 1
            sim.step(renderer if last else None, show_grid, show_vels)
        if steps == 0:
            renderer.render(sim.grid, show_grid, show_vels)
        path = renderer.save(output)
    finally:
        renderer.close()
    logger.info("ran %d ticks, total density %.6g", sim.ticks, sim.grid.total_density())
    return path


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.steps < 0:
        parser.error("--steps must be >= 0")
    try:
        params = params_from_args(args)
    except ConfigurationError as exc:
        parser.error(str(exc))

    if args.headless:
        run_headless(params, args.steps, args.output, args.click, args.show_grid, args.show_vels)
        return 0

    from .app import App
    app = App(params, window=args.window)
    app.show_grid = args.show_grid
    app.show_vels = args.show_vels
    app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
