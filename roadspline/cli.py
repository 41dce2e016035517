"""
Command-line interface for roadspline.

Usage:
    roadspline sample --point 0 0 --point 10 5 --point 20 0
    roadspline plot --point 0 0 --point 10 5 --point 20 0 -o road.png
    roadspline check --trials 1000 --dimension 10
    roadspline validate config.yml
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from roadspline import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="roadspline",
        description="roadspline - cubic spline road paths through sketched points",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roadspline sample --point 0 0 --point 10 5 --point 20 0
  roadspline sample --point 0 0 --point 10 0 --step 0.1
  roadspline plot --point 0 0 --point 10 5 --point 20 0 -o road.png
  roadspline check --trials 500 --dimension 20 --seed 1
  roadspline validate config.yml
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--config", "-f",
        type=Path,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sample_parser = subparsers.add_parser(
        "sample",
        help="Fit a curve and print sampled points",
        description="Fit a cubic spline through the given points and print x y rows",
    )
    _add_curve_arguments(sample_parser)

    plot_parser = subparsers.add_parser(
        "plot",
        help="Fit a curve and save a plot",
        description="Fit a cubic spline and save it with its control points as an image",
    )
    _add_curve_arguments(plot_parser)
    plot_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output image file",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Run the solver round-trip check",
        description="Solve random tridiagonal systems and verify A @ x == b",
    )
    check_parser.add_argument("--trials", type=int, help="Number of random systems")
    check_parser.add_argument("--dimension", type=int, help="Dimension of each system")
    check_parser.add_argument("--seed", type=int, help="Random seed")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a configuration file",
        description="Validate a YAML configuration file",
    )
    validate_parser.add_argument(
        "config_file",
        type=Path,
        help="Path to configuration file",
    )

    subparsers.add_parser(
        "info",
        help="Show system information",
        description="Display system and dependency information",
    )

    return parser


def _add_curve_arguments(parser: argparse.ArgumentParser) -> None:
    """Add control point arguments shared by sample and plot."""
    parser.add_argument(
        "--point", "-p",
        type=float,
        nargs=2,
        action="append",
        metavar=("X", "Y"),
        default=[],
        dest="points",
        help="Control point, repeat in drawing order",
    )

    parser.add_argument(
        "--step", "-s",
        type=float,
        help="Parameter step (default: 1 / (points * sampling density))",
    )


def setup_logging(verbose: int, quiet: bool) -> None:
    """Setup logging based on verbosity level."""
    import logging
    from roadspline.logging import setup_logging as _setup_logging

    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    _setup_logging(level=level, force=True)


def _load_settings(args: argparse.Namespace):
    from roadspline.config import ConfigManager

    return ConfigManager(args.config).load()


def _fit_from_args(args: argparse.Namespace, settings):
    """Build and fit a spline from --point arguments."""
    from roadspline.exceptions import DegenerateFitError, InsufficientPointsError
    from roadspline.spline import CubicSpline

    spline = CubicSpline(
        pivot_tolerance=settings.solver_pivot_tolerance,
        sampling_density=settings.sampling.density,
    )
    for x, y in args.points:
        spline.add_point(x, y)

    if not spline.fit():
        if spline.point_count() < 2:
            raise InsufficientPointsError(2, spline.point_count())
        raise DegenerateFitError(spline.point_count())
    return spline


def cmd_sample(args: argparse.Namespace) -> int:
    """Execute the sample command."""
    settings = _load_settings(args)
    spline = _fit_from_args(args, settings)

    for x, y in spline.sample(args.step):
        print(f"{x:.6f} {y:.6f}")
    last = spline.point(spline.point_count() - 1)
    print(f"{last.x:.6f} {last.y:.6f}")
    return 0


def cmd_plot(args: argparse.Namespace) -> int:
    """Execute the plot command."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from roadspline.logging import LOG_INFO

    settings = _load_settings(args)
    spline = _fit_from_args(args, settings)

    curve = spline.sample(args.step)
    markers = spline.points()

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.plot(curve[:, 0], curve[:, 1], color="#105090", linewidth=2, label="road")
    ax.scatter([p.x for p in markers], [p.y for p in markers], color="#d04040", zorder=3, label="control points")
    ax.set_aspect("equal")
    ax.legend()
    fig.savefig(args.output)
    plt.close(fig)

    LOG_INFO(f"Plot saved to {args.output}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Execute the check command."""
    from roadspline.generators import round_trip_check
    from roadspline.logging import TimeTracker, profile_scope

    settings = _load_settings(args)
    trials = args.trials if args.trials is not None else settings.check.trials
    dimension = args.dimension if args.dimension is not None else settings.check.dimension
    seed = args.seed if args.seed is not None else settings.check.seed

    tracker = TimeTracker("solve")
    with profile_scope("round_trip_check"):
        report = round_trip_check(
            dimension,
            trials,
            epsilon=settings.vector.epsilon,
            seed=seed,
            tracker=tracker,
        )
    tracker.print_stats()

    status = "passed" if report.passed else "FAILED"
    print(f"Round-trip check {status}: {report.failures}/{report.trials} failures, "
          f"max error {report.max_error:.3e} (dimension {dimension})")
    return 0 if report.passed else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute the validate command."""
    import yaml

    from roadspline.config import ConfigManager
    from roadspline.exceptions import ConfigurationError

    try:
        config = ConfigManager(args.config_file).load(validate=True)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error reading configuration: {e}", file=sys.stderr)
        return 1

    print(f"Configuration file '{args.config_file}' is valid.")
    print(f"  Sampling density: {config.sampling.density}")
    print(f"  Pivot guard: {config.solver.guard} (tolerance {config.solver.tolerance})")
    print(f"  Equality epsilon: {config.vector.epsilon}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Execute the info command."""
    import platform

    print("roadspline System Information")
    print("=" * 40)
    print(f"roadspline version: {__version__}")
    print(f"Python version: {platform.python_version()}")
    print(f"Platform: {platform.platform()}")
    print()

    print("Dependencies:")
    for dep, module_name in (("numpy", "numpy"), ("matplotlib", "matplotlib"), ("pyyaml", "yaml")):
        try:
            mod = __import__(module_name)
            version = getattr(mod, "__version__", "unknown")
            print(f"  {dep}: {version}")
        except ImportError:
            print(f"  {dep}: NOT INSTALLED")

    return 0


COMMANDS = {
    "sample": cmd_sample,
    "plot": cmd_plot,
    "check": cmd_check,
    "validate": cmd_validate,
    "info": cmd_info,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    from roadspline.exceptions import RoadSplineError
    from roadspline.logging import LOG_ERROR

    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except (RoadSplineError, ValueError) as e:
        LOG_ERROR(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
