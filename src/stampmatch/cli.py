"""
Command-line interface for StampMatch.

Compares stamp images or recorded gestures and prints the result as JSON.
"""

import argparse
import json
import sys

from stampmatch.config import load_config, save_default_config
from stampmatch.tracer import configure_tracer, get_tracer


def _add_common_arguments(parser):
    parser.add_argument(
        "--tolerance", "-t",
        type=float,
        default=None,
        help="Match tolerance 0-1 (default from config)",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="stampmatch",
        description="StampMatch: decide whether two stamps match within a tolerance",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    compare_parser = subparsers.add_parser("compare", help="Compare two stamp images")
    compare_parser.add_argument("first", help="First image file")
    compare_parser.add_argument("second", help="Second image file")
    _add_common_arguments(compare_parser)

    replay_parser = subparsers.add_parser("replay", help="Replay two recorded gestures and compare them")
    replay_parser.add_argument("left", help="Gesture JSON for the first surface")
    replay_parser.add_argument("right", help="Gesture JSON for the second surface")
    _add_common_arguments(replay_parser)

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="stampmatch_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "compare":
        return handle_compare(args)
    elif args.command == "replay":
        return handle_replay(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def _setup(args):
    config = load_config(args.config)
    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=config.tracing.json_output,
    )
    tolerance = config.comparison.default_tolerance if args.tolerance is None else args.tolerance
    return config, tolerance


def _print_result(result, **extra):
    payload = result.model_dump()
    payload.update(extra)
    print(json.dumps(payload, indent=2))
    return 0


def handle_compare(args):
    """Handle the compare command."""
    config, tolerance = _setup(args)
    tracer = get_tracer()

    try:
        from stampmatch.compare.pixels import compare_buffers
        from stampmatch.io.load_image import load_buffer, validate_image_inputs

        errors = validate_image_inputs([args.first, args.second])
        if errors:
            raise ValueError(f"Input validation failed: {errors}")

        with tracer.span("cli_compare", module="cli"):
            first = load_buffer(args.first)
            second = load_buffer(args.second)
            result = compare_buffers(
                first, second, tolerance,
                pixel_scale=config.comparison.pixel_tolerance_scale,
            )

        return _print_result(result)

    except Exception as e:
        tracer.event(f"Compare failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_replay(args):
    """Handle the replay command."""
    config, tolerance = _setup(args)
    tracer = get_tracer()

    try:
        from stampmatch.compare.pixels import buffer_stats, compare_buffers
        from stampmatch.io.gesture_file import load_gesture, replay_gesture

        with tracer.span("cli_replay", module="cli"):
            left = replay_gesture(load_gesture(args.left), config)
            right = replay_gesture(load_gesture(args.right), config)
            result = compare_buffers(
                left, right, tolerance,
                pixel_scale=config.comparison.pixel_tolerance_scale,
            )

        return _print_result(
            result,
            left_stats=buffer_stats(left).model_dump(),
            right_stats=buffer_stats(right).model_dump(),
        )

    except Exception as e:
        tracer.event(f"Replay failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
