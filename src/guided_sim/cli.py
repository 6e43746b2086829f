"""
Command-line interface for guided simulation modules.

Usage:
    guided-sim presets
    guided-sim metrics interconnect --set topology=tree --set node_count=16
    guided-sim metrics chiplets_vs_monoliths --set total_die_area_mm2=800
    guided-sim layout --seed 42 --count 64 --p 0.7 --columns 8
"""

import argparse
import sys
from dataclasses import fields, is_dataclass
from typing import List, Optional

from .exceptions import UnknownModelError, UnknownParameterError
from .layout import generate_layout
from .logger import Logger
from .models.parameters import ParameterSet
from .models.registry import get_model, list_models
from .presets import PRESETS


def _format_value(value) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    if isinstance(value, tuple) and len(value) > 8:
        return f"{list(value[:8])} ... ({len(value)} total)"
    return str(value)


def _cmd_presets(args) -> int:
    for name, preset in PRESETS.items():
        config = preset.config
        print(f"{name}")
        print(f"  Title: {preset.display_name}")
        print(f"  Model: {config.model}")
        print(f"  Pass threshold: {config.assessment.pass_threshold}/{config.assessment.question_count}")
        print(f"  Cooldown: {config.timing.cooldown_ms:.0f} ms, tick {config.timing.animation_period_ms:.0f} ms")
    return 0


def _cmd_metrics(args) -> int:
    name = args.module
    initial = {}
    if name in PRESETS:
        initial = dict(PRESETS[name].config.parameters)
        name = PRESETS[name].config.model
    try:
        model = get_model(name)
    except UnknownModelError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        print(f"Presets: {', '.join(PRESETS)}", file=sys.stderr)
        return 1

    params = ParameterSet(model.parameter_specs(), initial)
    for assignment in args.set or []:
        if "=" not in assignment:
            print(f"Error: expected name=value, got '{assignment}'", file=sys.stderr)
            return 1
        key, value = assignment.split("=", 1)
        try:
            params.set(key.strip(), value.strip())
        except UnknownParameterError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return 1

    metrics = model.compute(params)

    print(f"{model.title}")
    print("=" * 50)
    print("Parameters:")
    for key, value in params.items():
        unit = params.spec(key).unit
        print(f"  {key}: {_format_value(value)}{' ' + unit if unit else ''}")
    print("Metrics:")
    if is_dataclass(metrics):
        for f in fields(metrics):
            print(f"  {f.name}: {_format_value(getattr(metrics, f.name))}")
    else:
        print(f"  {metrics}")
    return 0


def _cmd_layout(args) -> int:
    if args.count < 0:
        print("Error: --count must be non-negative", file=sys.stderr)
        return 1
    grid = generate_layout(args.seed, args.count, args.p, args.columns)
    for row in grid.rows():
        print("".join("#" if good else "." for good in row))
    print(f"good={grid.good_count} defect={grid.defect_count} p={grid.success_probability:.4f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="guided-sim",
        description="Guided interactive simulation modules"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Write log messages to this file"
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("presets", help="List built-in modules")

    metrics = sub.add_parser("metrics", help="Print derived metrics for a model or preset")
    metrics.add_argument(
        "module",
        help=f"Model ({', '.join(list_models())}) or preset name"
    )
    metrics.add_argument(
        "--set", "-s",
        action="append",
        metavar="NAME=VALUE",
        help="Override a parameter (repeatable; values are clamped into range)"
    )

    layout = sub.add_parser("layout", help="Print a deterministic layout grid")
    layout.add_argument("--seed", type=int, default=42, help="Layout seed")
    layout.add_argument("--count", type=int, default=64, help="Number of cells")
    layout.add_argument("--p", type=float, default=0.5, help="Probability a cell is good")
    layout.add_argument("--columns", type=int, default=8, help="Cells per printed row")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_file:
        Logger.initialize(args.log_file)

    handlers = {
        "presets": _cmd_presets,
        "metrics": _cmd_metrics,
        "layout": _cmd_layout,
    }
    if args.command not in handlers:
        parser.print_help()
        return 1

    Logger.log(f"guided-sim {args.command}", Logger.LogPriority.INFO)
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
