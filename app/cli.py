"""
Command-line interface for DroidSpice.

Build netlists from component values and run analyses without a GUI.

Usage::

    python -m cli netlist --set R1=4.7k --set L1=10m
    python -m cli simulate --preset "Quick Transient"
    python -m cli simulate --analysis "ac dec 20 0.1 100meg" --plot bode.png
    python -m cli simulate --format json --set VS=12
    python -m cli presets
    python -m cli presets save "Slow Tran" --analysis "tran 1u 1m" --set C1=1u
    python -m cli presets delete "Slow Tran"
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path

from controllers.simulation_controller import SimulationController
from models.analysis_result import NoDataResult
from models.component_value import ComponentValue
from simulation.errors import SimulationError
from simulation.netlist_builder import DEFAULT_TEMPLATE, NetlistBuilder
from simulation.preset_manager import BUILTIN_PRESETS, PresetManager
from simulation.unit_encoder import encode_values

__version__ = "0.1.0"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_DATA = 2

DEFAULT_PRESET = BUILTIN_PRESETS[0].name


def parse_assignment(text: str) -> tuple[str, ComponentValue]:
    """Parse 'R1=4.7k' into ('R1', ComponentValue('4.7', 'k'))."""
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return name.strip().upper(), ComponentValue.parse(value)


def resolve_values(args: argparse.Namespace, manager: PresetManager) -> tuple[dict, str]:
    """Component values and analysis command from the preset plus overrides."""
    preset = manager.get_preset_by_name(args.preset)
    if preset is None:
        raise SimulationError(f"Unknown preset: {args.preset}")

    values = dict(preset.values)
    values.update(dict(args.set or []))
    command = getattr(args, "analysis", None) or preset.command
    return values, command


def load_template(path: str | None) -> str:
    if path is None:
        return DEFAULT_TEMPLATE
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SimulationError(f"Cannot read template {path}: {e}") from e


def _build_controller(args: argparse.Namespace) -> SimulationController:
    return SimulationController(builder=NetlistBuilder(load_template(args.template)))


def cmd_netlist(args: argparse.Namespace) -> int:
    """Print the netlist built from the preset values and overrides."""
    values, _command = resolve_values(args, PresetManager(args.preset_file))
    print(_build_controller(args).generate_netlist(values))
    return EXIT_OK


def cmd_simulate(args: argparse.Namespace) -> int:
    """Run one analysis and print its report."""
    values, command = resolve_values(args, PresetManager(args.preset_file))
    published = _build_controller(args).run_analysis(values, command)
    result = published.result

    if args.format == "json":
        print(_result_to_json(published))
    else:
        print(result.text)

    if isinstance(result, NoDataResult):
        return EXIT_NO_DATA

    if args.plot:
        if published.series is None:
            print("Warning: this analysis has no plot", file=sys.stderr)
        else:
            from plotting.plot_utils import save_plot

            save_plot(published.series, args.plot)
            print(f"Plot written to {args.plot}", file=sys.stderr)

    return EXIT_OK


def cmd_presets(args: argparse.Namespace) -> int:
    """List presets, or save or delete a user preset."""
    manager = PresetManager(args.preset_file)
    action = getattr(args, "preset_action", None)
    if action == "save":
        return _save_preset(args, manager)
    if action == "delete":
        if not manager.delete_preset(args.name):
            print(f"Error: no user preset named {args.name!r}", file=sys.stderr)
            return EXIT_ERROR
        print(f"Deleted preset {args.name}")
        return EXIT_OK

    for preset in manager.get_presets():
        origin = "built-in" if preset.builtin else "user"
        print(f"{preset.name:<24} {preset.command:<28} ({origin})")
    return EXIT_OK


def _save_preset(args: argparse.Namespace, manager: PresetManager) -> int:
    values, command = resolve_values(args, manager)
    # Reject bad values now rather than at the next simulate
    encode_values(values)
    try:
        preset = manager.save_preset(args.name, command, values)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    print(f"Saved preset {preset.name} ({preset.command})")
    return EXIT_OK


def _json_number(value: float):
    # JSON has no infinity; the zero-power dB sentinel is written as a string
    if math.isinf(value):
        return "-inf" if value < 0 else "inf"
    return value


def _result_to_json(published) -> str:
    """Format a published result as JSON."""
    result = published.result
    output = {
        "analysis": result.kind.value,
        "command": published.command,
        "has_data": result.has_data,
        "lines": list(result.lines),
    }
    if published.series is not None:
        output["series"] = {
            "label": published.series.label,
            "x": [_json_number(v) for v in published.series.x],
            "y": [_json_number(v) for v in published.series.y],
        }
    return json.dumps(output, indent=2)


def _add_value_options(parser: argparse.ArgumentParser, template: bool = True) -> None:
    parser.add_argument("--preset", default=DEFAULT_PRESET, help=f"Preset to start from (default: {DEFAULT_PRESET})")
    parser.add_argument(
        "--set",
        action="append",
        type=parse_assignment,
        metavar="NAME=VALUE",
        help="Override a component value, e.g. R1=4.7k or C1=100n (repeatable)",
    )
    if template:
        parser.add_argument("--template", help="Netlist template file with {NAME} placeholders")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="droidspice-cli",
        description="DroidSpice - build parametrized netlists and run ngspice analyses from the command line.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--preset-file", type=Path, help="User preset JSON file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # netlist
    net_parser = subparsers.add_parser("netlist", help="Print the netlist without simulating")
    _add_value_options(net_parser)

    # simulate
    sim_parser = subparsers.add_parser("simulate", help="Run an analysis and print the report")
    _add_value_options(sim_parser)
    sim_parser.add_argument("--analysis", help="Analysis command overriding the preset, e.g. 'tran 0.1u 100u'")
    sim_parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format (default: text)")
    sim_parser.add_argument("--plot", help="Save the plot series to this image file")

    # presets [save NAME | delete NAME]
    presets_parser = subparsers.add_parser("presets", help="List, save or delete presets")
    preset_actions = presets_parser.add_subparsers(dest="preset_action")
    save_parser = preset_actions.add_parser("save", help="Save a user preset from a preset plus overrides")
    save_parser.add_argument("name", help="Name of the new preset")
    _add_value_options(save_parser, template=False)
    save_parser.add_argument("--analysis", help="Analysis command for the preset, e.g. 'ac dec 10 1 1meg'")
    delete_parser = preset_actions.add_parser("delete", help="Delete a user preset")
    delete_parser.add_argument("name", help="Name of the preset to delete")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "netlist": cmd_netlist,
        "simulate": cmd_simulate,
        "presets": cmd_presets,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_ERROR

    try:
        return handler(args)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
