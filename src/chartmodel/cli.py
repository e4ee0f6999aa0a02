"""CLI entry point."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from chartmodel.compute import all_chart_meta, compute_model
from chartmodel.config import DEFAULT_ENGINE_CONFIG, EngineConfig, load_engine_config
from chartmodel.errors import ChartModelError, InputError
from chartmodel.infer import infer_spec
from chartmodel.io_utils import dumps_json, read_payload, write_json_atomic
from chartmodel.logging_utils import (
    DEFAULT_LOG_LEVEL,
    configure_logging,
    log_exception,
    parse_log_level,
    run_with_error_handling,
)
from chartmodel.model import RenderModel
from chartmodel.transition import EASINGS, interpolate_model

_SUBCOMMANDS: Sequence[str] = ("compute", "infer", "interpolate", "charts")

logger = logging.getLogger(__name__)


def _read_input(path: str, label: str) -> Any:
    source = Path(path)
    if not source.exists():
        raise InputError(f"{label} file not found: {source}")
    try:
        return read_payload(source)
    except (OSError, ValueError) as exc:
        raise InputError(f"Failed to read {label} file {source}: {exc}") from exc


def _read_model(path: str, label: str) -> RenderModel:
    payload = _read_input(path, label)
    try:
        return RenderModel.from_dict(payload)
    except ValidationError as exc:
        raise InputError(
            f"{label} file {path} is not a render model.",
            context={"errors": exc.error_count()},
        ) from exc


def _load_config(path: Optional[str]) -> EngineConfig:
    return DEFAULT_ENGINE_CONFIG if path is None else load_engine_config(path)


def _emit(payload: Any, output: Optional[str]) -> None:
    if output is None:
        print(dumps_json(payload))
        return
    write_json_atomic(Path(output), payload)
    logger.info("Wrote %s", output)


def _compute_handler(args: argparse.Namespace) -> None:
    spec = _read_input(args.spec, "Spec")
    data = _read_input(args.data, "Data") if args.data else None
    config = _load_config(args.config)
    model = compute_model(spec, data, {"width": args.width, "height": args.height}, config=config)
    for warning in model.warnings:
        logger.debug("%s: %s", warning.code, warning.message)
    _emit(model.to_dict(), args.output)


def _infer_handler(args: argparse.Namespace) -> None:
    value = _read_input(args.data, "Data")
    inferred = infer_spec(value, fallback_type=args.fallback_type)
    if inferred is None:
        raise InputError(
            "No chart type could be inferred from the data.",
            user_message="No chart type could be inferred; pass --fallback-type to force one.",
        )
    _emit(inferred.to_dict(), args.output)


def _interpolate_handler(args: argparse.Namespace) -> None:
    start = _read_model(args.from_path, "From")
    end = _read_model(args.to_path, "To")
    easing = args.easing or _load_config(args.config).default_easing
    frame = interpolate_model(start, end, args.t, easing=easing)
    _emit(frame.to_dict(), args.output)


def _charts_handler(args: argparse.Namespace) -> None:
    metas = all_chart_meta()
    if args.json:
        print(dumps_json([meta.to_dict() for meta in metas]))
        return
    for meta in metas:
        aspect = meta.preferred_aspect_ratio or "-"
        print(f"{meta.type:<16} {meta.category:<6} {aspect:<7} {meta.display_name}")


def _add_output_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default=None,
        help="Write JSON to this path instead of stdout.",
    )


def _register_compute_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    compute_parser = subparsers.add_parser(
        "compute",
        help="Compute a render model from a chart spec and data.",
        description="Compute a render model from a chart spec and data.",
    )
    compute_parser.add_argument("--spec", required=True, help="Chart spec file (JSON/YAML).")
    compute_parser.add_argument("--data", default=None, help="Chart data file (JSON/YAML).")
    compute_parser.add_argument("--width", type=float, required=True, help="Viewport width.")
    compute_parser.add_argument("--height", type=float, required=True, help="Viewport height.")
    compute_parser.add_argument("--config", default=None, help="Engine config file (YAML/JSON).")
    _add_output_argument(compute_parser)
    compute_parser.set_defaults(handler=_compute_handler)


def _register_infer_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    infer_parser = subparsers.add_parser(
        "infer",
        help="Infer a chart spec from untyped data.",
        description="Infer a chart spec from untyped data.",
    )
    infer_parser.add_argument("--data", required=True, help="Data file (JSON/YAML).")
    infer_parser.add_argument(
        "--fallback-type",
        default=None,
        help="Chart type to use when no recognizer matches.",
    )
    _add_output_argument(infer_parser)
    infer_parser.set_defaults(handler=_infer_handler)


def _register_interpolate_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    interpolate_parser = subparsers.add_parser(
        "interpolate",
        help="Compute one animation frame between two render models.",
        description="Compute one animation frame between two render models.",
    )
    interpolate_parser.add_argument("--from", dest="from_path", required=True, help="Start model JSON.")
    interpolate_parser.add_argument("--to", dest="to_path", required=True, help="End model JSON.")
    interpolate_parser.add_argument("--t", type=float, required=True, help="Progress (0..1, may overshoot).")
    interpolate_parser.add_argument(
        "--easing",
        choices=sorted(EASINGS),
        default=None,
        help="Easing curve (defaults to engine.default_easing).",
    )
    interpolate_parser.add_argument("--config", default=None, help="Engine config file (YAML/JSON).")
    _add_output_argument(interpolate_parser)
    interpolate_parser.set_defaults(handler=_interpolate_handler)


def _register_charts_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    charts_parser = subparsers.add_parser(
        "charts",
        help="List registered chart types.",
        description="List registered chart types.",
    )
    charts_parser.add_argument("--json", action="store_true", help="Print chart metadata as JSON.")
    charts_parser.set_defaults(handler=_charts_handler)


_REGISTRARS = {
    "compute": _register_compute_subcommand,
    "infer": _register_infer_subcommand,
    "interpolate": _register_interpolate_subcommand,
    "charts": _register_charts_subcommand,
}


def _build_parser(subcommands: Sequence[str] = _SUBCOMMANDS) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chartmodel",
        description="chartmodel command line interface.",
    )
    parser.add_argument(
        "--traceback",
        action="store_true",
        help="Show full traceback on errors.",
    )
    parser.add_argument(
        "--log-level",
        type=parse_log_level,
        default=DEFAULT_LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    for name in subcommands:
        _REGISTRARS[name](subparsers)
    return parser


def _cli_main(
    *,
    cli_logger: logging.Logger,
    argv: Optional[Sequence[str]] = None,
) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    cli_logger.setLevel(args.log_level)
    if not getattr(args, "command", None):
        parser.print_help()
        raise SystemExit(2)
    try:
        args.handler(args)
    except ChartModelError as exc:
        log_exception(cli_logger, exc, show_traceback=args.traceback)
        raise SystemExit(1) from None


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point with standard logging/error handling."""
    cli_logger = configure_logging()
    run_with_error_handling(_cli_main, logger=cli_logger, cli_logger=cli_logger, argv=argv)


if __name__ == "__main__":
    main()
