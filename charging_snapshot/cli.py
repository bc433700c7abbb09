"""Download charging stations from the Overpass API into a compressed JSON snapshot."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from charging_snapshot.common.config_loader import load_run_config, resolve_endpoint, resolve_settings
from charging_snapshot.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS, OVERPASS_ENDPOINTS
from charging_snapshot.common.errors import ConfigError, EmptyDatasetError, PipelineError
from charging_snapshot.common.ids import generate_run_id
from charging_snapshot.common.logging import build_logger, log_failure
from charging_snapshot.pipeline.runner import run_snapshot

TRUE_VALUES = {"true", "yes", "1", "on"}
FALSE_VALUES = {"false", "no", "0", "off"}


def _bool_arg(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def _endpoint_arg(value: str) -> str:
    try:
        resolve_endpoint(value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value


def _positive_int_arg(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return parsed


def parse_args(argv: list[str]) -> argparse.Namespace:
    endpoints = ", ".join(f"{name} ({url})" for name, url in OVERPASS_ENDPOINTS.items())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--overpass-api-endpoint",
        type=_endpoint_arg,
        default=None,
        help=f"Overpass API to use: {endpoints}, or a custom http(s) URL (default: switzerland)",
    )
    parser.add_argument(
        "--timeout-seconds",
        type=_positive_int_arg,
        default=None,
        help="Timeout in seconds for the Overpass query (default: 900)",
    )
    parser.add_argument(
        "--keep-intermediate",
        type=_bool_arg,
        nargs="?",
        const=True,
        default=None,
        metavar="BOOL",
        help="Keep intermediate raw response file (default: false)",
    )
    parser.add_argument(
        "--outfile-raw",
        default=None,
        help="Output file for raw response, only written with --keep-intermediate (default: overpass-result.json)",
    )
    parser.add_argument(
        "--outfile-compressed",
        default=None,
        help="Output file for compressed result (default: charging-stations-osm.json.gz)",
    )
    parser.add_argument("--config", default=None, help="Optional YAML file with run settings")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-file", default=None, help="Also write JSON-line logs to this file")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("--run-id", default=None)
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> dict:
    return {
        "overpass_api_endpoint": args.overpass_api_endpoint,
        "timeout_seconds": args.timeout_seconds,
        "keep_intermediate": args.keep_intermediate,
        "outfile_raw": args.outfile_raw,
        "outfile_compressed": args.outfile_compressed,
    }


def run_command(args: argparse.Namespace, *, http_client=None) -> int:
    run_id = args.run_id or generate_run_id()
    use_color = not args.no_color and "NO_COLOR" not in os.environ
    logger = build_logger(
        run_id,
        level=args.log_level,
        use_color=use_color,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        file_config = load_run_config(Path(args.config)) if args.config else None
        settings = resolve_settings(file_config, _overrides(args))
        run_snapshot(settings, logger, run_id=run_id, http_client=http_client)
    except EmptyDatasetError as exc:
        log_failure(logger, str(exc), run_id=run_id, event="RUN_FAIL", status="error", error_code=exc.error_code)
        if exc.remark:
            log_failure(logger, f"Details: {exc.remark}", run_id=run_id, error_code=exc.error_code)
        return EXIT_HARD_FAIL
    except PipelineError as exc:
        log_failure(logger, str(exc), run_id=run_id, event="RUN_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_failure(
            logger,
            f"Unexpected failure: {exc}",
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
