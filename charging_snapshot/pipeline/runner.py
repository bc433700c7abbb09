"""Download, validate, transform and persist one snapshot."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from charging_snapshot.common.config_loader import RunSettings
from charging_snapshot.common.errors import EmptyDatasetError
from charging_snapshot.common.fs import file_size_human
from charging_snapshot.common.http import HttpClient
from charging_snapshot.common.logging import log_event
from charging_snapshot.harvest.overpass_harvest import build_overpass_query, fetch_overpass
from charging_snapshot.pipeline.export import write_raw_response, write_snapshot
from charging_snapshot.pipeline.transform import extract_remark, parse_overpass_response, transform_elements


@dataclass(frozen=True)
class RunResult:
    record_count: int
    generated_at: int
    outfile_compressed: Path
    outfile_raw: Path | None


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def run_snapshot(
    settings: RunSettings,
    logger: logging.Logger,
    *,
    run_id: str | None = None,
    http_client: HttpClient | None = None,
) -> RunResult:
    query = build_overpass_query(settings.timeout_seconds)

    log_event(
        logger,
        "1: Downloading data through Overpass API "
        f"(this may take up to {settings.timeout_seconds} seconds...)",
        run_id=run_id,
        stage="download",
        event="STAGE_START",
        status="ok",
    )
    started = time.monotonic()
    raw = fetch_overpass(
        settings.endpoint_url,
        query,
        settings.timeout_seconds,
        http_client,
        buffer_seconds=settings.timeout_buffer_seconds,
        user_agent=settings.user_agent,
    )
    logger.debug(
        f"Received {len(raw)} bytes from {settings.endpoint_url}",
        extra={
            "run_id": run_id,
            "stage": "download",
            "event": "STAGE_END",
            "status": "ok",
            "bytes": len(raw),
            "duration_ms": _elapsed_ms(started),
        },
    )

    response = parse_overpass_response(raw)
    try:
        snapshot = transform_elements(response.elements)
    except EmptyDatasetError as exc:
        exc.remark = extract_remark(raw)
        raise

    outfile_raw = None
    if settings.keep_intermediate:
        outfile_raw = write_raw_response(settings.outfile_raw, raw)
        log_event(
            logger,
            f"Saved intermediate file: {outfile_raw} ({file_size_human(outfile_raw)})",
            run_id=run_id,
            stage="download",
            event="RAW_WRITTEN",
            status="ok",
            bytes=len(raw),
        )

    log_event(
        logger,
        f"2: Processing {snapshot.record_count} entries",
        run_id=run_id,
        stage="transform",
        event="STAGE_START",
        status="ok",
        rows_in=len(response.elements),
        rows_out=snapshot.record_count,
    )
    write_snapshot(settings.outfile_compressed, snapshot)
    log_event(
        logger,
        f"Done: {settings.outfile_compressed} ({file_size_human(settings.outfile_compressed)})",
        run_id=run_id,
        stage="export",
        event="STAGE_END",
        status="ok",
        rows_out=snapshot.record_count,
        duration_ms=_elapsed_ms(started),
    )

    return RunResult(
        record_count=snapshot.record_count,
        generated_at=snapshot.generated_at,
        outfile_compressed=settings.outfile_compressed,
        outfile_raw=outfile_raw,
    )
