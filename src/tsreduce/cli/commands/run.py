from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from tsreduce.config.resolution import cascade
from tsreduce.config.transform import RunConfig, load_run_config
from tsreduce.errors import GroupFailuresError
from tsreduce.io.readers import iter_rows
from tsreduce.io.writers import writer_factory
from tsreduce.pipeline.grouping import aggregate_factory, aggregate_rows
from tsreduce.utils.load import load_aggregate

logger = logging.getLogger(__name__)


def build_run_config(
    *,
    config_path: Optional[str] = None,
    transform: Optional[str] = None,
    resolution: Optional[int] = None,
    input_path: Optional[str] = None,
    input_format: Optional[str] = None,
    time_field: Optional[str] = None,
    value_field: Optional[str] = None,
    group_by: Optional[str] = None,
    out_format: Optional[str] = None,
    out_path: Optional[str] = None,
    progress: Optional[bool] = None,
) -> RunConfig:
    """Merge CLI flags over an optional YAML config; flags win."""
    doc: dict[str, Any] = load_run_config(Path(config_path)) if config_path else {}
    transform_doc = dict(doc.get("transform") or {})
    input_doc = dict(doc.get("input") or {})
    output_doc = dict(doc.get("output") or {})

    merged = {
        "transform": {
            "name": cascade(transform, transform_doc.get("name")),
            "resolution": cascade(resolution, transform_doc.get("resolution")),
        },
        "input": {
            key: value
            for key, value in {
                "path": cascade(input_path, input_doc.get("path")),
                "format": cascade(input_format, input_doc.get("format")),
                "time_field": cascade(time_field, input_doc.get("time_field")),
                "value_field": cascade(value_field, input_doc.get("value_field")),
                "group_by": cascade(group_by, input_doc.get("group_by")),
            }.items()
            if value is not None
        },
        "output": {
            key: value
            for key, value in {
                "format": cascade(out_format, output_doc.get("format")),
                "path": cascade(out_path, output_doc.get("path")),
            }.items()
            if value is not None
        },
        "progress": cascade(progress, doc.get("progress"), fallback=False),
        "log_level": doc.get("log_level"),
    }
    return RunConfig.model_validate(merged)


def handle(config: RunConfig) -> int:
    aggregate_cls = load_aggregate(config.transform.name)
    factory = aggregate_factory(aggregate_cls, config.transform.resolution)
    logger.info(
        "running %s (resolution=%d) over %s",
        config.transform.name,
        config.transform.resolution,
        config.input.path or "<stdin>",
    )
    results = aggregate_rows(iter_rows(config.input), factory, progress=config.progress)

    writer = writer_factory(config.output)
    try:
        for group, series in results.series.items():
            writer.write(group, series)
    except BaseException:
        writer.abort()
        raise
    writer.close()
    if config.output.path is not None:
        logger.info("wrote %d series to %s", len(results.series), config.output.path)
    if not results.ok:
        raise GroupFailuresError(results.failures)
    return len(results.series)
