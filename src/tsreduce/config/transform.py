from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tsreduce.utils.load import available_names, AGGREGATES_GROUP, load_yaml

InputFormat = Literal["csv", "jsonl"]
OutputFormat = Literal["jsonl", "csv", "print"]


class TransformConfig(BaseModel):
    name: str = Field(..., description="registered aggregate name (lttb | asap)")
    resolution: int = Field(..., gt=0, description="target output size / smoothing granularity")

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value):
        name = str(value).strip().lower()
        known = available_names(AGGREGATES_GROUP)
        if name not in known:
            raise ValueError(f"unknown transform {name!r}; expected one of {', '.join(known)}")
        return name


class InputConfig(BaseModel):
    path: Optional[Path] = None
    format: Optional[InputFormat] = None
    time_field: str = "time"
    value_field: str = "value"
    group_by: Optional[str] = None

    @model_validator(mode="after")
    def _infer_format(self) -> "InputConfig":
        if self.format is None and self.path is not None:
            suffix = self.path.suffix.lower()
            if suffix == ".csv":
                self.format = "csv"
            elif suffix in {".jsonl", ".json", ".ndjson"}:
                self.format = "jsonl"
            else:
                raise ValueError(f"cannot infer input format from {self.path.name!r}; set input.format")
        return self


class OutputConfig(BaseModel):
    format: OutputFormat = "jsonl"
    path: Optional[Path] = None

    @model_validator(mode="after")
    def _validate(self) -> "OutputConfig":
        if self.format == "csv" and self.path is None:
            raise ValueError("csv output requires a path")
        if self.format == "print" and self.path is not None:
            raise ValueError("print output only goes to stdout")
        return self


class RunConfig(BaseModel):
    """Schema for a transform.yaml run description."""

    transform: TransformConfig
    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    progress: bool = False
    log_level: Optional[str] = None


def load_run_config(path: Path) -> dict:
    """Load a run config mapping; validation happens once CLI overrides are merged."""
    doc = load_yaml(path)
    base = path.parent
    for section in ("input", "output"):
        entry = doc.get(section)
        if isinstance(entry, dict) and entry.get("path"):
            candidate = Path(entry["path"])
            if not candidate.is_absolute():
                entry["path"] = str((base / candidate).resolve())
    return doc
