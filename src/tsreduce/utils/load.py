import importlib
import importlib.metadata as md
from functools import lru_cache
from pathlib import Path

import yaml

AGGREGATES_GROUP = "tsreduce.aggregates"

_BUILTIN_EP_FALLBACKS: dict[tuple[str, str], str] = {
    (AGGREGATES_GROUP, "lttb"): "tsreduce.aggregates.lttb:LttbAggregate",
    (AGGREGATES_GROUP, "asap"): "tsreduce.aggregates.asap:AsapAggregate",
}


def _load_from_spec(spec: str):
    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Invalid fallback entry point spec: {spec!r}")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ImportError(f"Fallback entry point attribute {attr!r} not found in {module_name!r}") from exc


@lru_cache
def load_ep(group: str, name: str):
    eps = md.entry_points().select(group=group, name=name)
    if not eps:
        # Fall back to the built-in registry so a source checkout works without reinstalling.
        spec = _BUILTIN_EP_FALLBACKS.get((group, name))
        if spec:
            return _load_from_spec(spec)
        raise ValueError(
            f"No entry point '{name}' in '{group}'. Available: {', '.join(available_names(group)) or '(none)'}")
    if len(eps) > 1:
        mods = ", ".join(ep.value for ep in eps)
        raise ValueError(
            f"Ambiguous entry point '{name}' in '{group}': {mods}")
    # EntryPoints are mapping-like in newer Python versions; avoid integer indexing.
    ep = next(iter(eps))
    return ep.load()


def available_names(group: str) -> list[str]:
    installed = {ep.name for ep in md.entry_points().select(group=group)}
    fallbacks = {n for (g, n) in _BUILTIN_EP_FALLBACKS if g == group}
    return sorted(installed | fallbacks)


def load_aggregate(name: str):
    """Return the aggregate class registered under ``name``."""
    return load_ep(AGGREGATES_GROUP, name)


def load_yaml(p: Path, *, require_mapping: bool = True):
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"YAML file not found: {p}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {p}: {e}") from e

    if data is None:
        return {}
    if require_mapping and not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML in {p} must be a mapping, got {type(data).__name__}")
    return data
