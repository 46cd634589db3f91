from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
import yaml

from .playback import PlaybackCfg

DEFAULTS: Dict[str, Any] = {
    "min_delay_ms": 4,
    "max_duration_ms": 10_000,
    "gif_frame_ms": 20,  # most GIF viewers clamp anything below ~20ms
    "max_gif_frames": 500,
    "end_ms": 1500,
    "size": 540,
}

# smallest accepted value per key
MINIMUMS: Dict[str, int] = {
    "min_delay_ms": 1,
    "max_duration_ms": 1,
    "gif_frame_ms": 1,
    "max_gif_frames": 1,
    "end_ms": 0,
    "size": 9,
}

class DotDict(dict):
    __getattr__ = dict.get
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

def load_yaml(path: str | Path) -> DotDict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return DotDict(data)

def merge_overrides(cfg: Dict[str, Any], **overrides) -> Dict[str, Any]:
    for k, v in overrides.items():
        if v is None:
            continue
        cfg[k] = v
    return cfg

def check_settings(cfg: Dict[str, Any], source: str = "settings") -> None:
    """Reject unknown keys, non-integers and out-of-range timings."""
    unknown = sorted(set(cfg) - set(DEFAULTS))
    if unknown:
        raise ValueError(f"{source}: unknown keys {unknown}")
    for key, low in MINIMUMS.items():
        v = cfg[key]
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"{source}: {key} must be an integer, got {v!r}")
        if v < low:
            raise ValueError(f"{source}: {key} must be >= {low}, got {v}")
    if cfg["max_duration_ms"] < cfg["min_delay_ms"]:
        raise ValueError(f"{source}: max_duration_ms must be >= min_delay_ms")

def load_settings(path: str | Path | None = None, **overrides) -> DotDict:
    """Defaults <- YAML file (optional) <- non-None overrides, validated as a whole."""
    cfg = DotDict(DEFAULTS)
    source = "settings"
    if path is not None:
        cfg.update(load_yaml(path))
        source = str(path)
    cfg = DotDict(merge_overrides(cfg, **overrides))
    check_settings(cfg, source)
    return cfg

def playback_cfg(settings: Dict[str, Any]) -> PlaybackCfg:
    return PlaybackCfg(min_delay_ms=settings["min_delay_ms"], max_duration_ms=settings["max_duration_ms"])

def load_playback_cfg(path: str | Path | None = None, **overrides) -> PlaybackCfg:
    return playback_cfg(load_settings(path, **overrides))
