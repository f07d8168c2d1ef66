# src/midisong/config.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import copy
import logging
import yaml

from .beatmap import DEFAULT_TEMPO

logger = logging.getLogger(__name__)

# package root: .../src/midisong
PKG_ROOT = Path(__file__).resolve().parent
DEFAULT_CFG_PATH = PKG_ROOT / "config.default.yaml"
USER_CFG_PATH = Path.home() / ".config" / "midisong" / "config.yaml"

def _safe_load(path: Path) -> Dict[str, Any]:
    try:
        if path.exists():
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        # defaults are still usable; don't fail the conversion over a bad config
        logger.warning("ignoring unreadable config %s: %s", path, exc)
    return {}

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out

def load_config(
    user_path: Optional[Path] = None,
    default_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Loads the packaged defaults merged with user overrides.
    Guarantees 'default_tempo' and the 'export' file names.
    """
    dpath = Path(default_path) if default_path else DEFAULT_CFG_PATH
    upath = Path(user_path) if user_path else USER_CFG_PATH

    cfg = _deep_merge(_safe_load(dpath), _safe_load(upath))

    cfg.setdefault("default_tempo", DEFAULT_TEMPO)
    if not isinstance(cfg.get("export"), dict):
        cfg["export"] = {}
    export = cfg["export"]
    export.setdefault("midi_filename", "no name.mid")
    export.setdefault("beatmap_filename", "beatmap.json")
    return cfg

def get_default_tempo(cfg: Dict[str, Any]) -> float:
    try:
        tempo = float(cfg.get("default_tempo", DEFAULT_TEMPO))
    except (TypeError, ValueError):
        return DEFAULT_TEMPO
    return tempo if tempo > 0 else DEFAULT_TEMPO
