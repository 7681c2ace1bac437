"""
Raw YAML scenario loading with ``extends`` inheritance.

A scenario file may name a parent file (relative to itself) under
``extends``; the child's keys are deep-merged over the parent's. Pointing
``load`` at a directory resolves every ``*.yaml``/``*.yml`` in it by name.
"""
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

import yaml

__all__ = ['load', 'deep_merge']

logger = logging.getLogger(__name__)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge override into base and return the result.
    """
    for key, val in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            base[key] = deep_merge(base[key], val)
        else:
            base[key] = deepcopy(val)
    return base


def _read(path: Path) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_dir(dirpath: Path) -> Dict[str, Dict[str, Any]]:
    raw: Dict[str, Dict[str, Any]] = {}
    for pattern in ("*.yaml", "*.yml"):
        for fp in sorted(dirpath.glob(pattern)):
            raw[fp.stem] = _read(fp)

    def resolve(name: str, seen: Optional[Set[str]] = None) -> Dict[str, Any]:
        seen = set() if seen is None else seen
        if name in seen:
            raise ValueError(f"Circular extends detected in '{name}'")
        seen.add(name)
        cfg = raw.get(name)
        if cfg is None:
            raise ValueError(f"Scenario '{name}' not found in {dirpath}")
        parent = cfg.get("extends")
        base = resolve(Path(parent).stem, seen) if parent else {}
        overrides = {k: v for k, v in cfg.items() if k != "extends"}
        return deep_merge(base, overrides)

    return {name: resolve(name) for name in raw}


def load(path: Union[str, Path], _seen: Optional[Set[Path]] = None) -> Any:
    """
    Load a scenario from a YAML file or directory of YAMLs.
    If path is a directory, returns Dict[str, Dict].
    If path is a file, returns a single config dict, resolving 'extends'.
    """
    path = Path(path)
    if path.is_dir():
        logger.debug(f"Loading scenario directory {path}")
        return _load_dir(path)

    seen = set() if _seen is None else _seen
    resolved = path.resolve()
    if resolved in seen:
        raise ValueError(f"Circular extends detected at '{path}'")
    seen.add(resolved)

    cfg = _read(path)
    parent = cfg.get("extends")
    if not parent:
        return cfg
    parent_fp = path.parent / parent
    if not parent_fp.exists():
        raise FileNotFoundError(f"Parent config '{parent}' not found for {path}")
    parent_cfg = load(parent_fp, seen)
    overrides = {k: v for k, v in cfg.items() if k != "extends"}
    return deep_merge(parent_cfg, overrides)
