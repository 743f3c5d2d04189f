"""Parser configuration loaded from an optional monkey.toml file."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "monkey.toml"
DEFAULT_MAX_DEPTH = 100
# Each nesting level costs up to six Python frames; 128 levels stay under
# the default recursion limit of 1000.
MAX_DEPTH_CEILING = 128


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Tunable parser limits."""

    max_depth: int = DEFAULT_MAX_DEPTH


def load_config(config_path: Path | None, base_dir: Path) -> ParserConfig:
    """Load parser settings, returning defaults on a missing/absent file.

    Looks for ``monkey.toml`` in *base_dir* unless *config_path* is given.
    Only the ``[parser]`` table is read.
    """
    path = config_path if config_path is not None else base_dir / CONFIG_FILENAME

    if not path.is_file():
        return ParserConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return config_from_dict(data, source=str(path))


def config_from_dict(data: dict[str, Any], source: str = "<dict>") -> ParserConfig:
    """Build a ParserConfig from already-parsed TOML data."""
    section = data.get("parser")
    if section is None:
        return ParserConfig()
    if not isinstance(section, dict):
        logger.warning("%s: [parser] must be a table, ignoring", source)
        return ParserConfig()

    max_depth = DEFAULT_MAX_DEPTH
    raw = section.get("max_depth")
    if raw is not None:
        # bool is an int subclass
        if isinstance(raw, int) and not isinstance(raw, bool) and raw > 0:
            max_depth = clamp_max_depth(raw, source)
        else:
            logger.warning("%s: invalid parser.max_depth %r, using %d", source, raw, max_depth)

    return ParserConfig(max_depth=max_depth)


def clamp_max_depth(max_depth: int, source: str = "<config>") -> int:
    """Return *max_depth* limited to MAX_DEPTH_CEILING, warning when capped."""
    if max_depth > MAX_DEPTH_CEILING:
        logger.warning(
            "%s: max_depth %d exceeds ceiling, using %d", source, max_depth, MAX_DEPTH_CEILING
        )
        return MAX_DEPTH_CEILING
    return max_depth
