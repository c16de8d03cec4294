from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

import yaml

from .rules import DEFAULT_DELIMITERS


@dataclass(frozen=True)
class ParseOptions:
    allowed_delimiters: str = DEFAULT_DELIMITERS
    ignored_strings: Tuple[str, ...] = field(default_factory=tuple)

    parse_episode_number: bool = True
    parse_file_extension: bool = True


def _as_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def load_options(path: Path) -> ParseOptions:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    parser = data.get("parser", {}) or {}

    delimiters = parser.get("allowed_delimiters")
    ignored = parser.get("ignored_strings", []) or []
    if isinstance(ignored, str):
        ignored = [ignored]

    return ParseOptions(
        allowed_delimiters=DEFAULT_DELIMITERS if delimiters is None else str(delimiters),
        ignored_strings=tuple(str(x) for x in ignored if str(x)),
        parse_episode_number=_as_bool(parser.get("parse_episode_number"), True),
        parse_file_extension=_as_bool(parser.get("parse_file_extension"), True),
    )
