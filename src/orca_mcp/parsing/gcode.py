"""Metadata extraction from slicer-generated G-code.

OrcaSlicer and PrusaSlicer append summary values as trailing comments::

    ; filament used [g] = 37.5
    ; total layers count = 150
    ; estimated printing time (normal mode) = 2h 15m 30s
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Metadata lives at the end of the file; only this many characters are examined.
TAIL_SIZE = 4096

_GENERIC_PATTERN = re.compile(r"^([a-zA-Z_][\w\s]*\w)\s*=\s*(.+)$")
_WHITESPACE = re.compile(r"\s+")


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return math.nan


def _to_int(text: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        return math.nan


# (field name, pattern, converter), tried in order; the first match wins.
_KNOWN_FIELDS: list[tuple[str, re.Pattern[str], Callable[[str], Any]]] = [
    ("estimated_time", re.compile(r"^estimated printing time.*?=\s*(.+)$", re.I), str.strip),
    ("filament_used_mm", re.compile(r"^filament used\s*\[mm\]\s*=\s*([\d.]+)", re.I), _to_float),
    ("filament_used_g", re.compile(r"^filament used\s*\[g\]\s*=\s*([\d.]+)", re.I), _to_float),
    ("filament_cost", re.compile(r"^filament cost\s*=\s*([\d.]+)", re.I), _to_float),
    ("layer_count", re.compile(r"^total layers count\s*=\s*(\d+)", re.I), _to_int),
]


class GcodeMetadata(BaseModel):
    """Summary values read from a G-code file.

    Besides the five typed fields, any other ``key = value`` comment is kept
    as an extra string field under its normalized key.

    Numeric fields may be ``nan`` when the source text was malformed.
    """

    model_config = ConfigDict(extra="allow")

    estimated_time: str | None = Field(default=None, alias="estimatedTime")
    filament_used_mm: float | None = Field(default=None, alias="filamentUsedMm")
    filament_used_g: float | None = Field(default=None, alias="filamentUsedG")
    filament_cost: float | None = Field(default=None, alias="filamentCost")
    layer_count: int | float | None = Field(default=None, alias="layerCount")

    @property
    def extras(self) -> dict[str, str]:
        return dict(self.model_extra or {})

    def to_dict(self) -> dict[str, Any]:
        """Return the metadata keyed by wire names, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


def normalize_key(key: str) -> str:
    return _WHITESPACE.sub("_", key.strip()).lower()


def parse_gcode_metadata(gcode: str) -> GcodeMetadata:
    """Extract trailing metadata comments from G-code text.

    Never raises: any input, including an empty string, produces a result.
    Generic keys keep their first occurrence.
    """
    known: dict[str, Any] = {}
    extras: dict[str, str] = {}

    for line in gcode[-TAIL_SIZE:].split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith(";"):
            continue
        body = trimmed[1:].strip()

        for name, pattern, convert in _KNOWN_FIELDS:
            match = pattern.match(body)
            if match:
                known[name] = convert(match.group(1))
                break
        else:
            generic = _GENERIC_PATTERN.match(body)
            if generic:
                key = normalize_key(generic.group(1))
                if key not in extras:
                    extras[key] = generic.group(2).strip()

    fields = GcodeMetadata.model_fields
    data: dict[str, Any] = dict(extras)
    data.update({fields[name].alias: value for name, value in known.items()})
    return GcodeMetadata.model_validate(data)
