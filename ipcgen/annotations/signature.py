"""Parameter list parsing for `@route()` methods."""

from __future__ import annotations

from typing import List

from ..models import Dropped, ParamResult, ParamSignature, Parsed, ParsedParam


def split_params(raw: str) -> List[str]:
    """Split a raw parameter list on commas, dropping blank entries.

    Generic arguments such as `Map<string, number>` are split too; no bracket
    depth is tracked.
    """
    return [part.strip() for part in raw.split(",") if part.strip()]


def parse_param(entry: str) -> ParamResult:
    parts = [part.strip() for part in entry.split(":")]
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return Dropped(entry)
    return Parsed(ParsedParam(name=parts[0], annotation=parts[1]))


def parse_params(raw: str) -> List[ParamResult]:
    """Parse every entry of a raw parameter list in declaration order."""
    return [parse_param(entry) for entry in split_params(raw)]


def render_signature(raw: str) -> ParamSignature:
    """Return the parsed parameters plus the entries that were dropped."""
    params: List[ParsedParam] = []
    dropped: List[str] = []
    for result in parse_params(raw):
        if isinstance(result, Parsed):
            params.append(result.param)
        else:
            dropped.append(result.raw)
    return ParamSignature(params=tuple(params), dropped=tuple(dropped))


__all__ = ["parse_param", "parse_params", "render_signature", "split_params"]
