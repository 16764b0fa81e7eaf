"""Annotation extraction for ipcgen."""

from .matcher import match_annotations
from .signature import parse_params, render_signature

__all__ = ["match_annotations", "parse_params", "render_signature"]
