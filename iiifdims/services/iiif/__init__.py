"""IIIF Image API helpers."""

from __future__ import annotations

from .info import (
    IiifError,
    IiifInfo,
    IiifRequestError,
    IiifResponseError,
    open_iiif_info,
)

__all__ = [
    "IiifError",
    "IiifInfo",
    "IiifRequestError",
    "IiifResponseError",
    "open_iiif_info",
]
