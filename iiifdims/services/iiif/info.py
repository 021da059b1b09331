"""Image dimension lookups against a IIIF Image API server."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote

import httpx

from iiifdims.config import config
from iiifdims.models import File
from iiifdims.services.media import create_url

logger = logging.getLogger("iiifdims.iiif")


class IiifError(Exception):
    """Base class for IIIF lookup failures."""


class IiifRequestError(IiifError):
    """The image server could not be reached or answered with an error."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"IIIF request to {url} failed: {message}")
        self.url = url
        self.status_code = status_code


class IiifResponseError(IiifError):
    """The info.json document did not describe an image size."""


def _as_dimension(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool):
        raise IiifResponseError(f"info.json {key!r} is not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        # str.isdigit also accepts superscripts and other non-ASCII digits.
        if text.isascii() and text.isdigit():
            return int(text)
    raise IiifResponseError(f"info.json {key!r} is not a number: {value!r}")


class IiifInfo:
    """Fetches ``info.json`` documents for stored files."""

    def __init__(self, base_url: str, client: httpx.AsyncClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = client

    def base_url_for(self, file: File) -> str:
        """IIIF image identifier URL: the server plus the encoded file URL."""
        return f"{self.base_url}/{quote(create_url(file), safe='')}"

    def info_json_url(self, file: File) -> str:
        return f"{self.base_url_for(file)}/info.json"

    async def get_info_json(self, file: File) -> dict[str, Any]:
        url = self.info_json_url(file)
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.info(
                "IIIF server returned %s for %s",
                exc.response.status_code,
                url,
            )
            raise IiifRequestError(
                url, str(exc), status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            logger.info("Error getting image info from IIIF server: %s", exc)
            raise IiifRequestError(url, str(exc)) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise IiifResponseError(f"info.json from {url} is not JSON") from exc
        if not isinstance(payload, dict):
            raise IiifResponseError(f"info.json from {url} is not an object")
        return payload

    async def get_image_dimensions(self, file: File) -> tuple[int, int]:
        """Return ``(width, height)`` in pixels as reported by the server."""
        payload = await self.get_info_json(file)
        try:
            width = _as_dimension(payload, "width")
            height = _as_dimension(payload, "height")
        except IiifResponseError as exc:
            logger.info("Unusable info.json for file %s: %s", file.id, exc)
            raise
        logger.debug("File %s is %sx%s", file.id, width, height)
        return width, height


@asynccontextmanager
async def open_iiif_info(
    base_url: str | None = None,
    *,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[IiifInfo]:
    """Yield an :class:`IiifInfo` bound to a short-lived HTTP client."""
    async with httpx.AsyncClient(
        timeout=config.IIIF_TIMEOUT if timeout is None else timeout,
        transport=transport,
        follow_redirects=True,
    ) as client:
        yield IiifInfo(base_url or config.IIIF_SERVER_URL, client)
