"""Retrieval of the source JSON document."""

from __future__ import annotations

import json
import logging
import re
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Optional

import httpx

from .errors import FetchError


logger = logging.getLogger(__name__)

_URL_REGEX = re.compile(r"^https?://.+$")


def fetch_json(
    url: Optional[str],
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 30.0,
) -> Any:
    """GET `url` and return the parsed JSON body."""

    if not url or not _URL_REGEX.match(url):
        raise FetchError(f'"{url}" is not a valid url.', url=url)

    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        logger.debug("Fetching %s", url)
        try:
            response = http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchError(f'"{url}" returned an error: {exc}', url=url) from exc

        try:
            content = response.json()
        except (JSONDecodeError, UnicodeDecodeError) as exc:
            raise FetchError(f"Invalid JSON format. {exc}", url=url) from exc
    finally:
        if owns_client:
            http.close()

    if not content:
        raise FetchError(f'"{url}" returned no content.', url=url)
    return content


def load_document(
    source: str,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 30.0,
) -> Any:
    """Load a document from an http(s) URL or a local JSON file."""

    if _URL_REGEX.match(source):
        return fetch_json(source, client=client, timeout=timeout)

    path = Path(source).expanduser()
    if not path.exists():
        raise FetchError(f'"{source}" does not exist.', url=source)
    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except JSONDecodeError as exc:
        raise FetchError(f"Invalid JSON format. {exc}", url=source) from exc
    if not content:
        raise FetchError(f'"{source}" returned no content.', url=source)
    return content
