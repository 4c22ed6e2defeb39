"""HTTP download of county result sources.

Uses httpx for async streaming downloads with a bounded timeout. Some
county hosts reject non-browser clients, so requests carry browser-like
headers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from loguru import logger

from county_results_api.core.config import DEFAULT_USER_AGENT

if TYPE_CHECKING:
    from pathlib import Path


class FetchError(Exception):
    """Raised when fetching a county result source fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def browser_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """Request headers mimicking a desktop browser."""
    return {
        "User-Agent": user_agent,
        "Accept": "*/*",
        "Accept-Language": "en-US,en;q=0.9",
        "Connection": "keep-alive",
    }


async def _stream_to_file(client: httpx.AsyncClient, url: str, part_path: Path) -> int:
    written = 0
    async with client.stream("GET", url) as response:
        logger.debug("Received response with status code {} from {}", response.status_code, url)
        if not response.is_success:
            msg = f"unexpected status code: {response.status_code}"
            raise FetchError(msg, status_code=response.status_code)
        with part_path.open("wb") as f:
            async for chunk in response.aiter_bytes(chunk_size=8192):
                f.write(chunk)
                written += len(chunk)
    return written


async def fetch_to_file(
    url: str,
    dest: Path,
    *,
    timeout: float = 30.0,
    user_agent: str = DEFAULT_USER_AGENT,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """Download ``url`` to ``dest``.

    The body is streamed to a ``.part`` file that is renamed on success, so
    no partial file is left at ``dest`` on failure.

    Args:
        url: Source URL.
        dest: Local destination path (its directory must exist).
        timeout: Request timeout in seconds.
        user_agent: User-Agent header value.
        client: Optional pre-configured client; a new one is created (and
            closed) when None.

    Returns:
        ``dest``.

    Raises:
        FetchError: On any download failure: a malformed URL, a transport error, or a non-2xx response.
    """
    part_path = dest.with_suffix(dest.suffix + ".part")
    logger.info("Downloading {} to {}", url, dest)

    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                headers=browser_headers(user_agent),
            ) as own_client:
                written = await _stream_to_file(own_client, url, part_path)
        else:
            written = await _stream_to_file(client, url, part_path)
    except FetchError:
        part_path.unlink(missing_ok=True)
        logger.error("Failed to download {}: non-success status", url)
        raise
    except httpx.TimeoutException as exc:
        part_path.unlink(missing_ok=True)
        msg = f"Timeout downloading {url}"
        logger.error(msg)
        raise FetchError(msg) from exc
    except (httpx.HTTPError, httpx.StreamError) as exc:
        part_path.unlink(missing_ok=True)
        msg = f"HTTP error downloading {url}: {exc}"
        logger.error(msg)
        raise FetchError(msg) from exc
    except httpx.InvalidURL as exc:
        part_path.unlink(missing_ok=True)
        msg = f"Invalid URL {url!r}: {exc}"
        logger.error(msg)
        raise FetchError(msg) from exc
    except OSError as exc:
        part_path.unlink(missing_ok=True)
        msg = f"File write error for {dest}: {exc}"
        logger.error(msg)
        raise FetchError(msg) from exc

    part_path.replace(dest)
    logger.info("Downloaded {} bytes to {}", written, dest)
    return dest
