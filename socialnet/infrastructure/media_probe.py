"""Media Probe — resolves the MIME type served at a post's media URL (MediaProbe implementation).

Invariants:
    - Only a HEAD request is made: media bodies are never downloaded
    - Unreachable URLs, non-2xx answers and missing Content-Type headers yield None

Design Decisions:
    - httpx.AsyncClient per probe with an explicit timeout from settings
    - Parameters after ';' (charset, codecs) are stripped: only the media type is compared
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class HttpMediaProbe:
    """HEAD-request based content type lookup."""

    def __init__(self, timeout_seconds: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self._timeout = timeout_seconds
        self._transport = transport

    async def content_type(self, url: str) -> str | None:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Media probe failed for {url}: {e}")
            return None
        if not response.is_success:
            logger.warning(f"Media probe for {url} answered {response.status_code}")
            return None
        header = response.headers.get("content-type")
        if not header:
            return None
        return header.split(";", 1)[0].strip().lower()
