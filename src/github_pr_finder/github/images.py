"""In-memory cache of GitHub-hosted images as data URLs.

PR bodies often reference images uploaded to GitHub that require the
token to download. `ImageCache` fetches each such URL once and keeps the
result as a `data:` URL for as long as the cache object lives.
"""

from __future__ import annotations

import base64
import mimetypes
import re
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from github_pr_finder.logging import get_logger

from .exceptions import GitHubClientError

if TYPE_CHECKING:
    from .client import GitHubClient

logger = get_logger(__name__)

DEFAULT_IMAGE_MIME = "image/png"

GITHUB_IMAGE_HOSTS = frozenset(
    {
        "github.com",
        "user-images.githubusercontent.com",
        "private-user-images.githubusercontent.com",
        "raw.githubusercontent.com",
        "camo.githubusercontent.com",
    }
)

_MARKDOWN_IMAGE = re.compile(
    r"!\[[^\]]*\]\(\s*<?(?P<url>https?://[^\s)>]+)>?"
    r"(?:\s+\"[^\"]*\")?\s*\)"
)
_HTML_IMAGE = re.compile(r"<img\b[^>]*?\bsrc\s*=\s*[\"'](?P<url>https?://[^\"']+)[\"']", re.I)


def is_github_hosted(url: str) -> bool:
    """Check if an image URL points at a GitHub-owned host."""
    host = urlparse(url).hostname or ""
    return host in GITHUB_IMAGE_HOSTS


def guess_mime_type(url: str) -> str:
    """Guess an image MIME type from the URL path."""
    mime, _ = mimetypes.guess_type(urlparse(url).path)
    if mime and mime.startswith("image/"):
        return mime
    return DEFAULT_IMAGE_MIME


def to_data_url(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def find_image_urls(markdown: str) -> list[str]:
    """Image URLs referenced by markdown or HTML <img> tags, in order, deduplicated."""
    urls: dict[str, None] = {}
    for pattern in (_MARKDOWN_IMAGE, _HTML_IMAGE):
        for match in pattern.finditer(markdown):
            urls.setdefault(match.group("url"), None)
    return list(urls)


class ImageCache:
    """Unbounded url -> data URL cache backed by authenticated fetches.

    There is no eviction; entries live until `clear()` or until the cache
    object is dropped.

    Usage:
        cache = ImageCache(client)
        body = await cache.embed_images(pr.body)
    """

    def __init__(self, client: GitHubClient) -> None:
        self._client = client
        self._entries: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    async def get_data_url(self, url: str) -> str:
        """Return the data URL for `url`, fetching it on first use.

        Raises:
            GitHubClientError: If the image cannot be fetched
        """
        cached = self._entries.get(url)
        if cached is not None:
            return cached

        data = await self._client.fetch_image(url)
        data_url = to_data_url(data, guess_mime_type(url))
        self._entries[url] = data_url
        return data_url

    async def embed_images(self, markdown: str | None) -> str:
        """Replace GitHub-hosted image URLs in a PR body with data URLs.

        Images that fail to download keep their original URL.
        """
        if not markdown:
            return ""

        result = markdown
        for url in find_image_urls(markdown):
            if not is_github_hosted(url):
                continue
            try:
                data_url = await self.get_data_url(url)
            except GitHubClientError as e:
                logger.warning("Could not fetch image {url}: {error}", url=url, error=e)
                continue
            result = result.replace(url, data_url)
        return result

    def clear(self) -> None:
        self._entries.clear()
