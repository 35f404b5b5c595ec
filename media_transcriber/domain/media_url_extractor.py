"""Best-effort extraction of a direct video URL from a source page."""

import json
import re
from collections.abc import Callable, Sequence
from typing import Any

OG_VIDEO_PATTERN = re.compile(
    r"""<meta\s+property=["']og:video["']\s+content=["']([^"']+)["']""",
    re.IGNORECASE,
)
SHARED_DATA_PATTERN = re.compile(
    r"window\._sharedData\s*=\s*(\{.*?\});",
    re.DOTALL,
)

ExtractionStrategy = Callable[[str], str | None]


def find_og_video_url(html: str) -> str | None:
    """Returns the content of the og:video meta tag, if present."""
    match = OG_VIDEO_PATTERN.search(html)
    return match.group(1) if match else None


def find_shared_data_video_url(html: str) -> str | None:
    """
    Reads the video URL from the page's window._sharedData JSON blob.

    The blob layout is not a stable contract; any parse failure or missing
    key is treated as "not found".
    """
    match = SHARED_DATA_PATTERN.search(html)
    if not match:
        return None

    try:
        shared_data = json.loads(match.group(1))
    except ValueError:
        return None

    video_url = _dig(
        shared_data,
        "entry_data",
        "PostPage",
        0,
        "graphql",
        "shortcode_media",
        "video_url",
    )
    if isinstance(video_url, str) and video_url:
        return video_url
    return None


def _dig(data: Any, *path: str | int) -> Any:
    """Walks nested dicts/lists, returning None on the first missing step."""
    for key in path:
        if isinstance(key, int):
            if not isinstance(data, list) or len(data) <= key:
                return None
        elif not isinstance(data, dict):
            return None
        data = data[key] if isinstance(key, int) else data.get(key)
    return data


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    find_og_video_url,
    find_shared_data_video_url,
)


class MediaUrlExtractor:
    """Tries each extraction strategy in order and returns the first hit."""

    def __init__(self, strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES):
        self._strategies = tuple(strategies)

    def extract(self, html: str) -> str | None:
        for strategy in self._strategies:
            url = strategy(html)
            if url:
                return url
        return None
