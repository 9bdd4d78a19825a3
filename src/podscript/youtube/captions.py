"""
YouTube caption retrieval.

Fetches auto-generated captions and flattens them into one transcript string.
"""

import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from youtube_transcript_api import YouTubeTranscriptApi

from ..llm.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_YOUTUBE_HOSTS = {"www.youtube.com", "youtube.com", "m.youtube.com", "music.youtube.com"}


def extract_video_id(source: str) -> Optional[str]:
    """
    Extract a YouTube video ID from a URL or bare ID.

    Handles watch?v=, youtu.be/, /embed/, /shorts/ and /live/ forms.
    Returns None when no ID can be found.
    """
    source = source.strip()
    if _VIDEO_ID_RE.match(source):
        return source

    parsed = urlparse(source)
    video_id = None

    if parsed.hostname == "youtu.be":
        video_id = parsed.path.lstrip("/").split("/")[0]
    elif parsed.hostname in _YOUTUBE_HOSTS:
        query = parse_qs(parsed.query)
        if query.get("v"):
            video_id = query["v"][0]
        else:
            parts = parsed.path.strip("/").split("/")
            if len(parts) >= 2 and parts[0] in ("embed", "shorts", "live", "v"):
                video_id = parts[1]

    if video_id and _VIDEO_ID_RE.match(video_id):
        return video_id
    return None


def fetch_transcript_text(source: str, language: str = "en") -> str:
    """
    Fetch captions for a video and join them with single spaces.

    Args:
        source: YouTube URL or video ID
        language: Caption language code

    Returns:
        Flat transcript text

    Raises:
        SourceUnavailableError: invalid URL or captions cannot be fetched
    """
    video_id = extract_video_id(source)
    if not video_id:
        raise SourceUnavailableError(f"failed to extract video ID from {source!r}")

    logger.info(f"Fetching {language} captions for {video_id}")
    try:
        transcript_list = YouTubeTranscriptApi().list(video_id)
        transcript = transcript_list.find_transcript([language])
        entries = transcript.fetch()
    except Exception as e:
        raise SourceUnavailableError(f"failed to fetch transcript for {video_id}: {e}") from e

    text = " ".join(entry.text for entry in entries)
    logger.info(f"Fetched {len(entries)} caption entries ({len(text)} chars)")
    return text
