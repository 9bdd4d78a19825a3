"""
Podscript YouTube Transcript Pipeline

Caption retrieval, word-bounded chunking and streamed LLM cleanup.
"""

from .captions import extract_video_id, fetch_transcript_text
from .chunker import split_text, words_from_tokens
from .sse import format_sse, format_sse_error
from .transcriber import TranscriptionState, TranscriptSink, YouTubeTranscriber

__all__ = [
    "YouTubeTranscriber",
    "TranscriptionState",
    "TranscriptSink",
    "split_text",
    "words_from_tokens",
    "extract_video_id",
    "fetch_transcript_text",
    "format_sse",
    "format_sse_error",
]
