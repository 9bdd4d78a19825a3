"""
YouTube Transcript Cleanup

Turns auto-generated captions into a clean transcript by streaming each
word-bounded chunk through an LLM. The first chunk is repeated as background
context for every later chunk so the model keeps track of speakers and topic.
"""

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

from ..llm.base_client import BaseLLMClient
from ..llm.errors import Cancelled
from ..llm.models import CompletionRequest
from .captions import fetch_transcript_text
from .chunker import split_text

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a top tier podcast transcriptionist skilled in grammar, spelling and punctuation. You specialize in taking rough transcripts and cleaning and formatting them with full accuracy."""

CONTEXT_PROMPT = """Use the following transcript from the beginning for context:

<context>
{context}
</context>"""

USER_PROMPT = """You will be given auto-generated captions from a YouTube video. These may be full captions, or a segment of the full transcript if it is too large. Your task is to transform these captions into a clean, readable transcript. Here are the auto-generated captions:

<captions>
{captions}
</captions>

Follow these steps to create a clean transcript:

1. Correct any spelling errors you encounter. Use your knowledge of common words and context to determine the correct spelling.

2. Add appropriate punctuation throughout the text. This includes commas, periods, question marks, and exclamation points where necessary.

3. Capitalize the first letter of each sentence and proper nouns.

4. Break the text into logical paragraphs. Start a new paragraph when there's a shift in topic or speaker.

5. Remove any unnecessary filler words, repetitions, or false starts.

6. Maintain the original meaning and intent of the transcript. Do not remove any content even if it is unrelated to the main topic.

Once you have completed these steps, provide the clean transcript. Ensure that the transcript is well-formatted, easy to read, and accurately represents the original content of the video. Do not include any additional text in your response."""


# sink(text, done) receives every streamed chunk, including the done marker
TranscriptSink = Callable[[str, bool], None]


class TranscriptionState(str, Enum):
    IDLE = "idle"
    CHUNKING = "chunking"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class YouTubeTranscriber:
    """
    Clean up a YouTube transcript with one model, chunk by chunk.

    Chunks are processed strictly in order. Output goes to the caller's sink as
    it arrives; nothing is buffered here.
    """

    def __init__(
        self,
        client: BaseLLMClient,
        model: str,
        fetch_transcript: Callable[[str], str] = fetch_transcript_text,
    ):
        self.client = client
        self.model = model
        self.fetch_transcript = fetch_transcript
        self.state = TranscriptionState.IDLE
        self.current_chunk: Optional[int] = None

    def _set_state(self, state: TranscriptionState, chunk: Optional[int] = None) -> None:
        self.state = state
        self.current_chunk = chunk
        if chunk is None:
            logger.debug(f"Transcriber state: {state.value}")
        else:
            logger.debug(f"Transcriber state: {state.value} (chunk {chunk + 1})")

    def build_request(self, chunk: str, context: Optional[str] = None) -> CompletionRequest:
        """
        Build the completion request for one chunk.

        ``context`` is the first chunk's raw text, embedded in the system prompt
        for every chunk after the first.
        """
        system_prompt = SYSTEM_PROMPT
        if context:
            system_prompt += "\n\n" + CONTEXT_PROMPT.format(context=context)
        return CompletionRequest(
            system_prompt=system_prompt,
            user_prompt=USER_PROMPT.format(captions=chunk),
            model=self.model,
        )

    def _chunk(self, text: str) -> List[str]:
        self._set_state(TranscriptionState.CHUNKING)
        chunks = split_text(text, model=self.model)
        logger.info(f"Processing {len(chunks)} chunks with {self.model}")
        return chunks

    def transcribe(
        self,
        source: str,
        sink: TranscriptSink,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Fetch captions for ``source`` and stream the cleaned transcript to ``sink``.

        Raises:
            SourceUnavailableError: captions could not be fetched
            Cancelled: ``cancel_event`` was set while running
            PodscriptError: any chunk failed; output already sent is kept
        """
        text = self.fetch_transcript(source)
        self.transcribe_text(text, sink, cancel_event)

    def transcribe_text(
        self,
        text: str,
        sink: TranscriptSink,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Stream the cleaned version of raw transcript ``text`` to ``sink``."""
        cancel_event = cancel_event or threading.Event()

        try:
            chunks = self._chunk(text)
            context = chunks[0] if chunks else None

            for i, chunk in enumerate(chunks):
                if cancel_event.is_set():
                    raise Cancelled(f"cancelled before chunk {i + 1}/{len(chunks)}")

                self._set_state(TranscriptionState.STREAMING, i)
                request = self.build_request(chunk, context if i > 0 else None)
                stream = self.client.complete_stream(request, cancel_event=cancel_event)
                try:
                    for piece in stream:
                        sink(piece.text, piece.done)
                finally:
                    stream.close()

                if cancel_event.is_set():
                    raise Cancelled(f"cancelled during chunk {i + 1}/{len(chunks)}")
                if stream.error is not None:
                    logger.error(f"Chunk {i + 1}/{len(chunks)} failed: {stream.error}")
                    raise stream.error
        except Cancelled:
            self._set_state(TranscriptionState.CANCELLED, self.current_chunk)
            logger.info("Transcription cancelled")
            raise
        except Exception:
            self._set_state(TranscriptionState.FAILED, self.current_chunk)
            raise

        self._set_state(TranscriptionState.DONE)

    def cleanup_text(
        self,
        text: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        Blocking variant: clean every chunk with retried ``complete`` calls.

        Returns:
            Cleaned chunks joined by blank lines
        """
        cancel_event = cancel_event or threading.Event()
        cleaned = []

        try:
            chunks = self._chunk(text)
            context = chunks[0] if chunks else None

            for i, chunk in enumerate(chunks):
                if cancel_event.is_set():
                    raise Cancelled(f"cancelled before chunk {i + 1}/{len(chunks)}")
                self._set_state(TranscriptionState.STREAMING, i)
                response = self.client.complete(
                    self.build_request(chunk, context if i > 0 else None)
                )
                cleaned.append(response.text.strip())
                logger.debug(f"Cleaned chunk {i + 1}/{len(chunks)}")
        except Cancelled:
            self._set_state(TranscriptionState.CANCELLED, self.current_chunk)
            raise
        except Exception:
            self._set_state(TranscriptionState.FAILED, self.current_chunk)
            raise

        self._set_state(TranscriptionState.DONE)
        return "\n\n".join(cleaned)
