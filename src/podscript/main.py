"""
Podscript FastAPI Main Application
Model listing and streamed YouTube transcript cleanup over Server-Sent Events.
"""

import asyncio
import logging
import queue
import threading
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from .config import settings
from .llm import (
    Cancelled,
    MissingCredentialError,
    PodscriptError,
    UnsupportedModelError,
    client_for_model,
    list_models,
)
from .youtube import YouTubeTranscriber, fetch_transcript_text, format_sse, format_sse_error

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Podscript",
    description="Clean transcripts from YouTube captions using LLMs",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/models/{subcommand}")
async def get_models(subcommand: str):
    """Models available for a subcommand."""
    if subcommand != "ytt":
        raise HTTPException(status_code=404, detail="Subcommand not found")
    return {"models": list_models(), "default": settings.default_model}


async def _stream_transcript(
    request: Request,
    transcriber: YouTubeTranscriber,
    url: str,
    cancel_event: threading.Event,
) -> AsyncIterator[str]:
    """
    Run the transcriber on a worker thread and yield SSE frames as they arrive.

    The frame queue is polled without blocking the event loop, so a client
    disconnect is noticed even while the backend is silent. Disconnecting, or
    cancellation of the response task, sets ``cancel_event``.
    """
    frames: "queue.Queue" = queue.Queue()

    def sink(text: str, done: bool) -> None:
        frames.put(format_sse(text, done))

    def run() -> None:
        try:
            transcriber.transcribe(url, sink, cancel_event)
        except Cancelled:
            logger.info(f"Transcription of {url} cancelled by client")
        except PodscriptError as e:
            logger.error(f"Transcription failed: {e}")
            frames.put(format_sse_error(e))
        finally:
            frames.put(None)

    threading.Thread(target=run, name="ytt-transcribe", daemon=True).start()

    try:
        while True:
            try:
                frame = frames.get_nowait()
            except queue.Empty:
                if await request.is_disconnected():
                    logger.info(f"Client disconnected from {url}")
                    return
                await asyncio.sleep(settings.stream_poll_interval)
                continue
            if frame is None:
                return
            yield frame
    finally:
        cancel_event.set()


@app.get("/ytt")
def ytt(
    request: Request,
    url: str = Query(..., description="YouTube video URL"),
    model: str = Query(..., description="Model identifier"),
):
    """Stream a cleaned transcript of a YouTube video as Server-Sent Events."""
    try:
        client = client_for_model(model, settings)
    except UnsupportedModelError:
        raise HTTPException(status_code=400, detail="Unsupported model")
    except MissingCredentialError as e:
        raise HTTPException(
            status_code=400,
            detail=f"Credentials required for model {model}: set {', '.join(e.missing)}",
        )

    transcriber = YouTubeTranscriber(
        client,
        model,
        fetch_transcript=lambda source: fetch_transcript_text(
            source, language=settings.caption_language
        ),
    )
    return StreamingResponse(
        _stream_transcript(request, transcriber, url, threading.Event()),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
