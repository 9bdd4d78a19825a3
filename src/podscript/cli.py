"""
Podscript CLI
Command-line interface for transcript cleanup.
"""

import logging
import sys
import threading

import click

from .llm.models import MODEL_REGISTRY


def _setup_logging(level: str) -> None:
    # stdout carries transcript text, logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version="0.1.0")
@click.option("--log-level", default=None, help="Logging level (default from settings)")
def cli(log_level: str):
    """Podscript - clean transcripts from podcasts and YouTube videos"""
    from .config import settings
    _setup_logging(log_level or settings.log_level)


@cli.command()
@click.argument("url", required=False)
@click.option("--model", "-m", default=None, help="Model to use (default from settings)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: stdout)")
@click.option("--list-models", "-l", is_flag=True, help="List available models")
@click.option("--no-stream", is_flag=True, help="Clean each chunk with retried blocking calls and print once done")
def ytt(url: str, model: str, output: str, list_models: bool, no_stream: bool):
    """Clean up the auto-generated captions of a YouTube video."""
    from .config import settings
    from .llm import PodscriptError, client_for_model, list_models as registry_models
    from .youtube import YouTubeTranscriber

    if list_models:
        click.echo("Available models:")
        for name in registry_models():
            info = MODEL_REGISTRY[name]
            click.echo(f"  {name}  ({info.provider.value}, {info.max_output_tokens} tokens)")
        return

    if not url:
        raise click.UsageError("Missing argument 'URL'.")

    model = model or settings.default_model
    try:
        client = client_for_model(model, settings)
    except PodscriptError as e:
        raise click.ClickException(str(e))

    transcriber = YouTubeTranscriber(
        client,
        model,
        fetch_transcript=lambda source: _fetch(source, settings.caption_language),
    )
    cancel_event = threading.Event()

    out = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        def sink(text: str, done: bool) -> None:
            out.write(text)
            out.flush()

        if no_stream:
            text = transcriber.fetch_transcript(url)
            out.write(transcriber.cleanup_text(text, cancel_event))
        else:
            transcriber.transcribe(url, sink, cancel_event)
        out.write("\n")
    except KeyboardInterrupt:
        cancel_event.set()
        click.echo("\nCancelled", err=True)
        sys.exit(130)
    except PodscriptError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")
    finally:
        if output:
            out.close()

    if output:
        click.echo(f"✅ Transcript written to {output}", err=True)


def _fetch(source: str, language: str) -> str:
    from .youtube import fetch_transcript_text
    return fetch_transcript_text(source, language=language)


@cli.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", "-p", type=int, default=None, help="API server port")
def serve(host: str, port: int):
    """Start the web server."""
    import uvicorn

    from .config import settings

    host = host or settings.api_host
    port = port or settings.api_port
    click.echo(f"Starting server on http://{host}:{port}")
    uvicorn.run("podscript.main:app", host=host, port=port)


if __name__ == "__main__":
    cli()
