"""Server-Sent Events framing for streamed transcript text."""


def format_sse(text: str, done: bool = False) -> str:
    """
    Frame a piece of transcript text as an SSE message.

    Each line of ``text`` becomes a ``data:`` line so embedded newlines survive.
    A final ``done`` event follows when ``done`` is set.
    """
    frame = "\n".join(f"data: {line}" for line in text.split("\n")) + "\n\n"
    if done:
        frame += "event: done\ndata: \n\n"
    return frame


def format_sse_error(error: Exception) -> str:
    message = " ".join(str(error).splitlines())
    return f"event: error\ndata: {message}\n\n"
