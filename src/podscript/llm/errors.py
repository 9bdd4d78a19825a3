"""Exceptions raised by the completion layer and the transcript pipeline."""

from typing import Iterable, Optional


class PodscriptError(Exception):
    """Base class for all podscript errors."""


class UnsupportedProviderError(PodscriptError):
    def __init__(self, provider):
        self.provider = provider
        super().__init__(f"unsupported provider: {provider}")


class UnsupportedModelError(PodscriptError):
    def __init__(self, model):
        self.model = model
        super().__init__(f"unsupported model: {model}")


class MissingCredentialError(PodscriptError):
    """A provider was requested without the credentials it needs."""

    def __init__(self, provider, missing: Iterable[str]):
        self.provider = provider
        self.missing = list(missing)
        name = getattr(provider, "value", provider)
        super().__init__(
            f"credentials required for provider {name}: set {', '.join(self.missing)}"
        )


class ProviderError(PodscriptError):
    """
    A backend call failed.

    status_code is the HTTP status when the backend reported one; overloaded
    is set when the backend explicitly signalled it is overloaded.
    """

    def __init__(
        self,
        provider,
        message: str,
        status_code: Optional[int] = None,
        overloaded: bool = False,
    ):
        self.provider = provider
        self.status_code = status_code
        self.overloaded = overloaded
        name = getattr(provider, "value", provider)
        super().__init__(f"{name}: {message}")

    @property
    def is_transient(self) -> bool:
        """Rate limits and overload signals are worth retrying."""
        return self.status_code == 429 or self.overloaded


class EmptyResponseError(ProviderError):
    def __init__(self, provider):
        super().__init__(provider, "no content in response")


class RetryExhaustedError(PodscriptError):
    def __init__(self, last_error: Exception, elapsed: float):
        self.last_error = last_error
        self.elapsed = elapsed
        super().__init__(f"gave up retrying after {elapsed:.1f}s: {last_error}")


class StreamDecodeError(PodscriptError):
    """A streaming event could not be decoded or had an unknown type."""

    def __init__(self, provider, message: str):
        self.provider = provider
        name = getattr(provider, "value", provider)
        super().__init__(f"{name}: {message}")


class Cancelled(PodscriptError):
    """The pipeline was stopped by its caller."""


class SourceUnavailableError(PodscriptError):
    """The raw transcript could not be retrieved."""
