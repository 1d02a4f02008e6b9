"""Error taxonomy for extraction and embedding failures.

Unsupported formats (legacy ``.doc``, unknown extensions) deliberately have
no exception here: they degrade to sentinel or empty text so that a batch
keeps going.
"""

from __future__ import annotations

from pathlib import Path

# Statuses worth another attempt: request timeout, rate limiting, server side.
_RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})


class RagIngestError(RuntimeError):
    """Base exception for everything raised by the ingestion core."""


class ConfigurationError(RagIngestError):
    """Raised at construction time when required configuration is missing."""


class ExtractionIOError(RagIngestError):
    """Raised when a source file cannot be read or its parser fails."""

    def __init__(self, message: str, *, path: str | Path) -> None:
        super().__init__(message)
        self.path = str(path)


class EmbeddingError(RagIngestError):
    """Base for failures talking to the embedding service."""


class EmbeddingAPIError(EmbeddingError):
    """Raised for a non-success HTTP response or a transport failure.

    ``status_code`` is ``None`` when no response was received at all.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def retryable(self) -> bool:
        return self.status_code is None or self.status_code in _RETRYABLE_STATUS


class EmbeddingResponseError(EmbeddingError):
    """Raised when a successful response does not carry a usable vector."""


class EmbeddingCancelledError(EmbeddingError):
    """Raised when the caller cancels an in-flight ``embed_documents`` call."""
