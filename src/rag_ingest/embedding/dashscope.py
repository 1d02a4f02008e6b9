"""DashScope (Alibaba Cloud) text-embedding client.

Usage::

    from rag_ingest.embedding import DashScopeEmbeddings, EmbeddingConfig

    embedder = DashScopeEmbeddings(EmbeddingConfig(api_key="sk-..."))
    vector = embedder.embed_query("How do I apply for a scholarship?")
    assert len(vector) == 1024

Each call sends exactly one text. The service's real per-request limit is
not documented, so batching happens client-side (see
:class:`~rag_ingest.embedding.base.EmbeddingProvider`).
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from rag_ingest.config import settings
from rag_ingest.embedding.base import EmbeddingProvider
from rag_ingest.embedding.config import EmbeddingConfig
from rag_ingest.errors import ConfigurationError, EmbeddingAPIError, EmbeddingResponseError

logger = logging.getLogger(__name__)


class DashScopeEmbeddings(EmbeddingProvider):
    """Embedding provider backed by the DashScope HTTP API.

    Parameters
    ----------
    config:
        Explicit client configuration. Defaults to
        :meth:`EmbeddingConfig.from_settings`.
    api_key:
        Overrides ``config.api_key``.
    model:
        Overrides ``config.model``.
    session:
        HTTP session to reuse; a new :class:`requests.Session` otherwise.

    Raises
    ------
    ConfigurationError
        No API key in the arguments, the config, or ``settings``.
    """

    def __init__(
        self,
        config: EmbeddingConfig | None = None,
        *,
        api_key: str | None = None,
        model: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        config = config or EmbeddingConfig.from_settings()
        resolved_key = api_key or config.api_key or settings.dashscope_api_key
        if not resolved_key:
            raise ConfigurationError("DashScope API key not found: pass api_key or set DASHSCOPE_API_KEY")

        super().__init__(dimension=config.dimension, batch_size=config.batch_size)
        self._api_key = resolved_key
        self.model = model or config.model
        self.endpoint = config.endpoint
        self.request_timeout = config.request_timeout
        self.retry_policy = config.retry_policy
        self._session = session or requests.Session()

        logger.info(
            "DashScopeEmbeddings initialised with model=%s, dim=%d, batch_size=%d, retry=%r",
            self.model,
            self.dimension,
            self.batch_size,
            self.retry_policy,
        )

    def embed_query(self, text: str) -> list[float]:
        """Embed one text with a single POST (plus retries, if configured)."""
        payload = {
            "model": self.model,
            "input": {"texts": [text]},
            "parameters": {"text_type": "query", "dimensions": self.dimension},
        }
        return self.retry_policy.call(lambda: self._post(payload), description="DashScope embedding")

    # -- internals ------------------------------------------------------------

    def _post(self, payload: dict[str, Any]) -> list[float]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        try:
            resp = self._session.post(self.endpoint, json=payload, headers=headers, timeout=self.request_timeout)
        except requests.RequestException as exc:
            raise EmbeddingAPIError(f"DashScope embedding request failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise EmbeddingAPIError(
                f"DashScope embedding API error: {resp.status_code} - {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise EmbeddingResponseError("DashScope embedding API returned a non-JSON body") from exc

        return self.validate_vector(_extract_vector(data))


def _extract_vector(data: Any) -> list[float]:
    """Pull ``output.embeddings[0].embedding`` out of a response body."""
    try:
        raw = data["output"]["embeddings"][0]["embedding"]
        if not isinstance(raw, list):
            raise TypeError(f"embedding is {type(raw).__name__}, not a list")
        return [float(x) for x in raw]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise EmbeddingResponseError(
            f"Invalid response from DashScope embedding API: missing output.embeddings[0].embedding ({exc})"
        ) from exc
