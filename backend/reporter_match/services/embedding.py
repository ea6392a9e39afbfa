"""Text embeddings through the OpenAI API."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from typing import Protocol

import httpx
from openai import OpenAI, OpenAIError

from reporter_match.config.settings import settings

# Hard limit of inputs per embeddings request on the OpenAI side
MAX_PROVIDER_BATCH = 2048

logger = logging.getLogger(__name__)


class EmbeddingError(RuntimeError):
    """Raised when the embedding provider cannot produce vectors."""


class EmbeddingProvider(Protocol):

    def embed(self, text: str) -> list[float]:
        ...

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        ...


def chunked(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class OpenAIEmbeddingProvider:
    """Embedding provider holding one OpenAI client for the life of the process.

    ``initialize()`` creates the client (called lazily on first use) and
    ``shutdown()`` closes its HTTP connection pool.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        batch_size: int | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.model = model or settings.EMBEDDING_MODEL
        self.batch_size = min(batch_size or settings.EMBEDDING_BATCH_SIZE, MAX_PROVIDER_BATCH)
        self.timeout_seconds = timeout_seconds or settings.EMBEDDING_TIMEOUT_SECONDS
        self._client: OpenAI | None = None
        self._lock = threading.Lock()

    def initialize(self) -> OpenAI:
        with self._lock:
            if self._client is None:
                if not self.api_key:
                    raise EmbeddingError("OPENAI_API_KEY is not set")
                self._client = OpenAI(api_key=self.api_key, timeout=httpx.Timeout(self.timeout_seconds))
            return self._client

    def shutdown(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def embed(self, text: str) -> list[float]:
        logger.debug("Embedding text (first 50 chars): %s", text[:50])
        return self._create([text])[0]

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for batch in chunked(texts, self.batch_size):
            vectors.extend(self._create(batch))
        return vectors

    def _create(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        client = self.initialize()
        try:
            response = client.embeddings.create(model=self.model, input=list(texts))
        except OpenAIError as exc:
            logger.error("Embedding request failed: %s", exc)
            raise EmbeddingError(str(exc)) from exc
        data = sorted(response.data, key=lambda item: item.index)
        return [item.embedding for item in data]
