"""Gemini embeddings through the google-genai SDK."""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google import genai

from ....core.domain.exceptions import EmbeddingAPIError, EmptyEmbeddingError, MissingAPIKeyError
from ....core.domain.utils import clean_text
from ....core.ports import EmbeddingPort
from ...common.rate_limiter import AsyncRateLimiter

logger = logging.getLogger(__name__)

QUERY_TASK_TYPE = "RETRIEVAL_QUERY"
DOCUMENT_TASK_TYPE = "RETRIEVAL_DOCUMENT"


class GeminiEmbeddingAdapter(EmbeddingPort):
    """Embedding provider backed by the Gemini embedding model.

    Questions are embedded with the ``RETRIEVAL_QUERY`` task type and chunks
    with ``RETRIEVAL_DOCUMENT`` so both land in the same retrieval space.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-embedding-001",
        dimensions: int = 768,
        batch_size: int = 10,
        batch_delay: float = 0.1,
        rate_limiter: AsyncRateLimiter | None = None,
        client: "genai.Client | None" = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.dimensions = dimensions
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.rate_limiter = rate_limiter or AsyncRateLimiter(None)
        self._client = client

    def _get_client(self) -> "genai.Client":
        """Get or create the genai client."""
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError(
                    "Gemini API key not set. Set GEMINI_API_KEY in your .env file.",
                    context={"setting": "gemini_api_key"},
                )

            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info(f"Gemini embedding client initialized for model: {self.model_name}")
        return self._client

    async def _embed(self, text: str, task_type: str) -> list[float]:
        from google.genai.types import EmbedContentConfig

        client = self._get_client()
        await self.rate_limiter.acquire()

        try:
            result = await client.aio.models.embed_content(
                model=self.model_name,
                contents=clean_text(text),
                config=EmbedContentConfig(task_type=task_type, output_dimensionality=self.dimensions),
            )
        except Exception as e:
            raise EmbeddingAPIError(
                f"Failed to generate embedding: {e}",
                cause=e,
                context={"model": self.model_name, "task_type": task_type},
            ) from e

        embeddings = getattr(result, "embeddings", None)
        values = embeddings[0].values if embeddings else None
        if not values:
            raise EmptyEmbeddingError("Empty embedding returned", context={"model": self.model_name})
        return list(values)

    async def embed(self, text: str) -> list[float]:
        return await self._embed(text, QUERY_TASK_TYPE)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed document chunks in concurrent batches.

        Each batch of ``batch_size`` texts is embedded concurrently, with a
        short pause between batches to stay under provider rate limits.
        Output order matches input order.
        """
        embeddings: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            embeddings.extend(await asyncio.gather(*(self._embed(text, DOCUMENT_TASK_TYPE) for text in batch)))

            if start + self.batch_size < len(texts):
                await asyncio.sleep(self.batch_delay)

        logger.debug(f"Embedded {len(embeddings)} texts in batches of {self.batch_size}")
        return embeddings
