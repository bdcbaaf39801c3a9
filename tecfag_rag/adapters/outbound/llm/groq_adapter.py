"""Groq completion provider via its OpenAI-compatible endpoint."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from openai import AsyncOpenAI

from ....core.domain import ChatMessage, Completion, CompletionOptions, TokenUsage
from ....core.domain.exceptions import EmptyCompletionError, MissingAPIKeyError, ProviderError
from ....core.ports import CompletionPort
from ...common.rate_limiter import AsyncRateLimiter

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
HISTORY_WINDOW = 4
TOP_P = 0.9


class GroqCompletionAdapter(CompletionPort):
    """Fallback completion provider (Llama on Groq)."""

    name = "Groq"

    def __init__(
        self,
        api_key: str,
        model: str = "llama-3.3-70b-versatile",
        base_url: str = GROQ_BASE_URL,
        rate_limiter: AsyncRateLimiter | None = None,
        client: "AsyncOpenAI | None" = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.rate_limiter = rate_limiter or AsyncRateLimiter(None)
        self._client = client

    def _get_client(self) -> "AsyncOpenAI":
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError(
                    "Groq API key not set. Set GROQ_API_KEY in your .env file.",
                    context={"setting": "groq_api_key"},
                )

            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
            logger.info(f"Groq client initialized for model: {self.model}")
        return self._client

    @staticmethod
    def build_messages(
        prompt: str,
        history: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})

        for message in list(history)[-HISTORY_WINDOW:]:
            role = "assistant" if message.role == "assistant" else "user"
            messages.append({"role": role, "content": message.content})

        messages.append({"role": "user", "content": prompt})
        return messages

    async def complete(
        self,
        prompt: str,
        history: Sequence[ChatMessage] = (),
        options: CompletionOptions | None = None,
    ) -> Completion:
        options = options or CompletionOptions()

        logger.info(f"Requesting completion from Groq ({self.model})")
        try:
            client = self._get_client()
            await self.rate_limiter.acquire()
            response = await client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(prompt, history, options),
                temperature=options.temperature,
                max_tokens=options.max_tokens,
                top_p=TOP_P,
            )
        except Exception as e:
            logger.error(f"Groq generation error: {e}")
            raise ProviderError(
                f"Groq request failed: {e}",
                cause=e,
                context={"model": self.model},
            ) from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise EmptyCompletionError("Groq returned an empty response", context={"model": self.model})

        token_usage = None
        if response.usage is not None:
            token_usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens or 0,
                output_tokens=response.usage.completion_tokens or 0,
                total_tokens=response.usage.total_tokens or 0,
                model=self.model,
            )
        return Completion(text=text, token_usage=token_usage)
