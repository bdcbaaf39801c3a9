"""Gemini completion provider using the google-genai SDK."""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from google import genai

from ....core.domain import ChatMessage, Completion, CompletionOptions, TokenUsage
from ....core.domain.exceptions import EmptyCompletionError, MissingAPIKeyError, ProviderError
from ....core.ports import CompletionPort
from ...common.rate_limiter import AsyncRateLimiter

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 6


class GeminiCompletionAdapter(CompletionPort):
    """Primary completion provider.

    The system prompt is sent as the first user turn, acknowledged by a model
    turn, followed by the recent history and the user prompt.
    """

    name = "Gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        rate_limiter: AsyncRateLimiter | None = None,
        client: "genai.Client | None" = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.rate_limiter = rate_limiter or AsyncRateLimiter(None)
        self._client = client

    def _get_client(self) -> "genai.Client":
        """Lazy load the Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError(
                    "Gemini API key not set. Get one at https://aistudio.google.com/ "
                    "and set GEMINI_API_KEY in your .env file.",
                    context={"setting": "gemini_api_key"},
                )

            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info(f"Gemini client initialized for model: {self.model}")
        return self._client

    @staticmethod
    def build_contents(
        prompt: str,
        history: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> list[dict[str, Any]]:
        contents: list[dict[str, Any]] = []
        if options.system_prompt:
            contents.append({"role": "user", "parts": [{"text": options.system_prompt}]})
            contents.append({"role": "model", "parts": [{"text": f"Entendido. Modo {options.mode.value} ativado."}]})

        for message in list(history)[-HISTORY_WINDOW:]:
            role = "user" if message.role == "user" else "model"
            contents.append({"role": role, "parts": [{"text": message.content}]})

        contents.append({"role": "user", "parts": [{"text": prompt}]})
        return contents

    async def complete(
        self,
        prompt: str,
        history: Sequence[ChatMessage] = (),
        options: CompletionOptions | None = None,
    ) -> Completion:
        from google.genai.types import GenerateContentConfig

        options = options or CompletionOptions()

        logger.info(f"Requesting completion from {self.model}")
        try:
            client = self._get_client()
            await self.rate_limiter.acquire()
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=self.build_contents(prompt, history, options),
                config=GenerateContentConfig(
                    temperature=options.temperature,
                    max_output_tokens=options.max_tokens,
                ),
            )
            text = response.text
        except Exception as e:
            raise ProviderError(
                f"Gemini request failed: {e}",
                cause=e,
                context={"model": self.model},
            ) from e

        if not text:
            raise EmptyCompletionError("Gemini returned an empty response", context={"model": self.model})

        usage = getattr(response, "usage_metadata", None)
        token_usage = None
        if usage is not None:
            token_usage = TokenUsage(
                input_tokens=usage.prompt_token_count or 0,
                output_tokens=usage.candidates_token_count or 0,
                total_tokens=usage.total_token_count or 0,
                model=self.model,
            )
        return Completion(text=text, token_usage=token_usage)
