"""Tests for the Gemini and Groq completion adapters with mocked SDK clients."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from tecfag_rag.adapters.outbound.llm import GeminiCompletionAdapter, GroqCompletionAdapter
from tecfag_rag.core.domain import ChatMessage, ChatMode, CompletionOptions
from tecfag_rag.core.domain.exceptions import EmptyCompletionError, MissingAPIKeyError, ProviderError

pytestmark = pytest.mark.unit


def history_of(count):
    roles = ("user", "assistant")
    return [ChatMessage(role=roles[i % 2], content=f"m{i}") for i in range(count)]


def gemini_client(response=None, error=None):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=response, side_effect=error)
    return client


def groq_client(response=None, error=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response, side_effect=error)
    return client


def groq_response(text, usage=None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=usage,
    )


class TestGeminiContents:
    def test_system_prompt_becomes_acknowledged_first_turn(self):
        options = CompletionOptions(system_prompt="SISTEMA", mode=ChatMode.CASUAL)

        contents = GeminiCompletionAdapter.build_contents("pergunta", [], options)

        assert contents == [
            {"role": "user", "parts": [{"text": "SISTEMA"}]},
            {"role": "model", "parts": [{"text": "Entendido. Modo casual ativado."}]},
            {"role": "user", "parts": [{"text": "pergunta"}]},
        ]

    def test_keeps_last_six_history_messages(self):
        contents = GeminiCompletionAdapter.build_contents("pergunta", history_of(9), CompletionOptions())

        assert [c["parts"][0]["text"] for c in contents] == ["m3", "m4", "m5", "m6", "m7", "m8", "pergunta"]
        assert [c["role"] for c in contents[:2]] == ["model", "user"]


class TestGeminiCompletion:
    @pytest.mark.asyncio
    async def test_returns_text_and_usage(self):
        usage = SimpleNamespace(prompt_token_count=120, candidates_token_count=30, total_token_count=150)
        client = gemini_client(SimpleNamespace(text="Resposta", usage_metadata=usage))
        adapter = GeminiCompletionAdapter(api_key="key", model="gemini-2.5-flash", client=client)

        completion = await adapter.complete("pergunta", (), CompletionOptions(temperature=0.3, max_tokens=12000))

        assert completion.text == "Resposta"
        assert (completion.token_usage.input_tokens, completion.token_usage.output_tokens) == (120, 30)
        assert completion.token_usage.total_tokens == 150
        assert completion.token_usage.model == "gemini-2.5-flash"
        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["config"].max_output_tokens == 12000
        assert kwargs["config"].temperature == 0.3

    @pytest.mark.asyncio
    async def test_sdk_error_becomes_provider_error(self):
        client = gemini_client(error=RuntimeError("429 RESOURCE_EXHAUSTED"))
        adapter = GeminiCompletionAdapter(api_key="key", client=client)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.complete("pergunta")

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert exc_info.value.extra_context == {"model": "gemini-2.5-flash"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, ""])
    async def test_empty_text_raises(self, text):
        client = gemini_client(SimpleNamespace(text=text, usage_metadata=None))
        adapter = GeminiCompletionAdapter(api_key="key", client=client)

        with pytest.raises(EmptyCompletionError):
            await adapter.complete("pergunta")

    @pytest.mark.asyncio
    async def test_missing_key_becomes_provider_error(self):
        with pytest.raises(ProviderError) as exc_info:
            await GeminiCompletionAdapter(api_key="").complete("pergunta")

        assert isinstance(exc_info.value.cause, MissingAPIKeyError)


class TestGroqMessages:
    def test_system_message_and_last_four_history_messages(self):
        options = CompletionOptions(system_prompt="SISTEMA")

        messages = GroqCompletionAdapter.build_messages("pergunta", history_of(7), options)

        assert messages[0] == {"role": "system", "content": "SISTEMA"}
        assert [m["content"] for m in messages[1:]] == ["m3", "m4", "m5", "m6", "pergunta"]
        assert [m["role"] for m in messages[1:]] == ["assistant", "user", "assistant", "user", "user"]

    def test_without_system_prompt(self):
        messages = GroqCompletionAdapter.build_messages("pergunta", [], CompletionOptions())
        assert messages == [{"role": "user", "content": "pergunta"}]


class TestGroqCompletion:
    @pytest.mark.asyncio
    async def test_returns_text_and_usage(self):
        usage = SimpleNamespace(prompt_tokens=80, completion_tokens=20, total_tokens=100)
        client = groq_client(groq_response("Resposta", usage))
        adapter = GroqCompletionAdapter(api_key="key", client=client)

        completion = await adapter.complete("pergunta", (), CompletionOptions(temperature=0.3, max_tokens=4096))

        assert completion.text == "Resposta"
        assert completion.token_usage.total_tokens == 100
        assert completion.token_usage.model == "llama-3.3-70b-versatile"
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["max_tokens"] == 4096
        assert kwargs["top_p"] == 0.9

    @pytest.mark.asyncio
    async def test_missing_usage(self):
        adapter = GroqCompletionAdapter(api_key="key", client=groq_client(groq_response("Resposta")))

        completion = await adapter.complete("pergunta")

        assert completion.token_usage is None

    @pytest.mark.asyncio
    async def test_sdk_error_becomes_provider_error(self):
        adapter = GroqCompletionAdapter(api_key="key", client=groq_client(error=ConnectionError("refused")))

        with pytest.raises(ProviderError):
            await adapter.complete("pergunta")

    @pytest.mark.asyncio
    async def test_empty_choice_raises(self):
        adapter = GroqCompletionAdapter(api_key="key", client=groq_client(groq_response("")))

        with pytest.raises(EmptyCompletionError):
            await adapter.complete("pergunta")

    def test_missing_key(self):
        with pytest.raises(MissingAPIKeyError):
            GroqCompletionAdapter(api_key="")._get_client()

    @pytest.mark.asyncio
    async def test_missing_key_becomes_provider_error(self):
        with pytest.raises(ProviderError) as exc_info:
            await GroqCompletionAdapter(api_key="").complete("pergunta")

        assert isinstance(exc_info.value.cause, MissingAPIKeyError)
