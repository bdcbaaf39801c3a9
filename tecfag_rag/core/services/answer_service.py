"""Answer service: analysis, retrieval, prompt assembly and provider fallback."""

import dataclasses
import logging
from collections import Counter
from collections.abc import Callable, Sequence
from datetime import datetime

from ..domain import (
    ChatMessage,
    ChatMode,
    ChatResponse,
    Completion,
    CompletionOptions,
    QueryType,
    SourceCitation,
    UserProfile,
    VectorSearchResult,
)
from ..domain.exceptions import EmptyQueryError, ProviderUnavailableError
from ..ports import CompletionPort, EmbeddingPort, VectorStorePort
from . import prompts
from .context_formatter import format_context
from .multi_query import MultiQueryRAG
from .query_analyzer import QueryAnalyzer

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE_NAME = "Documento desconhecido"
SUGGESTION_SAMPLE_SIZE = 8
SUGGESTION_TEXT_SAMPLES = 5
SUGGESTION_VECTOR_VALUE = 0.1


class AnswerService:
    """Answers catalog questions with retrieval-augmented generation.

    The primary completion provider is tried first. Any failure, including a
    missing API key, switches to the fallback provider, and the answer is marked so users
    can tell a backup model wrote it.
    """

    def __init__(
        self,
        analyzer: QueryAnalyzer,
        embedder: EmbeddingPort,
        vector_store: VectorStorePort,
        multi_query: MultiQueryRAG,
        primary: CompletionPort,
        fallback: CompletionPort,
        *,
        primary_options: CompletionOptions | None = None,
        fallback_options: CompletionOptions | None = None,
        sample_vector_dimensions: int = 768,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.analyzer = analyzer
        self.embedder = embedder
        self.vector_store = vector_store
        self.multi_query = multi_query
        self.primary = primary
        self.fallback = fallback
        self.primary_options = primary_options or CompletionOptions(temperature=0.3, max_tokens=12000)
        self.fallback_options = fallback_options or CompletionOptions(temperature=0.3, max_tokens=4096)
        self.sample_vector_dimensions = sample_vector_dimensions
        self.clock = clock

    @property
    def fallback_marker(self) -> str:
        return f"\n\n*(Backup: {self.fallback.name} {self.fallback.model})*"

    async def answer(
        self,
        question: str,
        catalog_id: str | None = None,
        history: Sequence[ChatMessage] = (),
        mode: ChatMode = ChatMode.EDUCATIONAL,
        table_mode: bool = False,
        user_profile: UserProfile | None = None,
    ) -> ChatResponse:
        """Answer a question from the indexed documents.

        Args:
            question: The user's question.
            catalog_id: Restrict retrieval to one catalog.
            history: Previous chat turns, oldest first.
            mode: Persona used for the answer.
            table_mode: Ask the model to favour markdown tables.
            user_profile: Optional personalisation details.

        Returns:
            The answer with its sources, token usage and query analysis.

        Raises:
            EmptyQueryError: If the question is blank.
            EmbeddingError: If the question cannot be embedded on the
                single-query path.
            ProviderUnavailableError: If both completion providers fail.
        """
        if not question or not question.strip():
            raise EmptyQueryError("Question must not be empty")

        analysis = self.analyzer.analyze(question)
        logger.info(
            f"Query analysis: type={analysis.type.value} context_size={analysis.context_size} "
            f"multi_query={analysis.needs_multi_query} count={analysis.is_count_query} "
            f"categories={analysis.categories}"
        )

        if analysis.type == QueryType.GREETING:
            return ChatResponse(
                response=prompts.greeting_response(mode, self.clock().hour),
                analysis=analysis,
            )

        metadata = ""
        if analysis.needs_multi_query:
            logger.info(f"Using multi-query search ({len(analysis.suggested_queries) + 1} queries)")
            result = await self.multi_query.multi_query_search(question, analysis, catalog_id)
            chunks = result.chunks
            stats = await self.vector_store.get_document_stats(catalog_id) if analysis.is_count_query else None
            metadata = prompts.search_metadata(result, stats)
        else:
            # Embedding failures propagate here: there is no other source of context
            embedding = await self.embedder.embed(question)
            chunks = await self.vector_store.search(
                embedding,
                top_k=analysis.context_size,
                catalog_id=catalog_id,
            )

        logger.info(f"Found {len(chunks)} relevant chunks")
        if chunks:
            distribution = Counter(chunk.metadata.file_name or "Unknown" for chunk in chunks)
            logger.debug(f"Chunk distribution: {dict(distribution)}")

        if not chunks:
            return ChatResponse(response=prompts.INSUFFICIENT_INFORMATION_MESSAGE, analysis=analysis)

        system_prompt = prompts.build_system_prompt(
            format_context(chunks, analysis.type),
            mode,
            table_mode=table_mode,
            user_profile=user_profile,
            metadata=metadata,
            instruction=prompts.aggregation_instruction(question, analysis),
        )
        completion, used_fallback = await self._complete_with_fallback(
            prompts.build_user_prompt(question),
            history,
            system_prompt,
            mode,
        )

        logger.info(f"Generated response ({len(completion.text)} chars)")
        return ChatResponse(
            response=completion.text,
            sources=self._sources(chunks),
            token_usage=completion.token_usage,
            analysis=analysis,
            used_fallback=used_fallback,
        )

    async def _complete_with_fallback(
        self,
        prompt: str,
        history: Sequence[ChatMessage],
        system_prompt: str | None,
        mode: ChatMode,
    ) -> tuple[Completion, bool]:
        primary_options = dataclasses.replace(self.primary_options, system_prompt=system_prompt, mode=mode)
        try:
            completion = await self.primary.complete(prompt, history, primary_options)
            if completion.token_usage:
                usage = completion.token_usage
                logger.info(
                    f"{self.primary.name} token usage: {usage.total_tokens} total "
                    f"({usage.input_tokens} in, {usage.output_tokens} out)"
                )
            return completion, False
        except Exception as primary_error:
            logger.warning(f"{self.primary.name} error: {primary_error}. Switching to {self.fallback.name}")

            fallback_options = dataclasses.replace(self.fallback_options, system_prompt=system_prompt, mode=mode)
            try:
                completion = await self.fallback.complete(prompt, history, fallback_options)
            except Exception as fallback_error:
                logger.error(f"Both {self.primary.name} and {self.fallback.name} failed")
                raise ProviderUnavailableError(
                    self.primary.name,
                    primary_error,
                    self.fallback.name,
                    fallback_error,
                ) from fallback_error

        usage = completion.token_usage
        if usage is not None:
            usage = dataclasses.replace(usage, model=f"{usage.model} (fallback)")
            logger.info(f"{self.fallback.name} fallback token usage: {usage.total_tokens} total")

        return Completion(text=completion.text + self.fallback_marker, token_usage=usage), True

    @staticmethod
    def _sources(chunks: Sequence[VectorSearchResult]) -> list[SourceCitation]:
        return [
            SourceCitation(
                file_name=chunk.metadata.file_name or UNKNOWN_SOURCE_NAME,
                chunk_index=chunk.chunk_index,
                similarity=chunk.similarity,
            )
            for chunk in chunks
        ]

    async def suggest_questions(self, catalog_id: str | None = None, count: int = 3) -> list[str]:
        """Short questions a user might ask about the indexed documents.

        Never raises for retrieval or provider problems: a fixed list is
        returned instead.
        """
        try:
            sample_vector = [SUGGESTION_VECTOR_VALUE] * self.sample_vector_dimensions
            samples = await self.vector_store.search(
                sample_vector,
                top_k=SUGGESTION_SAMPLE_SIZE,
                catalog_id=catalog_id,
            )
            if not samples:
                return list(prompts.FALLBACK_SUGGESTIONS_EMPTY)

            prompt = prompts.build_suggestion_prompt(
                [chunk.content for chunk in samples[:SUGGESTION_TEXT_SAMPLES]],
                count,
            )
            try:
                completion = await self.primary.complete(prompt, (), CompletionOptions(temperature=0.3))
            except Exception as e:
                logger.warning(f"{self.primary.name} failed for suggestions, using {self.fallback.name}: {e}")
                completion = await self.fallback.complete(prompt, (), CompletionOptions(temperature=0.5))
        except Exception:
            logger.exception("Failed to generate suggested questions")
            return list(prompts.FALLBACK_SUGGESTIONS_ERROR)

        questions = prompts.parse_suggested_questions(completion.text, count)
        return questions or list(prompts.FALLBACK_SUGGESTIONS_UNUSABLE)
