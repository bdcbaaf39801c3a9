"""Unit tests for exception handling system.

Tests both the exception hierarchy and the exception handler utilities,
including negative tests to verify correct exceptions are raised.
"""

import json
import logging

import pytest

from tecfag_rag.adapters.common.exception_handler import (
    format_exception_json,
    get_error_code,
    log_exception,
)
from tecfag_rag.core.domain.exceptions import (
    ChunkStoreError,
    ConfigurationError,
    DimensionMismatchError,
    DocumentNotFoundError,
    EmbeddingAPIError,
    EmbeddingError,
    EmptyCompletionError,
    EmptyEmbeddingError,
    EmptyQueryError,
    MissingAPIKeyError,
    ProviderError,
    ProviderUnavailableError,
    TecfagRAGError,
    ValidationError,
    VectorStoreError,
)

# Apply @pytest.mark.unit to all tests in this module
pytestmark = pytest.mark.unit


class TestExceptionHierarchy:
    """Tests for the exception class hierarchy."""

    def test_tecfag_rag_error_is_base(self):
        assert issubclass(ConfigurationError, TecfagRAGError)
        assert issubclass(VectorStoreError, TecfagRAGError)
        assert issubclass(ProviderError, TecfagRAGError)
        assert issubclass(ValidationError, TecfagRAGError)
        assert issubclass(EmbeddingError, TecfagRAGError)
        assert issubclass(ProviderUnavailableError, TecfagRAGError)

    def test_vector_store_family(self):
        assert issubclass(DimensionMismatchError, VectorStoreError)
        assert issubclass(ChunkStoreError, VectorStoreError)
        assert issubclass(DocumentNotFoundError, VectorStoreError)

    def test_empty_completion_triggers_fallback_like_any_provider_error(self):
        assert issubclass(EmptyCompletionError, ProviderError)

    def test_unavailable_is_not_a_provider_error(self):
        """Both providers failing must not be mistaken for a single provider failure."""
        assert not issubclass(ProviderUnavailableError, ProviderError)

    def test_embedding_family(self):
        assert issubclass(EmbeddingAPIError, EmbeddingError)
        assert issubclass(EmptyEmbeddingError, EmbeddingError)

    def test_validation_family(self):
        assert issubclass(EmptyQueryError, ValidationError)
        assert issubclass(MissingAPIKeyError, ConfigurationError)


class TestExceptionCreation:
    """Tests for creating and using exceptions."""

    def test_basic_exception_creation(self):
        exc = TecfagRAGError("Test error message")
        assert str(exc) == "Test error message"
        assert exc.message == "Test error message"
        assert exc.error_code == "RAG_ERR_001"

    def test_exception_with_context(self):
        exc = DimensionMismatchError("Vectors must have same dimensions", context={"left": 768, "right": 3})
        assert exc.extra_context == {"left": 768, "right": 3}

    def test_exception_with_cause(self):
        original = OSError("disk full")
        exc = ChunkStoreError("Failed to write chunks", cause=original)
        assert exc.cause is original

    def test_exception_captures_location(self):
        exc = TecfagRAGError("Test")
        assert exc.location.method_name == "test_exception_captures_location"
        assert exc.location.class_name == "TestExceptionCreation"
        assert exc.location.line_number > 0

    def test_each_exception_has_unique_error_code(self):
        exceptions = [
            TecfagRAGError("test"),
            ConfigurationError("test"),
            MissingAPIKeyError("test"),
            VectorStoreError("test"),
            DimensionMismatchError("test"),
            ChunkStoreError("test"),
            DocumentNotFoundError("test"),
            EmbeddingError("test"),
            EmbeddingAPIError("test"),
            EmptyEmbeddingError("test"),
            ProviderError("test"),
            EmptyCompletionError("test"),
            ProviderUnavailableError("A", ProviderError("a"), "B", ProviderError("b")),
            ValidationError("test"),
            EmptyQueryError("test"),
        ]
        codes = {exc.error_code for exc in exceptions}

        assert len(codes) == len(exceptions)


class TestProviderUnavailable:
    def test_message_names_both_providers(self):
        exc = ProviderUnavailableError(
            "Gemini",
            ProviderError("quota exceeded"),
            "Groq",
            ProviderError("rate limited"),
        )

        assert exc.message == "AI providers unavailable: Gemini (quota exceeded), Groq (rate limited)"
        assert exc.extra_context == {"primary": "Gemini", "fallback": "Groq"}
        assert isinstance(exc.primary_error, ProviderError)
        assert exc.cause is exc.fallback_error


class TestExceptionToDict:
    """Tests for exception JSON serialization."""

    def test_to_dict_basic_structure(self):
        exc = ChunkStoreError("Test error")
        result = exc.to_dict()

        assert result["error"] == {"type": "ChunkStoreError", "code": "RAG_VEC_003", "message": "Test error"}
        assert set(result["location"]) == {"class", "method", "file", "line", "timestamp"}

    def test_to_dict_includes_context(self):
        result = ProviderError("Rate limit", context={"model": "gemini-2.5-flash"}).to_dict()
        assert result["context"]["model"] == "gemini-2.5-flash"

    def test_to_dict_includes_cause(self):
        exc = ValidationError("Invalid input", cause=ValueError("Bad value"))
        result = exc.to_dict()

        assert result["cause"] == {"type": "ValueError", "message": "Bad value"}

    def test_to_dict_excludes_trace_by_default(self):
        exc = ValidationError("Invalid input", cause=ValueError("Bad value"))
        assert "stack_trace" not in exc.to_dict(include_trace=False)

    def test_to_dict_includes_trace_when_raised_from_cause(self):
        try:
            try:
                raise ValueError("Bad value")
            except ValueError as e:
                raise ValidationError("Invalid input", cause=e) from e
        except ValidationError as exc:
            result = exc.to_dict(include_trace=True)

        assert any("ValueError" in line for line in result["stack_trace"])

    def test_to_dict_is_json_serializable(self):
        exc = DimensionMismatchError("Vectors must have same dimensions", context={"left": 2, "right": 3})
        assert isinstance(json.dumps(exc.to_dict()), str)


class TestExceptionHandler:
    """Tests for exception handler utilities."""

    def test_format_custom_exception(self):
        exc = DocumentNotFoundError("Document not found: doc-1", context={"document_id": "doc-1"})
        result = format_exception_json(exc)

        assert result["error"]["type"] == "DocumentNotFoundError"
        assert result["error"]["code"] == "RAG_VEC_004"
        assert result["context"] == {"document_id": "doc-1"}

    def test_format_standard_exception(self):
        try:
            raise ValueError("Standard error")
        except ValueError as e:
            result = format_exception_json(e)

        assert result["error"] == {"type": "ValueError", "code": "PYTHON_ERR", "message": "Standard error"}
        assert result["location"]["method"] == "test_format_standard_exception"
        assert result["location"]["file"] == "test_exceptions.py"

    def test_format_unraised_standard_exception(self):
        result = format_exception_json(RuntimeError("never raised"))
        assert result["location"]["line"] == 0

    def test_format_adds_extra_context(self):
        exc = ChunkStoreError("Test", context={"database": "original"})
        result = format_exception_json(exc, extra_context={"request_id": "abc123"})

        assert result["context"] == {"database": "original", "request_id": "abc123"}

    def test_get_error_code(self):
        assert get_error_code(EmptyQueryError("test")) == "RAG_VAL_002"
        assert get_error_code(ProviderError("test")) == "RAG_LLM_001"
        assert get_error_code(ValueError("test")) == "PYTHON_ERR"
        assert get_error_code(RuntimeError("test")) == "PYTHON_ERR"

    def test_log_exception_emits_json(self, caplog):
        log = logging.getLogger("tecfag_rag.tests")

        with caplog.at_level(logging.WARNING, logger="tecfag_rag.tests"):
            log_exception(ChunkStoreError("database locked"), log, level=logging.WARNING)

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["error"]["code"] == "RAG_VEC_003"
        assert caplog.records[-1].levelno == logging.WARNING


class TestNegativeScenarios:
    """Negative tests to verify exceptions are raised correctly."""

    def test_missing_api_key_raises_error(self):
        from tecfag_rag.adapters.outbound.llm.gemini_adapter import GeminiCompletionAdapter

        adapter = GeminiCompletionAdapter(api_key="", model="gemini-2.5-flash")

        with pytest.raises(MissingAPIKeyError):
            adapter._get_client()

    def test_exception_context_preserved(self):
        try:
            try:
                raise OSError("database is locked")
            except OSError as e:
                raise ChunkStoreError("Failed to read chunks", cause=e, context={"attempt": 3}) from e
        except ChunkStoreError as exc:
            assert exc.extra_context["attempt"] == 3
            assert isinstance(exc.cause, OSError)


class TestExceptionCatchPatterns:
    """Tests for exception catching patterns."""

    def test_catch_by_base_class(self):
        for exc in (ChunkStoreError("test"), ProviderError("test"), ValidationError("test")):
            try:
                raise exc
            except TecfagRAGError as caught:
                assert caught.error_code.startswith("RAG_")

    def test_catch_vector_store_errors(self):
        for exc in (DimensionMismatchError("test"), ChunkStoreError("test"), DocumentNotFoundError("test")):
            try:
                raise exc
            except VectorStoreError as caught:
                assert "RAG_VEC" in caught.error_code
