"""Tests for settings loading and logging setup."""

import json
import logging
import sys

import pytest

from tecfag_rag.config.logging import LOGGER_NAME, JSONExceptionFormatter, get_logger, setup_logging
from tecfag_rag.config.settings import Settings
from tecfag_rag.core.domain.exceptions import ChunkStoreError

pytestmark = pytest.mark.unit


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.embedding_dimensions == 768
        assert settings.llm_model == "gemini-2.5-flash"
        assert settings.fallback_llm_model == "llama-3.3-70b-versatile"
        assert settings.llm_max_tokens == 12000
        assert settings.fallback_max_tokens == 4096
        assert (settings.chunk_size, settings.chunk_overlap) == (800, 150)
        assert settings.chunks_per_document == 2

    def test_secrets_are_sanitized(self):
        settings = Settings(_env_file=None, gemini_api_key="\ufeff abc123 \n", groq_api_key=" gsk_x ")

        assert settings.gemini_api_key == "abc123"
        assert settings.groq_api_key == "gsk_x"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SUB_QUERY_TIMEOUT", "5")
        monkeypatch.setenv("LLM_REQUESTS_PER_MINUTE", "30")
        monkeypatch.setenv("LOG_JSON", "true")

        settings = Settings(_env_file=None)

        assert settings.sub_query_timeout == 5.0
        assert settings.llm_requests_per_minute == 30
        assert settings.log_json is True

    def test_sqlite_path(self, tmp_path):
        assert Settings(_env_file=None, data_dir=tmp_path).sqlite_path == tmp_path / "tecfag_rag.db"

        custom = tmp_path / "db" / "rag.sqlite"
        assert Settings(_env_file=None, database_path=custom).sqlite_path == custom

    def test_ensure_directories(self, tmp_path):
        settings = Settings(_env_file=None, data_dir=tmp_path / "data", database_path=tmp_path / "db" / "rag.db")

        settings.ensure_directories()

        assert (tmp_path / "data").is_dir()
        assert (tmp_path / "db").is_dir()


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger(LOGGER_NAME)
        handlers, level = list(logger.handlers), logger.level
        yield
        for handler in logger.handlers:
            handler.close()
        logger.handlers = handlers
        logger.setLevel(level)

    def test_plain_setup(self):
        logger = setup_logging("debug")

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.handlers[0].stream is sys.stderr
        assert not isinstance(logger.handlers[0].formatter, JSONExceptionFormatter)

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_json_setup_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "rag.log"

        logger = setup_logging("INFO", log_file=log_file, json_format=True)
        get_logger("services").info("Indexed document doc-1")
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").strip())
        assert entry["level"] == "INFO"
        assert entry["logger"] == "tecfag_rag.services"
        assert entry["message"] == "Indexed document doc-1"

    def test_json_formatter_includes_error_code_and_context(self):
        try:
            raise ChunkStoreError("database locked", context={"operation": "find_many"})
        except ChunkStoreError:
            record = logging.getLogger("tecfag_rag.tests").makeRecord(
                "tecfag_rag.tests", logging.ERROR, __file__, 1, "Search failed", (), sys.exc_info()
            )

        entry = json.loads(JSONExceptionFormatter().format(record))

        assert entry["exception"]["type"] == "ChunkStoreError"
        assert entry["exception"]["code"] == "RAG_VEC_003"
        assert entry["exception"]["context"] == {"operation": "find_many"}

    def test_get_logger_names(self):
        assert get_logger().name == "tecfag_rag"
        assert get_logger("cli").name == "tecfag_rag.cli"
