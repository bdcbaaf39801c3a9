"""Unit tests for context formatting."""

import pytest

from tecfag_rag.core.domain import QueryType
from tecfag_rag.core.services.context_formatter import (
    DOCUMENT_RULE,
    format_context,
    format_flat_context,
    group_chunks_by_document,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def mixed_chunks(make_result):
    return [
        make_result("b2", document_id="doc-b", chunk_index=2, content="B dois", file_name="B.pdf"),
        make_result("a1", document_id="doc-a", chunk_index=1, content="A um", file_name="A.pdf"),
        make_result("b0", document_id="doc-b", chunk_index=0, content="B zero", file_name="B.pdf"),
    ]


def test_rule_is_63_characters():
    assert len(DOCUMENT_RULE) == 63
    assert set(DOCUMENT_RULE) == {"═"}


def test_grouping_keeps_first_seen_document_order(mixed_chunks):
    grouped = group_chunks_by_document(mixed_chunks)

    assert list(grouped) == ["doc-b", "doc-a"]
    assert [c.chunk_index for c in grouped["doc-b"]] == [0, 2]


@pytest.mark.parametrize("query_type", [QueryType.AGGREGATION, QueryType.EXPLORATORY])
def test_grouped_layout(mixed_chunks, query_type):
    context = format_context(mixed_chunks, query_type)

    assert context == (
        f"{DOCUMENT_RULE}\n📄 DOCUMENTO 1: B.pdf\n{DOCUMENT_RULE}\nB zero\n\nB dois"
        f"\n\n{DOCUMENT_RULE}\n📄 DOCUMENTO 2: A.pdf\n{DOCUMENT_RULE}\nA um"
    )


@pytest.mark.parametrize(
    "query_type",
    [QueryType.FACTUAL, QueryType.COMPARATIVE, QueryType.PROCEDURAL, QueryType.GENERAL],
)
def test_flat_layout_keeps_input_order(mixed_chunks, query_type):
    context = format_context(mixed_chunks, query_type)

    assert context == (
        "[ID: 1 | Fonte: B.pdf]\nB dois\n\n---\n\n"
        "[ID: 2 | Fonte: A.pdf]\nA um\n\n---\n\n"
        "[ID: 3 | Fonte: B.pdf]\nB zero"
    )


def test_missing_file_name_uses_placeholder(make_result):
    context = format_flat_context([make_result("x", content="texto")])
    assert context == "[ID: 1 | Fonte: Documento]\ntexto"


def test_empty_input():
    assert format_context([], QueryType.FACTUAL) == ""
    assert format_context([], QueryType.AGGREGATION) == ""
