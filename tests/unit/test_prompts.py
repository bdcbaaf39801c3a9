"""Unit tests for prompt builders."""

import pytest

from tecfag_rag.core.domain import ChatMode, DocumentStats, MultiQueryResult, QueryBreakdown, UserProfile
from tecfag_rag.core.services import QueryAnalyzer, prompts

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "hour, expected",
    [(0, "Boa noite"), (5, "Bom dia"), (11, "Bom dia"), (12, "Boa tarde"), (17, "Boa tarde"), (18, "Boa noite"), (23, "Boa noite")],
)
def test_time_of_day_greeting(hour, expected):
    assert prompts.time_of_day_greeting(hour) == expected


@pytest.mark.parametrize("mode", list(ChatMode))
def test_greeting_response_starts_with_salutation(mode):
    assert prompts.greeting_response(mode, 9).startswith("Bom dia")


class TestSystemPrompt:
    def test_persona_rules_and_context(self):
        prompt = prompts.build_system_prompt("CONTEXTO", ChatMode.EDUCATIONAL)

        assert prompt.startswith(prompts.PERSONAS[ChatMode.EDUCATIONAL])
        assert "REGRAS DE FONTE (RAG)" in prompt
        assert prompt.rstrip().endswith("DOCUMENTOS DE REFERÊNCIA (USE TODO O CONTEÚDO ABAIXO):\nCONTEXTO")
        assert "PERFIL DO USUÁRIO" not in prompt
        assert "Modo Tabela" not in prompt

    def test_professional_mode_adds_closing(self):
        prompt = prompts.build_system_prompt("CONTEXTO", ChatMode.PROFESSIONAL)
        assert prompt.endswith(prompts.PROFESSIONAL_CLOSING)

    def test_optional_blocks(self):
        prompt = prompts.build_system_prompt(
            "CONTEXTO",
            ChatMode.DIRECT,
            table_mode=True,
            user_profile=UserProfile(name="Rui", technical_level="Avançado"),
            metadata="METADADOS",
            instruction="PASSO EXTRA",
        )

        assert prompt.index("METADADOS") < prompt.index("PASSO EXTRA") < prompt.index("CONTEXTO")
        assert "- Nome: Rui" in prompt
        assert "- Nível Técnico: Avançado" in prompt
        assert "- Cargo: Não informado" in prompt
        assert prompt.endswith(prompts.TABLE_MODE_INSTRUCTION)


class TestAggregationInstruction:
    def test_count_question(self):
        question = "Quantas seladoras temos?"
        text = prompts.aggregation_instruction(question, QueryAnalyzer().analyze(question))

        assert "CONTAGEM PRECISA" in text
        assert f'"{question}"' in text

    def test_listing_question(self):
        question = "Liste todas as máquinas"
        text = prompts.aggregation_instruction(question, QueryAnalyzer().analyze(question))

        assert "LISTAGEM ABRANGENTE" in text

    def test_other_questions(self):
        question = "Qual a capacidade da TC20?"
        assert prompts.aggregation_instruction(question, QueryAnalyzer().analyze(question)) == ""


class TestSearchMetadata:
    @pytest.fixture
    def result(self, make_result):
        return MultiQueryResult(
            chunks=[make_result("a", document_id="doc-a"), make_result("b", document_id="doc-b")],
            total_chunks_before_dedup=4,
            query_breakdown=[QueryBreakdown(q, 1) for q in ("q1", "q2", "q3", "q4")],
        )

    def test_without_stats(self, result):
        text = prompts.search_metadata(result)

        assert "Foram consultados 2 documentos diferentes" in text
        assert "Recuperados 2 trechos relevantes" in text
        assert "Queries executadas: q1, q2, q3..." in text
        assert "ESTATÍSTICAS" not in text

    def test_stats_list_at_most_ten_names(self, result):
        names = [f"Doc{i}.pdf" for i in range(12)]
        text = prompts.search_metadata(result, DocumentStats(12, 340, names))

        assert "Total de documentos indexados: 12" in text
        assert "Total de chunks na base: 340" in text
        assert "Doc9.pdf..." in text
        assert "Doc10.pdf" not in text

    def test_stats_with_few_names(self, result):
        text = prompts.search_metadata(result, DocumentStats(2, 5, ["A.pdf", "B.pdf"]))
        assert "- Documentos: A.pdf, B.pdf\n" in text


class TestSuggestions:
    def test_prompt_truncates_samples(self):
        prompt = prompts.build_suggestion_prompt(["x" * 400, "curto"], 3)

        assert "Gere 3 perguntas" in prompt
        assert f"[doc] {'x' * 300}\n" in prompt
        assert "[doc] curto" in prompt

    def test_parse_keeps_question_lines(self):
        text = "  Qual a potência?  \nSim?\nIsto não é pergunta\n\nComo ajustar a temperatura?\nQual o peso?"

        assert prompts.parse_suggested_questions(text, 2) == ["Qual a potência?", "Como ajustar a temperatura?"]

    def test_parse_nothing_usable(self):
        assert prompts.parse_suggested_questions("", 3) == []
