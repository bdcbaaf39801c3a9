"""Pure query analysis: question type, retrieval strategy and context size."""

from __future__ import annotations

import re

from ..domain import QueryAnalysis, QueryType

GREETING_PATTERNS = [
    r"^(oi|olá|ola|bom\s+dia|boa\s+tarde|boa\s+noite|hey|hi|hello)",
    r"^(como\s+vai|tudo\s+bem)",
]

AGGREGATION_PATTERNS = [
    r"quant[oa]s?\s",
    r"list[ea]r?\s+(tod[oa]s|todas\s+as|todos\s+os)",
    r"tod[oa]s\s+(as|os)\s",
    r"total\s+de",
    r"quais\s+(são|sao)\s+(as|os|todas|todos)",
    r"mostre\s+(tod[oa]s|tudo)",
    r"o\s+que\s+temos",
    r"catálogo\s+completo",
    r"inventário",
]

COMPARATIVE_PATTERNS = [
    r"compar[ae]",
    r"diferença\s+entre",
    r"versus|vs\.?",
    r"melhor\s+(entre|que)",
    r"qual\s+(é|a)\s+(diferença|melhor)",
]

PROCEDURAL_PATTERNS = [
    r"como\s+(operar|usar|configurar|instalar|montar)",
    r"passo\s+a\s+passo",
    r"procedimento",
    r"instruções",
    r"manual\s+de",
]

EXPLORATORY_PATTERNS = [
    r"o\s+que\s+(é|são|temos|existe)",
    r"explique",
    r"me\s+fale\s+sobre",
    r"como\s+funciona",
    r"descreva",
]

COUNT_PATTERN = r"quant[oa]s?|total|número|contagem"

# First matching group wins, so aggregation must stay ahead of comparative.
TYPE_LADDER: list[tuple[QueryType, list[str]]] = [
    (QueryType.AGGREGATION, AGGREGATION_PATTERNS),
    (QueryType.COMPARATIVE, COMPARATIVE_PATTERNS),
    (QueryType.PROCEDURAL, PROCEDURAL_PATTERNS),
    (QueryType.EXPLORATORY, EXPLORATORY_PATTERNS),
]

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "envasadoras": ["envasadora", "envase", "dosadora", "dosagem", "peristáltica", "pistão"],
    "seladoras": ["seladora", "selagem", "vácuo", "indução", "impulso", "pedal", "contínua"],
    "rotuladoras": ["rotuladora", "rotulagem", "etiquetadora", "rótulo"],
    "datadoras": ["datadora", "datação", "inkjet", "hot stamp", "jato de tinta"],
    "prensas": ["prensa", "comprimidos", "rotativa"],
    "flowpack": ["flowpack", "flow pack", "embaladora"],
    "rosqueadoras": ["rosqueadora", "rosqueamento", "tampa"],
    "arqueadoras": ["arqueadora", "arqueamento", "cintagem"],
    "esteiras": ["esteira", "transportador", "conveyor"],
    "encapsuladoras": ["encapsuladora", "cápsula"],
    "montadoras": ["montadora", "caixa"],
}

STOPWORDS = frozenset(
    [
        "o", "a", "os", "as", "um", "uma", "uns", "umas",
        "de", "da", "do", "das", "dos", "em", "na", "no",
        "para", "por", "com", "que", "qual", "quais",
        "é", "são", "tem", "temos", "existe", "existem",
        "me", "mim", "você", "vocês", "nós", "eles",
        "e", "ou", "mas", "se", "como", "quando", "onde",
    ]
)  # fmt: skip

BASE_CONTEXT_SIZES: dict[QueryType, int] = {
    QueryType.GREETING: 0,
    QueryType.FACTUAL: 15,
    QueryType.COMPARATIVE: 25,
    QueryType.PROCEDURAL: 20,
    QueryType.EXPLORATORY: 40,
    QueryType.AGGREGATION: 200,
    QueryType.GENERAL: 20,
}

COUNT_MIN_CONTEXT = 80
FOCUSED_AGGREGATION_MAX_CONTEXT = 60

CATEGORY_QUERY_TEMPLATES = [
    "lista de {category}",
    "modelos de {category} disponíveis",
    "catálogo {category}",
]

GENERIC_CATALOG_QUERIES = [
    "lista de todas as máquinas",
    "catálogo de produtos",
    "modelos de envasadoras",
    "modelos de seladoras",
    "modelos de rotuladoras",
    "modelos de datadoras",
    "lista de equipamentos",
    "especificações técnicas",
]

MULTI_QUERY_TYPES = frozenset({QueryType.AGGREGATION, QueryType.EXPLORATORY})


def _compile(patterns: list[str]) -> list[re.Pattern[str]]:
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]


_GREETING_RES = _compile(GREETING_PATTERNS)
_TYPE_LADDER_RES = [(query_type, _compile(patterns)) for query_type, patterns in TYPE_LADDER]
_COUNT_RE = re.compile(COUNT_PATTERN, re.IGNORECASE)
_NON_WORD_RE = re.compile(r"[^\w]")


def determine_context_size(query_type: QueryType, is_count_query: bool, category_count: int) -> int:
    """Number of chunks to retrieve for a question.

    Count questions are raised to at least ``COUNT_MIN_CONTEXT`` first, then
    aggregation questions naming a category are capped at
    ``FOCUSED_AGGREGATION_MAX_CONTEXT``.
    """
    size = BASE_CONTEXT_SIZES[query_type]

    if is_count_query:
        size = max(size, COUNT_MIN_CONTEXT)

    if category_count > 0 and query_type == QueryType.AGGREGATION:
        size = min(size, FOCUSED_AGGREGATION_MAX_CONTEXT)

    return size


class QueryAnalyzer:
    """Classify user questions and plan their retrieval.

    Deterministic and free of I/O: the same question always yields the same
    analysis.
    """

    def analyze(self, question: str) -> QueryAnalysis:
        text = question.lower().strip()

        # Greetings never trigger retrieval, whatever else the text contains.
        if self.is_greeting(text):
            return QueryAnalysis(type=QueryType.GREETING, context_size=0)

        categories = self.detect_categories(text)
        keywords = self.extract_keywords(text)
        query_type = self.detect_query_type(text)
        is_count_query = bool(_COUNT_RE.search(text))
        needs_multi_query = query_type in MULTI_QUERY_TYPES

        return QueryAnalysis(
            type=query_type,
            context_size=determine_context_size(query_type, is_count_query, len(categories)),
            needs_multi_query=needs_multi_query,
            suggested_queries=self.generate_sub_queries(query_type, categories),
            categories=categories,
            keywords=keywords,
            is_count_query=is_count_query,
            requires_full_scan=is_count_query,
        )

    def is_greeting(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in _GREETING_RES)

    def detect_query_type(self, text: str) -> QueryType:
        for query_type, patterns in _TYPE_LADDER_RES:
            if any(pattern.search(text) for pattern in patterns):
                return query_type
        return QueryType.FACTUAL

    def detect_categories(self, text: str) -> list[str]:
        return [
            category
            for category, triggers in CATEGORY_KEYWORDS.items()
            if any(trigger in text for trigger in triggers)
        ]

    def extract_keywords(self, text: str) -> list[str]:
        keywords = []
        for token in text.split():
            word = _NON_WORD_RE.sub("", token).lower()
            if len(word) > 2 and word not in STOPWORDS:
                keywords.append(word)
        return keywords

    def generate_sub_queries(self, query_type: QueryType, categories: list[str]) -> list[str]:
        """Alternate phrasings used by the multi-query fan-out."""
        if query_type not in MULTI_QUERY_TYPES:
            return []

        if not categories:
            return list(GENERIC_CATALOG_QUERIES)

        return [
            template.format(category=category)
            for category in categories
            for template in CATEGORY_QUERY_TEMPLATES
        ]
