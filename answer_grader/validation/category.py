"""
Question category resolution.

The service's category label is used when it names (or is a known alias of)
one of our categories; otherwise a keyword classifier over the question text
decides.
"""
from typing import Any, Dict, List, Tuple

from ..models.evaluation import CATEGORIES

DEFAULT_CATEGORY = "general"

# Checked in order; the first category with a matching keyword wins
CATEGORY_KEYWORDS: List[Tuple[str, List[str]]] = [
    ("incident", [
        "incident", "outage", "failure", "postmortem", "post-mortem", "on-call",
        "troubleshoot", "debug", "root cause", "production issue", "downtime",
        "장애", "트러블슈팅", "디버깅", "원인 분석",
    ]),
    ("architecture", [
        "architecture", "system design", "design a", "scalab", "microservice",
        "monolith", "distributed", "load balanc", "high availability",
        "아키텍처", "설계", "확장성", "분산",
    ]),
    ("data", [
        "data", "database", "sql", "query", "index", "pipeline", "etl",
        "analytics", "machine learning", "model training", "warehouse",
        "데이터", "데이터베이스", "쿼리", "분석",
    ]),
    ("tech", [
        "algorithm", "performance", "optimiz", "memory", "thread", "concurren",
        "api", "framework", "language", "compiler", "network", "cache",
        "test", "code review", "refactor", "security",
        "알고리즘", "성능", "최적화", "메모리", "기술", "코드",
    ]),
    ("behavior", [
        "team", "conflict", "lead", "mentor", "disagree", "feedback",
        "mistake", "challenge you faced", "tell me about a time", "motivat",
        "strength", "weakness", "collaborat", "communicat", "deadline",
        "협업", "갈등", "리더십", "팀", "동료", "실패 경험", "강점", "약점",
    ]),
]

CATEGORY_ALIASES: Dict[str, str] = {
    "culture": "behavior",
    "collaboration": "behavior",
    "ownership": "behavior",
    "teamwork": "behavior",
    "leadership": "behavior",
    "communication": "behavior",
    "behavioral": "behavior",
    "tech_depth": "tech",
    "technical": "tech",
    "problem_solving": "tech",
    "coding": "tech",
    "system_design": "architecture",
    "design": "architecture",
    "troubleshooting": "incident",
    "outage": "incident",
    "debugging": "incident",
    "database": "data",
    "analytics": "data",
    "ml": "data",
}


def classify_question(question: Any) -> str:
    """Keyword classifier over the question text (case-insensitive)."""
    if not isinstance(question, str) or not question.strip():
        return DEFAULT_CATEGORY

    text = question.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def resolve_category(raw_category: Any, question: Any = "") -> str:
    """
    Resolve the category of an evaluation.

    Args:
        raw_category: Category label from the service (any type)
        question: Original question text for the fallback classifier

    Returns:
        One of CATEGORIES
    """
    if isinstance(raw_category, str):
        label = raw_category.strip().lower().replace("-", "_").replace(" ", "_")
        if label in CATEGORIES:
            return label
        if label in CATEGORY_ALIASES:
            return CATEGORY_ALIASES[label]
    return classify_question(question)
