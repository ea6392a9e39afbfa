from __future__ import annotations

import math
from collections.abc import Sequence

from reporter_match.services.article_store import ArticleMatch


def to_percent(value: float) -> int:
    """Round a 0-1 fraction to a whole percentage, halves rounding up."""
    return math.floor(value * 100 + 0.5)


def round_half_up(value: float, digits: int = 3) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def build_justification(name: str, articles: Sequence[ArticleMatch], score: float) -> str:
    if not articles:
        return f"{name} matches your brief. Overall relevance score: {to_percent(score)}%."

    top_article = articles[0]
    count = len(articles)
    plural = "s" if count > 1 else ""
    return (
        f"{name} has {count} recent article{plural} closely matching your brief "
        f'(top match: {to_percent(top_article.similarity)}% similarity on "{top_article.title}"). '
        f"Overall relevance score: {to_percent(score)}%."
    )
