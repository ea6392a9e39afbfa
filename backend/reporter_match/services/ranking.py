"""Group article matches by reporter and rank the reporters.

A reporter is the verbatim ``(author, outlet)`` pair found on matched
articles. Byline variants of the same person are separate reporters; identity
merging is not done here.

Each reporter's composite score is::

    score = w_sim * mean(similarity) + w_rec * max(recency) + w_out * outlet_relevance

with the default weights 0.5 / 0.3 / 0.2.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from reporter_match.services.article_store import ArticleMatch

MAX_EVIDENCE_ARTICLES = 3
DEFAULT_TOP_N = 15

NULL_OR_MISMATCHED_OUTLET_SCORE = 0.3


@dataclass(frozen=True)
class RankingWeights:
    similarity: float = 0.5
    recency: float = 0.3
    outlet_relevance: float = 0.2


DEFAULT_WEIGHTS = RankingWeights()


@dataclass(frozen=True)
class ReporterKey:
    author: str
    outlet: str


@dataclass
class ScoredReporter:
    name: str
    outlet: str
    outlet_type: str | None
    score: float
    similarity_score: float
    recency_score: float
    outlet_relevance_score: float
    articles: list[ArticleMatch]


def recency_score(published_at: datetime | None, now: datetime | None = None) -> float:
    if published_at is None:
        return 0.2

    now = now or datetime.now(timezone.utc)
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    days_ago = (now - published_at).total_seconds() / 86400

    if days_ago <= 90:
        return 1.0
    if days_ago <= 180:
        return 0.5
    return 0.2


def outlet_relevance_score(outlet_type: str | None, selected_types: Collection[str]) -> float:
    if not selected_types:
        return 1.0
    if outlet_type is None:
        return NULL_OR_MISMATCHED_OUTLET_SCORE
    return 1.0 if outlet_type in selected_types else NULL_OR_MISMATCHED_OUTLET_SCORE


def group_by_reporter(matches: Iterable[ArticleMatch]) -> dict[ReporterKey, list[ArticleMatch]]:
    groups: dict[ReporterKey, list[ArticleMatch]] = {}
    for match in matches:
        if not match.author:
            continue
        groups.setdefault(ReporterKey(author=match.author, outlet=match.outlet), []).append(match)
    return groups


def rank_reporters(
    matches: Iterable[ArticleMatch],
    selected_outlet_types: Iterable[str] = (),
    top_n: int = DEFAULT_TOP_N,
    *,
    weights: RankingWeights = DEFAULT_WEIGHTS,
    now: datetime | None = None,
) -> list[ScoredReporter]:
    selected = {str(outlet_type) for outlet_type in selected_outlet_types}
    now = now or datetime.now(timezone.utc)

    scored: list[ScoredReporter] = []
    for key, articles in group_by_reporter(matches).items():
        similarity = sum(a.similarity for a in articles) / len(articles)
        recency = max(recency_score(a.published_at, now) for a in articles)
        # every article in a group shares the outlet, hence the outlet type
        outlet_type = articles[0].outlet_type
        outlet_relevance = outlet_relevance_score(outlet_type, selected)

        score = (
            weights.similarity * similarity
            + weights.recency * recency
            + weights.outlet_relevance * outlet_relevance
        )
        evidence = sorted(articles, key=lambda a: a.similarity, reverse=True)[:MAX_EVIDENCE_ARTICLES]
        scored.append(
            ScoredReporter(
                name=key.author,
                outlet=key.outlet,
                outlet_type=outlet_type,
                score=score,
                similarity_score=similarity,
                recency_score=recency,
                outlet_relevance_score=outlet_relevance,
                articles=evidence,
            )
        )

    # equal scores fall back to name, then outlet, so order never depends on the store
    scored.sort(key=lambda r: (-r.score, r.name, r.outlet))
    return scored[:top_n]
