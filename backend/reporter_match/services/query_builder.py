from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from reporter_match.config.outlets import GEOGRAPHY_REGIONS, GeographyFilter, OutletType, Region

CANDIDATE_POOL_SIZE = 100


@dataclass(frozen=True)
class NotNull:
    column: str


@dataclass(frozen=True)
class InSet:
    column: str
    values: tuple[str, ...]


Predicate = NotNull | InSet


@dataclass(frozen=True)
class ArticleQuery:
    """Nearest-neighbour lookup against the article store.

    ``predicates`` is an ordered list of filter clauses; store adapters compile
    them into their own query language. Results come back nearest first.
    """

    vector: Sequence[float]
    predicates: list[Predicate] = field(default_factory=list)
    limit: int = CANDIDATE_POOL_SIZE


def enrich_brief(brief: str, focus_publications: str | None = None, competitors: str | None = None) -> str:
    enriched = brief
    if focus_publications and focus_publications.strip():
        enriched += f" Focus publications: {focus_publications}."
    if competitors and competitors.strip():
        enriched += f" Competitors and context: {competitors}."
    return enriched


def build_refinement_text(brief: str, refinements: Iterable[str]) -> str:
    return ". ".join([brief, *refinements])


def expand_geography(selections: Iterable[GeographyFilter | str]) -> frozenset[Region] | None:
    """Union the regions of every selected geography filter.

    Returns ``None`` when no restriction applies: nothing selected, or any
    selection is ``global``.
    """
    regions: set[Region] = set()
    selected = False
    for selection in selections:
        selected = True
        mapped = GEOGRAPHY_REGIONS[GeographyFilter(selection)]
        if mapped is None:
            return None
        regions |= mapped
    if not selected:
        return None
    return frozenset(regions)


def build_article_query(
    vector: Sequence[float],
    outlet_types: Iterable[OutletType | str] = (),
    geography: Iterable[GeographyFilter | str] = (),
    limit: int = CANDIDATE_POOL_SIZE,
) -> ArticleQuery:
    predicates: list[Predicate] = [NotNull("embedding"), NotNull("author")]

    wanted_types = sorted({OutletType(t).value for t in outlet_types})
    if wanted_types:
        predicates.append(InSet("outlet_type", tuple(wanted_types)))

    regions = expand_geography(geography)
    if regions is not None:
        predicates.append(InSet("geography", tuple(sorted(r.value for r in regions))))

    return ArticleQuery(vector=vector, predicates=predicates, limit=limit)
