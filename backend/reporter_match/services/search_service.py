from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import TypeVar

from sqlalchemy.orm import Session

from reporter_match import schemas
from reporter_match.config.settings import settings
from reporter_match.services.article_store import ArticleStore, SqlArticleStore
from reporter_match.services.embedding import EmbeddingError, EmbeddingProvider
from reporter_match.services.enrichment import ContactEnricher, MockContactEnricher, enrich_contact
from reporter_match.services.justification import build_justification, round_half_up
from reporter_match.services.query_builder import build_article_query, build_refinement_text, enrich_brief
from reporter_match.services.ranking import RankingWeights, ScoredReporter, rank_reporters
from reporter_match.services.vectors import blend

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RefinementPolicy(StrEnum):
    # embed the brief and each refinement separately, then blend the vectors
    BLEND = "blend"
    # join refinements onto the brief text and embed once
    CONCAT = "concat"


def weights_from_settings() -> RankingWeights:
    return RankingWeights(
        similarity=settings.WEIGHT_SIMILARITY,
        recency=settings.WEIGHT_RECENCY,
        outlet_relevance=settings.WEIGHT_OUTLET_RELEVANCE,
    )


class SearchService:
    def __init__(
        self,
        embedder: EmbeddingProvider,
        store: ArticleStore | None = None,
        enricher: ContactEnricher | None = None,
        *,
        weights: RankingWeights | None = None,
        candidate_pool_size: int | None = None,
        max_reporters: int | None = None,
        refinement_policy: RefinementPolicy | str | None = None,
        refinement_alpha: float | None = None,
    ) -> None:
        self.embedder = embedder
        self.store = store or SqlArticleStore()
        self.enricher = enricher or MockContactEnricher()
        self.weights = weights or weights_from_settings()
        self.candidate_pool_size = candidate_pool_size or settings.CANDIDATE_POOL_SIZE
        self.max_reporters = max_reporters or settings.MAX_REPORTERS
        self.refinement_policy = RefinementPolicy(refinement_policy or settings.REFINEMENT_POLICY)
        self.refinement_alpha = settings.REFINEMENT_ALPHA if refinement_alpha is None else refinement_alpha

    def search(self, db: Session, request: schemas.SearchRequest) -> schemas.SearchResponse:
        outlet_types = request.outlet_types or []
        geography = request.geography or []
        logger.info(
            "Searching reporters (outlet_types=%s, geography=%s, refinements=%d)",
            [t.value for t in outlet_types],
            [g.value for g in geography],
            len(request.refinements or []),
        )

        vector = self.embed_request(request)
        query = build_article_query(vector, outlet_types, geography, limit=self.candidate_pool_size)
        matches = self.store.similarity_search(db, query)
        logger.info("Found %d candidate articles", len(matches))
        if not matches:
            return schemas.SearchResponse(reporters=[], total=0)

        ranked = rank_reporters(matches, outlet_types, self.max_reporters, weights=self.weights)
        reporters = [self._to_ranked_reporter(reporter) for reporter in ranked]
        logger.info("Returning %d reporters", len(reporters))
        return schemas.SearchResponse(reporters=reporters, total=len(reporters))

    def embed_request(self, request: schemas.SearchRequest) -> list[float]:
        refinements = request.refinements or []

        if self.refinement_policy is RefinementPolicy.CONCAT:
            brief = build_refinement_text(request.brief, refinements) if refinements else request.brief
            text = enrich_brief(brief, request.focus_publications, request.competitors)
            return self._embedding_step(lambda: self.embedder.embed(text))

        text = enrich_brief(request.brief, request.focus_publications, request.competitors)
        if not refinements:
            return self._embedding_step(lambda: self.embedder.embed(text))

        vectors = self._embedding_step(lambda: self.embedder.embed_batch([text, *refinements]))
        vector = vectors[0]
        for refinement_vector in vectors[1:]:
            vector = blend(vector, refinement_vector, self.refinement_alpha)
        return vector

    @staticmethod
    def _embedding_step(call: Callable[[], T]) -> T:
        try:
            return call()
        except EmbeddingError:
            raise
        except Exception as exc:
            raise EmbeddingError(str(exc)) from exc

    def _to_ranked_reporter(self, reporter: ScoredReporter) -> schemas.RankedReporter:
        contact = enrich_contact(self.enricher, reporter.name, reporter.outlet)
        return schemas.RankedReporter(
            reporter=schemas.ReporterInfo(
                name=reporter.name,
                outlet=reporter.outlet,
                email=contact.email,
                email_confidence=contact.email_confidence,
                linkedin_url=contact.linkedin_url,
                twitter_handle=contact.twitter_handle,
            ),
            score=round_half_up(reporter.score),
            justification=build_justification(reporter.name, reporter.articles, reporter.score),
            articles=[
                schemas.ReporterArticle(
                    title=article.title,
                    url=article.url,
                    published_at=article.published_at,
                    similarity=round_half_up(article.similarity),
                )
                for article in reporter.articles
            ],
        )
