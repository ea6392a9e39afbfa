from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reporter_match import models
from reporter_match.services.embedding import EmbeddingProvider
from reporter_match.services.outlet_classifier import classify_geography, classify_outlet

logger = logging.getLogger(__name__)


@dataclass
class ArticleUpsertResult:
    article_id: str
    deduped: bool


class ArticleService:
    def create_article(
        self,
        db: Session,
        *,
        url: str,
        title: str,
        outlet: str,
        author: str | None = None,
        outlet_type: str | None = None,
        geography: str | None = None,
        section: str | None = None,
        published_at: datetime | None = None,
        summary: str | None = None,
        embedding: list[float] | None = None,
    ) -> ArticleUpsertResult:
        # url identifies an article; a repeat is a no-op, never an update
        existing = db.query(models.Article).filter(models.Article.url == url).first()
        if existing:
            return ArticleUpsertResult(article_id=existing.id, deduped=True)

        article = models.Article(
            url=url,
            title=title,
            author=author or None,
            outlet=outlet,
            outlet_type=outlet_type or classify_outlet(outlet).value,
            geography=geography or classify_geography(outlet).value,
            section=section,
            published_at=published_at,
            summary=summary,
            embedding=embedding,
        )
        db.add(article)
        try:
            db.commit()
            db.refresh(article)
            return ArticleUpsertResult(article_id=article.id, deduped=False)
        except IntegrityError:
            db.rollback()
            existing_by_url = db.query(models.Article).filter(models.Article.url == url).first()
            if existing_by_url:
                return ArticleUpsertResult(article_id=existing_by_url.id, deduped=True)
            raise

    def embed_missing(self, db: Session, provider: EmbeddingProvider, batch_size: int = 100) -> int:
        pending = db.query(models.Article).filter(models.Article.embedding.is_(None)).all()
        logger.info("%d articles need embeddings", len(pending))

        embedded = 0
        for start in range(0, len(pending), batch_size):
            batch = pending[start : start + batch_size]
            vectors = provider.embed_batch([f"{a.title}. {a.summary or ''}" for a in batch])
            for article, vector in zip(batch, vectors):
                article.embedding = list(vector)
            db.commit()
            embedded += len(batch)
            logger.info("Embedded %d/%d", embedded, len(pending))
        return embedded
