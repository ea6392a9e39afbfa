from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import numpy as np
from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reporter_match import models
from reporter_match.services.query_builder import ArticleQuery, InSet, NotNull, Predicate

logger = logging.getLogger(__name__)

_MATCH_COLUMNS = (
    models.Article.id,
    models.Article.title,
    models.Article.author,
    models.Article.outlet,
    models.Article.outlet_type,
    models.Article.url,
    models.Article.published_at,
    models.Article.summary,
)


class ArticleStoreError(RuntimeError):
    pass


@dataclass(frozen=True)
class ArticleMatch:
    id: str
    title: str
    author: str | None
    outlet: str
    outlet_type: str | None
    url: str
    published_at: datetime | None
    summary: str | None
    similarity: float


class ArticleStore(Protocol):

    def similarity_search(self, db: Session, query: ArticleQuery) -> list[ArticleMatch]:
        ...


def compile_predicates(predicates: list[Predicate]) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []
    for predicate in predicates:
        column = getattr(models.Article, predicate.column, None)
        if column is None:
            raise ValueError(f"Unknown article column: {predicate.column}")
        if isinstance(predicate, NotNull):
            clauses.append(column.is_not(None))
        elif isinstance(predicate, InSet):
            clauses.append(column.in_(predicate.values))
        else:
            raise TypeError(f"Unsupported predicate: {predicate!r}")
    return clauses


class SqlArticleStore:
    """Cosine-similarity search over the ``articles`` table.

    PostgreSQL sessions rank inside the database with pgvector's ``<=>``
    operator. Any other dialect applies the filters in SQL and ranks the
    surviving rows exactly with numpy, which is what tests and local SQLite
    setups use.
    """

    def similarity_search(self, db: Session, query: ArticleQuery) -> list[ArticleMatch]:
        try:
            clauses = compile_predicates(query.predicates)
            if db.get_bind().dialect.name == "postgresql":
                return self._search_pgvector(db, query, clauses)
            return self._search_scan(db, query, clauses)
        except (SQLAlchemyError, ValueError, TypeError) as exc:
            logger.exception("Article similarity query failed")
            raise ArticleStoreError(str(exc)) from exc

    def _search_pgvector(
        self,
        db: Session,
        query: ArticleQuery,
        clauses: list[ColumnElement[bool]],
    ) -> list[ArticleMatch]:
        distance = models.Article.embedding.cosine_distance(list(query.vector))
        stmt = (
            select(*_MATCH_COLUMNS, distance.label("distance"))
            .where(*clauses)
            .order_by(distance)
            .limit(query.limit)
        )
        return [self._to_match(row, 1.0 - float(row.distance)) for row in db.execute(stmt)]

    def _search_scan(
        self,
        db: Session,
        query: ArticleQuery,
        clauses: list[ColumnElement[bool]],
    ) -> list[ArticleMatch]:
        rows = db.execute(select(*_MATCH_COLUMNS, models.Article.embedding).where(*clauses)).all()
        if not rows:
            return []

        matrix = np.asarray([row.embedding for row in rows], dtype=np.float64)
        vector = np.asarray(query.vector, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[1] != vector.shape[0]:
            raise ValueError(
                f"Query vector has {vector.shape[0]} dimensions, stored embeddings have shape {matrix.shape}"
            )
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(vector)
        similarities = matrix @ vector / (norms + 1e-10)

        order = np.argsort(-similarities, kind="stable")[: query.limit]
        return [self._to_match(rows[int(idx)], float(similarities[idx])) for idx in order]

    @staticmethod
    def _to_match(row, similarity: float) -> ArticleMatch:
        return ArticleMatch(
            id=row.id,
            title=row.title,
            author=row.author,
            outlet=row.outlet,
            outlet_type=row.outlet_type,
            url=row.url,
            published_at=row.published_at,
            summary=row.summary,
            similarity=similarity,
        )
