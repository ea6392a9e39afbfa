"""Load articles from a JSON export into the article store.

Usage: python -m reporter_match.seed data/seed-articles.json [--embed-missing]
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reporter_match.config.settings import settings
from reporter_match.db import SessionLocal, init_db, shutdown_db
from reporter_match.logging_config import configure_logging
from reporter_match.services.article_service import ArticleService
from reporter_match.services.embedding import OpenAIEmbeddingProvider

logger = logging.getLogger(__name__)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse_embedding(value: Any) -> list[float] | None:
    if value is None:
        return None
    # pgvector text exports look like "[0.1,0.2,...]"
    if isinstance(value, str):
        value = json.loads(value)
    return [float(x) for x in value]


def load_seed_file(db: Session, path: Path, article_service: ArticleService | None = None) -> dict[str, int]:
    article_service = article_service or ArticleService()
    records = json.loads(path.read_text(encoding="utf-8"))

    inserted = 0
    skipped = 0
    failed = 0
    for record in records:
        try:
            result = article_service.create_article(
                db,
                url=record["url"],
                title=record["title"],
                outlet=record["outlet"],
                author=record.get("author"),
                outlet_type=record.get("outlet_type"),
                geography=record.get("geography"),
                section=record.get("section"),
                published_at=_parse_datetime(record.get("published_at")),
                summary=record.get("summary"),
                embedding=_parse_embedding(record.get("embedding")),
            )
        except (KeyError, TypeError, ValueError, SQLAlchemyError):
            db.rollback()
            url = record.get("url") if isinstance(record, dict) else None
            logger.warning("Skipped seed article: %s", url, exc_info=True)
            failed += 1
            continue
        if result.deduped:
            skipped += 1
        else:
            inserted += 1
    return {"inserted": inserted, "skipped": skipped, "failed": failed}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Load seed articles into the article store.")
    parser.add_argument("path", type=Path, help="JSON array of articles")
    parser.add_argument(
        "--embed-missing",
        action="store_true",
        help="embed articles without a vector using the configured provider",
    )
    args = parser.parse_args(argv)

    configure_logging()
    init_db()
    db = SessionLocal()
    try:
        counts = load_seed_file(db, args.path)
        logger.info(
            "Loaded %d articles (%d already present, %d failed)",
            counts["inserted"],
            counts["skipped"],
            counts["failed"],
        )

        if args.embed_missing:
            provider = OpenAIEmbeddingProvider()
            try:
                ArticleService().embed_missing(db, provider, batch_size=settings.EMBEDDING_BATCH_SIZE)
            finally:
                provider.shutdown()
    finally:
        db.close()
        shutdown_db()


if __name__ == "__main__":
    main()
