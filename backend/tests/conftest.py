from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from reporter_match.db import build_engine, init_db
from reporter_match.services.article_store import ArticleMatch


class FakeEmbedder:
    def __init__(self, vectors: dict[str, list[float]] | None = None, default: list[float] | None = None) -> None:
        self.vectors = vectors or {}
        self.default = default or [1.0, 0.0, 0.0]
        self.calls: list[object] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        return self.vectors.get(text, self.default)

    def embed_batch(self, texts) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self.vectors.get(text, self.default) for text in texts]


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'reporter_match_test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def now():
    return datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_match(now):
    counter = {"n": 0}

    def _make(
        author: str | None = "Jane Smith",
        outlet: str = "TechCrunch",
        similarity: float = 0.8,
        days_ago: float | None = 5,
        outlet_type: str | None = "national_business_tech",
        title: str | None = None,
    ) -> ArticleMatch:
        counter["n"] += 1
        n = counter["n"]
        return ArticleMatch(
            id=f"article-{n}",
            title=title or f"Story {n}",
            author=author,
            outlet=outlet,
            outlet_type=outlet_type,
            url=f"https://example.com/story-{n}",
            published_at=None if days_ago is None else now - timedelta(days=days_ago),
            summary=None,
            similarity=similarity,
        )

    return _make


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()
