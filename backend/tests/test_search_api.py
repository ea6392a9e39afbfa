from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from reporter_match.db import get_db
from reporter_match.main import app, get_search_service
from reporter_match.services.article_service import ArticleService
from reporter_match.services.article_store import ArticleStoreError
from reporter_match.services.embedding import EmbeddingError
from reporter_match.services.enrichment import ContactInfo
from reporter_match.services.search_service import SearchService


@pytest.fixture
def service_holder(fake_embedder):
    return {"service": SearchService(fake_embedder)}


@pytest.fixture
def client(session_factory, service_holder):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_search_service] = lambda: service_holder["service"]
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _seed_corpus(db):
    fresh = datetime.now(timezone.utc) - timedelta(days=5)
    service = ArticleService()
    service.create_article(
        db,
        url="https://example.com/battery-1",
        title="Battery breakthrough",
        outlet="TechCrunch",
        author="Jane Smith",
        published_at=fresh,
        embedding=[1.0, 0.0, 0.0],
    )
    service.create_article(
        db,
        url="https://example.com/battery-2",
        title="EV supply chain shifts",
        outlet="TechCrunch",
        author="Jane Smith",
        published_at=fresh,
        embedding=[0.8, 0.6, 0.0],
    )
    service.create_article(
        db,
        url="https://example.com/grid",
        title="Grid storage demand",
        outlet="Utility Dive",
        author="Bob Jones",
        published_at=fresh,
        embedding=[0.6, 0.8, 0.0],
    )
    service.create_article(
        db,
        url="https://example.com/unsigned",
        title="Unsigned wire copy",
        outlet="Reuters",
        author=None,
        published_at=fresh,
        embedding=[1.0, 0.0, 0.0],
    )


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize("payload", [{"brief": ""}, {"brief": "   "}, {}, {"brief": 42}])
def test_missing_or_blank_brief_is_rejected_before_embedding(client, fake_embedder, payload):
    response = client.post("/api/search", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "brief is required and must be a non-empty string"}
    assert fake_embedder.calls == []


def test_invalid_outlet_type_lists_valid_values(client, fake_embedder):
    response = client.post("/api/search", json={"brief": "Robots", "outlet_types": ["regional", "blog"]})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid outlet_types: blog"
    assert body["valid"] == ["national_business_tech", "trade_specialist", "regional", "newsletter", "podcast"]
    assert fake_embedder.calls == []


def test_invalid_geography_lists_valid_values(client):
    response = client.post("/api/search", json={"brief": "Robots", "geography": ["apac"]})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid geography: apac", "valid": ["us", "us_eu_uk", "global"]}


def test_non_array_filter_is_rejected(client):
    response = client.post("/api/search", json={"brief": "Robots", "geography": "us"})

    assert response.status_code == 400
    assert response.json()["error"] == "geography must be an array"


def test_no_candidates_returns_empty_result(client, fake_embedder):
    response = client.post("/api/search", json={"brief": "Restaurant robotics"})

    assert response.status_code == 200
    assert response.json() == {"reporters": [], "total": 0}
    assert fake_embedder.calls == ["Restaurant robotics"]


def test_search_ranks_reporters_with_contacts_and_evidence(client, session_factory, fake_embedder):
    db = session_factory()
    try:
        _seed_corpus(db)
    finally:
        db.close()

    response = client.post(
        "/api/search",
        json={"brief": "Battery startup", "focus_publications": "TechCrunch", "competitors": ""},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert fake_embedder.calls == ["Battery startup Focus publications: TechCrunch."]

    top, second = body["reporters"]
    assert top["reporter"]["id"] == ""
    assert top["reporter"]["name"] == "Jane Smith"
    assert top["reporter"]["outlet"] == "TechCrunch"
    assert top["reporter"]["title"] is None
    assert top["reporter"]["beat"] is None
    assert top["reporter"]["email"] == "jane.smith@techcrunch.com"
    assert 0.5 <= top["reporter"]["email_confidence"] <= 0.95
    assert top["score"] == pytest.approx(0.95)
    assert [a["similarity"] for a in top["articles"]] == [1.0, 0.8]
    assert top["justification"] == (
        "Jane Smith has 2 recent articles closely matching your brief "
        '(top match: 100% similarity on "Battery breakthrough"). Overall relevance score: 95%.'
    )
    assert second["reporter"]["name"] == "Bob Jones"
    assert second["score"] == pytest.approx(0.8)


def test_outlet_filter_restricts_candidates(client, session_factory):
    db = session_factory()
    try:
        _seed_corpus(db)
    finally:
        db.close()

    response = client.post("/api/search", json={"brief": "Grid batteries", "outlet_types": ["trade_specialist"]})

    assert response.status_code == 200
    names = [r["reporter"]["name"] for r in response.json()["reporters"]]
    assert names == ["Bob Jones"]


class _FailingEmbedder:
    def embed(self, text):
        raise EmbeddingError("OPENAI_API_KEY is not set")

    def embed_batch(self, texts):
        raise EmbeddingError("OPENAI_API_KEY is not set")


def test_embedding_failure_is_reported_as_embedding_error(client, service_holder):
    service_holder["service"] = SearchService(_FailingEmbedder())

    response = client.post("/api/search", json={"brief": "Battery startup"})

    assert response.status_code == 502
    assert response.json() == {"error": "Embedding failed: OPENAI_API_KEY is not set"}


class _BrokenStore:
    def similarity_search(self, db, query):
        raise ArticleStoreError("connection refused to db.internal:5432")


def test_store_failure_is_reported_generically(client, service_holder, fake_embedder):
    service_holder["service"] = SearchService(fake_embedder, store=_BrokenStore())

    response = client.post("/api/search", json={"brief": "Battery startup"})

    assert response.status_code == 500
    assert response.json() == {"error": "Search failed"}


class _BrokenEnricher:
    def enrich(self, name, outlet) -> ContactInfo:
        raise TimeoutError("enrichment timed out")


def test_enrichment_failure_only_blanks_contact_fields(client, service_holder, session_factory, fake_embedder):
    db = session_factory()
    try:
        _seed_corpus(db)
    finally:
        db.close()
    service_holder["service"] = SearchService(fake_embedder, enricher=_BrokenEnricher())

    response = client.post("/api/search", json={"brief": "Battery startup"})

    assert response.status_code == 200
    reporters = response.json()["reporters"]
    assert len(reporters) == 2
    assert all(r["reporter"]["email"] is None for r in reporters)
    assert all(r["reporter"]["email_confidence"] is None for r in reporters)
