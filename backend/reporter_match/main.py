import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from reporter_match import schemas
from reporter_match.config.outlets import GeographyFilter, OutletType
from reporter_match.config.settings import settings
from reporter_match.db import get_db, init_db, shutdown_db
from reporter_match.logging_config import configure_logging
from reporter_match.services.embedding import EmbeddingError, OpenAIEmbeddingProvider
from reporter_match.services.search_service import SearchService

configure_logging()
logger = logging.getLogger(__name__)

ENUM_FIELDS: dict[str, list[str]] = {
    "outlet_types": [t.value for t in OutletType],
    "geography": [g.value for g in GeographyFilter],
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    embedder = OpenAIEmbeddingProvider()
    app.state.search_service = SearchService(embedder)
    try:
        yield
    finally:
        embedder.shutdown()
        shutdown_db()


app = FastAPI(title="Reporter Match API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def validation_error_body(errors: list[dict]) -> schemas.ErrorResponse:
    first = errors[0]
    if first["type"] == "json_invalid":
        return schemas.ErrorResponse(error="Request body must be valid JSON")
    loc = [part for part in first["loc"] if part != "body"]
    if not loc:
        return schemas.ErrorResponse(error="Request body must be a JSON object")

    field = str(loc[0])
    if field == "brief":
        return schemas.ErrorResponse(error=schemas.BRIEF_REQUIRED_MESSAGE)

    if field in ENUM_FIELDS:
        invalid = [
            str(err.get("input"))
            for err in errors
            if err["type"] == "enum" and [p for p in err["loc"] if p != "body"][:1] == [field]
        ]
        if invalid:
            return schemas.ErrorResponse(error=f"Invalid {field}: {', '.join(invalid)}", valid=ENUM_FIELDS[field])
        return schemas.ErrorResponse(error=f"{field} must be an array", valid=ENUM_FIELDS[field])

    return schemas.ErrorResponse(error=f"{field}: {first['msg']}")


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = validation_error_body(list(exc.errors()))
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


@app.get("/health", response_model=schemas.HealthResponse)
def health() -> schemas.HealthResponse:
    return schemas.HealthResponse()


@app.post(
    "/api/search",
    response_model=schemas.SearchResponse,
    responses={400: {"model": schemas.ErrorResponse}, 502: {"model": schemas.ErrorResponse}},
)
def search(
    payload: schemas.SearchRequest,
    db: Session = Depends(get_db),
    search_service: SearchService = Depends(get_search_service),
):
    try:
        return search_service.search(db, payload)
    except EmbeddingError as exc:
        logger.error("Embedding step failed: %s", exc)
        return JSONResponse(status_code=502, content={"error": f"Embedding failed: {exc}"})
    except Exception:
        logger.exception("Search failed")
        return JSONResponse(status_code=500, content={"error": "Search failed"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("reporter_match.main:app", host="0.0.0.0", port=4000, reload=True)
