from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./reporter_match.db"

    OPENAI_API_KEY: str = ""
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_DIMENSIONS: int = 1536
    # OpenAI accepts up to 2048 inputs per embeddings call
    EMBEDDING_BATCH_SIZE: int = 100
    EMBEDDING_TIMEOUT_SECONDS: float = 30.0

    CANDIDATE_POOL_SIZE: int = 100
    MAX_REPORTERS: int = 15

    WEIGHT_SIMILARITY: float = 0.5
    WEIGHT_RECENCY: float = 0.3
    WEIGHT_OUTLET_RELEVANCE: float = 0.2

    REFINEMENT_POLICY: str = "blend"
    REFINEMENT_ALPHA: float = 0.35

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    CORS_ALLOW_ORIGINS: list[str] = ["http://localhost:3000"]


settings = Settings()
