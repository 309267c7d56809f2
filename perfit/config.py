import os
from pydantic import BaseModel


class Settings(BaseModel):
    api_key: str = os.getenv("API_KEY", "change-me")

    # JWT
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    jwt_audience: str | None = os.getenv("JWT_AUDIENCE")
    jwt_issuer: str | None = os.getenv("JWT_ISSUER")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", "3600"))

    # Rate limit (token bucket)
    rate_limit_per_min: int = int(os.getenv("RATE_LIMIT_PER_MIN", "60"))
    rate_limit_burst: int = int(os.getenv("RATE_LIMIT_BURST", "30"))

    # Last-recommendation cache TTL seconds
    cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "600"))

    # Generic chart used when a product page has neither table nor model data: mens | womens
    fallback_chart: str = os.getenv("FALLBACK_CHART", "mens")


settings = Settings()
