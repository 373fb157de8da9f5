"""Application settings."""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the co-signing service, read from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "signflow"
    api_v1_str: str = "/api/v1"
    environment: str = "dev"
    testing: bool = False

    # Document store
    documents_db_uri: str = "data/documents.db"

    # Content store
    content_store_provider: Literal["filesystem", "pinata"] = "filesystem"
    content_store_dir: str = "data/content"
    content_store_timeout_seconds: float = Field(default=30.0, gt=0)
    max_content_bytes: int = Field(default=25 * 1024 * 1024, gt=0)  # 25MB
    pinata_api_url: str = "https://api.pinata.cloud/pinning/pinFileToIPFS"
    pinata_gateway_url: str = "https://gateway.pinata.cloud/ipfs"
    pinata_api_key: Optional[str] = None
    pinata_secret_api_key: Optional[str] = None

    # Auth
    jwt_secret: str = "change-me-signflow-development-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24
    login_password: str = "signflow"

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
