"""
Configuration module for the document search service.

Centralized configuration management using Pydantic settings.
All values can be overridden via environment variables or a .env file.
The OpenSearch and Cosmos DB variables are passed verbatim to their SDKs.
"""

from typing import Literal, Optional, Tuple

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Document search service configuration.

    Attributes:
        DOCUMENT_STORE: Backend holding documents (memory, opensearch, cosmos)
        OPENSEARCH_*: Connection settings for the OpenSearch cluster
        COSMOSDB_*: Connection settings for the Cosmos DB account
        READER_*: Extractive question answering model settings
        BASIC_AUTH_*: Credentials required on /documents routes
    """

    # Service configuration
    SERVICE_NAME: str = Field(default="docsearch")
    SERVICE_HOST: str = Field(default="0.0.0.0")
    SERVICE_PORT: int = Field(default=8000, ge=1, le=65535)
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    LOG_JSON: bool = Field(default=True, description="Render logs as JSON lines")

    # CORS
    CORS_ORIGINS: str = Field(default="*")

    # Document store selection
    DOCUMENT_STORE: Literal["memory", "opensearch", "cosmos"] = Field(
        default="memory",
        description="Backend used to persist and search documents",
    )

    # OpenSearch
    OPENSEARCH_SERVER: str = Field(default="localhost")
    OPENSEARCH_SERVER_PORT: int = Field(default=9200, ge=1, le=65535)
    OPENSEARCH_USER: str = Field(default="")
    OPENSEARCH_PASSWORD: str = Field(default="")
    OPENSEARCH_INDEX: str = Field(default="document")
    OPENSEARCH_USE_SSL: bool = Field(default=True)
    OPENSEARCH_VERIFY_CERTS: bool = Field(default=False)
    OPENSEARCH_TIMEOUT: int = Field(default=30, ge=1)

    # Cosmos DB
    COSMOSDB_CONNECTIONSTRING: str = Field(default="")
    COSMOSDB_DATABASE: str = Field(default="docsearch")
    COSMOSDB_CONTAINER: str = Field(default="documents")

    # Extractive QA
    READER_MODEL: str = Field(default="deepset/roberta-base-squad2")
    READER_USE_GPU: bool = Field(default=False)
    RETRIEVER_TOP_K: int = Field(default=10, ge=1, le=100)
    READER_TOP_K: int = Field(default=5, ge=1, le=50)

    # Listing
    LIST_DEFAULT_LIMIT: int = Field(default=100, ge=1)
    LIST_MAX_LIMIT: int = Field(default=1000, ge=1)

    # Basic authentication (disabled when username is empty)
    BASIC_AUTH_USERNAME: str = Field(default="")
    BASIC_AUTH_PASSWORD: str = Field(default="")
    BASIC_AUTH_PASSWORD_HASH: str = Field(
        default="",
        description="bcrypt hash, takes precedence over BASIC_AUTH_PASSWORD",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """
        Check cross-field requirements.

        Raises:
            ValueError: If the selected backend or auth setup is incomplete
        """
        if self.DOCUMENT_STORE == "cosmos" and not self.COSMOSDB_CONNECTIONSTRING:
            raise ValueError(
                "COSMOSDB_CONNECTIONSTRING is required when DOCUMENT_STORE=cosmos"
            )

        if self.BASIC_AUTH_USERNAME and not (
            self.BASIC_AUTH_PASSWORD or self.BASIC_AUTH_PASSWORD_HASH
        ):
            raise ValueError(
                "BASIC_AUTH_PASSWORD or BASIC_AUTH_PASSWORD_HASH is required "
                "when BASIC_AUTH_USERNAME is set"
            )

        if self.LIST_DEFAULT_LIMIT > self.LIST_MAX_LIMIT:
            raise ValueError("LIST_DEFAULT_LIMIT cannot exceed LIST_MAX_LIMIT")

        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def opensearch_http_auth(self) -> Optional[Tuple[str, str]]:
        """Credentials tuple for the OpenSearch client, None when anonymous."""
        if not self.OPENSEARCH_USER:
            return None
        return (self.OPENSEARCH_USER, self.OPENSEARCH_PASSWORD)

    @property
    def basic_auth_enabled(self) -> bool:
        return bool(self.BASIC_AUTH_USERNAME)


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
