"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///./database.sqlite"

    # Application
    debug: bool = False
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Product API (consumed by the MCP tool server)
    product_api_url: str = "http://localhost:3000/api"
    product_api_timeout: float = 30.0  # seconds

    # MCP tool server
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 3001
    mcp_path: str = "/mcp"


settings = Settings()
