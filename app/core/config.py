from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    # ----------------------------------
    # App General Info
    # ----------------------------------
    PROJECT_NAME: str = "Chat Insights"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = Field(
        default="development",
        description="Current environment: development, testing, staging, or production"
    )
    LOG_LEVEL: str = Field(default="INFO", description="Root logging level")

    # ----------------------------------
    # Relational Database (questions & answers)
    # ----------------------------------
    DATABASE_URL: str = Field(default="sqlite:///./chat_insights.db")
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements to the log")

    # ----------------------------------
    # Trends / keyword extraction
    # ----------------------------------
    KEYWORD_DEFAULT_LIMIT: int = Field(default=20, ge=1, description="Top-N keywords when no limit is given")
    KEYWORD_MIN_LENGTH: int = Field(default=3, ge=1, description="Shorter tokens are discarded")
    KEYWORD_EXTRA_STOPWORDS: List[str] = Field(
        default_factory=list,
        description="Additional stopwords merged into the built-in list (JSON list in env).",
    )

    # ----------------------------------
    # MCP tool server (chat-turn capture)
    # ----------------------------------
    MCP_SERVER_NAME: str = Field(default="chat-insights-mcp")
    MCP_ALLOWED_HOSTS: List[str] = Field(
        default_factory=list,
        description="Host headers accepted by /mcp (e.g. [\"insights.internal:*\"]). Empty disables Host/Origin checks.",
    )
    MCP_ALLOWED_ORIGINS: List[str] = Field(
        default_factory=list,
        description="Origin headers accepted by /mcp when host checks are enabled.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

settings = Settings()
