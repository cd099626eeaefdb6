import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Environment / logging
    RUST_ENV: str = ""
    RUST_LOG: str = "info"

    # Content
    CONTENT_DIR: str = "content"
    DEBOUNCE_MS: int = 200

    @property
    def is_development(self) -> bool:
        return self.RUST_ENV == "development"

    @property
    def content_path(self) -> Path:
        return Path(self.CONTENT_DIR)

    @property
    def posts_path(self) -> Path:
        return self.content_path / "posts"

    @property
    def static_path(self) -> Path:
        return self.content_path / "static"

    @property
    def log_level(self) -> int:
        """Numeric logging level for RUST_LOG.

        Accepts a bare level ("debug") or comma separated directives
        ("hyper=warn,debug"); the last recognised level wins.
        """
        level = logging.INFO
        for directive in self.RUST_LOG.split(","):
            name = directive.rsplit("=", 1)[-1].strip().upper()
            if name == "TRACE":
                name = "DEBUG"
            candidate = logging.getLevelName(name)
            if isinstance(candidate, int):
                level = candidate
        return level


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
