"""Environment configuration for the export service.

Settings are read from environment variables, optionally seeded from a
``.env`` file at the repository root.
"""

import os
from functools import lru_cache
from pathlib import Path


# Load .env file if it exists
def _load_dotenv():
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()
                    if key and value and key not in os.environ:
                        os.environ[key] = value

_load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # Application
        self.app_name: str = os.environ.get("APP_NAME", "deckport")
        self.app_version: str = os.environ.get("APP_VERSION", "0.1.0")
        self.api_prefix: str = os.environ.get("API_PREFIX", "/api")

        # Server settings
        self.host: str = os.environ.get("HOST", "0.0.0.0")
        self.port: int = int(os.environ.get("PORT", "8000"))
        self.debug: bool = os.environ.get("DEBUG", "false").lower() == "true"
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()

        # CORS settings
        self.cors_origins: list = os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
        ).split(",")

        # Export settings
        self.export_scale: float = float(os.environ.get("EXPORT_SCALE", "2"))
        self.rasterize_timeout_seconds: float = float(os.environ.get("RASTERIZE_TIMEOUT_SECONDS", "30"))
        self.max_concurrent_rasterizations: int = int(os.environ.get("MAX_CONCURRENT_RASTERIZATIONS", "4"))

        # Typography defaults for mixed text runs
        self.default_font_family: str = os.environ.get("DEFAULT_FONT_FAMILY", "Arial")
        self.default_font_style: str = os.environ.get("DEFAULT_FONT_STYLE", "Regular")
        self.default_font_size: float = float(os.environ.get("DEFAULT_FONT_SIZE", "12"))

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins with blanks removed."""
        return [origin.strip() for origin in self.cors_origins if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
