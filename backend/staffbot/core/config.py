import sys

from pydantic import Field
from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"

DEFAULT_SYSTEM_PROMPT = (
    "Ты — полезный корпоративный ассистент компании Навикон. "
    "Отвечай кратко, вежливо, на русском языке."
)


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    COSMOS_DB_ENDPOINT: str = ""
    COSMOS_DB_KEY: str = ""
    COSMOS_DB_DATABASE: str = "staffbot-db"
    COSMOS_DB_EMPLOYEES_CONTAINER: str = "employees"
    COSMOS_DB_SESSIONS_CONTAINER: str = "sessions"

    OPENAI_ENDPOINT: str = ""
    OPENAI_API_KEY: str = ""
    OPENAI_API_VERSION: str = "2024-10-21"
    OPENAI_CHAT_MODEL: str = "gpt-4o-mini"
    OPENAI_MAX_TOKENS: int = 800
    OPENAI_TEMPERATURE: float = 0.2
    SYSTEM_PROMPT: str = DEFAULT_SYSTEM_PROMPT

    STORE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    OPENAI_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    MAX_HISTORY_MESSAGES: int = Field(default=10, gt=0)
    SESSION_CLEANUP_INTERVAL_MS: int = Field(default=60 * 60 * 1000, gt=0)
    SESSION_MAX_AGE_MS: int = Field(default=7 * 24 * 60 * 60 * 1000, gt=0)

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=10, gt=0)
    RATE_LIMIT_WINDOW_MS: int = Field(default=60 * 1000, gt=0)
    RATE_LIMIT_CLEANUP_INTERVAL_MS: int = Field(default=5 * 60 * 1000, gt=0)

    ADMIN_USER_IDS: str = ""
    COMMAND_PREFIX: str = "/"

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def admin_user_ids(self) -> set[int]:
        ids: set[int] = set()
        for raw in self.ADMIN_USER_IDS.split(","):
            raw = raw.strip()
            if raw.lstrip("-").isdigit():
                ids.add(int(raw))
        return ids

    @property
    def cosmos_configured(self) -> bool:
        return bool(self.COSMOS_DB_ENDPOINT and self.COSMOS_DB_KEY)


settings = Settings()
