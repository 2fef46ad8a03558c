from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    debug: bool = False
    database_path: str = "database.json"  # JSON file holding accounts and sessions
    static_path: str = "public"  # Directory with the front-end build, index.html is the SPA entry
    cors_origins: list[str] = ["*"]  # "*" reflects any request origin
    # Upstream API keys, empty ones are ignored
    gemini_api_key_1: str = ""
    gemini_api_key_2: str = ""
    gemini_api_key_3: str = ""
    gemini_api_key_4: str = ""
    gemini_api_key_5: str = ""
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    upstream_timeout: float = 60.0
    # Persona overrides
    wormgpt_model: str = "gemini-1.5-flash"
    visora_model: str = "gemini-1.5-flash"
    system_prompt_worm: str | None = None
    system_prompt_visora: str | None = None
    session_ttl_days: int = 7
    rate_limit_max: int = 100  # Requests per window per client on /api/*
    rate_limit_window_seconds: int = 15 * 60

    model_config = {
        "env_file": [".env"],
        "extra": "ignore",
    }

    @property
    def gemini_api_keys(self) -> list[str]:
        keys = [
            self.gemini_api_key_1,
            self.gemini_api_key_2,
            self.gemini_api_key_3,
            self.gemini_api_key_4,
            self.gemini_api_key_5,
        ]
        return [key for key in keys if key and key.strip()]
