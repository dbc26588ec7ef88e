from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Goal Tracker API"
    gemini_api_key: str = ""
    # used for progress analysis and coaching; must support generateContent.
    gemini_model: str = "gemini-2.5-flash"  # override via GEMINI_MODEL in .env if needed
    gemini_timeout_seconds: int = 25
    # Comma-separated origins for CORS. Use "*" only for local/demo environments.
    cors_allow_origins: str = "*"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


settings = Settings()
