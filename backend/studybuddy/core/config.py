from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    APP_NAME: str = "StudyBuddy API"
    API_V1_PREFIX: str = "/api/v1"
    ENVIRONMENT: str = "development"  # or "production"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = ""  # empty -> console only

    # LLM providers
    LLM_PROVIDER: str = "ollama"  # or "openai"
    OLLAMA_HOST: str = "http://ollama:11434"
    OLLAMA_MODEL: str = "gemma:2b"
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT_SECONDS: float = 60.0

    # DB
    DATABASE_URL: str = "sqlite:///./data/studybuddy.db"

    # Google Calendar
    GOOGLE_CREDENTIALS_PATH: str = "credentials.json"
    GOOGLE_CREDENTIALS_CONTENT: str = ""
    GOOGLE_TOKEN_PATH: str = "token.json"
    GOOGLE_TOKEN_CONTENT: str = ""
    GOOGLE_CALENDAR_ID: str = "primary"
    GOOGLE_TIMEZONE: str = "Asia/Ho_Chi_Minh"
    GOOGLE_REDIRECT_URI: str = ""  # empty -> first redirect_uri of the client secrets

    # Web UI origins allowed by CORS
    CORS_ORIGINS: list[str] = ["http://localhost:8501", "http://localhost:3000"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

settings = Settings()
