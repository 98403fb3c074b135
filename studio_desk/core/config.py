from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENROUTER_API_KEY: str | None = None
    LLM_BASE_URL: str = "https://openrouter.ai/api/v1"
    LLM_MODEL: str = "x-ai/grok-4-fast:free"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2048
    LLM_MAX_RETRIES: int = 2
    LLM_APP_TITLE: str = "Dance Studio Chat"
    LLM_REFERER: str = "http://localhost"

    GOOGLE_API_KEY: str | None = None
    GOOGLE_SHEET_ID: str | None = None
    SHEETS_BASE_URL: str = "https://sheets.googleapis.com/v4/spreadsheets"
    AVAILABILITY_SHEET_NAME: str = "Availability"
    CLASS_SHEET_NAMES: list[str] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

    NOTIFICATION_BACKEND: str = "mock"  # "mock" | "smtp" | "webhook"
    BOOKING_WEBHOOK_URL: str | None = None
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    EMAIL_USER: str | None = None
    EMAIL_PASS: str | None = None
    ADMIN_EMAIL: str = "admin@example.com"
    BCC_EMAIL: str | None = None

    CALENDAR_DAYS_TO_SHOW: int = 7
    SLOT_INCREMENT_MINUTES: int = 10
    DEDUPE_SLOTS: bool = True
    PHONE_MIN_DIGITS: int = 0

    CONVERSATION_LOG_DIR: str = "./data/conversations"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"


settings = Settings()
