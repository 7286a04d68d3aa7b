from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BUSINESS_HOURS: dict[int, list[int]] = {
    0: [17 * 60, 21 * 60],
    1: [17 * 60, 21 * 60],
    2: [17 * 60, 21 * 60],
    3: [17 * 60, 21 * 60],
    4: [17 * 60, 21 * 60],
    5: [9 * 60, 17 * 60],
    6: [0, 0],
}

DEFAULT_SERVICE_DURATIONS: dict[str, int] = {
    "Gentle Recovery Flow (60 min)": 60,
    "Total Body Renewal (60 min)": 60,
    "Radiance Facial Flow (45 min)": 45,
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_NAME: str = "Your Business"
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    # weekday (0=Monday) -> [open minute, close minute]; open >= close is closed
    BUSINESS_HOURS: dict[int, list[int]] = Field(default_factory=lambda: dict(DEFAULT_BUSINESS_HOURS))
    SERVICE_DURATIONS: dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_SERVICE_DURATIONS))
    DEFAULT_SERVICE_MINUTES: int = 60
    PRE_BUFFER_MINUTES: int = 15
    POST_BUFFER_MINUTES: int = 15
    SLOT_STEP_MINUTES: int = 15
    SLOT_MODE: str = "buffered"
    BUSY_SOURCE: str = "events"

    TRAVEL_FEE: int = 15
    BOOKING_SOURCE_MARKER: str = "booking-site"
    BOOKING_POLICY_TEXT: str = "24h reschedule; late cancellations may be charged."

    ADMIN_TOKEN: str = ""
    CANCEL_TOKEN_SECRET: str = ""
    CANCEL_TOKEN_MAX_AGE_DAYS: int = 30
    PUBLIC_BASE_URL: str = ""
    ADMIN_LOOKAHEAD_DAYS: int = 90

    GOOGLE_CALENDAR_ID: str | None = None
    GOOGLE_CLIENT_EMAIL: str | None = None
    GOOGLE_PRIVATE_KEY: str | None = None
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"

    SMTP_HOST: str | None = None
    SMTP_PORT: int = 465
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    SMTP_USE_SSL: bool = True
    FROM_EMAIL: str | None = None
    OWNER_EMAIL: str | None = None

    @property
    def sender_email(self) -> str | None:
        return self.FROM_EMAIL or self.SMTP_USER

    @property
    def owner_email(self) -> str | None:
        return self.OWNER_EMAIL or self.sender_email


settings = Settings()
