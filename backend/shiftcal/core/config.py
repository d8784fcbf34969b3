from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    database_url: str

    # JWT (cookie-based auth)
    JWT_SECRET: str
    JWT_ISS: str = "shiftcal-api"
    JWT_AUD: str = "shiftcal-web"

    # Cookie
    COOKIE_DOMAIN: str | None = None
    COOKIE_SECURE: bool = True
    ACCESS_TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 7  # 7 days

    # Google sign-in (ID token audience)
    GOOGLE_CLIENT_ID: str = ""

    # User directory: "db" reads the users table, "http" calls USER_DIRECTORY_URL
    IDENTITY_PROVIDER: str = "db"
    USER_DIRECTORY_URL: str = "http://localhost:5000"
    USER_DIRECTORY_TIMEOUT_SECONDS: float = 5.0

    # Day/month windows are computed in this zone
    TIMEZONE: str = "Asia/Tokyo"

    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    # Re-verify the whole overlap graph after each mutation (slow, for debugging)
    OVERLAP_SELF_CHECK: bool = False

    def cors_origins(self) -> list[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x.strip()]


settings = Settings()
