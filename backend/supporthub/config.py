from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Hosted backend (PostgREST)
    supabase_url: str = "http://localhost:54321"
    supabase_service_key: str = ""
    ticket_source_timeout_seconds: float = 15.0

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # CORS
    allowed_origins: list[str] = ["http://localhost:8080"]

    # Analytics
    analytics_default_days: int = 90
    analytics_recent_limit: int = 10

    # SLA Defaults (minutes)
    sla_critical_response: int = 30
    sla_critical_resolve: int = 240
    sla_high_response: int = 60
    sla_high_resolve: int = 480
    sla_medium_response: int = 240
    sla_medium_resolve: int = 1440
    sla_low_response: int = 480
    sla_low_resolve: int = 2880

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
