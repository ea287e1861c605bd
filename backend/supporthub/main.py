import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from supporthub.api.routes import analytics, sla
from supporthub.config import settings
from supporthub.services.ticket_source import TicketSource


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.jwt_secret == "change-me-in-production":
        logging.warning(
            "JWT_SECRET is set to the default value. "
            "Set it to the auth provider's JWT secret in your .env file."
        )
    if not settings.supabase_service_key:
        logging.warning("SUPABASE_SERVICE_KEY is not set; ticket store requests will be rejected.")
    app.state.ticket_source = TicketSource.from_settings()
    try:
        yield
    finally:
        await app.state.ticket_source.aclose()


def create_app() -> FastAPI:
    app = FastAPI(title="MeuChapa Support Hub Analytics", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/v1/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])
    app.include_router(sla.router, prefix="/api/v1/sla-config", tags=["sla-config"])

    return app


app = create_app()
