import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import async_sessionmaker

from api.v1.api_router import api_router
from core.config import settings
from core.database import build_engine, build_session_factory, create_tables
from core.errors import register_exception_handlers
from core.security import IdentityVerifier, build_identity_verifier
from services.payment_service import StripePaymentGateway

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    session_factory: Optional[async_sessionmaker] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
    payment_gateway=None,
) -> FastAPI:
    """Build the application; collaborators default to the configured ones."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Blood donation coordination API",
        version="1.0.0"
    )

    engine = None
    if session_factory is None:
        engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        session_factory = build_session_factory(engine)

    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.identity_verifier = identity_verifier or build_identity_verifier()
    app.state.payment_gateway = payment_gateway or StripePaymentGateway(
        settings.STRIPE_SECRET_KEY,
        settings.STRIPE_API_BASE,
        settings.HTTP_TIMEOUT_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)

    @app.on_event("startup")
    async def startup_event():
        if app.state.engine is not None and settings.AUTO_CREATE_TABLES:
            await create_tables(app.state.engine)
        logger.info(f"{settings.APP_NAME} started")

    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.engine is not None:
            await app.state.engine.dispose()
        logger.info(f"{settings.APP_NAME} stopped")

    @app.get("/")
    async def root():
        return {"message": "Blood Connect is running perfectly!"}

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0"
        }

    return app


app = create_app()
