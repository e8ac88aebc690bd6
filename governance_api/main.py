"""FastAPI application for the AI governance API."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from governance_api import __version__
from governance_api.api import (
    ai_system_routes,
    assessment_routes,
    bias_test_routes,
    framework_assessment_routes,
    knowledge_base_routes,
    model_card_routes,
    remediation_routes,
)
from governance_api.events import EventProducer, create_event_producer
from governance_api.models import Base, HealthCheckResponse, get_db_engine, get_session_maker

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the event producer on startup; close the producer on shutdown."""
    if app.state.engine is not None:
        Base.metadata.create_all(app.state.engine)
        logger.info(f"Database ready: {app.state.engine.url}")

    owns_producer = app.state.event_producer is None
    if owns_producer:
        app.state.event_producer = create_event_producer()

    yield

    if owns_producer and app.state.event_producer is not None:
        app.state.event_producer.close()
        app.state.event_producer = None


def create_app(
    database_url: Optional[str] = None,
    session_maker: Optional[sessionmaker] = None,
    event_producer: Optional[EventProducer] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The session maker and event producer are created once here and handed to
    request handlers through app.state.

    Args:
        database_url: Database connection URL (defaults to env var DATABASE_URL)
        session_maker: Pre-built session maker; tables are then left to the caller
        event_producer: Pre-built event producer; otherwise one is created on startup

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="AI Governance API",
        description="Compliance records for AI systems: bias tests, remediation, "
        "EU AI Act assessments and model cards",
        version=__version__,
        lifespan=lifespan,
    )

    if session_maker is None:
        engine = get_db_engine(database_url)
        session_maker = get_session_maker(engine=engine)
    else:
        engine = None

    app.state.engine = engine
    app.state.session_maker = session_maker
    app.state.event_producer = event_producer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ai_system_routes.router)
    app.include_router(bias_test_routes.router)
    app.include_router(remediation_routes.router)
    app.include_router(model_card_routes.router)
    app.include_router(assessment_routes.eu_ai_act_dashboard_router)
    app.include_router(assessment_routes.eu_ai_act_router)
    app.include_router(assessment_routes.cross_framework_router)
    app.include_router(framework_assessment_routes.nist_ai_rmf_router)
    app.include_router(framework_assessment_routes.uk_ai_regulation_router)
    app.include_router(knowledge_base_routes.router)

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check():
        """
        Health check endpoint.

        Returns:
            HealthCheckResponse: Current application health status
        """
        return HealthCheckResponse(
            status="healthy",
            version=__version__,
            environment=os.getenv("ENVIRONMENT", "development"),
        )

    @app.get("/")
    async def root():
        """
        Root endpoint.

        Returns:
            dict: Service metadata
        """
        return {
            "message": "AI Governance API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "governance_api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
