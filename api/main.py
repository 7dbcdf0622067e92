"""
FastAPI Main Application - CRM Widget Insights

Provides the widget analysis REST endpoint consumed by the CRM front end.

Features:
    - API routes: widget analysis, health check
    - CORS middleware for the front-end origins
    - Lifespan: builds the Gemini model and the analysis service once per process
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insights.analysis import (
    AnalysisService,
    DataAggregator,
    PromptComposer,
    WidgetAnalyst,
    build_chat_model,
)
from insights.config import (
    ANALYSIS_CONFIG,
    APP_TITLE,
    CORS_ORIGINS,
    GEMINI_CONFIG,
    LOGGING_CONFIG,
    SERVICES_CONFIG,
)
from insights.integrations.langfuse import flush_langfuse
from insights.utils import ConfigurationError, get_logger, setup_logging
from api.routes import analysis_router

logger = get_logger(__name__)


def build_analysis_service() -> AnalysisService:
    """
    Assemble the analysis service from configuration.

    A missing model API key does not stop the server; requests fail with the
    generic error payload until it is configured.
    """
    try:
        analyst = WidgetAnalyst(build_chat_model(GEMINI_CONFIG))
        logger.info(f"Generative model ready: {GEMINI_CONFIG['model']}")
    except ConfigurationError as e:
        logger.error(f"Generative model unavailable: {e}")
        analyst = None

    return AnalysisService(
        aggregator=DataAggregator.from_config(SERVICES_CONFIG),
        composer=PromptComposer(
            record_limit=ANALYSIS_CONFIG["context_record_limit"],
            widget_types=ANALYSIS_CONFIG["widget_types"],
        ),
        analyst=analyst,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {APP_TITLE} API Server...")
    if app.state.analysis_service is None:
        app.state.analysis_service = build_analysis_service()
    yield
    flush_langfuse()
    logger.info(f"Shutting down {APP_TITLE} API Server...")


def create_app(analysis_service: Optional[AnalysisService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        analysis_service: Prebuilt service; when None, the lifespan builds one
            from configuration

    Returns:
        Configured FastAPI app
    """
    setup_logging(level=LOGGING_CONFIG["level"], log_file=LOGGING_CONFIG["file"])

    app = FastAPI(
        title=APP_TITLE,
        description="Gemini-generated dashboard widgets for CRM questions",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.analysis_service = analysis_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API Routes
    app.include_router(analysis_router, prefix="/api/gemini", tags=["Analysis"])

    # Health check endpoint
    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": APP_TITLE}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["api", "insights", "templates"]
    )
