"""FastAPI application factory"""

import uvicorn
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from capital_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from capital_ledger.api.v1 import loans, securities, transactions
from capital_ledger.infrastructure.observability.logging import setup_logging
from capital_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Capital Ledger",
        description="Loans, securities and transaction ledger service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(securities.router, prefix="/v1", tags=["securities"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])

    return app


app = create_app()


def run_server() -> None:
    """Serve the API with uvicorn on the configured host and port"""
    uvicorn.run(
        "capital_ledger.api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # Keep the JSON handlers from setup_logging
    )


if __name__ == "__main__":
    run_server()
