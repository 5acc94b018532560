"""FastAPI application factory"""

import uvicorn
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from billing_service.api.errors import register_error_handlers
from billing_service.api.middleware import RequestIDMiddleware, MetricsMiddleware
from billing_service.api.v1 import loans
from billing_service.infrastructure.observability.logging import setup_logging
from billing_service.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Loan Billing Service",
        description="Installment loan origination, balances, delinquency and settlement",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(loans.router, prefix="/api/loans", tags=["loans"])

    return app


app = create_app()


def run() -> None:
    """Serve the API; uvicorn handles SIGINT/SIGTERM with a graceful shutdown"""
    uvicorn.run(
        "billing_service.api.main:app",
        host=settings.http_host,
        port=settings.http_port,
        log_config=None,  # Keep the JSON logging configured above
    )
