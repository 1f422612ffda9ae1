#!/usr/bin/env python3
"""
Note coding REST API.

Wires the coding engine, optional classifier, bearer authentication and
Prometheus request metrics into a FastAPI application.
"""
import logging
import time
from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from prometheus_client import Counter, Histogram

from notecoder import __version__
from notecoder.api.middleware.authentication import verify_token
from notecoder.api.routes.analyze import create_analyze_router
from notecoder.api.routes.health import create_health_router
from notecoder.api.schemas import ErrorResponse
from notecoder.config.raf_table import get_raf_table
from notecoder.config.settings import get_enabled_conditions
from notecoder.core.coding.engine import CodingEngine
from notecoder.core.models.condition import ConditionType
from notecoder.core.ports.classifier import ClassifierPort

logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "notecoder_api_requests_total", "Total API requests", [
        "method", "endpoint", "status"])
REQUEST_DURATION = Histogram(
    "notecoder_api_request_duration_seconds",
    "Request duration")

# Authentication
security = HTTPBearer()


async def get_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """Dependency wrapper chaining bearer extraction and token verification."""
    return await verify_token(credentials)


class NoteCoderAPI:
    """Note coding API around a shared CodingEngine"""

    def __init__(
        self,
        engine: Optional[CodingEngine] = None,
        classifier: Optional[ClassifierPort] = None,
    ):
        """Initialize API with dependency injection.

        Args:
            engine: Coding engine (default: engine over the configured RAF table)
            classifier: Optional external classifier tried before the rules
        """
        self.enabled_conditions = [ConditionType(c) for c in get_enabled_conditions()]
        self.raf_table = get_raf_table()
        self.engine = engine or CodingEngine(self.raf_table, self.enabled_conditions)
        self.classifier = classifier

        self.start_time = time.time()

        self.app = FastAPI(
            title="Note Coding API",
            description="Validates clinical note documentation against ICD-10 coding requirements",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        self._setup_middleware()
        self._setup_routes()

    def _setup_middleware(self):
        """Setup API middleware"""
        # CORS
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Request logging middleware
        @self.app.middleware("http")
        async def log_requests(request, call_next):
            start_time = time.time()
            response = await call_next(request)
            process_time = time.time() - start_time

            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()

            REQUEST_DURATION.observe(process_time)

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
            )

            return response

    def _setup_routes(self):
        """Setup API routes"""
        @self.app.get("/")
        async def root():
            return {
                "service": "Note Coding API",
                "version": __version__,
                "status": "operational",
                "docs": "/docs",
            }

        self.app.include_router(
            create_health_router(
                start_time=self.start_time,
                raf_table=self.raf_table,
                enabled_conditions=[c.value for c in self.enabled_conditions],
                classifier_enabled=self.classifier is not None,
            )
        )
        self.app.include_router(
            create_analyze_router(
                engine=self.engine,
                enabled_conditions=self.enabled_conditions,
                token_dependency=get_current_token,
                classifier=self.classifier,
            )
        )
        self._setup_error_handlers()

    def _setup_error_handlers(self):
        """Setup error handlers"""
        @self.app.exception_handler(HTTPException)
        async def http_exception_handler(request, exc):
            error = ErrorResponse(
                error=f"HTTP_{exc.status_code}",
                message=str(exc.detail),
                timestamp=datetime.now(),
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=error.model_dump(mode="json", exclude_none=True),
                headers=getattr(exc, "headers", None),
            )

        @self.app.exception_handler(Exception)
        async def global_exception_handler(request, exc):
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            error = ErrorResponse(
                error="INTERNAL_SERVER_ERROR",
                message="Analysis failed",
                details={"exception": str(exc)},
                timestamp=datetime.now(),
            )
            return JSONResponse(status_code=500, content=error.model_dump(mode="json"))


def create_app(
    engine: Optional[CodingEngine] = None,
    classifier: Optional[ClassifierPort] = None,
) -> FastAPI:
    """Create FastAPI application"""
    api = NoteCoderAPI(engine=engine, classifier=classifier)
    return api.app


def run(argv=None):
    """CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Note Coding API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    run()
