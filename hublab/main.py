# hublab/main.py
from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from hublab.app.core.logging import setup_logging
from hublab.app.core.config import settings

from hublab.app.api.routes_health import router as health_router
from hublab.app.api.routes_schema import router as schema_router
from hublab.app.api.routes_generate import router as generate_router
from hublab.app.api.routes_ai import router as ai_router
from hublab.app.api.routes_metrics import router as metrics_router

log = logging.getLogger("hublab.main")


def create_app() -> FastAPI:
    # Initialize logging early so all imports use correct handlers/levels
    setup_logging()

    app = FastAPI(
        title=settings.service_name or "HubLab API",
        version=settings.version or "1.0.0",
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
    )

    # --- Global JSON error handler: convert unexpected 500s to JSON so clients can parse ---
    @app.exception_handler(Exception)
    async def _unhandled_exc_to_json(request: Request, exc: Exception):
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        log.error("Unhandled exception on %s %s\n%s", request.method, request.url.path, tb)
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "detail": str(exc),
                "path": str(request.url),
                "method": request.method,
            },
        )

    # Malformed JSON and wrong body shapes are client errors, reported as 400
    @app.exception_handler(RequestValidationError)
    async def _validation_to_400(request: Request, exc: RequestValidationError):
        problems = [
            f"{'.'.join(str(p) for p in e.get('loc', ())) or '<body>'}: {e.get('msg', 'invalid value')}"
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"detail": {"error": "Invalid request body", "details": problems}},
        )

    # Reject oversized bodies before they are parsed
    @app.middleware("http")
    async def _limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > settings.max_body_bytes:
            return JSONResponse(
                status_code=413,
                content={"detail": f"Request body exceeds {settings.max_body_bytes} bytes"},
            )
        return await call_next(request)

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins or ["*"],
        allow_credentials=True,
        allow_methods=settings.cors_allow_methods or ["*"],
        allow_headers=settings.cors_allow_headers or ["*"],
    )

    # Routes
    app.include_router(health_router)
    app.include_router(schema_router)
    app.include_router(generate_router)
    app.include_router(ai_router)
    app.include_router(metrics_router)

    # Friendly root
    @app.get("/")
    def root():
        return {
            "name": settings.service_name,
            "version": settings.version,
            "environment": settings.environment,
            "docs": settings.docs_url,
            "ai": "configured" if settings.ai_configured else "not configured",
            "endpoints": {
                "health": "GET /health",
                "schema": "GET /schema",
                "generate": "POST /generate",
                "ai_generate": "POST /ai/generate",
                "ai_build": "POST /ai/build",
                "metrics": "GET /metrics",
            },
        }

    log.info(
        "%s %s ready (AI %s)",
        settings.service_name,
        settings.version,
        "configured" if settings.ai_configured else "NOT configured",
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
