import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from impact_analyzer.config import get_settings
from impact_analyzer.api import analyze_routes, report_routes
from impact_analyzer.models.error_models import USER_MESSAGES, ErrorKind

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Estimates how AI will change a job and what to do about it",
)

# ── CORS ────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Errors ──────────────────────────────────────────────────────────────────


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are invalid queries, not 422s."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": USER_MESSAGES[ErrorKind.INVALID_QUERY],
            "kind": ErrorKind.INVALID_QUERY.value,
            "details": problems,
        },
    )


# ── Routers ─────────────────────────────────────────────────────────────────

app.include_router(analyze_routes.router, tags=["Analysis"])
app.include_router(report_routes.router, tags=["Reports"])

# ── Health Check ────────────────────────────────────────────────────────────


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name, "version": "0.1.0"}
