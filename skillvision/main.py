from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from skillvision.config import get_settings
from skillvision.database import init_db
from skillvision.errors import PipelineError
from skillvision.middleware.correlation import CorrelationMiddleware, get_correlation_id
from skillvision.routes import progress, quiz, recommendations, students
from skillvision.services.gateway import get_gateway
from skillvision.utils.logger import logger
from skillvision.utils.metrics import get_snapshot

settings = get_settings()

SUBMIT_PATH = "/api/quiz/submit"

# User-facing messages stay generic; the kind is only logged
_USER_MESSAGES = {
    "Unauthenticated": "User not authenticated",
    "ProfileNotFound": "Student profile not found",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting SkillVision AI backend...")
    await init_db()
    logger.info(f"Backend ready at http://{settings.backend_host}:{settings.backend_port}")
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
app.state.limiter = quiz.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    if request.url.path == SUBMIT_PATH:
        message = "Failed to process quiz submission"
    else:
        message = _USER_MESSAGES.get(exc.kind, "Failed to process request")

    # Pipeline failures arrive already logged with full detail
    if not exc.logged:
        logger.warning(
            f"{exc.kind}: {exc}",
            extra={"error_kind": exc.kind, "path": request.url.path},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message, "correlation_id": get_correlation_id()},
    )


allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-User-ID", "X-Correlation-ID"],
)
app.add_middleware(CorrelationMiddleware)


# Health check endpoint (minimal response to prevent information disclosure)
@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/")
async def root():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    snapshot = get_snapshot()
    gateway = get_gateway()
    snapshot["circuits"] = {gateway.name: gateway.circuit_state()}
    return snapshot


# Register routes
app.include_router(students.router, prefix="/api/students", tags=["Students"])
app.include_router(quiz.router, prefix="/api/quiz", tags=["Quiz"])
app.include_router(recommendations.router, prefix="/api/recommendations", tags=["Recommendations"])
app.include_router(progress.router, prefix="/api/progress", tags=["Progress"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "skillvision.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.debug
    )
