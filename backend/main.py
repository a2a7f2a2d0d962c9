import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.router import limiter, router
from config import settings
from services.errors import (
    DuplicateSkillError,
    DuplicateVariationError,
    NotFoundError,
    SkillEngineError,
    ValidationError,
    VersionConflictError,
)

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

app = FastAPI(
    title="Skill Matching API",
    description="Canonical skill dictionary, JD specs and weighted skill correlation",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _status_for(exc: SkillEngineError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (DuplicateSkillError, DuplicateVariationError, VersionConflictError)):
        return 409
    if isinstance(exc, ValidationError):
        return 422
    return 400


@app.exception_handler(SkillEngineError)
async def skill_engine_error_handler(request: Request, exc: SkillEngineError):
    return JSONResponse(
        status_code=_status_for(exc),
        content={"detail": str(exc), "error": type(exc).__name__},
    )


app.include_router(router)
