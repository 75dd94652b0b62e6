"""FastAPI application for gitgud.

Endpoints:
- GET    /health                      liveness, no auth
- GET    /api/v1/status               service status, no auth
- POST   /api/v1/reviews              analyze a pull request and store a review
- GET    /api/v1/reviews              list stored reviews, newest first
- GET    /api/v1/reviews/{id}         fetch one review
- PATCH  /api/v1/reviews/{id}         change a review's status or feedback
- POST   /api/v1/analysis/analyze     analyze a pull request without storing

Everything under /api/v1 except /status needs `Authorization: Bearer <token>`
with a token listed in the `api_tokens` config key.
"""

from __future__ import annotations

import hmac
import importlib.metadata
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from gitgud_core.cancel import CancelToken
from gitgud_core.config import DEFAULT_CONFIG, load_config
from gitgud_core.errors import (
    AnalysisCanceled,
    AnalysisError,
    PullRequestNotFound,
    RateLimited,
    ReviewNotFound,
    TransportError,
)
from gitgud_core.service import ReviewRequest, ReviewService
from gitgud_store.factory import open_store
from gitgud_store.models import ReviewStatus

logger = logging.getLogger(__name__)


class CreateReviewBody(BaseModel):
    pr_number: int = Field(gt=0)
    repo_owner: str = Field(min_length=1)
    repo_name: str = Field(min_length=1)
    commit_hash: str = ""


class UpdateReviewBody(BaseModel):
    status: Optional[ReviewStatus] = None
    feedback: Optional[str] = None


class AnalyzeBody(BaseModel):
    pr_number: int = Field(gt=0)
    repo_owner: str = Field(min_length=1)
    repo_name: str = Field(min_length=1)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _version() -> str:
    try:
        return importlib.metadata.version("gitgud")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def create_app(config: Optional[dict] = None, service: Optional[ReviewService] = None) -> FastAPI:
    """Create the FastAPI application.

    ``config`` defaults to load_config(), which reads .gitgud.yml from the
    working directory. ``service`` is built from ``config`` at startup when
    not given; tests pass one in directly.
    """
    config = load_config() if config is None else {**DEFAULT_CONFIG, **config}
    api_tokens = [t for t in config.get("api_tokens") or [] if t]
    analysis_timeout = config.get("analysis_timeout")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = None
        if app.state.service is None:
            store = open_store(config)
            app.state.service = ReviewService.from_config(config, store)
        if not api_tokens:
            logger.warning("No api_tokens configured; every protected endpoint will answer 401")
        logger.info("gitgud API ready")

        yield

        logger.info("Shutting down...")
        if store is not None:
            store.close()

    app = FastAPI(
        title="gitgud",
        description="Pull request analysis and code review service",
        version=_version(),
        lifespan=lifespan,
    )
    app.state.service = service

    def get_service(request: Request) -> ReviewService:
        return request.app.state.service

    def require_token(authorization: Optional[str] = Header(default=None)) -> None:
        if not authorization:
            raise HTTPException(status_code=401, detail="No authorization header provided")
        parts = authorization.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            raise HTTPException(status_code=401, detail="Invalid authorization format. Expected 'Bearer <token>'")
        if not any(hmac.compare_digest(parts[1], t) for t in api_tokens):
            raise HTTPException(status_code=401, detail="Invalid or expired token")

    def new_token() -> CancelToken:
        return CancelToken.with_timeout(analysis_timeout) if analysis_timeout else CancelToken()

    # --- Error mapping ---

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}" for e in exc.errors()
        )
        return _error(400, f"Invalid request format: {details}")

    @app.exception_handler(AnalysisError)
    async def analysis_error(request: Request, exc: AnalysisError) -> JSONResponse:
        logger.warning("Analysis failed: %s", exc)
        return _error(422, str(exc), file=exc.file, cause=str(exc.cause))

    @app.exception_handler(PullRequestNotFound)
    @app.exception_handler(ReviewNotFound)
    async def not_found(request: Request, exc: Exception) -> JSONResponse:
        return _error(404, str(exc))

    @app.exception_handler(RateLimited)
    async def rate_limited(request: Request, exc: RateLimited) -> JSONResponse:
        return _error(429, str(exc))

    @app.exception_handler(TransportError)
    async def transport_error(request: Request, exc: TransportError) -> JSONResponse:
        logger.error("GitHub request failed: %s", exc)
        return _error(502, str(exc))

    @app.exception_handler(AnalysisCanceled)
    async def canceled(request: Request, exc: AnalysisCanceled) -> JSONResponse:
        return _error(504, str(exc))

    # --- Public routes ---

    @app.get("/health")
    def health():
        return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/v1/status")
    def status():
        return {"status": "operational", "version": _version()}

    # --- Protected routes ---
    # Handlers are plain `def` so the blocking GitHub calls run in the
    # threadpool, off the event loop.

    v1 = APIRouter(prefix="/api/v1", dependencies=[Depends(require_token)])

    @v1.post("/reviews", status_code=201)
    def create_review(body: CreateReviewBody, svc: ReviewService = Depends(get_service)):
        request = ReviewRequest(
            pr_number=body.pr_number,
            repo_owner=body.repo_owner,
            repo_name=body.repo_name,
            commit_hash=body.commit_hash,
        )
        review = svc.create_review(request, new_token())
        return {"review": review.to_dict(), "message": "Review created successfully"}

    @v1.get("/reviews")
    def list_reviews(svc: ReviewService = Depends(get_service)):
        reviews = svc.list_reviews()
        return {"reviews": [r.to_dict() for r in reviews], "count": len(reviews)}

    @v1.get("/reviews/{review_id}")
    def get_review(review_id: str, svc: ReviewService = Depends(get_service)):
        return {"review": svc.get_review(review_id).to_dict()}

    @v1.patch("/reviews/{review_id}")
    def update_review(review_id: str, body: UpdateReviewBody, svc: ReviewService = Depends(get_service)):
        review = svc.update_review(review_id, status=body.status, feedback=body.feedback)
        return {"review": review.to_dict(), "message": "Review updated successfully"}

    @v1.post("/analysis/analyze")
    def analyze(body: AnalyzeBody, svc: ReviewService = Depends(get_service)):
        _, result = svc.analyze(body.repo_owner, body.repo_name, body.pr_number, new_token())
        return result.to_dict()

    app.include_router(v1)
    return app
