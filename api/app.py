"""HTTP surface: routes, identity resolution, error mapping."""
import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from agent.llm import LLMClient, get_llm_client
from agent.models import ModelRegistry, load_registry
from agent.modules import analytics
from agent.modules.generate import ContentGenerator
from api import exporter
from api.auth import Auth
from api.rate_limit import Limit, RateLimiter
from config import Settings
from db import ContentStore
from errors import (
    AppError,
    AuthenticationError,
    NormalizationError,
    NotFoundError,
    RateLimitError,
    UpstreamServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TEST_USER_ID = "test-user-123"


class GenerateRequest(BaseModel):
    topic: str = ""
    model: Optional[str] = None


def _ok(data, **extra) -> dict:
    return {"success": True, "data": data, **extra}


def _content_disposition(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def _install_error_handlers(app: FastAPI, settings: Settings) -> None:
    dev = settings.is_development

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        body = {"success": False, "error": exc.error, "message": exc.user_message}
        if dev and isinstance(exc, (NormalizationError, UpstreamServiceError)):
            body["message"] = str(exc)
        headers = None
        if isinstance(exc, RateLimitError):
            headers = {"Retry-After": str(exc.retry_after)}
            body["retryAfter"] = exc.retry_after
        return JSONResponse(status_code=exc.status_code, content=body, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Validation error", "message": details},
        )

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "message": str(exc) if dev else "An unexpected error occurred. Please try again.",
            },
        )


def create_app(
    settings: Optional[Settings] = None,
    llm: Optional[LLMClient] = None,
    registry: Optional[ModelRegistry] = None,
) -> FastAPI:
    """Build the application and everything it shares across requests."""
    settings = settings or Settings()
    registry = registry or load_registry(settings.models_config or None)
    llm = llm or get_llm_client(settings)

    store = ContentStore(settings.db_path)
    store.init_db()
    auth = Auth(settings.users_config)
    limiter = RateLimiter({
        "generate": Limit(settings.rate_limit_generate_per_window, settings.rate_limit_generate_window_seconds),
        "read": Limit(settings.rate_limit_read_per_window, settings.rate_limit_read_window_seconds),
        "delete": Limit(settings.rate_limit_delete_per_window, settings.rate_limit_delete_window_seconds),
    })
    generator = ContentGenerator(
        llm,
        registry,
        store,
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
    )

    app = FastAPI(
        title="TubeGenie API",
        version="1.0.0",
        description="Generate and manage AI-assisted YouTube content ideas.",
        openapi_tags=[
            {"name": "system", "description": "Service health."},
            {"name": "content", "description": "Content generation and management."},
            {"name": "analytics", "description": "Usage analytics dashboard."},
            {"name": "export", "description": "Content downloads."},
        ],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app, settings)

    app.state.settings = settings
    app.state.store = store
    app.state.registry = registry
    app.state.limiter = limiter
    app.state.generator = generator

    bearer = HTTPBearer(auto_error=False)

    def current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    ) -> str:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise AuthenticationError()
        user_id = auth.resolve(credentials.credentials)
        if user_id is None:
            raise AuthenticationError("Unknown API key")
        return user_id

    def limited(action: str):
        def _dependency(user_id: str = Depends(current_user)) -> str:
            limiter.enforce(user_id, action)
            return user_id
        return _dependency

    def _owned(content_id: str, user_id: str):
        record = store.get(content_id, user_id)
        if record is None:
            raise NotFoundError(content_id)
        return record

    prefix = settings.api_prefix.rstrip("/")

    # ── system ────────────────────────────────────────────────────────────────

    @app.get(f"{prefix}/health", tags=["system"])
    async def health() -> dict:
        return {
            "success": True,
            "status": "ok",
            "message": "TubeGenie API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # ── generation ────────────────────────────────────────────────────────────

    if settings.is_development:
        @app.post(f"{prefix}/content/generate/test", status_code=201, tags=["content"])
        async def generate_test(body: GenerateRequest) -> dict:
            record = await generator.generate(TEST_USER_ID, body.topic, body.model)
            return _ok(record.to_dict())

    @app.post(f"{prefix}/content/generate", status_code=201, tags=["content"])
    async def generate(body: GenerateRequest, user_id: str = Depends(limited("generate"))) -> dict:
        record = await generator.generate(user_id, body.topic, body.model)
        return _ok(record.to_dict())

    # ── collection reads (before /content/{content_id}) ───────────────────────

    @app.get(f"{prefix}/content/history", tags=["content"])
    def history(
        limit: int = Query(10, ge=1, le=100),
        user_id: str = Depends(limited("read")),
    ) -> dict:
        return _ok([r.to_dict() for r in store.list_for_owner(user_id, limit)])

    @app.get(f"{prefix}/content/search", tags=["content"])
    def search(q: str = "", user_id: str = Depends(limited("read"))) -> dict:
        keyword = q.strip()
        if not keyword:
            raise ValidationError("Empty search keyword", "Search keyword is required")
        return _ok([r.to_dict() for r in store.search(user_id, keyword)])

    @app.get(f"{prefix}/content/favorites", tags=["content"])
    def favorites(user_id: str = Depends(limited("read"))) -> dict:
        return _ok([r.to_dict() for r in store.list_favorites(user_id)])

    @app.get(f"{prefix}/content/models", tags=["content"])
    def models(user_id: str = Depends(limited("read"))) -> dict:
        return _ok(registry.to_list(), defaultModel=registry.default.id)

    @app.get(f"{prefix}/content/analytics", tags=["analytics"])
    def user_analytics(user_id: str = Depends(limited("read"))) -> dict:
        records = store.list_for_owner(user_id)
        return _ok(analytics.summarize(records, registry))

    @app.get(f"{prefix}/content/export/csv", tags=["export"])
    def export_all_csv(user_id: str = Depends(limited("read"))) -> Response:
        records = store.list_for_owner(user_id)
        if not records:
            raise NotFoundError("*")
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
        return Response(
            content=exporter.to_csv(records),
            media_type=exporter.MEDIA_TYPES["csv"][0],
            headers=_content_disposition(f"tubegenie-content-{stamp}.csv"),
        )

    # ── single record ─────────────────────────────────────────────────────────

    @app.get(f"{prefix}/content/{{content_id}}", tags=["content"])
    def get_content(content_id: str, user_id: str = Depends(limited("read"))) -> dict:
        return _ok(_owned(content_id, user_id).to_dict())

    @app.delete(f"{prefix}/content/{{content_id}}", tags=["content"])
    def delete_content(content_id: str, user_id: str = Depends(limited("delete"))) -> dict:
        if not store.delete(content_id, user_id):
            raise NotFoundError(content_id)
        logger.info("Deleted content id=%s for user=%s", content_id, user_id)
        return {"success": True, "message": "Content deleted successfully"}

    @app.patch(f"{prefix}/content/{{content_id}}/favorite", tags=["content"])
    def toggle_favorite(content_id: str, user_id: str = Depends(limited("read"))) -> dict:
        record = store.toggle_favorite(content_id, user_id)
        if record is None:
            raise NotFoundError(content_id)
        return _ok(record.to_dict())

    @app.get(f"{prefix}/content/{{content_id}}/export/{{fmt}}", tags=["export"])
    def export_content(
        content_id: str,
        fmt: Literal["text", "markdown", "csv", "pdf"],
        user_id: str = Depends(limited("read")),
    ) -> Response:
        record = _owned(content_id, user_id)
        return Response(
            content=exporter.render(record, fmt),
            media_type=exporter.MEDIA_TYPES[fmt][0],
            headers=_content_disposition(exporter.filename_for(record, fmt)),
        )

    logger.info(
        "TubeGenie API ready: environment=%s provider=%s default_model=%s db=%s",
        settings.environment, settings.llm_provider, registry.default.id, settings.db_path,
    )
    return app
