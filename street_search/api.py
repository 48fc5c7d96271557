"""
streets HTTP API (FastAPI)

  GET    /health                 ES 연결 확인
  GET    /api/search?q=&mode=    검색 (free | any | phrase, 최대 200건)
  DELETE /api/streets/{id}       논리 삭제 (isDeleted=true)

오류 응답: {"error": "...", "details": "..."} + 400 / 404 / 500
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Config
from .indexer import StreetIndexer
from .log import get_logger
from .service import ServiceError, StreetService

logger = get_logger("api")


class UTF8JSONResponse(JSONResponse):
    """모든 JSON 응답에 charset 명시 (히브리어 본문)"""
    media_type = "application/json; charset=utf-8"


def create_app(config: Config | None = None, service: StreetService | None = None) -> FastAPI:
    """
    앱 생성. service를 주입하지 않으면 config로 ES 클라이언트를 만든다.
    종료 시 ES 클라이언트 close.
    """
    config = config or Config.from_env()
    service = service or StreetService(StreetIndexer.from_config(config))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Elasticsearch: {config.es_url}  Index: {config.index_name}")
        yield
        await service.close()

    app = FastAPI(
        title="Streets Search API",
        lifespan=lifespan,
        default_response_class=UTF8JSONResponse,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if config.cors_origin == "*" else [config.cors_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return UTF8JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.get("/health")
    async def health():
        try:
            version = await service.health()
        except ServiceError:
            return UTF8JSONResponse(
                status_code=500,
                content={"ok": False, "error": "Elasticsearch not reachable"},
            )
        return {"ok": True, "es": version}

    @app.get("/api/search")
    async def search(q: str = "", mode: str = "free"):
        hits = await service.search(q, mode)
        return [hit.to_dict() for hit in hits]

    @app.delete("/api/streets/{doc_id}")
    async def delete_street(doc_id: str):
        await service.delete(doc_id)
        return {"ok": True}

    return app
