"""검색 / 논리 삭제 서비스 — 요청 경계에서 백엔드 오류를 ServiceError로 변환"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from elasticsearch import NotFoundError

from .indexer import StreetIndexer
from .log import get_logger
from .query import SearchMode

logger = get_logger("service")


class ServiceError(Exception):
    """API 응답 {"error": message, "details": details} 로 변환되는 오류"""

    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


def error_details(exc: BaseException) -> str:
    """
    응답 details용 오류 문자열.

    elasticsearch 9.x ConnectionError 등은 str()이 "Connection error" 고정 문구라서
    .message(transport 원문)를 우선한다.
    """
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or type(exc).__name__


class InvalidRequestError(ServiceError):
    status_code = 400


class NotFoundServiceError(ServiceError):
    status_code = 404


@dataclass
class StreetHit:
    """검색 결과 1건 (id = ES _id, 삭제 요청에 사용)"""
    id: str
    namePrimary: str | None = None
    title: str | None = None
    nameSecondary: str | None = None
    group: str | None = None
    kind: str | None = None
    neighborhood: str | None = None

    @classmethod
    def from_es(cls, hit: dict) -> StreetHit:
        source = hit.get("_source") or {}
        return cls(
            id=hit["_id"],
            namePrimary=source.get("namePrimary"),
            title=source.get("title"),
            nameSecondary=source.get("nameSecondary"),
            group=source.get("group"),
            kind=source.get("kind"),
            neighborhood=source.get("neighborhood"),
        )

    def to_dict(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value is not None}


class StreetService:
    def __init__(self, indexer: StreetIndexer):
        self.indexer = indexer

    async def search(self, q: str | None, mode: str | SearchMode | None = None) -> list[StreetHit]:
        """빈 쿼리 → [] (ES 호출 없음). 결과는 ES 점수 순서 그대로."""
        q = (q or "").strip()
        if not q:
            return []
        search_mode = mode if isinstance(mode, SearchMode) else SearchMode.parse(mode)

        try:
            result = await self.indexer.search(q, search_mode)
        except Exception as e:
            details = error_details(e)
            logger.error(f"[search] q={q!r} mode={search_mode.value}: {details}")
            raise ServiceError("Search failed", details) from e

        return [StreetHit.from_es(hit) for hit in result["hits"]["hits"]]

    async def delete(self, doc_id: str | None) -> None:
        """논리 삭제. 이미 삭제된 문서도 성공, 없는 id는 NotFoundServiceError."""
        doc_id = (doc_id or "").strip()
        if not doc_id:
            raise InvalidRequestError("Missing id")

        try:
            await self.indexer.soft_delete(doc_id)
        except NotFoundError as e:
            logger.warning(f"[delete] id={doc_id} not found")
            raise NotFoundServiceError("Delete failed", f"Document not found: {doc_id}") from e
        except Exception as e:
            details = error_details(e)
            logger.error(f"[delete] id={doc_id}: {details}")
            raise ServiceError("Delete failed", details) from e
        logger.info(f"[delete] id={doc_id} → isDeleted=true")

    async def health(self) -> str:
        """ES 버전 문자열"""
        try:
            info = await self.indexer.info()
        except Exception as e:
            raise ServiceError("Elasticsearch not reachable", error_details(e)) from e
        return info["version"]["number"]

    async def close(self):
        await self.indexer.close()
