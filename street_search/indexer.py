"""Elasticsearch 인덱스 준비 + 벌크 생성 + 검색 + 논리 삭제"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from elasticsearch import AsyncElasticsearch
from elasticsearch.helpers import async_bulk

from .config import Config
from .query import DELETED_FIELD, MAX_RESULTS, SOURCE_FIELDS, SearchMode, build_query
from .schema import index_body


class BulkIndexError(RuntimeError):
    """벌크 요청 중 일부/전체 도큐먼트 실패"""

    def __init__(self, failed: int, errors: list):
        super().__init__(f"Bulk index errors: {failed} failures")
        self.failed = failed
        self.errors = errors


def _check_cluster(config: Config) -> None:
    """es_nodes(HTTPS 클러스터)는 fingerprint + 인증 필수. 단일 es_url은 검사 없음."""
    if config.es_nodes is None:
        return
    if not config.es_fingerprint:
        raise ValueError("클러스터 연결에는 TLS fingerprint 필요: --es_fingerprint")
    if not config.es_api_key and not (config.es_username and config.es_password):
        raise ValueError(
            "클러스터 연결에는 인증 필요: --es_api_key (ELASTICSEARCH_API_KEY) 또는 "
            "--es_username/--es_password (ELASTICSEARCH_USERNAME/PASSWORD)"
        )


def _auth_kwargs(config: Config) -> dict:
    # API 키가 basic_auth보다 우선
    if config.es_api_key:
        return {"api_key": config.es_api_key}
    if config.es_username and config.es_password:
        return {"basic_auth": (config.es_username, config.es_password)}
    return {}


def build_es_client(config: Config) -> AsyncElasticsearch:
    """
    로더 / API 서버가 공유하는 AsyncElasticsearch 1개.

    hosts: es_nodes가 있으면 그 목록, 없으면 [es_url]
    fingerprint가 있으면 인증서 체인 대신 fingerprint로 검증.
    """
    _check_cluster(config)
    kwargs: dict = {"hosts": config.es_nodes or [config.es_url], **_auth_kwargs(config)}
    if config.es_fingerprint:
        kwargs["ssl_assert_fingerprint"] = config.es_fingerprint
        kwargs["verify_certs"] = False
    return AsyncElasticsearch(**kwargs)


class StreetIndexer:
    """
    streets 인덱스 게이트웨이.

    로더:   ensure_index → bulk_create (refresh 없음)
    API:    search (isDeleted=false 필터 고정) / soft_delete (즉시 refresh)

    클라이언트 1개를 요청 간 공유 (AsyncElasticsearch는 동시 호출 안전).
    """

    def __init__(self, es: AsyncElasticsearch, index_name: str):
        self.es = es
        self.index_name = index_name

    @classmethod
    def from_config(cls, config: Config) -> StreetIndexer:
        return cls(build_es_client(config), config.index_name)

    # ================================================================
    # 인덱스 관리
    # ================================================================

    async def ensure_index(self, mapping: Mapping[str, Any]) -> bool:
        """
        인덱스가 없을 때만 생성. mapping의 defaults 키는 ES에 보내지 않음.

        Returns: True면 새로 생성됨, False면 이미 존재.
        """
        if await self.es.indices.exists(index=self.index_name):
            return False

        # settings / mappings / aliases 등 defaults 외 최상위 키 전부
        await self.es.indices.create(index=self.index_name, **index_body(mapping))
        return True

    # ================================================================
    # 벌크 생성 (로더)
    # ================================================================

    async def bulk_create(self, docs: Sequence[dict]) -> int:
        """도큐먼트 배치 → bulk create 1회. _id는 ES 자동 생성."""
        if not docs:
            return 0
        actions = [
            {
                "_op_type": "create",
                "_index": self.index_name,
                "_source": doc,
            }
            for doc in docs
        ]
        success, errors = await async_bulk(
            self.es,
            actions,
            chunk_size=len(actions),
            raise_on_error=False,
            refresh=False,
        )
        if errors:
            raise BulkIndexError(len(errors), errors)
        return success

    # ================================================================
    # 검색 / 논리 삭제 (API)
    # ================================================================

    async def search(self, q: str, mode: SearchMode, size: int = MAX_RESULTS):
        """모드별 쿼리 + isDeleted=false 필터, 표시용 6개 필드만 반환"""
        return await self.es.search(
            index=self.index_name,
            query=build_query(q, mode),
            size=min(size, MAX_RESULTS),
            source=list(SOURCE_FIELDS),
        )

    async def soft_delete(self, doc_id: str):
        """isDeleted=true 부분 업데이트 + 즉시 refresh. 없는 id → NotFoundError."""
        doc_id = (doc_id or "").strip()
        if not doc_id:
            raise ValueError("Missing id")
        return await self.es.update(
            index=self.index_name,
            id=doc_id,
            doc={DELETED_FIELD: True},
            refresh="true",
        )

    # ================================================================
    # 상태 확인
    # ================================================================

    async def info(self) -> dict:
        return await self.es.info()

    async def count(self) -> int:
        result = await self.es.count(index=self.index_name)
        return result["count"]

    async def refresh(self):
        await self.es.indices.refresh(index=self.index_name)

    async def close(self):
        await self.es.close()
