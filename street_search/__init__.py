"""
street_search — 거리 이름 엑셀 → Elasticsearch 적재 + 검색/논리 삭제 API

적재 (1회, 운영자 실행):
    from street_search import Config, run_loader
    result = run_loader(Config(excel_path=Path("data/streets.xlsx"), batch_size=500))
    print(result.to_dict())   # {"indexed": 1234, "indexName": "streets"}

API 서버:
    from street_search import Config, create_app
    app = create_app(Config.from_env())

검색 (async):
    service = StreetService(StreetIndexer.from_config(config))
    hits = await service.search("הרצל", "free")
    await service.delete(hits[0].id)
"""

from .api import create_app
from .config import Config
from .indexer import BulkIndexError, StreetIndexer, build_es_client
from .loader import LoadResult, SourceError, read_excel_rows, run_loader
from .query import MAX_RESULTS, SOURCE_FIELDS, SearchMode, build_query
from .schema import FieldSchema, SchemaError, coerce, load_mapping, row_to_doc
from .service import (
    InvalidRequestError,
    NotFoundServiceError,
    ServiceError,
    StreetHit,
    StreetService,
)

__all__ = [
    "Config", "create_app",
    "StreetIndexer", "build_es_client", "BulkIndexError",
    "run_loader", "read_excel_rows", "LoadResult", "SourceError",
    "SearchMode", "build_query", "MAX_RESULTS", "SOURCE_FIELDS",
    "FieldSchema", "SchemaError", "coerce", "load_mapping", "row_to_doc",
    "StreetService", "StreetHit",
    "ServiceError", "InvalidRequestError", "NotFoundServiceError",
]
