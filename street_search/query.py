"""검색 모드 → Elasticsearch bool 쿼리

  free:   namePrimary 필드만 대상, 기본 match (다른 필드는 무시)
  any:    allText 대상, 단어 중 하나라도 일치 (operator=or)
  phrase: allText 대상, 단어 순서 그대로 연속 일치 (match_phrase)

모든 모드에 isDeleted=false 필터가 붙는다. 검색 경로는 반드시 build_query를 거칠 것.
"""

from enum import Enum
from typing import Callable

from .schema import ALL_TEXT_FIELD

PRIMARY_FIELD = "namePrimary"
DELETED_FIELD = "isDeleted"
MAX_RESULTS = 200

# 검색 결과에 내려주는 필드 (그 외 필드는 저장만 됨)
SOURCE_FIELDS = (
    "namePrimary",
    "title",
    "nameSecondary",
    "group",
    "kind",
    "neighborhood",
)


class SearchMode(str, Enum):
    FREE = "free"
    ANY = "any"
    PHRASE = "phrase"

    @classmethod
    def parse(cls, value: str | None) -> "SearchMode":
        """알 수 없는 모드 문자열은 FREE로 취급"""
        try:
            return cls((value or "").strip())
        except ValueError:
            return cls.FREE


def _free_clause(q: str) -> dict:
    return {"match": {PRIMARY_FIELD: {"query": q}}}


def _any_clause(q: str) -> dict:
    return {"match": {ALL_TEXT_FIELD: {"query": q, "operator": "or"}}}


def _phrase_clause(q: str) -> dict:
    return {"match_phrase": {ALL_TEXT_FIELD: {"query": q}}}


_CLAUSES: dict[SearchMode, Callable[[str], dict]] = {
    SearchMode.FREE: _free_clause,
    SearchMode.ANY: _any_clause,
    SearchMode.PHRASE: _phrase_clause,
}


def not_deleted_filter() -> dict:
    return {"term": {DELETED_FIELD: False}}


def build_query(q: str, mode: SearchMode) -> dict:
    """q는 호출 측에서 strip + 빈 문자열 체크 완료된 상태"""
    clause = _CLAUSES.get(mode, _free_clause)(q)
    return {
        "bool": {
            "must": [clause],
            "filter": [not_deleted_filter()],
        }
    }
