"""mapping.json → 필드 스키마 + 셀 값 변환 + 엑셀 행 → 도큐먼트

mapping.json 형식:
    {
      "settings": {...},
      "mappings": {"properties": {"namePrimary": {"type": "text", "copy_to": "allText"}, ...}},
      "defaults": {"isDeleted": false}      # 로더 전용, ES에는 보내지 않음
    }

properties 순서 = 엑셀 컬럼 순서 (A열 → 첫 번째 필드). 헤더 이름은 보지 않는다.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Sequence

# copy_to 대상 필드 — 검색 전용, 엑셀 컬럼과 매칭되지 않음
ALL_TEXT_FIELD = "allText"
DEFAULT_FIELD_TYPE = "text"

INTEGER_TYPES = frozenset({"integer", "long"})
TRUE_STRINGS = frozenset({"true", "1", "yes"})

CellValue = str | int | float | bool | None


class SchemaError(ValueError):
    """mapping.json 자체가 잘못된 경우 (설정 오류, 적재 전 중단)"""


def load_mapping(path: Path) -> dict:
    """mapping.json 읽기 (UTF-8). 파일 없음 → FileNotFoundError."""
    if not path.exists():
        raise FileNotFoundError(f"Mapping file not found: {path}")
    try:
        mapping = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid mapping JSON in {path}: {e}") from e
    if not isinstance(mapping, dict):
        raise SchemaError(f"Mapping root must be a JSON object: {path}")
    return mapping


def index_body(mapping: Mapping[str, Any]) -> dict:
    """인덱스 생성용 본문 — defaults 키 제거"""
    return {key: value for key, value in mapping.items() if key != "defaults"}


def _properties(mapping: Mapping[str, Any]) -> dict:
    mappings = mapping.get("mappings")
    if not isinstance(mappings, dict):
        return {}
    props = mappings.get("properties")
    return props if isinstance(props, dict) else {}


@dataclass(frozen=True)
class FieldSchema:
    """
    엑셀 행을 도큐먼트로 바꾸는 데 필요한 필드 정보. 프로세스 수명 동안 불변.

    field_names: properties 순서 (allText 제외)
    field_types: 필드명 → ES 타입 (미지정 시 "text")
    defaults:    필드명 → 누락 시 채울 값
    """

    field_names: tuple[str, ...]
    field_types: Mapping[str, str]
    defaults: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> FieldSchema:
        props = _properties(mapping)
        names = tuple(name for name in props if name != ALL_TEXT_FIELD)
        if not names:
            raise SchemaError("No indexable fields in mapping")

        types = {}
        for name in names:
            spec = props[name]
            field_type = spec.get("type") if isinstance(spec, dict) else None
            types[name] = field_type or DEFAULT_FIELD_TYPE

        defaults = mapping.get("defaults")
        if not isinstance(defaults, dict):
            defaults = {}

        return cls(
            field_names=names,
            field_types=MappingProxyType(types),
            defaults=MappingProxyType(dict(defaults)),
        )

    @classmethod
    def from_file(cls, path: Path) -> FieldSchema:
        return cls.from_mapping(load_mapping(path))


# ============================================================
# 셀 값 변환
# ============================================================
def _to_integer(raw: CellValue) -> int | None:
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        number = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        number = float(text)
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return None


def _to_boolean(raw: CellValue) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in TRUE_STRINGS


def _to_text(raw: CellValue) -> str | None:
    if isinstance(raw, bool):
        text = "true" if raw else "false"
    elif isinstance(raw, float) and raw.is_integer():
        # 엑셀 숫자 셀은 12.0 으로 읽힘 → "12"
        text = str(int(raw))
    else:
        text = str(raw).strip()
    return text or None


def coerce(raw: CellValue, field_type: str) -> str | int | bool | None:
    """
    셀 값 1개를 필드 타입에 맞게 변환. None = 값 없음 (도큐먼트에서 생략).

    - integer/long: 정수로 떨어지지 않으면 None ("12.5", "abc" → None)
    - boolean:      bool은 그대로, 그 외 "true"/"1"/"yes" (대소문자 무시)만 True
    - 그 외:        문자열 + strip, 빈 문자열 → None

    어떤 입력에도 예외를 던지지 않음.
    """
    if raw is None:
        return None
    try:
        if field_type in INTEGER_TYPES:
            return _to_integer(raw)
        if field_type == "boolean":
            return _to_boolean(raw)
        return _to_text(raw)
    except (TypeError, ValueError, OverflowError):
        return None


def row_to_doc(row: Sequence[CellValue], schema: FieldSchema) -> dict | None:
    """
    엑셀 행 1개 → 도큐먼트. i번째 셀 → i번째 필드.

    셀에서 값이 하나도 나오지 않으면 None (defaults만 있는 도큐먼트는 만들지 않음).
    값이 있으면 비어 있는 필드를 defaults로 채운다.
    """
    doc: dict[str, Any] = {}
    for i, name in enumerate(schema.field_names):
        raw = row[i] if i < len(row) else None
        value = coerce(raw, schema.field_types[name])
        if value is not None:
            doc[name] = value

    if not doc:
        return None

    for name, value in schema.defaults.items():
        if name not in doc:
            doc[name] = value

    return doc
