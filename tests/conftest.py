"""공용 fixture — 매핑, 엑셀 파일 생성, ES mock"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from openpyxl import Workbook

from street_search import FieldSchema

HEADER = ["שם ראשי", "תואר", "שם משני", "קבוצה", "סוג", "שכונה", "תיאור", "קוד"]


@pytest.fixture
def mapping() -> dict:
    return {
        "settings": {"number_of_shards": 1, "number_of_replicas": 0},
        "mappings": {
            "properties": {
                "namePrimary": {"type": "text", "copy_to": "allText"},
                "title": {"type": "text", "copy_to": "allText"},
                "nameSecondary": {"type": "text", "copy_to": "allText"},
                "group": {"type": "text", "copy_to": "allText"},
                "kind": {"type": "text", "copy_to": "allText"},
                "neighborhood": {"type": "text", "copy_to": "allText"},
                "description": {"copy_to": "allText"},
                "streetCode": {"type": "integer"},
                "isDeleted": {"type": "boolean"},
                "allText": {"type": "text"},
            }
        },
        "defaults": {"isDeleted": False},
    }


@pytest.fixture
def schema(mapping) -> FieldSchema:
    return FieldSchema.from_mapping(mapping)


@pytest.fixture
def mapping_file(tmp_path, mapping) -> Path:
    path = tmp_path / "mapping.json"
    path.write_text(json.dumps(mapping, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def write_workbook(tmp_path):
    """rows(헤더 포함)를 첫 시트에 쓰고 경로 반환"""

    def _write(rows: list[list], name: str = "streets.xlsx") -> Path:
        wb = Workbook()
        ws = wb.active
        for row in rows:
            ws.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _write


@pytest.fixture
def street_rows() -> list[list]:
    return [
        HEADER,
        ["הרצל", "חוזה המדינה", "בנימין זאב", "אישים", "רחוב", "מרכז העיר", None, 101],
        ["דרך העצמאות", None, None, "אירועים", "דרך", "הדר", "ציר ראשי", 102],
        ["העצמאות", None, None, "אירועים", "שדרה", "נווה שאנן", None, "103"],
    ]


@pytest.fixture
def mock_es() -> MagicMock:
    """AsyncElasticsearch 대역 — 사용하는 메서드만 AsyncMock"""
    es = MagicMock()
    es.indices = MagicMock()
    es.indices.exists = AsyncMock(return_value=False)
    es.indices.create = AsyncMock()
    es.indices.refresh = AsyncMock()
    es.search = AsyncMock(return_value={"hits": {"hits": []}})
    es.update = AsyncMock(return_value={"result": "updated"})
    es.info = AsyncMock(return_value={"version": {"number": "8.15.0"}})
    es.count = AsyncMock(return_value={"count": 0})
    es.close = AsyncMock()
    return es
