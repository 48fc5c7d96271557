"""Config 기본값 + 환경변수"""

from pathlib import Path

from street_search import Config
from street_search.config import ROOT_DIR


def test_defaults():
    c = Config()
    assert c.es_url == "http://localhost:9200"
    assert c.index_name == "streets"
    assert c.batch_size == 500
    assert c.port == 3001
    assert c.cors_origin == "*"
    assert c.es_nodes is None
    assert c.mapping_path == ROOT_DIR / "elastic" / "mapping.json"
    assert c.excel_path.parent == ROOT_DIR / "data"


def test_from_env_empty_matches_defaults():
    assert Config.from_env({}) == Config()


def test_from_env_overrides():
    c = Config.from_env({
        "ELASTICSEARCH_URL": "http://es:9200",
        "INDEX_NAME": "streets_v2",
        "EXCEL_PATH": "/data/streets.xlsx",
        "MAPPING_PATH": "/cfg/mapping.json",
        "BATCH_SIZE": "1000",
        "PORT": "8080",
        "CORS_ORIGIN": "http://localhost:5173",
    })
    assert c.es_url == "http://es:9200"
    assert c.index_name == "streets_v2"
    assert c.excel_path == Path("/data/streets.xlsx")
    assert c.mapping_path == Path("/cfg/mapping.json")
    assert c.batch_size == 1000
    assert c.port == 8080
    assert c.cors_origin == "http://localhost:5173"


def test_from_env_file_names():
    c = Config.from_env({"EXCEL_FILE_NAME": "streets.xlsx", "MAPPING_FILE_NAME": "m.json"})
    assert c.excel_path == ROOT_DIR / "data" / "streets.xlsx"
    assert c.mapping_path == ROOT_DIR / "elastic" / "m.json"


def test_from_env_bad_batch_size_falls_back():
    for raw in ("abc", "0", "-5", ""):
        assert Config.from_env({"BATCH_SIZE": raw}).batch_size == 500


def test_from_env_bad_port_falls_back():
    """잘못된 PORT 때문에 로더 CLI까지 죽지 않도록 기본값 사용"""
    for raw in ("abc", "", "0", "-1", "70000", "30.5"):
        assert Config.from_env({"PORT": raw}).port == 3001
    assert Config.from_env({"PORT": "65535"}).port == 65535
