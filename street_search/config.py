"""street_search 실행 설정 (로더 + API 서버 공용)"""

import os
from dataclasses import dataclass, field
from pathlib import Path

ROOT_DIR = Path(__file__).parent.parent

DEFAULT_EXCEL_FILE_NAME = "מטלת בית ארכיון שמות רחובות.xlsx"
DEFAULT_MAPPING_FILE_NAME = "mapping.json"
DEFAULT_BATCH_SIZE = 500
DEFAULT_PORT = 3001


def _parse_positive_int(raw: str | None, default: int, maximum: int | None = None) -> int:
    """BATCH_SIZE / PORT 환경변수 파싱. 숫자가 아니거나 범위(1..maximum) 밖이면 기본값."""
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    if value < 1 or (maximum is not None and value > maximum):
        return default
    return value


@dataclass
class Config:
    # Elasticsearch 연결
    es_url: str = "http://localhost:9200"
    es_nodes: list[str] | None = None       # 클러스터 노드 목록 (설정 시 es_url 무시)
    es_fingerprint: str | None = None       # TLS 인증서 SHA-256 fingerprint (클러스터 시 필수)
    es_username: str | None = None
    es_password: str | None = None
    es_api_key: str | None = None           # basic_auth 대신 사용 가능

    # 인덱스
    index_name: str = "streets"

    # 데이터 소스 (로더 전용)
    excel_path: Path = field(
        default_factory=lambda: ROOT_DIR / "data" / DEFAULT_EXCEL_FILE_NAME
    )
    mapping_path: Path = field(
        default_factory=lambda: ROOT_DIR / "elastic" / DEFAULT_MAPPING_FILE_NAME
    )
    batch_size: int = DEFAULT_BATCH_SIZE

    # API 서버
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origin: str = "*"

    # 로그 파일 디렉토리 (로더 실행마다 1개 파일)
    log_dir: Path = field(default_factory=lambda: ROOT_DIR / "logs")

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "Config":
        """환경변수 기반 Config. 없는 값은 dataclass 기본값 사용.

        EXCEL_PATH / MAPPING_PATH가 있으면 그대로 쓰고, 없으면
        data/<EXCEL_FILE_NAME>, elastic/<MAPPING_FILE_NAME> 로 조합.
        """
        env = os.environ if environ is None else environ
        excel_path = env.get("EXCEL_PATH") or (
            ROOT_DIR / "data" / env.get("EXCEL_FILE_NAME", DEFAULT_EXCEL_FILE_NAME)
        )
        mapping_path = env.get("MAPPING_PATH") or (
            ROOT_DIR / "elastic" / env.get("MAPPING_FILE_NAME", DEFAULT_MAPPING_FILE_NAME)
        )
        return cls(
            es_url=env.get("ELASTICSEARCH_URL", cls.es_url),
            es_username=env.get("ELASTICSEARCH_USERNAME"),
            es_password=env.get("ELASTICSEARCH_PASSWORD"),
            es_api_key=env.get("ELASTICSEARCH_API_KEY"),
            index_name=env.get("INDEX_NAME", cls.index_name),
            excel_path=Path(excel_path),
            mapping_path=Path(mapping_path),
            batch_size=_parse_positive_int(env.get("BATCH_SIZE"), DEFAULT_BATCH_SIZE),
            port=_parse_positive_int(env.get("PORT"), DEFAULT_PORT, maximum=65535),
            cors_origin=env.get("CORS_ORIGIN", cls.cors_origin),
        )
