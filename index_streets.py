#!/usr/bin/env python3
# index_streets.py
"""
거리 이름 엑셀 → Elasticsearch 적재 (CLI 엔트리포인트)

사전 조건:
  Elasticsearch 실행 중 + elastic/mapping.json 의 properties 순서 = 엑셀 컬럼 순서

실행:
  # 환경변수 (ELASTICSEARCH_URL, INDEX_NAME, EXCEL_PATH, MAPPING_PATH, BATCH_SIZE) 기준
  python index_streets.py

  # 개별 값 덮어쓰기
  python index_streets.py --excel data/streets.xlsx --index streets_v2 --batch_size 1000

  # ES 클러스터 + fingerprint 인증
  python index_streets.py \\
      --es_nodes https://es01:9200 https://es02:9200 \\
      --es_fingerprint "B1:2A:96:..." \\
      --es_username elastic --es_password changeme

재실행 시 기존 도큐먼트가 중복 생성됨 — 필요하면 인덱스를 먼저 삭제할 것.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from street_search import Config, run_loader
from street_search.log import get_logger, setup_logging

logger = get_logger("cli")


def build_parser(defaults: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="거리 이름 엑셀 → Elasticsearch")

    data = parser.add_argument_group("데이터 소스")
    data.add_argument("--excel", type=Path, default=defaults.excel_path, help="엑셀 파일 경로 (첫 시트만 사용)")
    data.add_argument("--mapping", type=Path, default=defaults.mapping_path, help="mapping.json 경로")

    parser.add_argument("--index", default=defaults.index_name)
    parser.add_argument("--batch_size", type=int, default=defaults.batch_size)
    parser.add_argument("--es_url", default=defaults.es_url)
    parser.add_argument("--log_dir", type=Path, default=defaults.log_dir)

    cluster = parser.add_argument_group("ES 클러스터 연결")
    cluster.add_argument("--es_nodes", nargs="+", default=None, help="클러스터 노드 URL 목록 (설정 시 --es_url 무시)")
    cluster.add_argument("--es_fingerprint", default=None, help="TLS 인증서 SHA-256 fingerprint")
    cluster.add_argument("--es_username", default=defaults.es_username)
    cluster.add_argument("--es_password", default=defaults.es_password)
    cluster.add_argument("--es_api_key", default=defaults.es_api_key)
    return parser


def main(argv: list[str] | None = None) -> int:
    defaults = Config.from_env()
    args = build_parser(defaults).parse_args(argv)

    if args.batch_size < 1:
        print("--batch_size 는 1 이상이어야 합니다.", file=sys.stderr)
        return 2

    config = replace(
        defaults,
        excel_path=args.excel,
        mapping_path=args.mapping,
        index_name=args.index,
        batch_size=args.batch_size,
        es_url=args.es_url,
        es_nodes=args.es_nodes,
        es_fingerprint=args.es_fingerprint,
        es_username=args.es_username,
        es_password=args.es_password,
        es_api_key=args.es_api_key,
        log_dir=args.log_dir,
    )

    try:
        result = run_loader(config)
    except Exception as e:
        setup_logging()
        logger.exception(f"적재 실패: {e}")
        return 1

    print("Indexed", result.indexed, "rows into", result.index_name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
