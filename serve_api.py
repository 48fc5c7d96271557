#!/usr/bin/env python3
# serve_api.py
"""
streets 검색 API 서버 (uvicorn)

실행:
  python serve_api.py
  python serve_api.py --port 3001 --index streets --es_url http://localhost:9200
"""

import argparse
from dataclasses import replace

import uvicorn

from street_search import Config, create_app
from street_search.log import setup_logging


def main(argv: list[str] | None = None):
    defaults = Config.from_env()
    parser = argparse.ArgumentParser(description="streets 검색 / 논리 삭제 API")
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--index", default=defaults.index_name)
    parser.add_argument("--es_url", default=defaults.es_url)
    parser.add_argument("--cors_origin", default=defaults.cors_origin)
    args = parser.parse_args(argv)

    config = replace(
        defaults,
        host=args.host,
        port=args.port,
        index_name=args.index,
        es_url=args.es_url,
        cors_origin=args.cors_origin,
    )

    setup_logging()
    app = create_app(config)
    print(f"  API server: http://localhost:{config.port}")
    print(f"  Elasticsearch: {config.es_url}  Index: {config.index_name}")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
