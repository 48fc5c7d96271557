"""로거 설정 — 실행별 파일 교체, markup 제거, 비밀값 마스킹"""

import logging

import pytest
from rich.logging import RichHandler

from street_search import Config
from street_search.log import PKG, describe_config, get_logger, setup_logging


@pytest.fixture(autouse=True)
def clean_pkg_logger():
    logger = logging.getLogger(PKG)
    saved = list(logger.handlers)
    yield
    for h in logger.handlers:
        if h not in saved:
            logger.removeHandler(h)
            h.close()


def test_describe_config_masks_secrets():
    text = describe_config(Config(es_username="elastic", es_password="s3cret", es_api_key="k3y"))
    assert "s3cret" not in text
    assert "k3y" not in text
    assert "es_password=***" in text
    assert "es_api_key=***" in text
    assert "es_username=elastic" in text
    assert "index_name=streets" in text


def test_describe_config_unset_secrets_shown_as_none():
    text = describe_config(Config())
    assert "es_password=None" in text
    assert "es_api_key=None" in text


def test_setup_logging_one_console_handler(tmp_path):
    setup_logging()
    setup_logging(log_file=tmp_path / "a.log")
    handlers = logging.getLogger(PKG).handlers
    assert sum(isinstance(h, RichHandler) for h in handlers) == 1


def test_setup_logging_replaces_previous_run_file(tmp_path):
    """두 번째 적재 로그가 첫 번째 파일에 섞이지 않음"""
    logger = get_logger("loader")

    setup_logging(log_file=tmp_path / "load_1.log")
    logger.info("[bold]첫 번째[/bold] 적재")
    setup_logging(log_file=tmp_path / "load_2.log")
    logger.info("두 번째 적재")

    file_handlers = [
        h for h in logging.getLogger(PKG).handlers if isinstance(h, logging.FileHandler)
    ]
    assert len(file_handlers) == 1
    first = (tmp_path / "load_1.log").read_text(encoding="utf-8")
    second = (tmp_path / "load_2.log").read_text(encoding="utf-8")
    assert "첫 번째 적재" in first and "[bold]" not in first
    assert "두 번째" not in first
    assert "두 번째 적재" in second
    assert "street_search.loader" in second


def test_file_log_keeps_non_markup_brackets(tmp_path):
    setup_logging(log_file=tmp_path / "load.log")
    get_logger("loader").info("행 [3] 건너뜀")
    assert "행 [3] 건너뜀" in (tmp_path / "load.log").read_text(encoding="utf-8")


def test_transport_logger_quieted():
    setup_logging()
    assert logging.getLogger("elastic_transport.transport").level == logging.WARNING
