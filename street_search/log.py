"""
street_search 로거 — 콘솔은 Rich, 로더 실행 기록은 plain-text 파일

  - 콘솔:   RichHandler 1개 (API 서버, 로더 공용)
  - 파일:   적재 1회당 logs/load_YYYYmmdd_HHMMSS.log 1개. 다음 적재가 시작되면 이전 파일은 닫힘
  - 비밀값: Config를 로그에 남길 때는 describe_config()로 비밀번호/API 키를 가림

    logger = get_logger("loader")
    setup_logging(log_file=timestamped_log_file(config.log_dir, "load"))
    logger.info(f"config: {describe_config(config)}")
"""

import logging
import time
from dataclasses import fields, is_dataclass
from pathlib import Path

from rich.logging import RichHandler
from rich.text import Text

PKG = "street_search"

SECRET_FIELDS = frozenset({"es_password", "es_api_key"})
MASK = "***"

# 요청마다 INFO를 찍는 ES transport 로거
NOISY_LOGGERS = ("elastic_transport.transport", "elastic_transport.node_pool")


class _PlainFormatter(logging.Formatter):
    """파일에는 markup 없이: "[green]적재 완료[/green]" → "적재 완료"."""

    def format(self, record: logging.LogRecord) -> str:
        original_msg = record.msg
        if isinstance(record.msg, str):
            try:
                record.msg = Text.from_markup(record.msg).plain
            except Exception:
                pass  # 히브리어 값에 섞인 대괄호 등 markup이 아닌 텍스트
        try:
            return super().format(record)
        finally:
            record.msg = original_msg


def _run_file_handlers(logger: logging.Logger) -> list[logging.FileHandler]:
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler)]


def setup_logging(log_file: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    street_search 로거 설정. 여러 번 호출해도 콘솔 핸들러는 1개.

    log_file이 주어지면 이전 실행의 파일 핸들러를 닫고 새 파일로 교체한다.
    같은 프로세스에서 run_loader를 다시 돌려도 실행별 로그가 섞이지 않음.
    """
    logger = logging.getLogger(PKG)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        console = RichHandler(
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            log_time_format="[%H:%M:%S]",
        )
        console.setLevel(level)
        logger.addHandler(console)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_file:
        for old in _run_file_handlers(logger):
            logger.removeHandler(old)
            old.close()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(_PlainFormatter("%(asctime)s  %(name)s  %(levelname)s  %(message)s"))
        fh.setLevel(level)
        logger.addHandler(fh)

    return logger


def describe_config(config) -> str:
    """Config → "key=value, ..." 한 줄. 비밀값은 설정된 경우에만 *** 로 표시."""
    if not is_dataclass(config):
        return repr(config)
    parts = []
    for f in fields(config):
        value = getattr(config, f.name)
        if f.name in SECRET_FIELDS and value:
            value = MASK
        parts.append(f"{f.name}={value}")
    return ", ".join(parts)


def timestamped_log_file(log_dir: Path, prefix: str) -> Path:
    """log_dir/<prefix>_20260101_120000.log (디렉토리는 setup_logging이 만듦)"""
    return log_dir / f"{prefix}_{time.strftime('%Y%m%d_%H%M%S')}.log"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{PKG}.{name}")
