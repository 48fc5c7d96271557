"""엑셀 → Elasticsearch 적재 파이프라인 — Rich 로깅 + Progress Bar

  [1/4] mapping.json → FieldSchema   (설정 오류 시 ES 접속 전 중단)
  [2/4] 엑셀 첫 시트 읽기             (파일/시트/데이터 없으면 쓰기 전 중단)
  [3/4] 인덱스 확인 (없을 때만 생성)
  [4/4] 행 → 도큐먼트 → batch_size 단위 bulk create

배치 실패 시 재시도 없이 중단. 이미 적재된 배치는 그대로 남는다.
같은 인덱스에 다시 돌리면 도큐먼트가 중복 생성되므로 재적재 전 인덱스를 비울 것.
"""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path

from openpyxl import load_workbook
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from .config import Config
from .indexer import StreetIndexer
from .log import describe_config, get_logger, setup_logging, timestamped_log_file
from .schema import CellValue, FieldSchema, load_mapping, row_to_doc

console = Console()
logger = get_logger("loader")


class SourceError(RuntimeError):
    """엑셀 파일을 읽을 수 없거나 데이터 행이 없음"""


@dataclass
class LoadResult:
    indexed: int
    index_name: str

    def to_dict(self) -> dict:
        return {"indexed": self.indexed, "indexName": self.index_name}


# ============================================================
# 엑셀 읽기
# ============================================================
def _is_blank(row: tuple) -> bool:
    return all(cell is None or (isinstance(cell, str) and not cell.strip()) for cell in row)


def read_excel_rows(path: Path) -> list[list[CellValue]]:
    """
    첫 번째 시트의 데이터 행 전체 (1행 = 헤더, 건너뜀).

    빈 행은 제외. 시트 전체를 메모리에 올림.

    Raises:
        FileNotFoundError: 파일 없음
        SourceError: 워크북을 열 수 없음 / 시트 없음 / 데이터 행 없음
    """
    if not path.exists():
        raise FileNotFoundError(f"Excel file not found: {path}")

    try:
        workbook = load_workbook(filename=str(path), read_only=True, data_only=True)
    except Exception as e:
        raise SourceError(f"Cannot read workbook {path}: {e}") from e

    try:
        if not workbook.worksheets:
            raise SourceError("Workbook has no sheets")
        sheet = workbook.worksheets[0]
        rows = [
            list(row)
            for row in sheet.iter_rows(values_only=True)
            if not _is_blank(row)
        ]
    finally:
        workbook.close()

    if len(rows) < 2:
        raise SourceError(f"No data rows in sheet: {path}")
    return rows[1:]


# ============================================================
# 진행 표시
# ============================================================
def _create_progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        "[progress.description]{task.description}",
        BarColumn(bar_width=30),
        MofNCompleteColumn(),
        TextColumn("•"),
        TextColumn("[green]{task.fields[indexed]} docs[/]"),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def _summary_table(rows: list[tuple[str, str]]) -> Table:
    table = Table(title="적재 결과", show_header=False, border_style="dim")
    table.add_column("항목", style="bold")
    table.add_column("값", justify="right", style="cyan")
    for label, value in rows:
        table.add_row(label, value)
    return table


# ============================================================
# 적재
# ============================================================
async def load_and_index(
    indexer: StreetIndexer,
    schema: FieldSchema,
    rows: list[list[CellValue]],
    batch_size: int,
) -> int:
    """
    행 → 도큐먼트 → batch_size마다 bulk create. 빈 도큐먼트는 건너뜀.

    Returns: 실제로 적재된 도큐먼트 수
    """
    batch: list[dict] = []
    indexed = 0
    consumed = 0  # 마지막 flush 이후 처리한 행 수 (progress용)

    progress = _create_progress()
    with progress:
        task_id = progress.add_task("Indexing", total=len(rows), indexed=0)

        async def flush():
            nonlocal batch, indexed, consumed
            if batch:
                t0 = time.perf_counter()
                await indexer.bulk_create(batch)
                indexed += len(batch)
                logger.info(
                    f"bulk {len(batch):,}건  누적 {indexed:,}건  "
                    f"{(time.perf_counter() - t0) * 1000:.0f}ms"
                )
                batch = []
            progress.update(task_id, advance=consumed, indexed=indexed)
            consumed = 0

        for row in rows:
            consumed += 1
            doc = row_to_doc(row, schema)
            if doc is None:
                continue
            batch.append(doc)
            if len(batch) >= batch_size:
                await flush()

        await flush()

    return indexed


async def _run(config: Config) -> LoadResult:
    logger.info("[1/4] 매핑 로드")
    mapping = load_mapping(config.mapping_path)
    schema = FieldSchema.from_mapping(mapping)
    logger.info(f"{config.mapping_path.name} → 필드 {len(schema.field_names)}개: {', '.join(schema.field_names)}")

    logger.info("[2/4] 엑셀 로드")
    rows = read_excel_rows(config.excel_path)
    logger.info(f"{config.excel_path.name} → 데이터 행 {len(rows):,}건")

    indexer = StreetIndexer.from_config(config)
    try:
        logger.info(f"[3/4] ES 인덱스: {config.index_name}")
        created = await indexer.ensure_index(mapping)
        logger.info("신규 생성" if created else "기존 인덱스 사용")

        logger.info(f"[4/4] 적재 (batch={config.batch_size})")
        t0 = time.perf_counter()
        indexed = await load_and_index(indexer, schema, rows, config.batch_size)
        wall = time.perf_counter() - t0
    finally:
        await indexer.close()

    summary = [
        ("인덱스", config.index_name),
        ("데이터 행", f"{len(rows):,}"),
        ("적재 도큐먼트", f"{indexed:,}"),
        ("건너뛴 행", f"{len(rows) - indexed:,}"),
        ("Wall time", f"{wall:.1f}초"),
    ]
    console.print(_summary_table(summary))
    for label, value in summary:
        logger.info(f"{label}: {value}")

    return LoadResult(indexed=indexed, index_name=config.index_name)


def run_loader(config: Config | None = None, log_path: Path | None = None) -> LoadResult:
    """엑셀 → ES 1회 적재 (동기 래퍼). 모든 오류는 호출자에게 전파."""
    config = config or Config.from_env()
    log_file = log_path or timestamped_log_file(config.log_dir, "load")
    setup_logging(log_file=log_file)
    logger.info(f"Log → {log_file}")
    logger.info(f"config: {describe_config(config)}")

    console.print(
        Panel.fit(
            f"[bold]엑셀 → Elasticsearch[/] — {config.excel_path.name} → {config.index_name}",
            border_style="green",
        )
    )
    return asyncio.run(_run(config))
