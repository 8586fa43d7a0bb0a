"""
日誌模組
整個測試專案共用一個 logger，同時輸出到 console 與檔案。

環境變數：
    LOG_LEVEL: console 日誌等級 (預設 INFO)
    LOG_DIR:   日誌檔目錄 (預設 <專案>/reports)
    LOG_JSON:  設為 "1" 額外輸出 JSON 結構化日誌檔

pytest-xdist 平行執行時每個 worker 各寫一個檔（test-gw0.log ...），避免互相覆寫。
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

LOGGER_NAME = "login_e2e"
LOG_DIR = Path(
    os.getenv("LOG_DIR", str(Path(__file__).resolve().parent.parent / "reports"))
)
CONSOLE_FORMAT = "[%(asctime)s] %(levelname)-7s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def worker_id() -> str:
    """xdist worker 名稱（gw0、gw1...），非平行執行時為 'main'"""
    return os.getenv("PYTEST_XDIST_WORKER", "main")


def log_filename(suffix: str = ".log") -> str:
    worker = worker_id()
    return f"test{suffix}" if worker == "main" else f"test-{worker}{suffix}"


class JsonFormatter(logging.Formatter):
    """JSON 結構化日誌格式器，每行一筆，方便 CI 收集"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
            "worker": worker_id(),
            "thread": record.threadName,
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _create_logger(log_dir: Path = LOG_DIR,
                   json_enabled: bool | None = None) -> logging.Logger:
    log_dir.mkdir(parents=True, exist_ok=True)
    if json_enabled is None:
        json_enabled = os.getenv("LOG_JSON", "").strip() == "1"

    _logger = logging.Logger(LOGGER_NAME)
    _logger.setLevel(logging.DEBUG)
    fmt = logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(getattr(
        logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO
    ))
    console.setFormatter(fmt)
    _logger.addHandler(console)

    # 檔案一律記到 DEBUG
    file_handler = logging.FileHandler(log_dir / log_filename(), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    _logger.addHandler(file_handler)

    if json_enabled:
        json_handler = logging.FileHandler(
            log_dir / log_filename(".json.log"), encoding="utf-8"
        )
        json_handler.setLevel(logging.DEBUG)
        json_handler.setFormatter(JsonFormatter())
        _logger.addHandler(json_handler)

    return _logger


logger = _create_logger()
