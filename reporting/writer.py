"""
Report Writer

把組好的 Word 文件寫到輸出目錄：
    {測試名稱中非英數字元換成 _}_{epoch 毫秒}.docx

文件先完整序列化到記憶體，再以獨佔模式 ("xb") 建立檔案，不會覆寫既有報告；
同名檔已存在時毫秒值往後遞增。寫入失敗時刪除檔案，不會留下寫到一半的 .docx。
"""

from __future__ import annotations

import io
import re
import time
from pathlib import Path

from config.config import Config
from core.exceptions import ReportWriteError
from reporting.synthesizer import RenderedDocument
from utils.logger import logger

DOC_EXTENSION = ".docx"
MAX_NAME_ATTEMPTS = 1000
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")


def sanitize_filename(name: str) -> str:
    """每個非英數字元換成 _"""
    return _UNSAFE_CHARS.sub("_", name)


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class ReportWriter:
    """每份文件一個檔案，輸出目錄不存在時自動建立"""

    def __init__(self, output_dir: str | Path | None = None):
        self.output_dir = Path(output_dir or Config.REPORT_DIR)

    def ensure_output_dir(self) -> Path:
        # exist_ok：多個 writer 同時建立也不會失敗
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def write(self, test_name: str, document: RenderedDocument) -> Path:
        """
        序列化並寫檔。

        Returns:
            報告檔案路徑

        Raises:
            ReportWriteError: 序列化或寫檔失敗
        """
        output_dir = self.ensure_output_dir()
        safe_name = sanitize_filename(test_name)
        millis = _epoch_millis()

        buffer = io.BytesIO()
        try:
            document.save(buffer)
        except Exception as e:
            raise ReportWriteError(
                str(output_dir / f"{safe_name}_{millis}{DOC_EXTENSION}"), e
            ) from e

        path = self._create_exclusive(safe_name, millis, buffer.getvalue())
        logger.info(f"✓ 報告已產生: {path}")
        return path

    def _create_exclusive(self, safe_name: str, millis: int, payload: bytes) -> Path:
        """建立新檔並寫入；檔名已被佔用時毫秒值 +1 再試"""
        for offset in range(MAX_NAME_ATTEMPTS):
            path = self.output_dir / f"{safe_name}_{millis + offset}{DOC_EXTENSION}"
            try:
                handle = open(path, "xb")
            except FileExistsError:
                continue
            except OSError as e:
                raise ReportWriteError(str(path), e) from e

            try:
                with handle:
                    handle.write(payload)
            except OSError as e:
                path.unlink(missing_ok=True)
                raise ReportWriteError(str(path), e) from e

            if offset:
                logger.warning(f"報告檔名已存在，改用: {path.name}")
            return path

        raise ReportWriteError(
            str(self.output_dir / f"{safe_name}_{millis}{DOC_EXTENSION}"),
            FileExistsError(f"連續 {MAX_NAME_ATTEMPTS} 個檔名都已存在"),
        )
