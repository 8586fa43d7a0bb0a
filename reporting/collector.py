"""
Result Collector

接收每個測試的結束事件，整理成 TestResult：
1. 深度優先走訪步驟樹，只保留 test.step 類別的步驟並記錄巢狀層級
2. 依附件名稱（含步驟標題前 20 字）把截圖對應到步驟
3. 備援：截圖數量剛好等於步驟數量時，依順序補到還沒有截圖的步驟

結果依 TestKey 保存，同一鍵後到的結果覆蓋先前的。
整個 run 只有一個 collector：run 開始時建立，run 結束時 drain() 一次。
"""

from __future__ import annotations

import threading
from datetime import datetime

from config.config import Config
from core.steps import TEST_STEP, Attachment, StepNode
from reporting.models import (
    ScreenshotRef,
    StepRecord,
    TestCompletionEvent,
    TestKey,
    TestResult,
)
from utils.logger import logger

TITLE_PREFIX_LENGTH = 20
SCREENSHOT_MARKER = "screenshot"


def flatten_steps(nodes: list[StepNode], level: int = 0) -> list[StepRecord]:
    """
    把步驟樹攤平成清單（父步驟在子步驟之前）。

    非 test.step 的節點（hook、fixture）本身不保留，
    但它們的子步驟仍會被走訪，層級照樣 +1。
    """
    records: list[StepRecord] = []
    for node in nodes:
        if node.category == TEST_STEP:
            records.append(StepRecord(
                title=node.title,
                duration_ms=node.duration_ms,
                level=level,
                error=node.error,
            ))
        records.extend(flatten_steps(node.steps, level + 1))
    return records


def correlate_screenshots(steps: list[StepRecord],
                          attachments: list[Attachment]) -> None:
    """
    把截圖附件分配到步驟（直接修改 steps）。

    先以名稱比對：附件名稱包含步驟標題前 20 字即歸給該步驟。
    若名稱含 "screenshot" 的附件數量恰好等於步驟數量，且仍有步驟沒有截圖，
    第 i 張截圖補給第 i 個空白步驟；已經被其他步驟認領的截圖不再重複分配。
    數量不一致時不補，沒有截圖的步驟在報告中顯示「No evidence」。
    """
    images = [a for a in attachments if a.is_image]
    claimed: set[int] = set()

    for step in steps:
        prefix = step.title[:TITLE_PREFIX_LENGTH]
        for attachment in images:
            if attachment.name and prefix in attachment.name:
                step.screenshots.append(ScreenshotRef.from_attachment(attachment))
                claimed.add(id(attachment))

    if not steps or not attachments:
        return

    screenshots = [a for a in attachments if a.name and SCREENSHOT_MARKER in a.name]
    if len(screenshots) != len(steps):
        return
    if all(step.screenshots for step in steps):
        return

    for step, attachment in zip(steps, screenshots):
        if step.screenshots or id(attachment) in claimed:
            continue
        step.screenshots.append(ScreenshotRef.from_attachment(attachment))
        claimed.add(id(attachment))


def build_result(event: TestCompletionEvent,
                 completed_at: datetime | None = None) -> TestResult:
    """由結束事件建立 TestResult；完成時間在此依設定格式化並保存"""
    completed_at = completed_at or datetime.now()
    steps = flatten_steps(event.steps)
    correlate_screenshots(steps, event.attachments)
    return TestResult(
        title=event.test_title,
        status=event.status,
        duration_ms=event.duration_ms,
        steps=steps,
        errors=list(event.errors),
        context_name=event.context_name,
        completed_at=completed_at,
        completed_at_text=completed_at.strftime(Config.REPORT_DATETIME_FORMAT),
    )


class ResultCollector:
    """
    執行期間的結果緩衝區（thread-safe）

    生命週期：建立（空）→ 測試結束時 add → run 結束時 drain 一次（清空）
    """

    def __init__(self):
        self._results: dict[TestKey, TestResult] = {}
        self._lock = threading.Lock()
        self._drained = False

    def on_test_end(self, event: TestCompletionEvent) -> TestResult:
        """處理測試結束事件，回傳整理後的結果"""
        result = build_result(event)
        self.add(event.key, result)
        return result

    def add(self, key: TestKey, result: TestResult) -> None:
        with self._lock:
            if self._drained:
                logger.warning(f"結果已輸出後才收到事件，忽略: {key}")
                return
            if key in self._results:
                logger.debug(f"覆蓋先前的結果: {key}")
            self._results[key] = result
        logger.debug(
            f"收集結果: {key} [{result.status.value}] "
            f"{len(result.steps)} 個步驟"
        )

    def drain(self) -> list[tuple[TestKey, TestResult]]:
        """取出全部結果並清空；只能呼叫一次"""
        with self._lock:
            if self._drained:
                return []
            items = list(self._results.items())
            self._results.clear()
            self._drained = True
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __contains__(self, key: TestKey) -> bool:
        with self._lock:
            return key in self._results
