"""
Word 報告資料模型

TestCompletionEvent  測試結束時由 pytest plugin 產生（原始步驟樹 + 附件）
TestResult           Result Collector 整理後的結果（扁平步驟 + 對應截圖）
TestKey              (suite, test, context) 複合鍵，同一鍵只保留最後一次結果
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from core.steps import Attachment, StepNode


class TestStatus(str, Enum):
    """測試最終狀態"""
    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMED_OUT = "timedOut"


@dataclass(frozen=True)
class TestKey:
    """結果表的唯一鍵，用 tuple 比較，不會因標題含分隔字元而碰撞"""
    __test__ = False

    suite: str
    test: str
    context: str

    def display(self) -> str:
        return f"{self.suite} - {self.test} - {self.context}"

    def __str__(self) -> str:
        return self.display()


@dataclass
class ErrorInfo:
    """錯誤描述"""
    message: str
    stack: str = ""

    def to_dict(self) -> dict:
        return {"message": self.message, "stack": self.stack}

    @classmethod
    def from_dict(cls, data: dict) -> ErrorInfo:
        return cls(message=data.get("message", ""), stack=data.get("stack", ""))


@dataclass
class ScreenshotRef:
    """一張截圖：source 為附件名稱（含步驟名），內容是 bytes 或檔案路徑"""
    source: str
    body: bytes | None = None
    path: str | None = None

    @classmethod
    def from_attachment(cls, attachment: Attachment) -> ScreenshotRef:
        return cls(
            source=attachment.name, body=attachment.body, path=attachment.path,
        )


@dataclass
class StepRecord:
    """扁平化後的步驟"""
    title: str
    duration_ms: float
    level: int
    error: str | None = None
    screenshots: list[ScreenshotRef] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class TestResult:
    """單一測試的整理結果，Document Synthesizer 的輸入"""
    __test__ = False

    title: str
    status: TestStatus
    duration_ms: float
    steps: list[StepRecord]
    errors: list[ErrorInfo]
    context_name: str
    completed_at: datetime
    completed_at_text: str

    @property
    def passed(self) -> bool:
        return self.status == TestStatus.PASSED


@dataclass
class TestCompletionEvent:
    """
    測試結束事件

    需要能跨 pytest-xdist worker 傳遞，所以提供 to_dict / from_dict
    （只含 str / float / bytes / list / dict）。
    """
    __test__ = False

    test_title: str
    suite_title: str
    status: TestStatus
    duration_ms: float
    context_name: str
    steps: list[StepNode] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    errors: list[ErrorInfo] = field(default_factory=list)

    @property
    def key(self) -> TestKey:
        return TestKey(self.suite_title, self.test_title, self.context_name)

    def to_dict(self) -> dict:
        return {
            "test_title": self.test_title,
            "suite_title": self.suite_title,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "context_name": self.context_name,
            "steps": [s.to_dict() for s in self.steps],
            "attachments": [a.to_dict() for a in self.attachments],
            "errors": [e.to_dict() for e in self.errors],
        }

    @classmethod
    def from_dict(cls, data: dict) -> TestCompletionEvent:
        return cls(
            test_title=data["test_title"],
            suite_title=data["suite_title"],
            status=TestStatus(data["status"]),
            duration_ms=data.get("duration_ms", 0.0),
            context_name=data.get("context_name", "default"),
            steps=[StepNode.from_dict(s) for s in data.get("steps", [])],
            attachments=[Attachment.from_dict(a) for a in data.get("attachments", [])],
            errors=[ErrorInfo.from_dict(e) for e in data.get("errors", [])],
        )
