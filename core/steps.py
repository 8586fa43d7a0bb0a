"""
Step 與附件紀錄

pytest 本身沒有「步驟樹」，這裡提供最小的實作，供 Word 報告使用：

- step(title)：可巢狀的具名步驟邊界 (context manager)，記錄耗時與錯誤
- attach(name, ...)：把截圖等附件掛到目前的測試上

每個測試（每個執行緒）一個 StepRecorder，由 conftest 的 fixture 啟動/停止。
沒有啟動 recorder 時 step()/attach() 不做任何紀錄，方便在單元測試中直接呼叫 Page 方法。
若安裝了 allure-pytest，步驟與附件會同步寫入 Allure 結果。

用法：
    from core import steps

    with steps.step("輸入帳號"):
        page.fill_username("admin")
    steps.attach("screenshot-輸入帳號", body=png)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Iterator

from utils.allure_helper import allure_step, attach_file, attach_png

# 步驟分類：只有 TEST_STEP 會出現在報告的步驟清單
TEST_STEP = "test.step"
HOOK = "hook"
FIXTURE = "fixture"


@dataclass
class StepNode:
    """步驟樹中的一個節點"""
    title: str
    category: str = TEST_STEP
    duration_ms: float = 0.0
    error: str | None = None
    steps: list[StepNode] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> StepNode:
        return cls(
            title=data["title"],
            category=data.get("category", TEST_STEP),
            duration_ms=data.get("duration_ms", 0.0),
            error=data.get("error"),
            steps=[cls.from_dict(s) for s in data.get("steps", [])],
        )


@dataclass
class Attachment:
    """測試附件：body (bytes) 或 path 二擇一"""
    name: str
    content_type: str = "image/png"
    body: bytes | None = None
    path: str | None = None

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Attachment:
        return cls(
            name=data["name"],
            content_type=data.get("content_type", "image/png"),
            body=data.get("body"),
            path=data.get("path"),
        )


def describe_error(error: BaseException) -> str:
    """把例外轉成單行描述，例如 'AssertionError: 找不到訊息'"""
    message = str(error).strip().splitlines()
    first = message[0] if message else ""
    return f"{type(error).__name__}: {first}" if first else type(error).__name__


class StepRecorder:
    """單一測試的步驟樹與附件清單"""

    def __init__(self):
        self.steps: list[StepNode] = []
        self.attachments: list[Attachment] = []
        self._stack: list[StepNode] = []

    @contextlib.contextmanager
    def step(self, title: str, category: str = TEST_STEP) -> Iterator[StepNode]:
        """
        開啟一個具名步驟。區塊內再呼叫 step() 會成為子步驟。
        區塊拋出例外時，錯誤訊息記錄在節點上並繼續往外拋。
        """
        node = StepNode(title=title, category=category)
        parent = self._stack[-1].steps if self._stack else self.steps
        parent.append(node)
        self._stack.append(node)

        start = time.perf_counter()
        mirror = allure_step(title) if category == TEST_STEP else contextlib.nullcontext()
        try:
            with mirror:
                yield node
        except Exception as e:
            node.error = describe_error(e)
            raise
        finally:
            node.duration_ms = (time.perf_counter() - start) * 1000
            self._stack.pop()

    def attach(self, name: str, body: bytes | None = None,
               path: str | None = None,
               content_type: str = "image/png") -> Attachment:
        """新增附件（屬於整個測試，之後由 Result Collector 對應到步驟）"""
        if body is None and path is None:
            raise ValueError("attach() 需要 body 或 path")
        attachment = Attachment(
            name=name, content_type=content_type, body=body, path=path,
        )
        self.attachments.append(attachment)
        if body is not None:
            attach_png(body, name=name)
        else:
            attach_file(path, name=name)
        return attachment

    def to_dict(self) -> dict:
        return {
            "steps": [s.to_dict() for s in self.steps],
            "attachments": [a.to_dict() for a in self.attachments],
        }


# ── 目前執行緒的 recorder ──

_local = threading.local()


def start_recording() -> StepRecorder:
    """為目前執行緒建立新的 recorder（每個測試呼叫一次）"""
    recorder = StepRecorder()
    _local.recorder = recorder
    return recorder


def stop_recording() -> None:
    _local.recorder = None


def current_recorder() -> StepRecorder | None:
    return getattr(_local, "recorder", None)


@contextlib.contextmanager
def step(title: str, category: str = TEST_STEP) -> Iterator[StepNode | None]:
    """在目前 recorder 上開啟步驟；沒有 recorder 時直接執行區塊"""
    recorder = current_recorder()
    if recorder is None:
        yield None
        return
    with recorder.step(title, category) as node:
        yield node


def attach(name: str, body: bytes | None = None, path: str | None = None,
           content_type: str = "image/png") -> Attachment | None:
    """把附件掛到目前的測試；沒有 recorder 時忽略"""
    recorder = current_recorder()
    if recorder is None:
        return None
    return recorder.attach(name, body=body, path=path, content_type=content_type)
