"""
Word 報告 pytest plugin

在根目錄 conftest.py 以 pytest_plugins 載入：
    pytest_plugins = ["reporting.word_reporter"]

流程：
    pytest_configure        建立 WordReporter（含空的 ResultCollector）
    pytest_runtest_makereport  teardown 後把 TestCompletionEvent 放進 report.user_properties
    pytest_runtest_logreport   collector 收下事件（xdist 時在 controller 端收）
    pytest_sessionfinish    drain collector，每筆結果產生一份 .docx
    pytest_terminal_summary 列出產生的報告

只有呼叫過 track_test() 的測試（使用瀏覽器的測試）才會產生報告。
"""

from __future__ import annotations

from pathlib import Path

import pytest

from config.config import Config
from core.steps import StepRecorder
from reporting.collector import ResultCollector
from reporting.models import ErrorInfo, TestCompletionEvent, TestStatus
from reporting.synthesizer import DocumentSynthesizer
from reporting.writer import ReportWriter
from utils.logger import logger

PLUGIN_NAME = "word_reporter"
EVENT_PROPERTY = "word_report_event"

RECORDER_KEY = pytest.StashKey[StepRecorder]()
CONTEXT_KEY = pytest.StashKey[str]()
PHASES_KEY = pytest.StashKey[dict]()


def track_test(item: pytest.Item, recorder: StepRecorder,
               context_name: str) -> None:
    """標記此測試要產生 Word 報告（由 fixture 在 setup 時呼叫）"""
    item.stash[RECORDER_KEY] = recorder
    item.stash[CONTEXT_KEY] = context_name


# ── 事件組裝 ──

def _first_doc_line(obj) -> str:
    if obj is None:
        return ""
    doc = getattr(obj, "__doc__", None) or ""
    for line in doc.strip().splitlines():
        if line.strip():
            return line.strip()
    return ""


def suite_title(item: pytest.Item) -> str:
    """測試類別 docstring 第一行 → 類別名稱 → 模組名稱"""
    cls = getattr(item, "cls", None)
    if cls is not None:
        return _first_doc_line(cls) or cls.__name__
    module = getattr(item, "module", None)
    if module is not None:
        return module.__name__.rsplit(".", 1)[-1]
    return item.parent.name if item.parent else ""


def case_title(item: pytest.Item, context_param: str = "browser_name") -> str:
    """測試函式 docstring 第一行（或函式名），再加上瀏覽器以外的參數"""
    title = _first_doc_line(getattr(item, "function", None)) or getattr(
        item, "originalname", item.name
    )
    callspec = getattr(item, "callspec", None)
    if callspec is not None:
        extra = [str(v) for k, v in callspec.params.items() if k != context_param]
        if extra:
            title = f"{title} [{'-'.join(extra)}]"
    return title


def resolve_status(reports: list) -> TestStatus:
    """把 setup / call / teardown 三個階段的結果合併成一個狀態"""
    for report in reports:
        if report.failed:
            if "Timeout >" in str(report.longrepr or ""):
                return TestStatus.TIMED_OUT
            return TestStatus.FAILED
    if any(report.skipped for report in reports):
        return TestStatus.SKIPPED
    return TestStatus.PASSED


def _error_info(report) -> ErrorInfo:
    crash = getattr(report.longrepr, "reprcrash", None)
    message = crash.message if crash is not None else str(report.longrepr or "")
    return ErrorInfo(
        message=message.strip().splitlines()[0] if message.strip() else report.when,
        stack=str(report.longrepr or ""),
    )


def build_event(item: pytest.Item, recorder: StepRecorder,
                context_name: str, reports: list) -> TestCompletionEvent:
    return TestCompletionEvent(
        test_title=case_title(item),
        suite_title=suite_title(item),
        status=resolve_status(reports),
        duration_ms=sum(r.duration for r in reports) * 1000,
        context_name=context_name,
        steps=list(recorder.steps),
        attachments=list(recorder.attachments),
        errors=[_error_info(r) for r in reports if r.failed],
    )


_EXIT_LABELS = {
    pytest.ExitCode.OK: "passed",
    pytest.ExitCode.TESTS_FAILED: "failed",
    pytest.ExitCode.INTERRUPTED: "interrupted",
    pytest.ExitCode.NO_TESTS_COLLECTED: "no tests",
}


def exit_label(exitstatus) -> str:
    try:
        code = pytest.ExitCode(exitstatus)
    except ValueError:
        return str(exitstatus)
    return _EXIT_LABELS.get(code, code.name.lower())


class WordReporter:
    """整個 run 一個實例；generate=False 時（xdist worker）只轉送事件"""

    def __init__(self, output_dir: str | Path | None = None,
                 generate: bool = True,
                 collector: ResultCollector | None = None,
                 synthesizer: DocumentSynthesizer | None = None,
                 writer: ReportWriter | None = None):
        self.generate = generate
        self.collector = collector or ResultCollector()
        self.synthesizer = synthesizer or DocumentSynthesizer()
        self.writer = writer or ReportWriter(output_dir or Config.REPORT_DIR)
        self.generated: list[Path] = []
        self.failures: list[tuple[str, str]] = []

    # ── pytest hooks ──

    def pytest_collection_finish(self, session):
        if self.generate:
            logger.info(f"開始執行測試，共 {len(session.items)} 個測試")

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item, call):
        outcome = yield
        report = outcome.get_result()

        recorder = item.stash.get(RECORDER_KEY, None)
        if recorder is None:
            return
        phases = item.stash.setdefault(PHASES_KEY, {})
        phases[report.when] = report
        if report.when != "teardown":
            return

        event = build_event(
            item, recorder, item.stash.get(CONTEXT_KEY, "default"),
            list(phases.values()),
        )
        report.user_properties.append((EVENT_PROPERTY, event.to_dict()))

    def pytest_runtest_logreport(self, report):
        if not self.generate:
            return
        for name, value in report.user_properties:
            if name == EVENT_PROPERTY:
                self.collector.on_test_end(TestCompletionEvent.from_dict(value))

    def pytest_sessionfinish(self, session, exitstatus):
        if not self.generate:
            return
        logger.info(f"測試執行結束，狀態: {exit_label(exitstatus)}")
        self.generate_reports()

    def pytest_terminal_summary(self, terminalreporter, exitstatus, config):
        if not self.generated and not self.failures:
            return
        terminalreporter.section("Word Test Reports", sep="=")
        for path in self.generated:
            terminalreporter.line(f"  OK    {path}")
        for test_name, error in self.failures:
            terminalreporter.line(f"  FAIL  {test_name}: {error}")

    # ── 產生報告 ──

    def generate_reports(self) -> list[Path]:
        """drain collector；單一報告失敗只記錄，繼續處理其他結果"""
        results = self.collector.drain()
        if not results:
            return self.generated
        logger.info(f"產生 {len(results)} 份 Word 報告...")

        for key, result in results:
            test_name = key.display()
            try:
                document = self.synthesizer.synthesize(test_name, result)
                self.generated.append(self.writer.write(test_name, document))
            except Exception as e:
                logger.error(f"✗ 產生報告失敗: {test_name}: {e}", exc_info=True)
                self.failures.append((test_name, str(e)))
        return self.generated


# ── 模組層級 hooks（plugin 進入點）──

def pytest_addoption(parser):
    group = parser.getgroup("word-report", "Word 測試報告")
    group.addoption(
        "--word-report-dir",
        action="store",
        default=None,
        help=f"Word 報告輸出目錄 (預設 {Config.REPORT_DIR})",
    )
    group.addoption(
        "--no-word-report",
        action="store_true",
        default=False,
        help="不產生 Word 報告",
    )


def pytest_configure(config):
    if config.getoption("--no-word-report"):
        return
    reporter = WordReporter(
        output_dir=config.getoption("--word-report-dir"),
        generate=not hasattr(config, "workerinput"),
    )
    config.pluginmanager.register(reporter, PLUGIN_NAME)


def pytest_unconfigure(config):
    reporter = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if reporter is not None:
        config.pluginmanager.unregister(reporter)
