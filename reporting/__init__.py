"""
reporting: 每個測試一份 Word 證據報告

    ResultCollector      事件 → TestResult（步驟攤平 + 截圖對應）
    DocumentSynthesizer  TestResult → Word 文件
    ReportWriter         Word 文件 → .docx 檔
    WordReporter         pytest plugin，串起整個流程
"""

from reporting.collector import ResultCollector, build_result, correlate_screenshots, flatten_steps
from reporting.models import (
    ErrorInfo,
    ScreenshotRef,
    StepRecord,
    TestCompletionEvent,
    TestKey,
    TestResult,
    TestStatus,
)
from reporting.synthesizer import DocumentSynthesizer, ReportTheme, synthesize
from reporting.writer import ReportWriter, sanitize_filename

__all__ = [
    "ResultCollector",
    "build_result",
    "correlate_screenshots",
    "flatten_steps",
    "ErrorInfo",
    "ScreenshotRef",
    "StepRecord",
    "TestCompletionEvent",
    "TestKey",
    "TestResult",
    "TestStatus",
    "DocumentSynthesizer",
    "ReportTheme",
    "synthesize",
    "ReportWriter",
    "sanitize_filename",
]
