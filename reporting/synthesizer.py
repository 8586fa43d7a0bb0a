"""
Document Synthesizer

把一筆 TestResult 組成 Word 文件：

    頁首 (logo 或文字) / 頁尾 (Page X of Y)
    標題 + 測試名稱
    資訊表：Name / Status / Duration / Browser / Execution Date & Time
    STEPS EXECUTED
    每個步驟一張表：標題列 (STEP n: TITLE ✅/❌) + 證據列 (截圖或 No evidence)

單張截圖讀取或解碼失敗只會略過該圖，不影響整份文件。
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path

from docx.document import Document as DocxDocument
from docx.image.exceptions import UnrecognizedImageError
from docx.shared import Twips
from docx.table import Table
from PIL import Image, UnidentifiedImageError

from config.config import Config
from core.exceptions import EvidenceLoadError
from reporting.document_builder import (
    DocumentBuilder,
    Palette,
    add_run,
    set_cell_margins,
    set_cell_width_pct,
)
from reporting.models import ScreenshotRef, StepRecord, TestResult
from utils.logger import logger

RenderedDocument = DocxDocument

PASS_GLYPH = "✅"
FAIL_GLYPH = "❌"
NO_EVIDENCE = "No evidence"


@dataclass(frozen=True)
class ReportTheme:
    """報告文字與尺寸設定"""
    brand: str = "TEST QACADEMY"
    header_fallback: str = "AUTOMATED TEST REPORT"
    title: str = "TEST EXECUTION REPORT"
    steps_heading: str = "STEPS EXECUTED"
    font: str = "Aptos"
    palette: Palette = field(default_factory=Palette)
    # 點 (pt)；600x400 px 與 150x50 px @96dpi
    evidence_size: tuple[float, float] = (450.0, 300.0)
    logo_size: tuple[float, float] = (112.5, 37.5)
    # twips
    margins: tuple[int, int, int, int] = (2000, 1000, 1500, 1000)


def load_image(ref: ScreenshotRef) -> bytes:
    """
    讀取截圖內容並用 Pillow 驗證可解碼。

    Raises:
        EvidenceLoadError: 檔案不存在、無法讀取或不是有效圖片
    """
    if ref.path:
        try:
            data = Path(ref.path).read_bytes()
        except OSError as e:
            if ref.body is None:
                raise EvidenceLoadError(ref.path, str(e)) from e
            data = ref.body
    elif ref.body is not None:
        data = ref.body
    else:
        raise EvidenceLoadError(ref.source, "沒有內容")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise EvidenceLoadError(ref.path or ref.source, str(e)) from e
    return data


def load_logo(path: str | Path | None) -> bytes | None:
    """讀取品牌 logo；沒設定、不存在或無法解碼時回傳 None（改用文字頁首）"""
    if not path:
        return None
    path = Path(path)
    if not path.is_file():
        logger.debug(f"找不到 logo，使用文字頁首: {path}")
        return None
    try:
        return load_image(ScreenshotRef(source=path.name, path=str(path)))
    except EvidenceLoadError as e:
        logger.warning(f"logo 無法使用，改用文字頁首: {e}")
        return None


class DocumentSynthesizer:
    """TestResult → Word 文件（同樣輸入產生同樣內容）"""

    def __init__(self, theme: ReportTheme | None = None,
                 logo_path: str | Path | None = None):
        self.theme = theme or ReportTheme(brand=Config.REPORT_BRAND)
        self.logo_path = logo_path if logo_path is not None else Config.REPORT_LOGO_PATH

    def synthesize(self, test_name: str, result: TestResult) -> RenderedDocument:
        theme = self.theme
        builder = DocumentBuilder(font=theme.font, palette=theme.palette)
        builder.set_margins(*theme.margins)

        logo = load_logo(self.logo_path)
        if logo is not None:
            builder.header(theme.brand, logo=logo, logo_size=theme.logo_size)
        else:
            builder.header(theme.header_fallback)
        builder.footer_page_numbers()

        builder.paragraph(
            theme.title, bold=True, color=theme.palette.primary, size=16,
            heading=1, space_after=400,
        )
        builder.paragraph(
            f"Test Case: {result.title}", color=theme.palette.primary, size=12,
            space_after=600,
        )

        self.info_table(builder, result)
        builder.spacer(400)

        builder.paragraph(
            theme.steps_heading, bold=True, color=theme.palette.primary,
            size=14, heading=2, space_before=400, space_after=400,
        )
        for index, step in enumerate(result.steps):
            if index > 0:
                builder.spacer(300)
            self.step_table(builder, index, step, test_name)

        return builder.build()

    # ── 區塊 ──

    def info_table(self, builder: DocumentBuilder, result: TestResult) -> Table:
        """3 列資訊表；Status 依是否 passed 用綠色或紅色"""
        palette = self.theme.palette
        table = builder.table(rows=3, cols=4)
        for col, pct in enumerate((20, 30, 20, 30)):
            set_cell_width_pct(table.cell(0, col), pct)

        builder.label_cell(table.cell(0, 0), "Name")
        builder.cell_text(table.cell(0, 1), result.title)
        builder.label_cell(table.cell(0, 2), "Status")
        builder.cell_text(
            table.cell(0, 3), result.status.value.upper(), bold=True,
            color=palette.success if result.passed else palette.danger,
            fill=palette.success_fill if result.passed else palette.danger_fill,
        )

        builder.label_cell(table.cell(1, 0), "Duration")
        builder.cell_text(
            table.cell(1, 1), f"{result.duration_ms / 1000:.2f} seconds",
        )
        builder.label_cell(table.cell(1, 2), "Browser")
        builder.cell_text(table.cell(1, 3), result.context_name)

        builder.label_cell(table.cell(2, 0), "Execution Date & Time")
        merged = builder.merge(table, 2, 1, 3)
        builder.cell_text(merged, result.completed_at_text)
        return table

    def step_table(self, builder: DocumentBuilder, index: int,
                   step: StepRecord, test_name: str = "") -> Table:
        """單一步驟表：標題列 + 證據列"""
        palette = self.theme.palette
        table = builder.table(rows=2, cols=1)

        header = table.cell(0, 0)
        paragraph = builder.cell_text(
            header, f"STEP {index + 1}: {step.title.upper()}", bold=True,
            color=palette.white, size=12, fill=palette.primary,
        )
        add_run(
            paragraph, f"  {FAIL_GLYPH if step.failed else PASS_GLYPH}",
            color=palette.danger if step.failed else palette.success, size=12,
        )
        paragraph.paragraph_format.space_before = Twips(200)
        paragraph.paragraph_format.space_after = Twips(200)
        set_cell_margins(header, top=300, bottom=300, left=200, right=200)

        evidence = table.cell(1, 0)
        inserted = 0
        for ref in step.screenshots:
            try:
                data = load_image(ref)
                builder.cell_image(evidence, data, self.theme.evidence_size)
                inserted += 1
            except (EvidenceLoadError, UnrecognizedImageError) as e:
                logger.error(f"[{test_name}] 略過無法載入的截圖 (STEP {index + 1}): {e}")

        if inserted == 0:
            builder.cell_text(evidence, NO_EVIDENCE, color=palette.light_gray)
        set_cell_margins(evidence, top=400, bottom=400, left=200, right=200)
        return table


def synthesize(test_name: str, result: TestResult,
               synthesizer: DocumentSynthesizer | None = None) -> RenderedDocument:
    """便利函式：用預設設定產生文件"""
    return (synthesizer or DocumentSynthesizer()).synthesize(test_name, result)
