"""
reporting.synthesizer 單元測試

驗證：
- 資訊表（狀態顏色、耗時格式、瀏覽器、完成時間）
- 每個步驟一張表，失敗步驟顯示 ❌
- 截圖插入、損毀截圖略過、沒有截圖時顯示 No evidence
- 頁首 logo / 文字備援
- 同樣輸入產生同樣文字內容
"""

import io
from datetime import datetime

import pytest
from docx.shared import RGBColor
from PIL import Image

from reporting.models import ScreenshotRef, StepRecord, TestResult, TestStatus


def _png(color="red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (12, 8), color).save(buffer, format="PNG")
    return buffer.getvalue()


def _result(status=TestStatus.PASSED, steps=None) -> TestResult:
    completed_at = datetime(2025, 3, 7, 9, 5, 1)
    return TestResult(
        title="TC01 - Login exitoso con credenciales válidas",
        status=status,
        duration_ms=2346.0,
        steps=steps if steps is not None else [],
        errors=[],
        context_name="chrome",
        completed_at=completed_at,
        completed_at_text="07/03/2025, 09:05:01",
    )


def _step(title, error=None, screenshots=None) -> StepRecord:
    return StepRecord(
        title=title, duration_ms=10.0, level=0, error=error,
        screenshots=screenshots or [],
    )


def _text(document) -> list[str]:
    texts = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            texts.extend(cell.text for cell in row.cells)
    return texts


@pytest.fixture
def synthesizer():
    from reporting.synthesizer import DocumentSynthesizer, ReportTheme
    return DocumentSynthesizer(theme=ReportTheme(), logo_path="")


@pytest.mark.unit
class TestInfoTable:
    """資訊表"""

    @pytest.mark.unit
    def test_passed_status_is_green(self, synthesizer, cell_fill):
        document = synthesizer.synthesize("Login Tests - TC01 - chrome", _result())

        status = document.tables[0].cell(0, 3)
        assert status.text == "PASSED"
        assert cell_fill(status) == "E6F7F1"
        assert status.paragraphs[0].runs[0].font.color.rgb == RGBColor.from_string("10B981")

    @pytest.mark.unit
    def test_failed_status_is_red(self, synthesizer, cell_fill):
        document = synthesizer.synthesize("x", _result(status=TestStatus.FAILED))

        status = document.tables[0].cell(0, 3)
        assert status.text == "FAILED"
        assert cell_fill(status) == "FFE4E4"
        assert status.paragraphs[0].runs[0].font.color.rgb == RGBColor.from_string("EF4444")

    @pytest.mark.unit
    def test_timed_out_is_not_passed(self, synthesizer, cell_fill):
        document = synthesizer.synthesize("x", _result(status=TestStatus.TIMED_OUT))

        status = document.tables[0].cell(0, 3)
        assert status.text == "TIMEDOUT"
        assert cell_fill(status) == "FFE4E4"

    @pytest.mark.unit
    def test_info_values(self, synthesizer):
        document = synthesizer.synthesize("x", _result())
        table = document.tables[0]

        assert table.cell(0, 0).text == "Name"
        assert table.cell(0, 1).text == "TC01 - Login exitoso con credenciales válidas"
        assert table.cell(1, 1).text == "2.35 seconds"
        assert table.cell(1, 2).text == "Browser"
        assert table.cell(1, 3).text == "chrome"
        assert table.cell(2, 0).text == "Execution Date & Time"
        assert table.cell(2, 1).text == "07/03/2025, 09:05:01"

    @pytest.mark.unit
    def test_title_paragraphs(self, synthesizer):
        document = synthesizer.synthesize("x", _result())
        texts = [p.text for p in document.paragraphs]

        assert "TEST EXECUTION REPORT" in texts
        assert "Test Case: TC01 - Login exitoso con credenciales válidas" in texts
        assert "STEPS EXECUTED" in texts


@pytest.mark.unit
class TestStepTables:
    """步驟表"""

    @pytest.mark.unit
    def test_one_table_per_step_with_glyphs(self, synthesizer):
        steps = [
            _step("Ingresar usuario: admin"),
            _step("Validar redirección a /store", error="AssertionError: url"),
            _step("Hacer clic en botón login"),
        ]

        document = synthesizer.synthesize("x", _result(TestStatus.FAILED, steps))

        assert len(document.tables) == 4
        headers = [t.cell(0, 0).text for t in document.tables[1:]]
        assert headers[0].startswith("STEP 1: INGRESAR USUARIO: ADMIN")
        assert headers[0].endswith("✅")
        assert headers[1].startswith("STEP 2: VALIDAR REDIRECCIÓN A /STORE")
        assert headers[1].endswith("❌")
        assert headers[2].endswith("✅")

    @pytest.mark.unit
    def test_no_steps_only_info_table(self, synthesizer):
        document = synthesizer.synthesize("x", _result(steps=[]))

        assert len(document.tables) == 1

    @pytest.mark.unit
    def test_screenshots_inserted(self, synthesizer):
        step = _step("paso", screenshots=[
            ScreenshotRef("screenshot-paso", body=_png("red")),
            ScreenshotRef("screenshot-paso", body=_png("blue")),
        ])

        document = synthesizer.synthesize("x", _result(steps=[step]))

        evidence = document.tables[1].cell(1, 0)
        assert len(evidence._tc.xpath(".//w:drawing")) == 2
        assert "No evidence" not in evidence.text

    @pytest.mark.unit
    def test_corrupt_screenshot_skipped(self, synthesizer, tmp_path):
        good = tmp_path / "good.png"
        good.write_bytes(_png())
        step = _step("paso", screenshots=[
            ScreenshotRef("screenshot-1", path=str(good)),
            ScreenshotRef("screenshot-2", body=b"\x89PNG broken"),
            ScreenshotRef("screenshot-3", body=_png("green")),
        ])

        document = synthesizer.synthesize("x", _result(steps=[step]))

        assert len(document.tables[1].cell(1, 0)._tc.xpath(".//w:drawing")) == 2

    @pytest.mark.unit
    def test_missing_file_skipped(self, synthesizer, tmp_path):
        step = _step("paso", screenshots=[
            ScreenshotRef("screenshot-1", path=str(tmp_path / "nope.png")),
        ])

        document = synthesizer.synthesize("x", _result(steps=[step]))

        assert document.tables[1].cell(1, 0).text == "No evidence"

    @pytest.mark.unit
    def test_no_evidence_placeholder(self, synthesizer):
        document = synthesizer.synthesize("x", _result(steps=[_step("paso")]))

        evidence = document.tables[1].cell(1, 0)
        assert evidence.text == "No evidence"
        assert evidence._tc.xpath(".//w:drawing") == []


@pytest.mark.unit
class TestHeaderLogo:
    """頁首"""

    @pytest.mark.unit
    def test_fallback_text_without_logo(self, synthesizer):
        document = synthesizer.synthesize("x", _result())

        assert document.sections[0].header.paragraphs[0].text == "AUTOMATED TEST REPORT"

    @pytest.mark.unit
    def test_logo_with_brand(self, tmp_path):
        from reporting.synthesizer import DocumentSynthesizer, ReportTheme

        logo = tmp_path / "logo.png"
        logo.write_bytes(_png("navy"))
        synthesizer = DocumentSynthesizer(
            theme=ReportTheme(brand="TEST QACADEMY"), logo_path=logo,
        )

        document = synthesizer.synthesize("x", _result())
        header = document.sections[0].header.paragraphs[0]

        assert header.text.strip() == "TEST QACADEMY"
        assert len(header._p.xpath(".//w:drawing")) == 1

    @pytest.mark.unit
    def test_invalid_logo_falls_back(self, tmp_path):
        from reporting.synthesizer import DocumentSynthesizer, ReportTheme

        logo = tmp_path / "logo.png"
        logo.write_bytes(b"garbage")
        synthesizer = DocumentSynthesizer(theme=ReportTheme(), logo_path=logo)

        document = synthesizer.synthesize("x", _result())

        assert document.sections[0].header.paragraphs[0].text == "AUTOMATED TEST REPORT"


@pytest.mark.unit
class TestLoadImage:
    """load_image"""

    @pytest.mark.unit
    def test_body_returned(self):
        from reporting.synthesizer import load_image

        data = _png()
        assert load_image(ScreenshotRef("s", body=data)) == data

    @pytest.mark.unit
    def test_path_falls_back_to_body(self, tmp_path):
        from reporting.synthesizer import load_image

        data = _png()
        ref = ScreenshotRef("s", body=data, path=str(tmp_path / "missing.png"))

        assert load_image(ref) == data

    @pytest.mark.unit
    def test_empty_ref_raises(self):
        from core.exceptions import EvidenceLoadError
        from reporting.synthesizer import load_image

        with pytest.raises(EvidenceLoadError):
            load_image(ScreenshotRef("s"))


@pytest.mark.unit
class TestDeterminism:
    """同樣輸入 → 同樣文字"""

    @pytest.mark.unit
    def test_same_input_same_text(self, synthesizer):
        steps = [_step("uno"), _step("dos", error="E: x")]

        first = _text(synthesizer.synthesize("x", _result(steps=steps)))
        second = _text(synthesizer.synthesize("x", _result(steps=steps)))

        assert first == second

    @pytest.mark.unit
    def test_module_level_synthesize(self, synthesizer):
        from reporting.synthesizer import synthesize

        document = synthesize("x", _result(steps=[_step("uno")]), synthesizer)

        assert len(document.tables) == 2
