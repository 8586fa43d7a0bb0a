"""
Word 文件 builder

把 python-docx 的低階操作（表格框線、儲存格底色、頁碼欄位、合併儲存格...）
包成少數幾個呼叫，讓 Document Synthesizer 只需依序描述要放什麼。

    builder = DocumentBuilder(font="Aptos")
    builder.set_margins(top=2000, right=1000, bottom=1500, left=1000)
    builder.header("REPORT", logo=png_bytes)
    builder.footer_page_numbers()
    builder.paragraph("標題", bold=True, color="1E3A8A", size=16)
    table = builder.table(rows=2, cols=1)
    builder.cell_text(table.cell(0, 0), "STEP 1", bold=True)
    document = builder.build()
"""

from __future__ import annotations

import io
from dataclasses import dataclass

from docx import Document
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor, Twips
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph


@dataclass(frozen=True)
class Palette:
    """品牌色（hex，不含 #）"""
    primary: str = "1E3A8A"
    white: str = "FFFFFF"
    light_gray: str = "F3F4F6"
    success: str = "10B981"
    success_fill: str = "E6F7F1"
    text: str = "111827"
    danger: str = "EF4444"
    danger_fill: str = "FFE4E4"


_TBL_BORDERS_SUCCESSORS = (
    "w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook",
    "w:tblCaption", "w:tblDescription", "w:tblPrChange",
)
_TC_SHD_SUCCESSORS = (
    "w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText",
    "w:vAlign", "w:hideMark", "w:headers", "w:cellIns", "w:cellDel",
    "w:cellMerge", "w:tcPrChange",
)
_TC_MAR_SUCCESSORS = _TC_SHD_SUCCESSORS[2:]


# ── 低階 helpers ──

def add_run(paragraph: Paragraph, text: str, *, bold: bool = False,
            color: str | None = None, size: float | None = None,
            font: str | None = None):
    """在段落後面加一段文字"""
    run = paragraph.add_run(text)
    run.bold = bold
    if color:
        run.font.color.rgb = RGBColor.from_string(color)
    if size:
        run.font.size = Pt(size)
    if font:
        run.font.name = font
    return run


def add_field(paragraph: Paragraph, instruction: str,
              color: str | None = None) -> None:
    """插入 Word 欄位（PAGE、NUMPAGES），由 Word 在開啟時計算"""
    def _fld_char(kind: str):
        run = add_run(paragraph, "", color=color)
        char = OxmlElement("w:fldChar")
        char.set(qn("w:fldCharType"), kind)
        run._r.append(char)
        return run

    _fld_char("begin")
    instr_run = add_run(paragraph, "", color=color)
    instr = OxmlElement("w:instrText")
    instr.set(qn("xml:space"), "preserve")
    instr.text = f" {instruction} "
    instr_run._r.append(instr)
    _fld_char("separate")
    add_run(paragraph, "1", color=color)
    _fld_char("end")


def shade_cell(cell: _Cell, fill: str) -> None:
    """設定儲存格底色"""
    tc_pr = cell._tc.get_or_add_tcPr()
    for old in tc_pr.findall(qn("w:shd")):
        tc_pr.remove(old)
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    tc_pr.insert_element_before(shd, *_TC_SHD_SUCCESSORS)


def set_cell_margins(cell: _Cell, top: int = 0, bottom: int = 0,
                     left: int = 0, right: int = 0) -> None:
    """儲存格內距（twips）"""
    tc_pr = cell._tc.get_or_add_tcPr()
    mar = OxmlElement("w:tcMar")
    for edge, value in (("top", top), ("left", left),
                        ("bottom", bottom), ("right", right)):
        el = OxmlElement(f"w:{edge}")
        el.set(qn("w:w"), str(value))
        el.set(qn("w:type"), "dxa")
        mar.append(el)
    tc_pr.insert_element_before(mar, *_TC_MAR_SUCCESSORS)


def set_cell_width_pct(cell: _Cell, pct: int) -> None:
    """儲存格寬度（表格寬度的百分比）"""
    tc_w = cell._tc.get_or_add_tcPr().get_or_add_tcW()
    tc_w.set(qn("w:type"), "pct")
    tc_w.set(qn("w:w"), str(pct * 50))


def set_table_borders(table: Table, outer_color: str, inner_color: str,
                      outer_size: int = 4, inner_size: int = 2) -> None:
    """外框與內框線"""
    tbl_pr = table._tbl.tblPr
    borders = OxmlElement("w:tblBorders")
    for edge in ("top", "left", "bottom", "right", "insideH", "insideV"):
        outer = edge in ("top", "left", "bottom", "right")
        el = OxmlElement(f"w:{edge}")
        el.set(qn("w:val"), "single")
        el.set(qn("w:sz"), str(outer_size if outer else inner_size))
        el.set(qn("w:space"), "0")
        el.set(qn("w:color"), outer_color if outer else inner_color)
        borders.append(el)
    tbl_pr.insert_element_before(borders, *_TBL_BORDERS_SUCCESSORS)


def set_table_full_width(table: Table) -> None:
    tbl_w = table._tbl.tblPr.find(qn("w:tblW"))
    if tbl_w is None:
        tbl_w = OxmlElement("w:tblW")
        table._tbl.tblPr.insert_element_before(
            tbl_w, "w:jc", "w:tblCellSpacing", "w:tblInd", "w:tblBorders",
            *_TBL_BORDERS_SUCCESSORS,
        )
    tbl_w.set(qn("w:type"), "pct")
    tbl_w.set(qn("w:w"), "5000")


class DocumentBuilder:
    """依序組出報告內容；build() 之後不應再修改"""

    def __init__(self, font: str = "Aptos", palette: Palette | None = None):
        self.font = font
        self.palette = palette or Palette()
        self.document = Document()
        self._section = self.document.sections[0]

    # ── 版面 ──

    def set_margins(self, top: int, right: int, bottom: int, left: int) -> None:
        """頁邊距（twips）"""
        self._section.top_margin = Twips(top)
        self._section.right_margin = Twips(right)
        self._section.bottom_margin = Twips(bottom)
        self._section.left_margin = Twips(left)

    def header(self, text: str, logo: bytes | None = None,
               logo_size: tuple[float, float] = (112.5, 37.5)) -> Paragraph:
        """頁首：有 logo 時放圖 + 文字，否則只放文字"""
        paragraph = self._section.header.paragraphs[0]
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.paragraph_format.space_after = Twips(200)
        if logo is not None:
            width, height = logo_size
            paragraph.add_run().add_picture(
                io.BytesIO(logo), width=Pt(width), height=Pt(height),
            )
            text = f"   {text}"
        add_run(paragraph, text, bold=True, color=self.palette.primary,
                font=self.font)
        return paragraph

    def footer_page_numbers(self, page_label: str = "Page ",
                            of_label: str = " of ") -> Paragraph:
        """頁尾：「Page X of Y」"""
        paragraph = self._section.footer.paragraphs[0]
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        color = self.palette.text
        add_run(paragraph, page_label, color=color)
        add_field(paragraph, "PAGE", color=color)
        add_run(paragraph, of_label, color=color)
        add_field(paragraph, "NUMPAGES", color=color)
        return paragraph

    # ── 內容 ──

    def paragraph(self, text: str = "", *, bold: bool = False,
                  color: str | None = None, size: float | None = None,
                  heading: int | None = None,
                  space_before: int | None = None,
                  space_after: int | None = None) -> Paragraph:
        """置中段落；heading 指定時套用 Heading N 樣式"""
        if heading is not None:
            paragraph = self.document.add_heading("", level=heading)
        else:
            paragraph = self.document.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        if space_before is not None:
            paragraph.paragraph_format.space_before = Twips(space_before)
        if space_after is not None:
            paragraph.paragraph_format.space_after = Twips(space_after)
        if text:
            add_run(paragraph, text, bold=bold, color=color, size=size,
                    font=self.font)
        return paragraph

    def spacer(self, after: int) -> Paragraph:
        return self.paragraph(space_after=after)

    def table(self, rows: int, cols: int) -> Table:
        """全寬表格，品牌色外框 + 淺灰內框"""
        table = self.document.add_table(rows=rows, cols=cols)
        set_table_full_width(table)
        set_table_borders(
            table, outer_color=self.palette.primary,
            inner_color=self.palette.light_gray,
        )
        return table

    # ── 儲存格 ──

    def cell_paragraph(self, cell: _Cell) -> Paragraph:
        """取得儲存格中可寫入的段落（第一個空段落，否則新增）"""
        first = cell.paragraphs[0]
        if len(cell.paragraphs) == 1 and not first.runs and not first.text:
            paragraph = first
        else:
            paragraph = cell.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        return paragraph

    def cell_text(self, cell: _Cell, text: str, *, bold: bool = False,
                  color: str | None = None, size: float | None = None,
                  fill: str | None = None) -> Paragraph:
        """寫入置中文字，可選底色"""
        paragraph = self.cell_paragraph(cell)
        add_run(paragraph, text, bold=bold, color=color, size=size,
                font=self.font)
        if fill:
            shade_cell(cell, fill)
        cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.CENTER
        return paragraph

    def label_cell(self, cell: _Cell, text: str) -> Paragraph:
        """資訊表的標籤格：品牌色底 + 白色粗體"""
        return self.cell_text(
            cell, text, bold=True, color=self.palette.white,
            fill=self.palette.primary,
        )

    def cell_image(self, cell: _Cell, data: bytes,
                   size: tuple[float, float]) -> Paragraph:
        """
        在儲存格中插入圖片（點為單位）。
        python-docx 無法辨識圖片時拋出例外，且不留下空段落。
        """
        paragraph = self.cell_paragraph(cell)
        width, height = size
        try:
            paragraph.add_run().add_picture(
                io.BytesIO(data), width=Pt(width), height=Pt(height),
            )
        except Exception:
            if len(cell.paragraphs) > 1:
                paragraph._p.getparent().remove(paragraph._p)
            else:
                for run in list(paragraph.runs):
                    run._r.getparent().remove(run._r)
            raise
        cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.CENTER
        return paragraph

    def merge(self, table: Table, row: int, start: int, end: int) -> _Cell:
        """合併同一列的 start..end 欄"""
        return table.cell(row, start).merge(table.cell(row, end))

    def build(self):
        return self.document
