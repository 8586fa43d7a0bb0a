"""單元測試共用 fixture"""

import pytest
from docx.oxml.ns import qn


@pytest.fixture
def cell_fill():
    """回傳讀取儲存格底色 (w:shd fill) 的函式，未設定時為 None"""
    def _fill(cell):
        tc_pr = cell._tc.tcPr
        if tc_pr is None:
            return None
        shd = tc_pr.find(qn("w:shd"))
        return shd.get(qn("w:fill")) if shd is not None else None
    return _fill
