"""
Allure 報告整合輔助
把步驟與截圖同步寫進 Allure 結果（若有安裝 allure-pytest）。
未安裝時所有函式都是 no-op，不影響 Word 報告與測試執行。
"""

import contextlib

from utils.logger import logger

try:
    import allure
    ALLURE_AVAILABLE = True
except ImportError:
    ALLURE_AVAILABLE = False
    logger.debug("allure-pytest 未安裝，Allure 同步功能停用")


def allure_step(title: str):
    """
    回傳 Allure step 的 context manager。
    未安裝 allure 時回傳空的 context manager。

    用法：
        with allure_step("輸入帳號"):
            ...
    """
    if ALLURE_AVAILABLE:
        return allure.step(title)
    return contextlib.nullcontext()


def attach_png(png: bytes, name: str = "screenshot") -> None:
    """將 PNG bytes 附加到 Allure 報告"""
    if ALLURE_AVAILABLE:
        allure.attach(png, name=name, attachment_type=allure.attachment_type.PNG)


def attach_file(filepath: str, name: str | None = None) -> None:
    """將截圖檔案附加到 Allure 報告"""
    if ALLURE_AVAILABLE:
        allure.attach.file(
            filepath, name=name, attachment_type=allure.attachment_type.PNG
        )
