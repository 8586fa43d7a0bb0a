"""
自訂 Exception 體系

統一的錯誤處理階層，讓每種失敗都有明確的分類與訊息。
上層可以 catch 大類別 (如 FrameworkError)，
也可以精準 catch 子類別 (如 ElementNotFoundError)。

Exception 樹：
    FrameworkError
    ├── DriverError
    │   ├── DriverNotInitializedError
    │   ├── DriverConnectionError
    │   └── UnsupportedBrowserError
    ├── PageError
    │   ├── ElementNotFoundError
    │   ├── ElementNotClickableError
    │   └── ElementNotVisibleError
    └── ReportError
        ├── EvidenceLoadError
        └── ReportWriteError

設定錯誤 (ConfigValidationError) 定義在 config.config，不依賴 core。
"""


class FrameworkError(Exception):
    """框架所有例外的基底，catch 這個就能攔截一切框架錯誤"""

    def __init__(self, message: str = "", context: dict | None = None):
        self.context = context or {}
        super().__init__(message)


# ── Driver 相關 ──

class DriverError(FrameworkError):
    """Driver 相關錯誤"""


class DriverNotInitializedError(DriverError):
    """Driver 尚未初始化就被使用"""

    def __init__(self, message: str = "Driver 尚未建立，請先呼叫 create_driver()"):
        super().__init__(message)


class DriverConnectionError(DriverError):
    """無法連接到 Selenium Grid / 無法啟動瀏覽器"""

    def __init__(self, url: str = "", original: Exception | None = None):
        self.original = original
        msg = f"無法建立瀏覽器連線: {url or 'local'}"
        if original:
            msg += f" ({type(original).__name__}: {original})"
        super().__init__(msg, context={"url": url})


class UnsupportedBrowserError(DriverError):
    """不支援的瀏覽器"""

    def __init__(self, browser: str = ""):
        super().__init__(f"不支援的瀏覽器: {browser}", context={"browser": browser})


# ── Page / Element 相關 ──

class PageError(FrameworkError):
    """頁面操作相關錯誤"""


class ElementNotFoundError(PageError):
    """找不到指定元素"""

    def __init__(self, locator: tuple = (), timeout: int = 0):
        msg = f"找不到元素: {locator}"
        if timeout:
            msg += f" (等待 {timeout}s)"
        super().__init__(msg, context={"locator": locator, "timeout": timeout})


class ElementNotClickableError(PageError):
    """元素無法點擊"""

    def __init__(self, locator: tuple = ()):
        super().__init__(f"元素無法點擊: {locator}", context={"locator": locator})


class ElementNotVisibleError(PageError):
    """元素不可見"""

    def __init__(self, locator: tuple = ()):
        super().__init__(f"元素不可見: {locator}", context={"locator": locator})


# ── 報告相關 ──

class ReportError(FrameworkError):
    """Word 報告產生相關錯誤"""


class EvidenceLoadError(ReportError):
    """截圖證據無法讀取或解碼"""

    def __init__(self, source: str = "", reason: str = ""):
        msg = f"無法載入截圖: {source}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, context={"source": source})


class ReportWriteError(ReportError):
    """報告序列化或寫檔失敗"""

    def __init__(self, path: str = "", original: Exception | None = None):
        self.original = original
        msg = f"報告寫入失敗: {path}"
        if original:
            msg += f" ({type(original).__name__}: {original})"
        super().__init__(msg, context={"path": path})
