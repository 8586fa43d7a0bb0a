"""
設定管理模組
統一管理受測網站、瀏覽器、等待時間與 Word 報告等設定。
支援透過環境變數覆蓋預設值，方便 CI/CD 整合。
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SUPPORTED_BROWSERS = ("chrome", "firefox", "edge")


class ConfigError(Exception):
    """設定相關錯誤"""


class ConfigValidationError(ConfigError):
    """設定驗證失敗"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        msg = "設定驗證失敗:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class Config:
    """框架全域設定"""

    # 受測網站
    BASE_URL = os.getenv("BASE_URL", "https://practica.testqacademy.com")
    STORE_ROUTE = os.getenv("STORE_ROUTE", "/store")

    # 瀏覽器
    BROWSER = os.getenv("BROWSER", "chrome").lower()
    HEADLESS = os.getenv("HEADLESS", "1").strip() == "1"
    SELENIUM_REMOTE_URL = os.getenv("SELENIUM_REMOTE_URL", "")
    WINDOW_SIZE = os.getenv("WINDOW_SIZE", "1366,900")

    # 超時設定 (秒)
    IMPLICIT_WAIT = int(os.getenv("IMPLICIT_WAIT", "0"))
    EXPLICIT_WAIT = int(os.getenv("EXPLICIT_WAIT", "10"))
    PAGE_LOAD_TIMEOUT = int(os.getenv("PAGE_LOAD_TIMEOUT", "30"))

    # 截圖與報告
    SCREENSHOT_DIR = BASE_DIR / "test-results" / "screenshots"
    REPORT_DIR = Path(os.getenv("REPORT_DIR", str(BASE_DIR / "test-reports")))
    REPORT_LOGO_PATH = os.getenv("REPORT_LOGO_PATH", "")
    REPORT_BRAND = os.getenv("REPORT_BRAND", "TEST QACADEMY")
    REPORT_DATETIME_FORMAT = os.getenv(
        "REPORT_DATETIME_FORMAT", "%d/%m/%Y, %H:%M:%S"
    )

    @classmethod
    def store_url(cls) -> str:
        return f"{cls.BASE_URL}{cls.STORE_ROUTE}"

    @classmethod
    def validate_browser(cls, browser: str | None = None) -> str:
        """
        驗證瀏覽器名稱。

        Args:
            browser: 瀏覽器名稱，預設讀取 Config.BROWSER

        Returns:
            正規化（小寫）後的瀏覽器名稱

        Raises:
            ConfigValidationError: 不支援的瀏覽器
        """
        name = (browser or cls.BROWSER).strip().lower()
        if name not in SUPPORTED_BROWSERS:
            raise ConfigValidationError([
                f"不支援的瀏覽器: {name}（可用: {', '.join(SUPPORTED_BROWSERS)}）"
            ])
        return name

    @classmethod
    def window_size(cls) -> tuple[int, int]:
        width, _, height = cls.WINDOW_SIZE.partition(",")
        return int(width), int(height)
