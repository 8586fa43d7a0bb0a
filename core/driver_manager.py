"""
Driver 生命週期管理

負責建立、取得、關閉 Selenium WebDriver，確保每個測試使用獨立的瀏覽器。

支援：
- Chrome / Firefox / Edge（本機，由 Selenium Manager 自動處理 driver）
- 設定 SELENIUM_REMOTE_URL 時改連 Selenium Grid，連線失敗自動重試（指數退避）
- 執行緒安全（平行測試時每個 worker 獨立 driver）
"""

import threading
import time

from selenium import webdriver

from config.config import Config, ConfigValidationError
from core.exceptions import (
    DriverConnectionError,
    DriverNotInitializedError,
    UnsupportedBrowserError,
)
from utils.logger import logger

_OPTIONS = {
    "chrome": webdriver.ChromeOptions,
    "firefox": webdriver.FirefoxOptions,
    "edge": webdriver.EdgeOptions,
}

_LOCAL_DRIVERS = {
    "chrome": webdriver.Chrome,
    "firefox": webdriver.Firefox,
    "edge": webdriver.Edge,
}


class DriverManager:
    """
    管理 Selenium WebDriver 的建立與銷毀

    使用 thread-local storage 確保平行測試時各 worker 的 driver 互不干擾。
    """

    _local = threading.local()

    @classmethod
    def build_options(cls, browser: str, headless: bool):
        """依瀏覽器建立 Options"""
        try:
            browser = Config.validate_browser(browser)
        except ConfigValidationError:
            raise UnsupportedBrowserError(browser)

        options = _OPTIONS[browser]()
        width, height = Config.window_size()
        if browser == "firefox":
            if headless:
                options.add_argument("-headless")
            options.add_argument(f"--width={width}")
            options.add_argument(f"--height={height}")
        else:
            if headless:
                options.add_argument("--headless=new")
            options.add_argument(f"--window-size={width},{height}")
            options.add_argument("--disable-gpu")
            options.add_argument("--no-sandbox")
        return options

    @classmethod
    def create_driver(
        cls,
        browser: str | None = None,
        headless: bool | None = None,
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ) -> webdriver.Remote:
        """
        建立瀏覽器 driver。

        Args:
            browser: 'chrome' / 'firefox' / 'edge'，預設讀取 Config.BROWSER
            headless: 是否無頭模式，預設讀取 Config.HEADLESS
            max_retries: 連線 Selenium Grid 失敗時最多重試次數
            retry_delay: 首次重試等待秒數（後續指數退避）

        Returns:
            WebDriver 實例
        """
        browser = (browser or Config.BROWSER).lower()
        headless = Config.HEADLESS if headless is None else headless
        options = cls.build_options(browser, headless)
        remote_url = Config.SELENIUM_REMOTE_URL

        last_error: Exception | None = None
        attempts = max_retries if remote_url else 1
        for attempt in range(attempts):
            try:
                if remote_url:
                    drv = webdriver.Remote(command_executor=remote_url, options=options)
                else:
                    drv = _LOCAL_DRIVERS[browser](options=options)
                break
            except Exception as e:
                last_error = e
                if attempt < attempts - 1:
                    wait = retry_delay * (2 ** attempt)
                    logger.warning(
                        f"Driver 連線失敗 (第 {attempt + 1} 次)，"
                        f"{wait:.1f}s 後重試: {e}"
                    )
                    time.sleep(wait)
        else:
            raise DriverConnectionError(remote_url, last_error)

        drv.implicitly_wait(Config.IMPLICIT_WAIT)
        drv.set_page_load_timeout(Config.PAGE_LOAD_TIMEOUT)

        cls._local.driver = drv
        logger.info(f"Driver 已建立: {browser} (headless={headless}) -> {remote_url or 'local'}")
        return drv

    @classmethod
    def get_driver(cls) -> webdriver.Remote:
        """取得當前執行緒的 driver 實例"""
        drv = getattr(cls._local, "driver", None)
        if drv is None:
            raise DriverNotInitializedError()
        return drv

    @classmethod
    def quit_driver(cls) -> None:
        """安全關閉當前執行緒的 driver"""
        drv = getattr(cls._local, "driver", None)
        if drv is not None:
            try:
                drv.quit()
            finally:
                cls._local.driver = None
            logger.info("Driver 已關閉")
