"""
Page Object 基底類別

所有 Page Object 都繼承此類，提供：
- 元素等待與查找
- 點擊、輸入、讀屬性等通用操作
- execute(label, action)：把一個使用者可見的操作包成具名步驟，
  操作結束後（不論成功失敗）截圖並附加到報告
"""

from typing import Callable

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from config.config import Config
from core import steps
from core.exceptions import (
    ElementNotClickableError,
    ElementNotFoundError,
    ElementNotVisibleError,
)
from utils.logger import logger

SCREENSHOT_PREFIX = "screenshot-"


class BasePage:
    """Page Object 基底類別"""

    def __init__(self, driver, timeout: int | None = None):
        self.driver = driver
        self.timeout = timeout or Config.EXPLICIT_WAIT
        self.wait = WebDriverWait(driver, self.timeout)

    # ── 步驟 + 截圖 ──

    def execute(self, label: str, action: Callable[[], None]) -> None:
        """
        在具名步驟中執行 action，結束後截圖並附加（名稱為 screenshot-{label}）。

        action 失敗時仍會先截圖，再把原本的例外往外拋；
        此時截圖若也失敗只記 log，步驟錯誤保留 action 的例外。
        action 成功但截圖失敗會讓步驟失敗。
        """
        with steps.step(label):
            logger.info(f"步驟: {label}")
            try:
                action()
            except BaseException:
                try:
                    self.capture(label)
                except Exception as capture_error:
                    logger.warning(f"步驟失敗後截圖也失敗: {label} ({capture_error})")
                raise
            self.capture(label)

    def capture(self, label: str) -> bytes:
        """擷取目前畫面並附加到目前步驟所屬的測試"""
        png = self.driver.get_screenshot_as_png()
        logger.debug(f"截圖: {label} ({len(png)} bytes)")
        steps.attach(f"{SCREENSHOT_PREFIX}{label}", body=png, content_type="image/png")
        return png

    # ── 元素查找 ──

    def find_element(self, locator: tuple) -> WebElement:
        """等待元素出現並回傳"""
        try:
            return self.wait.until(EC.presence_of_element_located(locator))
        except TimeoutException:
            raise ElementNotFoundError(locator, self.timeout)

    def wait_for_clickable(self, locator: tuple) -> WebElement:
        """等待元素可點擊"""
        try:
            return self.wait.until(EC.element_to_be_clickable(locator))
        except TimeoutException:
            raise ElementNotClickableError(locator)

    def wait_for_visible(self, locator: tuple) -> WebElement:
        """等待元素可見"""
        try:
            return self.wait.until(EC.visibility_of_element_located(locator))
        except TimeoutException:
            raise ElementNotVisibleError(locator)

    def is_element_visible(self, locator: tuple, timeout: int = 3) -> bool:
        """判斷元素是否可見（不拋出例外）"""
        try:
            WebDriverWait(self.driver, timeout).until(
                EC.visibility_of_element_located(locator)
            )
            return True
        except TimeoutException:
            return False

    # ── 元素操作 ──

    def open(self, url: str) -> None:
        logger.info(f"開啟網址: {url}")
        self.driver.get(url)

    def click(self, locator: tuple) -> None:
        logger.info(f"點擊元素: {locator}")
        self.wait_for_clickable(locator).click()

    def fill(self, locator: tuple, text: str) -> None:
        """清除後輸入文字（text 為空字串時只清除）"""
        logger.info(f"輸入文字: '{text}' -> {locator}")
        element = self.wait_for_visible(locator)
        element.clear()
        if text:
            element.send_keys(text)

    def get_text(self, locator: tuple) -> str:
        return self.find_element(locator).text

    def get_attribute(self, locator: tuple, attribute: str) -> str | None:
        return self.find_element(locator).get_attribute(attribute)

    def wait_for_text(self, locator: tuple, text: str) -> None:
        """等待元素文字包含 text，逾時拋出 AssertionError"""
        try:
            self.wait.until(EC.text_to_be_present_in_element(locator, text))
        except TimeoutException:
            actual = self.get_text(locator) if self.is_element_visible(locator, 1) else ""
            raise AssertionError(
                f"元素 {locator} 未包含文字 '{text}'（實際: '{actual}'）"
            )

    def wait_for_url(self, url: str) -> None:
        """等待網址等於 url，逾時拋出 AssertionError"""
        try:
            self.wait.until(EC.url_to_be(url))
        except TimeoutException:
            raise AssertionError(
                f"網址應為 {url}，實際為 {self.driver.current_url}"
            )
