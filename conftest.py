"""
pytest 全域 fixtures

提供：
- browser_name 參數化：--browser 可指定多次，每個瀏覽器各跑一次
- step_recorder fixture：記錄步驟與截圖，交給 Word 報告 plugin
- driver fixture：每個測試自動建立/銷毀 WebDriver
- login_page fixture：開好登入頁的 Page Object
- 失敗時自動截圖（含 Allure 報告附件）
"""

import pytest

from config.config import SUPPORTED_BROWSERS, Config
from core import steps
from core.driver_manager import DriverManager
from pages.login_page import LoginPage
from reporting.word_reporter import track_test
from utils.allure_helper import attach_file
from utils.logger import logger
from utils.screenshot import take_screenshot

# Word 報告 plugin
pytest_plugins = ["reporting.word_reporter", "pytester"]


# ── 命令列參數 ──

def pytest_addoption(parser):
    """新增自訂命令列參數"""
    parser.addoption(
        "--browser",
        action="append",
        default=None,
        choices=list(SUPPORTED_BROWSERS),
        help="測試瀏覽器，可指定多次 (預設讀 BROWSER 環境變數)",
    )
    parser.addoption(
        "--headed",
        action="store_true",
        default=False,
        help="顯示瀏覽器視窗（覆寫 HEADLESS）",
    )


def pytest_generate_tests(metafunc):
    """有用到 browser_name 的測試，依 --browser 參數化"""
    if "browser_name" in metafunc.fixturenames:
        browsers = metafunc.config.getoption("--browser") or [Config.BROWSER]
        metafunc.parametrize("browser_name", browsers, scope="function")


# ── Session ──

@pytest.fixture(scope="session")
def headless(request) -> bool:
    if request.config.getoption("--headed"):
        return False
    return Config.HEADLESS


# ── 步驟記錄 / Driver ──

@pytest.fixture(scope="function")
def step_recorder(request, browser_name):
    """
    為目前測試開始記錄步驟與截圖。

    測試結束後由 Word 報告 plugin 取出 recorder 組成完成事件。
    """
    recorder = steps.start_recording()
    track_test(request.node, recorder, browser_name)
    yield recorder
    steps.stop_recording()


@pytest.fixture(scope="function")
def driver(step_recorder, browser_name, headless):
    """
    每個測試函式自動建立並銷毀 driver。

    scope=function 確保每個測試獨立，互不影響。
    """
    logger.info(f"===== 建立 {browser_name} driver =====")
    with steps.step(f"Launch {browser_name}", category=steps.FIXTURE):
        drv = DriverManager.create_driver(browser_name, headless=headless)
    yield drv
    logger.info("===== 關閉 driver =====")
    DriverManager.quit_driver()


@pytest.fixture(scope="function")
def login_page(driver) -> LoginPage:
    """每個登入測試前先開啟登入頁"""
    page = LoginPage(driver)
    with steps.step("Before Hooks", category=steps.HOOK):
        page.goto()
    return page


# ── 測試生命週期 Hook ──

@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """測試失敗時：額外存一張失敗截圖（debug 用，不進 Word 報告）"""
    outcome = yield
    report = outcome.get_result()

    if report.when != "call" or not report.failed:
        return

    logger.error(f"測試失敗: {item.name}")
    drv = item.funcargs.get("driver")
    if drv is None:
        return
    try:
        path = take_screenshot(drv, f"FAIL_{item.name}")
    except Exception as e:
        logger.warning(f"失敗截圖未能儲存: {e}")
        return
    attach_file(path, f"失敗截圖: {item.name}")
