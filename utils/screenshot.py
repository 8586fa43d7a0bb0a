"""
截圖工具
- take_screenshot：截圖存檔（失敗時 debug 用）
- step_with_screenshot：在步驟中執行動作，完成後截圖存檔並以路徑附加到報告
"""

import re
from datetime import datetime
from typing import Callable

from config.config import Config
from core import steps
from utils.logger import logger

_UNSAFE = re.compile(r"[^A-Za-z0-9]")


def take_screenshot(driver, name: str) -> str:
    """
    擷取螢幕截圖並儲存到截圖目錄。

    Args:
        driver: WebDriver 實例
        name: 截圖名稱（不含副檔名，非英數字元會換成 _）

    Returns:
        截圖檔案的完整路徑
    """
    Config.SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    filename = f"{_UNSAFE.sub('_', name)}_{timestamp}.png"
    filepath = Config.SCREENSHOT_DIR / filename
    driver.save_screenshot(str(filepath))
    logger.info(f"截圖已儲存: {filepath}")
    return str(filepath)


def step_with_screenshot(driver, step_name: str,
                         action: Callable[[], None]) -> str:
    """執行 action（在具名步驟中），成功後截圖存檔並附加檔案路徑"""
    with steps.step(step_name):
        action()
        path = take_screenshot(driver, step_name)
        steps.attach(f"screenshot-{step_name}", path=path)
    return path
