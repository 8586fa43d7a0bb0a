from utils.logger import logger
from utils.screenshot import step_with_screenshot, take_screenshot

__all__ = [
    "logger",
    "take_screenshot",
    "step_with_screenshot",
]
