"""
登入頁面 Page Object

每個操作都透過 execute() 包成報告中的一個步驟，並在操作後截圖。
步驟名稱沿用受測網站的語言（西班牙文），方便與畫面對照。
"""

from selenium.webdriver.common.by import By

from config.config import Config
from core.base_page import BasePage

DEFAULT_USERNAME_ERROR = "El usuario es requerido"
DEFAULT_PASSWORD_ERROR = "La contraseña es requerida"


class LoginPage(BasePage):
    """登入頁面"""

    # ── Locators：輸入框與按鈕 ──
    USERNAME_INPUT = (By.CSS_SELECTOR, "#qa-username-input")
    PASSWORD_INPUT = (By.CSS_SELECTOR, "#qa-password-input")
    LOGIN_BUTTON = (By.CSS_SELECTOR, "#qa-login-button")
    REMEMBER_ME_CHECKBOX = (By.XPATH, "//span[@class='qa-checkmark']")
    SHOW_PASSWORD_BUTTON = (By.XPATH, "//button[normalize-space()='MOSTRAR']")

    # ── Locators：錯誤訊息 ──
    USERNAME_ERROR = (By.CSS_SELECTOR, "#qa-username-error")
    PASSWORD_ERROR = (By.CSS_SELECTOR, "#qa-password-error")

    # ── 頁面操作 ──

    def goto(self) -> "LoginPage":
        self.execute(
            "Navegar a la página de login", lambda: self.open(Config.BASE_URL)
        )
        return self

    def fill_username(self, username: str) -> "LoginPage":
        self.execute(
            f"Ingresar usuario: {username}",
            lambda: self.fill(self.USERNAME_INPUT, username),
        )
        return self

    def fill_password(self, password: str) -> "LoginPage":
        # 密碼不寫進步驟名稱
        self.execute(
            "Ingresar contraseña",
            lambda: self.fill(self.PASSWORD_INPUT, password),
        )
        return self

    def click_login_button(self) -> None:
        self.execute(
            "Hacer clic en botón login", lambda: self.click(self.LOGIN_BUTTON)
        )

    def click_remember_me(self) -> None:
        self.execute(
            "Hacer clic en checkbox Recordarme",
            lambda: self.click(self.REMEMBER_ME_CHECKBOX),
        )

    def click_show_password(self) -> None:
        self.execute(
            "Hacer clic en botón Mostrar contraseña",
            lambda: self.click(self.SHOW_PASSWORD_BUTTON),
        )

    def clear_username(self) -> "LoginPage":
        self.execute(
            "Limpiar campo de usuario", lambda: self.fill(self.USERNAME_INPUT, "")
        )
        return self

    def clear_password(self) -> "LoginPage":
        self.execute(
            "Limpiar campo de contraseña",
            lambda: self.fill(self.PASSWORD_INPUT, ""),
        )
        return self

    def login(self, username: str, password: str) -> None:
        """完整的登入流程"""
        self.fill_username(username)
        self.fill_password(password)
        self.click_login_button()

    # ── 頁面驗證 ──

    def verify_username_error_message(
        self, expected: str = DEFAULT_USERNAME_ERROR
    ) -> None:
        self.execute(
            f'Validar mensaje de error: "{expected}"',
            lambda: self.wait_for_text(self.USERNAME_ERROR, expected),
        )

    def verify_password_error_message(
        self, expected: str = DEFAULT_PASSWORD_ERROR
    ) -> None:
        self.execute(
            f'Validar mensaje de error: "{expected}"',
            lambda: self.wait_for_text(self.PASSWORD_ERROR, expected),
        )

    def verify_password_is_visible(self) -> None:
        self.execute(
            "Validar que la contraseña es visible",
            lambda: self._assert_password_type("text"),
        )

    def verify_password_is_hidden(self) -> None:
        self.execute(
            "Validar que la contraseña está oculta",
            lambda: self._assert_password_type("password"),
        )

    def verify_remember_me_is_checked(self) -> None:
        self.execute(
            "Validar que Recordarme está seleccionado",
            self._assert_remember_me_checked,
        )

    def verify_redirect_to_store(self) -> None:
        self.execute(
            "Validar redirección a /store",
            lambda: self.wait_for_url(Config.store_url()),
        )

    def verify_login_page_is_displayed(self) -> None:
        self.execute(
            "Validar que la página de login es visible",
            lambda: self.wait_for_visible(self.LOGIN_BUTTON),
        )

    # ── 內部檢查 ──

    def _assert_password_type(self, expected: str) -> None:
        actual = self.get_attribute(self.PASSWORD_INPUT, "type")
        assert actual == expected, f"密碼欄位 type 應為 '{expected}'，實際為 '{actual}'"

    def _assert_remember_me_checked(self) -> None:
        # checkmark 的父元素帶有 checked class
        checkmark = self.find_element(self.REMEMBER_ME_CHECKBOX)
        parent = checkmark.find_element(By.XPATH, "..")
        classes = parent.get_attribute("class") or ""
        assert "checked" in classes, f"Recordarme 未勾選（class='{classes}'）"
