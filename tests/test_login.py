"""
登入功能 E2E 測試

每個測試執行前 login_page fixture 會先開啟登入頁。
每個頁面操作都是報告中的一個步驟（含截圖），結束後每個測試產生一份 Word 報告。

執行：
    pytest -m e2e
    pytest -m e2e --browser chrome --browser firefox -n 2
"""

import pytest

pytestmark = pytest.mark.e2e

VALID_USERNAME = "admin"
VALID_PASSWORD = "123456"
WRONG_USERNAME = "usuarioIncorrecto"
WRONG_PASSWORD = "contraseñaIncorrecta"


class TestLogin:
    """Login Tests"""

    def test_tc01_valid_login(self, login_page):
        """TC01 - Login exitoso con credenciales válidas"""
        login_page.fill_username(VALID_USERNAME)
        login_page.fill_password(VALID_PASSWORD)
        login_page.click_login_button()
        login_page.verify_redirect_to_store()

    def test_tc02_empty_username(self, login_page):
        """TC02 - Validar mensaje de error cuando no se ingresa usuario"""
        login_page.clear_username()
        login_page.fill_password(VALID_PASSWORD)
        login_page.click_login_button()
        login_page.verify_username_error_message()

    def test_tc03_empty_password(self, login_page):
        """TC03 - Validar mensaje de error cuando no se ingresa contraseña"""
        login_page.fill_username(VALID_USERNAME)
        login_page.clear_password()
        login_page.click_login_button()
        login_page.verify_password_error_message()

    def test_tc04_empty_fields(self, login_page):
        """TC04 - Validar mensaje de error cuando no se ingresan credenciales"""
        login_page.clear_username()
        login_page.clear_password()
        login_page.click_login_button()
        login_page.verify_username_error_message()
        login_page.verify_password_error_message()

    def test_tc05_toggle_password_visibility(self, login_page):
        """TC05 - Validar funcionalidad de mostrar/ocultar contraseña"""
        login_page.fill_password(VALID_PASSWORD)
        login_page.verify_password_is_hidden()
        login_page.click_show_password()
        login_page.verify_password_is_visible()
        login_page.click_show_password()
        login_page.verify_password_is_hidden()

    def test_tc06_remember_me(self, login_page):
        """TC06 - Validar funcionalidad de checkbox Recordarme"""
        login_page.click_remember_me()
        login_page.verify_remember_me_is_checked()
        login_page.fill_username(VALID_USERNAME)
        login_page.fill_password(VALID_PASSWORD)
        login_page.click_login_button()
        login_page.verify_redirect_to_store()

    def test_tc07_invalid_username(self, login_page):
        """TC07 - Login fallido con usuario incorrecto"""
        login_page.login(WRONG_USERNAME, VALID_PASSWORD)
        login_page.verify_login_page_is_displayed()

    def test_tc08_invalid_password(self, login_page):
        """TC08 - Login fallido con contraseña incorrecta"""
        login_page.login(VALID_USERNAME, WRONG_PASSWORD)
        login_page.verify_login_page_is_displayed()

    def test_tc09_invalid_credentials(self, login_page):
        """TC09 - Login fallido con credenciales incorrectas"""
        login_page.login(WRONG_USERNAME, WRONG_PASSWORD)
        login_page.verify_login_page_is_displayed()

    def test_tc10_reload_clears_form(self, login_page):
        """TC10 - Validar que los campos se limpian al recargar la página"""
        login_page.fill_username(VALID_USERNAME)
        login_page.fill_password(VALID_PASSWORD)
        login_page.goto()
        login_page.verify_login_page_is_displayed()
