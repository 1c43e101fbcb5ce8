import hmac
import logging

from cardshop.domain.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class AuthenticateAdminUseCase:
    def __init__(self, admin_password: str):
        self._admin_password = admin_password

    def __call__(self, password) -> bool:
        if not self._admin_password:
            logger.warning("ADMIN_PASSWORD не задан, вход администратора отключен")
            raise UnauthorizedError("Invalid password")
        if not isinstance(password, str) or not hmac.compare_digest(
            password.encode(), self._admin_password.encode()
        ):
            raise UnauthorizedError("Invalid password")
        return True
