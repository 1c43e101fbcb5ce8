import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Database
    POSTGRES_CONNECTION_STRING: str = os.getenv("POSTGRES_CONNECTION_STRING", "")
    CREATE_TABLES: bool = _as_bool(os.getenv("CREATE_TABLES", "true"))

    # API
    API_PORT: int = int(os.getenv("API_PORT", "4000"))
    # Без значения по умолчанию: пустой пароль блокирует вход
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Services
    SCRYFALL_BASE_URL: str = os.getenv("SCRYFALL_BASE_URL", "https://api.scryfall.com")
    SCRYFALL_TIMEOUT: float = float(os.getenv("SCRYFALL_TIMEOUT", "10.0"))

    @property
    def DATABASE_URL(self) -> str:
        """Асинхронный URL для приложения"""
        return self.POSTGRES_CONNECTION_STRING.replace("postgres://", "postgresql+asyncpg://", 1)

    @property
    def SYNC_DATABASE_URL(self) -> str:
        """Синхронный URL для Alembic"""
        return self.POSTGRES_CONNECTION_STRING.replace("postgres://", "postgresql://", 1)


settings = Settings()
