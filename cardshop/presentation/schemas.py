from pydantic import BaseModel
from typing import Any, Optional

from cardshop.domain.models import Order


class LoginRequest(BaseModel):
    password: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True


class BulkSearchRequest(BaseModel):
    # Форма проверяется в ResolveCardsUseCase, чтобы вернуть 400 с понятным текстом
    identifiers: Any = None


class UpdateStatusRequest(BaseModel):
    status: Optional[str] = None


class UpdateStatusResponse(BaseModel):
    success: bool = True
    order: Order


class HealthResponse(BaseModel):
    status: str = "OK"


class ErrorResponse(BaseModel):
    error: str
