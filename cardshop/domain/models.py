from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from pydantic import BaseModel, Field, PlainSerializer


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    READY = "READY"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


DEFAULT_ITEM_TYPE = "SINGLE"
DEFAULT_CONDITION = "NM"
DEFAULT_LANGUAGE = "EN"
DEFAULT_SET_CODE = "N/A"
DEFAULT_COLLECTOR_NUMBER = "0"
SEALED_ID_PREFIX = "sealed-"

# Сумма заказа хранится как NUMERIC, в JSON уходит числом
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class InventoryItem(BaseModel):
    """Domain Entity — позиция на складе"""
    id: int
    scryfall_id: str
    card_name: str
    set_code: Optional[str] = DEFAULT_SET_CODE
    collector_number: Optional[str] = DEFAULT_COLLECTOR_NUMBER
    price: int
    stock: int = 1
    condition: str = DEFAULT_CONDITION
    language: str = DEFAULT_LANGUAGE
    is_foil: bool = False
    image_url: Optional[str] = None
    type: str = DEFAULT_ITEM_TYPE
    category: Optional[str] = None
    created_at: datetime

    def has_stock_for(self, quantity: int) -> bool:
        """Бизнес-правило: остаток не может уйти в минус"""
        return self.stock >= quantity


class NewInventoryItem(BaseModel):
    """Позиция до вставки в БД: id и created_at назначает хранилище"""
    scryfall_id: str
    card_name: str
    set_code: str
    collector_number: str
    price: int
    stock: int
    condition: str
    language: str
    is_foil: bool
    image_url: Optional[str] = None
    type: str
    category: Optional[str] = None


class OrderLine(BaseModel):
    """Value Object — снимок позиции в заказе"""
    id: int
    card_name: str = ""
    quantity: int = Field(ge=1)


class Order(BaseModel):
    """Domain Entity — заказ"""
    id: int
    customer_name: str
    contact_info: str
    items: list[OrderLine]
    total: Money
    status: OrderStatus
    created_at: datetime


class CardRecord(BaseModel):
    """Value Object — карта из внешнего каталога"""
    scryfall_id: str
    card_name: str
    set_code: Optional[str] = None
    set_name: Optional[str] = None
    collector_number: Optional[str] = None
    rarity: Optional[str] = None
    type_line: Optional[str] = None
    image_url: Optional[str] = None
    prices: dict[str, Optional[str]] = Field(default_factory=dict)
