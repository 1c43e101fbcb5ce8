import logging
import time
from typing import Callable, Optional
from pydantic import BaseModel

from cardshop.domain.models import (
    InventoryItem, NewInventoryItem,
    DEFAULT_ITEM_TYPE, DEFAULT_CONDITION, DEFAULT_LANGUAGE,
    DEFAULT_SET_CODE, DEFAULT_COLLECTOR_NUMBER, SEALED_ID_PREFIX
)
from cardshop.domain.exceptions import InvalidRequestError


logger = logging.getLogger(__name__)


class CreateInventoryItemDTO(BaseModel):
    scryfall_id: Optional[str] = None
    card_name: Optional[str] = None
    set_code: Optional[str] = None
    collector_number: Optional[str] = None
    price: Optional[int] = None
    stock: Optional[int] = None
    condition: Optional[str] = None
    language: Optional[str] = None
    is_foil: Optional[bool] = None
    image_url: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None


class CreateInventoryItemUseCase:
    def __init__(self, unit_of_work, clock: Callable[[], float] = time.time):
        self._uow = unit_of_work
        self._clock = clock

    async def __call__(self, data: CreateInventoryItemDTO) -> InventoryItem:
        if not data.price or not data.card_name:
            raise InvalidRequestError("card_name and price are required")
        if data.price < 0:
            raise InvalidRequestError("price must be greater than zero")
        if data.stock is not None and data.stock < 0:
            raise InvalidRequestError("stock cannot be negative")

        new_item = NewInventoryItem(
            scryfall_id=data.scryfall_id or self._sealed_id(),
            card_name=data.card_name,
            set_code=data.set_code or DEFAULT_SET_CODE,
            collector_number=data.collector_number or DEFAULT_COLLECTOR_NUMBER,
            price=data.price,
            stock=1 if data.stock is None else data.stock,
            condition=data.condition or DEFAULT_CONDITION,
            language=data.language or DEFAULT_LANGUAGE,
            is_foil=bool(data.is_foil),
            image_url=data.image_url,
            type=data.type or DEFAULT_ITEM_TYPE,
            category=data.category or None
        )

        async with self._uow() as uow:
            item = await uow.inventory.create(new_item)
            await uow.commit()

        logger.info(f"Позиция создана: {item.id} ({item.card_name}), остаток {item.stock}")
        return item

    def _sealed_id(self) -> str:
        """Товар без карточки в каталоге (например, бустер-бокс)"""
        return f"{SEALED_ID_PREFIX}{int(self._clock() * 1000)}"
