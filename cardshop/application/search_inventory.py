from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, field_validator

from cardshop.domain.models import InventoryItem


class SortOrder(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


class InventoryFilters(BaseModel):
    q: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    # Любое другое значение — сначала новые
    sort: Optional[str] = None

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def blank_price_is_no_filter(cls, value):
        # Пустое поле формы приходит как ""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SearchInventoryUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, filters: InventoryFilters) -> List[InventoryItem]:
        async with self._uow() as uow:
            return await uow.inventory.search(filters)
