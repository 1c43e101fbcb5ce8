from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, List
from cardshop.domain.models import InventoryItem, NewInventoryItem, Order, OrderLine, OrderStatus, CardRecord


class InventoryRepository(ABC):
    @abstractmethod
    async def search(self, filters) -> List[InventoryItem]:
        pass

    @abstractmethod
    async def create(self, item: NewInventoryItem) -> InventoryItem:
        pass

    @abstractmethod
    async def get_for_update(self, item_id: int) -> Optional[InventoryItem]:
        pass

    @abstractmethod
    async def decrement_stock(self, item_id: int, quantity: int) -> None:
        pass


class OrderRepository(ABC):
    @abstractmethod
    async def create(self, customer_name: str, contact_info: str, items: List[OrderLine], total: Decimal) -> Order:
        pass

    @abstractmethod
    async def list_all(self) -> List[Order]:
        pass

    @abstractmethod
    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        pass


class CatalogService(ABC):
    @abstractmethod
    async def search_cards(self, query: str) -> List[CardRecord]:
        pass

    @abstractmethod
    async def get_collection(self, identifiers: List[dict]) -> List[CardRecord]:
        pass
