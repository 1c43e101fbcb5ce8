from decimal import Decimal
from typing import Optional, List
from sqlalchemy import select, insert, update
from sqlalchemy.ext.asyncio import AsyncSession

from cardshop.domain.models import InventoryItem, NewInventoryItem, Order, OrderLine, OrderStatus
from cardshop.infrastructure.db_schema import inventory_tbl, orders_tbl
from cardshop.infrastructure.inventory_filters import build_search_statement
from cardshop.application.interfaces import InventoryRepository, OrderRepository


class SQLAlchemyInventoryRepository(InventoryRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def search(self, filters) -> List[InventoryItem]:
        result = await self._session.execute(build_search_statement(filters))
        return [self._to_domain(row) for row in result.fetchall()]

    async def create(self, item: NewInventoryItem) -> InventoryItem:
        stmt = (
            insert(inventory_tbl)
            .values(**item.model_dump())
            .returning(*inventory_tbl.c)
        )
        result = await self._session.execute(stmt)
        return self._to_domain(result.one())

    async def get_for_update(self, item_id: int) -> Optional[InventoryItem]:
        """Читает строку с эксклюзивной блокировкой до конца транзакции"""
        result = await self._session.execute(
            select(inventory_tbl)
            .where(inventory_tbl.c.id == item_id)
            .with_for_update()
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def decrement_stock(self, item_id: int, quantity: int) -> None:
        stmt = (
            update(inventory_tbl)
            .where(inventory_tbl.c.id == item_id)
            .values(stock=inventory_tbl.c.stock - quantity)
        )
        await self._session.execute(stmt)

    def _to_domain(self, row) -> InventoryItem:
        """Трансформация DB → Domain"""
        return InventoryItem(
            id=row.id,
            scryfall_id=row.scryfall_id,
            card_name=row.card_name,
            set_code=row.set_code,
            collector_number=row.collector_number,
            price=row.price,
            stock=row.stock,
            condition=row.condition,
            language=row.language,
            is_foil=row.is_foil,
            image_url=row.image_url,
            type=row.type,
            category=row.category,
            created_at=row.created_at
        )


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, customer_name: str, contact_info: str, items: List[OrderLine], total: Decimal) -> Order:
        stmt = (
            insert(orders_tbl)
            .values(
                customer_name=customer_name,
                contact_info=contact_info,
                items=[line.model_dump() for line in items],  # JSON column сериализует сам
                total=total,
                status=OrderStatus.PENDING
            )
            .returning(*orders_tbl.c)
        )
        result = await self._session.execute(stmt)
        return self._to_domain(result.one())

    async def list_all(self) -> List[Order]:
        result = await self._session.execute(
            select(orders_tbl).order_by(orders_tbl.c.created_at.desc(), orders_tbl.c.id.desc())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        stmt = (
            update(orders_tbl)
            .where(orders_tbl.c.id == order_id)
            .values(status=status)
            .returning(*orders_tbl.c)
        )
        result = await self._session.execute(stmt)
        row = result.fetchone()
        return self._to_domain(row) if row else None

    def _to_domain(self, row) -> Order:
        """Трансформация DB → Domain"""
        return Order(
            id=row.id,
            customer_name=row.customer_name,
            contact_info=row.contact_info,
            items=[OrderLine(**line) for line in row.items],
            total=row.total,
            status=OrderStatus(row.status),
            created_at=row.created_at
        )
