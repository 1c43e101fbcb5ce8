import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.pool import AsyncAdaptedQueuePool

from cardshop.config import Settings
from cardshop.database import build_engine, build_session_factory, create_tables
from cardshop.domain.models import CardRecord, InventoryItem, Order
from cardshop.domain.exceptions import CatalogServiceError
from cardshop.infrastructure.db_schema import inventory_tbl
from cardshop.infrastructure.unit_of_work import UnitOfWork
from cardshop.application.create_inventory_item import CreateInventoryItemUseCase, CreateInventoryItemDTO
from cardshop.main import create_app


# ============================================================================
# SQLite store
# ============================================================================

@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'cardshop.db'}",
        poolclass=AsyncAdaptedQueuePool
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def uow(session_factory):
    return UnitOfWork(session_factory)


@pytest.fixture
def add_item(uow):
    """Добавляет позицию на склад через use case"""
    async def _add(card_name="Lightning Bolt", price=500, **fields) -> InventoryItem:
        use_case = CreateInventoryItemUseCase(uow)
        return await use_case(CreateInventoryItemDTO(card_name=card_name, price=price, **fields))
    return _add


@pytest.fixture
def stock_of(session_factory):
    async def _stock(item_id: int) -> int:
        async with session_factory() as session:
            result = await session.execute(
                select(inventory_tbl.c.stock).where(inventory_tbl.c.id == item_id)
            )
            return result.scalar_one()
    return _stock


# ============================================================================
# In-memory store with per-row locks
# ============================================================================

class InMemoryStore:
    def __init__(self):
        self.rows: dict[int, InventoryItem] = {}
        self.orders: list[Order] = []
        self.locks = defaultdict(asyncio.Lock)

    def add(self, item_id: int, card_name: str, stock: int) -> None:
        self.rows[item_id] = InventoryItem(
            id=item_id, scryfall_id=f"sealed-{item_id}", card_name=card_name,
            price=100, stock=stock, created_at=datetime.now(timezone.utc)
        )


class _MemoryInventory:
    def __init__(self, tx):
        self._tx = tx

    async def get_for_update(self, item_id):
        store = self._tx.store
        if item_id not in self._tx.held:
            await store.locks[item_id].acquire()
            self._tx.held.add(item_id)
        # Отдаем управление, чтобы конкурирующие заказы успели вклиниться
        await asyncio.sleep(0)
        row = self._tx.pending.get(item_id) or store.rows.get(item_id)
        return row.model_copy() if row else None

    async def decrement_stock(self, item_id, quantity):
        current = self._tx.pending.get(item_id) or self._tx.store.rows[item_id]
        await asyncio.sleep(0)
        self._tx.pending[item_id] = current.model_copy(update={"stock": current.stock - quantity})


class _MemoryOrders:
    def __init__(self, tx):
        self._tx = tx

    async def create(self, customer_name, contact_info, items, total):
        order = Order(
            id=len(self._tx.store.orders) + len(self._tx.new_orders) + 1,
            customer_name=customer_name, contact_info=contact_info,
            items=items, total=total, status="PENDING",
            created_at=datetime.now(timezone.utc)
        )
        self._tx.new_orders.append(order)
        return order


class _MemoryTransaction:
    def __init__(self, store):
        self.store = store
        self.held = set()
        self.pending = {}
        self.new_orders = []
        self.inventory = _MemoryInventory(self)
        self.orders = _MemoryOrders(self)

    async def commit(self):
        self.store.rows.update(self.pending)
        self.store.orders.extend(self.new_orders)
        self.pending, self.new_orders = {}, []

    async def rollback(self):
        self.pending, self.new_orders = {}, []


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryStore):
        self.store = store
        self.open_transactions = 0

    @asynccontextmanager
    async def __call__(self):
        tx = _MemoryTransaction(self.store)
        self.open_transactions += 1
        try:
            yield tx
            await tx.rollback()
        finally:
            for item_id in tx.held:
                self.store.locks[item_id].release()
            self.open_transactions -= 1


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def memory_uow(memory_store):
    return InMemoryUnitOfWork(memory_store)


# ============================================================================
# HTTP
# ============================================================================

class FakeCatalog:
    def __init__(self):
        self.cards = [
            CardRecord(scryfall_id="e3285e6b", card_name="Lightning Bolt", set_code="lea", collector_number="161"),
        ]
        self.fail = False
        self.calls = []

    async def search_cards(self, query):
        self.calls.append(("search", query))
        if self.fail:
            raise CatalogServiceError("Scryfall ошибка: 503")
        return [card for card in self.cards if query.lower() in card.card_name.lower()]

    async def get_collection(self, identifiers):
        self.calls.append(("collection", identifiers))
        if self.fail:
            raise CatalogServiceError("Scryfall ошибка: 503")
        names = {identifier.get("name") for identifier in identifiers}
        return [card for card in self.cards if card.card_name in names]


@pytest.fixture
def settings():
    settings = Settings()
    settings.ADMIN_PASSWORD = "s3cret"
    return settings


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def app(settings, session_factory, catalog):
    app = create_app(settings)
    app.state.session_factory = session_factory
    app.state.catalog = catalog
    return app


@pytest_asyncio.fixture
async def client(app):
    """Create async HTTP client for testing FastAPI app"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
