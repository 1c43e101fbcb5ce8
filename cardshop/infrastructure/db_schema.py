from sqlalchemy import Table, Column, String, Integer, Numeric, Boolean, Enum, DateTime, JSON, MetaData, CheckConstraint
from sqlalchemy.sql import func

from cardshop.domain.models import OrderStatus

metadata = MetaData()


inventory_tbl = Table(
    "inventory",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("scryfall_id", String, nullable=False, index=True),
    Column("card_name", String, nullable=False, index=True),
    Column("set_code", String, nullable=True),
    Column("collector_number", String, nullable=True),
    Column("price", Integer, nullable=False),
    Column("stock", Integer, nullable=False, default=1),
    Column("condition", String, nullable=False, default="NM"),
    Column("language", String, nullable=False, default="EN"),
    Column("is_foil", Boolean, nullable=False, default=False),
    Column("image_url", String, nullable=True),
    Column("type", String, nullable=False, default="SINGLE"),
    Column("category", String, nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    CheckConstraint("stock >= 0", name="ck_inventory_stock_non_negative"),
)


orders_tbl = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_name", String, nullable=False),
    Column("contact_info", String, nullable=False),
    Column("items", JSON, nullable=False),
    Column("total", Numeric(12, 2), nullable=False),
    Column("status", Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
