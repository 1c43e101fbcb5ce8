"""Построение запроса поиска по складу.

Фильтры превращаются в список условий (колонка, оператор, значение),
которые затем сворачиваются в один параметризованный SELECT.
"""
import operator
from typing import Any, NamedTuple

from sqlalchemy import Select, select

from cardshop.application.search_inventory import InventoryFilters, SortOrder
from cardshop.infrastructure.db_schema import inventory_tbl

SEARCH_LIMIT = 100


class Clause(NamedTuple):
    column: str
    operator: str
    value: Any


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


_OPERATORS = {
    "contains": lambda column, value: column.ilike(f"%{_escape_like(value)}%", escape="\\"),
    "eq": operator.eq,
    "ge": operator.ge,
    "le": operator.le,
}


def build_clauses(filters: InventoryFilters) -> list[Clause]:
    clauses = []
    if filters.q:
        clauses.append(Clause("card_name", "contains", filters.q))
    if filters.type:
        clauses.append(Clause("type", "eq", filters.type))
    if filters.category:
        clauses.append(Clause("category", "eq", filters.category))
    if filters.min_price is not None:
        clauses.append(Clause("price", "ge", filters.min_price))
    if filters.max_price is not None:
        clauses.append(Clause("price", "le", filters.max_price))
    return clauses


def _order_by(sort: str | None):
    c = inventory_tbl.c
    if sort == SortOrder.PRICE_ASC:
        return (c.price.asc(), c.id.asc())
    if sort == SortOrder.PRICE_DESC:
        return (c.price.desc(), c.id.desc())
    # По умолчанию — сначала новые
    return (c.created_at.desc(), c.id.desc())


def build_search_statement(filters: InventoryFilters, limit: int = SEARCH_LIMIT) -> Select:
    stmt = select(inventory_tbl)
    for clause in build_clauses(filters):
        column = inventory_tbl.c[clause.column]
        stmt = stmt.where(_OPERATORS[clause.operator](column, clause.value))
    return stmt.order_by(*_order_by(filters.sort)).limit(min(limit, SEARCH_LIMIT))
