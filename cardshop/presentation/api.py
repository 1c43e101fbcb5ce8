from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, Request, status

from cardshop.presentation.schemas import (
    LoginRequest, LoginResponse, BulkSearchRequest, UpdateStatusRequest,
    UpdateStatusResponse, HealthResponse, ErrorResponse
)
from cardshop.domain.models import CardRecord, InventoryItem, Order
from cardshop.application.authenticate_admin import AuthenticateAdminUseCase
from cardshop.application.search_catalog import SearchCardsUseCase, ResolveCardsUseCase
from cardshop.application.search_inventory import SearchInventoryUseCase, InventoryFilters
from cardshop.application.create_inventory_item import CreateInventoryItemUseCase, CreateInventoryItemDTO
from cardshop.application.place_order import PlaceOrderUseCase, PlaceOrderDTO
from cardshop.application.list_orders import ListOrdersUseCase
from cardshop.application.update_order_status import UpdateOrderStatusUseCase
from cardshop.infrastructure.unit_of_work import UnitOfWork

router = APIRouter()


# Фабрики для создания use cases; пул и клиенты создаются при старте и живут в app.state
def get_unit_of_work(request: Request) -> UnitOfWork:
    return UnitOfWork(request.app.state.session_factory)


def get_authenticate_admin_use_case(request: Request):
    return AuthenticateAdminUseCase(request.app.state.settings.ADMIN_PASSWORD)


def get_search_cards_use_case(request: Request):
    return SearchCardsUseCase(request.app.state.catalog)


def get_resolve_cards_use_case(request: Request):
    return ResolveCardsUseCase(request.app.state.catalog)


def get_search_inventory_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return SearchInventoryUseCase(uow)


def get_create_inventory_item_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return CreateInventoryItemUseCase(uow)


def get_place_order_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return PlaceOrderUseCase(uow)


def get_list_orders_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return ListOrdersUseCase(uow)


def get_update_order_status_use_case(uow: UnitOfWork = Depends(get_unit_of_work)):
    return UpdateOrderStatusUseCase(uow)


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()


@router.post(
    "/auth/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}}
)
async def login(
    request: LoginRequest,
    use_case: AuthenticateAdminUseCase = Depends(get_authenticate_admin_use_case)
):
    """Проверка пароля администратора"""
    use_case(request.password)
    return LoginResponse()


@router.get(
    "/search",
    response_model=List[CardRecord],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def search_cards(
    q: Optional[str] = None,
    use_case: SearchCardsUseCase = Depends(get_search_cards_use_case)
):
    """Поиск карт во внешнем каталоге"""
    return await use_case(q)


@router.post(
    "/search-bulk",
    response_model=List[CardRecord],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def search_cards_bulk(
    request: BulkSearchRequest,
    use_case: ResolveCardsUseCase = Depends(get_resolve_cards_use_case)
):
    """Пакетный поиск карт (импорт коллекции)"""
    return await use_case(request.identifiers)


@router.get(
    "/inventory",
    response_model=List[InventoryItem],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def search_inventory(
    filters: Annotated[InventoryFilters, Query()],
    use_case: SearchInventoryUseCase = Depends(get_search_inventory_use_case)
):
    """Склад с фильтрами, не больше 100 позиций"""
    return await use_case(filters)


@router.post(
    "/inventory",
    response_model=InventoryItem,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED
)
async def create_inventory_item(
    request: CreateInventoryItemDTO,
    use_case: CreateInventoryItemUseCase = Depends(get_create_inventory_item_use_case)
):
    """Добавить позицию на склад"""
    return await use_case(request)


@router.post(
    "/orders",
    response_model=Order,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED
)
async def place_order(
    request: PlaceOrderDTO,
    use_case: PlaceOrderUseCase = Depends(get_place_order_use_case)
):
    """Создать заказ со списанием остатков"""
    return await use_case(request)


@router.get(
    "/orders",
    response_model=List[Order],
    responses={500: {"model": ErrorResponse}}
)
async def list_orders(use_case: ListOrdersUseCase = Depends(get_list_orders_use_case)):
    """Все заказы, сначала новые"""
    return await use_case()


@router.patch(
    "/orders/{order_id}/status",
    response_model=UpdateStatusResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def update_order_status(
    order_id: int,
    request: UpdateStatusRequest,
    use_case: UpdateOrderStatusUseCase = Depends(get_update_order_status_use_case)
):
    """Сменить статус заказа"""
    order = await use_case(order_id, request.status)
    return UpdateStatusResponse(order=order)
