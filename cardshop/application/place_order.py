import logging
from pydantic import BaseModel, Field

from cardshop.domain.models import Money, Order, OrderLine
from cardshop.domain.exceptions import (
    InvalidRequestError, ItemNoLongerExistsError, InsufficientStockError, BusinessRuleViolation
)


logger = logging.getLogger(__name__)


class PlaceOrderDTO(BaseModel):
    customer_name: str
    contact_info: str
    items: list[OrderLine] = Field(min_length=1)
    total: Money


class PlaceOrderUseCase:
    """Списывает остатки и сохраняет заказ в одной транзакции.

    Строки склада блокируются (SELECT ... FOR UPDATE) в порядке возрастания id,
    а не в порядке, который прислал клиент: два заказа с пересекающимися
    позициями берут блокировки в одном порядке и не встают в дедлок.
    В сохраненном заказе позиции остаются в исходном порядке.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_data: PlaceOrderDTO) -> Order:
        if not order_data.items:
            raise InvalidRequestError("Order must contain at least one item")
        logger.info(f"Создание заказа для {order_data.customer_name}, позиций: {len(order_data.items)}")

        try:
            async with self._uow() as uow:
                for line in sorted(order_data.items, key=lambda line: line.id):
                    item = await uow.inventory.get_for_update(line.id)
                    if item is None:
                        raise ItemNoLongerExistsError(line.card_name or f"#{line.id}")
                    if not item.has_stock_for(line.quantity):
                        raise InsufficientStockError(item.card_name, item.stock, line.quantity)
                    await uow.inventory.decrement_stock(line.id, line.quantity)

                order = await uow.orders.create(
                    customer_name=order_data.customer_name,
                    contact_info=order_data.contact_info,
                    items=order_data.items,
                    total=order_data.total
                )
                await uow.commit()
        except BusinessRuleViolation as e:
            logger.warning(f"Заказ отклонен: {e}")
            raise

        logger.info(f"Заказ создан: {order.id}")
        return order
