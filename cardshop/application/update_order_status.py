import logging

from cardshop.domain.models import Order, OrderStatus
from cardshop.domain.exceptions import InvalidRequestError, OrderNotFoundError

logger = logging.getLogger(__name__)


class UpdateOrderStatusUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: int, status) -> Order:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise InvalidRequestError(f"Invalid status: {status}")

        async with self._uow() as uow:
            order = await uow.orders.update_status(order_id, new_status)
            if not order:
                raise OrderNotFoundError(order_id)
            await uow.commit()

        logger.info(f"Заказ {order_id} переведен в {new_status.value}")
        return order
