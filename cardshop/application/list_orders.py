from typing import List

from cardshop.domain.models import Order


class ListOrdersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[Order]:
        async with self._uow() as uow:
            return await uow.orders.list_all()
