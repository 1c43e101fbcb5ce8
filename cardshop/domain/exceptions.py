class DomainException(Exception):
    pass


class InvalidRequestError(DomainException):
    pass


class UnauthorizedError(DomainException):
    pass


class NotFoundError(DomainException):
    pass


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class BusinessRuleViolation(DomainException):
    pass


class ItemNoLongerExistsError(BusinessRuleViolation):
    def __init__(self, card_name: str):
        self.card_name = card_name
        super().__init__(f'"{card_name}" no longer exists')


class InsufficientStockError(BusinessRuleViolation):
    def __init__(self, card_name: str, available: int, requested: int):
        self.card_name = card_name
        self.available = available
        self.requested = requested
        super().__init__(
            f'Insufficient stock for "{card_name}". Available: {available}, requested: {requested}'
        )


class UpstreamError(DomainException):
    pass


class CatalogServiceError(UpstreamError):
    pass


class StoreError(DomainException):
    pass
