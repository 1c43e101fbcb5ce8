import logging
from typing import List

from cardshop.domain.models import CardRecord
from cardshop.domain.exceptions import InvalidRequestError
from cardshop.application.interfaces import CatalogService

logger = logging.getLogger(__name__)

IDENTIFIER_KEYS = ("id", "name", "set", "collector_number")


class SearchCardsUseCase:
    def __init__(self, catalog_service: CatalogService):
        self._catalog = catalog_service

    async def __call__(self, query: str | None) -> List[CardRecord]:
        if not query:
            raise InvalidRequestError("Missing query parameter q")
        logger.info(f"Поиск в каталоге: {query}")
        return await self._catalog.search_cards(query)


class ResolveCardsUseCase:
    def __init__(self, catalog_service: CatalogService):
        self._catalog = catalog_service

    async def __call__(self, identifiers) -> List[CardRecord]:
        if not identifiers or not isinstance(identifiers, list):
            raise InvalidRequestError("identifiers must be a non-empty list")
        for identifier in identifiers:
            if not isinstance(identifier, dict) or not any(identifier.get(key) for key in IDENTIFIER_KEYS):
                raise InvalidRequestError(
                    f"Each identifier needs at least one of: {', '.join(IDENTIFIER_KEYS)}"
                )
        logger.info(f"Пакетный поиск в каталоге: {len(identifiers)} карт")
        return await self._catalog.get_collection(identifiers)
