import httpx
import logging
from typing import List, Optional

from cardshop.domain.models import CardRecord
from cardshop.domain.exceptions import CatalogServiceError
from cardshop.application.interfaces import CatalogService

logger = logging.getLogger(__name__)


class ScryfallCatalogClient(CatalogService):
    """Клиент для Scryfall API. Повторных попыток нет."""

    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._headers = {"Accept": "application/json", "User-Agent": "cardshop/1.0"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, headers=self._headers, timeout=self._timeout)

    async def search_cards(self, query: str) -> List[CardRecord]:
        try:
            async with self._client() as client:
                response = await client.get(f"{self._base_url}/cards/search", params={"q": query})

                if response.status_code == 200:
                    return [to_card_record(card) for card in _json(response).get("data", [])]
                elif response.status_code == 404:
                    # Scryfall отвечает 404, когда ничего не найдено
                    return []
                else:
                    raise CatalogServiceError(f"Scryfall ошибка: {response.status_code}")

        except httpx.RequestError as e:
            logger.error(f"Scryfall ошибка подключения: {e}")
            raise CatalogServiceError(f"Scryfall не доступен: {str(e)}")

    async def get_collection(self, identifiers: List[dict]) -> List[CardRecord]:
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self._base_url}/cards/collection",
                    json={"identifiers": identifiers}
                )

                if response.status_code == 200:
                    data = _json(response)
                    not_found = data.get("not_found") or []
                    if not_found:
                        logger.info(f"Scryfall не нашел {len(not_found)} из {len(identifiers)} карт")
                    return [to_card_record(card) for card in data.get("data", [])]
                else:
                    raise CatalogServiceError(f"Scryfall ошибка: {response.status_code}")

        except httpx.RequestError as e:
            logger.error(f"Scryfall ошибка подключения: {e}")
            raise CatalogServiceError(f"Scryfall не доступен: {str(e)}")


def _json(response: httpx.Response) -> dict:
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Scryfall вернул не JSON: {e}")
        raise CatalogServiceError("Scryfall вернул некорректный ответ") from e


def to_card_record(card: dict) -> CardRecord:
    """Трансформация ответа Scryfall → CardRecord"""
    image_uris = card.get("image_uris")
    if not image_uris and card.get("card_faces"):
        # Двусторонние карты хранят картинки в гранях
        image_uris = card["card_faces"][0].get("image_uris")
    return CardRecord(
        scryfall_id=card["id"],
        card_name=card["name"],
        set_code=card.get("set"),
        set_name=card.get("set_name"),
        collector_number=card.get("collector_number"),
        rarity=card.get("rarity"),
        type_line=card.get("type_line"),
        image_url=(image_uris or {}).get("normal"),
        prices=card.get("prices") or {}
    )
