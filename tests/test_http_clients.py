import json

import httpx
import pytest

from cardshop.domain.exceptions import CatalogServiceError
from cardshop.infrastructure.http_clients import ScryfallCatalogClient, to_card_record

BOLT = {
    "id": "e3285e6b-3e79-4d7c-bf96-d920f973b80e",
    "name": "Lightning Bolt",
    "set": "lea",
    "set_name": "Limited Edition Alpha",
    "collector_number": "161",
    "rarity": "common",
    "type_line": "Instant",
    "image_uris": {"small": "https://img/s.jpg", "normal": "https://img/n.jpg"},
    "prices": {"usd": "450.00", "usd_foil": None},
}

DELVER = {
    "id": "11bf83bb-c95b-4b4f-9a56-ce7a1816307a",
    "name": "Delver of Secrets // Insectile Aberration",
    "set": "isd",
    "collector_number": "51",
    "card_faces": [
        {"name": "Delver of Secrets", "image_uris": {"normal": "https://img/front.jpg"}},
        {"name": "Insectile Aberration", "image_uris": {"normal": "https://img/back.jpg"}},
    ],
}


def client_for(handler) -> ScryfallCatalogClient:
    return ScryfallCatalogClient("https://scryfall.test/", transport=httpx.MockTransport(handler))


def test_card_record_mapping():
    card = to_card_record(BOLT)
    assert card.scryfall_id == BOLT["id"]
    assert card.card_name == "Lightning Bolt"
    assert card.set_code == "lea"
    assert card.image_url == "https://img/n.jpg"
    assert card.prices == {"usd": "450.00", "usd_foil": None}


def test_double_faced_card_uses_front_image():
    assert to_card_record(DELVER).image_url == "https://img/front.jpg"


async def test_search_sends_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["q"] = request.url.params["q"]
        return httpx.Response(200, json={"object": "list", "data": [BOLT]})

    cards = await client_for(handler).search_cards("bolt set:lea")
    assert seen == {"path": "/cards/search", "q": "bolt set:lea"}
    assert [card.card_name for card in cards] == ["Lightning Bolt"]


async def test_search_without_matches_is_empty():
    def handler(request):
        return httpx.Response(404, json={"object": "error", "code": "not_found"})

    assert await client_for(handler).search_cards("zzzz") == []


async def test_search_upstream_failure():
    def handler(request):
        return httpx.Response(503)

    with pytest.raises(CatalogServiceError):
        await client_for(handler).search_cards("bolt")


async def test_search_network_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CatalogServiceError):
        await client_for(handler).search_cards("bolt")


async def test_collection_is_one_round_trip():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"data": [BOLT, DELVER], "not_found": [{"name": "Nope"}]})

    identifiers = [{"name": "Lightning Bolt", "set": "lea"}, {"id": DELVER["id"]}, {"name": "Nope"}]
    cards = await client_for(handler).get_collection(identifiers)

    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/cards/collection"
    assert json.loads(requests[0].content) == {"identifiers": identifiers}
    assert [card.scryfall_id for card in cards] == [BOLT["id"], DELVER["id"]]


async def test_collection_upstream_failure():
    def handler(request):
        return httpx.Response(400, json={"object": "error"})

    with pytest.raises(CatalogServiceError):
        await client_for(handler).get_collection([{"name": "Lightning Bolt"}])


async def test_search_non_json_body_is_catalog_error():
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(CatalogServiceError):
        await client_for(handler).search_cards("bolt")


async def test_collection_non_json_body_is_catalog_error():
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(CatalogServiceError):
        await client_for(handler).get_collection([{"name": "Lightning Bolt"}])
