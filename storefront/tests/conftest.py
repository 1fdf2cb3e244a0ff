"""
Shared fixtures: a session, notice board, navigator and a routed gateway mock.
"""
import pytest
from unittest.mock import AsyncMock

from storefront.navigation import Navigator
from storefront.notices import NoticeBoard
from storefront.services.api_gateway import ApiGateway, GatewayResponse
from storefront.session import SessionStore


RAW_PRODUCTS = [
    {
        "name": "iPhone XR",
        "category": "Phones",
        "cost": 100,
        "rating": 4,
        "image": "https://i.imgur.com/lulqWzW.jpg",
        "_id": "v4sLtEcMpzabRyfx"
    },
    {
        "name": "Basketball",
        "category": "Sports",
        "cost": 10,
        "rating": 5,
        "image": "https://i.imgur.com/lulqWzW.jpg",
        "_id": "upLK9JbQ4rMhTwt4"
    },
    {
        "name": "OnePlus 6",
        "category": "Phones",
        "cost": 5,
        "rating": 5,
        "image": "https://i.imgur.com/lulqWzW.jpg",
        "_id": "BW0jAAeDJmlZCF8i"
    }
]


def ok(body):
    return GatewayResponse(errored=False, body=body)


def unreachable():
    return GatewayResponse(errored=True, body=None)


def make_gateway(routes):
    """
    Gateway mock answering by (method, path).

    A route may map to a single response or to a list consumed in order
    (the last entry repeats).
    """
    gateway = AsyncMock(spec=ApiGateway)
    gateway.base_url = "http://backend.test/api/v1"

    async def call(path, method="GET", payload=None, auth=False):
        response = routes[(method, path)]
        if isinstance(response, list):
            return response.pop(0) if len(response) > 1 else response[0]
        return response

    gateway.call.side_effect = call
    return gateway


def requested(gateway):
    """(method, path) of every call the gateway received, in order."""
    calls = []
    for call in gateway.call.call_args_list:
        path = call.args[0] if call.args else call.kwargs["path"]
        calls.append((call.kwargs.get("method", "GET"), path))
    return calls


@pytest.fixture
def raw_products():
    return [dict(product) for product in RAW_PRODUCTS]


@pytest.fixture
def session():
    return SessionStore({"token": "testtoken", "username": "test123", "balance": 5000})


@pytest.fixture
def anonymous_session():
    return SessionStore()


@pytest.fixture
def notices():
    return NoticeBoard()


@pytest.fixture
def navigator():
    return Navigator()
