"""
Shared test fixtures and configuration for the graphql_dsl test suite.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

import pytest

from graphql_dsl import ClientConfig, GraphQLClient, TransportResponse, fragment, query


class RecordingTransport:
    """Transport double that records requests and replays a canned response."""

    def __init__(self, payload: Any = None, status_code: int = 200, body: Optional[bytes] = None):
        if body is None:
            body = json.dumps(payload).encode("utf-8")
        self.response = TransportResponse(status_code=status_code, body=body)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def send(self, url: str, body: str, headers: Mapping[str, str]) -> TransportResponse:
        self.calls.append({"url": url, "body": json.loads(body), "headers": dict(headers)})
        return self.response

    async def send_async(self, url: str, body: str, headers: Mapping[str, str]) -> TransportResponse:
        return self.send(url, body, headers)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def endpoint() -> str:
    """GraphQL endpoint used by client tests."""
    return "https://api.example.com/graphql"


@pytest.fixture
def client_config(endpoint: str) -> ClientConfig:
    """Default client configuration for tests."""
    return ClientConfig(endpoint=endpoint, headers={"Authorization": "Bearer secret-token"})


@pytest.fixture
def make_client(client_config: ClientConfig):
    """Factory building a client around a RecordingTransport."""

    def _make(payload: Any = None, **kwargs: Any):
        config = kwargs.pop("config", client_config)
        transport = RecordingTransport(payload, **kwargs)
        return GraphQLClient(config, transport=transport), transport

    return _make


@pytest.fixture
def cat_collection_query():
    """The canonical catCollection(limit: 1) query."""
    with query() as q:
        with q.catCollection(limit=1):
            with q.items:
                q.name
                q.likes
    return q.build()


@pytest.fixture
def cat_fragment():
    """Fragment selecting a cat's name and likes."""
    with fragment("CatInfo", "Cat") as f:
        f.fields("name", "likes")
    return f.build()
