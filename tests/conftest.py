"""测试 fixtures -- 内存版 EventSourcingDB + 注入 MockTransport 的客户端"""

from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from eventsourcingdb import Client, EventCandidate
from fake_server import API_TOKEN, BASE_URL, FakeEventSourcingDB


@pytest.fixture
def fake_db() -> FakeEventSourcingDB:
    """空的内存数据库"""
    return FakeEventSourcingDB(api_token=API_TOKEN)


@pytest_asyncio.fixture
async def http_client(fake_db: FakeEventSourcingDB) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=fake_db.transport()) as http:
        yield http


@pytest_asyncio.fixture
async def client(http_client: httpx.AsyncClient) -> AsyncGenerator[Client, None]:
    """连接到内存数据库的客户端"""
    async with Client(BASE_URL, API_TOKEN, http_client=http_client) as esdb:
        yield esdb


@pytest.fixture
def book_candidates() -> list[EventCandidate]:
    """两本书的示例事件"""
    return [
        EventCandidate(
            source="https://library.example",
            subject="/books/42",
            type="io.example.book-acquired",
            data={"title": "2001: A Space Odyssey", "author": "Arthur C. Clarke"},
        ),
        EventCandidate(
            source="https://library.example",
            subject="/books/43",
            type="io.example.book-acquired",
            data={"title": "Neuromancer", "author": "William Gibson"},
        ),
    ]
