import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.database import ensure_indexes, get_mongodb
from app.main import app


@pytest.fixture
def mongodb():
    database = AsyncMongoMockClient()["myapp_test"]
    asyncio.run(ensure_indexes(database))
    return database


@pytest.fixture
def client(mongodb):
    # lifespan 을 타지 않도록 with 없이 사용 (실제 MongoDB 연결 X)
    app.dependency_overrides[get_mongodb] = lambda: mongodb
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    counter = {"n": 0}

    def _make_user(**overrides):
        counter["n"] += 1
        payload = {
            "userName": f"user{counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "password": "secret",
            "age": 25,
            "gender": "female",
            "phone": "010-0000-0000",
        }
        payload.update(overrides)
        response = client.post("/api/users/signup", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _make_user


@pytest.fixture
def make_post(client):
    def _make_post(user_id, **overrides):
        payload = {"title": "제목", "content": "내용", "userID": user_id}
        payload.update(overrides)
        response = client.post("/api/posts", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _make_post
