import io

import mongomock
import pytest

from app import create_app
from config import TestingConfig
from utils.db import initialize_database, mongo


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    mongo.db = mongomock.MongoClient().db
    initialize_database(mongo.db, app.config)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return mongo.db


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def csv_upload(text, filename="roster.csv", content_type="text/csv"):
    return {"file": (io.BytesIO(text.encode("utf-8")), filename, content_type)}


@pytest.fixture
def seeded_roster(client, auth_headers):
    body = "S. No,Name,RollNo,RegNo\n1,Asha,R1,REG1\n2,Ben,R2,REG2\n3,Chitra,R3,REG3\n"
    resp = client.post(
        "/api/students/second-year/C/upload",
        data=csv_upload(body),
        headers=auth_headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    return "second-year", "C"
