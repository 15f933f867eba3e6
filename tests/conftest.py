import json
import pytest
from bookstore.app import create_app
from bookstore.auth import issue_token
from bookstore.cli import create_user, seed_database
from bookstore.db import DB

JSONAPI = "application/vnd.api+json"
PREFIX = "/api/v1"


class JSONAPIClient:
    """
    Test client sending the jsonapi headers and a bearer token
    """

    def __init__(self, client, token=None):
        self.client = client
        self.token = token

    def headers(self, extra=None):
        headers = {"Accept": JSONAPI}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        headers.update(extra or {})
        return headers

    def get(self, url, **kwargs):
        return self.client.get(PREFIX + url, headers=self.headers(kwargs.pop("headers", None)), **kwargs)

    def delete(self, url, **kwargs):
        return self.client.delete(PREFIX + url, headers=self.headers(kwargs.pop("headers", None)), **kwargs)

    def post(self, url, document, **kwargs):
        return self._send(self.client.post, url, document, **kwargs)

    def patch(self, url, document, **kwargs):
        return self._send(self.client.patch, url, document, **kwargs)

    def _send(self, method, url, document, **kwargs):
        data = document if isinstance(document, str) else json.dumps(document)
        return method(PREFIX + url, data=data, content_type=JSONAPI, headers=self.headers(kwargs.pop("headers", None)), **kwargs)


@pytest.fixture
def app():
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://"})
    with app.app_context():
        DB.create_all()
    yield app
    with app.app_context():
        DB.drop_all()


@pytest.fixture
def accounts(app):
    """
    admin and regular user ids and tokens
    """
    with app.app_context():
        admin = create_user("John Doe", "john@example.com", role="admin")
        user = create_user("Jane Doe", "jane@example.com")
        result = {
            "admin": {"id": admin.id, "token": issue_token(admin)},
            "user": {"id": user.id, "token": issue_token(user)},
        }
        DB.session.commit()
    return result


@pytest.fixture
def client(app, accounts):
    """client authenticated as a regular user"""
    return JSONAPIClient(app.test_client(), accounts["user"]["token"])


@pytest.fixture
def admin_client(app, accounts):
    return JSONAPIClient(app.test_client(), accounts["admin"]["token"])


@pytest.fixture
def anonymous_client(app):
    return JSONAPIClient(app.test_client())


@pytest.fixture
def seeded(app):
    with app.app_context():
        seed_database()
        DB.session.commit()


@pytest.fixture
def make_client(app):
    def _make_client(token=None):
        return JSONAPIClient(app.test_client(), token)

    return _make_client
