import json
from http import HTTPStatus
from types import SimpleNamespace

import pytest

from bookstore.app import create_app
from bookstore.auth import Policy, hash_token, issue_token, verify_token
from bookstore.cli import create_user
from bookstore.db import DB
from bookstore.errors import UnAuthorizedError
from bookstore.models import AccessToken, User
from bookstore.resources import policy_rules

UNAUTHENTICATED = {"errors": [{"title": "Unauthenticated", "details": "You are not authenticated"}]}
ACCESS_DENIED = {"errors": [{"title": "Access Denied Http Exception", "details": "This action is unauthorized."}]}


def book_document():
    return {"data": {"type": "books", "attributes": {"title": "Dune", "description": "Spice", "publication_year": "1965"}}}


def test_missing_token(anonymous_client):
    response = anonymous_client.get("/authors")

    assert response.status_code == HTTPStatus.FORBIDDEN
    assert response.get_json() == UNAUTHENTICATED


def test_invalid_token(make_client):
    response = make_client("not-a-token").get("/authors")
    assert response.status_code == HTTPStatus.FORBIDDEN


def test_revoked_token(app, accounts, make_client):
    with app.app_context():
        access_token = DB.session.query(AccessToken).filter_by(token_hash=hash_token(accounts["user"]["token"])).one()
        access_token.revoked = True
        DB.session.commit()
    response = make_client(accounts["user"]["token"]).get("/authors")
    assert response.status_code == HTTPStatus.FORBIDDEN


def test_unauthenticated_status_is_configurable():
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://", "UNAUTHENTICATED_STATUS": 401})
    with app.app_context():
        DB.create_all()
    response = app.test_client().get("/api/v1/authors", headers={"Accept": "application/vnd.api+json"})

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.get_json() == UNAUTHENTICATED


def test_verify_token(app, accounts):
    with app.app_context():
        assert verify_token(accounts["admin"]["token"]).id == accounts["admin"]["id"]
        assert verify_token("") is None
        assert verify_token("bogus") is None


def test_user_cannot_create_books(client):
    response = client.post("/books", book_document())

    assert response.status_code == HTTPStatus.FORBIDDEN
    assert response.get_json() == ACCESS_DENIED


def test_admin_manages_books(admin_client):
    response = admin_client.post("/books", book_document())
    assert response.status_code == HTTPStatus.CREATED
    book_id = response.get_json()["data"]["id"]

    document = {"data": {"id": book_id, "type": "books", "attributes": {"title": "Dune Messiah"}}}
    response = admin_client.patch(f"/books/{book_id}", document)
    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["data"]["attributes"]["title"] == "Dune Messiah"
    assert response.get_json()["data"]["attributes"]["publication_year"] == "1965"

    assert admin_client.delete(f"/books/{book_id}").status_code == HTTPStatus.NO_CONTENT


def test_user_cannot_change_books(admin_client, client):
    book_id = admin_client.post("/books", book_document()).get_json()["data"]["id"]

    document = {"data": {"id": book_id, "type": "books", "attributes": {"title": "x"}}}
    assert client.patch(f"/books/{book_id}", document).status_code == HTTPStatus.FORBIDDEN
    assert client.delete(f"/books/{book_id}").status_code == HTTPStatus.FORBIDDEN
    response = client.patch(f"/books/{book_id}/relationships/authors", {"data": []})
    assert response.get_json() == ACCESS_DENIED
    assert client.get(f"/books/{book_id}").status_code == HTTPStatus.OK


def test_policy_rules():
    policy = Policy(policy_rules())
    admin = SimpleNamespace(id="a", role="admin")
    user = SimpleNamespace(id="u", role="user")

    assert policy.is_allowed(admin, "create", "books")
    assert not policy.is_allowed(user, "create", "books")
    assert policy.is_allowed(user, "view", "books")
    assert policy.is_allowed(user, "create", "authors")
    assert not policy.is_allowed(None, "view", "authors")
    with pytest.raises(UnAuthorizedError):
        policy.authorize(user, "delete", "books")


def test_current_user(client, accounts):
    response = client.get("/users/current")

    assert response.status_code == HTTPStatus.OK
    data = response.get_json()["data"]
    assert data["id"] == accounts["user"]["id"]
    assert len(data["id"]) == 36
    assert data["attributes"]["role"] == "user"
    assert "password" not in data["attributes"]
    assert "remember_token" not in data["attributes"]


def test_create_user(app, client):
    document = {"data": {"type": "users", "attributes": {"name": "Max", "email": "max@example.com", "password": "secret", "role": "admin"}}}
    response = client.post("/users", document)

    assert response.status_code == HTTPStatus.CREATED
    data = response.get_json()["data"]
    assert data["attributes"]["role"] == "user"
    assert "password" not in data["attributes"]
    with app.app_context():
        user = DB.session.get(User, data["id"])
        assert user.password != "secret"
        assert user.verify_password("secret")


def test_user_password_update_is_hashed(app, client, accounts):
    user_id = accounts["user"]["id"]
    document = {"data": {"id": user_id, "type": "users", "attributes": {"password": "new secret"}}}
    assert client.patch(f"/users/{user_id}", document).status_code == HTTPStatus.OK
    with app.app_context():
        assert DB.session.get(User, user_id).verify_password("new secret")


def test_admin_role_is_configurable():
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://", "ADMIN_ROLE": "librarian"})
    with app.app_context():
        DB.create_all()
        librarian = issue_token(create_user("Lib Rarian", "lib@example.com", role="librarian"))
        admin = issue_token(create_user("John Doe", "john@example.com", role="admin"))
        DB.session.commit()

    def post_book(token):
        headers = {"Accept": "application/vnd.api+json", "Authorization": f"Bearer {token}"}
        return app.test_client().post(
            "/api/v1/books", data=json.dumps(book_document()), content_type="application/vnd.api+json", headers=headers
        )

    assert post_book(librarian).status_code == HTTPStatus.CREATED
    response = post_book(admin)
    assert response.status_code == HTTPStatus.FORBIDDEN
    assert response.get_json() == ACCESS_DENIED


def test_duplicate_email(app, client):
    document = {"data": {"type": "users", "attributes": {"name": "Jane Again", "email": "jane@example.com", "password": "secret"}}}
    response = client.post("/users", document)

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json() == {"errors": [{"title": "Not Found Http Exception", "details": "Resource not found"}]}
    assert b"INSERT" not in response.data
    assert b"scrypt" not in response.data
