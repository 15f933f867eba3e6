import logging
from http import HTTPStatus

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from bookstore.errors import GenericError, NotFoundError, UnAuthenticatedError, UnAuthorizedError, ValidationError
from bookstore.jsonapi_formatting import error_document, humanize, jsonapi_error_response, redact

JSONAPI = "application/vnd.api+json"


@pytest.mark.parametrize(
    "class_name, title",
    [
        ("Exception", "Exception"),
        ("ValueError", "Value Error"),
        ("NotFoundHttpException", "Not Found Http Exception"),
        ("HTTPException", "HTTP Exception"),
        ("MethodNotAllowed", "Method Not Allowed"),
    ],
)
def test_humanize(class_name, title):
    assert humanize(class_name) == title


def test_generic_exception(app):
    with app.test_request_context(headers={"Accept": JSONAPI}):
        document, status = error_document(Exception("Test exception"))
    assert status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert document == {"errors": [{"title": "Exception", "details": "Test exception"}]}


def test_value_error(app):
    with app.test_request_context(headers={"Accept": JSONAPI}):
        response = jsonapi_error_response(ValueError("bad value"))
    assert response.status_code == 500
    assert response.get_json() == {"errors": [{"title": "Value Error", "details": "bad value"}]}


def test_http_exception_keeps_its_status(app):
    exc = HTTPException(description="Not found")
    exc.code = 404
    with app.test_request_context(headers={"Accept": JSONAPI}):
        document, status = error_document(exc)
    assert status == 404
    assert document == {"errors": [{"title": "HTTP Exception", "details": "Not found"}]}


def test_method_not_allowed(app):
    with app.test_request_context(headers={"Accept": JSONAPI}):
        document, status = error_document(MethodNotAllowed())
    assert status == 405
    assert document["errors"][0]["title"] == "Method Not Allowed"


DUPLICATE_USER = IntegrityError(
    "INSERT INTO users (id, name, email, password) VALUES (?, ?, ?, ?)",
    ("1", "Jane Doe", "jane@example.com", "scrypt:32768:8:1$salt$hash"),
    Exception("UNIQUE constraint failed: users.email"),
)


@pytest.mark.parametrize("exc", [NotFoundError('No "books" with id "5"'), NoResultFound(), DUPLICATE_USER])
def test_not_found_is_normalized(app, exc):
    with app.test_request_context(headers={"Accept": JSONAPI}):
        response = jsonapi_error_response(exc)
    assert response.status_code == 404
    assert response.get_json() == {"errors": [{"title": "Not Found Http Exception", "details": "Resource not found"}]}
    assert b"scrypt" not in response.data


def test_validation_errors_in_order(app):
    exc = ValidationError(field_errors=[("data.type", "The data.type field is required."), ("data.attributes.title", "x")])
    with app.test_request_context(headers={"Accept": JSONAPI}):
        document, status = error_document(exc)
    assert status == 422
    assert document == {
        "errors": [
            {"title": "Validation Error", "details": "The data.type field is required.", "source": {"pointer": "/data/type"}},
            {"title": "Validation Error", "details": "x", "source": {"pointer": "/data/attributes/title"}},
        ]
    }


def test_authorization_errors(app):
    with app.test_request_context(headers={"Accept": JSONAPI}):
        assert error_document(UnAuthorizedError()) == (
            {"errors": [{"title": "Access Denied Http Exception", "details": "This action is unauthorized."}]},
            403,
        )
        assert error_document(UnAuthenticatedError())[1] == 403


def test_generic_error_status(app):
    with app.test_request_context(headers={"Accept": JSONAPI}):
        document, status = error_document(GenericError("conflict", status_code=409))
    assert status == 409
    assert document == {"errors": [{"title": "Generic Error", "details": "conflict"}]}


def test_unauthenticated_html_client_is_redirected(app):
    with app.test_request_context(headers={"Accept": "text/html"}):
        response = jsonapi_error_response(UnAuthenticatedError())
    assert response.status_code == HTTPStatus.FOUND
    assert response.headers["Location"].endswith("/login")


def test_redact():
    payload = {"data": {"type": "users", "attributes": {"name": "Max", "password": "secret", "remember_token": "abc"}}}
    assert redact(payload) == {
        "data": {"type": "users", "attributes": {"name": "Max", "password": "[redacted]", "remember_token": "[redacted]"}}
    }
    assert redact([{"password": "secret"}, "password"]) == [{"password": "[redacted]"}, "password"]


def test_debug_log_hides_passwords(app, caplog):
    body = '{"data": {"type": "users", "attributes": {"name": "Max", "password": "plain secret"}}}'
    with app.test_request_context("/api/v1/users", method="POST", data=body, content_type=JSONAPI, headers={"Accept": JSONAPI}):
        with caplog.at_level(logging.DEBUG, logger="bookstore"):
            jsonapi_error_response(ValidationError.for_field("data.attributes.email", "The data.attributes.email field is required."))

    assert "Request payload" in caplog.text
    assert "[redacted]" in caplog.text
    assert "plain secret" not in caplog.text
