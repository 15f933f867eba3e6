"""
    jsonapi_formatting: response and error document formatting

    The app errorhandler, jsonapi_error_response, maps every exception to an error document:
    {
        "errors": [{"title": ..., "details": ..., "source": {"pointer": ...}}]
    }
"""
import json
import re
from http import HTTPStatus
from flask import current_app, jsonify, make_response, redirect, request
from sqlalchemy.exc import DBAPIError, NoResultFound
from werkzeug.exceptions import HTTPException, NotFound
import bookstore
from .config import get_config, is_debug
from .errors import NOT_FOUND_DETAILS, JsonapiError, NotFoundError, UnAuthenticatedError, ValidationError
from .jsonapi_types import JSONAPIErrorDocument, JSONAPIErrorObject

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def humanize(class_name: str) -> str:
    """
    "ValueError" => "Value Error", "HTTPException" => "HTTP Exception"
    """
    return _WORD_BOUNDARY.sub(" ", class_name)


def json_pointer(path: str) -> str:
    return "/" + path.replace(".", "/")


def error_object(title, details, pointer=None) -> JSONAPIErrorObject:
    result: JSONAPIErrorObject = {"title": title, "details": details}
    if pointer is not None:
        result["source"] = {"pointer": pointer}
    return result


def validation_error_document(exc: ValidationError) -> JSONAPIErrorDocument:
    if not exc.field_errors:
        return {"errors": [error_object(exc.title, exc.message)]}
    return {"errors": [error_object(exc.title, message, json_pointer(path)) for path, message in exc.field_errors]}


def error_document(exc: Exception):
    """
    :return: (error document, http status)
    """
    if isinstance(exc, ValidationError):
        return validation_error_document(exc), exc.status_code

    # database faults (eg. integrity errors) are reported as missing resources
    if isinstance(exc, (NotFound, NoResultFound, DBAPIError)):
        return {"errors": [error_object(NotFoundError.title, NOT_FOUND_DETAILS)]}, HTTPStatus.NOT_FOUND.value

    if isinstance(exc, UnAuthenticatedError):
        return {"errors": [error_object(exc.title, exc.message)]}, int(get_config("UNAUTHENTICATED_STATUS"))

    if isinstance(exc, JsonapiError):
        title = exc.title or humanize(type(exc).__name__)
        return {"errors": [error_object(title, exc.message)]}, exc.status_code

    if isinstance(exc, HTTPException):
        return {"errors": [error_object(humanize(type(exc).__name__), exc.description)]}, exc.code or 500

    return {"errors": [error_object(humanize(type(exc).__name__), str(exc))]}, HTTPStatus.INTERNAL_SERVER_ERROR.value


REDACTED = "[redacted]"
REDACTED_MEMBERS = frozenset(["password", "remember_token"])


def redact(value):
    """
    Replace the values of the REDACTED_MEMBERS in a decoded json payload
    """
    if isinstance(value, dict):
        return {key: REDACTED if key in REDACTED_MEMBERS else redact(item) for key, item in value.items()}
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def request_payload_for_log() -> str:
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        return f"<{request.content_length or 0} bytes, not json>"
    return json.dumps(redact(payload))


def expects_json() -> bool:
    accept = request.headers.get("Accept", "")
    return "/json" in accept or "+json" in accept


def jsonapi_error_response(exc: Exception):
    """
    Flask errorhandler for all exceptions
    """
    if isinstance(exc, UnAuthenticatedError) and not expects_json():
        return redirect(get_config("LOGIN_URL"))

    document, status = error_document(exc)
    if isinstance(exc, DBAPIError):
        bookstore.log.warning("Database error: %s", exc.orig)
    if status >= 500:
        bookstore.log.exception(exc)
    else:
        bookstore.log.warning("%s %s: %s %s", request.method, request.path, status, document["errors"][0]["details"])
        if is_debug():
            bookstore.log.debug("Request payload: %s", request_payload_for_log())
    return make_response(jsonify(document), status)


def jsonapi_response(document=None, status=HTTPStatus.OK, headers=None):
    """
    :param document: jsonapi document, None for an empty body
    :param status: http status
    :param headers: additional response headers
    """
    if document is None:
        response = current_app.response_class(status=status)
    else:
        response = make_response(jsonify(document), status)
    for name, value in (headers or {}).items():
        response.headers[name] = value
    return response
