"""
    negotiation: jsonapi header checks, registered as before_request and after_request hooks

    - the Accept header must be exactly the jsonapi media type, otherwise 406
    - POST and PATCH requests must have exactly the jsonapi media type as Content-Type, otherwise 415
    - every response, rejections included, is sent with the jsonapi Content-Type
"""
from http import HTTPStatus
from flask import current_app, request
import bookstore
from .config import get_config

BODY_METHODS = ("POST", "PATCH")


def check_headers(method, accept, content_type):
    """
    :return: the status the request is rejected with, or None when the headers are acceptable
    """
    media_type = get_config("JSONAPI_MEDIA_TYPE")
    if accept != media_type:
        return HTTPStatus.NOT_ACCEPTABLE
    if method in BODY_METHODS and content_type != media_type:
        return HTTPStatus.UNSUPPORTED_MEDIA_TYPE
    return None


def ensure_jsonapi_headers():
    status = check_headers(request.method, request.headers.get("Accept"), request.headers.get("Content-Type"))
    if status is None:
        return None
    bookstore.log.info("Rejecting %s %s: %s", request.method, request.path, status.phrase)
    return current_app.response_class(status=status.value)


def force_jsonapi_content_type(response):
    response.headers["Content-Type"] = get_config("JSONAPI_MEDIA_TYPE")
    return response
