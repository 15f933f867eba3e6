# Exception Handlers
#
# Every fault raised by the api derives from JsonapiError.
# The exceptions are caught by the app errorhandler (jsonapi_formatting.jsonapi_error_response)
# and formatted as a jsonapi error document, for example:
# {
#     "errors": [
#         {"title": "Not Found Http Exception", "details": "Resource not found"}
#     ]
# }
#
from http import HTTPStatus
from werkzeug.exceptions import NotFound
from sqlalchemy.exc import DontWrapMixin
import bookstore

NOT_FOUND_DETAILS = "Resource not found"


class JsonapiError(Exception, DontWrapMixin):
    """
    Base class for the api exceptions,
    `title` and `status_code` end up in the error document
    """

    title = None
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""

    def __init__(self, message="", status_code=None):
        Exception.__init__(self, message)
        if message:
            self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(JsonapiError, NotFound):
    """
    This exception is raised when an item was not found,
    the message is logged but the client always receives NOT_FOUND_DETAILS
    """

    title = "Not Found Http Exception"
    status_code = HTTPStatus.NOT_FOUND.value
    message = NOT_FOUND_DETAILS

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value):
        NotFound.__init__(self, description=NOT_FOUND_DETAILS)
        JsonapiError.__init__(self, NOT_FOUND_DETAILS, status_code)
        bookstore.log.info("Not found: %s", message)


class UnAuthenticatedError(JsonapiError):
    """
    This exception is raised when the request carries no valid credentials.
    The status code is taken from the UNAUTHENTICATED_STATUS config when the error is formatted
    """

    title = "Unauthenticated"
    status_code = HTTPStatus.FORBIDDEN.value
    message = "You are not authenticated"

    def __init__(self, message="", status_code=None):
        super().__init__(message, status_code)
        bookstore.log.info("UnAuthenticatedError: %s", self.message)


class UnAuthorizedError(JsonapiError):
    """
    This exception is raised when the policy denies an action to the authenticated user
    """

    title = "Access Denied Http Exception"
    status_code = HTTPStatus.FORBIDDEN.value
    message = "This action is unauthorized."

    def __init__(self, message="", status_code=HTTPStatus.FORBIDDEN.value):
        super().__init__(message, status_code)
        bookstore.log.warning("UnAuthorizedError: %s", self.message)


class GenericError(JsonapiError):
    """
    This exception is raised when an error has been detected
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        super().__init__(message, status_code)
        bookstore.log.error("Generic Error: %s", message)


class ValidationError(JsonapiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response.

    `field_errors` holds ordered (path, message) tuples, path is a dotted member path
    such as "data.attributes.title", it is turned into a json pointer by the formatter
    """

    title = "Validation Error"
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY.value

    def __init__(self, message="", status_code=HTTPStatus.UNPROCESSABLE_ENTITY.value, field_errors=None):
        self.field_errors = list(field_errors or [])
        if not message and self.field_errors:
            message = self.field_errors[0][1]
        super().__init__(message, status_code)
        bookstore.log.warning("ValidationError: %s", message)

    @classmethod
    def for_field(cls, path, message, status_code=HTTPStatus.UNPROCESSABLE_ENTITY.value):
        return cls(message, status_code, field_errors=[(path, message)])
