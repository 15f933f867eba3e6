# flake8: noqa: F401
#
from .jsonapi_init import JSONAPI, log
from .db import DB
from .errors import (
    JsonapiError,
    ValidationError,
    GenericError,
    UnAuthenticatedError,
    UnAuthorizedError,
    NotFoundError,
)
from .resource_config import ResourceConfig, ResourceRegistry, ToMany, ToOne
from .api import BookstoreAPI
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "BookstoreAPI",
    "JSONAPI",
    "DB",
    "log",
    # resources:
    "ResourceConfig",
    "ResourceRegistry",
    "ToOne",
    "ToMany",
    # Errors:
    "JsonapiError",
    "ValidationError",
    "GenericError",
    "UnAuthenticatedError",
    "UnAuthorizedError",
    "NotFoundError",
)
