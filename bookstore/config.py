# Configuration settings should be set in app.config
# get_config falls back to the environment and to the BookstoreSettings defaults
import os
import logging
from flask import current_app
import bookstore
from typing import Any, Optional


class BookstoreSettings:
    """
    Default configuration, every setting can be overridden in app.config or in the environment
    """

    API_PREFIX = "/api/v1"
    JSONAPI_MEDIA_TYPE = "application/vnd.api+json"
    # status returned for missing or invalid credentials
    UNAUTHENTICATED_STATUS = 403
    # non-json clients are redirected here when they're not authenticated
    LOGIN_URL = "/login"
    ADMIN_ROLE = "admin"
    DEFAULT_ROLE = "user"


# The following URL formatters determine the urls of the API resources
#
# prefix is the api prefix (eg. /api/v1), type is the resource type (eg. books)
# param is the singular resource type, used as the url path parameter name (eg. <book>)
# => /api/v1/books/<book>/relationships/authors
RESOURCE_URL_FMT = "{prefix}/{type}"
INSTANCE_URL_FMT = RESOURCE_URL_FMT + "/<{param}>"
RELATIONSHIP_URL_FMT = INSTANCE_URL_FMT + "/relationships/{rel_name}"
RELATED_URL_FMT = INSTANCE_URL_FMT + "/{rel_name}"


def get_config(option: str) -> Optional[Any]:
    """Retrieve a configuration parameter
    :param option: configuration parameter
    :return: configuration value
    """
    try:
        return current_app.config[option]
    except (KeyError, RuntimeError):
        pass

    default = getattr(BookstoreSettings, option, None)
    result = os.environ.get(option)
    if result is None:
        return default
    if isinstance(default, int):
        return int(result)
    return result


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    """
    return bookstore.log.getEffectiveLevel() < logging.INFO
