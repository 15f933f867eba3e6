# Response class
from flask import Response
from .config import get_config


class JSONAPIResponse(Response):
    """
    Response class, the configured JSONAPI_MEDIA_TYPE is the default mimetype
    """

    @property
    def default_mimetype(self):
        return get_config("JSONAPI_MEDIA_TYPE")
