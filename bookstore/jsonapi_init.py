import logging
import os
import sys
from flask import Flask
from .json_encoder import JSONAPIJSONProvider
from .jsonapi_formatting import jsonapi_error_response
from .negotiation import ensure_jsonapi_headers, force_jsonapi_content_type
from .request import JSONAPIRequest
from .response import JSONAPIResponse


class JSONAPI:
    """This class configures the Flask application to speak jsonapi:
    - request and response classes, json provider
    - content negotiation hooks
    - the errorhandler that formats exceptions as jsonapi error documents
    """

    LOGLEVEL = logging.WARNING

    def __init__(self, app: Flask = None, app_db=None) -> None:
        self.app = app
        if app is not None:
            self.init_app(app, app_db)

    def init_app(self, app: Flask, app_db=None) -> None:
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if app_db is None:
            app_db = app.extensions["sqlalchemy"]
        self.db = app_db

        app.request_class = JSONAPIRequest
        app.response_class = JSONAPIResponse
        app.json = JSONAPIJSONProvider(app)
        app.url_map.strict_slashes = False

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        app.before_request(ensure_jsonapi_headers)
        app.after_request(force_jsonapi_content_type)
        app.register_error_handler(Exception, jsonapi_error_response)

        # pylint: disable=unused-argument,unused-variable
        @app.teardown_appcontext
        def shutdown_session(exception=None):
            """cfr. http://flask.pocoo.org/docs/0.12/patterns/sqlalchemy/"""
            self.db.session.remove()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        """
        log = logging.getLogger(__name__.split(".")[0])
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# logging initialization
#
try:
    DEBUG = os.getenv("DEBUG", JSONAPI.LOGLEVEL)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = JSONAPI.init_logging(LOGLEVEL)
