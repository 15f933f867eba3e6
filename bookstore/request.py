"""
http://jsonapi.org/format/#content-negotiation-servers

The request class parses the jsonapi-related request arguments:
- query args: include
- body: a valid json object

The Accept and Content-Type headers are checked by the negotiation hooks before the request is dispatched
"""
from flask import Request
from .errors import ValidationError

INVALID_JSON = "Invalid JSON payload"


class JSONAPIRequest(Request):
    @property
    def includes(self):
        """
        :return: the relationship names requested with the "include" query argument, eg. ?include=authors,comments
        """
        include = self.args.get("include", "")
        return tuple(dict.fromkeys(name.strip() for name in include.split(",") if name.strip()))

    def on_json_loading_failed(self, e):
        raise ValidationError(INVALID_JSON, status_code=400)

    def get_jsonapi_payload(self):
        """
        :return: the decoded request body
        :raise ValidationError: when the body isn't a json object
        """
        payload = self.get_json(force=True, silent=False)
        if not isinstance(payload, dict):
            raise ValidationError(INVALID_JSON, status_code=400)
        return payload
