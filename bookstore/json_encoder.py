# jsonapi document encoding

import datetime
import decimal
from uuid import UUID
from flask.json.provider import DefaultJSONProvider
import bookstore
from .config import get_config


def jsonapi_default(obj):
    """
    encode the attribute values that json doesn't support
    :param obj: object to be encoded
    :return: encoded/serialized object
    """
    if isinstance(obj, datetime.datetime):
        # naive datetimes are stored in UTC
        if obj.tzinfo is not None:
            obj = obj.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return obj.isoformat(timespec="microseconds") + "Z"
    if isinstance(obj, (datetime.date, datetime.time)):
        return obj.isoformat()
    if isinstance(obj, datetime.timedelta):
        return str(obj)
    if isinstance(obj, set):
        return list(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, decimal.Decimal):
        return float(obj)
    if isinstance(obj, bytes):
        return obj.hex()

    bookstore.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class JSONAPIJSONProvider(DefaultJSONProvider):
    """
    Flask JSON encoding, members are kept in the order they were added to the document
    """

    sort_keys = False
    default = staticmethod(jsonapi_default)

    @property
    def mimetype(self):
        return get_config("JSONAPI_MEDIA_TYPE")
