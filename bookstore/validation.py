"""
    validation: inbound jsonapi documents are validated with pydantic models
    built from the resource configs. pydantic errors are translated to
    ValidationError field errors, eg. ("data.type", "The data.type field is required.")
"""
from functools import lru_cache
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, StrictStr, create_model
from pydantic import ValidationError as PydanticValidationError
from .errors import ValidationError
from .resource_config import RelationshipDescriptor, ResourceConfig, ToMany

MESSAGES = {
    "missing": "The {field} field is required.",
    "string_type": "The {field} must be a string.",
    "literal_error": "The selected {field} is invalid.",
    "model_type": "The {field} must be an object.",
    "model_attributes_type": "The {field} must be an object.",
    "dict_type": "The {field} must be an object.",
    "list_type": "The {field} must be a list.",
}


def _model_name(type_name, suffix):
    return type_name.title().replace("_", "") + suffix


def field_name(path):
    """
    "data.attributes.publication_year" => "data.attributes.publication year"
    """
    head, _, last = path.rpartition(".")
    last = last.replace("_", " ")
    return f"{head}.{last}" if head else last


def field_errors(exc: PydanticValidationError, prefix=()):
    """
    :return: ordered (path, message) tuples, one per member path
    """
    result = []
    seen = set()
    for error in exc.errors():
        path = ".".join(str(part) for part in tuple(prefix) + tuple(error["loc"]))
        if path in seen:
            continue
        seen.add(path)
        template = MESSAGES.get(error["type"])
        if template is None:
            message = f"The {field_name(path)} is invalid: {error['msg']}."
        else:
            message = template.format(field=field_name(path))
        result.append((path, message))
    return result


def validate(model, payload, prefix=()):
    """
    :param model: pydantic model
    :param payload: decoded json payload
    :param prefix: path of the payload in the request document
    :return: model instance
    :raise ValidationError: when the payload doesn't match the model
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(field_errors=field_errors(exc, prefix)) from None


@lru_cache(maxsize=None)
def identifier_model(type_name: str):
    return create_model(
        _model_name(type_name, "Identifier"),
        __config__=ConfigDict(extra="ignore"),
        id=(StrictStr, ...),
        type=(Literal[type_name], ...),
    )


@lru_cache(maxsize=None)
def relationship_document_model(descriptor: RelationshipDescriptor):
    """
    to-many: {"data": [identifier, ...]}
    to-one: {"data": identifier | null}
    """
    identifier = identifier_model(descriptor.related_type)
    if isinstance(descriptor, ToMany):
        data = (List[identifier], ...)
    else:
        data = (Optional[identifier], ...)
    return create_model(_model_name(descriptor.name, "RelationshipDocument"), data=data)


@lru_cache(maxsize=None)
def create_document_model(config: ResourceConfig):
    data = create_model(
        _model_name(config.type, "CreateData"),
        __config__=ConfigDict(extra="ignore"),
        type=(Literal[config.type], ...),
        id=(Optional[StrictStr], None),
        attributes=(config.create_attributes, ...),
        relationships=(Optional[Dict[str, Any]], None),
    )
    return create_model(_model_name(config.type, "CreateDocument"), data=(data, ...))


@lru_cache(maxsize=None)
def update_document_model(config: ResourceConfig):
    data = create_model(
        _model_name(config.type, "UpdateData"),
        __config__=ConfigDict(extra="ignore"),
        id=(StrictStr, ...),
        type=(Literal[config.type], ...),
        attributes=(config.update_attributes, ...),
        relationships=(Optional[Dict[str, Any]], None),
    )
    return create_model(_model_name(config.type, "UpdateDocument"), data=(data, ...))


class AttributesModel(BaseModel):
    """Base class of the attribute models, unknown attributes are ignored"""

    model_config = ConfigDict(extra="ignore")
