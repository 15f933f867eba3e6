from typing import Any, TypedDict, Union


class JSONAPIResourceIdentifier(TypedDict):
    id: str
    type: str


class JSONAPIRelationshipLinks(TypedDict):
    self: str
    related: str


class JSONAPIRelationship(TypedDict, total=False):
    links: JSONAPIRelationshipLinks
    data: Union[JSONAPIResourceIdentifier, list[JSONAPIResourceIdentifier], None]


class JSONAPIResourceObject(JSONAPIResourceIdentifier, total=False):
    attributes: dict[str, Any]
    relationships: dict[str, JSONAPIRelationship]


JSONAPIData = Union[JSONAPIResourceObject, list[JSONAPIResourceObject], JSONAPIResourceIdentifier, None]


class JSONAPIDocument(TypedDict, total=False):
    data: JSONAPIData
    included: list[JSONAPIResourceObject]


class JSONAPIErrorSource(TypedDict):
    pointer: str


class JSONAPIErrorObject(TypedDict, total=False):
    title: str
    details: str
    source: JSONAPIErrorSource


class JSONAPIErrorDocument(TypedDict):
    errors: list[JSONAPIErrorObject]
