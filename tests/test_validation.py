import pytest

from bookstore.errors import ValidationError
from bookstore.resources import build_registry
from bookstore.validation import create_document_model, field_name, update_document_model, validate

REGISTRY = build_registry()


@pytest.mark.parametrize(
    "path, name",
    [("data.attributes.publication_year", "data.attributes.publication year"), ("data", "data"), ("data.0.id", "data.0.id")],
)
def test_field_name(path, name):
    assert field_name(path) == name


def test_valid_create_document():
    document = validate(create_document_model(REGISTRY["authors"]), {"data": {"type": "authors", "attributes": {"name": "x"}}})
    assert document.data.attributes.model_dump() == {"name": "x"}
    assert document.data.relationships is None


def test_missing_data():
    with pytest.raises(ValidationError) as exc_info:
        validate(create_document_model(REGISTRY["authors"]), {})
    assert exc_info.value.field_errors == [("data", "The data field is required.")]


def test_create_requires_all_attributes():
    with pytest.raises(ValidationError) as exc_info:
        validate(create_document_model(REGISTRY["comments"]), {"data": {"type": "comments", "attributes": {}}})
    assert exc_info.value.field_errors == [("data.attributes.message", "The data.attributes.message field is required.")]


def test_update_requires_id_and_attributes_are_optional():
    model = update_document_model(REGISTRY["books"])
    with pytest.raises(ValidationError) as exc_info:
        validate(model, {"data": {"type": "books", "attributes": {}}})
    assert exc_info.value.field_errors == [("data.id", "The data.id field is required.")]

    document = validate(model, {"data": {"id": "1", "type": "books", "attributes": {"title": "x"}}})
    assert document.data.attributes.model_dump(exclude_unset=True) == {"title": "x"}


def test_update_attributes_must_be_strings():
    with pytest.raises(ValidationError) as exc_info:
        validate(update_document_model(REGISTRY["books"]), {"data": {"id": "1", "type": "books", "attributes": {"title": None}}})
    assert exc_info.value.field_errors == [("data.attributes.title", "The data.attributes.title must be a string.")]


def test_id_must_be_a_string():
    with pytest.raises(ValidationError) as exc_info:
        validate(update_document_model(REGISTRY["authors"]), {"data": {"id": 1, "type": "authors", "attributes": {}}})
    assert exc_info.value.field_errors == [("data.id", "The data.id must be a string.")]
