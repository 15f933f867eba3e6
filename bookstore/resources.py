"""
    resources.py: the bookstore resource types

    type       relationships
    authors    books (to-many)
    books      authors (to-many), comments (to-many)
    comments   users (to-one), books (to-one)
    users      comments (to-many)
"""
from pydantic import StrictStr
from werkzeug.security import generate_password_hash
from .auth import CREATE, DELETE, UPDATE, UPDATE_RELATIONSHIP
from .config import BookstoreSettings
from .models import Author, Book, Comment, User
from .resource_config import ResourceConfig, ResourceRegistry, ToMany, ToOne
from .validation import AttributesModel

TIMESTAMPS = ("created_at", "updated_at")


class AuthorAttributes(AttributesModel):
    name: StrictStr


class AuthorUpdateAttributes(AttributesModel):
    name: StrictStr = None


class BookAttributes(AttributesModel):
    title: StrictStr
    description: StrictStr
    publication_year: StrictStr


class BookUpdateAttributes(AttributesModel):
    title: StrictStr = None
    description: StrictStr = None
    publication_year: StrictStr = None


class CommentAttributes(AttributesModel):
    message: StrictStr


class CommentUpdateAttributes(AttributesModel):
    message: StrictStr = None


class UserAttributes(AttributesModel):
    name: StrictStr
    email: StrictStr
    password: StrictStr


class UserUpdateAttributes(AttributesModel):
    name: StrictStr = None
    email: StrictStr = None
    password: StrictStr = None


def hash_password(attributes):
    if "password" in attributes:
        attributes = dict(attributes, password=generate_password_hash(attributes["password"]))
    return attributes


RESOURCES = (
    ResourceConfig(
        type="authors",
        model=Author,
        attributes=("name",) + TIMESTAMPS,
        relationships=(ToMany("books", "books"),),
        create_attributes=AuthorAttributes,
        update_attributes=AuthorUpdateAttributes,
    ),
    ResourceConfig(
        type="books",
        model=Book,
        attributes=("title", "description", "publication_year") + TIMESTAMPS,
        relationships=(ToMany("authors", "authors"), ToMany("comments", "comments")),
        create_attributes=BookAttributes,
        update_attributes=BookUpdateAttributes,
    ),
    ResourceConfig(
        type="comments",
        model=Comment,
        attributes=("message",) + TIMESTAMPS,
        relationships=(ToOne("users", "users", attribute="user"), ToOne("books", "books", attribute="book")),
        create_attributes=CommentAttributes,
        update_attributes=CommentUpdateAttributes,
    ),
    ResourceConfig(
        type="users",
        model=User,
        attributes=("name", "email", "role") + TIMESTAMPS,
        relationships=(ToMany("comments", "comments"),),
        hidden=frozenset(["password", "remember_token"]),
        create_attributes=UserAttributes,
        update_attributes=UserUpdateAttributes,
        prepare=hash_password,
    ),
)


def policy_rules(admin_role=BookstoreSettings.ADMIN_ROLE):
    """
    :param admin_role: role allowed to write books
    :return: Policy rules, books writes are admin-only
    """
    admin_only = frozenset([admin_role])
    return {
        "books": {
            CREATE: admin_only,
            UPDATE: admin_only,
            DELETE: admin_only,
            UPDATE_RELATIONSHIP: admin_only,
        },
    }


def build_registry(resources=RESOURCES):
    return ResourceRegistry(resources)
