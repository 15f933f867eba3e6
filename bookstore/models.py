"""
    models.py: the bookstore database models

    authors <-> books (many-to-many, through author_book)
    books -> comments, users -> comments (one-to-many)
"""
import uuid
from datetime import datetime, timezone
from werkzeug.security import check_password_hash, generate_password_hash
from .db import DB


def utcnow():
    return datetime.now(timezone.utc)


author_book = DB.Table(
    "author_book",
    DB.Column("author_id", DB.Integer, DB.ForeignKey("authors.id", ondelete="CASCADE"), primary_key=True),
    DB.Column("book_id", DB.Integer, DB.ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    DB.Column("created_at", DB.DateTime(timezone=True), default=utcnow),
)


class TimestampMixin:
    created_at = DB.Column(DB.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = DB.Column(DB.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Author(TimestampMixin, DB.Model):
    __tablename__ = "authors"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String(255), nullable=False)
    books = DB.relationship("Book", secondary=author_book, back_populates="authors", order_by="Book.id")


class Book(TimestampMixin, DB.Model):
    __tablename__ = "books"
    id = DB.Column(DB.Integer, primary_key=True)
    title = DB.Column(DB.String(255), nullable=False)
    description = DB.Column(DB.Text, nullable=False)
    publication_year = DB.Column(DB.String(4), nullable=False)
    authors = DB.relationship("Author", secondary=author_book, back_populates="books", order_by="Author.id")
    comments = DB.relationship("Comment", back_populates="book", order_by="Comment.id")


class Comment(TimestampMixin, DB.Model):
    __tablename__ = "comments"
    id = DB.Column(DB.Integer, primary_key=True)
    message = DB.Column(DB.Text, nullable=False)
    user_id = DB.Column(DB.String(36), DB.ForeignKey("users.id"), nullable=True)
    book_id = DB.Column(DB.Integer, DB.ForeignKey("books.id"), nullable=True)
    user = DB.relationship("User", back_populates="comments")
    book = DB.relationship("Book", back_populates="comments")


class User(TimestampMixin, DB.Model):
    """
    description: api user, the id is a uuid string and the password is stored as a hash
    """

    __tablename__ = "users"
    id = DB.Column(DB.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = DB.Column(DB.String(255), nullable=False)
    email = DB.Column(DB.String(255), nullable=False, unique=True)
    password = DB.Column(DB.String(255), nullable=False)
    role = DB.Column(DB.String(32), nullable=False, default="user")
    remember_token = DB.Column(DB.String(100), nullable=True)
    comments = DB.relationship("Comment", back_populates="user", order_by="Comment.id")
    tokens = DB.relationship("AccessToken", back_populates="user", cascade="all, delete-orphan")

    def set_password(self, password):
        self.password = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password, password)


class AccessToken(DB.Model):
    """
    Bearer tokens, only the sha256 digest of the token is stored
    """

    __tablename__ = "access_tokens"
    id = DB.Column(DB.Integer, primary_key=True)
    user_id = DB.Column(DB.String(36), DB.ForeignKey("users.id"), nullable=False)
    name = DB.Column(DB.String(255), nullable=False)
    token_hash = DB.Column(DB.String(64), nullable=False, unique=True, index=True)
    revoked = DB.Column(DB.Boolean, nullable=False, default=False)
    created_at = DB.Column(DB.DateTime(timezone=True), default=utcnow, nullable=False)
    user = DB.relationship("User", back_populates="tokens")
