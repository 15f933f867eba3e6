"""
    auth.py: bearer token authentication (flask_httpauth) and the role based authorization policy
"""
import hashlib
import secrets
from flask_httpauth import HTTPTokenAuth
from sqlalchemy import select
import bookstore
from .db import DB
from .errors import UnAuthenticatedError, UnAuthorizedError
from .models import AccessToken

auth = HTTPTokenAuth(scheme="Bearer")

# actions checked by the policy
VIEW = "view"
CREATE = "create"
UPDATE = "update"
DELETE = "delete"
UPDATE_RELATIONSHIP = "update_relationship"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def issue_token(user, name="api"):
    """
    Create an access token for `user`
    :return: the plain text token, it can't be recovered afterwards
    """
    token = secrets.token_urlsafe(40)
    DB.session.add(AccessToken(user=user, name=name, token_hash=hash_token(token)))
    DB.session.flush()
    return token


@auth.verify_token
def verify_token(token):
    if not token:
        return None
    stmt = select(AccessToken).where(AccessToken.token_hash == hash_token(token), AccessToken.revoked.is_(False))
    access_token = DB.session.execute(stmt).scalars().first()
    if access_token is None:
        bookstore.log.info("Invalid access token")
        return None
    return access_token.user


@auth.error_handler
def auth_error(status):
    raise UnAuthenticatedError()


class Policy:
    """
    Maps resource type => action => roles allowed to perform the action.
    Actions without a rule are allowed for every authenticated user
    """

    def __init__(self, rules=None):
        self.rules = {type_name: dict(actions) for type_name, actions in (rules or {}).items()}

    def is_allowed(self, actor, action, type_name) -> bool:
        if actor is None:
            return False
        roles = self.rules.get(type_name, {}).get(action)
        if roles is None:
            return True
        return actor.role in roles

    def authorize(self, actor, action, type_name):
        """
        :raise UnAuthorizedError: when `actor` may not perform `action` on `type_name`
        """
        if not self.is_allowed(actor, action, type_name):
            bookstore.log.info("%s is not allowed to %s %s", getattr(actor, "id", None), action, type_name)
            raise UnAuthorizedError()
