#  This file contains the jsonapi flask views:
#  - JSONAPIResourceView for the exposed collections and instances
#  - JSONAPIRelationshipView for the relationship linkage (/T/<t>/relationships/R)
#  - JSONAPIRelatedView for the related resources (/T/<t>/R)
#  - CurrentUserView for the authenticated user
#
#  The classes are subclassed with the ResourceConfig (and relationship name) by BookstoreAPI.expose_object
#
from functools import wraps
from http import HTTPStatus
from typing import Callable
from flask import current_app, request
from flask.views import MethodView
import bookstore
from .auth import CREATE, DELETE, UPDATE, UPDATE_RELATIONSHIP, VIEW, auth
from .jsonapi_formatting import jsonapi_response


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the supported jsonapi HTTP methods (get, post, patch, delete)
    - commit the database when the view succeeds
    - rollback when the view raises, the exception is formatted by the app errorhandler
    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        try:
            result = fun(*args, **kwargs)
            bookstore.DB.session.commit()
            return result
        except Exception:
            bookstore.DB.session.rollback()
            raise

    return method_wrapper


class Resource(MethodView):
    """
    Superclass for the exposed endpoints
    """

    # config: the ResourceConfig of the exposed type, set by BookstoreAPI.expose_object
    config = None
    decorators = [http_method_decorator, auth.login_required]

    @property
    def api(self):
        return current_app.extensions["bookstore"]

    @property
    def service(self):
        return self.api.create_service(request.url_root)

    def authorize(self, action, type_name=None):
        self.api.policy.authorize(auth.current_user(), action, type_name or self.config.type)

    def object_id(self, kwargs):
        return kwargs.get(self.config.singular)


class JSONAPIResourceView(Resource):
    """
    Collection (GET, POST) and instance (GET, PATCH, DELETE) endpoints
    """

    def get(self, **kwargs):
        service = self.service
        object_id = self.object_id(kwargs)
        if object_id is None:
            self.authorize(VIEW)
            document = service.fetch_resources(self.config.type, include=request.includes)
        else:
            entity = service.find(self.config.type, object_id, include=request.includes)
            self.authorize(VIEW)
            document = service.fetch_resource(entity)
        return jsonapi_response(document)

    def post(self, **kwargs):
        self.authorize(CREATE)
        document, location = self.service.create_resource(self.config.type, request.get_jsonapi_payload())
        return jsonapi_response(document, HTTPStatus.CREATED, headers={"Location": location})

    def patch(self, **kwargs):
        service = self.service
        entity = service.find(self.config.type, self.object_id(kwargs))
        self.authorize(UPDATE)
        document = service.update_resource(entity, request.get_jsonapi_payload())
        return jsonapi_response(document)

    def delete(self, **kwargs):
        service = self.service
        entity = service.find(self.config.type, self.object_id(kwargs))
        self.authorize(DELETE)
        service.delete_resource(entity)
        return jsonapi_response(status=HTTPStatus.NO_CONTENT)


class JSONAPIRelationshipView(Resource):
    """
    Relationship linkage: GET returns the identifier document, PATCH replaces the relationship
    """

    rel_name = None

    def get(self, **kwargs):
        service = self.service
        entity = service.find(self.config.type, self.object_id(kwargs))
        self.authorize(VIEW)
        return jsonapi_response(service.fetch_relationship(entity, self.rel_name))

    def patch(self, **kwargs):
        service = self.service
        entity = service.find(self.config.type, self.object_id(kwargs))
        self.authorize(UPDATE_RELATIONSHIP)
        service.update_relationship(entity, self.rel_name, request.get_jsonapi_payload())
        return jsonapi_response(status=HTTPStatus.NO_CONTENT)


class JSONAPIRelatedView(Resource):
    rel_name = None

    def get(self, **kwargs):
        service = self.service
        entity = service.find(self.config.type, self.object_id(kwargs))
        self.authorize(VIEW)
        return jsonapi_response(service.fetch_related(entity, self.rel_name))


class CurrentUserView(Resource):
    def get(self):
        self.authorize(VIEW)
        return jsonapi_response(self.service.fetch_resource(auth.current_user()))
