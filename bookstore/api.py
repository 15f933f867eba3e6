"""
    api.py: BookstoreAPI exposes the configured resource types as flask url rules
"""
import bookstore
from .accessor import ModelAccessor
from .codec import JSONAPIEncoder
from .config import INSTANCE_URL_FMT, RELATED_URL_FMT, RELATIONSHIP_URL_FMT, RESOURCE_URL_FMT, BookstoreSettings
from .jsonapi import CurrentUserView, JSONAPIRelatedView, JSONAPIRelationshipView, JSONAPIResourceView
from .jsonapi_init import JSONAPI
from .persistence import Repository
from .relationships import RelationshipMutator
from .resource_config import LinkBuilder
from .service import JSONAPIService


class BookstoreAPI:
    """
    :param app: Flask app
    :param registry: ResourceRegistry with the types to expose
    :param policy: authorization Policy
    :param prefix: url prefix, defaults to the API_PREFIX config
    """

    def __init__(self, app, registry, policy, prefix=None, app_db=None):
        self.app = app
        self.registry = registry
        self.policy = policy
        self.prefix = prefix if prefix is not None else app.config.get("API_PREFIX", BookstoreSettings.API_PREFIX)
        self.db = app_db or bookstore.DB
        self.accessor = ModelAccessor(registry)
        self.jsonapi = JSONAPI(app, self.db)
        app.extensions["bookstore"] = self

    def create_service(self, url_root=""):
        """
        :param url_root: scheme and host the links are built with
        :return: JSONAPIService for the current session
        """
        repository = Repository(self.registry, self.db.session)
        encoder = JSONAPIEncoder(self.accessor, LinkBuilder(url_root, self.prefix))
        return JSONAPIService(self.registry, repository, encoder, RelationshipMutator(self.registry, repository))

    def expose_all(self):
        for config in self.registry.values():
            self.expose_object(config)
        if "users" in self.registry:
            self.expose_current_user()

    def expose_object(self, config):
        """
        Create the url rules for `config`:
        /T, /T/<t>, /T/<t>/relationships/R and /T/<t>/R for every relationship R
        """
        links = LinkBuilder(prefix=self.prefix)
        api_class = type(f"{config.type.title()}_API", (JSONAPIResourceView,), {"config": config})
        view = api_class.as_view(config.type)
        collection_url = links.rule(RESOURCE_URL_FMT, config)
        instance_url = links.rule(INSTANCE_URL_FMT, config)
        bookstore.log.info(f"Exposing {config.type} on {collection_url}")
        self.app.add_url_rule(collection_url, view_func=view, methods=["GET", "POST"])
        self.app.add_url_rule(instance_url, view_func=view, methods=["GET", "PATCH", "DELETE"])

        for relationship in config.relationships:
            self.expose_relationship(config, relationship, links)

    def expose_relationship(self, config, relationship, links):
        API_CLASSNAME_FMT = "{}_X_{}_API"
        properties = {"config": config, "rel_name": relationship.name}
        rel_class = type(
            API_CLASSNAME_FMT.format(config.type.title(), relationship.name), (JSONAPIRelationshipView,), properties
        )
        rel_url = links.rule(RELATIONSHIP_URL_FMT, config, relationship.name)
        self.app.add_url_rule(
            rel_url, view_func=rel_class.as_view(f"{config.type}_relationships_{relationship.name}"), methods=["GET", "PATCH"]
        )

        related_class = type(
            API_CLASSNAME_FMT.format(config.type.title(), relationship.name) + "_Related", (JSONAPIRelatedView,), properties
        )
        related_url = links.rule(RELATED_URL_FMT, config, relationship.name)
        self.app.add_url_rule(related_url, view_func=related_class.as_view(f"{config.type}_{relationship.name}"), methods=["GET"])
        bookstore.log.debug(f"Exposing relationship {relationship.name} on {rel_url} and {related_url}")

    def expose_current_user(self):
        view = type("Current_User_API", (CurrentUserView,), {"config": self.registry["users"]}).as_view("users_current")
        self.app.add_url_rule(f"{self.prefix}/users/current", view_func=view, methods=["GET"])
