"""
    resource_config: static description of the exposed resource types

    A ResourceConfig declares, per resource type, the model that backs it,
    the serialized attributes and the relationships. The configs are collected in a
    ResourceRegistry when the app starts and are never modified afterwards.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import quote
from typing import Any, Callable, FrozenSet, Optional, Tuple
import inflect
from .config import INSTANCE_URL_FMT, RELATED_URL_FMT, RELATIONSHIP_URL_FMT

_inflect = inflect.engine()


def singular(type_name: str) -> str:
    """
    :param type_name: plural resource type, eg. "books"
    :return: singular form, eg. "book", used for the url path parameter
    """
    return _inflect.singular_noun(type_name) or type_name


@dataclass(frozen=True)
class RelationshipDescriptor:
    """
    :param name: relationship name as exposed in the api
    :param related_type: resource type of the related entities
    :param attribute: model attribute holding the relationship, defaults to `name`
    """

    name: str
    related_type: str
    attribute: Optional[str] = None

    cardinality = None

    @property
    def accessor(self) -> str:
        return self.attribute or self.name


class ToOne(RelationshipDescriptor):
    cardinality = "to-one"


class ToMany(RelationshipDescriptor):
    cardinality = "to-many"


@dataclass(frozen=True)
class ResourceConfig:
    """
    Configuration of a single resource type

    `create_attributes` and `update_attributes` are the pydantic models the
    inbound attributes are validated against, `prepare` may transform
    validated attributes before they're written (eg. hashing a password)
    """

    type: str
    model: Any
    attributes: Tuple[str, ...]
    relationships: Tuple[RelationshipDescriptor, ...] = ()
    hidden: FrozenSet[str] = field(default_factory=frozenset)
    create_attributes: Any = None
    update_attributes: Any = None
    prepare: Optional[Callable[[dict], dict]] = None

    @property
    def singular(self) -> str:
        return singular(self.type)

    def has_relationship(self, name: str) -> bool:
        return any(rel.name == name for rel in self.relationships)

    def relationship(self, name: str) -> RelationshipDescriptor:
        for rel in self.relationships:
            if rel.name == name:
                return rel
        raise KeyError(f"'{self.type}' has no relationship '{name}'")


class ResourceRegistry(Mapping):
    """
    Immutable mapping of resource type => ResourceConfig,
    the config of an entity is looked up by its model class
    """

    def __init__(self, configs):
        self._by_type = MappingProxyType({config.type: config for config in configs})
        self._by_model = MappingProxyType({config.model: config for config in configs})

    def __getitem__(self, type_name):
        return self._by_type[type_name]

    def __iter__(self):
        return iter(self._by_type)

    def __len__(self):
        return len(self._by_type)

    def for_entity(self, entity) -> ResourceConfig:
        try:
            return self._by_model[type(entity)]
        except KeyError:
            raise KeyError(f"No resource configured for {type(entity).__name__}") from None


class LinkBuilder:
    """
    Builds both the url rules (when the routes are registered) and the
    absolute links (when resources are serialized) from the same url formatters
    """

    def __init__(self, url_root: str = "", prefix: str = ""):
        self.url_root = url_root.rstrip("/")
        self.prefix = prefix.rstrip("/")

    def rule(self, fmt: str, config: ResourceConfig, rel_name: Optional[str] = None) -> str:
        return fmt.format(prefix=self.prefix, type=config.type, param=config.singular, rel_name=rel_name)

    def url(self, fmt: str, config: ResourceConfig, object_id, rel_name: Optional[str] = None) -> str:
        rule = self.rule(fmt, config, rel_name)
        return self.url_root + rule.replace(f"<{config.singular}>", quote(str(object_id), safe=""))

    def instance_url(self, config, object_id):
        return self.url(INSTANCE_URL_FMT, config, object_id)

    def relationship_url(self, config, object_id, rel_name):
        return self.url(RELATIONSHIP_URL_FMT, config, object_id, rel_name)

    def related_url(self, config, object_id, rel_name):
        return self.url(RELATED_URL_FMT, config, object_id, rel_name)
