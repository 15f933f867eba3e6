# Entity access
#
# The codecs never read model instances directly, they go through an EntityAccessor.
# ModelAccessor reads SQLAlchemy instances without triggering lazy loads:
# a relationship that hasn't been loaded is reported as UNLOADED so the
# serializer can leave out its "data" member.
from typing import Any, Protocol
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.exc import NoInspectionAvailable
from .resource_config import ResourceRegistry, ToMany


class _Unloaded:
    """Marker for relationships that were not fetched"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNLOADED"


UNLOADED = _Unloaded()


class EntityAccessor(Protocol):
    registry: ResourceRegistry

    def id(self, entity: Any) -> str:
        ...

    def type(self, entity: Any) -> str:
        ...

    def attributes(self, entity: Any) -> dict:
        ...

    def relationship(self, entity: Any, name: str) -> Any:
        ...


class ModelAccessor:
    """
    EntityAccessor for the mapped models, the registry tells which
    attributes and relationships are exposed for the model class
    """

    def __init__(self, registry: ResourceRegistry):
        self.registry = registry

    def id(self, entity) -> str:
        return str(entity.id)

    def type(self, entity) -> str:
        return self.registry.for_entity(entity).type

    def attributes(self, entity) -> dict:
        config = self.registry.for_entity(entity)
        return {name: getattr(entity, name) for name in config.attributes if name not in config.hidden}

    def is_loaded(self, entity, attribute: str) -> bool:
        try:
            state = sqla_inspect(entity)
        except NoInspectionAvailable:
            return hasattr(entity, attribute)
        return attribute not in state.unloaded

    def relationship(self, entity, name: str):
        """
        :return: UNLOADED, None, the related entity (to-one) or a list of related entities (to-many)
        """
        descriptor = self.registry.for_entity(entity).relationship(name)
        if not self.is_loaded(entity, descriptor.accessor):
            return UNLOADED
        related = getattr(entity, descriptor.accessor)
        if isinstance(descriptor, ToMany):
            return list(related or [])
        return related
