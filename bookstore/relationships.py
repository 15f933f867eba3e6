"""
    relationships: validates relationship update requests and applies them

    to-many: the linkage array replaces the relationship members (sync)
    to-one: the identifier (or null) replaces the related entity (associate/dissociate)

    All target ids are resolved before anything is changed: when one of them
    doesn't exist a NotFoundError is raised and the relationship is left untouched.
"""
import bookstore
from .errors import ValidationError
from .resource_config import ToMany, ToOne
from .validation import relationship_document_model, validate


class RelationshipMutator:
    def __init__(self, registry, repository):
        self.registry = registry
        self.repository = repository

    def _descriptor(self, entity, name, cardinality):
        config = self.registry.for_entity(entity)
        if not config.has_relationship(name):
            raise ValidationError(f"Invalid relationship '{name}'", status_code=400)
        descriptor = config.relationship(name)
        if not isinstance(descriptor, cardinality):
            raise ValidationError(f"'{name}' is a {descriptor.cardinality} relationship")
        return descriptor

    def sync(self, entity, name, ids):
        """
        Make the to-many relationship `name` hold exactly the entities with `ids`
        :param ids: iterable of ids, duplicates are ignored
        """
        descriptor = self._descriptor(entity, name, ToMany)
        unique_ids = list(dict.fromkeys(str(object_id) for object_id in ids))
        targets = self.repository.find_many(descriptor.related_type, unique_ids)
        bookstore.log.debug("Syncing %s.%s to %s", type(entity).__name__, name, unique_ids)
        self.repository.sync_relationship(entity, descriptor.accessor, targets)

    def associate(self, entity, name, target_id):
        """
        Link the to-one relationship `name` to the entity with `target_id`,
        `target_id` None dissociates the current entity
        """
        descriptor = self._descriptor(entity, name, ToOne)
        target = None
        if target_id is not None:
            target = self.repository.find(descriptor.related_type, target_id)
        self.repository.set_related(entity, descriptor.accessor, target)

    def dissociate(self, entity, name):
        self.associate(entity, name, None)

    def replace(self, entity, name, payload, prefix=()):
        """
        Apply a relationship document, {"data": ...}, to the relationship `name`
        :param prefix: path of the document in the request, used in the error pointers
        """
        config = self.registry.for_entity(entity)
        if not config.has_relationship(name):
            path = ".".join(prefix) or "data"
            raise ValidationError.for_field(path, f"The selected {path} is invalid.")
        descriptor = config.relationship(name)
        document = validate(relationship_document_model(descriptor), payload, prefix)
        if isinstance(descriptor, ToMany):
            self.sync(entity, name, [identifier.id for identifier in document.data])
        elif document.data is None:
            self.dissociate(entity, name)
        else:
            self.associate(entity, name, document.data.id)
