"""
    service: the jsonapi operations behind the http views

    The service works on entities and decoded payloads and returns jsonapi documents,
    it doesn't know about flask. Authorization is done by the views.
"""
import bookstore
from .errors import ValidationError
from .resource_config import ToMany
from .validation import create_document_model, update_document_model, validate


class JSONAPIService:
    def __init__(self, registry, repository, encoder, mutator):
        self.registry = registry
        self.repository = repository
        self.encoder = encoder
        self.mutator = mutator
        self.accessor = encoder.accessor
        self.links = encoder.links

    def include_attributes(self, type_name, include=()):
        """
        :param include: relationship names from the "include" query argument
        :return: the model attributes of the relationships
        :raise ValidationError: for unknown relationship names
        """
        config = self.registry[type_name]
        result = []
        for name in include:
            if not config.has_relationship(name):
                raise ValidationError(f"Invalid relationship '{name}' in include", status_code=400)
            result.append(config.relationship(name).accessor)
        return tuple(result)

    def find(self, type_name, object_id, include=()):
        return self.repository.find(type_name, object_id, include=self.include_attributes(type_name, include))

    # Resources

    def fetch_resource(self, entity):
        return self.encoder.to_resource_document(entity)

    def fetch_resources(self, type_name, include=()):
        entities = self.repository.all(type_name, include=self.include_attributes(type_name, include))
        return self.encoder.to_collection_document(entities)

    def create_resource(self, type_name, payload):
        """
        :return: (resource document, url of the new resource)
        """
        config = self.registry[type_name]
        document = validate(create_document_model(config), payload)
        attributes = document.data.attributes.model_dump()
        if config.prepare is not None:
            attributes = config.prepare(attributes)
        entity = self.repository.create(type_name, attributes)
        self._apply_relationships(entity, document.data.relationships)
        bookstore.log.info("Created %s %s", type_name, self.accessor.id(entity))
        location = self.links.instance_url(config, self.accessor.id(entity))
        return self.encoder.to_resource_document(entity), location

    def update_resource(self, entity, payload):
        config = self.registry.for_entity(entity)
        document = validate(update_document_model(config), payload)
        if document.data.id != self.accessor.id(entity):
            raise ValidationError.for_field("data.id", "The data.id does not match the resource id.", status_code=409)
        attributes = document.data.attributes.model_dump(exclude_unset=True)
        if config.prepare is not None:
            attributes = config.prepare(attributes)
        self.repository.update(entity, attributes)
        self._apply_relationships(entity, document.data.relationships)
        bookstore.log.info("Updated %s %s", config.type, self.accessor.id(entity))
        return self.encoder.to_resource_document(entity)

    def delete_resource(self, entity):
        bookstore.log.info("Deleting %s %s", self.accessor.type(entity), self.accessor.id(entity))
        self.repository.delete(entity)

    def _apply_relationships(self, entity, relationships):
        for name, relationship in (relationships or {}).items():
            self.mutator.replace(entity, name, relationship, prefix=("data", "relationships", name))

    # Relationships

    def _load(self, entity, name):
        descriptor = self.registry.for_entity(entity).relationship(name)
        self.repository.load_relationship(entity, descriptor.accessor)
        return descriptor, self.accessor.relationship(entity, name)

    def fetch_relationship(self, entity, name):
        descriptor, related = self._load(entity, name)
        return self.encoder.to_identifier_document(descriptor, related)

    def fetch_related(self, entity, name):
        descriptor, related = self._load(entity, name)
        if isinstance(descriptor, ToMany):
            return self.encoder.to_collection_document(related)
        if related is None:
            return {"data": None}
        return self.encoder.to_resource_document(related)

    def update_relationship(self, entity, name, payload):
        self.mutator.replace(entity, name, payload)
        bookstore.log.info("Updated %s %s relationship %s", self.accessor.type(entity), self.accessor.id(entity), name)
