"""
    codec: serialization of entities to jsonapi documents

    - resource identifiers: {"id": ..., "type": ...}
    - resource objects: identifier + attributes + relationships (links and, when loaded, linkage data)
    - documents: primary data plus the deduplicated "included" resources
"""
from typing import Iterable, List, Optional
from .accessor import UNLOADED, EntityAccessor
from .resource_config import LinkBuilder, RelationshipDescriptor, ToMany
from .jsonapi_types import JSONAPIDocument, JSONAPIResourceIdentifier, JSONAPIResourceObject


class JSONAPIEncoder:
    """
    Encodes entities, the entity fields are read through the accessor
    and the links are built with the LinkBuilder
    """

    def __init__(self, accessor: EntityAccessor, links: Optional[LinkBuilder] = None):
        self.accessor = accessor
        self.registry = accessor.registry
        self.links = links or LinkBuilder()

    # Identifiers

    def to_identifier(self, entity) -> JSONAPIResourceIdentifier:
        return {"id": self.accessor.id(entity), "type": self.accessor.type(entity)}

    def to_identifier_collection(self, entities: Iterable) -> List[JSONAPIResourceIdentifier]:
        return [self.to_identifier(entity) for entity in entities]

    def to_linkage(self, descriptor: RelationshipDescriptor, related):
        """
        :return: linkage data of a relationship: a list of identifiers for to-many relationships,
                 an identifier or None for to-one relationships
        """
        if isinstance(descriptor, ToMany):
            return self.to_identifier_collection(related or [])
        if related is None:
            return None
        return self.to_identifier(related)

    # Resources

    def to_resource(self, entity) -> JSONAPIResourceObject:
        config = self.registry[self.accessor.type(entity)]
        entity_id = self.accessor.id(entity)
        resource: JSONAPIResourceObject = {
            "id": entity_id,
            "type": config.type,
            "attributes": self.accessor.attributes(entity),
        }

        relationships = {}
        for descriptor in config.relationships:
            relationship = {
                "links": {
                    "self": self.links.relationship_url(config, entity_id, descriptor.name),
                    "related": self.links.related_url(config, entity_id, descriptor.name),
                }
            }
            related = self.accessor.relationship(entity, descriptor.name)
            if related is not UNLOADED:
                relationship["data"] = self.to_linkage(descriptor, related)
            relationships[descriptor.name] = relationship

        if relationships:
            resource["relationships"] = relationships
        return resource

    def to_resource_collection(self, entities: Iterable) -> List[JSONAPIResourceObject]:
        return [self.to_resource(entity) for entity in entities]

    def included(self, entity) -> List[JSONAPIResourceObject]:
        """
        :return: the resources of the loaded relationships of `entity`, one level deep
        """
        config = self.registry[self.accessor.type(entity)]
        result = []
        for descriptor in config.relationships:
            related = self.accessor.relationship(entity, descriptor.name)
            if related is UNLOADED or related is None:
                continue
            members = related if isinstance(descriptor, ToMany) else [related]
            result.extend(self.to_resource(member) for member in members)
        return result

    @staticmethod
    def merge_included(*resource_lists) -> List[JSONAPIResourceObject]:
        """
        Union of the resource lists keyed by (type, id), the first occurrence wins
        """
        seen = set()
        result = []
        for resources in resource_lists:
            for resource in resources:
                key = (resource["type"], resource["id"])
                if key in seen:
                    continue
                seen.add(key)
                result.append(resource)
        return result

    # Documents

    def to_resource_document(self, entity) -> JSONAPIDocument:
        document: JSONAPIDocument = {"data": self.to_resource(entity)}
        included = self.merge_included(self.included(entity))
        if included:
            document["included"] = included
        return document

    def to_collection_document(self, entities: Iterable) -> JSONAPIDocument:
        entities = list(entities)
        document: JSONAPIDocument = {"data": self.to_resource_collection(entities)}
        included = self.merge_included(*(self.included(entity) for entity in entities))
        if included:
            document["included"] = included
        return document

    def to_identifier_document(self, descriptor: RelationshipDescriptor, related) -> JSONAPIDocument:
        return {"data": self.to_linkage(descriptor, related)}
