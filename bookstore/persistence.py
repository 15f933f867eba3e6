"""
    persistence: the repository looks up and writes the model instances behind the resource types.

    Changes are flushed, the transaction is committed (or rolled back) by http_method_decorator
    when the request finishes.
"""
from sqlalchemy import inspect as sqla_inspect, select
from sqlalchemy.orm import selectinload
import bookstore
from .errors import NotFoundError
from .resource_config import ResourceRegistry


class Repository:
    def __init__(self, registry: ResourceRegistry, session):
        self.registry = registry
        self.session = session

    @staticmethod
    def _pk_column(model):
        return sqla_inspect(model).primary_key[0]

    def _primary_key(self, type_name, object_id):
        """
        convert the url/payload id to the python type of the primary key column
        :raise NotFoundError: if the id can't be converted, no such row can exist
        """
        column = self._pk_column(self.registry[type_name].model)
        try:
            python_type = column.type.python_type
        except NotImplementedError:  # pragma: no cover
            return object_id
        try:
            return python_type(object_id)
        except (TypeError, ValueError):
            raise NotFoundError(f'Invalid "{type_name}" id "{object_id}"')

    def _select(self, type_name, include=()):
        model = self.registry[type_name].model
        stmt = select(model)
        if include:
            stmt = stmt.options(*[selectinload(getattr(model, attribute)) for attribute in include])
            stmt = stmt.execution_options(populate_existing=True)
        return model, stmt

    def find(self, type_name, object_id, include=()):
        """
        :param include: model attributes of the relationships to load along with the instance
        :raise NotFoundError:
        """
        key = self._primary_key(type_name, object_id)
        model, stmt = self._select(type_name, include)
        instance = self.session.execute(stmt.where(self._pk_column(model) == key)).scalars().first()
        if instance is None:
            raise NotFoundError(f'No "{type_name}" with id "{object_id}"')
        return instance

    def all(self, type_name, include=()):
        model, stmt = self._select(type_name, include)
        return list(self.session.execute(stmt.order_by(self._pk_column(model))).scalars())

    def find_many(self, type_name, ids):
        """
        :return: the instances for `ids`, in the same order
        :raise NotFoundError: if any of the ids doesn't exist, before anything is returned
        """
        keys = [self._primary_key(type_name, object_id) for object_id in ids]
        if not keys:
            return []
        model, stmt = self._select(type_name)
        rows = self.session.execute(stmt.where(self._pk_column(model).in_(keys))).scalars()
        found = {str(sqla_inspect(row).identity[0]): row for row in rows}
        missing = [str(key) for key in keys if str(key) not in found]
        if missing:
            raise NotFoundError(f'No "{type_name}" with id {", ".join(missing)}')
        return [found[str(key)] for key in keys]

    def create(self, type_name, attributes):
        model = self.registry[type_name].model
        instance = model(**attributes)
        self.session.add(instance)
        self.session.flush()
        bookstore.log.debug("Created %s %s", type_name, instance.id)
        return instance

    def update(self, instance, attributes):
        for name, value in attributes.items():
            setattr(instance, name, value)
        self.session.flush()
        return instance

    def delete(self, instance):
        self.session.delete(instance)
        self.session.flush()

    def load_relationship(self, instance, attribute):
        """
        Trigger the load of a relationship that wasn't fetched with the instance
        """
        getattr(instance, attribute)

    def sync_relationship(self, instance, attribute, targets):
        """
        Make the to-many relationship hold exactly `targets`:
        links to absent members are removed, new links are added, existing links are left alone
        """
        collection = getattr(instance, attribute)
        wanted = {id(target) for target in targets}
        for member in list(collection):
            if id(member) not in wanted:
                collection.remove(member)
        current = {id(member) for member in collection}
        for target in targets:
            if id(target) not in current:
                collection.append(target)
                current.add(id(target))
        self.session.flush()

    def set_related(self, instance, attribute, target):
        """
        Replace the to-one relationship, `target` None dissociates
        """
        setattr(instance, attribute, None)
        if target is not None:
            setattr(instance, attribute, target)
        self.session.flush()
