"""
Per-build resolution state for attribute paths.

A `QueryContext` belongs to exactly one query build. It maps the logical attribute
names used in requests to dotted attribute paths on the root entity (for example
`genre` to `genre.name`), joins every relationship such a path crosses, and keeps
those joins in a cache keyed by the traversal prefix (`"genre"`,
`"director.agency"`, ...). Two attributes under the same relationship chain reuse
the same join, and the joins are appended to the statement once the build is
done (`apply_joins`).
"""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from humps import decamelize
from sqlalchemy import Select
from sqlalchemy.orm import ColumnProperty, RelationshipProperty, aliased
from sqlalchemy.orm.util import AliasedClass

from queryspec.core.exceptions import AttributeResolutionError
from queryspec.core.root_logger import get_logger
from queryspec.schemas.specification.query_config import JoinType, SpecificationQueryConfig

logger = get_logger("context")


class QueryContext:
    """
    Resolves attribute paths against a root entity and deduplicates the joins they need.

    Attributes:
        root: The root ORM entity of the query.
        config (SpecificationQueryConfig): Attribute path mapping and join options.
    """

    def __init__(self, root: Any, query_config: SpecificationQueryConfig | None = None) -> None:
        self.root = root
        self.config = query_config or SpecificationQueryConfig()
        # traversal prefix -> (aliased entity, relationship attribute on the parent entity)
        self._joins: dict[str, tuple[AliasedClass, Any]] = {}

    @property
    def joins(self) -> dict[str, AliasedClass]:
        """Joined entities keyed by traversal prefix, in the order the joins were created."""
        return {prefix: alias for prefix, (alias, _) in self._joins.items()}

    def path_for(self, attribute: str) -> str:
        """
        Returns the attribute path configured for a logical attribute name.

        Unmapped attributes are used as a direct path on the root entity,
        decamelized segment by segment when the config asks for it.
        """
        configured = self.config.attribute_paths.get(attribute)
        if configured is not None:
            return configured
        if self.config.decamelize_attributes:
            return ".".join(decamelize(segment) for segment in attribute.split("."))
        return attribute

    def resolve(self, attribute_path: str) -> tuple[Any, bool]:
        """
        Resolves a dotted attribute path to a column expression.

        Every segment but the last must name a relationship. Each relationship is
        joined through an aliased entity the first time its traversal prefix is
        seen and reused afterwards. New joins are only cached once the whole path
        resolves, so a failed call leaves the context unchanged.

        Args:
            attribute_path (str): The path, e.g. `title` or `genre.name`.

        Returns:
            tuple[Any, bool]: The column expression, and whether this call created a new join.

        Raises:
            AttributeResolutionError: If a segment is empty or missing, an intermediate
                segment is not a relationship, or the last segment is not a column.
        """
        segments = attribute_path.split(".")
        if not all(segment.strip() for segment in segments):
            raise AttributeResolutionError(attribute_path, "attribute path cannot be empty or contain empty parts")

        entity = self.root
        # joins created by this call, committed once the leaf column resolves
        pending: dict[str, tuple[AliasedClass, Any]] = {}

        for index, segment in enumerate(segments[:-1]):
            prefix = ".".join(segments[: index + 1])
            known = self._joins.get(prefix)
            if known is not None:
                entity, _ = known
                continue

            relationship_attr = self._attribute(entity, segment, attribute_path)
            if not isinstance(getattr(relationship_attr, "property", None), RelationshipProperty):
                raise AttributeResolutionError(attribute_path, f"'{segment}' is not a relationship")

            alias = aliased(relationship_attr.property.mapper.class_)
            pending[prefix] = (alias, relationship_attr)
            entity = alias

        leaf = segments[-1]
        column_attr = self._attribute(entity, leaf, attribute_path)
        if not isinstance(getattr(column_attr, "property", None), ColumnProperty):
            raise AttributeResolutionError(attribute_path, f"'{leaf}' is not a column attribute")

        for prefix in pending:
            logger.debug(f"Joined '{prefix}' for attribute path '{attribute_path}'")
        self._joins.update(pending)
        return column_attr, bool(pending)

    @staticmethod
    def _attribute(entity: Any, name: str, attribute_path: str) -> Any:
        if name.startswith("_"):
            raise AttributeResolutionError(attribute_path, f"'{name}' is not a public attribute")
        try:
            return getattr(entity, name)
        except AttributeError as e:
            raise AttributeResolutionError(attribute_path, f"'{name}' does not exist") from e

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Discards the joins created inside the block if the block raises."""
        snapshot = dict(self._joins)
        try:
            yield
        except Exception:
            self._joins = snapshot
            raise

    def apply_joins(self, statement: Select) -> Select:
        """Appends every cached join to `statement`, in creation order."""
        is_outer = self.config.join_type is JoinType.left
        for alias, relationship_attr in self._joins.values():
            statement = statement.join(alias, relationship_attr.of_type(alias), isouter=is_outer)
        return statement
