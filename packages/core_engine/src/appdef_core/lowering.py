"""Schema lowering: table descriptors -> canonical entity model."""

import logging
from typing import Iterable, List

from appdef_core.document import dump_document
from appdef_core.model import (
    AppDefinition,
    ColumnDescriptor,
    DataModel,
    Entity,
    ForeignKeyDescriptor,
    Property,
    Relationship,
    TableDescriptor,
)
from appdef_core.naming import singularize
from appdef_core.type_mapper import map_sql_type

logger = logging.getLogger(__name__)


def lower_column(column: ColumnDescriptor) -> Property:
    return Property(
        name=column.name,
        type=map_sql_type(column.sql_type),
        nullable=column.nullable,
        is_primary_key=column.is_primary_key,
        is_identity=column.is_identity,
        max_length=column.max_length,
        precision=column.precision,
        scale=column.scale,
        default_value=column.default_value,
    )


def lower_foreign_key(foreign_key: ForeignKeyDescriptor) -> Relationship:
    # The referenced table is not checked against the input; dangling
    # references are lowered as-is.
    return Relationship(
        target_entity=singularize(foreign_key.referenced_table),
        foreign_key=foreign_key.column_name,
        principal_key=foreign_key.referenced_column,
    )


def lower_table(table: TableDescriptor) -> Entity:
    return Entity(
        name=singularize(table.name),
        schema=table.schema or "",
        properties=[lower_column(column) for column in table.columns],
        relationships=[lower_foreign_key(fk) for fk in table.foreign_keys],
    )


def lower_tables(tables: Iterable[TableDescriptor]) -> DataModel:
    """Lower tables to entities, keeping input order."""
    entities: List[Entity] = [lower_table(table) for table in tables or []]
    logger.debug("Lowered %d table(s)", len(entities))
    return DataModel(entities=entities)


def generate(tables: Iterable[TableDescriptor]) -> str:
    """Lower ``tables`` and serialize the resulting data document.

    The document carries no applications and an empty view catalog; those
    are filled in by the merge step. An empty input yields a valid document
    with an empty entity list.
    """
    definition = AppDefinition(data_model=lower_tables(tables))
    return dump_document(definition)
