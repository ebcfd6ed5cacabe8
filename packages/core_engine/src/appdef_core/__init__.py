from appdef_core.canonical import from_canonical, to_canonical
from appdef_core.document import dump_document, load_document, write_document
from appdef_core.errors import AppDefError, DdlParseError, DocumentFormatError, EmptyDataModelError
from appdef_core.importers import parse_sql_ddl
from appdef_core.issues import Issue, has_errors, to_lines
from appdef_core.loader import load_applications, load_view_catalog, load_yaml_document
from appdef_core.lowering import generate, lower_tables
from appdef_core.merge import (
    build_definition,
    merge_applications,
    merge_view_catalog,
    populate_view_visibility,
)
from appdef_core.model import (
    AppDefinition,
    ApplicationDescriptor,
    ColumnDescriptor,
    DataModel,
    Entity,
    ForeignKeyDescriptor,
    Property,
    Relationship,
    TableDescriptor,
    Theme,
    ViewCatalog,
    ViewDescriptor,
)
from appdef_core.naming import singularize
from appdef_core.registry import DefinitionRegistry
from appdef_core.schema import load_schema, schema_issues
from appdef_core.semantic import lint_issues
from appdef_core.type_mapper import map_sql_type

__all__ = [
    "AppDefError",
    "AppDefinition",
    "ApplicationDescriptor",
    "build_definition",
    "ColumnDescriptor",
    "DataModel",
    "DdlParseError",
    "DefinitionRegistry",
    "DocumentFormatError",
    "dump_document",
    "EmptyDataModelError",
    "Entity",
    "ForeignKeyDescriptor",
    "from_canonical",
    "generate",
    "has_errors",
    "Issue",
    "lint_issues",
    "load_applications",
    "load_document",
    "load_schema",
    "load_view_catalog",
    "load_yaml_document",
    "lower_tables",
    "map_sql_type",
    "merge_applications",
    "merge_view_catalog",
    "parse_sql_ddl",
    "populate_view_visibility",
    "Property",
    "Relationship",
    "schema_issues",
    "singularize",
    "TableDescriptor",
    "Theme",
    "to_canonical",
    "to_lines",
    "ViewCatalog",
    "ViewDescriptor",
    "write_document",
]
