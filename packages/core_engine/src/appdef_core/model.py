"""Value objects shared by schema lowering and configuration merge.

Descriptors (``TableDescriptor`` and friends) describe raw relational
metadata. ``Entity``/``Property``/``Relationship`` are the lowered,
canonical form. ``AppDefinition`` is the root of every produced document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Relational input
# ---------------------------------------------------------------------------

@dataclass
class ColumnDescriptor:
    name: str
    sql_type: str
    nullable: bool = True
    is_primary_key: bool = False
    is_identity: bool = False
    max_length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default_value: Optional[str] = None


@dataclass
class ForeignKeyDescriptor:
    column_name: str
    referenced_table: str
    referenced_column: str = "Id"


@dataclass
class TableDescriptor:
    name: str
    schema: str = ""
    columns: List[ColumnDescriptor] = field(default_factory=list)
    foreign_keys: List[ForeignKeyDescriptor] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Canonical data model
# ---------------------------------------------------------------------------

@dataclass
class Property:
    name: str
    type: str
    nullable: bool = True
    is_primary_key: bool = False
    is_identity: bool = False
    max_length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default_value: Optional[str] = None


@dataclass
class Relationship:
    target_entity: str
    foreign_key: str
    principal_key: Optional[str] = None
    type: str = "one-to-many"


@dataclass
class Entity:
    name: str
    schema: str = ""
    properties: List[Property] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)


@dataclass
class DataModel:
    entities: List[Entity] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

@dataclass
class Theme:
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None


@dataclass
class ApplicationDescriptor:
    """One deployable application and the entities/views it may show.

    ``views`` is ``None`` until visibility resolution (or the input) fills it.
    ``extra`` carries keys this package does not model, verbatim.
    """

    name: str
    title: str = ""
    schema: str = ""
    description: Optional[str] = None
    icon: Optional[str] = None
    entities: List[str] = field(default_factory=list)
    views: Optional[List[str]] = None
    theme: Optional[Theme] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AppMetadata:
    """Legacy single-application block kept as a placeholder."""

    name: str = ""
    title: str = ""
    description: Optional[str] = None
    logo_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

@dataclass
class ValidationConfig:
    required: bool = False
    range: Optional[List[Any]] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class ViewParameter:
    name: str
    type: str = "string"
    nullable: bool = False
    default: Optional[str] = None
    validation: Optional[ValidationConfig] = None


@dataclass
class ViewProperty:
    name: str
    type: str = "string"
    nullable: bool = False
    max_length: Optional[int] = None
    validation: Optional[ValidationConfig] = None


@dataclass
class ViewDescriptor:
    name: str
    sql_file: Optional[str] = None
    description: Optional[str] = None
    generate_partial: bool = True
    parameters: List[ViewParameter] = field(default_factory=list)
    properties: List[ViewProperty] = field(default_factory=list)
    applications: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ViewCatalog:
    views: List[ViewDescriptor] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

@dataclass
class AppDefinition:
    applications: List[ApplicationDescriptor] = field(default_factory=list)
    data_model: DataModel = field(default_factory=DataModel)
    views: ViewCatalog = field(default_factory=ViewCatalog)
    app: Optional[AppMetadata] = None

    def entity_count(self) -> int:
        return len(self.data_model.entities)

    def view_count(self) -> int:
        return len(self.views.views)
