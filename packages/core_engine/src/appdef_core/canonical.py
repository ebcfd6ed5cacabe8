"""Canonical dict form of an ``AppDefinition``.

Writing emits lower-camel keys in a fixed order and leaves out optional
values that are unset, so the same definition always produces the same
document. Reading is lenient: keys match regardless of case or
``snake_case``/``camelCase`` spelling, unknown keys are ignored (or kept in
``extra`` where the type has one), and ``isRequired`` is accepted as the
inverse of ``nullable``.
"""

import re
from copy import deepcopy
from typing import Any, Callable, Dict, List, Optional, TypeVar

from appdef_core.errors import DocumentFormatError
from appdef_core.model import (
    AppDefinition,
    AppMetadata,
    ApplicationDescriptor,
    DataModel,
    Entity,
    Property,
    Relationship,
    Theme,
    ValidationConfig,
    ViewCatalog,
    ViewDescriptor,
    ViewParameter,
    ViewProperty,
)
from appdef_core.naming import to_camel

T = TypeVar("T")

PLACEHOLDER_APP = AppMetadata(name="default", title="Default Application")

_APPLICATION_KEYS = {"name", "title", "description", "icon", "schema", "entities", "views", "theme"}
_VIEW_KEYS = {
    "name",
    "description",
    "sqlfile",
    "generatepartial",
    "parameters",
    "properties",
    "applications",
}


def _norm(key: Any) -> str:
    return re.sub(r"[_\-\s]", "", str(key)).lower()


def _get(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    wanted = _norm(key)
    for candidate, value in data.items():
        if _norm(candidate) == wanted:
            return value
    return default


def _has(data: Dict[str, Any], key: str) -> bool:
    wanted = _norm(key)
    return any(_norm(candidate) == wanted for candidate in data)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return bool(value)


def _as_int(value: Any, path: str) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise DocumentFormatError(f"{path}: expected an integer, got {value!r}") from exc


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_names(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def _mapping(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DocumentFormatError(f"{path}: expected a mapping, got {type(value).__name__}")
    return value


def _required_name(data: Dict[str, Any], path: str) -> str:
    name = _get(data, "name")
    if name is None or str(name).strip() == "":
        raise DocumentFormatError(f"{path}: missing required key 'name'")
    return str(name)


def _read_list(value: Any, path: str, reader: Callable[[Dict[str, Any], str], T]) -> List[T]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DocumentFormatError(f"{path}: expected a list, got {type(value).__name__}")
    return [reader(_mapping(item, f"{path}/{index}"), f"{path}/{index}") for index, item in enumerate(value)]


def _extra(data: Dict[str, Any], known: set) -> Dict[str, Any]:
    return {key: deepcopy(value) for key, value in data.items() if _norm(key) not in known}


def _put(out: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def _property_to_dict(prop: Property) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "name": prop.name,
        "type": prop.type,
        "nullable": prop.nullable,
        "isPrimaryKey": prop.is_primary_key,
        "isIdentity": prop.is_identity,
    }
    _put(out, "maxLength", prop.max_length)
    _put(out, "precision", prop.precision)
    _put(out, "scale", prop.scale)
    _put(out, "defaultValue", prop.default_value)
    return out


def _relationship_to_dict(rel: Relationship) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "type": rel.type,
        "targetEntity": rel.target_entity,
        "foreignKey": rel.foreign_key,
    }
    _put(out, "principalKey", rel.principal_key)
    return out


def entity_to_dict(entity: Entity) -> Dict[str, Any]:
    return {
        "name": entity.name,
        "schema": entity.schema or "",
        "properties": [_property_to_dict(prop) for prop in entity.properties],
        "relationships": [_relationship_to_dict(rel) for rel in entity.relationships],
    }


def _theme_to_dict(theme: Theme) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    _put(out, "primaryColor", theme.primary_color)
    _put(out, "secondaryColor", theme.secondary_color)
    _put(out, "backgroundColor", theme.background_color)
    _put(out, "textColor", theme.text_color)
    return out


def _application_to_dict(app: ApplicationDescriptor) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": app.name, "title": app.title}
    _put(out, "description", app.description)
    _put(out, "icon", app.icon)
    out["schema"] = app.schema or ""
    out["entities"] = list(app.entities)
    out["views"] = list(app.views or [])
    if app.theme is not None:
        out["theme"] = _theme_to_dict(app.theme)
    for key, value in app.extra.items():
        out.setdefault(to_camel(key), deepcopy(value))
    return out


def _validation_to_dict(validation: ValidationConfig) -> Dict[str, Any]:
    out: Dict[str, Any] = {"required": validation.required}
    _put(out, "range", list(validation.range) if validation.range is not None else None)
    _put(out, "maxLength", validation.max_length)
    _put(out, "minLength", validation.min_length)
    _put(out, "pattern", validation.pattern)
    _put(out, "errorMessage", validation.error_message)
    return out


def _parameter_to_dict(param: ViewParameter) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": param.name, "type": param.type, "nullable": param.nullable}
    _put(out, "default", param.default)
    if param.validation is not None:
        out["validation"] = _validation_to_dict(param.validation)
    return out


def _view_property_to_dict(prop: ViewProperty) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": prop.name, "type": prop.type, "nullable": prop.nullable}
    _put(out, "maxLength", prop.max_length)
    if prop.validation is not None:
        out["validation"] = _validation_to_dict(prop.validation)
    return out


def view_to_dict(view: ViewDescriptor) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": view.name}
    _put(out, "description", view.description)
    _put(out, "sqlFile", view.sql_file)
    out["generatePartial"] = view.generate_partial
    out["parameters"] = [_parameter_to_dict(param) for param in view.parameters]
    out["properties"] = [_view_property_to_dict(prop) for prop in view.properties]
    out["applications"] = list(view.applications)
    for key, value in view.extra.items():
        out.setdefault(to_camel(key), deepcopy(value))
    return out


def _app_metadata_to_dict(app: AppMetadata) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": app.name, "title": app.title}
    _put(out, "description", app.description)
    _put(out, "logoUrl", app.logo_url)
    return out


def view_catalog_to_dict(catalog: ViewCatalog) -> Dict[str, Any]:
    return {"views": [view_to_dict(view) for view in catalog.views]}


def to_canonical(definition: AppDefinition) -> Dict[str, Any]:
    """Build the canonical, ordered dict for ``definition``.

    A definition with neither applications nor entities carries the legacy
    ``app`` placeholder block.
    """
    canonical: Dict[str, Any] = {}

    placeholder = definition.app
    if placeholder is None and not definition.applications and not definition.data_model.entities:
        placeholder = PLACEHOLDER_APP
    if placeholder is not None:
        canonical["app"] = _app_metadata_to_dict(placeholder)

    canonical["applications"] = [_application_to_dict(app) for app in definition.applications]
    canonical["dataModel"] = {
        "entities": [entity_to_dict(entity) for entity in definition.data_model.entities],
    }
    canonical["views"] = view_catalog_to_dict(definition.views)
    return canonical


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def _read_property(data: Dict[str, Any], path: str) -> Property:
    if _has(data, "nullable"):
        nullable = _as_bool(_get(data, "nullable"), True)
    else:
        nullable = not _as_bool(_get(data, "isRequired"), False)
    return Property(
        name=_required_name(data, path),
        type=_as_text(_get(data, "type")) or "",
        nullable=nullable,
        is_primary_key=_as_bool(_get(data, "isPrimaryKey"), False),
        is_identity=_as_bool(_get(data, "isIdentity"), False),
        max_length=_as_int(_get(data, "maxLength"), f"{path}/maxLength"),
        precision=_as_int(_get(data, "precision"), f"{path}/precision"),
        scale=_as_int(_get(data, "scale"), f"{path}/scale"),
        default_value=_as_text(_get(data, "defaultValue")),
    )


def _read_relationship(data: Dict[str, Any], path: str) -> Relationship:
    target = _get(data, "targetEntity")
    if target is None:
        raise DocumentFormatError(f"{path}: missing required key 'targetEntity'")
    return Relationship(
        target_entity=str(target),
        foreign_key=_as_text(_get(data, "foreignKey")) or "",
        principal_key=_as_text(_get(data, "principalKey")),
        type=_as_text(_get(data, "type")) or "one-to-many",
    )


def _read_entity(data: Dict[str, Any], path: str) -> Entity:
    return Entity(
        name=_required_name(data, path),
        schema=_as_text(_get(data, "schema")) or "",
        properties=_read_list(_get(data, "properties"), f"{path}/properties", _read_property),
        relationships=_read_list(_get(data, "relationships"), f"{path}/relationships", _read_relationship),
    )


def _read_theme(data: Dict[str, Any], path: str) -> Theme:
    return Theme(
        primary_color=_as_text(_get(data, "primaryColor")),
        secondary_color=_as_text(_get(data, "secondaryColor")),
        background_color=_as_text(_get(data, "backgroundColor")),
        text_color=_as_text(_get(data, "textColor")),
    )


def read_application(data: Dict[str, Any], path: str = "/applications") -> ApplicationDescriptor:
    theme = _get(data, "theme")
    views = _get(data, "views")
    return ApplicationDescriptor(
        name=_required_name(data, path),
        title=_as_text(_get(data, "title")) or "",
        schema=_as_text(_get(data, "schema")) or "",
        description=_as_text(_get(data, "description")),
        icon=_as_text(_get(data, "icon")),
        entities=_as_names(_get(data, "entities")),
        views=None if views is None else _as_names(views),
        theme=None if theme is None else _read_theme(_mapping(theme, f"{path}/theme"), f"{path}/theme"),
        extra=_extra(data, _APPLICATION_KEYS),
    )


def _read_validation(data: Dict[str, Any], path: str) -> ValidationConfig:
    value_range = _get(data, "range")
    return ValidationConfig(
        required=_as_bool(_get(data, "required"), False),
        range=None if value_range is None else list(value_range),
        max_length=_as_int(_get(data, "maxLength"), f"{path}/maxLength"),
        min_length=_as_int(_get(data, "minLength"), f"{path}/minLength"),
        pattern=_as_text(_get(data, "pattern")),
        error_message=_as_text(_get(data, "errorMessage")),
    )


def _read_optional_validation(data: Dict[str, Any], path: str) -> Optional[ValidationConfig]:
    validation = _get(data, "validation")
    if validation is None:
        return None
    return _read_validation(_mapping(validation, f"{path}/validation"), f"{path}/validation")


def _read_parameter(data: Dict[str, Any], path: str) -> ViewParameter:
    return ViewParameter(
        name=_required_name(data, path),
        type=_as_text(_get(data, "type")) or "string",
        nullable=_as_bool(_get(data, "nullable"), False),
        default=_as_text(_get(data, "default")),
        validation=_read_optional_validation(data, path),
    )


def _read_view_property(data: Dict[str, Any], path: str) -> ViewProperty:
    return ViewProperty(
        name=_required_name(data, path),
        type=_as_text(_get(data, "type")) or "string",
        nullable=_as_bool(_get(data, "nullable"), False),
        max_length=_as_int(_get(data, "maxLength"), f"{path}/maxLength"),
        validation=_read_optional_validation(data, path),
    )


def _read_view(data: Dict[str, Any], path: str) -> ViewDescriptor:
    return ViewDescriptor(
        name=_required_name(data, path),
        sql_file=_as_text(_get(data, "sqlFile")),
        description=_as_text(_get(data, "description")),
        generate_partial=_as_bool(_get(data, "generatePartial"), True),
        parameters=_read_list(_get(data, "parameters"), f"{path}/parameters", _read_parameter),
        properties=_read_list(_get(data, "properties"), f"{path}/properties", _read_view_property),
        applications=_as_names(_get(data, "applications")),
        extra=_extra(data, _VIEW_KEYS),
    )


def read_view_catalog(value: Any, path: str = "/views") -> ViewCatalog:
    """Read a view catalog given either as ``{views: [...]}`` or as a bare list."""
    if value is None:
        return ViewCatalog()
    if isinstance(value, dict):
        value = _get(value, "views")
    return ViewCatalog(views=_read_list(value, path, _read_view))


def read_applications(value: Any, path: str = "/applications") -> List[ApplicationDescriptor]:
    return _read_list(value, path, read_application)


def from_canonical(data: Dict[str, Any]) -> AppDefinition:
    """Rebuild an ``AppDefinition`` from a parsed document."""
    data = _mapping(data, "/")

    data_model = _get(data, "dataModel")
    entities: List[Entity] = []
    if data_model is not None:
        entities = _read_list(
            _get(_mapping(data_model, "/dataModel"), "entities"),
            "/dataModel/entities",
            _read_entity,
        )

    app_block = _get(data, "app")
    placeholder = None
    if isinstance(app_block, dict):
        placeholder = AppMetadata(
            name=_as_text(_get(app_block, "name")) or "",
            title=_as_text(_get(app_block, "title")) or "",
            description=_as_text(_get(app_block, "description")),
            logo_url=_as_text(_get(app_block, "logoUrl")),
        )

    return AppDefinition(
        applications=read_applications(_get(data, "applications")),
        data_model=DataModel(entities=entities),
        views=read_view_catalog(_get(data, "views")),
        app=placeholder,
    )
