"""Read pipeline inputs from disk."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from appdef_core.canonical import read_applications, read_view_catalog
from appdef_core.document import load_document, parse_yaml
from appdef_core.errors import DocumentFormatError
from appdef_core.model import AppDefinition, ApplicationDescriptor, ViewCatalog

logger = logging.getLogger(__name__)

APPLICATIONS_SECTION = "Applications"


def _require_file(path: str, label: str) -> Path:
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"{label} not found: {file_path.resolve()}")
    return file_path


def load_yaml_document(path: str) -> AppDefinition:
    """Load an application-definition document (data.yaml / app.yaml)."""
    doc_path = _require_file(path, "Definition file")
    text = doc_path.read_text(encoding="utf-8")
    return load_document(text, source=str(doc_path))


def load_yaml_mapping(path: str) -> Dict[str, Any]:
    doc_path = _require_file(path, "YAML file")
    return parse_yaml(doc_path.read_text(encoding="utf-8"), source=str(doc_path))


def load_view_catalog(path: str) -> ViewCatalog:
    """Load a standalone views file (``views:`` list, snake_case keys allowed)."""
    data = load_yaml_mapping(path)
    return read_view_catalog(data, path="/views")


def read_settings_file(path: str) -> Dict[str, Any]:
    """Parse a settings file; ``.json`` via json, anything else as YAML."""
    settings_path = _require_file(path, "Settings file")
    text = settings_path.read_text(encoding="utf-8")
    if settings_path.suffix.lower() == ".json":
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise DocumentFormatError(f"Invalid JSON in {settings_path}") from exc
        if not isinstance(data, dict):
            raise DocumentFormatError(f"{settings_path} must contain a JSON object at root.")
        return data
    return parse_yaml(text, source=str(settings_path))


def applications_section(settings: Dict[str, Any]) -> Optional[Any]:
    for key, value in settings.items():
        if str(key).lower() == APPLICATIONS_SECTION.lower():
            return value
    return None


def load_applications(path: str, overlays: Optional[List[str]] = None) -> List[ApplicationDescriptor]:
    """Read the ``Applications`` section of a settings file.

    Each existing overlay file (e.g. ``appsettings.Production.json``) that
    defines ``Applications`` replaces the list from earlier files. A missing
    section yields an empty list.
    """
    section = applications_section(read_settings_file(path))
    source = path

    for overlay in overlays or []:
        if not Path(overlay).is_file():
            continue
        overlay_section = applications_section(read_settings_file(overlay))
        if overlay_section is not None:
            section = overlay_section
            source = overlay

    if section is None:
        logger.warning("No %s section found in %s", APPLICATIONS_SECTION, path)
        return []

    applications = read_applications(section, path=f"/{APPLICATIONS_SECTION}")
    logger.debug("Read %d application(s) from %s", len(applications), source)
    return applications
