import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from appdef_core.canonical import from_canonical, to_canonical
from appdef_core.errors import DocumentFormatError
from appdef_core.model import AppDefinition

logger = logging.getLogger(__name__)


def dump_yaml(payload: Dict[str, Any]) -> str:
    return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True, default_flow_style=False)


def dump_document(definition: AppDefinition) -> str:
    """Serialize ``definition`` to its canonical YAML text."""
    return dump_yaml(to_canonical(definition))


def parse_yaml(text: str, source: str = "<string>") -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentFormatError(f"Invalid YAML in {source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DocumentFormatError(f"{source} must parse to an object/map at root.")
    return data


def load_document(text: str, source: str = "<string>") -> AppDefinition:
    return from_canonical(parse_yaml(text, source))


def write_document(path: str, text: str) -> Path:
    """Write ``text`` to ``path``, creating parent directories first."""
    target = Path(path)
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    logger.debug("Wrote %d bytes to %s", len(text), target)
    return target
