import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator

from appdef_core.issues import Issue

SCHEMA_FILE = Path(__file__).resolve().parent / "schemas" / "app_definition.schema.json"


def default_schema_path() -> str:
    return str(SCHEMA_FILE)


def load_schema(schema_path: Optional[str] = None) -> Dict[str, Any]:
    path = Path(schema_path) if schema_path else SCHEMA_FILE
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _to_json_path(parts: List[Any]) -> str:
    if not parts:
        return "/"
    return "/" + "/".join(str(part) for part in parts)


def schema_issues(document: Dict[str, Any], schema: Optional[Dict[str, Any]] = None) -> List[Issue]:
    """Validate a parsed document (canonical dict) against the JSON schema."""
    validator = Draft202012Validator(schema if schema is not None else load_schema())
    issues: List[Issue] = []

    for error in sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path]):
        issues.append(
            Issue(
                severity="error",
                code="SCHEMA_VALIDATION_FAILED",
                message=error.message,
                path=_to_json_path(list(error.absolute_path)),
            )
        )

    return issues
