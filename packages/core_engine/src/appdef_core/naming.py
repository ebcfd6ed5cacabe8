import re
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")

_ES_SUFFIXES = ("sses", "xes", "zzes", "ches", "shes")
_KEEP_S_SUFFIXES = ("ss", "us", "is")


def singularize(name: str) -> str:
    """Return the singular form of a table name.

    "Categories" -> "Category", "Boxes" -> "Box", "Products" -> "Product".
    Names without a pluralizing suffix ("Category", "Address", "Status")
    are returned unchanged.
    """
    lowered = name.lower()
    if len(name) > 3 and lowered.endswith("ies"):
        return name[:-3] + ("Y" if name[-3:].isupper() else "y")
    if lowered.endswith(_ES_SUFFIXES):
        return name[:-2]
    if len(name) > 1 and lowered.endswith("s") and not lowered.endswith(_KEEP_S_SUFFIXES):
        return name[:-1]
    return name


def names_equal(left: Optional[str], right: Optional[str]) -> bool:
    if left is None or right is None:
        return left is right
    return left.casefold() == right.casefold()


def find_by_name(items: Iterable[T], name: str, key: Callable[[T], str]) -> Optional[T]:
    """First item whose ``key`` matches ``name`` case-insensitively."""
    for item in items:
        if names_equal(key(item), name):
            return item
    return None


def contains_name(names: Iterable[str], name: str) -> bool:
    return any(names_equal(existing, name) for existing in names)


def add_unique_name(names: List[str], name: str) -> bool:
    """Append ``name`` unless already present (case-insensitive). Returns True when added."""
    if contains_name(names, name):
        return False
    names.append(name)
    return True


def qualified_name(schema: Optional[str], name: str) -> str:
    if not schema or not schema.strip():
        return name
    return f"{schema}:{name}"


def split_qualified_name(value: str) -> Tuple[str, str]:
    """Split ``schema:Name`` into its parts; unqualified names get an empty schema."""
    if ":" in value:
        schema, _, name = value.partition(":")
        return schema.strip(), name.strip()
    return "", value.strip()


def to_camel(name: str) -> str:
    """``max_length`` -> ``maxLength``; already-camel keys are unchanged."""
    parts = [part for part in re.split(r"[_\-\s]+", name) if part]
    if not parts:
        return ""
    head = parts[0][:1].lower() + parts[0][1:]
    return head + "".join(part[:1].upper() + part[1:] for part in parts[1:])
