"""Read relational metadata from SQL DDL scripts.

Only ``CREATE TABLE`` column and constraint declarations are interpreted.
Everything else in a script (``CREATE SCHEMA``, ``GO``, inserts, views) is
skipped.
"""

import logging
import re
from typing import List, Optional, Tuple

from appdef_core.errors import DdlParseError
from appdef_core.model import ColumnDescriptor, ForeignKeyDescriptor, TableDescriptor
from appdef_core.naming import contains_name
from appdef_core.type_mapper import is_character_type, is_exact_numeric_type

logger = logging.getLogger(__name__)

_IDENT = r"(?:\[[^\]]+\]|\"[^\"]+\"|[\w#@$]+)"

CREATE_TABLE_RE = re.compile(
    rf"\bcreate\s+table\s+(?:if\s+not\s+exists\s+)?({_IDENT}(?:\s*\.\s*{_IDENT}){{0,2}})\s*\(",
    flags=re.IGNORECASE,
)
CONSTRAINT_PREFIX_RE = re.compile(rf"^constraint\s+{_IDENT}\s+", flags=re.IGNORECASE)
COLUMN_RE = re.compile(
    rf"^({_IDENT})\s+({_IDENT})\s*(?:\(([^)]*)\))?(.*)$",
    flags=re.IGNORECASE | re.DOTALL,
)
TABLE_PK_RE = re.compile(
    r"^primary\s+key\s*(?:clustered|nonclustered)?\s*\((.*?)\)",
    flags=re.IGNORECASE | re.DOTALL,
)
TABLE_FK_RE = re.compile(
    rf"^foreign\s+key\s*\((.*?)\)\s*references\s+({_IDENT}(?:\s*\.\s*{_IDENT}){{0,2}})\s*(?:\((.*?)\))?",
    flags=re.IGNORECASE | re.DOTALL,
)
INLINE_REF_RE = re.compile(
    rf"\breferences\s+({_IDENT}(?:\s*\.\s*{_IDENT}){{0,2}})\s*(?:\((.*?)\))?",
    flags=re.IGNORECASE | re.DOTALL,
)
DEFAULT_RE = re.compile(r"(?<![\w\[\".])default(?![\w\]\"])\s*", flags=re.IGNORECASE)
LINE_COMMENT_RE = re.compile(r"--[^\n]*")
BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", flags=re.DOTALL)

SKIPPED_DEFINITION_RE = re.compile(
    r"^(?:unique(?:\s+(?:clustered|nonclustered))?\s*\(|check\s*\(|(?:index|key)\s+\S+\s*\(|period\s+for\b)",
    flags=re.IGNORECASE,
)


def _strip_comments(sql_text: str) -> str:
    return LINE_COMMENT_RE.sub("", BLOCK_COMMENT_RE.sub(" ", sql_text))


def _unquote(identifier: str) -> str:
    value = identifier.strip()
    if len(value) >= 2 and value[0] in "[\"" and value[-1] in "]\"":
        return value[1:-1]
    return value


def _split_qualified(token: str) -> Tuple[str, str]:
    parts = [_unquote(part) for part in re.split(r"\s*\.\s*(?![^\[]*\])", token.strip())]
    if len(parts) >= 2:
        return parts[-2], parts[-1]
    return "", parts[-1]


def _split_top_level(body: str) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    in_single = False
    in_double = False

    for char in body:
        if char == "'" and not in_double:
            in_single = not in_single
        elif char == '"' and not in_single:
            in_double = not in_double
        elif not in_single and not in_double:
            if char == "(":
                depth += 1
            elif char == ")":
                depth = max(0, depth - 1)
            elif char == "," and depth == 0:
                parts.append("".join(current).strip())
                current = []
                continue
        current.append(char)

    if current:
        parts.append("".join(current).strip())
    return [part for part in parts if part]


def _closing_paren(text: str, start: int) -> int:
    """Index of the ``)`` closing a group whose ``(`` sits just before ``start``, or -1."""
    depth = 1
    in_single = False
    for index in range(start, len(text)):
        char = text[index]
        if char == "'":
            in_single = not in_single
        elif in_single:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _column_list(text: str) -> List[str]:
    columns = []
    for raw in text.split(","):
        name = re.sub(r"\s+(asc|desc)\s*$", "", raw.strip(), flags=re.IGNORECASE)
        if name:
            columns.append(_unquote(name))
    return columns


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_default_value(rest: str) -> Optional[str]:
    """Extract the DEFAULT expression from a column definition tail, verbatim."""
    match = DEFAULT_RE.search(rest)
    if not match:
        return None
    text = rest[match.end():]
    if not text:
        return None

    if text[0] == "(":
        end = _closing_paren(text, 1)
        return text[: end + 1] if end >= 0 else text.strip()

    if text[0] == "'" or text[:2].upper() == "N'":
        start = text.index("'") + 1
        index = start
        while index < len(text):
            if text[index] == "'":
                if text[index + 1: index + 2] == "'":
                    index += 2
                    continue
                return text[: index + 1]
            index += 1
        return text.strip()

    token = re.match(r"[\w.+\-]+", text)
    if not token:
        return None
    value = token.group(0)
    after = text[token.end():]
    if after.startswith("("):
        end = _closing_paren(after, 1)
        if end >= 0:
            value += after[: end + 1]
    return value


def _apply_type_parameters(column: ColumnDescriptor, params: Optional[str]) -> None:
    if not params:
        return
    values = [value.strip() for value in params.split(",")]
    if is_character_type(column.sql_type):
        column.max_length = _parse_int(values[0])
    elif is_exact_numeric_type(column.sql_type):
        column.precision = _parse_int(values[0])
        if len(values) > 1:
            column.scale = _parse_int(values[1])


def _parse_column(definition: str, table: TableDescriptor) -> Optional[ColumnDescriptor]:
    match = COLUMN_RE.match(definition)
    if not match:
        logger.debug("Skipping unrecognised definition in %s: %r", table.name, definition)
        return None

    name = _unquote(match.group(1))
    sql_type = _unquote(match.group(2))
    if sql_type.lower() == "as":
        logger.debug("Skipping computed column %s.%s", table.name, name)
        return None

    rest = match.group(4) or ""
    rest_lower = " ".join(rest.lower().split())

    column = ColumnDescriptor(name=name, sql_type=sql_type)
    _apply_type_parameters(column, match.group(3))
    if "not null" in rest_lower:
        column.nullable = False
    column.is_identity = bool(re.search(r"\bidentity\b", rest_lower))
    column.is_primary_key = "primary key" in rest_lower

    ref_match = INLINE_REF_RE.search(rest)
    if ref_match is None:
        column.default_value = _parse_default_value(rest)
    else:
        # the referenced name may itself start with "Default"
        column.default_value = _parse_default_value(rest[: ref_match.start()] + " " + rest[ref_match.end():])
        _, ref_table = _split_qualified(ref_match.group(1))
        ref_columns = _column_list(ref_match.group(2) or "")
        table.foreign_keys.append(
            ForeignKeyDescriptor(
                column_name=name,
                referenced_table=ref_table,
                referenced_column=ref_columns[0] if ref_columns else "Id",
            )
        )
    return column


def _parse_table_body(table: TableDescriptor, body: str) -> None:
    primary_keys: List[str] = []

    for raw_definition in _split_top_level(body):
        definition = CONSTRAINT_PREFIX_RE.sub("", raw_definition.strip())
        lowered = definition.lower()

        if lowered.startswith("primary key"):
            pk_match = TABLE_PK_RE.match(definition)
            if pk_match:
                primary_keys.extend(_column_list(pk_match.group(1)))
            continue

        if lowered.startswith("foreign key"):
            fk_match = TABLE_FK_RE.match(definition)
            if fk_match:
                local_columns = _column_list(fk_match.group(1))
                _, ref_table = _split_qualified(fk_match.group(2))
                ref_columns = _column_list(fk_match.group(3) or "")
                if local_columns:
                    table.foreign_keys.append(
                        ForeignKeyDescriptor(
                            column_name=local_columns[0],
                            referenced_table=ref_table,
                            referenced_column=ref_columns[0] if ref_columns else "Id",
                        )
                    )
            continue

        if SKIPPED_DEFINITION_RE.match(definition):
            continue

        column = _parse_column(definition, table)
        if column is not None:
            table.columns.append(column)

    for column in table.columns:
        if contains_name(primary_keys, column.name):
            column.is_primary_key = True


def parse_sql_ddl(ddl_text: str) -> List[TableDescriptor]:
    """Parse ``CREATE TABLE`` statements into table descriptors, in script order.

    Raises ``DdlParseError`` when a table body is never closed.
    """
    text = _strip_comments(ddl_text or "")
    tables: List[TableDescriptor] = []

    position = 0
    while True:
        match = CREATE_TABLE_RE.search(text, position)
        if not match:
            break
        schema, name = _split_qualified(match.group(1))
        end = _closing_paren(text, match.end())
        if end < 0:
            raise DdlParseError(f"Unterminated CREATE TABLE statement for {name}")

        table = TableDescriptor(name=name, schema=schema)
        _parse_table_body(table, text[match.end():end])
        logger.debug("Parsed table %s with %d column(s)", name, len(table.columns))
        tables.append(table)
        position = end + 1

    return tables
