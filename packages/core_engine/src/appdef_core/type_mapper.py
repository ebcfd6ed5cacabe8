"""SQL column type -> semantic type tag used in application definitions."""

import logging
from typing import Dict

logger = logging.getLogger(__name__)

_SQL_TYPE_MAP: Dict[str, str] = {
    "int": "int",
    "integer": "int",
    "bigint": "long",
    "smallint": "short",
    "tinyint": "byte",
    "decimal": "decimal",
    "numeric": "decimal",
    "money": "decimal",
    "smallmoney": "decimal",
    # SQL float is double precision; real is single precision.
    "float": "double",
    "real": "float",
    "datetime": "datetime",
    "datetime2": "datetime",
    "smalldatetime": "datetime",
    "date": "datetime",
    "time": "timespan",
    "datetimeoffset": "datetimeoffset",
    # rowversion, not a point in time
    "timestamp": "bytes",
    "rowversion": "bytes",
    "varchar": "string",
    "nvarchar": "string",
    "char": "string",
    "nchar": "string",
    "text": "string",
    "ntext": "string",
    "xml": "string",
    "varbinary": "bytes",
    "binary": "bytes",
    "image": "bytes",
    "bit": "bool",
    "boolean": "bool",
    "uniqueidentifier": "guid",
    "geography": "string",
    "geometry": "string",
    "hierarchyid": "string",
    "sql_variant": "string",
}

CHARACTER_TYPES = frozenset({"varchar", "nvarchar", "char", "nchar"})
EXACT_NUMERIC_TYPES = frozenset({"decimal", "numeric"})


def _normalize(sql_type: str) -> str:
    value = sql_type.strip().lower()
    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]
    return value


def map_sql_type(sql_type: str) -> str:
    """Map a raw SQL type token case-insensitively.

    Unknown tokens are returned verbatim so new or vendor-specific types
    never block a run.
    """
    mapped = _SQL_TYPE_MAP.get(_normalize(sql_type))
    if mapped is None:
        logger.debug("Unmapped SQL type %r passed through", sql_type)
        return sql_type
    return mapped


def is_known_sql_type(sql_type: str) -> bool:
    return _normalize(sql_type) in _SQL_TYPE_MAP


def is_character_type(sql_type: str) -> bool:
    return _normalize(sql_type) in CHARACTER_TYPES


def is_exact_numeric_type(sql_type: str) -> bool:
    return _normalize(sql_type) in EXACT_NUMERIC_TYPES
