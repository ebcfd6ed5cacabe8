"""Exception types raised by the appdef pipeline."""


class AppDefError(Exception):
    """Base class for pipeline errors."""


class DocumentFormatError(AppDefError, ValueError):
    """A document could not be read as an application definition."""


class DdlParseError(AppDefError, ValueError):
    """SQL DDL text could not be split into table declarations."""


class EmptyDataModelError(AppDefError):
    """A data document defines no entities."""
