"""Import engine for bulk CSV imports."""

from school_admin.services.importer.column_schema import (
    ColumnSchema,
    ColumnSpec,
    ImportKind,
    ImportKindDefinition,
    get_import_kind,
)
from school_admin.services.importer.csv_parser import CSVParseError, CSVParser, ParsedTable
from school_admin.services.importer.preview import build_preview
from school_admin.services.importer.session import ImportLimits, ImportSession, ImportSessionStore
from school_admin.services.importer.submitter import BatchSubmitter, BatchTransportError
from school_admin.services.importer.template import generate_template
from school_admin.services.importer.validators import RowValidator, ValidationError

__all__ = [
    "BatchSubmitter",
    "BatchTransportError",
    "ColumnSchema",
    "ColumnSpec",
    "CSVParseError",
    "CSVParser",
    "ImportKind",
    "ImportKindDefinition",
    "ImportLimits",
    "ImportSession",
    "ImportSessionStore",
    "ParsedTable",
    "RowValidator",
    "ValidationError",
    "build_preview",
    "generate_template",
    "get_import_kind",
]
