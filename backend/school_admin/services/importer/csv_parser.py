"""CSV parser for import engine."""

import csv
import io
from dataclasses import dataclass, field


class CSVParseError(Exception):
    """CSV parsing error."""

    pass


@dataclass
class ParsedTable:
    """Header list plus data rows keyed by header, in file order."""

    headers: list[str]
    rows: list[dict[str, str]] = field(default_factory=list)


class CSVParser:
    """Parse comma-delimited upload files whose first row is the header."""

    def __init__(self, encoding: str = "utf-8-sig", delimiter: str = ","):
        """
        Initialize CSV parser.

        Args:
            encoding: Text encoding; the default tolerates a UTF-8 BOM
            delimiter: Field delimiter
        """
        self.encoding = encoding
        self.delimiter = delimiter

    def parse(self, file_content: bytes | str) -> ParsedTable:
        """
        Parse CSV file content.

        Empty lines are skipped. A line holding only delimiters or spaces is
        kept as a row of blank cells, so the required-field check reports it.
        Rows shorter than the header are padded with empty strings; cells
        beyond the header are dropped.

        Args:
            file_content: Raw file bytes or already-decoded text

        Returns:
            ParsedTable with headers and rows

        Raises:
            CSVParseError: If file cannot be decoded or parsed
        """
        if isinstance(file_content, bytes):
            try:
                text_content = file_content.decode(self.encoding)
            except UnicodeDecodeError as e:
                raise CSVParseError(f"file could not be decoded as {self.encoding}") from e
        else:
            text_content = file_content.lstrip("﻿")

        try:
            reader = csv.reader(
                io.StringIO(text_content, newline=""),
                delimiter=self.delimiter,
                quotechar='"',
                strict=True,
            )
            records = [record for record in reader if record]
        except csv.Error as e:
            raise CSVParseError(str(e)) from e

        if not records:
            return ParsedTable(headers=[])

        headers = records[0]
        rows: list[dict[str, str]] = []
        for record in records[1:]:
            padded = record + [""] * (len(headers) - len(record))
            rows.append(dict(zip(headers, padded)))
        return ParsedTable(headers=headers, rows=rows)
