"""
Adapter around csv.DictReader.

The first line is the header; blank lines are skipped. Problems are collected
as messages instead of raised, so the caller decides whether a file with
errors is usable. A hard csv.Error stops reading at that point.
"""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field


@dataclass
class ParseResult:
    rows: list[dict[str, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)


def _decode(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    return data.decode("utf-8-sig")


def parse_csv(data: bytes | str) -> ParseResult:
    result = ParseResult()
    try:
        text = _decode(data)
    except UnicodeDecodeError as exc:
        result.errors.append(f"File is not valid UTF-8 text ({exc.reason} at byte {exc.start})")
        return result

    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    try:
        header = reader.fieldnames
        if not header:
            return result
        result.fields = [name.strip() for name in header]
        reader.fieldnames = result.fields
        expected = len(result.fields)

        for index, row in enumerate(reader, start=1):
            extra = row.pop(None, None)
            if extra:
                result.errors.append(
                    f"Row {index}: Too many fields: expected {expected} fields "
                    f"but parsed {expected + len(extra)}"
                )
                continue
            present = sum(1 for name in result.fields if row.get(name) is not None)
            if present < expected:
                result.errors.append(
                    f"Row {index}: Too few fields: expected {expected} fields but parsed {present}"
                )
                continue
            result.rows.append(row)
    except csv.Error as exc:
        result.errors.append(f"Line {reader.line_num}: {exc}")
    return result
