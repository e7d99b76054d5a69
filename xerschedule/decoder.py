"""Tokenizer for the Primavera P6 XER text format.

An XER export is a tab-delimited, line-oriented file made of table sections:

- ``%T <TABLE_NAME>`` opens a table
- ``%F <col1> <col2> ...`` declares the columns for the rows that follow
- ``%R <val1> <val2> ...`` is a data row

The decoder knows nothing about the meaning of any table; it only collects
raw string values keyed by column name.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

TABLE_MARKER = "%T"
FIELDS_MARKER = "%F"
ROW_MARKER = "%R"


@dataclass
class Table:
    name: str
    fields: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)


def normalize_newlines(content: str) -> str:
    if content.startswith("\ufeff"):
        content = content[1:]
    return content.replace("\r\n", "\n").replace("\r", "\n")


def decode(content: str, warnings: Optional[List[str]] = None) -> Dict[str, Table]:
    """Split XER text into tables of raw string rows.

    Never raises: lines that do not fit the format are skipped. When a
    ``warnings`` list is supplied, skipped ``%F``/``%R`` lines and rows with
    more values than declared fields are reported into it.
    """
    tables: Dict[str, Table] = {}
    current: Optional[Table] = None
    active_fields: List[str] = []

    for line_no, raw_line in enumerate(normalize_newlines(content).split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue

        parts = line.split("\t")
        if len(parts) < 2:
            continue

        marker = parts[0].strip()
        if marker == TABLE_MARKER:
            name = parts[1].strip()
            current = tables.get(name)
            if current is None:
                current = Table(name=name)
                tables[name] = current
            active_fields = []
        elif marker == FIELDS_MARKER:
            if current is None:
                _warn(warnings, f"Line {line_no}: field list outside of a table ignored")
                continue
            active_fields = [name.strip() for name in parts[1:]]
            current.fields = list(active_fields)
        elif marker == ROW_MARKER:
            if current is None or not active_fields:
                _warn(warnings, f"Line {line_no}: record without a table or field list ignored")
                continue
            values = parts[1:]
            if len(values) > len(active_fields):
                _warn(
                    warnings,
                    f"Line {line_no}: {current.name} record has {len(values)} values "
                    f"for {len(active_fields)} fields; extra values dropped",
                )
            current.rows.append(
                {name: value.strip() for name, value in zip(active_fields, values)}
            )

    logger.debug(
        "Decoded %d XER tables: %s",
        len(tables),
        ", ".join(f"{name}={len(table.rows)}" for name, table in tables.items()),
    )
    return tables


def _warn(warnings: Optional[List[str]], message: str) -> None:
    if warnings is not None:
        warnings.append(message)


__all__ = ["Table", "decode", "normalize_newlines"]
