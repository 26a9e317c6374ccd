"""
Generic record insert: request parsing and value resolution.

A record is `{"table": "...", <column>: <value>, ...}`. Columns keep the
order in which they appear in the JSON body.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException, status


@dataclass(frozen=True)
class FieldValue:
    """
    A column value resolved once at parse time.

    Objects and arrays become compact JSON text; everything else (strings,
    numbers, booleans, null) is bound unchanged.
    """

    raw: Any
    structured: bool

    @classmethod
    def from_json(cls, value: Any) -> "FieldValue":
        return cls(raw=value, structured=isinstance(value, (dict, list)))

    def bound(self) -> Any:
        if self.structured:
            return json.dumps(self.raw, separators=(",", ":"), ensure_ascii=False)
        return self.raw


@dataclass(frozen=True)
class InsertRecord:
    table: Any
    fields: tuple[tuple[str, FieldValue], ...]

    @property
    def columns(self) -> list[str]:
        return [name for name, _ in self.fields]

    @property
    def values(self) -> list[Any]:
        return [value.bound() for _, value in self.fields]


def parse_record(payload: Any) -> InsertRecord:
    """
    Validate the request body shape. The table name itself is checked later,
    when the statement is built.
    """
    if not isinstance(payload, dict) or not payload.get("table"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="table required")

    fields = tuple((name, FieldValue.from_json(value)) for name, value in payload.items() if name != "table")
    if not fields:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="no fields to insert")

    return InsertRecord(table=payload["table"], fields=fields)
