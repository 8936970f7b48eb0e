"""In-memory Supabase doubles shared by the test suite."""

import copy
import re
import uuid
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

from postgrest.exceptions import APIError as PostgrestAPIError

ADMIN_HEADERS = {"x-user-role": "admin"}

_ILIKE_TERM = re.compile(r'([\w>-]+)\.ilike\."((?:[^"\\]|\\.)*)"')
_ESCAPED = re.compile(r"\\(.)")


def _lookup(row: dict[str, Any], column: str) -> Any:
    if "->>" in column:
        parent, child = column.split("->>", 1)
        return (row.get(parent) or {}).get(child)
    return row.get(column)


def _like_to_regex(like: str) -> re.Pattern[str]:
    parts = []
    chars = iter(like)
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeQuery:
    """Chainable stand-in for the PostgREST request builders the service uses."""

    def __init__(self, table: "FakeTable", action: str, payload: Any = None, columns: str = "*") -> None:
        self._table = table
        self._action = action
        self._payload = payload
        self._columns = columns
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._limit: int | None = None

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: _lookup(row, column) == value)
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: _lookup(row, column) != value)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def or_(self, filters: str) -> "FakeQuery":
        # PostgREST turns "*" into "%" before Postgres reads the LIKE pattern
        patterns = [
            (column, _like_to_regex(_ESCAPED.sub(r"\1", quoted).replace("*", "%")))
            for column, quoted in _ILIKE_TERM.findall(filters)
        ]

        def matches(row: dict[str, Any]) -> bool:
            return any(pattern.fullmatch(str(_lookup(row, column) or "")) for column, pattern in patterns)

        self._filters.append(matches)
        return self

    def _matching(self) -> list[dict[str, Any]]:
        rows = [row for row in self._table.rows if all(f(row) for f in self._filters)]
        return rows[: self._limit] if self._limit is not None else rows

    def execute(self) -> SimpleNamespace:
        self._table.calls.append(self._action)
        if self._table.fail_with is not None:
            raise self._table.fail_with

        if self._action == "select":
            rows = self._matching()
            if self._columns != "*":
                keys = [c.strip() for c in self._columns.split(",")]
                rows = [{k: row.get(k) for k in keys} for row in rows]
            return SimpleNamespace(data=copy.deepcopy(rows))

        if self._action == "insert":
            row = {"id": str(uuid.uuid4()), **copy.deepcopy(self._payload)}
            self._table.check_unique(row)
            self._table.rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])

        if self._action == "update":
            updated = []
            for row in self._matching():
                candidate = {**row, **copy.deepcopy(self._payload)}
                self._table.check_unique(candidate, ignore_id=row["id"])
                row.update(candidate)
                updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)

        if self._action == "delete":
            doomed = self._matching()
            self._table.rows = [row for row in self._table.rows if row not in doomed]
            return SimpleNamespace(data=copy.deepcopy(doomed))

        raise AssertionError(f"unsupported action {self._action}")


class FakeTable:
    """In-memory users table enforcing the unique email and profile code constraints."""

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    def check_unique(self, candidate: dict[str, Any], ignore_id: str | None = None) -> None:
        for row in self.rows:
            if row["id"] == ignore_id:
                continue
            if row["email"] == candidate["email"] or row["profile"]["code"] == candidate["profile"]["code"]:
                raise PostgrestAPIError(
                    {
                        "code": "23505",
                        "message": "duplicate key value violates unique constraint",
                        "details": None,
                        "hint": None,
                    }
                )

    def select(self, columns: str = "*") -> FakeQuery:
        return FakeQuery(self, "select", columns=columns)

    def insert(self, payload: dict[str, Any]) -> FakeQuery:
        return FakeQuery(self, "insert", payload)

    def update(self, payload: dict[str, Any]) -> FakeQuery:
        return FakeQuery(self, "update", payload)

    def delete(self) -> FakeQuery:
        return FakeQuery(self, "delete")


class FakeSupabaseClient:
    """Supabase client double exposing a single in-memory table."""

    def __init__(self) -> None:
        self.users = FakeTable()

    def table(self, name: str) -> FakeTable:
        assert name == "users", f"unexpected table {name}"
        return self.users


def make_user_payload(**overrides: Any) -> dict[str, Any]:
    """Build a valid create payload."""
    payload: dict[str, Any] = {
        "name": "Juan Pérez",
        "email": "rodri22@example.com",
        "age": 25,
        "profile": {"code": "P-002", "profileName": "basic"},
    }
    payload.update(overrides)
    return payload
