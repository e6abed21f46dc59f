"""Partial-update and UPSERT statement builder for user profiles.

Turns a sparse mapping of validated fields into parameterized SQL that only
touches the columns the caller actually supplied. Placeholders are numbered
``:p1``, ``:p2``, ... in the same order the values are collected, so the
rendered statement and its bind parameters always line up.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

# Field name -> new value. A missing key means "leave unchanged".
PartialUpdate = Mapping[str, Optional[str]]

CORE_COLUMNS: tuple[str, ...] = ("first_name", "last_name")

# Canonical order; column lists and bind parameters follow it exactly.
PROFILE_COLUMNS: tuple[str, ...] = (
    "headline",
    "bio",
    "avatar_url",
    "cover_photo_url",
    "location",
    "phone_number",
    "website_url",
    "linkedin_url",
    "github_url",
)

TIMESTAMP_REFRESH = "updated_at = CURRENT_TIMESTAMP"


def normalize_value(value: Any) -> Any:
    """Map an explicitly empty value to NULL so the column is cleared."""
    if value is None or value == "":
        return None
    return value


def placeholder(position: int) -> str:
    return f":p{position}"


@dataclass(frozen=True)
class PartialUpdateFragments:
    """SQL fragments for the supplied subset of a fixed column list.

    ``columns``, ``placeholders``, ``set_clauses`` and ``values`` are
    parallel: index ``i`` in each refers to the same field.
    """

    columns: tuple[str, ...] = ()
    placeholders: tuple[str, ...] = ()
    set_clauses: tuple[str, ...] = ()
    values: tuple[Any, ...] = ()
    start: int = 1

    @property
    def is_empty(self) -> bool:
        return not self.columns

    @property
    def next_position(self) -> int:
        """Position of the first placeholder after these fragments."""
        return self.start + len(self.values)

    @property
    def params(self) -> dict[str, Any]:
        return {
            name[1:]: value for name, value in zip(self.placeholders, self.values)
        }


@dataclass(frozen=True)
class SqlStatement:
    """A rendered statement and its named bind parameters."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)


def build_partial_update(
    fields: PartialUpdate,
    columns: Sequence[str],
    start: int = 1,
) -> PartialUpdateFragments:
    """Collect fragments for every column in ``columns`` present in ``fields``.

    Pure function: no I/O, no request state. Values are normalized with
    :func:`normalize_value`. Placeholders are numbered from ``start``.
    """
    out_columns: list[str] = []
    out_placeholders: list[str] = []
    out_set_clauses: list[str] = []
    out_values: list[Any] = []

    position = start
    for column in columns:
        if column not in fields:
            continue
        marker = placeholder(position)
        out_columns.append(column)
        out_placeholders.append(marker)
        out_set_clauses.append(f"{column} = {marker}")
        out_values.append(normalize_value(fields[column]))
        position += 1

    return PartialUpdateFragments(
        columns=tuple(out_columns),
        placeholders=tuple(out_placeholders),
        set_clauses=tuple(out_set_clauses),
        values=tuple(out_values),
        start=start,
    )


def build_core_update(fields: PartialUpdate, user_id: int) -> SqlStatement | None:
    """UPDATE for the users table, or None when no core field was supplied.

    The SET list holds only the supplied name fields plus the timestamp
    refresh; the user id is bound last for the WHERE clause.
    """
    fragments = build_partial_update(fields, CORE_COLUMNS)
    if fragments.is_empty:
        return None

    id_position = fragments.next_position
    set_list = ", ".join((*fragments.set_clauses, TIMESTAMP_REFRESH))
    sql = f"UPDATE users SET {set_list} WHERE id = {placeholder(id_position)}"

    params = fragments.params
    params[f"p{id_position}"] = user_id
    return SqlStatement(sql=sql, params=params)


def profile_upsert_fragments(fields: PartialUpdate, user_id: int) -> PartialUpdateFragments:
    """Fragments for the user_profiles UPSERT, with the user id leading.

    The user id is always column one and ``:p1``. The SET list used by the
    ON CONFLICT branch ends with the timestamp refresh, so every list has
    one entry more than the number of supplied profile fields.
    """
    supplied = build_partial_update(fields, PROFILE_COLUMNS, start=2)
    return PartialUpdateFragments(
        columns=("user_id", *supplied.columns),
        placeholders=(placeholder(1), *supplied.placeholders),
        set_clauses=(*supplied.set_clauses, TIMESTAMP_REFRESH),
        values=(user_id, *supplied.values),
        start=1,
    )


def build_profile_upsert(fields: PartialUpdate, user_id: int) -> SqlStatement | None:
    """INSERT ... ON CONFLICT (user_id) DO UPDATE for user_profiles.

    Returns None when no profile field was supplied. Creates the row on first
    write; later writes touch only the supplied columns.
    """
    fragments = profile_upsert_fragments(fields, user_id)
    if len(fragments.columns) == 1:
        return None

    sql = (
        f"INSERT INTO user_profiles ({', '.join(fragments.columns)}, updated_at) "
        f"VALUES ({', '.join(fragments.placeholders)}, CURRENT_TIMESTAMP) "
        "ON CONFLICT (user_id) DO UPDATE "
        f"SET {', '.join(fragments.set_clauses)}"
    )
    return SqlStatement(sql=sql, params=fragments.params)
