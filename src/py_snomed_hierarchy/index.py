# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

import polars as pl

from .concepts import CONCEPT_ID_DTYPE, ConceptSet
from .models import Relationship

RELATIONSHIP_SCHEMA = {
    "source_id": CONCEPT_ID_DTYPE,
    "destination_id": CONCEPT_ID_DTYPE,
    "type_id": CONCEPT_ID_DTYPE,
    "relationship_group": pl.Int64,
    "active": pl.Boolean,
    "effective_time": pl.Date,
}

# Columns that may be omitted from a supplied table, with the value used to fill them.
_OPTIONAL_COLUMNS = {
    "relationship_group": 0,
    "active": True,
    "effective_time": None,
}

TypeIds = Union[int, str, Iterable[Union[int, str]]]


def relationship_frame(relationships: Iterable[Relationship]) -> pl.DataFrame:
    """Builds a relationship table from Relationship models."""
    rows = list(relationships)
    columns = {name: [getattr(r, name) for r in rows] for name in RELATIONSHIP_SCHEMA}
    return pl.DataFrame(columns, schema=RELATIONSHIP_SCHEMA)


def _normalize_table(name: str, frame: pl.DataFrame) -> pl.DataFrame:
    missing = [c for c in ("source_id", "destination_id", "type_id") if c not in frame.columns]
    if missing:
        raise ValueError(f"Relationship table '{name}' is missing required columns: {missing}")
    fills = [
        pl.lit(default).alias(column)
        for column, default in _OPTIONAL_COLUMNS.items()
        if column not in frame.columns
    ]
    if fills:
        frame = frame.with_columns(fills)
    return frame.select(
        [pl.col(column).cast(dtype) for column, dtype in RELATIONSHIP_SCHEMA.items()]
    )


def normalize_type_ids(type_ids: TypeIds) -> ConceptSet:
    """Relation types as a non-empty ConceptSet."""
    types = ConceptSet(type_ids)
    if not types:
        raise ValueError("At least one relationship type id is required.")
    return types


class RelationshipIndex:
    """
    Read-only access to one or more named relationship tables.

    Each table is a polars DataFrame with the columns of RELATIONSHIP_SCHEMA.
    Lookups are joins keyed on the anchor side and the relationship type, so
    the same table serves (source, type), (destination, type) and
    (source, destination, type) access.
    """

    def __init__(
        self,
        tables: Mapping[str, pl.DataFrame],
        inactive_included: Optional[bool] = None,
    ):
        self._tables: Dict[str, pl.DataFrame] = {
            name: _normalize_table(name, frame) for name, frame in tables.items()
        }
        if inactive_included is None:
            inactive_included = any(
                frame.height > 0 and not frame.get_column("active").all()
                for frame in self._tables.values()
            )
        self._inactive_included = inactive_included

    @classmethod
    def from_relationships(
        cls,
        tables: Mapping[str, Iterable[Relationship]],
        inactive_included: Optional[bool] = None,
    ) -> "RelationshipIndex":
        return cls(
            {name: relationship_frame(rows) for name, rows in tables.items()},
            inactive_included=inactive_included,
        )

    @property
    def table_names(self) -> List[str]:
        return list(self._tables)

    @property
    def inactive_included(self) -> bool:
        """Whether any table holds inactive rows; if not, active-only filtering is a no-op."""
        return self._inactive_included

    def table(self, name: str) -> pl.DataFrame:
        try:
            return self._tables[name]
        except KeyError:
            raise ValueError(
                f"Unknown relationship table '{name}'. Available tables: {self.table_names}"
            ) from None

    def validate_tables(self, tables: Iterable[str]) -> List[str]:
        """Checks that a non-empty list of known table names was given."""
        if isinstance(tables, str):
            tables = [tables]
        names = list(dict.fromkeys(tables))
        if not names:
            raise ValueError("At least one relationship table name is required.")
        for name in names:
            self.table(name)
        return names

    def lookup(
        self,
        anchors: Iterable[int],
        type_ids: TypeIds,
        table: str,
        reverse: bool = False,
        active_only: bool = True,
    ) -> ConceptSet:
        """
        Returns the partners of the anchors in one table.

        Forward lookups match anchors against source_id and return
        destination_id; reverse lookups do the opposite. When active_only is
        set, `active = True` is part of the join key, so inactive edges are
        never matched.
        """
        anchor_column, partner_column = self._columns(reverse)
        anchors = ConceptSet(anchors)
        if not anchors:
            return ConceptSet()

        keys = pl.DataFrame(anchors.to_series(anchor_column)).join(
            pl.DataFrame(normalize_type_ids(type_ids).to_series("type_id")),
            how="cross",
        )
        on = [anchor_column, "type_id"]
        if active_only:
            keys = keys.with_columns(pl.lit(True).alias("active"))
            on.append("active")

        matched = self.table(table).join(keys, on=on, how="inner")
        return ConceptSet(matched.get_column(partner_column).drop_nulls().to_list())

    def edges(
        self,
        anchors: Iterable[int],
        table: str,
        reverse: bool = False,
    ) -> pl.DataFrame:
        """All rows of a table whose anchor side is one of the given concepts."""
        anchor_column, _ = self._columns(reverse)
        keys = pl.DataFrame(ConceptSet(anchors).to_series(anchor_column))
        return self.table(table).join(keys, on=anchor_column, how="inner")

    @staticmethod
    def _columns(reverse: bool) -> Tuple[str, str]:
        if reverse:
            return "destination_id", "source_id"
        return "source_id", "destination_id"
