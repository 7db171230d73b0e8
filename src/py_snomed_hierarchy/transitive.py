# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Transitive closure of the is-a hierarchy over a chosen subset of concepts.

The closure is computed by joining the edge list to itself on the shared
middle concept until no new (child, parent) pair appears. Because the cost is
dominated by that self-join, the edges are first restricted to the ones that
touch the requested subset.
"""
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import polars as pl
from rich.console import Console

from .concepts import CONCEPT_ID_DTYPE, ConceptSet
from .config import settings
from .index import RelationshipIndex
from .models import ClosureRow

console = Console()

CLOSURE_SCHEMA = {
    "ancestor_id": CONCEPT_ID_DTYPE,
    "descendant_id": CONCEPT_ID_DTYPE,
}


class ClosureTable:
    """
    Precomputed ancestor/descendant pairs.

    Rows are kept sorted by descendant_id, and hash indexes on descendant_id
    (primary) and ancestor_id (secondary) serve the ancestor and descendant
    lookups. The table is a cache: it is not refreshed if the relationship
    tables it was built from change.
    """

    def __init__(self, frame: pl.DataFrame):
        self.frame = (
            frame.select([pl.col(c).cast(dtype) for c, dtype in CLOSURE_SCHEMA.items()])
            .unique()
            .sort(["descendant_id", "ancestor_id"])
        )
        self._by_descendant = self._build_index("descendant_id", "ancestor_id")
        self._by_ancestor = self._build_index("ancestor_id", "descendant_id")

    def _build_index(self, key: str, value: str) -> Dict[int, Tuple[int, ...]]:
        grouped = self.frame.group_by(key, maintain_order=True).agg(pl.col(value))
        return {k: tuple(v) for k, v in grouped.iter_rows()}

    @classmethod
    def from_rows(cls, rows: Iterable[ClosureRow]) -> "ClosureTable":
        rows = list(rows)
        columns = {name: [getattr(r, name) for r in rows] for name in CLOSURE_SCHEMA}
        return cls(pl.DataFrame(columns, schema=CLOSURE_SCHEMA))

    def __len__(self) -> int:
        return self.frame.height

    def rows(self) -> List[ClosureRow]:
        return [ClosureRow(**row) for row in self.frame.iter_rows(named=True)]

    def ancestors_of(self, concept_ids: Iterable) -> ConceptSet:
        out: List[int] = []
        for concept_id in ConceptSet(concept_ids):
            out.extend(self._by_descendant.get(concept_id, ()))
        return ConceptSet(out)

    def descendants_of(self, concept_ids: Iterable) -> ConceptSet:
        out: List[int] = []
        for concept_id in ConceptSet(concept_ids):
            out.extend(self._by_ancestor.get(concept_id, ()))
        return ConceptSet(out)

    def write_csv(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        self.frame.write_csv(path)
        console.log(f"Wrote {self.frame.height} closure rows to {path.name}")
        return path

    @classmethod
    def read_csv(cls, path: Union[str, Path]) -> "ClosureTable":
        return cls(pl.read_csv(path, schema_overrides=CLOSURE_SCHEMA))


class TransitiveClosureBuilder:
    """Builds ClosureTable objects from the is-a edges of a RelationshipIndex."""

    def __init__(self, index: RelationshipIndex):
        self.index = index

    def _is_a_edges(self, concept_ids: ConceptSet, tables: List[str], active_only: bool) -> pl.DataFrame:
        """Is-a edges with at least one end inside the subset, as (child_id, parent_id)."""
        ids = concept_ids.to_series()
        frames = []
        for name in tables:
            table = self.index.table(name)
            condition = (
                pl.col("source_id").is_in(ids) | pl.col("destination_id").is_in(ids)
            ) & (pl.col("type_id") == settings.is_a_type_id)
            if active_only:
                condition = condition & pl.col("active")
            frames.append(
                table.filter(condition).select(
                    pl.col("source_id").alias("child_id"),
                    pl.col("destination_id").alias("parent_id"),
                )
            )
        return pl.concat(frames, how="vertical").drop_nulls().unique(maintain_order=True)

    def create_transitive(
        self,
        concept_ids: Iterable,
        tables: Optional[Iterable[str]] = None,
        active_only: bool = True,
    ) -> ClosureTable:
        """
        Returns the transitive closure of is-a restricted to `concept_ids`.

        Every row has both ends in the subset and ancestor_id != descendant_id.
        Cyclic is-a data terminates: all members of a cycle become mutual
        ancestors and descendants of each other.
        """
        concept_ids = ConceptSet(concept_ids)
        table_names = self.index.validate_tables(
            settings.relationship_tables if tables is None else tables
        )
        if not concept_ids:
            return ClosureTable(pl.DataFrame(schema=CLOSURE_SCHEMA))

        working = self._is_a_edges(concept_ids, table_names, active_only)
        console.log(f"Building transitive closure for {len(concept_ids)} concepts from {working.height} is-a edges...")

        old_rows, new_rows = 0, working.height
        rounds = 0
        while new_rows > old_rows:
            two_hop = (
                working.rename({"parent_id": "self_id"})
                .join(working.rename({"child_id": "self_id"}), on="self_id", how="inner")
                .select("child_id", "parent_id")
            )
            working = pl.concat([working, two_hop], how="vertical").unique(maintain_order=True)
            old_rows, new_rows = new_rows, working.height
            rounds += 1

        ids = concept_ids.to_series()
        closure = working.filter(
            pl.col("child_id").is_in(ids)
            & pl.col("parent_id").is_in(ids)
            & (pl.col("child_id") != pl.col("parent_id"))
        ).select(
            pl.col("parent_id").alias("ancestor_id"),
            pl.col("child_id").alias("descendant_id"),
        )
        console.log(f"Transitive closure converged after {rounds} rounds with {closure.height} rows.")
        return ClosureTable(closure)
