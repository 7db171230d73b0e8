# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from typing import Iterable, List, Optional, Sequence, Tuple

import polars as pl

from .concepts import CONCEPT_ID_DTYPE, ConceptSet, as_concept_id
from .config import settings
from .descriptions import DescriptionStore
from .index import RELATIONSHIP_SCHEMA, RelationshipIndex

ATTRIBUTE_COLUMNS = ["source_id", "destination_id", "type_id", "relationship_group", "active"]

ATTRIBUTE_SCHEMA = {
    **{column: RELATIONSHIP_SCHEMA[column] for column in ATTRIBUTE_COLUMNS},
    "source_desc": pl.Utf8,
    "destination_desc": pl.Utf8,
    "type_desc": pl.Utf8,
}

_TRIPLE_SCHEMA = {
    "source_id": CONCEPT_ID_DTYPE,
    "destination_id": CONCEPT_ID_DTYPE,
    "type_id": CONCEPT_ID_DTYPE,
}


def _as_id_list(values) -> List[int]:
    if values is None:
        return []
    if isinstance(values, (int, str)):
        values = [values]
    return [as_concept_id(v) for v in values]


def _broadcast(*columns: Sequence[int]) -> List[Tuple[int, ...]]:
    """Recycles shorter columns to the length of the longest one."""
    longest = max(len(c) for c in columns)
    for column in columns:
        if longest % len(column) != 0:
            raise ValueError(
                f"Cannot recycle an input of length {len(column)} to length {longest}."
            )
    return [tuple(c[i % len(c)] for c in columns) for i in range(longest)]


class AttributeQuery:
    """Attribute (relationship) tests and retrieval for sets of concepts."""

    def __init__(self, index: RelationshipIndex, descriptions: Optional[DescriptionStore] = None):
        self.index = index
        self.descriptions = descriptions or DescriptionStore()

    def has_attributes(
        self,
        source_ids,
        destination_ids,
        type_ids=None,
        tables: Optional[Iterable[str]] = None,
        active_only: bool = True,
    ) -> List[bool]:
        """
        For each (source, destination, type) triple, whether that relationship exists
        in any of the tables. Inputs are recycled to the longest one; the result has
        one entry per triple in input order, duplicates included.
        """
        types = _as_id_list(settings.is_a_type_id if type_ids is None else type_ids)
        if not types:
            raise ValueError("At least one relationship type id is required.")
        sources = _as_id_list(source_ids)
        destinations = _as_id_list(destination_ids)
        if not sources or not destinations:
            return []
        table_names = self.index.validate_tables(
            settings.relationship_tables if tables is None else tables
        )

        triples = _broadcast(sources, destinations, types)
        to_match = pl.DataFrame(
            list(dict.fromkeys(triples)), schema=_TRIPLE_SCHEMA, orient="row"
        )
        keys = list(_TRIPLE_SCHEMA)

        found = set()
        for name in table_names:
            table = self.index.table(name)
            if active_only and self.index.inactive_included:
                table = table.filter(pl.col("active"))
            matched = to_match.join(table.select(keys), on=keys, how="semi")
            found.update(matched.iter_rows())
        return [triple in found for triple in triples]

    def attr_concept(
        self,
        concept_ids: Iterable,
        tables: Optional[Iterable[str]] = None,
        active_only: bool = True,
    ) -> pl.DataFrame:
        """
        All relationships in which the concepts are the source or the destination,
        labelled with the display terms of source, destination and type.
        """
        concept_ids = ConceptSet(concept_ids)
        table_names = self.index.validate_tables(
            settings.relationship_tables if tables is None else tables
        )
        if not concept_ids:
            return pl.DataFrame(schema=ATTRIBUTE_SCHEMA)
        as_source = [
            self.index.edges(concept_ids, name).select(ATTRIBUTE_COLUMNS) for name in table_names
        ]
        as_destination = [
            self.index.edges(concept_ids, name, reverse=True).select(ATTRIBUTE_COLUMNS)
            for name in table_names
        ]
        out = pl.concat(as_source + as_destination, how="vertical")
        if active_only and self.index.inactive_included:
            out = out.filter(pl.col("active"))

        return out.with_columns(
            pl.Series("source_desc", self.descriptions.terms(out.get_column("source_id")), dtype=pl.Utf8),
            pl.Series("destination_desc", self.descriptions.terms(out.get_column("destination_id")), dtype=pl.Utf8),
            pl.Series("type_desc", self.descriptions.terms(out.get_column("type_id")), dtype=pl.Utf8),
        )
