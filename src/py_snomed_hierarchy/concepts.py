# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
ConceptSet: the deduplicated, ordered collection of concept ids passed
between every query in this package.
"""
import operator
from typing import Any, Iterable, Iterator, Sequence, Union

import polars as pl

# SNOMED CT identifiers have at most 18 digits, so a signed 64-bit column is wide enough.
CONCEPT_ID_DTYPE = pl.Int64
MAX_CONCEPT_ID = 2 ** 63 - 1

ConceptLike = Union[int, str]


def as_concept_id(value: Any) -> int:
    """Converts an int, numpy integer or digit string into a concept id."""
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a valid concept id.")
    if isinstance(value, str):
        text = value.strip()
        if not text.isdigit():
            raise ValueError(f"'{value}' is not a valid concept id.")
        concept_id = int(text)
    else:
        try:
            concept_id = operator.index(value)
        except TypeError as e:
            raise ValueError(f"{value!r} is not a valid concept id.") from e
    if concept_id < 0 or concept_id > MAX_CONCEPT_ID:
        raise ValueError(f"Concept id {concept_id} is outside the 64-bit identifier range.")
    return concept_id


class ConceptSet(Sequence[int]):
    """
    An immutable, ordered set of concept ids.

    Order is first occurrence; duplicates collapse and null entries are
    dropped. Equality against a list or tuple is order sensitive, against a
    set it is not.
    """

    __slots__ = ("_ids", "_members")

    def __init__(self, concept_ids: Union[ConceptLike, Iterable[Any], None] = ()):
        if concept_ids is None:
            concept_ids = ()
        elif isinstance(concept_ids, (int, str)):
            concept_ids = (concept_ids,)
        ids = dict.fromkeys(as_concept_id(c) for c in concept_ids if c is not None)
        self._ids = tuple(ids)
        self._members = frozenset(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ConceptSet(self._ids[index])
        return self._ids[index]

    def __contains__(self, concept_id: object) -> bool:
        return concept_id in self._members

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConceptSet):
            return self._ids == other._ids
        if isinstance(other, (set, frozenset)):
            return self._members == other
        if isinstance(other, (list, tuple)):
            return self._ids == tuple(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"ConceptSet({list(self._ids)!r})"

    def __or__(self, other: Iterable[Any]) -> "ConceptSet":
        return self.union(other)

    def __and__(self, other: Iterable[Any]) -> "ConceptSet":
        return self.intersection(other)

    def __sub__(self, other: Iterable[Any]) -> "ConceptSet":
        return self.difference(other)

    def union(self, *others: Iterable[Any]) -> "ConceptSet":
        combined = list(self._ids)
        for other in others:
            combined.extend(ConceptSet(other))
        return ConceptSet(combined)

    def intersection(self, other: Iterable[Any]) -> "ConceptSet":
        keep = set(ConceptSet(other))
        return ConceptSet(c for c in self._ids if c in keep)

    def difference(self, other: Iterable[Any]) -> "ConceptSet":
        drop = set(ConceptSet(other))
        return ConceptSet(c for c in self._ids if c not in drop)

    def sorted(self) -> "ConceptSet":
        return ConceptSet(sorted(self._ids))

    def to_set(self) -> frozenset:
        return self._members

    def to_series(self, name: str = "concept_id") -> pl.Series:
        return pl.Series(name, list(self._ids), dtype=CONCEPT_ID_DTYPE)
