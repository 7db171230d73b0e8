# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Read-only access to the description table, used for display terms and for
the semantic tag carried in the fully specified name.
"""
import re
from typing import Dict, Iterable, List, Optional

import polars as pl

from .concepts import CONCEPT_ID_DTYPE, as_concept_id
from .config import settings
from .models import Description

DESCRIPTION_SCHEMA = {
    "concept_id": CONCEPT_ID_DTYPE,
    "term": pl.Utf8,
    "type_id": CONCEPT_ID_DTYPE,
    "active": pl.Boolean,
    "effective_time": pl.Date,
}

# "Heart failure (disorder)" -> "disorder"
SEMANTIC_TAG_PATTERN = re.compile(r"^.*\(([A-Za-z0-9/+ ]+)\)$")


def description_frame(descriptions: Iterable[Description]) -> pl.DataFrame:
    """Builds a description table from Description models."""
    rows = list(descriptions)
    columns = {name: [getattr(d, name) for d in rows] for name in DESCRIPTION_SCHEMA}
    return pl.DataFrame(columns, schema=DESCRIPTION_SCHEMA)


class DescriptionStore:
    """Looks up the current term of a concept for a given description type."""

    def __init__(self, frame: Optional[pl.DataFrame] = None):
        if frame is None:
            frame = pl.DataFrame(schema=DESCRIPTION_SCHEMA)
        self.frame = frame.select(
            [pl.col(column).cast(dtype) for column, dtype in DESCRIPTION_SCHEMA.items()]
        )
        self._cache: Dict[int, Dict[int, str]] = {}

    @classmethod
    def from_descriptions(cls, descriptions: Iterable[Description]) -> "DescriptionStore":
        return cls(description_frame(descriptions))

    def _latest_terms(self, type_id: int) -> Dict[int, str]:
        """Maps concept id to the term of its most recent active description of one type."""
        if type_id not in self._cache:
            latest = (
                self.frame.filter(pl.col("active") & (pl.col("type_id") == type_id))
                .sort(["concept_id", "effective_time"], descending=[False, True], nulls_last=True)
                .unique(subset="concept_id", keep="first", maintain_order=True)
            )
            self._cache[type_id] = dict(
                zip(latest.get_column("concept_id").to_list(), latest.get_column("term").to_list())
            )
        return self._cache[type_id]

    def terms(self, concept_ids: Iterable, type_id: Optional[int] = None) -> List[Optional[str]]:
        """
        One term per input id, keeping order and duplicates.
        Defaults to synonyms; concepts without a matching description give None.
        """
        if type_id is None:
            type_id = settings.synonym_type_id
        lookup = self._latest_terms(type_id)
        return [None if c is None else lookup.get(as_concept_id(c)) for c in concept_ids]

    def term(self, concept_id, type_id: Optional[int] = None) -> Optional[str]:
        return self.terms([concept_id], type_id=type_id)[0]

    def semantic_type(self, concept_ids: Iterable) -> List[str]:
        """Semantic tags taken from the fully specified names; '' when there is none."""
        tags = []
        for term in self.terms(concept_ids, type_id=settings.fsn_type_id):
            match = SEMANTIC_TAG_PATTERN.match(term) if term else None
            tags.append(match.group(1) if match else "")
        return tags
