# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from functools import cached_property
from typing import Iterable, Mapping, Optional

from .attributes import AttributeQuery
from .descriptions import DescriptionStore
from .hierarchy import HierarchyQuery
from .index import RelationshipIndex
from .models import Description, Relationship
from .related import RelatedConceptResolver
from .simplify import ConceptSimplifier
from .transitive import TransitiveClosureBuilder


class Terminology:
    """
    An immutable terminology snapshot: the relationship tables, the
    description table, and the query services built on top of them.
    """

    def __init__(self, index: RelationshipIndex, descriptions: Optional[DescriptionStore] = None):
        self.index = index
        self.descriptions = descriptions or DescriptionStore()

    @classmethod
    def from_records(
        cls,
        relationships: Mapping[str, Iterable[Relationship]],
        descriptions: Iterable[Description] = (),
        inactive_included: Optional[bool] = None,
    ) -> "Terminology":
        return cls(
            RelationshipIndex.from_relationships(relationships, inactive_included=inactive_included),
            DescriptionStore.from_descriptions(descriptions),
        )

    @cached_property
    def resolver(self) -> RelatedConceptResolver:
        return RelatedConceptResolver(self.index)

    @cached_property
    def closure_builder(self) -> TransitiveClosureBuilder:
        return TransitiveClosureBuilder(self.index)

    @cached_property
    def hierarchy(self) -> HierarchyQuery:
        return HierarchyQuery(self.resolver)

    @cached_property
    def attributes(self) -> AttributeQuery:
        return AttributeQuery(self.index, self.descriptions)

    @cached_property
    def simplifier(self) -> ConceptSimplifier:
        return ConceptSimplifier(self.hierarchy)
