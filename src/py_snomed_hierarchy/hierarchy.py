# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from typing import Iterable, Optional

from .concepts import ConceptSet
from .related import RelatedConceptResolver
from .transitive import ClosureTable


class HierarchyQuery:
    """
    Parents, children, ancestors and descendants along the is-a hierarchy.

    Ancestors and descendants are read from a ClosureTable when one is given;
    otherwise they are resolved recursively from the relationship tables.
    Parents and children are always a single hop through the resolver.
    """

    def __init__(self, resolver: RelatedConceptResolver):
        self.resolver = resolver

    def _finish(self, found: ConceptSet, concept_ids: ConceptSet, include_self: bool) -> ConceptSet:
        if include_self:
            return (found | concept_ids).sorted()
        # A concept is never its own parent, child, ancestor or descendant.
        return (found - concept_ids).sorted()

    def parents(
        self,
        concept_ids: Iterable,
        include_self: bool = False,
        closure: Optional[ClosureTable] = None,
        tables: Optional[Iterable[str]] = None,
        active_only: bool = True,
    ) -> ConceptSet:
        """Direct is-a parents. `closure` is accepted for symmetry but one-hop queries always read the index."""
        concept_ids = ConceptSet(concept_ids)
        found = self.resolver.related_concepts(
            concept_ids, tables=tables, reverse=False, recursive=False, active_only=active_only
        )
        return self._finish(found, concept_ids, include_self)

    def children(
        self,
        concept_ids: Iterable,
        include_self: bool = False,
        closure: Optional[ClosureTable] = None,
        tables: Optional[Iterable[str]] = None,
        active_only: bool = True,
    ) -> ConceptSet:
        """Direct is-a children."""
        concept_ids = ConceptSet(concept_ids)
        found = self.resolver.related_concepts(
            concept_ids, tables=tables, reverse=True, recursive=False, active_only=active_only
        )
        return self._finish(found, concept_ids, include_self)

    def ancestors(
        self,
        concept_ids: Iterable,
        include_self: bool = False,
        closure: Optional[ClosureTable] = None,
        tables: Optional[Iterable[str]] = None,
        active_only: bool = True,
    ) -> ConceptSet:
        """Parents and all higher concepts."""
        concept_ids = ConceptSet(concept_ids)
        if closure is not None:
            found = closure.ancestors_of(concept_ids)
        else:
            found = self.resolver.related_concepts(
                concept_ids, tables=tables, reverse=False, recursive=True, active_only=active_only
            )
        return self._finish(found, concept_ids, include_self)

    def descendants(
        self,
        concept_ids: Iterable,
        include_self: bool = False,
        closure: Optional[ClosureTable] = None,
        tables: Optional[Iterable[str]] = None,
        active_only: bool = True,
    ) -> ConceptSet:
        """Children and all lower concepts."""
        concept_ids = ConceptSet(concept_ids)
        if closure is not None:
            found = closure.descendants_of(concept_ids)
        else:
            found = self.resolver.related_concepts(
                concept_ids, tables=tables, reverse=True, recursive=True, active_only=active_only
            )
        return self._finish(found, concept_ids, include_self)
