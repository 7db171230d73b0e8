# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from typing import Iterable, List, Optional

from .concepts import ConceptSet
from .config import settings
from .index import RelationshipIndex, TypeIds, normalize_type_ids


class RelatedConceptResolver:
    """
    Finds concepts with a given relation to a set of anchor concepts,
    either one hop away or by repeated expansion until nothing new is found.
    """

    def __init__(self, index: RelationshipIndex):
        self.index = index

    def related_concepts(
        self,
        concept_ids: Iterable,
        type_id: Optional[TypeIds] = None,
        tables: Optional[Iterable[str]] = None,
        reverse: bool = False,
        recursive: bool = False,
        active_only: bool = True,
    ) -> ConceptSet:
        """
        Returns the concepts related to `concept_ids` by `type_id`.

        Args:
            concept_ids: anchor concepts.
            type_id: relationship type(s); defaults to is-a.
            tables: relationship tables to consult; results are unioned.
            reverse: follow edges from destination to source instead.
            recursive: keep expanding until a pass adds no new concept. The
                result then includes the anchors themselves.
            active_only: ignore inactive edges.
        """
        anchors = ConceptSet(concept_ids)
        if not anchors:
            return ConceptSet()

        types = normalize_type_ids(settings.is_a_type_id if type_id is None else type_id)
        table_names = self.index.validate_tables(
            settings.relationship_tables if tables is None else tables
        )

        found = self._one_hop(anchors, types, table_names, reverse, active_only)
        if not recursive:
            return found

        # Only concepts added in the last pass need to be expanded again.
        closure = anchors
        frontier = found - closure
        while frontier:
            closure = closure | frontier
            found = self._one_hop(frontier, types, table_names, reverse, active_only)
            frontier = found - closure
        return closure

    def _one_hop(
        self,
        anchors: ConceptSet,
        types: ConceptSet,
        tables: List[str],
        reverse: bool,
        active_only: bool,
    ) -> ConceptSet:
        out = ConceptSet()
        for table in tables:
            out = out | self.index.lookup(
                anchors, types, table, reverse=reverse, active_only=active_only
            )
        return out
