# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Maps concepts to their closest single ancestor within a target set, e.g.
'Heart failure' for 'Heart failure with reduced ejection fraction'.

Each input position walks up the is-a hierarchy one level per round. A
position stops at the first level where a target is found; if that level
holds more than one target the original concept is kept.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from rich.console import Console

from .concepts import ConceptSet, as_concept_id
from .config import settings
from .hierarchy import HierarchyQuery
from .models import SimplifiedConcept

console = Console()


class MatchState(str, Enum):
    SEARCHING = "searching"
    MATCHED = "matched"
    AMBIGUOUS = "ambiguous"
    EXHAUSTED = "exhausted"


@dataclass
class _Position:
    """Search state for one input occurrence."""
    original_id: int
    candidates: ConceptSet
    matches: Set[int] = field(default_factory=set)
    state: MatchState = MatchState.SEARCHING

    def check(self, targets: ConceptSet):
        self.matches.update(c for c in self.candidates if c in targets)
        if len(self.matches) > 1:
            self.state = MatchState.AMBIGUOUS
        elif len(self.matches) == 1:
            self.state = MatchState.MATCHED

    def advance(self, parents: ConceptSet):
        self.candidates = parents
        if not parents:
            self.state = MatchState.EXHAUSTED

    def result(self) -> SimplifiedConcept:
        if self.state == MatchState.MATCHED:
            (ancestor_id,) = self.matches
        else:
            ancestor_id = self.original_id
        return SimplifiedConcept(original_id=self.original_id, ancestor_id=ancestor_id)


class ConceptSimplifier:
    """Finds the closest single ancestor of each concept within a set of allowed ancestors."""

    def __init__(self, hierarchy: HierarchyQuery, round_limit: Optional[int] = None):
        self.hierarchy = hierarchy
        self.round_limit = settings.simplify_round_limit if round_limit is None else round_limit

    def simplify(
        self,
        concept_ids: Iterable,
        ancestor_ids: Iterable,
        tables: Optional[Iterable[str]] = None,
    ) -> List[SimplifiedConcept]:
        """
        Returns one SimplifiedConcept per input concept, in input order and
        including duplicates. A concept that is itself in `ancestor_ids` maps
        to itself. Concepts with no match, or with several matches at the
        first level where any match appears, keep their original id, as do
        concepts still unresolved when the round limit is reached.
        """
        if isinstance(concept_ids, (int, str)):
            concept_ids = [concept_ids]
        positions = [
            _Position(original_id=cid, candidates=ConceptSet([cid]))
            for cid in (as_concept_id(c) for c in concept_ids)
        ]
        if not positions:
            return []
        targets = ConceptSet(ancestor_ids)

        rounds = 0
        searching = positions
        while searching and rounds < self.round_limit:
            for position in searching:
                position.check(targets)
            searching = [p for p in positions if p.state == MatchState.SEARCHING]

            # Positions sharing a frontier (e.g. duplicate inputs) share one lookup.
            expanded: Dict[Tuple[int, ...], ConceptSet] = {}
            for position in searching:
                key = tuple(position.candidates)
                if key not in expanded:
                    expanded[key] = self.hierarchy.parents(position.candidates, tables=tables)
                position.advance(expanded[key])
            searching = [p for p in positions if p.state == MatchState.SEARCHING]
            rounds += 1

        matched = sum(1 for p in positions if p.state == MatchState.MATCHED)
        console.log(f"Simplified {matched} of {len(positions)} concepts in {rounds} rounds.")
        return [p.result() for p in positions]
