from datetime import date
from pydantic import BaseModel
from typing import Optional

class Relationship(BaseModel):
    """
    Represents a single edge of a relationship table.
    "source has relation type_id to destination", e.g. is-a or finding site.
    """
    source_id: int
    destination_id: int
    type_id: int
    relationship_group: int = 0
    active: bool = True
    effective_time: Optional[date] = None

class Description(BaseModel):
    """
    Represents a description (term) attached to a concept.
    Only read for labels and semantic tags.
    """
    concept_id: int
    term: str
    type_id: int
    active: bool = True
    effective_time: Optional[date] = None

class ClosureRow(BaseModel):
    """
    One row of a transitive closure table: ancestor_id reaches descendant_id
    through one or more is-a edges.
    """
    ancestor_id: int
    descendant_id: int

class SimplifiedConcept(BaseModel):
    """
    Result of simplify for one input position. ancestor_id equals original_id
    when no single matching ancestor was found.
    """
    original_id: int
    ancestor_id: int
