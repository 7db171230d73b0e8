"""
Tests for the ConceptSimplifier.
"""
from py_snomed_hierarchy.simplify import ConceptSimplifier

from sample_snomed import (
    CLINICAL_FINDING, DISEASE, HEART_DISEASE, KIDNEY_DISEASE, HEART_FAILURE,
    ACUTE_HEART_FAILURE, SYSTOLIC_HEART_FAILURE, HFREF, CARDIORENAL_SYNDROME,
    build_is_a_terminology,
)


def _ancestors(results):
    return [r.ancestor_id for r in results]


def test_cat_and_dog_disease():
    cat_disease, dog_disease, disease = 1001, 1002, 1000
    terminology = build_is_a_terminology([(cat_disease, disease), (dog_disease, disease)])
    results = terminology.simplifier.simplify([cat_disease, dog_disease, disease], [disease])
    assert [r.original_id for r in results] == [cat_disease, dog_disease, disease]
    assert _ancestors(results) == [disease, disease, disease]


def test_concept_in_the_target_set_maps_to_itself(terminology):
    results = terminology.simplifier.simplify([HEART_FAILURE], [HEART_FAILURE, HEART_DISEASE])
    assert _ancestors(results) == [HEART_FAILURE]


def test_closest_target_wins(terminology):
    results = terminology.simplifier.simplify(
        [ACUTE_HEART_FAILURE], [HEART_FAILURE, DISEASE], tables=["RELATIONSHIP"]
    )
    assert _ancestors(results) == [HEART_FAILURE]


def test_several_targets_at_the_same_level_keep_the_original(terminology):
    results = terminology.simplifier.simplify([CARDIORENAL_SYNDROME], [HEART_DISEASE, KIDNEY_DISEASE])
    assert _ancestors(results) == [CARDIORENAL_SYNDROME]


def test_tables_change_the_levels(terminology):
    simplifier = terminology.simplifier
    targets = [HEART_FAILURE, HEART_DISEASE]
    assert _ancestors(simplifier.simplify([HFREF], targets, tables=["RELATIONSHIP"])) == [HEART_FAILURE]
    # The stated table adds Systolic heart failure is-a Heart disease, so both targets
    # are reached at the same level.
    assert _ancestors(simplifier.simplify([HFREF], targets)) == [HFREF]


def test_no_match_keeps_the_original(terminology):
    results = terminology.simplifier.simplify([CLINICAL_FINDING, HEART_FAILURE], [KIDNEY_DISEASE])
    assert _ancestors(results) == [CLINICAL_FINDING, HEART_FAILURE]


def test_duplicates_keep_input_order(terminology):
    concepts = [HFREF, ACUTE_HEART_FAILURE, HFREF, KIDNEY_DISEASE]
    results = terminology.simplifier.simplify(concepts, [HEART_FAILURE], tables=["RELATIONSHIP"])
    assert [r.original_id for r in results] == concepts
    assert _ancestors(results) == [HEART_FAILURE, HEART_FAILURE, HEART_FAILURE, KIDNEY_DISEASE]


def test_simplify_is_idempotent(terminology):
    concepts = [HFREF, ACUTE_HEART_FAILURE, CARDIORENAL_SYNDROME, CLINICAL_FINDING]
    targets = [HEART_FAILURE, HEART_DISEASE, KIDNEY_DISEASE]
    once = _ancestors(terminology.simplifier.simplify(concepts, targets))
    twice = _ancestors(terminology.simplifier.simplify(once, targets))
    assert once == twice


def test_round_limit(terminology):
    # Heart failure is two levels above HFREF.
    short = ConceptSimplifier(terminology.hierarchy, round_limit=2)
    assert _ancestors(short.simplify([HFREF], [HEART_FAILURE], tables=["RELATIONSHIP"])) == [HFREF]
    enough = ConceptSimplifier(terminology.hierarchy, round_limit=3)
    assert _ancestors(enough.simplify([HFREF], [HEART_FAILURE], tables=["RELATIONSHIP"])) == [HEART_FAILURE]


def test_duplicate_inputs_share_parent_lookups(terminology, monkeypatch):
    hierarchy = terminology.hierarchy
    calls = []
    original = hierarchy.parents

    def counting_parents(concept_ids, **kwargs):
        calls.append(tuple(concept_ids))
        return original(concept_ids, **kwargs)

    monkeypatch.setattr(hierarchy, "parents", counting_parents)
    terminology.simplifier.simplify([HFREF] * 3, [SYSTOLIC_HEART_FAILURE])
    assert calls == [(HFREF,)]


def test_empty_input(terminology):
    assert terminology.simplifier.simplify([], [HEART_FAILURE]) == []
