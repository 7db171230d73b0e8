import pytest

from py_snomed_hierarchy.concepts import ConceptSet

from sample_snomed import (
    CLINICAL_FINDING, DISEASE, HEART_DISEASE, KIDNEY_DISEASE, HEART_FAILURE,
    ACUTE_HEART_FAILURE, SYSTOLIC_HEART_FAILURE, HFREF, CARDIORENAL_SYNDROME,
    build_is_a_terminology,
)

ALL_FINDINGS = [
    CLINICAL_FINDING, DISEASE, HEART_DISEASE, KIDNEY_DISEASE, HEART_FAILURE,
    ACUTE_HEART_FAILURE, SYSTOLIC_HEART_FAILURE, HFREF, CARDIORENAL_SYNDROME,
]


def test_parents_and_children(terminology):
    hierarchy = terminology.hierarchy
    assert hierarchy.parents([HEART_FAILURE]) == [HEART_DISEASE]
    assert hierarchy.children([HEART_FAILURE]) == sorted([ACUTE_HEART_FAILURE, SYSTOLIC_HEART_FAILURE])
    assert hierarchy.parents([CARDIORENAL_SYNDROME]) == sorted([HEART_DISEASE, KIDNEY_DISEASE])


def test_output_is_sorted(terminology):
    ancestors = terminology.hierarchy.ancestors([HFREF])
    assert list(ancestors) == sorted(ancestors)


def test_ancestors_and_descendants(terminology):
    hierarchy = terminology.hierarchy
    assert hierarchy.ancestors([HFREF]) == {
        SYSTOLIC_HEART_FAILURE, HEART_FAILURE, HEART_DISEASE, DISEASE, CLINICAL_FINDING,
    }
    assert hierarchy.descendants([HEART_DISEASE]) == {
        HEART_FAILURE, ACUTE_HEART_FAILURE, SYSTOLIC_HEART_FAILURE, HFREF, CARDIORENAL_SYNDROME,
    }


@pytest.mark.parametrize("query", ["parents", "children", "ancestors", "descendants"])
def test_include_self(terminology, query):
    method = getattr(terminology.hierarchy, query)
    concepts = [HEART_FAILURE, DISEASE]
    with_self = method(concepts, include_self=True)
    without_self = method(concepts)
    assert set(concepts) <= with_self.to_set()
    assert not set(concepts) & without_self.to_set()


def test_input_concepts_related_to_each_other_are_excluded(terminology):
    # Disease is an ancestor of Heart failure but was itself supplied.
    ancestors = terminology.hierarchy.ancestors([HEART_FAILURE, DISEASE])
    assert ancestors == sorted([HEART_DISEASE, CLINICAL_FINDING])


@pytest.mark.parametrize("query", ["parents", "children", "ancestors", "descendants"])
def test_empty_input(terminology, query):
    assert getattr(terminology.hierarchy, query)([]) == ConceptSet()


def test_closure_fast_path_agrees_with_recursive_resolution(terminology):
    hierarchy = terminology.hierarchy
    closure = terminology.closure_builder.create_transitive(ALL_FINDINGS)
    for concept_id in ALL_FINDINGS:
        assert hierarchy.ancestors([concept_id], closure=closure) == hierarchy.ancestors([concept_id])
        assert hierarchy.descendants([concept_id], closure=closure) == hierarchy.descendants([concept_id])


def test_closure_path_does_not_read_the_index(terminology, monkeypatch):
    closure = terminology.closure_builder.create_transitive(ALL_FINDINGS)

    def fail(*args, **kwargs):
        raise AssertionError("relationship tables should not be read")

    monkeypatch.setattr(terminology.resolver, "related_concepts", fail)
    assert terminology.hierarchy.ancestors([ACUTE_HEART_FAILURE], closure=closure) == sorted(
        [HEART_FAILURE, HEART_DISEASE, DISEASE, CLINICAL_FINDING]
    )


def test_cat_and_dog_disease():
    cat_disease, dog_disease, disease = 1001, 1002, 1000
    terminology = build_is_a_terminology([(cat_disease, disease), (dog_disease, disease)])
    assert terminology.hierarchy.ancestors([cat_disease], tables=["RELATIONSHIP"]) == [disease]
    assert terminology.hierarchy.descendants([disease], tables=["RELATIONSHIP"]) == [cat_disease, dog_disease]
