import pytest

from py_snomed_hierarchy.concepts import ConceptSet, as_concept_id


def test_as_concept_id_accepts_ints_and_digit_strings():
    assert as_concept_id(84114007) == 84114007
    assert as_concept_id("84114007") == 84114007
    assert as_concept_id(" 84114007 ") == 84114007


@pytest.mark.parametrize("value", ["heart failure", "-5", -5, 2 ** 63, True, 1.5, None])
def test_as_concept_id_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        as_concept_id(value)


def test_concept_set_deduplicates_and_keeps_first_occurrence_order():
    concepts = ConceptSet([3, 1, 3, "2", 1, None])
    assert concepts == [3, 1, 2]
    assert len(concepts) == 3
    assert 2 in concepts
    assert 4 not in concepts


def test_concept_set_wraps_single_values():
    assert ConceptSet(84114007) == [84114007]
    assert ConceptSet("84114007") == [84114007]
    assert ConceptSet(None) == []


def test_concept_set_operations():
    left = ConceptSet([5, 1, 3])
    right = ConceptSet([3, 4])
    assert (left | right) == [5, 1, 3, 4]
    assert (left - right) == [5, 1]
    assert (left & right) == [3]
    assert left.sorted() == [1, 3, 5]
    assert left == {1, 3, 5}
    assert left != [1, 3, 5]


def test_concept_set_to_series():
    series = ConceptSet([2, 1]).to_series("source_id")
    assert series.name == "source_id"
    assert series.to_list() == [2, 1]
