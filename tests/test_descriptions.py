"""
Tests for the DescriptionStore.
"""
from datetime import date

from py_snomed_hierarchy.descriptions import DescriptionStore
from py_snomed_hierarchy.models import Description

from sample_snomed import FSN, SYNONYM, HEART_FAILURE, HEART_STRUCTURE, IS_A


def test_terms_use_the_most_recent_active_synonym(terminology):
    # "Weak heart" is newer but inactive; "Cardiac failure" is active but older.
    assert terminology.descriptions.term(HEART_FAILURE) == "Heart failure"


def test_terms_keep_order_duplicates_and_gaps(terminology):
    terms = terminology.descriptions.terms([HEART_STRUCTURE, None, 1, HEART_STRUCTURE])
    assert terms == ["Heart structure", None, None, "Heart structure"]


def test_fully_specified_name(terminology):
    assert terminology.descriptions.term(HEART_FAILURE, type_id=FSN) == "Heart failure (disorder)"


def test_semantic_type(terminology):
    assert terminology.descriptions.semantic_type([HEART_FAILURE, HEART_STRUCTURE, IS_A, 1]) == [
        "disorder", "body structure", "attribute", "",
    ]


def test_semantic_type_without_a_tag():
    store = DescriptionStore.from_descriptions([
        Description(concept_id=5, term="Untagged name", type_id=FSN),
    ])
    assert store.semantic_type([5]) == [""]


def test_dated_descriptions_win_over_undated_ones():
    store = DescriptionStore.from_descriptions([
        Description(concept_id=5, term="Undated", type_id=SYNONYM),
        Description(concept_id=5, term="Dated", type_id=SYNONYM, effective_time=date(2020, 1, 31)),
    ])
    assert store.term(5) == "Dated"


def test_empty_store():
    store = DescriptionStore()
    assert store.terms([HEART_FAILURE]) == [None]
    assert store.semantic_type([HEART_FAILURE]) == [""]
