from py_snomed_hierarchy.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.is_a_type_id == 116680003
    assert settings.relationship_tables == ["RELATIONSHIP", "STATEDRELATIONSHIP"]
    assert settings.simplify_round_limit == 10
    assert settings.snapshot_dir is None


def test_environment_overrides(monkeypatch, tmp_path):
    """
    Tests that PYSNOMEDHIERARCHY_* environment variables override the defaults.
    """
    monkeypatch.setenv("PYSNOMEDHIERARCHY_SIMPLIFY_ROUND_LIMIT", "3")
    monkeypatch.setenv("PYSNOMEDHIERARCHY_RELATIONSHIP_TABLES", '["RELATIONSHIP"]')
    monkeypatch.setenv("pysnomedhierarchy_snapshot_dir", str(tmp_path))

    settings = Settings()
    assert settings.simplify_round_limit == 3
    assert settings.relationship_tables == ["RELATIONSHIP"]
    assert settings.snapshot_dir == str(tmp_path)


def test_default_tables_follow_settings(terminology, monkeypatch):
    from py_snomed_hierarchy.config import settings
    from sample_snomed import HEART_DISEASE, SYSTOLIC_HEART_FAILURE

    assert HEART_DISEASE in terminology.hierarchy.parents([SYSTOLIC_HEART_FAILURE])
    monkeypatch.setattr(settings, "relationship_tables", ["RELATIONSHIP"])
    assert HEART_DISEASE not in terminology.hierarchy.parents([SYSTOLIC_HEART_FAILURE])
