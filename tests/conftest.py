import pytest
from pathlib import Path

from py_snomed_hierarchy.terminology import Terminology

from sample_snomed import build_sample_terminology, write_rf2_snapshot


@pytest.fixture
def terminology() -> Terminology:
    """
    Provides the sample SNOMED CT extract as an in-memory Terminology.
    Built per test so cached services never leak between tests.
    """
    return build_sample_terminology()


@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    """
    Provides an RF2 snapshot directory containing the sample extract.
    """
    return write_rf2_snapshot(tmp_path / "SnomedCT_InternationalRF2")
