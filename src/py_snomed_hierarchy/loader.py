# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from pathlib import Path
from typing import Dict, List, Optional, Union

import polars as pl
from rich.console import Console

from .descriptions import DESCRIPTION_SCHEMA, DescriptionStore
from .index import RELATIONSHIP_SCHEMA, RelationshipIndex
from .terminology import Terminology

console = Console()

# RF2 snapshot file patterns, keyed by the table name they are loaded as.
# https://confluence.ihtsdotools.org/display/DOCRELFMT/4.2.3+Relationship+File+Specification
RELATIONSHIP_FILES = {
    "RELATIONSHIP": "sct2_Relationship_Snapshot*.txt",
    "STATEDRELATIONSHIP": "sct2_StatedRelationship_Snapshot*.txt",
}
DESCRIPTION_FILES = "sct2_Description_Snapshot*.txt"

RF2_DATE_FORMAT = "%Y%m%d"


def _read_rf2(paths: List[Path]) -> pl.DataFrame:
    """Reads RF2 files as all-string frames; RF2 is tab separated and never quoted."""
    frames = [
        pl.read_csv(path, separator="\t", quote_char=None, infer_schema_length=0)
        for path in paths
    ]
    return pl.concat(frames, how="vertical")


def _rf2_common() -> List[pl.Expr]:
    return [
        (pl.col("active") == "1").alias("active"),
        pl.col("effectiveTime").str.strptime(pl.Date, RF2_DATE_FORMAT, strict=False).alias("effective_time"),
    ]


class SnapshotLoader:
    """Loads the relationship and description files of an RF2 snapshot."""

    def __init__(self, snapshot_dir: Union[str, Path]):
        self.snapshot_dir = Path(snapshot_dir)
        if not self.snapshot_dir.is_dir():
            raise FileNotFoundError(f"Snapshot directory not found: {self.snapshot_dir}")

    def _find(self, pattern: str) -> List[Path]:
        return sorted(self.snapshot_dir.rglob(pattern))

    def load_relationships(self) -> Dict[str, pl.DataFrame]:
        found = {name: self._find(pattern) for name, pattern in RELATIONSHIP_FILES.items()}
        if not any(found.values()):
            raise FileNotFoundError(f"No RF2 relationship files found under {self.snapshot_dir}")

        tables = {}
        for name, pattern in RELATIONSHIP_FILES.items():
            paths = found[name]
            if not paths:
                console.log(f"[yellow]No files matching {pattern}; {name} will be empty.[/yellow]")
                tables[name] = pl.DataFrame(schema=RELATIONSHIP_SCHEMA)
                continue
            console.log(f"Reading {name} from {', '.join(p.name for p in paths)}...")
            raw = _read_rf2(paths)
            tables[name] = raw.select(
                pl.col("sourceId").cast(pl.Int64).alias("source_id"),
                pl.col("destinationId").cast(pl.Int64).alias("destination_id"),
                pl.col("typeId").cast(pl.Int64).alias("type_id"),
                pl.col("relationshipGroup").cast(pl.Int64).alias("relationship_group"),
                *_rf2_common(),
            )
            console.log(f"Loaded {tables[name].height} rows into {name}.")
        return tables

    def load_descriptions(self) -> pl.DataFrame:
        paths = self._find(DESCRIPTION_FILES)
        if not paths:
            console.log("[yellow]No description files found; terms and semantic tags will be empty.[/yellow]")
            return pl.DataFrame(schema=DESCRIPTION_SCHEMA)
        console.log(f"Reading descriptions from {', '.join(p.name for p in paths)}...")
        raw = _read_rf2(paths)
        frame = raw.select(
            pl.col("conceptId").cast(pl.Int64).alias("concept_id"),
            pl.col("term").alias("term"),
            pl.col("typeId").cast(pl.Int64).alias("type_id"),
            *_rf2_common(),
        )
        console.log(f"Loaded {frame.height} descriptions.")
        return frame

    def load(self, inactive_included: Optional[bool] = None) -> Terminology:
        index = RelationshipIndex(self.load_relationships(), inactive_included=inactive_included)
        return Terminology(index, DescriptionStore(self.load_descriptions()))


def load_snapshot(snapshot_dir: Union[str, Path]) -> Terminology:
    """
    Entry point function to load an RF2 snapshot directory into a Terminology.
    """
    return SnapshotLoader(snapshot_dir).load()
