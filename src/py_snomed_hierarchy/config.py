# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    """
    Manages the application's configuration settings.
    Utilizes Pydantic's BaseSettings to allow for environment variable overrides.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="PYSNOMEDHIERARCHY_"
    )

    # --- SNOMED CT metadata concepts ---
    is_a_type_id: int = Field(116680003, description="Relationship type used for the is-a hierarchy.")
    fsn_type_id: int = Field(900000000000003001, description="Description type of fully specified names.")
    synonym_type_id: int = Field(900000000000013009, description="Description type of synonyms, used for display terms.")

    # --- Query Behavior ---
    relationship_tables: List[str] = Field(
        default=["RELATIONSHIP", "STATEDRELATIONSHIP"],
        description="Relationship tables consulted when a query does not name its own."
    )
    simplify_round_limit: int = Field(
        default=10,
        description="Maximum number of parent expansion rounds performed by simplify."
    )

    # --- File Paths ---
    snapshot_dir: Optional[str] = Field(
        None,
        description="Directory holding an RF2 snapshot (sct2_*_Snapshot*.txt files) used by the CLI."
    )


# Instantiate a global settings object to be used throughout the application
settings = Settings()
