"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    iconsplit_env: str = "development"
    iconsplit_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Icon library location (JSONL record store)
    data_dir: str = "data"

    # Extraction limits
    max_file_bytes: int = 10_000_000
    max_fragment_bytes: int = 1_000_000
    max_icons_per_file: int = 50
    max_candidates_per_strategy: int = 50

    # Strategy escalation. The grid threshold only takes effect when
    # sufficient_candidates is above it; discovery stops earlier otherwise.
    sufficient_candidates: int = 3
    grid_fallback_threshold: int = 5

    # Candidate validity
    max_group_children: int = 50
    min_path_length: int = 8
    min_shape_size: float = 0.5

    # Grid clustering
    grid_row_tolerance: float = 50.0
    grid_min_cell_size: float = 4.0
    grid_max_rows: int = 10
    grid_max_per_row: int = 20

    # Fragment synthesis
    padding_ratio: float = 0.1
    default_color: str = "#000000"
    default_size: float = 24.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
