"""
Configuration and shared settings for core extraction.

Precedence (lowest to highest):
    1. ExtractionSettings defaults
    2. extraction.yaml (or the path passed to load_settings)
    3. CORE_* environment variables (a .env file is honoured)
"""

import os
import yaml
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Paths
DATA_DIR = Path(os.environ.get("CORE_DATA_DIR", "data"))
SETTINGS_FILE = Path("extraction.yaml")

# Reference defaults
ENTROPY_THRESHOLD = 0.01
BOOTSTRAP_ROUNDS = 11   # rounds 0..10 run before any convergence check
NUM_THREADS = 4
REDUCED_K = 50          # features kept in the reduced theta
SMOOTHING_ALPHA = 1.0


class ExtractionSettings(BaseModel):
    """Tunable knobs for one extraction run."""
    entropy_threshold: float = Field(default=ENTROPY_THRESHOLD, ge=0.0)
    bootstrap_rounds: int = Field(default=BOOTSTRAP_ROUNDS, ge=0)
    num_threads: int = Field(default=NUM_THREADS, ge=1)
    reduced_k: int = Field(default=REDUCED_K, ge=0)
    smoothing_alpha: float = Field(default=SMOOTHING_ALPHA, gt=0.0)
    evaluation_retries: int = Field(default=0, ge=0)

    # Persistence
    store_data: bool = True
    data_slice: str = "default"
    advanced_algorithm: bool = False

    # Console verbosity
    print_initial_document: bool = True
    print_core_titles: bool = True
    print_comparison: bool = False


# env var -> settings field
_ENV_OVERRIDES = {
    "CORE_ENTROPY_THRESHOLD": "entropy_threshold",
    "CORE_BOOTSTRAP_ROUNDS": "bootstrap_rounds",
    "CORE_NUM_THREADS": "num_threads",
    "CORE_REDUCED_K": "reduced_k",
    "CORE_SMOOTHING_ALPHA": "smoothing_alpha",
    "CORE_EVALUATION_RETRIES": "evaluation_retries",
    "CORE_STORE_DATA": "store_data",
    "CORE_DATA_SLICE": "data_slice",
    "CORE_PRINT_INITIAL_DOCUMENT": "print_initial_document",
    "CORE_PRINT_CORE_TITLES": "print_core_titles",
    "CORE_PRINT_COMPARISON": "print_comparison",
}


def load_settings_file(path: Optional[Path] = None) -> dict:
    """Load raw settings from YAML. Missing file means no overrides."""
    path = Path(path) if path else SETTINGS_FILE
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
    # Allow the settings to live under an "extraction:" key
    return data.get("extraction", data)


def env_overrides() -> dict:
    """Collect CORE_* overrides; pydantic handles the type coercion."""
    overrides = {}
    for env_key, field_name in _ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value is not None and value.strip():
            overrides[field_name] = value.strip()
    return overrides


def load_settings(path: Optional[Path] = None, **overrides) -> ExtractionSettings:
    """Build settings from defaults, YAML, environment, then explicit kwargs."""
    data = load_settings_file(path)
    data.update(env_overrides())
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ExtractionSettings.model_validate(data)
