"""
Caelex Configuration

Environment-driven settings. Every value can be overridden with a
CX_* environment variable; defaults suit local development.
"""
from __future__ import annotations

import os
from pathlib import Path

# Bundled rule packs, installed as package data
DEFAULT_PACKS_DIR = Path(__file__).resolve().parent / "rulepacks"

CX_LOG_LEVEL = os.getenv("CX_LOG_LEVEL", "INFO")
CX_LOG_FORMAT = os.getenv("CX_LOG_FORMAT", "json").lower()  # json | text
CX_PACKS_DIR = Path(os.getenv("CX_PACKS_DIR", str(DEFAULT_PACKS_DIR)))
CX_STRICT_SCHEMA = os.getenv("CX_STRICT_SCHEMA", "true").lower() == "true"
CX_DOCS_ENABLED = os.getenv("CX_DOCS_ENABLED", "true").lower() == "true"
CX_CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CX_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
CX_MAX_RECOMMENDATIONS = int(os.getenv("CX_MAX_RECOMMENDATIONS", "10"))

# Unified score module weights (sum to 1.0)
UNIFIED_MODULE_WEIGHTS: dict[str, float] = {
    "authorization": 0.25,
    "debris": 0.20,
    "cybersecurity": 0.20,
    "insurance": 0.15,
    "environmental": 0.10,
    "reporting": 0.10,
}
CX_UNIFIED_MAX_RECOMMENDATIONS = int(os.getenv("CX_UNIFIED_MAX_RECOMMENDATIONS", "10"))
