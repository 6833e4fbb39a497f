"""
Configuration & Constants
=========================
This module serves as the central registry for tolerances, header magic
numbers and environment-driven settings.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (e.g., 1e-5, 0x8000) scattered
   throughout the algorithms.
2. Deployment: It reads the few settings that can be changed without touching
   the code (log level) from the environment.

Exports:
    UV_MATCH_TOLERANCE (float): Absolute per-axis UV tolerance for vertex matching.
    LOG_LEVEL (int): Default logging level for the command line.
"""
import logging
import os

# Correspondence matching
UV_MATCH_TOLERANCE: float = 1e-5

# Header values selecting the bounding-box-center algorithm
LEGACY_VERSION_MASK: int = 0x14000000
LEGACY_USER_VERSION: int = 11
BOX_CENTER_FLAG: int = 0x8000

# Stores with this user version 2 carry packed shapes eligible for batch bounds
BATCH_BOUNDS_USER_VERSION_2: int = 130

# Vertex data flag marking records that carry a normal
VERTEX_FLAG_NORMALS: int = 0x80


def get_log_level(default: int = logging.INFO) -> int:
    """
    Resolve the log level from MESHTIDY_LOG_LEVEL ("DEBUG", "INFO", ... or a number).
    """
    raw = os.environ.get("MESHTIDY_LOG_LEVEL")
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    print(f"WARNING: Unknown MESHTIDY_LOG_LEVEL '{raw}', using default.")
    return default


LOG_LEVEL: int = get_log_level()
