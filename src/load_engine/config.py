"""Environment-variable-based configuration for the load engine."""

from __future__ import annotations

import os

from load_engine.models.enums import ATL_TIME_CONSTANT_DAYS, CTL_TIME_CONSTANT_DAYS

CTL_DAYS: float = float(os.environ.get("LOAD_ENGINE_CTL_DAYS", CTL_TIME_CONSTANT_DAYS))
ATL_DAYS: float = float(os.environ.get("LOAD_ENGINE_ATL_DAYS", ATL_TIME_CONSTANT_DAYS))
