"""Enumerations and numeric constants for the training load engine.

Load-model constants follow Coggan & Allen (2010), Training and Racing
with a Power Meter, and Banister's impulse-response model.
"""

from enum import Enum, IntEnum, auto


class SportType(str, Enum):
    """Sport of a workout or session. Values match the stored documents."""

    CYCLING = "CYCLING"
    RUNNING = "RUNNING"
    SWIMMING = "SWIMMING"
    BRICK = "BRICK"

    @classmethod
    def parse(cls, value: str | None) -> "SportType":
        """Parse a stored sport string; unknown or missing values mean CYCLING."""
        if value is None:
            return cls.CYCLING
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.CYCLING


class BlockType(str, Enum):
    """Workout block types as authored by a coach or the chat assistant."""

    WARMUP = "WARMUP"
    ACTIVE = "ACTIVE"
    INTERVAL = "INTERVAL"
    STEADY = "STEADY"
    RAMP = "RAMP"
    REST = "REST"
    COOLDOWN = "COOLDOWN"
    FREE = "FREE"
    PAUSE = "PAUSE"


class ZoneReferenceType(str, Enum):
    """Reference metric a zone system's percentages are expressed against."""

    FTP = "FTP"
    VO2MAX_POWER = "VO2MAX_POWER"
    THRESHOLD_PACE = "THRESHOLD_PACE"
    VO2MAX_PACE = "VO2MAX_PACE"
    CSS = "CSS"
    PACE_5K = "PACE_5K"
    PACE_10K = "PACE_10K"
    PACE_HALF_MARATHON = "PACE_HALF_MARATHON"
    PACE_MARATHON = "PACE_MARATHON"
    CUSTOM = "CUSTOM"

    @property
    def is_pace(self) -> bool:
        """True for references measured in seconds per distance."""
        return self in _PACE_REFERENCES


_PACE_REFERENCES = frozenset({
    ZoneReferenceType.THRESHOLD_PACE,
    ZoneReferenceType.VO2MAX_PACE,
    ZoneReferenceType.CSS,
    ZoneReferenceType.PACE_5K,
    ZoneReferenceType.PACE_10K,
    ZoneReferenceType.PACE_HALF_MARATHON,
    ZoneReferenceType.PACE_MARATHON,
})


class FormStatus(IntEnum):
    """Readiness interpretation of Training Stress Balance, freshest first."""

    VERY_FRESH = auto()
    FRESH = auto()
    NEUTRAL = auto()
    FATIGUED = auto()
    VERY_FATIGUED = auto()


# ---------------------------------------------------------------------------
# Performance Management Chart, Coggan & Allen (2010)
# ---------------------------------------------------------------------------
CTL_TIME_CONSTANT_DAYS = 42  # Chronic load ("fitness")
ATL_TIME_CONSTANT_DAYS = 7   # Acute load ("fatigue")

# TSB boundaries for FormStatus, lower bounds are exclusive
FORM_VERY_FRESH_TSB = 25.0
FORM_FRESH_TSB = 5.0
FORM_NEUTRAL_TSB = -10.0
FORM_FATIGUED_TSB = -25.0

# ---------------------------------------------------------------------------
# Block speed model
# ---------------------------------------------------------------------------
# Empirical power-to-speed heuristic: 8.33 m/s (30 km/h) at 100% FTP,
# scaling with the square root of intensity.
CYCLING_SPEED_AT_THRESHOLD_M_PER_S = 8.33

# Used only when the athlete never set the threshold (None)
FALLBACK_THRESHOLD_PACE_S_PER_KM = 300   # 5:00/km
FALLBACK_CSS_S_PER_100M = 120            # 2:00/100m

# TSS of one hour at threshold intensity
TSS_PER_HOUR_AT_THRESHOLD = 100.0

# ---------------------------------------------------------------------------
# Rounding precision of persisted values (decimal places)
# ---------------------------------------------------------------------------
LOAD_DECIMALS = 1          # ctl / atl / tsb
SESSION_TSS_DECIMALS = 1
SESSION_IF_DECIMALS = 3
TRAINING_IF_DECIMALS = 2
