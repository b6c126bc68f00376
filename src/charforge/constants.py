"""Static configuration tables shared across the engine.

Every table here is read-only (``MappingProxyType``) and is passed into
the functions that need it as a default argument, so tests and callers
can inject their own tables instead of patching module globals.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# ---------------------------------------------------------------------------
# Body slots
# ---------------------------------------------------------------------------

# Slots a body template must expose at least once.
REQUIRED_SLOTS: tuple[str, ...] = (
    "hair-back",
    "hair-front",
    "eyes",
    "nose",
    "mouth",
    "ears",
    "torso",
    "arms-left",
    "arms-right",
    "legs",
    "feet-left",
    "feet-right",
)

# Pseudo-slot used for the base body in the assembly render list.
BASE_BODY_SLOT = "base-body"

# ---------------------------------------------------------------------------
# Assembly z-order (lower paints first / behind)
# ---------------------------------------------------------------------------

PART_Z_ORDER: Mapping[str, int] = MappingProxyType(
    {
        "hair-back": 0,
        "back-accessory": 5,
        BASE_BODY_SLOT: 10,
        "ears": 15,
        "torso": 20,
        "arms-left": 25,
        "arms-right": 25,
        "legs": 30,
        "feet-left": 35,
        "feet-right": 35,
        "eyes": 40,
        "nose": 45,
        "mouth": 50,
        "hair-front": 55,
        "head-accessory": 60,
        "weapon-main": 65,
        "weapon-off": 65,
    }
)

DEFAULT_Z_ORDER = 50

# ---------------------------------------------------------------------------
# Compositing and recoloring
# ---------------------------------------------------------------------------

# Source alpha at or above this paints during binary-alpha assembly.
BINARY_ALPHA_THRESHOLD = 128

SHADOW_FACTOR = 0.7
HIGHLIGHT_AMOUNT = 40

# ---------------------------------------------------------------------------
# Chibi body geometry
# ---------------------------------------------------------------------------

BODY_WIDTH = 32
BODY_HEIGHT = 48
TEMPLATE_STYLE = "chibi"

BUILD_FACTORS: Mapping[str, float] = MappingProxyType(
    {"skinny": 0.8, "normal": 1.0, "muscular": 1.2}
)
HEIGHT_FACTORS: Mapping[str, float] = MappingProxyType(
    {"short": 0.9, "average": 1.0, "tall": 1.1}
)
