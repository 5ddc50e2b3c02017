"""
Common enumeration types for the checklist engine.

This module defines the canonical taxonomies (group categories, item kinds,
completion actions) and the closed set of supported format identifiers.
"""
from __future__ import annotations

from enum import Enum


class ChecklistFormat(str, Enum):
    """Format identifiers accepted by the dispatcher."""
    BINARY_PROPRIETARY = "binary-proprietary"
    STRUCTURED_JSON = "structured-json"
    GENERIC_XML = "generic-xml"
    NATIVE_JSON = "native-json"


class GroupCategory(str, Enum):
    """Thematic bucket a checklist group belongs to."""
    NORMAL = "normal"
    ABNORMAL = "abnormal"
    EMERGENCY = "emergency"


class ItemKind(str, Enum):
    """Kind of a checklist item; determines rendering and behavior."""
    PLAIN_TEXT = "plain_text"
    NOTE = "note"
    TITLE = "title"
    WARNING = "warning"
    CAUTION = "caution"
    LOCAL_ALTIMETER = "local_altimeter"
    OPEN_NEAREST = "open_nearest"
    OPEN_SCRATCHPAD = "open_scratchpad"
    FREQUENCY_PROMPT = "frequency_prompt"


# Kinds rendered as free text without a response half
NOTE_KINDS = frozenset({ItemKind.NOTE, ItemKind.TITLE, ItemKind.WARNING, ItemKind.CAUTION})


class ScratchpadTarget(str, Enum):
    """Scratchpad opened by an OPEN_SCRATCHPAD item."""
    ATIS = "atis"
    CRAFT = "craft"


class FrequencyBand(str, Enum):
    """Frequency looked up by a FREQUENCY_PROMPT item."""
    WEATHER = "weather"
    CLEARANCE = "clearance"
    GROUND_CTAF = "ground_ctaf"
    TOWER_CTAF = "tower_ctaf"
    APPROACH = "approach"
    CENTER = "center"


class CompletionAction(str, Enum):
    """Action performed when an item is completed."""
    DO_NOTHING = "do_nothing"
    ADVANCE_TO_NEXT_CHECKLIST = "advance_to_next_checklist"
    OPEN_FLIGHT_PLAN = "open_flight_plan"
    CLOSE_FLIGHT_PLAN = "close_flight_plan"
    OPEN_SAFE_TAXI = "open_safe_taxi"
    OPEN_MAP = "open_map"
