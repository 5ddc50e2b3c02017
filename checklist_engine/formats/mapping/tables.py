"""
Enumeration mapping tables between canonical taxonomies and container codes.

The checklist binder container classifies checklists with a numeric
(type, subtype) pair and items and completion actions with numeric codes. The
tables below translate those codes to and from the canonical enumerations.
They are keyed by concrete enum values, built exactly once at import and
exposed through read-only mappings, so any number of conversions can share
them without coordination.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from checklist_engine.formats.errors import UnsupportedCode, UnsupportedGroupKey
from checklist_engine.schemas.common.enums import (
    NOTE_KINDS,
    CompletionAction,
    FrequencyBand,
    GroupCategory,
    ItemKind,
    ScratchpadTarget,
)


class ContainerType(IntEnum):
    NORMAL = 0
    ABNORMAL = 1
    EMERGENCY = 2


class ContainerSubtype(IntEnum):
    PREFLIGHT = 0
    TAKEOFF_CRUISE = 1
    LANDING = 2
    OTHER = 3
    EMERGENCY = 4


class ContainerItemType(IntEnum):
    PLAIN_TEXT = 0
    NOTE = 1
    LOCAL_ALTIMETER = 2
    OPEN_NEAREST = 3
    OPEN_ATIS_SCRATCHPAD = 4
    OPEN_CRAFT_SCRATCHPAD = 5
    WEATHER_FREQUENCY = 6
    CLEARANCE_FREQUENCY = 7
    GROUND_CTAF_FREQUENCY = 8
    TOWER_CTAF_FREQUENCY = 9
    APPROACH_FREQUENCY = 10
    CENTER_FREQUENCY = 11


class ContainerAction(IntEnum):
    DO_NOTHING = 0
    NEXT_CHECKLIST = 1
    OPEN_FLIGHT_PLAN = 2
    CLOSE_FLIGHT_PLAN = 3
    OPEN_SAFETAXI = 4
    OPEN_MAP = 5


GroupKey = Tuple[ContainerType, ContainerSubtype]
CanonicalGroupKey = Tuple[GroupCategory, str]
# (kind, parameter) where the parameter is the scratchpad target or band
KindKey = Tuple[ItemKind, Optional[Enum]]

GROUP_MAPPING: Tuple[Tuple[GroupKey, CanonicalGroupKey], ...] = (
    ((ContainerType.NORMAL, ContainerSubtype.PREFLIGHT), (GroupCategory.NORMAL, "Preflight")),
    ((ContainerType.NORMAL, ContainerSubtype.TAKEOFF_CRUISE), (GroupCategory.NORMAL, "Takeoff/Cruise")),
    ((ContainerType.NORMAL, ContainerSubtype.LANDING), (GroupCategory.NORMAL, "Landing")),
    ((ContainerType.NORMAL, ContainerSubtype.OTHER), (GroupCategory.NORMAL, "Other")),
    ((ContainerType.ABNORMAL, ContainerSubtype.EMERGENCY), (GroupCategory.ABNORMAL, "Abnormal")),
    ((ContainerType.EMERGENCY, ContainerSubtype.EMERGENCY), (GroupCategory.EMERGENCY, "Emergency")),
)

# Used on encode when a group's (category, title) has no exact entry
CATEGORY_FALLBACK: Tuple[Tuple[GroupCategory, GroupKey], ...] = (
    (GroupCategory.NORMAL, (ContainerType.NORMAL, ContainerSubtype.OTHER)),
    (GroupCategory.ABNORMAL, (ContainerType.ABNORMAL, ContainerSubtype.EMERGENCY)),
    (GroupCategory.EMERGENCY, (ContainerType.EMERGENCY, ContainerSubtype.EMERGENCY)),
)

ITEM_KIND_MAPPING: Tuple[Tuple[KindKey, ContainerItemType], ...] = (
    ((ItemKind.PLAIN_TEXT, None), ContainerItemType.PLAIN_TEXT),
    ((ItemKind.NOTE, None), ContainerItemType.NOTE),
    ((ItemKind.LOCAL_ALTIMETER, None), ContainerItemType.LOCAL_ALTIMETER),
    ((ItemKind.OPEN_NEAREST, None), ContainerItemType.OPEN_NEAREST),
    ((ItemKind.OPEN_SCRATCHPAD, ScratchpadTarget.ATIS), ContainerItemType.OPEN_ATIS_SCRATCHPAD),
    ((ItemKind.OPEN_SCRATCHPAD, ScratchpadTarget.CRAFT), ContainerItemType.OPEN_CRAFT_SCRATCHPAD),
    ((ItemKind.FREQUENCY_PROMPT, FrequencyBand.WEATHER), ContainerItemType.WEATHER_FREQUENCY),
    ((ItemKind.FREQUENCY_PROMPT, FrequencyBand.CLEARANCE), ContainerItemType.CLEARANCE_FREQUENCY),
    ((ItemKind.FREQUENCY_PROMPT, FrequencyBand.GROUND_CTAF), ContainerItemType.GROUND_CTAF_FREQUENCY),
    ((ItemKind.FREQUENCY_PROMPT, FrequencyBand.TOWER_CTAF), ContainerItemType.TOWER_CTAF_FREQUENCY),
    ((ItemKind.FREQUENCY_PROMPT, FrequencyBand.APPROACH), ContainerItemType.APPROACH_FREQUENCY),
    ((ItemKind.FREQUENCY_PROMPT, FrequencyBand.CENTER), ContainerItemType.CENTER_FREQUENCY),
)

ACTION_MAPPING: Tuple[Tuple[CompletionAction, ContainerAction], ...] = (
    (CompletionAction.DO_NOTHING, ContainerAction.DO_NOTHING),
    (CompletionAction.ADVANCE_TO_NEXT_CHECKLIST, ContainerAction.NEXT_CHECKLIST),
    (CompletionAction.OPEN_FLIGHT_PLAN, ContainerAction.OPEN_FLIGHT_PLAN),
    (CompletionAction.CLOSE_FLIGHT_PLAN, ContainerAction.CLOSE_FLIGHT_PLAN),
    (CompletionAction.OPEN_SAFE_TAXI, ContainerAction.OPEN_SAFETAXI),
    (CompletionAction.OPEN_MAP, ContainerAction.OPEN_MAP),
)


@dataclass(frozen=True)
class MappingTables:
    """Read-only, bidirectional translation tables for the container format."""

    groups: Mapping[GroupKey, CanonicalGroupKey]
    groups_reverse: Mapping[CanonicalGroupKey, GroupKey]
    category_fallback: Mapping[GroupCategory, GroupKey]
    item_kinds: Mapping[KindKey, ContainerItemType]
    item_kinds_reverse: Mapping[ContainerItemType, KindKey]
    actions: Mapping[CompletionAction, ContainerAction]
    actions_reverse: Mapping[ContainerAction, CompletionAction]

    def group_for_codes(self, type_code: int, subtype_code: int) -> CanonicalGroupKey:
        """
        Translate a container (type, subtype) pair into a canonical group key.

        Raises:
            UnsupportedGroupKey: If either code is outside its enumeration or
                the pair has no table entry
        """
        try:
            key = (ContainerType(type_code), ContainerSubtype(subtype_code))
        except ValueError:
            raise UnsupportedGroupKey(type_code, subtype_code) from None
        if key not in self.groups:
            raise UnsupportedGroupKey(type_code, subtype_code)
        return self.groups[key]

    def codes_for_group(self, category: GroupCategory, title: str) -> GroupKey:
        """Exact reverse lookup, falling back to the category default."""
        exact = self.groups_reverse.get((category, title))
        if exact is not None:
            return exact
        return self.category_fallback[category]

    def code_for_kind(self, kind: ItemKind, parameter: Optional[Enum] = None) -> ContainerItemType:
        """Container item type for a canonical kind; note-family kinds share the note code."""
        if kind in NOTE_KINDS:
            return ContainerItemType.NOTE
        return self.item_kinds[(kind, parameter)]

    def kind_for_code(self, code: int) -> KindKey:
        """
        Translate a container item type code into a canonical (kind, parameter).

        Raises:
            UnsupportedCode: If the code has no table entry
        """
        try:
            return self.item_kinds_reverse[ContainerItemType(code)]
        except (ValueError, KeyError):
            raise UnsupportedCode("itemType", code) from None

    def code_for_action(self, action: CompletionAction) -> ContainerAction:
        return self.actions[action]

    def action_for_code(self, code: int, axis: str = "completionAction") -> CompletionAction:
        """
        Translate a container completion action code.

        Raises:
            UnsupportedCode: If the code has no table entry
        """
        try:
            return self.actions_reverse[ContainerAction(code)]
        except (ValueError, KeyError):
            raise UnsupportedCode(axis, code) from None


def _invert(pairs, what: str) -> Dict:
    inverted: Dict = {}
    for left, right in pairs:
        if right in inverted:
            raise ValueError(f"Duplicate {what} entry for {right!r}")
        inverted[right] = left
    return inverted


def build_tables() -> MappingTables:
    """
    Build the mapping tables and check their authoring invariants.

    Each canonical key must have exactly one forward entry, every category must
    have a fallback, and every canonical kind and action must have a code.

    Raises:
        ValueError: If the tables violate an authoring invariant
    """
    groups = dict(GROUP_MAPPING)
    if len(groups) != len(GROUP_MAPPING):
        raise ValueError("Duplicate container group key in GROUP_MAPPING")
    groups_reverse = _invert(GROUP_MAPPING, "canonical group key")

    category_fallback = dict(CATEGORY_FALLBACK)
    missing = set(GroupCategory) - set(category_fallback)
    if missing:
        raise ValueError(f"Missing category fallback for {sorted(c.value for c in missing)}")
    for category, key in category_fallback.items():
        if key not in groups:
            raise ValueError(f"Fallback key {key!r} for {category.value} is not a mapped group key")

    item_kinds = dict(ITEM_KIND_MAPPING)
    item_kinds_reverse = _invert(ITEM_KIND_MAPPING, "item type")
    for kind in ItemKind:
        if kind in NOTE_KINDS:
            continue
        if not any(mapped_kind == kind for mapped_kind, _ in item_kinds):
            raise ValueError(f"No container item type for kind {kind.value}")
    for target in ScratchpadTarget:
        if (ItemKind.OPEN_SCRATCHPAD, target) not in item_kinds:
            raise ValueError(f"No container item type for scratchpad {target.value}")
    for band in FrequencyBand:
        if (ItemKind.FREQUENCY_PROMPT, band) not in item_kinds:
            raise ValueError(f"No container item type for band {band.value}")

    actions = dict(ACTION_MAPPING)
    actions_reverse = _invert(ACTION_MAPPING, "completion action")
    if set(actions) != set(CompletionAction):
        raise ValueError("ACTION_MAPPING does not cover every completion action")

    return MappingTables(
        groups=MappingProxyType(groups),
        groups_reverse=MappingProxyType(groups_reverse),
        category_fallback=MappingProxyType(category_fallback),
        item_kinds=MappingProxyType(item_kinds),
        item_kinds_reverse=MappingProxyType(item_kinds_reverse),
        actions=MappingProxyType(actions),
        actions_reverse=MappingProxyType(actions_reverse),
    )


DEFAULT_TABLES = build_tables()
