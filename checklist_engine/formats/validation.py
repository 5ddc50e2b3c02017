"""
Structural validation of canonical checklist documents.

Every codec runs ``validate_document`` after decoding and before encoding.
Violations are collected and reported; nothing is repaired.
"""
import logging
from dataclasses import dataclass
from typing import List

from checklist_engine.schemas.common.enums import NOTE_KINDS, ItemKind
from checklist_engine.schemas.documents.checklist import ChecklistDocument, ChecklistItem

logger = logging.getLogger(__name__)

MAX_INDENT = 3


@dataclass(frozen=True)
class Violation:
    """A single invariant violation at a document path."""
    path: str
    message: str


class ValidationResult:
    """Result of a validation operation."""

    def __init__(self, violations: List[Violation]):
        """
        Initialize validation result.

        Args:
            violations: Violations found, in document order
        """
        self.violations = violations

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        """Allow using the result in boolean context."""
        return self.is_valid

    def format_errors(self) -> str:
        """Format violations for display."""
        if not self.violations:
            return "No validation errors"
        lines = ["Document validation errors:"]
        for i, violation in enumerate(self.violations, 1):
            lines.append(f"  {i}. {violation.path}: {violation.message}")
        return "\n".join(lines)


def _validate_item(path: str, item: ChecklistItem) -> List[Violation]:
    violations: List[Violation] = []

    if item.kind is None:
        violations.append(Violation(f"{path}.kind", "item has no kind"))
        return violations

    if not 0 <= item.indent <= MAX_INDENT:
        violations.append(Violation(f"{path}.indent", f"indent must be between 0 and {MAX_INDENT}, got {item.indent}"))

    if item.kind == ItemKind.OPEN_SCRATCHPAD:
        if item.scratchpad is None:
            violations.append(Violation(f"{path}.scratchpad", "open_scratchpad item needs a scratchpad target"))
    elif item.scratchpad is not None:
        violations.append(Violation(f"{path}.scratchpad", f"{item.kind.value} item cannot carry a scratchpad target"))

    if item.kind == ItemKind.FREQUENCY_PROMPT:
        if item.band is None:
            violations.append(Violation(f"{path}.band", "frequency_prompt item needs a band"))
    elif item.band is not None:
        violations.append(Violation(f"{path}.band", f"{item.kind.value} item cannot carry a band"))

    if item.kind in NOTE_KINDS and item.response:
        violations.append(Violation(f"{path}.response", f"{item.kind.value} item cannot carry a response"))

    return violations


def validate_document(document: ChecklistDocument) -> ValidationResult:
    """
    Check the structural invariants of a canonical document.

    Args:
        document: Document to check

    Returns:
        ValidationResult, truthy when no invariant is violated
    """
    violations: List[Violation] = []

    for g, group in enumerate(document.groups):
        group_path = f"groups[{g}]"
        if group.category is None:
            violations.append(Violation(f"{group_path}.category", "group has no category"))
        for c, checklist in enumerate(group.checklists):
            for i, item in enumerate(checklist.items):
                violations.extend(_validate_item(f"{group_path}.checklists[{c}].items[{i}]", item))

    if violations:
        logger.debug(f"Validation found {len(violations)} violation(s)")
    return ValidationResult(violations)
