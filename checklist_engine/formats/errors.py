"""
Error taxonomy for checklist conversions.

Every failure carries enough context (offsets, offending values, document
paths) for a caller to present a precise message. Errors are terminal for the
single conversion attempt that raised them.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ConversionError(Exception):
    """Base class for all conversion failures."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        """Structured form of the error for callers across a process boundary."""
        return {"error": type(self).__name__, "message": self.message, **self.context}


class DecodeError(ConversionError):
    """Raised when external bytes cannot be turned into a document."""


class EncodeError(ConversionError):
    """Raised when a document cannot be written in the requested format."""


class UnsupportedFormat(ConversionError):
    """No codec is registered for the requested format id."""

    def __init__(self, format_id: Any) -> None:
        super().__init__(f"Unsupported format: {format_id!r}", format_id=str(format_id))
        self.format_id = format_id


class InvalidDocument(ConversionError):
    """The canonical document violates a structural invariant."""

    def __init__(self, violations: List[Any], stage: str) -> None:
        summary = "; ".join(f"{v.path}: {v.message}" for v in violations[:5])
        if len(violations) > 5:
            summary += f" (+{len(violations) - 5} more)"
        super().__init__(
            f"Document failed validation {stage}: {summary}",
            stage=stage,
            violations=[{"path": v.path, "message": v.message} for v in violations],
        )
        self.violations = violations
        self.stage = stage


class InvalidDecodedDocument(InvalidDocument, DecodeError):
    """Decoding produced a document that violates a structural invariant."""

    def __init__(self, violations: List[Any]) -> None:
        super().__init__(violations, "after decode")


class InvalidDocumentToEncode(InvalidDocument, EncodeError):
    """The document handed to an encoder violates a structural invariant."""

    def __init__(self, violations: List[Any]) -> None:
        super().__init__(violations, "before encode")


# Decode errors

class MalformedLine(DecodeError):
    """A binary line could not be parsed at a known byte offset."""

    def __init__(self, offset: int, byte: Optional[int] = None, reason: str = "unexpected control byte") -> None:
        shown = f" 0x{byte:02x}" if byte is not None else ""
        super().__init__(f"Malformed line at offset {offset}: {reason}{shown}", offset=offset, byte=byte)
        self.offset = offset
        self.byte = byte


class MalformedMarkup(DecodeError):
    """The markup failed the syntax validation pass."""

    def __init__(self, reason: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        where = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"Malformed markup{where}: {reason}", line=line, column=column)
        self.line = line
        self.column = column


class MalformedJson(DecodeError):
    """The JSON payload is not syntactically valid."""

    def __init__(self, reason: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        where = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"Malformed JSON{where}: {reason}", line=line, column=column)
        self.line = line
        self.column = column


class ChecksumMismatch(DecodeError):
    """The stored checksum disagrees with the recomputed one."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Checksum mismatch: stored 0x{expected:08x}, computed 0x{actual:08x}",
            expected=expected,
            actual=actual,
        )
        self.expected = expected
        self.actual = actual


class UnsupportedContainerVersion(DecodeError):
    """The container envelope declares an unhandled version, type or shape."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"Unsupported container {field}: {value!r}", field=field, value=value)
        self.field = field
        self.value = value


class UnsupportedGroupKey(DecodeError):
    """A (type, subtype) pair has no entry in the group mapping table."""

    def __init__(self, type_code: Any, subtype_code: Any) -> None:
        super().__init__(
            f"Unsupported group key (type={type_code!r}, subtype={subtype_code!r})",
            type=type_code,
            subtype=subtype_code,
        )
        self.type_code = type_code
        self.subtype_code = subtype_code


class UnsupportedCode(DecodeError):
    """An item type or completion action code has no table entry."""

    def __init__(self, axis: str, value: Any) -> None:
        super().__init__(f"Unsupported {axis} code: {value!r}", axis=axis, value=value)
        self.axis = axis
        self.value = value


class SchemaMismatch(DecodeError):
    """Well-formed input whose structure does not match the expected schema."""

    def __init__(self, reason: str, details: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(f"Schema mismatch: {reason}", details=details or [])
        self.details = details or []


# Encode errors

class UnrepresentableCharacter(EncodeError):
    """Canonical text contains a character the target format cannot carry."""

    def __init__(self, character: str, position: int, path: str) -> None:
        super().__init__(
            f"Character {character!r} at position {position} of {path} cannot be encoded",
            character=character,
            position=position,
            path=path,
        )
        self.character = character
        self.position = position
        self.path = path


class UnsupportedFeature(EncodeError):
    """The document uses a feature the target format has no convention for."""

    def __init__(self, feature: str, value: Any, path: str) -> None:
        super().__init__(
            f"{path}: {feature} {value!r} cannot be represented in this format",
            feature=feature,
            value=value,
            path=path,
        )
        self.feature = feature
        self.value = value
        self.path = path
