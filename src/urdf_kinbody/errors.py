"""Conversion failure type shared by the parser and the converters."""

import enum


class ErrorKind(str, enum.Enum):
    """Why a conversion was aborted."""

    PARSE_FAILED = "parse_failed"
    UNSUPPORTED_GEOMETRY = "unsupported_geometry"
    UNSUPPORTED_JOINT_TYPE = "unsupported_joint_type"
    INVALID_JOINT_ORDER = "invalid_joint_order"


class ConversionError(Exception):
    """A fatal condition: the whole conversion stops and nothing is built.

    Attributes:
        kind: Category of the failure.
        reason: Human-readable description, also used as the message.
    """

    def __init__(self, kind: ErrorKind, reason: str):
        super().__init__(reason)
        self.kind = kind
        self.reason = reason

    def __repr__(self) -> str:
        return f"ConversionError({self.kind.value}: {self.reason})"
