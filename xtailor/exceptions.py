"""Exceptions raised while parsing and editing tailoring documents."""

from __future__ import annotations

from typing import Any


class TailoringError(Exception):
    """Base error carrying an optional context mapping.

    Attributes:
        msg: Human readable message.
        ctx: Extra details (idref, field name, ...) shown after the message.
    """

    def __init__(self, msg: str, ctx: dict[str, Any] | None = None) -> None:
        super().__init__(msg)
        self.msg = msg
        self.ctx = ctx or {}

    def __str__(self) -> str:
        if self.ctx:
            details = ", ".join(f"{k}={v}" for k, v in self.ctx.items())
            return f"{self.msg} [{details}]"
        return self.msg


class ParseError(TailoringError):
    """The input could not be turned into a tailoring document."""


class MalformedDocumentError(ParseError):
    """The input is not well-formed XML."""


class MissingProfileError(ParseError):
    """The input has no ``Profile`` element."""


class ValidationError(TailoringError):
    """An edit was rejected because it would break the model."""


class MissingIdrefError(ValidationError):
    """An item was added or edited without an identifier."""


class InvalidFieldError(ValidationError):
    """Unknown field name or a value outside the allowed choices."""


class DuplicateRuleError(ValidationError):
    """A second rule item was requested for an idref that already has one."""


class NoDocumentError(TailoringError):
    """The session has not loaded a document yet."""
