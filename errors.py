"""Errors raised while turning a Solidity AST into class models."""

from typing import Any, Optional


class StructuralError(ValueError):
    """
    The AST has a shape this adapter does not understand.

    Raised for input that a well-formed parser run never produces, or
    for constructs newer than this adapter. Parsing of the whole unit
    stops; `value` holds the offending kind/keyword and `source_file`
    is filled in by the driver.
    """

    reason = "unsupported AST shape"

    def __init__(self, value: Any, source_file: Optional[str] = None) -> None:
        self.value = value
        self.source_file = source_file
        super().__init__(f"{self.reason}: {value!r}")

    def __str__(self) -> str:
        message = f"{self.reason}: {self.value!r}"
        if self.source_file:
            message += f" (in {self.source_file})"
        return message

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "message": str(self),
            "value": repr(self.value),
            "source_file": self.source_file,
        }


class NotASourceUnitError(StructuralError):
    reason = "AST node not of type SourceUnit"


class UnknownDeclarationKindError(StructuralError):
    reason = "Invalid contract kind, expected contract, interface or library"


class UnknownVisibilityError(StructuralError):
    reason = "Invalid visibility, expected public, external, internal or private"


class UnknownTypeNameKindError(StructuralError):
    reason = "Invalid type name"


class UnsupportedLanguageError(ValueError):
    """No adapter is registered for the requested language."""

    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(f"Parsing not yet implemented for language: {language}")
