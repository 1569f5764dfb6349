"""Lint request, backend finding, and diagnostic models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class Severity(StrEnum):
    META = "meta"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def from_backend(cls, severity: int) -> Severity:
        """Map an html-validate severity (1 = warn, 2 = error) to a Severity."""
        match severity:
            case 1:
                return cls.WARNING
            case 2:
                return cls.ERROR
            case _:
                return cls.META


class Position(BaseModel):
    """Zero-based line/character position inside a document."""

    line: int
    ch: int


# Diagnostics anchored here describe the project config, not the document.
CONFIG_ERROR_POSITION = Position(line=-1, ch=0)


class Diagnostic(BaseModel):
    """A single positioned finding reported to the inspection host."""

    pos: Position
    end_pos: Position | None = Field(None, alias="endPos")
    message: str
    type: Severity
    more_info_url: str | None = Field(None, alias="moreInfoURL")

    model_config = {"populate_by_name": True}


class ScanResult(BaseModel):
    """Result of scanning one file: the list of diagnostics."""

    errors: list[Diagnostic] = []


class RawFinding(BaseModel):
    """One finding as returned by the lint backend.

    ``start`` and ``end`` are absolute character offsets into the linted text.
    """

    start: int
    end: int
    message: str
    rule_id: str = Field(alias="ruleId")
    severity: int
    rule_url: str | None = Field(None, alias="ruleUrl")

    model_config = {"populate_by_name": True}


class LintRequest(BaseModel):
    """Payload sent to the lint backend for one document."""

    text: str
    file_path: str = Field(alias="filePath")
    generation: int = 0
    config: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}
