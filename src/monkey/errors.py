"""
Parser diagnostics.

Parse problems are collected, never raised: the parser records a Diagnostic
for each defect and keeps going. Evaluation errors are not represented here;
they are first-class runtime values (see monkey.runtime.values.Error).

Codes:
- E101: unexpected token
- E102: token cannot start an expression
- E103: integer literal out of range
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from .tokens import SourceLocation, SourceSpan


class ErrorSeverity(Enum):
    ERROR = "error"


def _location_json(loc: SourceLocation) -> Dict[str, int]:
    return {"line": loc.line, "column": loc.column, "offset": loc.offset}


@dataclass
class Diagnostic:
    """One problem found in the source, with where it happened if known."""
    code: str
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None
    hints: List[str] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.severity is ErrorSeverity.ERROR

    def _underline(self) -> str:
        start, end = self.span.start, self.span.end
        stop = end.column if end.line == start.line else len(self.source_line) + 1
        width = max(1, stop - start.column)
        return " " * (start.column - 1) + "^" * width

    def format(self, show_source: bool = True) -> str:
        """
        Render as

            1:7-1:8: error[E101]: expected next token to be =, got 5 instead
              |
            1 | let x 5;
              |       ^
        """
        where = f"{self.span}: " if self.span is not None else ""
        lines = [f"{where}{self.severity.value}[{self.code}]: {self.message}"]

        if show_source and self.span is not None and self.source_line is not None:
            gutter = len(str(self.span.start.line))
            pad = " " * gutter
            lines.append(f"{pad} |")
            lines.append(f"{self.span.start.line} | {self.source_line}")
            lines.append(f"{pad} | {self._underline()}")

        lines.extend(f"{' ' * 2}= hint: {hint}" for hint in self.hints)
        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        """Plain-data form for editors and other tools."""
        data: Dict[str, Any] = {
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "hints": list(self.hints),
        }
        if self.span is not None:
            data["range"] = {
                "start": _location_json(self.span.start),
                "end": _location_json(self.span.end),
            }
        return data


def error_unexpected_token(expected: str, found: str, span: Optional[SourceSpan],
                           source_line: Optional[str] = None) -> Diagnostic:
    """E101: the token after the current one is not the one the grammar needs."""
    return Diagnostic(
        "E101",
        f"expected next token to be {expected}, got {found} instead",
        span=span,
        source_line=source_line,
    )


def error_no_prefix_rule(token_type: str, span: Optional[SourceSpan],
                         source_line: Optional[str] = None) -> Diagnostic:
    """E102: no expression can start with this token."""
    return Diagnostic(
        "E102",
        f"no prefix parse function for {token_type} found",
        span=span,
        source_line=source_line,
    )


def error_invalid_integer(literal: str, span: Optional[SourceSpan],
                          source_line: Optional[str] = None) -> Diagnostic:
    """E103: integer literal outside the signed 64-bit range."""
    return Diagnostic(
        "E103",
        f'could not parse "{literal}" as integer',
        span=span,
        source_line=source_line,
        hints=["integers are signed 64-bit: -9223372036854775808 to 9223372036854775807"],
    )


class DiagnosticCollector:
    """
    Accumulates diagnostics in the order they were found.

    Once `max_errors` errors have been recorded `should_stop` turns true; the
    parser checks it between statements.
    """

    def __init__(self, max_errors: int = 20):
        self.max_errors = max_errors
        self.diagnostics: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.is_error)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    @property
    def should_stop(self) -> bool:
        return self.error_count >= self.max_errors

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def format_all(self, show_source: bool = True) -> str:
        """All diagnostics separated by blank lines, then an error total."""
        blocks = [d.format(show_source) for d in self.diagnostics]
        if self.has_errors:
            blocks.append(f"{self.error_count} error(s)")
        return "\n\n".join(blocks)

    def to_json(self) -> Dict[str, Any]:
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self.error_count,
        }
