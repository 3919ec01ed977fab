from __future__ import annotations

from typing import Protocol

from .writer import CodeWriter


class DocumentedElement(Protocol):
    summary: str | None
    obsolete: bool
    obsolete_message: str | None


def doc_lines(
    summary: str | None,
    obsolete: bool = False,
    obsolete_message: str | None = None,
) -> list[str]:
    """Build the lines of a doc comment.

    Example:
        >>> doc_lines("The widget.", obsolete=True, obsolete_message="Use gadgets.")
        ['The widget.', 'Deprecated: Use gadgets.']
    """
    lines: list[str] = []
    if summary and summary.strip():
        lines.append(summary.strip())
    if obsolete:
        message = (obsolete_message or "").strip()
        lines.append(f"Deprecated: {message}" if message else "Deprecated.")
    return lines


def element_doc_lines(element: DocumentedElement) -> list[str]:
    return doc_lines(element.summary, element.obsolete, element.obsolete_message)


def write_docstring(code: CodeWriter, lines: list[str]) -> None:
    """Write a docstring; one line when possible."""
    if not lines:
        return
    escaped = [_escape(line) for line in lines]
    if len(escaped) == 1:
        code.line(f'"""{escaped[0]}"""')
        return
    code.line(f'"""{escaped[0]}')
    code.line("")
    for line in escaped[1:]:
        code.line(line)
    code.line('"""')


def write_doc_comment(code: CodeWriter, lines: list[str]) -> None:
    """Write ``#:`` doc comment lines for attributes, keys and members."""
    for line in lines:
        for part in line.splitlines():
            code.line(f"#: {part}".rstrip())


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
