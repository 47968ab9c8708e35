"""
SSOConfig - SSO session management for the shared credentials config file.

Pure line-sequence transformations over an INI-like profile file.

Sections are located by their header line (``[<kind> <name>]``) and run up to,
but not including, the next line that starts with ``[`` or the end of the
sequence. Body lines are never parsed; they are only moved or dropped as a
block. None of the functions here perform I/O.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

SSO_SESSION_SECTION_NAME = "sso-session"
PROFILE_SECTION_NAME = "profile"
CONNECTION_ID_DELIMITER = f"{SSO_SESSION_SECTION_NAME}:"


@dataclass(frozen=True)
class Section:
    """A located section: header at ``start``, body up to ``end`` (exclusive)."""

    kind: str
    name: Optional[str]
    start: int
    end: int

    @property
    def header(self) -> str:
        if self.name is None:
            return f"[{self.kind}]"
        return f"[{self.kind} {self.name}]"

    def __len__(self) -> int:
        return self.end - self.start


def section_header(kind: str, name: str) -> str:
    """Render the header line for a section."""
    return f"[{kind} {name}]"


def find_header(lines: Sequence[str], prefix: str, start: int = 0) -> int:
    """
    Find the first line at or after ``start`` that begins with ``prefix``.

    Args:
        lines: The file content, one entry per line
        prefix: Header prefix to look for (case and whitespace sensitive)
        start: Index to begin scanning at

    Returns:
        Index of the matching line, or -1 if there is none
    """
    for index in range(start, len(lines)):
        if lines[index].startswith(prefix):
            return index
    return -1


def section_end(lines: Sequence[str], header_index: int) -> int:
    """Index of the next line starting a section after ``header_index``, or ``len(lines)``."""
    next_header = find_header(lines, "[", header_index + 1)
    return len(lines) if next_header == -1 else next_header


def remove_section(lines: Sequence[str], header_index: int) -> List[str]:
    """
    Remove the section whose header sits at ``header_index``.

    Returns a new list; ``lines`` is left untouched.
    """
    end = section_end(lines, header_index)
    return list(lines[:header_index]) + list(lines[end:])


def delete_section(session_name: str, lines: Sequence[str]) -> List[str]:
    """
    Remove an sso-session section and its first dependent profile section.

    The dependent profile is the first ``[profile <session_name>-...]`` section
    found after the session section has been removed. Only the first match of
    each is removed. When the session section is missing the lines come back
    unchanged, so repeated calls are no-ops.

    Args:
        session_name: Name of the sso-session to remove
        lines: Current file content, one entry per line

    Returns:
        The updated lines, ready to be joined with ``"\\n"``
    """
    session_index = find_header(
        lines, section_header(SSO_SESSION_SECTION_NAME, session_name)
    )
    if session_index == -1:
        return list(lines)

    updated = remove_section(lines, session_index)

    profile_index = find_header(updated, f"[{PROFILE_SECTION_NAME} {session_name}-")
    if profile_index != -1:
        updated = remove_section(updated, profile_index)

    return updated


def _parse_header(line: str):
    stripped = line.strip()
    if not (stripped.startswith("[") and stripped.endswith("]")) or len(stripped) < 3:
        return None
    inner = stripped[1:-1].strip()
    if not inner:
        return None
    parts = inner.split(None, 1)
    if len(parts) == 1:
        return parts[0], None
    return parts[0], parts[1].strip()


def iter_sections(lines: Sequence[str]) -> Iterator[Section]:
    """
    Yield every well-formed section in file order.

    Lines starting with ``[`` that are not a complete ``[kind name]`` header
    still end the previous section but are not reported themselves.
    """
    index = find_header(lines, "[")
    while index != -1:
        end = section_end(lines, index)
        parsed = _parse_header(lines[index])
        if parsed is not None:
            kind, name = parsed
            yield Section(kind=kind, name=name, start=index, end=end)
        index = end if end < len(lines) else -1


def upsert_section(
    lines: Sequence[str],
    kind: str,
    name: str,
    properties: Dict[str, str],
) -> List[str]:
    """
    Write a section with the given properties, replacing any existing body.

    An existing ``[kind name]`` section keeps its position and its trailing
    blank line, if it had one. A new section is appended at the end of the
    file, separated from earlier content by a single blank line.

    Args:
        lines: Current file content
        kind: Section kind (e.g. ``sso-session``)
        name: Section name
        properties: Keys and values to write, in order

    Returns:
        The updated lines
    """
    header = section_header(kind, name)
    body = [f"{key} = {value}" for key, value in properties.items()]

    header_index = find_header(lines, header)
    if header_index != -1:
        end = section_end(lines, header_index)
        old_body = lines[header_index + 1:end]
        trailer = [""] if old_body and old_body[-1].strip() == "" else []
        return (
            list(lines[:header_index])
            + [header]
            + body
            + trailer
            + list(lines[end:])
        )

    updated = list(lines)
    if updated and updated[-1].strip() != "":
        updated.append("")
    return updated + [header] + body


def session_name_from_connection_id(connection_id: str) -> str:
    """Strip the ``sso-session:`` prefix from a bearer connection id."""
    _, delimiter, remainder = connection_id.partition(CONNECTION_ID_DELIMITER)
    return remainder if delimiter else connection_id
