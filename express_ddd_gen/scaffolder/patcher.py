"""Idempotent anchor-relative text patching.

Generated projects keep their dependency-injection wiring in plain TypeScript
files (``types.ts``, ``container.ts``, ``routes/index.ts``).  When a new
domain is scaffolded those files must gain a few import/binding lines exactly
once, without disturbing anything else in them.

A :class:`Patch` names an anchor (literal substring or compiled regex), the
text to insert and where to put it relative to the anchor:

``after``
    right after the first match of the anchor.
``before``
    right before the first match (end-of-block anchors such as ``};``).
``section``
    at the end of the comment-headed block that starts at the anchor.

Sections are found by parsing the text into a minimal structured model (see
:func:`parse_sections`): a header comment line plus the run of member lines
that follows it.  Only offsets are recorded, so every byte outside the
inserted block is preserved verbatim.  Inserted text uses the newline
sequence of the file being patched (``\r\n`` or ``\n``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from ..errors import PatchWarning

Anchor = Union[str, re.Pattern]


class Placement(str, Enum):
    """Where a patch is inserted relative to its anchor."""

    AFTER = "after"
    BEFORE = "before"
    SECTION = "section"


@dataclass
class Patch:
    """One idempotent insertion.

    ``duplicate_test`` decides whether the patch is already applied.  When
    omitted, the patch counts as applied if its stripped text already occurs
    in the source.
    """

    anchor: Anchor
    text: str
    placement: Placement = Placement.AFTER
    duplicate_test: Optional[Callable[[str], bool]] = None
    separator: Optional[str] = None
    label: str = ""

    def is_applied(self, source: str) -> bool:
        if self.duplicate_test is not None:
            return self.duplicate_test(source)
        return self.text.strip() in source

    @property
    def description(self) -> str:
        if self.label:
            return self.label
        anchor = self.anchor.pattern if isinstance(self.anchor, re.Pattern) else self.anchor
        return f"{self.placement.value} {anchor!r}"


@dataclass
class PatchResult:
    """Outcome of :func:`apply_patches`."""

    text: str
    original: str
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    warnings: list[PatchWarning] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.text != self.original


# ---------------------------------------------------------------------------
# Structured section model
# ---------------------------------------------------------------------------

_HEADER_RE = re.compile(r"^[ \t]*//[ \t]*(?P<name>\S.*?)[ \t]*$")
_CLOSING_RE = re.compile(r"^[ \t]*(\}|\)|\]|export\b)")


@dataclass(frozen=True)
class Section:
    """A comment header and the contiguous member lines under it.

    ``end`` is the offset right after the last member line (including its
    newline when present), or right after the header when the section is
    empty.
    """

    name: str
    start: int
    body_start: int
    end: int
    members: int


def _lines_with_offsets(text: str) -> list[tuple[int, str]]:
    offsets: list[tuple[int, str]] = []
    pos = 0
    for line in text.splitlines(keepends=True):
        offsets.append((pos, line))
        pos += len(line)
    return offsets


def parse_sections(text: str) -> list[Section]:
    """Split *text* into comment-headed sections.

    A section is a ``// Name`` line followed by consecutive non-blank member
    lines; it ends at a blank line, at the next comment line, or at a closing
    line (``}``, ``)``, ``]``, ``export``).  Text between sections is left
    out of the model and therefore never touched.
    """
    lines = _lines_with_offsets(text)
    sections: list[Section] = []
    i = 0
    while i < len(lines):
        offset, line = lines[i]
        match = _HEADER_RE.match(line.rstrip("\r\n"))
        if not match:
            i += 1
            continue
        body_start = offset + len(line)
        end = body_start
        members = 0
        j = i + 1
        while j < len(lines):
            member_offset, member = lines[j]
            stripped = member.rstrip("\r\n")
            if not stripped.strip() or _HEADER_RE.match(stripped) or _CLOSING_RE.match(stripped):
                break
            end = member_offset + len(member)
            members += 1
            j += 1
        sections.append(Section(match.group("name"), offset, body_start, end, members))
        i = j
    return sections


# ---------------------------------------------------------------------------
# Anchor lookup
# ---------------------------------------------------------------------------


def find_anchor(text: str, anchor: Anchor) -> Optional[tuple[int, int]]:
    """Return the ``(start, end)`` span of the first match of *anchor*."""
    if isinstance(anchor, re.Pattern):
        match = anchor.search(text)
        return match.span() if match else None
    index = text.find(anchor)
    if index == -1:
        return None
    return index, index + len(anchor)


def _section_insertion_point(text: str, span: tuple[int, int]) -> Optional[int]:
    line_start = text.rfind("\n", 0, span[0]) + 1
    for section in parse_sections(text):
        if section.start == line_start:
            return section.end
    return None


def _ensure_line_break(text: str, position: int, newline: str = "\n") -> tuple[str, int]:
    """Make sure *position* sits at the start of a line."""
    if position == 0 or text[position - 1] == "\n":
        return text, position
    return text[:position] + newline + text[position:], position + len(newline)


def detect_newline(text: str) -> str:
    """The dominant line ending of *text*: ``\\r\\n`` or ``\\n``."""
    crlf = text.count("\r\n")
    return "\r\n" if crlf > text.count("\n") - crlf else "\n"


def _recover_separator(text: str, position: int, separator: str) -> tuple[str, int]:
    """Append *separator* to the last entry before *position* if it lacks one."""
    cursor = position
    while cursor > 0:
        line_start = text.rfind("\n", 0, cursor - 1) + 1
        line = text[line_start:cursor].rstrip("\r\n")
        stripped = line.strip()
        if stripped and not stripped.startswith("//"):
            if stripped.endswith((separator, "{", "[", "(")):
                return text, position
            insert_at = line_start + len(line.rstrip())
            return text[:insert_at] + separator + text[insert_at:], position + len(separator)
        cursor = line_start
    return text, position


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_patch(text: str, patch: Patch, newline: str = "\n") -> tuple[str, Optional[PatchWarning]]:
    """Apply one patch.  Returns the new text and a warning, if any."""
    span = find_anchor(text, patch.anchor)
    if span is None:
        return text, PatchWarning(f"Anchor not found for {patch.description}; patch skipped")

    if patch.placement is Placement.AFTER:
        position = span[1]
    elif patch.placement is Placement.BEFORE:
        position = span[0]
    else:
        section_end = _section_insertion_point(text, span)
        if section_end is None:
            return text, PatchWarning(
                f"Anchor for {patch.description} is not a section header; patch skipped"
            )
        text, position = _ensure_line_break(text, section_end, newline)

    if patch.separator:
        text, position = _recover_separator(text, position, patch.separator)

    return text[:position] + patch.text + text[position:], None


def apply_patches(source: str, patches: Sequence[Patch]) -> PatchResult:
    """Apply *patches* in order against the progressively updated text.

    Patches whose ``duplicate_test`` already holds are skipped; patches whose
    anchor is missing leave the text unchanged and add a warning.  Applying
    the same patch set twice yields the same text as applying it once.
    """
    result = PatchResult(text=source, original=source)
    newline = detect_newline(source)
    for patch in patches:
        if newline != "\n":
            patch = replace(patch, text=patch.text.replace("\r\n", "\n").replace("\n", newline))
        if patch.is_applied(result.text):
            result.skipped.append(patch.description)
            continue
        text, warning = apply_patch(result.text, patch, newline)
        if warning is not None:
            result.warnings.append(warning)
            continue
        result.text = text
        result.applied.append(patch.description)
    return result


def whole_line(text: str) -> "re.Pattern[str]":
    """Anchor matching *text* as a complete line (e.g. ``// Domain``)."""
    return re.compile(rf"^[ \t]*{re.escape(text)}[ \t]*(?=\r?$)", re.MULTILINE)
