"""Replacement engine — exact-match string edits behind Edit and MultiEdit.

Matching is literal (no regex, no whitespace normalization). A spec without
replace_all must match exactly once; a sequence of specs is applied in order,
each one seeing the previous one's output, and fails as a whole.
Pure Python — no I/O, no state.
"""

from dataclasses import dataclass
from typing import Sequence


class EditError(ValueError):
    """Base class for replacement failures. ``index`` is set by apply_sequence."""

    index = None


class IdenticalStringsError(EditError):
    def __init__(self):
        super().__init__("old_string and new_string must be different")


class EmptyOldTextError(EditError):
    def __init__(self):
        super().__init__("old_string must not be empty")


class NotFoundError(EditError):
    def __init__(self, old_text: str):
        self.old_text = old_text
        super().__init__(f'old_string not found in file: "{old_text}"')


class AmbiguousMatchError(EditError):
    def __init__(self, count: int, old_text: str):
        self.count = count
        self.old_text = old_text
        super().__init__(
            f'old_string "{old_text}" appears {count} times in file. '
            "Use replace_all or provide more context."
        )


class EmptySpecListError(EditError):
    def __init__(self):
        super().__init__("edits must contain at least one edit")


@dataclass(frozen=True)
class ReplacementSpec:
    old_text: str
    new_text: str
    replace_all: bool = False


@dataclass(frozen=True)
class EditResult:
    content: str
    applied: int


def apply_single(content: str, spec: ReplacementSpec) -> str:
    """Apply one spec to ``content`` and return the new text.

    Raises IdenticalStringsError, EmptyOldTextError, NotFoundError or
    AmbiguousMatchError. Replace-all with zero matches returns ``content``.
    """
    if spec.old_text == spec.new_text:
        raise IdenticalStringsError()
    if not spec.old_text:
        raise EmptyOldTextError()

    # str.replace is one left-to-right pass over non-overlapping matches
    if spec.replace_all:
        return content.replace(spec.old_text, spec.new_text)

    count = content.count(spec.old_text)
    if count == 0:
        raise NotFoundError(spec.old_text)
    if count > 1:
        raise AmbiguousMatchError(count, spec.old_text)
    return content.replace(spec.old_text, spec.new_text, 1)


def apply_sequence(content: str, specs: Sequence[ReplacementSpec]) -> EditResult:
    """Apply ``specs`` in order; all of them take effect or the first error is raised."""
    if not specs:
        raise EmptySpecListError()

    current = content
    for index, spec in enumerate(specs):
        try:
            current = apply_single(current, spec)
        except EditError as e:
            e.index = index
            raise
    return EditResult(content=current, applied=len(specs))
