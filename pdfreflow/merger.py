"""Repair and merge passes over a flat, cross-page section sequence."""

import logging
import re
from dataclasses import replace

from pdfreflow import sections as sec
from pdfreflow.sections import Section

logger = logging.getLogger(__name__)

# Two or more word characters, a hyphen, optional whitespace, then a lowercase
# letter. The two-character minimum keeps compounds like "k-means" intact.
HYPHENATED_WORD_PATTERN = re.compile(r"(\w{2,})-\s*([a-z])")

SENTENCE_END_PATTERN = re.compile(r"[.!?]$")
CONTINUATION_WORD_PATTERN = re.compile(r"^(of|and|the|a|an|in|on|at|to|for|with|by)\s", re.IGNORECASE)


def fix_hyphenated_words(text: str) -> str:
    """Rejoin words split by a line-end hyphen inside one text.

    The substitution is repeated until nothing changes, so chains such as
    "ab-c-d" are fully joined and applying the fix twice is a no-op.

    Args:
        text: Text to repair.

    Returns:
        Text with hyphenation breaks removed.
    """
    while True:
        text, count = HYPHENATED_WORD_PATTERN.subn(r"\1\2", text)
        if not count:
            return text


def _starts_lowercase(text: str) -> bool:
    return bool(text) and text[0].islower()


def _ends_sentence(text: str) -> bool:
    return SENTENCE_END_PATTERN.search(text) is not None


class SectionMerger:
    """Runs the hyphenation, paragraph and heading merge passes in order."""

    SHORT_PARAGRAPH_LENGTH = 100
    MAX_CONTINUATION_LINE_LENGTH = 50
    MAX_LOWERCASE_CONTINUATION_LENGTH = 30

    def __init__(self, fix_hyphenation: bool = True, merge_paragraphs: bool = True, merge_headings: bool = True):
        """Initialize the merger.

        Args:
            fix_hyphenation: Run the hyphenation repair pass.
            merge_paragraphs: Run the iterative paragraph merge pass.
            merge_headings: Run the heading continuation pass.
        """
        self.fix_hyphenation = fix_hyphenation
        self.merge_paragraphs = merge_paragraphs
        self.merge_headings = merge_headings

    def merge(self, sections: list[Section]) -> list[Section]:
        """Apply the enabled passes and drop sections left without content.

        Args:
            sections: Sections of the whole document, in page order.

        Returns:
            New list of sections; never longer than the input.
        """
        result = list(sections)
        count_before = len(result)

        if self.fix_hyphenation:
            result = self.merge_hyphenated_words(result)
        if self.merge_paragraphs:
            result = self.merge_adjacent_paragraphs(result)
        if self.merge_headings:
            result = self.merge_adjacent_headings(result)

        result = [section for section in result if not section.is_empty]
        logger.debug("Merged %d sections into %d", count_before, len(result))
        return result

    def merge_hyphenated_words(self, sections: list[Section]) -> list[Section]:
        """Repair hyphenation inside sections and across paragraph boundaries.

        A paragraph ending in "-" followed by a paragraph starting with a
        lowercase letter is folded into one. The folded paragraph stays
        eligible, so a word broken over three fragments is joined in one pass.
        """
        merged: list[Section] = []

        for section in sections:
            if section.content:
                section = replace(section, content=fix_hyphenated_words(section.content))

            previous = merged[-1] if merged else None
            if previous is not None and previous.is_paragraph and section.is_paragraph:
                previous_text = previous.content.strip()
                next_text = section.content.strip()
                if previous_text.endswith("-") and _starts_lowercase(next_text):
                    merged[-1] = sec.paragraph(fix_hyphenated_words(previous_text[:-1] + next_text))
                    continue

            merged.append(section)

        return merged

    def merge_adjacent_paragraphs(self, sections: list[Section]) -> list[Section]:
        """Merge paragraphs split by layout boundaries until nothing changes."""
        merged = list(sections)
        changed = True

        while changed:
            changed = False
            result: list[Section] = []
            i = 0

            while i < len(merged):
                current = merged[i]
                following = merged[i + 1] if i + 1 < len(merged) else None

                if following is not None and current.is_paragraph and following.is_paragraph:
                    if self._should_merge_paragraphs(current.content.strip(), following.content.strip()):
                        result.append(sec.paragraph(f"{current.content} {following.content}"))
                        i += 2
                        changed = True
                        continue

                result.append(current)
                i += 1

            merged = result

        return merged

    def _should_merge_paragraphs(self, current_text: str, next_text: str) -> bool:
        """Decide whether two adjacent paragraph texts belong together.

        Args:
            current_text: Trimmed text of the first paragraph.
            next_text: Trimmed text of the second paragraph.

        Returns:
            True if the second paragraph continues the first.
        """
        if not next_text:
            return False

        ends_sentence = _ends_sentence(current_text)
        next_lowercase = _starts_lowercase(next_text)
        is_short_incomplete = len(current_text) < self.SHORT_PARAGRAPH_LENGTH and not ends_sentence

        return (
            (not ends_sentence and next_lowercase)
            or current_text.endswith("-")
            or (is_short_incomplete and next_lowercase)
        )

    def merge_adjacent_headings(self, sections: list[Section]) -> list[Section]:
        """Attach heading continuations and join same-level heading runs.

        A heading followed by a paragraph whose first line reads like the
        rest of the heading ("of Visual Features") takes that line; any
        further lines stay behind as a paragraph. Two consecutive headings
        of the same level become one.
        """
        merged: list[Section] = []
        i = 0

        while i < len(sections):
            current = sections[i]
            following = sections[i + 1] if i + 1 < len(sections) else None

            if following is not None and current.is_heading and following.is_paragraph:
                lines = following.content.strip().split("\n")
                first_line = lines[0].strip()
                continues_heading = first_line and self._looks_like_continuation(first_line)
                if continues_heading and not _ends_sentence(current.content.strip()):
                    merged.append(sec.heading(f"{current.content} {first_line}", current.level))
                    remaining = "\n".join(lines[1:]).strip()
                    if remaining:
                        merged.append(sec.paragraph(remaining))
                    i += 2
                    continue

            same_level_headings = (
                following is not None
                and current.is_heading
                and following.is_heading
                and current.level == following.level
            )
            if same_level_headings:
                merged.append(sec.heading(f"{current.content} {following.content}", current.level))
                i += 2
                continue

            merged.append(current)
            i += 1

        return merged

    def _looks_like_continuation(self, line: str) -> bool:
        if len(line) >= self.MAX_CONTINUATION_LINE_LENGTH:
            return False
        if CONTINUATION_WORD_PATTERN.match(line):
            return True
        starts_uppercase = bool(line) and line[0].isupper()
        return not starts_uppercase and len(line) < self.MAX_LOWERCASE_CONTINUATION_LENGTH


def merge_sections(sections: list[Section]) -> list[Section]:
    """Run all merge passes with default settings."""
    return SectionMerger().merge(sections)
