"""Regex-based PII detector for chunk content.

The detector runs every registered :class:`PatternFamily` over the text and
reports each occurrence with a masked value, its offset, a confidence score
and a short context window.  Raw matched values never leave this module.

Example
-------
>>> detector = PiiDetector()
>>> matches = detector.detect("Contact john@example.com or call 555-123-4567")
>>> [(m.pii_type, m.value) for m in matches]
[('email', 'j***@example.com'), ('phone', '***-***-4567')]
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass

from aumos_chunk_compliance.detection.patterns import (
    BUILTIN_PATTERNS,
    DEFAULT_MASK,
    PatternFamily,
    default_confidence,
    default_mask,
)

CONTEXT_RADIUS = 10


@dataclass(frozen=True)
class PiiMatch:
    """A single detected PII occurrence.

    Attributes
    ----------
    pii_type:
        Pattern family label (e.g. ``"email"``, ``"ssn"``).
    value:
        Masked representation of the matched text.
    position:
        Character offset of the match within the scanned text.
    confidence:
        Structural confidence score in ``[0, 1]``.
    context:
        Up to ``CONTEXT_RADIUS`` characters either side of the match, with
        the match itself replaced by ``value`` and any other match in the
        window masked as well.
    """

    pii_type: str
    value: str
    position: int
    confidence: float
    context: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


class PiiDetector:
    """Scans text for structured PII tokens.

    Parameters
    ----------
    patterns:
        Pattern families to load.  Defaults to :data:`BUILTIN_PATTERNS`.
    """

    def __init__(self, patterns: Iterable[PatternFamily] | None = None) -> None:
        self._patterns: list[PatternFamily] = list(
            patterns if patterns is not None else BUILTIN_PATTERNS
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def detect(self, text: str) -> list[PiiMatch]:
        """Return all PII matches found in the text.

        Parameters
        ----------
        text:
            The string to scan.

        Returns
        -------
        list[PiiMatch]
            Matches ordered by offset.  Matches of different families may
            overlap; matches of the same family never do.
        """
        spans: list[_Span] = []
        for order, family in enumerate(self._patterns):
            for m in family.pattern.finditer(text):
                raw = m.group()
                spans.append(
                    _Span(
                        start=m.start(),
                        end=m.end(),
                        order=order,
                        label=family.label,
                        masked=family.mask(raw),
                        confidence=family.confidence(raw),
                    )
                )
        spans.sort(key=lambda s: (s.start, s.order))

        # Every match inside a context window is masked, not only its own.
        return [
            PiiMatch(
                pii_type=span.label,
                value=span.masked,
                position=span.start,
                confidence=span.confidence,
                context=_masked_context(text, span, spans),
            )
            for span in spans
        ]

    def contains_pii(self, text: str) -> bool:
        """Return ``True`` as soon as any pattern matches."""
        return any(family.pattern.search(text) for family in self._patterns)

    def detect_types(self, text: str) -> set[str]:
        """Return the set of PII type labels found in the text."""
        return {m.pii_type for m in self.detect(text)}

    def add_pattern(
        self,
        label: str,
        pattern: str | re.Pattern[str],
        mask: Callable[[str], str] | None = None,
        confidence: Callable[[str], float] | None = None,
    ) -> None:
        """Register an additional pattern family at runtime.

        Parameters
        ----------
        label:
            PII type tag for the new family.
        pattern:
            Regex source or compiled pattern.  Invalid sources raise
            :class:`re.error` here rather than during detection.
        mask:
            Masking rule; defaults to a fully opaque mask.
        confidence:
            Confidence heuristic; defaults to a fixed baseline score.
        """
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        self._patterns.append(
            PatternFamily(
                label=label,
                pattern=compiled,
                mask=mask or default_mask,
                confidence=confidence or default_confidence,
            )
        )

    @property
    def pattern_labels(self) -> list[str]:
        """Labels of the loaded pattern families, in evaluation order."""
        return [family.label for family in self._patterns]


@dataclass(frozen=True)
class _Span:
    start: int
    end: int
    order: int
    label: str
    masked: str
    confidence: float


def _masked_context(text: str, span: _Span, spans: list[_Span]) -> str:
    context_start = max(0, span.start - CONTEXT_RADIUS)
    context_end = min(len(text), span.end + CONTEXT_RADIUS)
    return (
        _mask_segment(text, context_start, span.start, spans)
        + span.masked
        + _mask_segment(text, span.end, context_end, spans)
    )


def _mask_segment(text: str, seg_start: int, seg_end: int, spans: list[_Span]) -> str:
    """Return ``text[seg_start:seg_end]`` with every overlapping match masked.

    A match lying wholly inside the segment shows its masked value; one cut
    by a segment edge collapses to the opaque mask.
    """
    parts: list[str] = []
    pos = seg_start
    for other in spans:
        if other.end <= pos or other.start >= seg_end:
            continue
        if other.start > pos:
            parts.append(text[pos:other.start])
        inside = other.start >= pos and other.end <= seg_end
        parts.append(other.masked if inside else DEFAULT_MASK)
        pos = min(other.end, seg_end)
        if pos >= seg_end:
            break
    if pos < seg_end:
        parts.append(text[pos:seg_end])
    return "".join(parts)
