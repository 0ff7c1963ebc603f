"""Separate document prose from structural noise.

Each noise rule is a pure predicate over one fragment of text; a fragment is
noise when any rule matches. The rules are tried in the order of NOISE_RULES.
"""
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Union

from quizgen.schemas import ExtractedText

MIN_FRAGMENT_LENGTH = 2
MIN_KEPT_FRAGMENT_LENGTH = 6
MIN_PAGE_LENGTH = 21
MIN_SENTENCE_LENGTH = 11
MIN_MEANINGFUL_WORDS = 20
MIN_READABLE_LENGTH = 100

FONT_NAMES = (
    "Arial Black", "Arial Narrow", "Arial", "Bookman Old Style", "Courier New",
    "Courier", "Georgia", "Helvetica", "Times New Roman", "Times", "Trebuchet MS",
    "Verdana", "Calibri", "Cambria",
)

_NUMERIC_RE = re.compile(r"^[\d.\s]+$")
_KEYWORD_RE = re.compile(
    r"^(page|pdf|version|size|encrypted|protected|confidential)\b[\s\d.:/#-]*(of\s+\d+)?$",
    re.IGNORECASE,
)
_MEASUREMENT_RE = re.compile(r"^\d+(\.\d+)?\s*(kb|mb|gb|bytes?|pt|px|mm|cm|in)$", re.IGNORECASE)
_TIME_RE = re.compile(r"^\d{1,2}:\d{2}")
_DATE_RE = re.compile(r"^\d{1,4}[/.-]\d{1,2}[/.-]\d{1,4}")
_SEPARATOR_RE = re.compile(r"^[-_=+*~.•·\s]{3,}$")
_METADATA_RE = re.compile(
    r"^(created|modified|author|title|subject|keywords|producer|creator)\s*:", re.IGNORECASE
)
_FONT_RE = re.compile(
    r"^(%s)(\s+(bold|italic|regular|\d+(\.\d+)?\s*pt))*\s*(:.*)?$"
    % "|".join(re.escape(name) for name in FONT_NAMES),
    re.IGNORECASE,
)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_UPPERCASE_RE = re.compile(r"^[A-Z\s]+$")
_NON_WORD_RE = re.compile(r"[^\w\s.,!?;:()\-'\"`]")


def is_numeric(text: str) -> bool:
    return bool(_NUMERIC_RE.match(text))


def is_structural_keyword(text: str) -> bool:
    return bool(_KEYWORD_RE.match(text))


def is_measurement(text: str) -> bool:
    return bool(_MEASUREMENT_RE.match(text))


def is_date_or_time(text: str) -> bool:
    return bool(_TIME_RE.match(text) or _DATE_RE.match(text))


def is_separator(text: str) -> bool:
    return bool(_SEPARATOR_RE.match(text))


def is_metadata_label(text: str) -> bool:
    return bool(_METADATA_RE.match(text))


def is_font_name(text: str) -> bool:
    return bool(_FONT_RE.match(text))


NOISE_RULES: tuple[Callable[[str], bool], ...] = (
    is_numeric,
    is_structural_keyword,
    is_measurement,
    is_date_or_time,
    is_separator,
    is_metadata_label,
    is_font_name,
)


def is_noise(text: str) -> bool:
    text = text.strip()
    if not text:
        return True
    return any(rule(text) for rule in NOISE_RULES)


@dataclass(frozen=True)
class FilteredText:
    text: str
    readable: bool


def _clean_fragments(fragments: Iterable[str]) -> str:
    kept = []
    for fragment in fragments:
        fragment = fragment.strip()
        if len(fragment) < MIN_FRAGMENT_LENGTH or is_noise(fragment):
            continue
        if len(fragment) >= MIN_KEPT_FRAGMENT_LENGTH:
            kept.append(fragment)
    return " ".join(kept)


def _keep_sentence(sentence: str) -> bool:
    return (
        len(sentence) >= MIN_SENTENCE_LENGTH
        and not is_noise(sentence)
        and not sentence.isdigit()
        and not _UPPERCASE_RE.match(sentence)
    )


def filter_sentences(text: str) -> str:
    """Keep only sentences that look like prose, joined back with '. '"""
    collapsed = re.sub(r"\s+", " ", text).strip()
    sentences = (s.strip() for s in _SENTENCE_SPLIT_RE.split(collapsed))
    return ". ".join(s for s in sentences if _keep_sentence(s)).strip()


def is_readable(text: str) -> bool:
    """Meaningfulness gate: enough long words and enough characters"""
    if len(text) < MIN_READABLE_LENGTH:
        return False
    cleaned = _NON_WORD_RE.sub(" ", text)
    words = [word for word in cleaned.split() if len(word) > 3]
    return len(words) >= MIN_MEANINGFUL_WORDS


def filter_content(source: Union[ExtractedText, str]) -> FilteredText:
    """Strip noise from extracted text and decide whether a quiz can be built from it.

    An ExtractedText is filtered fragment by fragment and page by page; a plain
    string is filtered line by line.
    """
    if isinstance(source, ExtractedText):
        pages = [_clean_fragments(page.fragments) for page in source.pages]
    else:
        pages = [_clean_fragments(source.splitlines())]

    joined = "\n\n".join(page for page in pages if len(page) >= MIN_PAGE_LENGTH)
    text = filter_sentences(joined)
    return FilteredText(text=text, readable=is_readable(text))
