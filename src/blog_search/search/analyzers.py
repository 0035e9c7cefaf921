"""Text analysis: raw field values to ordered ``Token`` streams.

An analyzer is a tokenizer followed by zero or more filters. Filters only
see and return tokens, so stop-word removal or stemming can be switched on
without the indexer or the query engine noticing; both consume the final
token list and nothing else.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
import re
from typing import Protocol


@dataclass(frozen=True)
class Token:
    """A normalized term emitted for one field of a document or query."""

    term: str
    field: str
    position: int
    start_char: int = 0
    end_char: int = 0

    def copy_with(self, **changes: object) -> Token:
        return replace(self, **changes)


class Analyzer(Protocol):
    def __call__(self, text: str, field: str = "") -> list[Token]:  # pragma: no cover - interface definition
        ...


Tokenizer = Callable[[str, str], Iterable[Token]]
TokenFilter = Callable[[Iterable[Token]], Iterable[Token]]

# Runs of letters/digits; underscores and punctuation separate words.
WORD_PATTERN = r"[^\W_]+"


class RegexTokenizer:
    """Emits one token per regex match, numbered from zero."""

    def __init__(self, pattern: str = WORD_PATTERN) -> None:
        self._regex = re.compile(pattern)

    def __call__(self, text: str, field: str = "") -> Iterator[Token]:
        for ordinal, match in enumerate(self._regex.finditer(text)):
            yield Token(match.group(), field, ordinal, match.start(), match.end())


class LowercaseFilter:
    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            lowered = token.term.lower()
            yield token if lowered == token.term else token.copy_with(term=lowered)


class EmptyTermFilter:
    """Drops tokens whose text normalized away to nothing."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        return (token for token in tokens if token.term)


DEFAULT_STOPWORDS = frozenset(
    "a an and are as at be but by for if in into is it no not of on or such "
    "that the their then there these they this to was will with".split()
)


class StopFilter:
    """Removes stop words (compared case-insensitively)."""

    def __init__(self, stopwords: Iterable[str] | None = None) -> None:
        source = DEFAULT_STOPWORDS if stopwords is None else stopwords
        self.stopwords = frozenset(word.lower() for word in source)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        return (token for token in tokens if token.term.lower() not in self.stopwords)


# Derivational endings are tried first, then plain inflections. The first
# rule that leaves a stem of at least two characters wins.
_DERIVATIONAL_SUFFIXES = (
    ("ization", "ize"), ("ational", "ate"), ("fulness", "ful"), ("ousness", "ous"),
    ("iveness", "ive"), ("tional", "tion"), ("izer", "ize"), ("ator", "ate"),
    ("ation", "ate"), ("ness", ""), ("ment", ""),
)
_INFLECTIONAL_SUFFIXES = tuple((suffix, "") for suffix in ("ingly", "edly", "ing", "ed", "ly", "es", "s"))
_MIN_STEM = 2


class PorterStemFilter:
    """Light suffix-stripping stemmer in the spirit of Porter's algorithm."""

    def stem(self, word: str) -> str:
        for rules in (_DERIVATIONAL_SUFFIXES, _INFLECTIONAL_SUFFIXES):
            for suffix, replacement in rules:
                base = word[: -len(suffix)]
                if word.endswith(suffix) and len(base) >= _MIN_STEM:
                    return base + replacement
        return word

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            stemmed = self.stem(token.term)
            yield token if stemmed == token.term else token.copy_with(term=stemmed)


class AnalyzerPipeline:
    """A tokenizer followed by filters applied in order."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] = ()) -> None:
        self.tokenizer = tokenizer
        self.filters = tuple(filters)

    def __call__(self, text: str, field: str = "") -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text, field)
        for stage in self.filters:
            stream = stage(stream)
        # filters may drop tokens; positions stay dense
        return [token.copy_with(position=ordinal) for ordinal, token in enumerate(stream)]


class StandardAnalyzer(AnalyzerPipeline):
    """Word split plus lowercasing; stop words and stemming are opt-in."""

    def __init__(
        self,
        *,
        stopwords: Iterable[str] | None = None,
        remove_stopwords: bool = False,
        apply_stemming: bool = False,
    ) -> None:
        filters: list[TokenFilter] = [LowercaseFilter()]
        if remove_stopwords:
            filters.append(StopFilter(stopwords))
        if apply_stemming:
            filters.append(PorterStemFilter())
        filters.append(EmptyTermFilter())
        super().__init__(RegexTokenizer(), filters)


ANALYZERS: dict[str, Callable[[], Analyzer]] = {
    "default": StandardAnalyzer,
    "english": lambda: StandardAnalyzer(remove_stopwords=True, apply_stemming=True),
}


def get_analyzer(name: str | None = "default") -> Analyzer:
    """Return a fresh analyzer for a profile name (case-insensitive)."""

    key = (name or "default").lower()
    try:
        factory = ANALYZERS[key]
    except KeyError:
        raise ValueError(f"Unknown analyzer '{name}'. Available: {sorted(ANALYZERS)}") from None
    return factory()


def tokenize(text: str | Sequence[str] | None, field: str, analyzer: Analyzer | None = None) -> list[Token]:
    """Tokenize a field value.

    ``None`` behaves exactly like an empty string. A sequence value (tags,
    categories) is analyzed element by element; positions continue across
    elements so every element contributes its own terms.
    """

    if text is None:
        return []
    active = analyzer or StandardAnalyzer()
    if isinstance(text, str):
        return active(text, field)

    tokens: list[Token] = []
    for element in text:
        if element is None:
            continue
        offset = len(tokens)
        tokens.extend(token.copy_with(position=offset + token.position) for token in active(str(element), field))
    return tokens
