import re
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Union
from common_objects import Contract, decode_contract

# [Name "value"]; \" and \\ are escapes, any other backslash is literal
TAG_PATTERN = re.compile(r'\[\s*(\w+)\s+"((?:\\["\\]|[^"\\]|\\)*?)"\s*\]')
SECTION_PATTERN = re.compile(r'[^\[{;]+')
ESCAPE_PATTERN = re.compile(r'\\(["\\])')

# Tags followed by section data lines; every *Table tag also has one
SECTION_TAGS = {'AUCTION', 'PLAY'}


class PBNSyntaxError(ValueError):
    """Raised for input text that is not a tag, comment, directive or section data."""

    def __init__(self, message: str, lineno: int, line: str):
        super().__init__(f"line {lineno}: {message}: {line.strip()!r}")
        self.lineno = lineno
        self.line = line


@dataclass(frozen=True)
class GameStart:
    """A new board begins."""
    lineno: int = 0

@dataclass(frozen=True)
class TagEvent:
    name: str
    value: str
    contract: Optional[Contract] = None  # set for a decodable Contract tag
    lineno: int = 0

@dataclass(frozen=True)
class SectionEvent:
    """Data lines following a tag, e.g. the calls after [Auction "N"]."""
    tag: str
    text: str
    lineno: int = 0

@dataclass(frozen=True)
class CommentEvent:
    text: str
    lineno: int = 0

@dataclass(frozen=True)
class DirectiveEvent:
    """A '%' escape line such as '% PBN 2.1'."""
    name: str
    value: str
    lineno: int = 0

@dataclass(frozen=True)
class NoteEvent:
    text: str
    lineno: int = 0

PBNEvent = Union[GameStart, TagEvent, SectionEvent, CommentEvent, DirectiveEvent, NoteEvent]


def _unescape(value: str) -> str:
    return ESCAPE_PATTERN.sub(r'\1', value)

def has_section(tag_name: str) -> bool:
    key: str = tag_name.upper()
    return key in SECTION_TAGS or key.endswith('TABLE')


class PBNLexer:
    """
    Turns PBN text, read line by line, into a stream of events in document order.

    A GameStart is emitted before the first tag of every game. Games end at a
    blank line; a tag repeated within one game also starts a new game.
    """

    def __init__(self):
        self.in_game: bool = False
        self.seen_tags: Set[str] = set()
        self.last_tag: Optional[str] = None
        self.comment_lines: Optional[List[str]] = None  # inside {...} when not None
        self.comment_start: int = 0

    def tokens(self, lines: Iterable[str]) -> Iterator[PBNEvent]:
        for lineno, raw_line in enumerate(lines, 1):
            line: str = raw_line.rstrip('\r\n')
            if lineno == 1:
                line = line.lstrip('\ufeff')

            if self.comment_lines is not None:
                end: int = line.find('}')
                if end < 0:
                    self.comment_lines.append(line)
                    continue
                self.comment_lines.append(line[:end])
                yield CommentEvent("\n".join(self.comment_lines).strip(), self.comment_start)
                self.comment_lines = None
                yield from self._scan(line[end + 1:], lineno)
                continue

            if line.startswith('%'):
                name, _, value = line[1:].strip().partition(' ')
                yield DirectiveEvent(name, value.strip(), lineno)
                continue

            if not line.strip():
                self._end_game()
                continue

            yield from self._scan(line, lineno)

        if self.comment_lines is not None:
            raise PBNSyntaxError("unterminated comment", self.comment_start, self.comment_lines[0])

    def _end_game(self) -> None:
        self.in_game = False
        self.seen_tags = set()
        self.last_tag = None

    def _scan(self, text: str, lineno: int) -> Iterator[PBNEvent]:
        pos: int = 0
        while pos < len(text):
            ch: str = text[pos]
            if ch.isspace():
                pos += 1
            elif ch == ';':
                yield CommentEvent(text[pos + 1:].strip(), lineno)
                return
            elif ch == '{':
                end: int = text.find('}', pos + 1)
                if end < 0:
                    self.comment_lines = [text[pos + 1:]]
                    self.comment_start = lineno
                    return
                yield CommentEvent(text[pos + 1:end].strip(), lineno)
                pos = end + 1
            elif ch == '[':
                match: re.Match | None = TAG_PATTERN.match(text, pos)
                if match is None:
                    raise PBNSyntaxError("malformed tag", lineno, text)
                yield from self._tag(match.group(1), _unescape(match.group(2)), lineno)
                pos = match.end()
            else:
                if self.last_tag is None or not has_section(self.last_tag):
                    raise PBNSyntaxError("unexpected text outside a tag section", lineno, text)
                match = SECTION_PATTERN.match(text, pos)
                yield SectionEvent(self.last_tag, match.group().strip(), lineno)
                pos = match.end()

    def _tag(self, name: str, value: str, lineno: int) -> Iterator[PBNEvent]:
        self.last_tag = name
        key: str = name.upper()
        if key == 'NOTE':
            yield NoteEvent(value, lineno)
            return

        if not self.in_game or key in self.seen_tags:
            if self.in_game:
                logging.debug(f"Repeated tag {name} at line {lineno}, starting a new game")
            self.in_game = True
            self.seen_tags = set()
            yield GameStart(lineno)
        self.seen_tags.add(key)

        yield TagEvent(name, value, decode_contract(value) if key == 'CONTRACT' else None, lineno)


def tokenize(lines: Iterable[str]) -> Iterator[PBNEvent]:
    """Tokenize an iterable of PBN lines (an open text file works)."""
    return PBNLexer().tokens(lines)

def tokenize_text(text: str) -> Iterator[PBNEvent]:
    return tokenize(text.splitlines())
