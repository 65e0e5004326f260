import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
from pydantic import ValidationError
from common_objects import Game, Hand, lineProf, clean_tag_value, decode_contract, tag_to_field
from deals import deal_string_to_hands
from pbn_lexer import PBNEvent, GameStart, TagEvent, tokenize

# The PBN standard character set; UTF-8 exports need encoding="utf-8"
PBN_ENCODING = 'iso-8859-1'
INHERIT_MARKER = '#'


class BuilderState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


class GameBuilder:
    """
    Assembles Games from a stream of PBN events.

    Tags between two GameStart events fill one partial game. At the next
    GameStart, or at finish(), the partial game is validated: a valid game is
    kept, an invalid one is logged and dropped.
    """

    def __init__(self, source: str = "<stream>"):
        self.source = source
        self.state: BuilderState = BuilderState.IDLE
        self.games: List[Game] = []
        self.dropped: int = 0
        self._partial: Dict[str, Any] = {}
        self._tags: Dict[str, str] = {}
        self._previous_tags: Dict[str, str] = {}

    def feed(self, event: PBNEvent) -> None:
        if isinstance(event, GameStart):
            self._flush()
            self.state = BuilderState.ACCUMULATING
        elif isinstance(event, TagEvent):
            if self.state is BuilderState.IDLE:
                logging.warning(f"Ignoring tag {event.name} outside a game in {self.source}")
                return
            self._apply_tag(event)
        else:
            logging.debug(f"Skipping {type(event).__name__} in {self.source}")

    def finish(self) -> List[Game]:
        self._flush()
        return self.games

    def _flush(self) -> None:
        if self.state is BuilderState.ACCUMULATING:
            if self._partial:
                self._finalize(self._partial)
            self._previous_tags = self._tags
        self._partial = {}
        self._tags = {}
        self.state = BuilderState.IDLE

    def _finalize(self, partial: Dict[str, Any]) -> None:
        try:
            self.games.append(Game.model_validate(partial))
        except ValidationError as e:
            self.dropped += 1
            board: str = partial.get('board', '?')
            logging.warning(f"Invalid game data for board {board} in {self.source}: {e}")

    def _apply_tag(self, event: TagEvent) -> None:
        field: Optional[str] = tag_to_field(event.name)
        if field is None:
            return

        key: str = event.name.upper()
        value: Optional[str] = clean_tag_value(event.value)
        inherited: bool = value == INHERIT_MARKER
        if inherited:
            value = self._previous_tags.get(key)
        if value is None:
            return
        self._tags[key] = value

        if field == 'contract':
            contract = decode_contract(value) if inherited else event.contract
            if contract is not None:
                self._partial['contract'] = contract
        elif field == 'deal':
            self._partial['deal'] = value
            hands: List[Hand] = deal_string_to_hands(value)
            if hands:
                self._partial['hands'] = hands
        else:
            self._partial[field] = value


def parse_pbn_stream(lines: Iterable[str], source: str = "<stream>") -> List[Game]:
    """Parse PBN lines and return the valid games; a syntax error aborts the parse."""
    builder = GameBuilder(source)
    for event in tokenize(lines):
        builder.feed(event)
    return builder.finish()

lineProf.add_function(parse_pbn_stream)

def parse_pbn_text(text: str) -> List[Game]:
    return parse_pbn_stream(text.splitlines(), "<text>")

def parse_pbn_file(file_path: Path, encoding: str = PBN_ENCODING) -> List[Game]:
    """Parse a PBN file and return a Game for each valid board"""
    with open(file_path, 'r', encoding=encoding) as f:
        games: List[Game] = parse_pbn_stream(f, str(file_path))
    logging.info(f"Parsed {len(games)} games from {file_path}")
    return games
