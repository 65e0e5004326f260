import re
from enum import Enum
from typing import Optional, Dict, List, Literal
from pydantic import BaseModel, ConfigDict, Field
from line_profiler import LineProfiler

class Seat(str, Enum):
    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    def position(self) -> int:
        return SEAT_ORDER.index(self)

    def __repr__(self) -> str:
        return self.name

# Canonical cyclic order used by deal strings
SEAT_ORDER: List[Seat] = [Seat.NORTH, Seat.EAST, Seat.SOUTH, Seat.WEST]


class Vulnerability(str, Enum):
    NONE = "None"
    NS = "NS"
    EW = "EW"
    BOTH = "Both"
    ALL = "All"
    UNSPECIFIED = "-"


class Strain(str, Enum):
    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"
    NOTRUMP = "NT"


class Risk(str, Enum):
    UNDOUBLED = ""
    DOUBLED = "X"
    REDOUBLED = "XX"


RankSymbol = Literal["2", "3", "4", "5", "6", "7", "8", "9", "T", "J", "Q", "K", "A"]

class Contract(BaseModel):
    """Level, strain and doubling state of a contract."""
    level: int = Field(ge=0, le=7)
    strain: Strain
    risk: Risk

    def __str__(self) -> str:
        return f"{self.level}{self.strain.value}{self.risk.value}"


class Hand(BaseModel):
    """
    One player's holding, suits in PBN order (spades first).

    The deal decoder builds hands without checking ranks; they are checked
    when the owning Game is validated.
    """
    model_config = ConfigDict(revalidate_instances='always')

    seat: Seat
    spades: List[RankSymbol] = []
    hearts: List[RankSymbol] = []
    diamonds: List[RankSymbol] = []
    clubs: List[RankSymbol] = []


class Game(BaseModel):
    """Represents a bridge board with all its attributes."""
    event: Optional[str] = None
    site: Optional[str] = None
    date: Optional[str] = None
    board: Optional[str] = None
    west: Optional[str] = None
    north: Optional[str] = None
    east: Optional[str] = None
    south: Optional[str] = None
    dealer: Optional[Seat] = None
    vulnerable: Optional[Vulnerability] = None
    scoring: Optional[str] = None
    declarer: Optional[Seat] = None
    contract: Optional[Contract] = None
    result: Optional[str] = None
    deal: Optional[str] = None
    hands: Optional[List[Hand]] = None
    bcflags: Optional[str] = None
    generator: Optional[str] = None


# Tag name (upper case) -> Game field
TAG_FIELDS: Dict[str, str] = {
    'EVENT': 'event',
    'SITE': 'site',
    'DATE': 'date',
    'BOARD': 'board',
    'WEST': 'west',
    'NORTH': 'north',
    'EAST': 'east',
    'SOUTH': 'south',
    'DEALER': 'dealer',
    'VULNERABLE': 'vulnerable',
    'SCORING': 'scoring',
    'DECLARER': 'declarer',
    'CONTRACT': 'contract',
    'RESULT': 'result',
    'DEAL': 'deal',
    'BCFLAGS': 'bcflags',
    'GENERATOR': 'generator',
}

def tag_to_field(tag_name: str) -> Optional[str]:
    return TAG_FIELDS.get(tag_name.upper())

def clean_tag_value(value: Optional[str]) -> Optional[str]:
    """Empty and whitespace-only tag values count as absent."""
    if value is None or not value.strip():
        return None
    return value


CONTRACT_PATTERN = re.compile(r'^([0-7])(NT|[CDHS])(X{0,2})$')

def decode_contract(contract: Optional[str]) -> Optional[Contract]:
    """
    Decode the text of a Contract tag, e.g. "4SX" or "3NT".
    Returns None when the text does not follow level/strain/risk.
    """
    if not contract:
        return None
    match: re.Match | None = CONTRACT_PATTERN.match(contract.strip().upper())
    if match is None:
        return None
    level, strain, risk = match.groups()
    return Contract(level=int(level), strain=Strain(strain), risk=Risk(risk))


lineProf: LineProfiler = LineProfiler()
