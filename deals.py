import logging
from typing import List, Final
from common_objects import Hand, Seat, SEAT_ORDER

NSUITS: Final[int] = 4
NHANDS: Final[int] = 4
VOID_MARKER: Final[str] = "-"

def _holding(suit_str: str) -> List[str]:
    return [card for card in suit_str if card != VOID_MARKER]

def deal_string_to_hands(deal_str: str) -> List[Hand]:
    """
    Convert a PBN Deal string into a list of Hands.

    Deal format: "<seat>:<hand> <hand> <hand> <hand>", each hand being
    spades.hearts.diamonds.clubs, e.g. "N:J95.A.J82.AKJ976 T3.K63.AT743.QT2 ..."
    The first hand belongs to <seat>, the rest follow clockwise.

    Returns an empty list when the string cannot be decoded. A single hand
    without exactly four suits is skipped. Cards keep their source order; the
    hands are built unvalidated, so ranks are only checked when a Game is.
    """
    parts: List[str] = deal_str.split(":")
    if len(parts) != 2:
        return []

    first_seat, hands_data = parts
    hand_strs: List[str] = hands_data.split()
    if len(hand_strs) != NHANDS:
        return []

    try:
        position: Seat = Seat(first_seat)
    except ValueError:
        return []

    hands: List[Hand] = []
    for i, hand_str in enumerate(hand_strs):
        seat: Seat = SEAT_ORDER[(position.position() + i) % NHANDS]
        holdings: List[str] = hand_str.split(".")
        if len(holdings) != NSUITS:
            logging.info(f"Hand {hand_str} has {len(holdings)} suits in {deal_str}")
            continue
        hands.append(Hand.model_construct(
            seat=seat,
            spades=_holding(holdings[0]),
            hearts=_holding(holdings[1]),
            diamonds=_holding(holdings[2]),
            clubs=_holding(holdings[3]),
        ))

    return hands
