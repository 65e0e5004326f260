import json
import logging
import polars as pl
from pathlib import Path
from typing import Any, Dict, List
from common_objects import Game
from pbn_parse import PBN_ENCODING, parse_pbn_file

def game_to_dict(game: Game) -> Dict[str, Any]:
    """JSON-ready dict in field declaration order, absent fields omitted."""
    return game.model_dump(mode="json", exclude_none=True)

def games_to_json(games: List[Game], pretty: bool = True) -> str:
    """
    Serialize games as a JSON array.

    Args:
        games: Games to serialize
        pretty: Indent by two spaces; otherwise emit no extra whitespace

    Returns:
        JSON text
    """
    data: List[Dict[str, Any]] = [game_to_dict(g) for g in games]
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)

def parse_pbn_file_to_json(file_path: Path, pretty: bool = True, encoding: str = PBN_ENCODING) -> str:
    return games_to_json(parse_pbn_file(file_path, encoding), pretty)

# Columns of the flat table, one per Game field except hands
FRAME_COLUMNS: List[str] = [name for name in Game.model_fields if name != "hands"]

def games_to_frame(games: List[Game]) -> pl.DataFrame:
    """One row per game; contract as text (e.g. 4SX), hands left out in favour of the deal string."""
    rows: List[Dict[str, Any]] = []
    for game in games:
        row: Dict[str, Any] = game_to_dict(game)
        row.pop("hands", None)
        if game.contract is not None:
            row["contract"] = str(game.contract)
        rows.append({col: row.get(col) for col in FRAME_COLUMNS})
    return pl.DataFrame(rows, schema={col: pl.Utf8 for col in FRAME_COLUMNS})

def write_games_csv(games: List[Game], csv_path: Path) -> None:
    df: pl.DataFrame = games_to_frame(games)
    df.write_csv(csv_path)
    logging.warning(f"Wrote {len(df)} games to {csv_path}")
