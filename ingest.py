import threading
import logging
from pathlib import Path
from typing import List, Dict, Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from common_objects import Game
from pbn_parse import parse_pbn_file

class DataCollector:
    """Thread-safe collector for parsed games."""

    def __init__(self):
        self._lock = threading.Lock()
        self.games: List[Game] = []
        self.success: int = 0
        self.failed: int = 0

    def add_batch(self, batch: List[Game]):
        """Add a batch of games in a thread-safe manner."""
        with self._lock:
            self.games.extend(batch)
            self.success = self.success + 1

    def add_failure(self):
        with self._lock:
            self.failed = self.failed + 1

def get_file_extension(file_path: Path) -> str:
    """Get file extension in uppercase."""
    return file_path.suffix.upper()

parsers: Dict[str, Callable[[Path], List[Game]]] = {}

def register_parser(ext: str, parser_func: Callable[[Path], List[Game]]):
    parsers[ext.upper()] = parser_func

def get_parser_for_file(file_path: Path) -> Callable[[Path], List[Game]]:
    """Return the appropriate parser function for the file type."""
    return parsers[get_file_extension(file_path)]

register_parser(".PBN", parse_pbn_file)

def process_file(file_path: Path, collector: DataCollector) -> None:
    """Parse a single file and add its games to the collector."""
    try:
        parser: Callable[[Path], List[Game]] = get_parser_for_file(file_path)
        collector.add_batch(parser(file_path))
    except (OSError, ValueError) as e:
        collector.add_failure()
        logging.error(f"Error processing file {file_path}: {str(e)}")

def collect_files(paths: List[Path]) -> List[Path]:
    """Collect all supported files from the given paths."""
    files = []

    for path in paths:
        if path.is_file():
            if get_file_extension(path) in parsers.keys():
                files.append(path)
        elif path.is_dir():
            # Recursively find all supported files, any case of the extension
            files.extend(sorted(p for p in path.rglob("*")
                                if p.is_file() and get_file_extension(p) in parsers.keys()))
        else:
            logging.warning(f"Skipping {path}: not found")

    return files

def ingest(paths: List[Path], parallelize: bool = True) -> DataCollector:
    """
    Parse every PBN file under the given paths.

    Each file is parsed with its own private state, so files can be handled
    by independent threads. A file that cannot be read or tokenized is logged
    and skipped.

    Args:
        paths: List of file or directory paths to process
        parallelize: Parse files on a thread pool instead of one after another

    Returns:
        The collector holding the games and the per-file success and failure counts
    """
    files_to_process = collect_files(paths)

    if not files_to_process:
        logging.warning("No supported files found to process")
        return DataCollector()

    logging.info(f"Found {len(files_to_process)} files to process")
    collector = DataCollector()

    if parallelize:
        with ThreadPoolExecutor() as executor:
            future_to_file = {
                executor.submit(process_file, file_path, collector): file_path
                for file_path in files_to_process
            }
            for future in as_completed(future_to_file):
                file_path = future_to_file[future]
                try:
                    future.result()
                except Exception as e:
                    collector.add_failure()
                    logging.error(f"Failed to process {file_path}: {str(e)}")
    else:
        for file_path in files_to_process:
            process_file(file_path, collector)

    logging.info(f"Successfully processed {collector.success} files, {collector.failed} failed")
    logging.info(f"Processing complete. Collected {len(collector.games)} games")

    return collector

def ingest_files(paths: List[Path], parallelize: bool = True) -> List[Game]:
    return ingest(paths, parallelize).games
