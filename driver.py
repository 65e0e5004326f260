import logging
import cProfile
import pstats
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace
from typing import List, Optional
from common_objects import lineProf
from ingest import DataCollector, ingest
from json_export import games_to_json, write_games_csv

def build_arg_parser() -> ArgumentParser:
    arg_list = ArgumentParser(prog="pbn-ingest", description="Parse PBN files and export the boards as JSON or CSV")
    arg_list.add_argument("files", nargs="+", help="PBN files or directories to process")
    arg_list.add_argument("-o", "--output", help="Write a CSV table of the games to this path")
    arg_list.add_argument("--compact", action="store_true", help="Compact JSON when no CSV output is given")
    arg_list.add_argument("--serial", action="store_true", help="Parse files one at a time")
    arg_list.add_argument("--profile", action="store_true", help="Enable performance profiling")
    return arg_list

def run(args: Namespace) -> int:
    """Ingest the files named in args and write the games. Returns the exit code."""
    try:
        collector: DataCollector = ingest([Path(f) for f in args.files], parallelize=not args.serial)
        if args.output:
            write_games_csv(collector.games, Path(args.output))
        else:
            print(games_to_json(collector.games, pretty=not args.compact))
    except Exception as e:
        logging.error(f"Error during processing: {str(e)}")
        return 1

    if collector.success == 0 and collector.failed == 0:
        return 1
    if collector.failed > 0:
        logging.error(f"{collector.failed} of {collector.success + collector.failed} files could not be parsed")
        return 1
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the pbn-ingest console script."""
    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(levelname)s - %(message)s')
    args = build_arg_parser().parse_args(argv)
    if not args.profile:
        return run(args)

    profiler = cProfile.Profile()
    profiler.enable()
    lineProf.add_function(run)
    status: int = lineProf.runcall(run, args)
    lineProf.print_stats()
    profiler.disable()
    stats = pstats.Stats(profiler)
    stats.strip_dirs().sort_stats('time').print_stats(10)  # Top 10 functions sorted by time
    return status

if __name__ == "__main__":
    sys.exit(main())
