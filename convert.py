import logging
import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter
from pathlib import Path
from typing import List, Optional
from json_export import parse_pbn_file_to_json
from pbn_parse import PBN_ENCODING

USAGE_EXAMPLES = """\
examples:
  pbn2json testdata/250429.pbn
  pbn2json testdata/250429.pbn --compact > output.json
"""

class UsageError(Exception):
    pass

class _ArgumentParser(ArgumentParser):
    # argparse exits with status 2 on bad arguments; report them as usage errors instead
    def error(self, message: str):
        raise UsageError(message)

def build_arg_parser() -> ArgumentParser:
    arg_list = _ArgumentParser(prog="pbn2json", description="Convert a PBN file to JSON format",
                               epilog=USAGE_EXAMPLES, formatter_class=RawDescriptionHelpFormatter)
    arg_list.add_argument("path", help="Path to the PBN file to parse")
    arg_list.add_argument("--compact", action="store_true", help="Output compact JSON (no pretty-printing)")
    arg_list.add_argument("--encoding", default=PBN_ENCODING,
                          help=f"Character set of the PBN file (default: {PBN_ENCODING})")
    return arg_list

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the pbn2json console script. Returns the exit code."""
    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(levelname)s - %(message)s')
    arg_list = build_arg_parser()
    try:
        args = arg_list.parse_args(argv)
    except UsageError as e:
        arg_list.print_usage(sys.stderr)
        print(f"{arg_list.prog}: error: {e}", file=sys.stderr)
        return 1

    try:
        json_text: str = parse_pbn_file_to_json(Path(args.path), pretty=not args.compact, encoding=args.encoding)
    except (OSError, ValueError, LookupError) as e:
        print(f"Error parsing PBN file: {e}", file=sys.stderr)
        return 1

    print(json_text)
    return 0

if __name__ == "__main__":
    sys.exit(main())
