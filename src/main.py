"""
Import a GEDCOM file into a property graph stored in SQLite.

1) Parse the GEDCOM file into a tree of families, individuals, events,
   sources, notes and citations.
2) Upsert Person and Source nodes by id, create Family and Event nodes,
   and resolve place names into chains of Place nodes.
3) Commit everything in one transaction, or nothing at all.
4) Optionally load the result into a networkx graph and validate it for
   parentage cycles, impossible ages and date ordering.

Examples:
    gedgraph family.ged
    gedgraph family.ged --database tree.db --fresh --validate
    gedgraph family.ged --language no
"""

import argparse
import logging
from pathlib import Path
import sys

from config import load_settings
from database import create_database
from errors import GedgraphError
from graph import build_graph
from importer import GedcomImporter
from parsing import parse_gedcom
from validation import validate_graph
from vocabulary import VOCABULARIES, get_vocabulary

logger = logging.getLogger(__name__)

MAX_WARNINGS_SHOWN = 10


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        prog="gedgraph",
        description="Import a GEDCOM file into a property graph",
    )
    parser.add_argument("gedcom", type=Path, help="GEDCOM file to import")
    parser.add_argument(
        "--database", type=Path, default=settings.database,
        help=f"Graph database file (default: {settings.database})",
    )
    parser.add_argument(
        "--language", choices=sorted(VOCABULARIES), default=settings.language,
        help="Vocabulary for labels, relationship types and property keys",
    )
    parser.add_argument(
        "--log-level", default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("--fresh", action="store_true", help="Delete an existing database first")
    parser.add_argument("--validate", action="store_true", help="Validate the graph after import")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    vocabulary = get_vocabulary(args.language)

    if not args.gedcom.exists():
        logger.error(f"GEDCOM file not found: {args.gedcom}")
        return 1

    # Delete existing database to ensure fresh start
    if args.fresh and args.database.exists():
        args.database.unlink()
        logger.info(f"Deleted existing database: {args.database}")

    try:
        tree = parse_gedcom(args.gedcom)
        with create_database(args.database) as store:
            stats = GedcomImporter(store, vocabulary).load(tree)
            logger.info(
                f"Created {stats.families} families, {stats.persons} persons, "
                f"{stats.events} events, {stats.places} places, {stats.sources} sources "
                f"and {stats.relationships} relationships"
            )

            if args.validate:
                logger.info("Validating graph...")
                G = build_graph(store)
                warnings = validate_graph(G, vocabulary)
                if warnings:
                    logger.warning(f"Found {len(warnings)} validation warnings")
                    for w in warnings[:MAX_WARNINGS_SHOWN]:
                        logger.warning(f"  - {w}")
                    if len(warnings) > MAX_WARNINGS_SHOWN:
                        logger.warning(f"  ... and {len(warnings) - MAX_WARNINGS_SHOWN} more")
                else:
                    logger.info("No validation issues found")
    except GedgraphError as e:
        logger.error(f"Import failed, nothing was written: {e}")
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
