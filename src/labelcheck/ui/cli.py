from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from labelcheck import __version__
from labelcheck.app import STORE_KINDS, check_ingredients, warm_reference_data
from labelcheck.config import configure_logging
from labelcheck.domain.model import DatasetName
from labelcheck.domain.serialization import to_payload

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check ingredient lists for compliance")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output (cache hits, fuzzy matches)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Run the GRAS, NDI and allergen checks")
    check.add_argument(
        "ingredients",
        nargs="*",
        help="Ingredient names as printed on the label, in order",
    )
    check.add_argument(
        "--ingredients-file",
        type=Path,
        help="File with one ingredient per line (blank lines are skipped)",
    )
    check.add_argument(
        "--allergen-statement",
        type=str,
        help='Declared allergen statement, e.g. "Contains: Milk, Soy"',
    )
    check.add_argument(
        "--store",
        choices=STORE_KINDS,
        default="rest",
        help="Backing store for reference data (default: %(default)s)",
    )

    warm = subparsers.add_parser("warm", help="Pre-load reference datasets")
    warm.add_argument(
        "--dataset",
        action="append",
        choices=[str(name) for name in DatasetName],
        help="Dataset to load; repeat for several (default: all)",
    )
    warm.add_argument(
        "--store",
        choices=STORE_KINDS,
        default="rest",
        help="Backing store for reference data (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _collect_ingredients(args: argparse.Namespace) -> list[str]:
    ingredients = [item for item in args.ingredients if item.strip()]
    if args.ingredients_file is not None:
        try:
            lines = args.ingredients_file.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise ValueError(f"Cannot read {args.ingredients_file}: {exc}") from exc
        ingredients.extend(line.strip() for line in lines if line.strip())
    if not ingredients:
        raise ValueError("No ingredients given")
    return ingredients


def _print_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        ingredients = _collect_ingredients(parsed_args) if parsed_args.command == "check" else []
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "check":
            result = check_ingredients(
                ingredients,
                declared_allergen_statement=parsed_args.allergen_statement,
                store_kind=parsed_args.store,
            )
            _print_json(to_payload(result))
        elif parsed_args.command == "warm":
            datasets = (
                [DatasetName(name) for name in parsed_args.dataset]
                if parsed_args.dataset
                else None
            )
            stats = warm_reference_data(datasets, store_kind=parsed_args.store)
            _print_json({str(name): to_payload(item) for name, item in stats.items()})
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
