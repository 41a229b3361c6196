"""
Command-line interface for the Clue Set Toolkit.

Commands:
    validate FILE                  Parse and check a clue set CSV
    upload FILE --store DIR ...    Run the upload workflow into a JSON store
    list --store DIR --owner ID    List a user's clue sets
    show ID --store DIR            Show a stored clue set's categories
    delete ID --store DIR --owner  Delete a stored clue set
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from clueset_toolkit import __version__
from clueset_toolkit.core.models import Round, ClueSetDocument
from clueset_toolkit.ingest import (
    load_clue_set_from_file,
    ClueSetLoadError,
    ParseError,
    StructureError,
    BuildError,
)
from clueset_toolkit.logging_utils import configure_logging, UploadLogCapture
from clueset_toolkit.upload import (
    JsonDirectoryClueStore,
    StoreError,
    UploadFile,
    handle_upload,
    OVERWRITE,
    CANCEL,
)


def _print_document(document: ClueSetDocument) -> None:
    print(f"{document.name} ({document.filename}): {document.clue_count} clues")
    for round_ in Round:
        print(f"  {round_.display_name}:")
        for group in document.categories(round_):
            values = ", ".join(str(v) for v in group.values)
            print(f"    {group.name} [{values}]")


def _cmd_validate(args: argparse.Namespace) -> int:
    try:
        document = load_clue_set_from_file(args.file, args.name)
    except (ClueSetLoadError, ParseError, StructureError, BuildError) as e:
        print(f"Invalid clue set: {e}", file=sys.stderr)
        return 1
    _print_document(document)
    return 0


def _ask(prompt: str) -> Optional[str]:
    """input() that maps end-of-input to None."""
    try:
        return input(prompt)
    except EOFError:
        return None


def _cmd_upload(args: argparse.Namespace) -> int:
    try:
        upload = UploadFile.from_path(args.file)
    except OSError as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    def name_prompt(suggested: str) -> Optional[str]:
        if args.name:
            return args.name
        answer = _ask(f"Clue set name [{suggested}]: ")
        if answer is None:
            return None
        return answer.strip() or suggested

    def conflict_prompt(existing_name: str) -> Optional[str]:
        if args.overwrite:
            return OVERWRITE
        if args.keep_both:
            return CANCEL
        answer = _ask(
            f'A clue set named "{existing_name}" already exists. '
            "[o]verwrite, [k]eep both, or [c]ancel upload? "
        )
        choice = (answer or "").strip().lower()
        if choice.startswith("o"):
            return OVERWRITE
        if choice.startswith("k"):
            return CANCEL
        return None

    store = JsonDirectoryClueStore(args.store)
    with UploadLogCapture(level=logging.INFO) as capture:
        result = handle_upload(store, upload, args.owner, name_prompt, conflict_prompt)
    if not result.success:
        print(f"Upload failed: {result.error}", file=sys.stderr)
        if not args.verbose:
            for message in capture.messages:
                print(f"  {message}", file=sys.stderr)
        return 1
    print(f"Uploaded clue set {result.clue_set_id}")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    store = JsonDirectoryClueStore(args.store)
    try:
        entries = store.list_clue_sets(args.owner)
    except StoreError as e:
        print(str(e), file=sys.stderr)
        return 1
    if not entries:
        print(f"No clue sets for {args.owner}")
    for entry in entries:
        print(f"{entry.id}  {entry.name}  {entry.created_at}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    store = JsonDirectoryClueStore(args.store)
    try:
        summary = store.summarize_clue_set(args.id)
    except StoreError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(f"{summary.name} (created {summary.created_at})")
    print(f"  {Round.JEOPARDY.display_name}: {', '.join(summary.jeopardy_categories)}")
    print(f"  {Round.DOUBLE.display_name}: {', '.join(summary.double_categories)}")
    print(f"  {Round.FINAL.display_name}: {summary.final_category}")
    return 0


def _cmd_delete(args: argparse.Namespace) -> int:
    store = JsonDirectoryClueStore(args.store)
    try:
        store.delete_clue_set(args.id, args.owner)
    except StoreError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(f"Deleted clue set {args.id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clueset", description="Clue set CSV toolkit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Parse and check a clue set CSV")
    p_validate.add_argument("file", type=Path)
    p_validate.add_argument("--name", help="Display name (default: from file name)")
    p_validate.set_defaults(func=_cmd_validate)

    p_upload = sub.add_parser("upload", help="Upload a clue set CSV into a store")
    p_upload.add_argument("file", type=Path)
    p_upload.add_argument("--store", type=Path, required=True, help="Store directory")
    p_upload.add_argument("--owner", required=True, help="Owner id")
    p_upload.add_argument("--name", help="Clue set name (skips the prompt)")
    conflict = p_upload.add_mutually_exclusive_group()
    conflict.add_argument("--overwrite", action="store_true", help="Replace a same-named clue set")
    conflict.add_argument("--keep-both", action="store_true", help="Save alongside a same-named clue set")
    p_upload.set_defaults(func=_cmd_upload)

    p_list = sub.add_parser("list", help="List clue sets for an owner")
    p_list.add_argument("--store", type=Path, required=True)
    p_list.add_argument("--owner", required=True)
    p_list.set_defaults(func=_cmd_list)

    p_show = sub.add_parser("show", help="Show a stored clue set")
    p_show.add_argument("id")
    p_show.add_argument("--store", type=Path, required=True)
    p_show.set_defaults(func=_cmd_show)

    p_delete = sub.add_parser("delete", help="Delete a stored clue set")
    p_delete.add_argument("id")
    p_delete.add_argument("--store", type=Path, required=True)
    p_delete.add_argument("--owner", required=True)
    p_delete.set_defaults(func=_cmd_delete)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
