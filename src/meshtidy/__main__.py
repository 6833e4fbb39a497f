"""Command-line interface."""
import argparse
import json
import logging
import sys
from typing import List, Optional

from meshtidy.app import registry
from meshtidy.config import LOG_LEVEL
from meshtidy.host.clipboard import FileClipboard
from meshtidy.logging_config import setup_logging
from meshtidy.model.io import IOManager
from meshtidy.model.results import ErrorKind, Failure
from meshtidy.model.store import MeshStore

logger = logging.getLogger("meshtidy.cli")


def load_store(path: str) -> MeshStore:
    if path.endswith((".h5", ".hdf5")):
        return IOManager.load_store(path)
    with open(path, "r", encoding="utf-8") as f:
        return MeshStore.from_dict(json.load(f))


def save_store(store: MeshStore, path: str) -> None:
    if path.endswith((".h5", ".hdf5")):
        IOManager.save_store(store, path)
        return
    with open(path, "w", encoding="utf-8") as f:
        json.dump(store.to_dict(), f, indent=2)
    logger.info(f"Store saved to: {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="meshtidy", description="Vertex maintenance for block-based meshes")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_blocks = sub.add_parser("blocks", help="List the blocks of a store")
    p_blocks.add_argument("file")

    p_list = sub.add_parser("list", help="List the operations applicable to a selection")
    p_list.add_argument("file")
    p_list.add_argument("--block", type=int, default=None, help="Selected block id (none = whole store)")

    p_run = sub.add_parser("run", help="Run an operation")
    p_run.add_argument("operation", choices=registry.list_ids())
    p_run.add_argument("file")
    p_run.add_argument("--block", type=int, default=None, help="Selected block id (none = whole store)")
    p_run.add_argument("--option", default=None, help="Sub-mode, e.g. 'T = 1.0 - T' or 'box center'")
    p_run.add_argument("--element", type=int, default=None, help="Row of the selected array, e.g. a triangle index")
    p_run.add_argument("--output", default=None, help="Write the result here instead of in place")
    clip = p_run.add_mutually_exclusive_group()
    clip.add_argument("--clipboard", default=None, help="Text file used as clipboard")
    clip.add_argument("--system-clipboard", action="store_true", help="Use the desktop clipboard (Qt)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level:
        level = logging.getLevelName(args.log_level.upper())
        setup_logging(level=level if isinstance(level, int) else LOG_LEVEL, log_file=args.log_file)
    else:
        setup_logging(log_file=args.log_file)

    store = load_store(args.file)

    if args.command == "blocks":
        for block_id, block in store.blocks():
            links = ", ".join(f"{k}->{v}" for k, v in block.links.items() if v is not None)
            print(f"{block_id:4d}  {block.block_type:<22} {links}")
        return 0

    if args.command == "list":
        for op_id in registry.applicable(store, args.block):
            operation = registry.get_operation(op_id)
            options = ""
            if operation.options is not None:
                options = "  [" + " | ".join(m.value for m in operation.options) + "]"
            print(f"{op_id:<34} {operation.page}/{operation.name}{options}")
        return 0

    clipboard = None
    if args.system_clipboard:
        from meshtidy.app.clipboard import QtClipboard
        clipboard = QtClipboard()
    elif args.clipboard:
        clipboard = FileClipboard(args.clipboard)

    try:
        result = registry.run(args.operation, store, args.block, option=args.option,
                              clipboard=clipboard, element=args.element)
    except (KeyError, ValueError) as e:
        logger.error(str(e))
        return 2

    if isinstance(result, Failure):
        return 0 if result.kind == ErrorKind.EMPTY_INPUT else 1

    save_store(store, args.output or args.file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
