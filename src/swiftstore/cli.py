"""swiftstore CLI - blob operations against a configured storage backend.

Usage:
    python -m swiftstore put REF [--input PATH]
    python -m swiftstore get REF [--output PATH]
    python -m swiftstore rm REF
    python -m swiftstore ls [--token TOKEN] [--page-size N] [--all]
    python -m swiftstore link
    python -m swiftstore mkcontainer [--public]
    python -m swiftstore rmcontainer

Backend options come from the OpenStack OS_* environment variables (see
swiftstore.config) and may be overridden with --container and --option.

Exit codes:
    0: Success
    1: Operational failure (I/O, permission, internal error)
    2: Usage error, invalid configuration, object not found, or not supported
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from swiftstore.config import dial_opts_from_env
from swiftstore.storage import registry
from swiftstore.storage.errors import (
    BackendNotRegisteredError,
    Kind,
    StorageError,
)
from swiftstore.storage.models import ListPage, ListRefsItem
from swiftstore.storage.object_store import Lister, Storage
from swiftstore.storage.openstack import STORAGE_NAME, SwiftObjectStore

logger = logging.getLogger("swiftstore.cli")

# Kinds the caller can act on (fix input, expect absence) rather than retry.
_USER_ERROR_KINDS = frozenset({Kind.INVALID, Kind.NOT_EXIST, Kind.NOT_SUPPORTED})


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _error_result(code: str, message: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message}, "ok": False}


def _open_store(args: argparse.Namespace) -> Storage:
    """Dial the backend selected on the command line."""
    dial_opts = dial_opts_from_env()
    if args.container:
        dial_opts.append(registry.with_key_value("openstackContainer", args.container))
    for option in args.option or []:
        dial_opts.append(registry.with_options(option))
    return registry.dial(args.backend, *dial_opts)


def _require_swift(store: Storage, command: str) -> SwiftObjectStore:
    if not isinstance(store, SwiftObjectStore):
        raise StorageError(
            f"{command} requires the {STORAGE_NAME} backend",
            op=f"cli.{command}",
            kind=Kind.NOT_SUPPORTED,
        )
    return store


def cmd_put(store: Storage, args: argparse.Namespace) -> int:
    if args.input:
        with open(args.input, "rb") as f:
            contents = f.read()
    else:
        contents = sys.stdin.buffer.read()
    store.put(args.ref, contents)
    _output_json({"ok": True, "ref": args.ref, "size": len(contents)})
    return 0


def cmd_get(store: Storage, args: argparse.Namespace) -> int:
    contents = store.download(args.ref)
    if args.output:
        with open(args.output, "wb") as f:
            f.write(contents)
    else:
        sys.stdout.buffer.write(contents)
        sys.stdout.buffer.flush()
    return 0


def cmd_rm(store: Storage, args: argparse.Namespace) -> int:
    store.delete(args.ref)
    _output_json({"ok": True, "ref": args.ref})
    return 0


def _list_page(store: Storage, token: str, page_size: int | None) -> ListPage:
    if page_size and isinstance(store, SwiftObjectStore):
        return store.list(token, page_size=page_size)
    if not isinstance(store, Lister):
        raise StorageError(
            f"{store.backend_name} backend cannot list",
            op="cli.ls",
            kind=Kind.NOT_SUPPORTED,
        )
    return store.list(token)


def cmd_ls(store: Storage, args: argparse.Namespace) -> int:
    """List references, one page per backend call.

    With --all the pages are fetched in turn until the token runs out.
    """
    token: str = args.token or ""
    refs: list[ListRefsItem] = []
    pages = 0
    while True:
        page = _list_page(store, token, args.page_size)
        pages += 1
        refs.extend(page.refs)
        token = page.next_token
        if not args.all or not token:
            break
        logger.debug("Fetched page %d (%d refs so far)", pages, len(refs))

    _output_json(
        {
            "next_token": token,
            "pages": pages,
            "refs": [item.to_dict() for item in refs],
        }
    )
    return 0


def cmd_link(store: Storage, args: argparse.Namespace) -> int:
    _output_json({"link_base": store.link_base(), "ok": True})
    return 0


def cmd_mkcontainer(store: Storage, args: argparse.Namespace) -> int:
    swift = _require_swift(store, "mkcontainer")
    swift.create_container(public_read=args.public)
    _output_json({"container": swift.container, "ok": True, "public_read": args.public})
    return 0


def cmd_rmcontainer(store: Storage, args: argparse.Namespace) -> int:
    swift = _require_swift(store, "rmcontainer")
    swift.delete_container()
    _output_json({"container": swift.container, "ok": True})
    return 0


COMMAND_DISPATCH = {
    "put": cmd_put,
    "get": cmd_get,
    "rm": cmd_rm,
    "ls": cmd_ls,
    "link": cmd_link,
    "mkcontainer": cmd_mkcontainer,
    "rmcontainer": cmd_rmcontainer,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="swiftstore",
        description="swiftstore - blob storage in OpenStack Object Storage",
    )
    parser.add_argument(
        "--backend",
        default=STORAGE_NAME,
        help=f"Storage backend name (default: {STORAGE_NAME})",
    )
    parser.add_argument(
        "--container",
        default=None,
        help="Container name (overrides SWIFTSTORE_CONTAINER)",
    )
    parser.add_argument(
        "--option",
        action="append",
        metavar="K=V[,K=V]",
        help="Extra backend options, may be repeated",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    put_parser = subparsers.add_parser("put", help="Upload a blob")
    put_parser.add_argument("ref", help="Reference to store the blob under")
    put_parser.add_argument(
        "--input", metavar="PATH", help="File to upload (reads from stdin if omitted)"
    )

    get_parser = subparsers.add_parser("get", help="Download a blob")
    get_parser.add_argument("ref", help="Reference of the blob")
    get_parser.add_argument(
        "--output", metavar="PATH", help="File to write (writes to stdout if omitted)"
    )

    rm_parser = subparsers.add_parser("rm", help="Delete a blob")
    rm_parser.add_argument("ref", help="Reference of the blob")

    ls_parser = subparsers.add_parser("ls", help="List blobs one page at a time")
    ls_parser.add_argument("--token", default="", help="Continuation token from a previous ls")
    ls_parser.add_argument(
        "--page-size", type=int, default=None, metavar="N", help="Page size hint"
    )
    ls_parser.add_argument(
        "--all", action="store_true", default=False, help="Keep fetching until the last page"
    )

    subparsers.add_parser("link", help="Print the public URL prefix of the container")

    mk_parser = subparsers.add_parser("mkcontainer", help="Create the container")
    mk_parser.add_argument(
        "--public", action="store_true", default=False, help="Allow anonymous read access"
    )

    subparsers.add_parser("rmcontainer", help="Delete the (empty) container")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success
        1: Operational failure
        2: Usage error / invalid configuration / not found / not supported
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        store = _open_store(args)
    except BackendNotRegisteredError as e:
        _output_json(_error_result("UNKNOWN_BACKEND", str(e)))
        return 2
    except StorageError as e:
        _output_json(_error_result(e.kind.name, str(e)))
        return 2 if e.kind in _USER_ERROR_KINDS else 1

    try:
        return COMMAND_DISPATCH[args.command](store, args)
    except StorageError as e:
        logger.warning("%s failed: %s", args.command, e)
        _output_json(_error_result(e.kind.name, str(e)))
        return 2 if e.kind in _USER_ERROR_KINDS else 1
    except OSError as e:
        _output_json(_error_result("LOCAL_IO", str(e)))
        return 1
    finally:
        close = getattr(store, "close", None)
        if callable(close):
            close()


if __name__ == "__main__":
    sys.exit(main())
