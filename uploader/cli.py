"""
Command-line front end for the upload server.

    uploader upload notes.txt report.pdf
    uploader list
    uploader download notes.txt -o ./copy.txt
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import httpx
from dotenv import load_dotenv

from uploader.client import Notification, UploadSession, UploadState, format_file_size
from uploader.config import server_url_from_env
from uploader.errors import UploadClientError
from uploader.storage import file_url

logger = logging.getLogger(__name__)


def _print_notification(note: Notification) -> None:
    print(f"{note.title} {note.description}", file=sys.stderr)


def _cmd_upload(session: UploadSession, args: argparse.Namespace) -> int:
    if not session.select(args.paths):
        return 1
    for selected in session.files:
        print(f"  {selected.name} ({format_file_size(selected.size)})")

    manifest = session.upload()
    if session.state is not UploadState.UPLOADED:
        return 1
    for entry in manifest:
        print(f"{entry.filename}\t{format_file_size(entry.size)}\t{session.link(entry)}")
    return 0


def _cmd_list(session: UploadSession, args: argparse.Namespace) -> int:
    for name in session.list_files():
        print(name)
    return 0


def _cmd_download(session: UploadSession, args: argparse.Namespace) -> int:
    data = session.download(file_url(args.name))
    target = Path(args.output) if args.output else Path(args.name)
    target.write_bytes(data)
    print(f"Saved {args.name} to {target} ({format_file_size(len(data))})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="uploader", description="Upload .txt and .pdf files")
    parser.add_argument(
        "--server",
        default=None,
        help="Server base URL (default: $UPLOAD_SERVER_URL or http://localhost:3001)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    upload = sub.add_parser("upload", help="Upload one or more files")
    upload.add_argument("paths", nargs="+", help="Files to upload")
    upload.set_defaults(handler=_cmd_upload)

    listing = sub.add_parser("list", help="List uploaded files")
    listing.set_defaults(handler=_cmd_list)

    download = sub.add_parser("download", help="Download an uploaded file")
    download.add_argument("name", help="Stored filename")
    download.add_argument("-o", "--output", help="Where to write it (default: ./<name>)")
    download.set_defaults(handler=_cmd_download)

    return parser


def main(argv: Optional[list[str]] = None, http: Optional[httpx.Client] = None) -> int:
    load_dotenv()
    # Notifications are printed directly; keep the log quiet unless asked
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "ERROR").upper())

    args = build_parser().parse_args(argv)
    owns_http = http is None
    if owns_http:
        http = httpx.Client(base_url=args.server or server_url_from_env(), timeout=30.0)

    session = UploadSession(http, notify=_print_notification)
    try:
        return args.handler(session, args)
    except UploadClientError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if owns_http:
            session.close()


if __name__ == "__main__":
    sys.exit(main())
