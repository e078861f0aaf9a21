"""Command-line entry point for Curator."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from curator.__version__ import __version__
from curator.api.csrf import parse_cookie_header
from curator.api.resource_client import ResourceClient, ResourceSaveError, ValidationError
from curator.db.legacy_dataset_client import DatabaseError, LegacyDatasetClient
from curator.db.legacy_loader import LegacyDatasetLoader
from curator.utils.credential_manager import CredentialStorageError, load_db_credentials
from curator.utils.settings import EditorSettings


def setup_logging(level: int = logging.INFO):
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler('curator.log', encoding='utf-8'),
            logging.StreamHandler()
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="curator",
        description="Load legacy datasets and export or save them as resource payloads."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Export a legacy dataset as save payload")
    export.add_argument("resource_id", type=int, help="Legacy resource id")
    export.add_argument("--save", action="store_true", help="POST the payload to the configured save URL")
    export.add_argument("--save-url", help="POST the payload to this endpoint instead of the configured one")
    export.add_argument("--html-file", help="Editor page HTML containing the csrf-token meta tag")
    export.add_argument("--cookie", help="Cookie header value, e.g. 'XSRF-TOKEN=...; session=...'")

    return parser


def export_resource(args: argparse.Namespace) -> int:
    """Run the export command; returns the process exit code."""
    logger = logging.getLogger(__name__)

    try:
        credentials = load_db_credentials()
    except CredentialStorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not credentials:
        print("Error: no database credentials configured", file=sys.stderr)
        return 1

    client = LegacyDatasetClient(
        host=credentials['host'],
        database=credentials['database'],
        username=credentials['username'],
        password=credentials['password']
    )

    try:
        state = LegacyDatasetLoader(client).load_editor_state(args.resource_id)
    except DatabaseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    payload = state.build_payload()

    if not (args.save or args.save_url):
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    if not state.is_submit_ready():
        logger.warning(f"Resource {args.resource_id} is not ready to save, request not sent")
        print(
            "Error: required fields are missing (main title, year, resource type, language, "
            "license, author names or contact e-mail)",
            file=sys.stderr
        )
        return 2

    settings = EditorSettings()
    save_url = args.save_url or settings.save_url

    html_content = None
    if args.html_file:
        with open(args.html_file, encoding='utf-8') as f:
            html_content = f.read()

    resource_client = ResourceClient(
        save_url=save_url,
        html_content=html_content,
        cookies=parse_cookie_header(args.cookie),
        timeout=settings.request_timeout
    )

    try:
        result = resource_client.save_resource(payload)
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        for message in e.errors:
            print(f"  - {message}", file=sys.stderr)
        return 2
    except ResourceSaveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result['message'])
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting Curator {__version__}")

    if args.command == "export":
        return export_resource(args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
