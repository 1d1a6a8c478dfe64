# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for versiongate.

This module provides the main CLI entry point for the versiongate tool,
offering commands for running update checks, comparing versions and
validating update documents.

Commands:

    check: Run an update check against a document URL or file
    compare: Compare two version strings
    validate: Validate an update document (no network, no ledger)

Example:
    Check for an update:
        ```bash
        $ versiongate check https://example.com/update.json \\
            --app-id com.example.app --current-version 2.0.0 --platform-level 21
        ```

    Check using a settings file:
        ```bash
        $ versiongate check --settings versiongate.yaml
        ```

    Compare two versions:
        ```bash
        $ versiongate compare 1.2.3 1.2.3.0
        ```

    Validate a document:
        ```bash
        $ versiongate validate update.json --platform ios
        ```

Exit Codes:

- 0: Success (an update check that reports "no update" is a success)
- 1: Error (settings, invalid version, failed check or invalid document)

Note:
    Each command has its own handler function (cmd_<command>).
    Verbose mode shows full tracebacks on errors for debugging.
    Debug mode implies verbose mode and shows the effective settings.

"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from versiongate import __version__
from versiongate.config import load_settings, require_setting
from versiongate.core import check_for_updates
from versiongate.exceptions import ConfigError, InvalidVersionFormat, VersionGateError
from versiongate.ledger import InMemoryLedger, JsonFileLedger
from versiongate.logging import get_logger, set_global_logger
from versiongate.results import CheckFailed, NoUpdate, UpdateAvailable
from versiongate.validation import validate_document
from versiongate.versioning import compare_versions


def cmd_check(args: argparse.Namespace) -> int:
    """Handler for 'versiongate check' command.

    Merges the settings file (if any) with command-line flags, runs one
    blocking update check and prints the outcome.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for NoUpdate/UpdateAvailable, 1 for a failed check or
        a settings error).

    """
    # Configure global logger
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    overrides = {
        "app_id": args.app_id,
        "current_version": args.current_version,
        "platform": args.platform,
        "platform_level": args.platform_level,
        "document": {
            "source": args.source,
            "timeout": args.timeout,
        },
        "ledger": {
            "path": str(args.ledger_file) if args.ledger_file else None,
        },
    }

    try:
        settings = load_settings(
            Path(args.settings) if args.settings else None, overrides
        )
        source = require_setting(settings, "document.source")
        app_id = require_setting(settings, "app_id")
        current_version = require_setting(settings, "current_version")
    except (ConfigError, FileNotFoundError) as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            import traceback

            traceback.print_exc()
        return 1

    if args.stateless:
        ledger = InMemoryLedger()
        ledger_desc = "(stateless)"
    else:
        ledger_path = Path(settings["ledger"]["path"])
        ledger = JsonFileLedger(ledger_path)
        ledger_desc = str(ledger_path)

    print(f"Checking for updates: {source}")
    print(f"Ledger: {ledger_desc}")
    print()

    try:
        outcome = check_for_updates(
            str(source),
            app_id=str(app_id),
            current_version=str(current_version),
            platform_level=settings["platform_level"],
            platform=settings["platform"],
            ledger=ledger,
            timeout=settings["document"]["timeout"],
            headers=settings["document"].get("headers") or {},
        )
    except VersionGateError as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            import traceback

            traceback.print_exc()
        return 1

    # Display results
    print("=" * 70)
    print("UPDATE CHECK RESULTS")
    print("=" * 70)
    print(f"App ID:          {app_id}")
    print(f"Platform:        {settings['platform']}")
    print(f"Platform Level:  {settings['platform_level']}")
    print(f"Current Version: {current_version}")

    if isinstance(outcome, CheckFailed):
        print(f"Status:          error ({outcome.kind})")
        if outcome.message:
            print(f"Message:         {outcome.message}")
        print("=" * 70)
        print()
        print(f"[FAILED] Update check failed: {outcome.kind}")
        return 1

    if isinstance(outcome, UpdateAvailable):
        status = "mandatory update" if outcome.mandatory else "optional update"
        print(f"Status:          {status}")
        print(f"Target Version:  {outcome.target_version}")
    elif isinstance(outcome, NoUpdate):
        print("Status:          up to date")

    for key, value in sorted(outcome.metadata.items()):
        print(f"Meta:            {key}={value}")
    print("=" * 70)
    print()

    if isinstance(outcome, UpdateAvailable):
        print(f"[SUCCESS] Update available: {outcome.target_version}")
    else:
        print("[SUCCESS] No update needed.")
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Handler for 'versiongate compare' command.

    Returns:
        Exit code (0 if both versions are valid, 1 otherwise).

    """
    try:
        result = compare_versions(args.first, args.second)
    except InvalidVersionFormat as err:
        print(f"Error: {err}")
        return 1

    symbol = {-1: "<", 0: "==", 1: ">"}[result]
    print(f"{args.first} {symbol} {args.second}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'versiongate validate' command.

    Validates an update document without fetching anything or touching the
    notification ledger. Useful as a CI check before publishing a document.

    Args:
        args: Parsed command-line arguments containing the document path,
            platform and verbose flag.

    Returns:
        Exit code (0 for a valid document, 1 for invalid).

    """
    # Configure global logger
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    document_path = Path(args.document).resolve()

    print(f"Validating document: {document_path}")
    print()

    result = validate_document(document_path, platform=args.platform)

    # Display results
    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Document:    {result.document_path}")
    print(f"Platform:    {result.platform}")
    print(f"Status:      {result.status.upper()}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Document is valid!")
        return 0
    else:
        print()
        print(
            f"[FAILED] Document validation failed with {len(result.errors)} error(s)."
        )
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the versiongate CLI."""
    parser = argparse.ArgumentParser(
        prog="versiongate",
        description="versiongate - decide whether an application update is needed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"versiongate {__version__}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'check' command
    parser_check = subparsers.add_parser(
        "check",
        help="Run an update check against a document URL or file",
        description="Fetch an update document and report whether a mandatory or optional update is available.",
    )
    parser_check.add_argument(
        "source",
        nargs="?",
        default=None,
        help="URL or path of the update document (default: from settings)",
    )
    parser_check.add_argument(
        "--app-id",
        default=None,
        help="Application identity used as the notification ledger key",
    )
    parser_check.add_argument(
        "--current-version",
        default=None,
        help="Version of the running application (e.g. 2.0.0)",
    )
    parser_check.add_argument(
        "--platform",
        default=None,
        help="Platform section of the document to read (default: android)",
    )
    parser_check.add_argument(
        "--platform-level",
        type=int,
        default=None,
        help="Platform API level of the running application (default: 0)",
    )
    parser_check.add_argument(
        "--settings",
        default=None,
        help="Settings YAML file",
    )
    parser_check.add_argument(
        "--ledger-file",
        type=Path,
        default=None,
        help="Notification ledger file (default: state/notifications.json)",
    )
    parser_check.add_argument(
        "--stateless",
        action="store_true",
        help="Do not read or write the notification ledger file",
    )
    parser_check.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: 30)",
    )
    parser_check.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_check.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_check.set_defaults(func=cmd_check)

    # 'compare' command
    parser_compare = subparsers.add_parser(
        "compare",
        help="Compare two version strings",
        description="Print whether the first version is lower than, equal to or greater than the second.",
    )
    parser_compare.add_argument("first", help="First version (e.g. 1.2.3)")
    parser_compare.add_argument("second", help="Second version (e.g. 1.2.3.0)")
    parser_compare.set_defaults(func=cmd_compare)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate an update document (no network calls)",
        description="Check an update document for JSON syntax errors and invalid fields.",
    )
    parser_validate.add_argument(
        "document",
        help="Path to the JSON update document",
    )
    parser_validate.add_argument(
        "--platform",
        default="android",
        help="Platform section to validate (default: android)",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the versiongate CLI.

    This function is registered as the 'versiongate' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Call the appropriate command handler
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
