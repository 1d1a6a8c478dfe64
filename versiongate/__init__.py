"""
versiongate - application update gate

A Python library and CLI that decides, for a running application, whether a
newer release exists and whether upgrading is mandatory, optional or
unnecessary.

versiongate provides:
  - Semantic version parsing and comparison (N.N.N with optional extra parts)
  - Per-tier platform-level gating (minimum and optional update tiers)
  - Once-only notification deduplication backed by a JSON ledger
  - HTTP and file loaders for the JSON update document
  - Blocking and callback/future-based checks
  - Offline document validation

Quick Start
-----------
Run a check:

    $ versiongate check https://example.com/update.json \\
        --app-id com.example.app --current-version 2.0.0

For full CLI documentation:

    $ versiongate --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    CheckCoordinator and check_for_updates().
config : package
    YAML settings loading and merging.
document : package
    Update configuration model and JSON document parser.
versioning : package
    Semantic version parsing and comparison.
policy : package
    Update decision engine.
ledger : package
    Notification ledger (JSON file and in-memory).
loaders : package
    Document loaders (http, file, static).

Public API
----------
    from versiongate.core import CheckCoordinator, check_for_updates
    from versiongate.policy import decide
    from versiongate.document import parse_document
    from versiongate.versioning import SemanticVersion, compare_versions
    from versiongate.validation import validate_document

Project Information
-------------------
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Update gate - mandatory/optional update decisions"

# Re-export commonly used names for convenience
from versiongate.core import CheckCoordinator, check_for_updates
from versiongate.document import UpdateConfiguration, parse_document
from versiongate.policy import decide
from versiongate.results import CheckFailed, NoUpdate, UpdateAvailable
from versiongate.validation import validate_document
from versiongate.versioning import SemanticVersion, compare_versions

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "CheckCoordinator",
    "CheckFailed",
    "NoUpdate",
    "SemanticVersion",
    "UpdateAvailable",
    "UpdateConfiguration",
    "check_for_updates",
    "compare_versions",
    "decide",
    "parse_document",
    "validate_document",
]
