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

"""Update decision policy for versiongate.

Determines whether the running application must update, may update, or is
up to date, based on an UpdateConfiguration, its own version and platform
level, and the last optional version already shown to the user.

Algorithm:

1. Eligibility. A tier takes part only if its required platform level is 0
   or not above the current platform level. An ineligible tier is treated
   as absent.
2. Mandatory. Eligible minimum tier above the current version: mandatory
   update. The ledger is not consulted.
3. Optional. Eligible optional tier above the current version: optional
   update, unless the tier is "once_only" and the ledger already holds the
   exact same version string.
4. Otherwise no update.

A version equal to a tier's version is up to date with respect to that tier.

Example:
    Decide for a device on platform level 16:

        from versiongate.document import parse_document
        from versiongate.policy.engine import decide

        outcome = decide(
            current_version="2.0.0",
            platform_level=16,
            config=parse_document(raw, "android"),
            last_notified_version=None,
        )
"""

from __future__ import annotations

from versiongate.document.model import MinimumTier, OptionalTier, UpdateConfiguration
from versiongate.logging import Logger, get_global_logger
from versiongate.results import NoUpdate, Outcome, UpdateAvailable
from versiongate.versioning import SemanticVersion


def is_tier_eligible(tier: MinimumTier | OptionalTier | None, platform_level: int) -> bool:
    """Return True if ``tier`` is present and applies at ``platform_level``."""
    if tier is None:
        return False
    required = tier.required_platform_level
    return not required or platform_level >= required


def _mandatory_target(
    minimum: MinimumTier, optional: OptionalTier | None
) -> SemanticVersion:
    # Offer the latest release when it is eligible and ahead of the minimum
    if optional is not None and optional.version > minimum.version:
        return optional.version
    return minimum.version


def decide(
    *,
    current_version: str,
    platform_level: int,
    config: UpdateConfiguration,
    last_notified_version: str | None = None,
    logger: Logger | None = None,
) -> UpdateAvailable | NoUpdate:
    """Decide the update outcome for one check.

    Args:
        current_version: Version of the running application.
        platform_level: Platform API level of the running device or runtime.
        config: Configuration parsed from the update document.
        last_notified_version: Optional version last surfaced to the user, or
            None if never notified.
        logger: Logger for the decision trace. Defaults to the global logger.

    Returns:
        UpdateAvailable or NoUpdate, each carrying a copy of the metadata.

    Raises:
        InvalidVersionFormat: If current_version is malformed.
    """
    if logger is None:
        logger = get_global_logger()

    current = SemanticVersion.parse(current_version)
    metadata = config.metadata_copy()

    minimum = config.minimum if is_tier_eligible(config.minimum, platform_level) else None
    optional = (
        config.optional if is_tier_eligible(config.optional, platform_level) else None
    )

    if config.minimum is not None and minimum is None:
        logger.debug(
            "ENGINE",
            f"Minimum tier {config.minimum.version} needs platform level "
            f"{config.minimum.required_platform_level}, have {platform_level}",
        )
    if config.optional is not None and optional is None:
        logger.debug(
            "ENGINE",
            f"Optional tier {config.optional.version} needs platform level "
            f"{config.optional.required_platform_level}, have {platform_level}",
        )

    if minimum is not None and current < minimum.version:
        target = _mandatory_target(minimum, optional)
        logger.verbose(
            "ENGINE",
            f"{current} is below minimum {minimum.version}: mandatory update to {target}",
        )
        return UpdateAvailable(
            target_version=target.text, mandatory=True, metadata=metadata
        )

    if optional is not None and current < optional.version:
        if (
            optional.notification_policy == "once_only"
            and last_notified_version == optional.version.text
        ):
            logger.verbose(
                "ENGINE",
                f"Optional update {optional.version} already notified, skipping",
            )
        else:
            logger.verbose(
                "ENGINE", f"{current} is below latest {optional.version}: optional update"
            )
            return UpdateAvailable(
                target_version=optional.version.text,
                mandatory=False,
                metadata=metadata,
            )

    logger.verbose("ENGINE", f"{current} is up to date")
    return NoUpdate(metadata=metadata)


def should_record_notification(outcome: Outcome) -> bool:
    """Return True if ``outcome`` must be written to the notification ledger.

    Only optional updates are recorded. Mandatory updates and errors never
    touch the ledger.
    """
    return isinstance(outcome, UpdateAvailable) and not outcome.mandatory
