# topmark:header:start
#
#   project      : DJC
#   file         : messages.py
#   file_relpath : src/djc/core/messages.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Localized message catalog.

Messages are grouped in bundles, then by locale, then by label. Only the
``en_US`` locale ships today. Tokens are applied with ``%`` formatting, so a
label like ``"Could not find %s"`` takes one token.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

DEFAULT_BUNDLE: Final[str] = "default"
DEFAULT_LOCALE: Final[str] = "en_US"

MESSAGES: Final[dict[str, dict[str, dict[str, str]]]] = {
    "default": {
        "en_US": {
            "noResultsFound": "No results found.",
            "invalidInstanceUrlForAccessTokenAction": (
                "Verify that the instance URL of the session is correct, "
                "then sign in again with a fresh access token."
            ),
            "displayCommandDataSplitHelp": (
                "Break up large data files into files with 200 or less records"
            ),
            "invalidProjectWorkspace": (
                "This directory is not inside a DJC workspace (no %s found in it or its parents)"
            ),
            "UndefinedLocalizationLabel": "Missing label '%s' in bundle '%s' for locale '%s'.",
        },
    },
    "data": {
        "en_US": {
            "name": "data",
            "mainTopicDescriptionHelp": "Utility for manipulating data",
            "mainTopicLongDescriptionHelp": "Utility for manipulating data",
        },
    },
    "data_split": {
        "en_US": {
            "help": "Split data files that have more than 200 records into smaller bits",
            "description": "Split large data files into smaller ones",
            "longDescription": (
                "Split large data files into smaller ones. Every data file referenced "
                "by the plan that holds more than 200 records is partitioned into "
                "chunks of 200 records, and the plan is rewritten to reference them."
            ),
            "flagDataplanDescription": "The data plan that needs to be broken up",
            "GeneralError": "A general error for the Data split command.",
            "dataSplitFileNotFound": "Could not find specified file",
            "dataSplitDataFileNotFound": "Could not find data file %s referenced by the plan",
            "dataSplitMissingPlan": "A data plan is required; pass it with --dataplan",
            "dataSplitInvalidPlan": "The data plan %s is not a list of entries with a 'files' list",
            "dataSplitInvalidDataFile": "The data file %s does not hold a 'records' list",
            "dataSplitChunkConflict": (
                "Cannot split %s: chunk %s would overwrite another file or plan reference"
            ),
            "filesSplit": "Files split",
            "dataSplitNoFiles": "The data plan does not reference any data files.",
        },
    },
}


class MissingMessageError(KeyError):
    """Raised when a label is not defined in a bundle."""


def get_locale() -> str:
    """Return the active locale."""
    return DEFAULT_LOCALE


def get_message(
    label: str,
    tokens: Sequence[object] | None = None,
    bundle: str = DEFAULT_BUNDLE,
) -> str | None:
    """Look up a localized message.

    Args:
        label (str): Message label inside the bundle.
        tokens (Sequence[object] | None): Values substituted into the message.
        bundle (str): Bundle name.

    Returns:
        str | None: The message text, or None if the bundle has no entry for
            the active locale.

    Raises:
        MissingMessageError: If the bundle exists but does not define ``label``.
    """
    locale = get_locale()
    bundle_locale = MESSAGES.get(bundle, {}).get(locale)
    if bundle_locale is None:
        return None

    text = bundle_locale.get(label)
    if text is None:
        template = MESSAGES[DEFAULT_BUNDLE][DEFAULT_LOCALE]["UndefinedLocalizationLabel"]
        raise MissingMessageError(template % (label, bundle, locale))

    if not tokens:
        return text
    try:
        return text % tuple(tokens)
    except TypeError:
        # Surplus tokens are appended, space separated
        return " ".join([text, *(str(t) for t in tokens)])


def require_message(
    label: str,
    tokens: Sequence[object] | None = None,
    bundle: str = DEFAULT_BUNDLE,
) -> str:
    """Like [`get_message`][djc.core.messages.get_message] but never returns None."""
    text = get_message(label, tokens, bundle)
    if text is None:
        raise MissingMessageError(f"Unknown message bundle '{bundle}'")
    return text
