"""Shared ACRIS constants and environment-sourced settings.

This module centralizes the open-data endpoint registry, the app-token
lookup and the external API's size limits so the fetcher and the dataset
descriptors can stay small and focused.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from .core.exceptions import ConfigurationError

load_dotenv()

# NYC Open Data (Socrata) resource root; every dataset lives at <root>/<id>.json
BASE_URL = os.getenv("ACRIS_BASE_URL", "https://data.cityofnewyork.us/resource")

DATASET_IDS = {
    "real_property_master": "bnx9-e6tj",
    "real_property_legals": "8h5j-fqxa",
    "real_property_parties": "636b-3b5g",
    "real_property_references": "pwkr-dpni",
    "real_property_remarks": "9p4w-7npp",
    "personal_property_master": "sv7x-dduq",
    "personal_property_legals": "uqqa-hym2",
    "personal_property_parties": "nbbg-wtuz",
    "personal_property_references": "6y3e-jcrc",
    "personal_property_remarks": "fuzi-5ks9",
}

# Rows per page; the API's own per-request row ceiling
DEFAULT_PAGE_SIZE = 1000

# Identifiers per `document_id IN (...)` clause when selecting document ids
DEFAULT_BATCH_SIZE = 500

# Identifiers per batch when fetching full rows by document id
RECORDS_BATCH_SIZE = 75

DEFAULT_TIMEOUT = 30.0

APP_TOKEN_ENV_VARS = ("NYC_OPEN_DATA_APP_TOKEN", "APP_TOKEN")


def resolve_endpoint(dataset_name: str) -> str:
    """Resolve a dataset name to its JSON endpoint URL.

    Args:
        dataset_name: Registered dataset name (e.g. "real_property_master")

    Returns:
        Endpoint URL string

    Raises:
        ConfigurationError: If the dataset name is not registered

    Examples:
        >>> resolve_endpoint("real_property_master")
        'https://data.cityofnewyork.us/resource/bnx9-e6tj.json'
    """
    resource_id = DATASET_IDS.get(dataset_name)
    if resource_id is None:
        raise ConfigurationError(f"Unknown ACRIS dataset: {dataset_name!r}")
    return f"{BASE_URL}/{resource_id}.json"


def get_app_token() -> str | None:
    """Return the open-data app token, or None when none is configured."""
    for name in APP_TOKEN_ENV_VARS:
        token = os.getenv(name)
        if token:
            return token
    return None
