"""
Base game catalog.

Bundles the base encounters, items and statuses into one Catalog.
"""

from ...content_schema.catalog import Catalog
from .encounters import get_encounter_definitions
from .items import get_item_definitions
from .statuses import get_status_definitions


def create_base_catalog() -> Catalog:
    """Build the catalog shipped with the engine."""
    return Catalog.build(
        encounters=get_encounter_definitions(),
        items=get_item_definitions(),
        statuses=get_status_definitions(),
    )
