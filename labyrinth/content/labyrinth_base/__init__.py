"""
Labyrinth base content.

This module contains:
- 12 traps, 18 item encounters, 6 monsters and 6 characters
- The items those encounters hand out
- Status effects applied by traps, monsters, items and stat triggers
"""

from .catalog import create_base_catalog
from .encounters import get_encounter_definitions
from .items import get_item_definitions
from .statuses import get_status_definitions

__all__ = [
    "create_base_catalog",
    "get_encounter_definitions",
    "get_item_definitions",
    "get_status_definitions",
]
