"""Content schema - encounter, item and status definitions and the effect DSL."""

from .effect_dsl import (
    EffectOperation,
    EffectSpecification,
    ItemGain,
    ItemLoss,
    OperationKind,
    StatDelta,
    StatusApply,
    StatusRemove,
)
from .definitions import (
    Choice,
    EncounterCategory,
    EncounterDefinition,
    ItemDefinition,
    Persistence,
    Requirement,
    StatComparison,
    StatTrigger,
    StatusEffectDefinition,
    StatusKind,
    SuccessConditions,
)
from .catalog import Catalog
from .validation import validate_catalog, CatalogValidationError

__all__ = [
    "EffectOperation",
    "EffectSpecification",
    "ItemGain",
    "ItemLoss",
    "OperationKind",
    "StatDelta",
    "StatusApply",
    "StatusRemove",
    "Choice",
    "EncounterCategory",
    "EncounterDefinition",
    "ItemDefinition",
    "Persistence",
    "Requirement",
    "StatComparison",
    "StatTrigger",
    "StatusEffectDefinition",
    "StatusKind",
    "SuccessConditions",
    "Catalog",
    "validate_catalog",
    "CatalogValidationError",
]
