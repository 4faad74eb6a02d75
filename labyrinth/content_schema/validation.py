"""
Catalog Validation - consistency checks for content definitions.

Validates that:
1. Encounters are well-formed (choices present, known operators)
2. References resolve (item ids, status ids)
3. Status definitions are coherent (stack limits, durations, triggers)
4. Pools are large enough for a full distribution

Non-positive weights are only warnings: the distributor substitutes
the default weight for them.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from ..config import DEFAULT_RULES, RulesConfig
from ..engine_core.state import canonical_stat
from ..errors import ConfigurationError
from .catalog import Catalog
from .definitions import (
    COMPARISON_OPERATORS,
    EncounterDefinition,
    StatComparison,
    StatusEffectDefinition,
)
from .effect_dsl import EffectSpecification

logger = logging.getLogger(__name__)


class CatalogValidationError(ConfigurationError):
    """Raised when catalog validation fails."""
    error_code = "CATALOG_INVALID"

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Catalog validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_catalog(
    catalog: Catalog,
    rules: RulesConfig = DEFAULT_RULES,
    raise_on_error: bool = False,
) -> ValidationResult:
    """
    Validate a complete catalog.

    Returns ValidationResult with errors and warnings.
    Raises CatalogValidationError if raise_on_error=True and errors exist.
    """
    errors: list[str] = []
    warnings: list[str] = []

    item_ids = set(catalog.items)
    status_ids = set(catalog.statuses)

    for encounter in catalog.encounters.values():
        enc_errors, enc_warnings = _validate_encounter(encounter, item_ids, status_ids)
        errors.extend(enc_errors)
        warnings.extend(enc_warnings)

    for item in catalog.items.values():
        effect_errors = _validate_effect(item.effects, item_ids, status_ids)
        errors.extend([f"Item '{item.id}': {e}" for e in effect_errors])
        if item.effects.is_empty:
            warnings.append(f"Item '{item.id}' has no effects")

    for status in catalog.statuses.values():
        status_errors, status_warnings = _validate_status(status)
        errors.extend(status_errors)
        warnings.extend(status_warnings)

    # Pool sizes for a full distribution
    if len(catalog.traps) < rules.trap_count:
        errors.append(f"Need at least {rules.trap_count} trap events, found {len(catalog.traps)}")
    if len(catalog.item_encounters) < rules.item_count:
        errors.append(
            f"Need at least {rules.item_count} item events, found {len(catalog.item_encounters)}"
        )
    if not catalog.characters and not catalog.monsters:
        errors.append("Need at least one character or monster event")

    if not catalog.statuses:
        warnings.append("No status effects defined")

    result = ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)
    if errors:
        for error in errors:
            logger.error("Catalog validation: %s", error)
        if raise_on_error:
            raise CatalogValidationError(errors)
    return result


def _validate_encounter(
    encounter: EncounterDefinition,
    item_ids: set[str],
    status_ids: set[str],
) -> tuple[list[str], list[str]]:
    """Validate a single encounter definition."""
    errors = []
    warnings = []
    prefix = f"Event '{encounter.id}'"

    if not encounter.name:
        warnings.append(f"{prefix} has empty name")
    if not encounter.choices:
        errors.append(f"{prefix} has no choices")
    if encounter.weight <= 0:
        warnings.append(f"{prefix} has non-positive weight {encounter.weight}, default will be used")

    for i, choice in enumerate(encounter.choices):
        where = f"{prefix} choice {i}"
        if not choice.text:
            errors.append(f"{where} has empty text")
        if choice.requirements:
            for item_id in choice.requirements.items:
                if item_id not in item_ids:
                    errors.append(f"{where} requires unknown item '{item_id}'")
            errors.extend(_validate_comparisons(choice.requirements.stats, where))
        if choice.success_conditions:
            errors.extend(_validate_comparisons(choice.success_conditions.stats, where))
        effects = [choice.success_effects]
        if choice.failure_effects:
            effects.append(choice.failure_effects)
        for effect in effects:
            errors.extend(f"{where}: {e}" for e in _validate_effect(effect, item_ids, status_ids))

    return errors, warnings


def _validate_comparisons(stats: dict[str, StatComparison], where: str) -> list[str]:
    return [
        f"{where} uses unknown operator '{c.operator}' for {stat}"
        for stat, c in stats.items()
        if c.operator not in COMPARISON_OPERATORS
    ]


def _validate_effect(
    effect: EffectSpecification,
    item_ids: set[str],
    status_ids: set[str],
) -> list[str]:
    """Validate effect references and quantities."""
    errors = []
    for op in effect.item_gains + effect.item_losses:
        if op.item_id not in item_ids:
            errors.append(f"references unknown item '{op.item_id}'")
        if op.quantity <= 0:
            errors.append(f"non-positive quantity {op.quantity} for item '{op.item_id}'")
    for op in effect.status_applies + effect.status_removes:
        if op.status_id not in status_ids:
            errors.append(f"references unknown status '{op.status_id}'")
    return errors


def _validate_status(status: StatusEffectDefinition) -> tuple[list[str], list[str]]:
    """Validate a status definition. Unknown stat names are only warnings: ticks skip them."""
    errors = []
    warnings = []
    prefix = f"Status '{status.id}'"
    if status.stackable and status.max_stacks < 1:
        errors.append(f"{prefix} is stackable but max_stacks is {status.max_stacks}")
    if status.duration is not None and status.duration <= 0:
        errors.append(f"{prefix} has non-positive duration {status.duration}")
    if status.trigger and status.trigger.comparison.operator not in COMPARISON_OPERATORS:
        errors.append(f"{prefix} trigger uses unknown operator '{status.trigger.comparison.operator}'")
    if status.trigger and canonical_stat(status.trigger.stat) is None:
        warnings.append(f"{prefix} trigger uses unknown stat '{status.trigger.stat}'")
    for op in status.ongoing:
        if canonical_stat(op.stat) is None:
            warnings.append(f"{prefix} ongoing effect uses unknown stat '{op.stat}'")
    return errors, warnings
