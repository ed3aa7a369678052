"""
Maturity Scale Model
trl_engine/scale/maturity_scale.py

The 9x3 TRL scale, its numeric encoding and inverse, sub-level navigation
and cumulative duration estimates.

Encoding:
    numeric = level + offset(sublevel)      offset: a=0, b=0.33, c=0.67

Inverse (thresholds on the fractional remainder, not centred
on the offsets):
    remainder < 0.17  -> a
    remainder < 0.50  -> b
    otherwise         -> c
"""

import re
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Iterable, Iterator, List, NamedTuple, Optional, Union

from trl_engine.models.definitions import LevelDefinition, SublevelDefinition
from trl_engine.models.enumerations import DurationVariant, Sublevel, TechnologyDomain
from trl_engine.models.evidence import EvidenceRequirement
from trl_engine.scale.domain_provider import DomainDataProvider, EmptyDomainDataProvider
from trl_engine.scale.levels import TRL_LEVELS

MIN_LEVEL = 1
MAX_LEVEL = 9

SUBLEVEL_ORDER = (Sublevel.A, Sublevel.B, Sublevel.C)

SUBLEVEL_OFFSETS = {
    Sublevel.A: Decimal("0"),
    Sublevel.B: Decimal("0.33"),
    Sublevel.C: Decimal("0.67"),
}

SUBLEVEL_B_THRESHOLD = Decimal("0.17")
SUBLEVEL_C_THRESHOLD = Decimal("0.5")

TRL_STRING_PATTERN = re.compile(r"^([1-9])([abc])$")

_DEFAULT_PROVIDER = EmptyDomainDataProvider()

Numeric = Union[Decimal, float, int]


class TRLPosition(NamedTuple):
    """A (level, sublevel) position; tuples order along the scale."""

    level: int
    sublevel: Sublevel

    def __str__(self) -> str:
        return format_trl_string(self.level, self.sublevel)


def _validate(level: int, sublevel) -> TRLPosition:
    if isinstance(level, bool) or not isinstance(level, int):
        raise ValueError(f"TRL level must be an integer, got {level!r}")
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValueError(f"TRL level must be between {MIN_LEVEL} and {MAX_LEVEL}, got {level}")
    try:
        return TRLPosition(level, Sublevel(sublevel))
    except ValueError:
        raise ValueError(f"TRL sublevel must be one of a, b, c, got {sublevel!r}") from None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def calculate_numeric_trl(level: int, sublevel: Union[Sublevel, str]) -> Decimal:
    """Encode a position as a number (e.g. 4, 'b' -> Decimal('4.33'))."""
    position = _validate(level, sublevel)
    return Decimal(position.level) + SUBLEVEL_OFFSETS[position.sublevel]


def numeric_to_trl(score: Numeric) -> TRLPosition:
    """
    Decode a number back to a position.

    The level is the floor of the score clamped to [1, 9]; the sub-level is
    picked from the fractional remainder before clamping.
    """
    value = score if isinstance(score, Decimal) else Decimal(str(score))
    floor = value.to_integral_value(rounding=ROUND_FLOOR)
    remainder = value - floor

    if remainder < SUBLEVEL_B_THRESHOLD:
        sublevel = Sublevel.A
    elif remainder < SUBLEVEL_C_THRESHOLD:
        sublevel = Sublevel.B
    else:
        sublevel = Sublevel.C

    level = max(MIN_LEVEL, min(MAX_LEVEL, int(floor)))
    return TRLPosition(level, sublevel)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

def get_next_trl(level: int, sublevel: Union[Sublevel, str]) -> Optional[TRLPosition]:
    """Next sub-level up the scale; None at 9c."""
    position = _validate(level, sublevel)
    index = SUBLEVEL_ORDER.index(position.sublevel)
    if index < len(SUBLEVEL_ORDER) - 1:
        return TRLPosition(position.level, SUBLEVEL_ORDER[index + 1])
    if position.level < MAX_LEVEL:
        return TRLPosition(position.level + 1, Sublevel.A)
    return None


def get_previous_trl(level: int, sublevel: Union[Sublevel, str]) -> Optional[TRLPosition]:
    """Previous sub-level down the scale; None at 1a."""
    position = _validate(level, sublevel)
    index = SUBLEVEL_ORDER.index(position.sublevel)
    if index > 0:
        return TRLPosition(position.level, SUBLEVEL_ORDER[index - 1])
    if position.level > MIN_LEVEL:
        return TRLPosition(position.level - 1, Sublevel.C)
    return None


def iter_trl_scale() -> Iterator[TRLPosition]:
    """All 27 positions from 1a to 9c."""
    for level in range(MIN_LEVEL, MAX_LEVEL + 1):
        for sublevel in SUBLEVEL_ORDER:
            yield TRLPosition(level, sublevel)


def calculate_cumulative_duration(
    target_level: int,
    target_sublevel: Union[Sublevel, str],
    variant: Union[DurationVariant, str] = DurationVariant.MIN,
) -> int:
    """
    Months from 1a up to and including the target, summing each sub-level's
    typical duration bound.

    Examples:
        >>> calculate_cumulative_duration(1, "c")
        6
        >>> calculate_cumulative_duration(1, "c", "max")
        18
    """
    target = _validate(target_level, target_sublevel)
    variant = DurationVariant(variant)

    total = 0
    for position in iter_trl_scale():
        if position > target:
            break
        duration = get_sublevel_definition(*position).typical_duration
        total += duration.min if variant is DurationVariant.MIN else duration.max
    return total


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_trl_string(level: int, sublevel: Union[Sublevel, str]) -> str:
    """4, 'b' -> 'TRL 4b'."""
    return f"TRL {level}{Sublevel(sublevel).value}"


def parse_trl_string(text: str) -> Optional[TRLPosition]:
    """'4b' -> TRLPosition(4, 'b'); None when the text is not exactly <1-9><a-c>."""
    if not isinstance(text, str):
        return None
    match = TRL_STRING_PATTERN.fullmatch(text)
    if not match:
        return None
    return TRLPosition(int(match.group(1)), Sublevel(match.group(2)))


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

def get_level_definition(level: int) -> LevelDefinition:
    _validate(level, Sublevel.A)
    return TRL_LEVELS[level]


def get_sublevel_definition(level: int, sublevel: Union[Sublevel, str]) -> SublevelDefinition:
    position = _validate(level, sublevel)
    return TRL_LEVELS[position.level].sublevels[position.sublevel]


def get_evidence_requirements(
    level: int,
    sublevel: Union[Sublevel, str],
    domain: Optional[Union[TechnologyDomain, str]] = None,
    provider: Optional[DomainDataProvider] = None,
) -> List[EvidenceRequirement]:
    """Base requirements followed by the domain provider's, when a domain is given."""
    position = _validate(level, sublevel)
    requirements = list(get_sublevel_definition(*position).evidence_requirements)
    if domain is not None:
        provider = provider or _DEFAULT_PROVIDER
        requirements.extend(provider.get_requirements(domain, position.level, position.sublevel))
    return requirements


def get_exit_criteria(
    level: int,
    sublevel: Union[Sublevel, str],
    domain: Optional[Union[TechnologyDomain, str]] = None,
    provider: Optional[DomainDataProvider] = None,
) -> List[str]:
    """Base exit criteria followed by the domain provider's, when a domain is given."""
    position = _validate(level, sublevel)
    criteria = list(get_sublevel_definition(*position).exit_criteria)
    if domain is not None:
        provider = provider or _DEFAULT_PROVIDER
        criteria.extend(provider.get_exit_criteria(domain, position.level, position.sublevel))
    return criteria


def calculate_evidence_progress(
    level: int,
    sublevel: Union[Sublevel, str],
    completed_evidence: Iterable[str],
    domain: Optional[Union[TechnologyDomain, str]] = None,
    provider: Optional[DomainDataProvider] = None,
) -> Decimal:
    """
    Percentage of required evidence items whose description appears in
    ``completed_evidence``. Returns 0 when nothing is required.
    """
    completed = set(completed_evidence)
    required = [
        req for req in get_evidence_requirements(level, sublevel, domain, provider)
        if req.required
    ]
    if not required:
        return Decimal("0")

    done = sum(1 for req in required if req.description in completed)
    progress = Decimal(done) / Decimal(len(required)) * Decimal("100")
    return progress.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def recommend_next_steps(
    level: int,
    sublevel: Union[Sublevel, str],
    completed_evidence: Iterable[str],
    domain: Optional[Union[TechnologyDomain, str]] = None,
    provider: Optional[DomainDataProvider] = None,
) -> List[str]:
    """
    Human-readable checklist: missing required evidence at the current
    position, then the exit criteria to meet before moving on.
    """
    position = _validate(level, sublevel)
    label = format_trl_string(*position)
    completed = set(completed_evidence)

    recommendations: List[str] = []
    missing = [
        req for req in get_evidence_requirements(position.level, position.sublevel, domain, provider)
        if req.required and req.description not in completed
    ]
    if missing:
        recommendations.append(
            f"Complete {len(missing)} required evidence items for {label}:"
        )
        recommendations.extend(f"  - {req.description}" for req in missing)

    recommendations.append("Ensure exit criteria are met:")
    recommendations.extend(
        f"  - {criterion}"
        for criterion in get_exit_criteria(position.level, position.sublevel, domain, provider)
    )
    return recommendations
