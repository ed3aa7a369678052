"""
Domain Data Providers
trl_engine/scale/domain_provider.py

Domain-specific evidence requirements and exit criteria are reference data
owned outside the engine. The scale model only needs something that can
answer two questions per (domain, level, sublevel); these classes supply it.
"""

import logging
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Union

from trl_engine.models.enumerations import Sublevel, TechnologyDomain
from trl_engine.models.evidence import EvidenceRequirement

logger = logging.getLogger(__name__)

DomainKey = Union[TechnologyDomain, str]


class DomainDataProvider(Protocol):
    def get_requirements(
        self, domain: DomainKey, level: int, sublevel: Sublevel
    ) -> List[EvidenceRequirement]:
        ...

    def get_exit_criteria(
        self, domain: DomainKey, level: int, sublevel: Sublevel
    ) -> List[str]:
        ...


class EmptyDomainDataProvider:
    """Provider with no domain data; lookups return the base lists only."""

    def get_requirements(self, domain, level, sublevel) -> List[EvidenceRequirement]:
        return []

    def get_exit_criteria(self, domain, level, sublevel) -> List[str]:
        return []


class StaticDomainDataProvider:
    """
    Provider backed by nested mappings: domain -> level -> sublevel -> list.

    Example:
        >>> provider = StaticDomainDataProvider(
        ...     requirements={"energy": {4: {"b": [
        ...         {"type": "data", "description": "Cell cycling data", "required": True},
        ...     ]}}},
        ...     exit_criteria={"energy": {4: {"b": ["Cycle life above 500"]}}},
        ... )
        >>> [r.description for r in provider.get_requirements("energy", 4, "b")]
        ['Cell cycling data']
    """

    def __init__(
        self,
        requirements: Optional[Mapping[DomainKey, Mapping[int, Mapping[str, Sequence]]]] = None,
        exit_criteria: Optional[Mapping[DomainKey, Mapping[int, Mapping[str, Sequence[str]]]]] = None,
    ):
        self._requirements: Dict[tuple, List[EvidenceRequirement]] = {}
        self._exit_criteria: Dict[tuple, List[str]] = {}

        for domain, levels in (requirements or {}).items():
            for level, sublevels in levels.items():
                for sublevel, items in sublevels.items():
                    key = self._key(domain, level, sublevel)
                    self._requirements[key] = [
                        item if isinstance(item, EvidenceRequirement)
                        else EvidenceRequirement.model_validate(item)
                        for item in items
                    ]

        for domain, levels in (exit_criteria or {}).items():
            for level, sublevels in levels.items():
                for sublevel, items in sublevels.items():
                    self._exit_criteria[self._key(domain, level, sublevel)] = list(items)

        logger.debug(
            "Static domain provider loaded",
            extra={
                "requirement_entries": len(self._requirements),
                "exit_criteria_entries": len(self._exit_criteria),
            },
        )

    @staticmethod
    def _key(domain: DomainKey, level: int, sublevel) -> tuple:
        return (
            TechnologyDomain(domain).value,
            int(level),
            Sublevel(sublevel).value,
        )

    def get_requirements(
        self, domain: DomainKey, level: int, sublevel: Sublevel
    ) -> List[EvidenceRequirement]:
        return list(self._requirements.get(self._key(domain, level, sublevel), []))

    def get_exit_criteria(
        self, domain: DomainKey, level: int, sublevel: Sublevel
    ) -> List[str]:
        return list(self._exit_criteria.get(self._key(domain, level, sublevel), []))
