"""
TRL Scale Router - TRL Assessment Engine
trl_engine/routers/scale.py

Read-only access to the scale: positions, definitions, durations and an
evidence check for a single position.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from trl_engine.config import settings
from trl_engine.core.dependencies import get_domain_provider
from trl_engine.models.api import (
    DurationResponse,
    ErrorResponse,
    EvidenceCheckRequest,
    EvidenceCheckResponse,
    TRLDefinitionResponse,
    TRLPositionResponse,
)
from trl_engine.models.enumerations import DurationVariant, TechnologyDomain
from trl_engine.routers.errors import raise_error
from trl_engine.scale.domain_provider import DomainDataProvider
from trl_engine.scale.maturity_scale import (
    TRLPosition,
    calculate_cumulative_duration,
    calculate_evidence_progress,
    calculate_numeric_trl,
    get_evidence_requirements,
    get_exit_criteria,
    get_level_definition,
    get_next_trl,
    get_previous_trl,
    get_sublevel_definition,
    iter_trl_scale,
    parse_trl_string,
    recommend_next_steps,
)
from trl_engine.scoring.evidence_confidence import calculate_evidence_confidence

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/trl", tags=["TRL Scale"])

_INVALID_TRL = {422: {"model": ErrorResponse, "description": "Not a TRL position (expected e.g. '4b')"}}


def _compact(position: TRLPosition) -> str:
    return f"{position.level}{position.sublevel.value}"


def _parse_or_422(trl: str) -> TRLPosition:
    position = parse_trl_string(trl)
    if position is None:
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "INVALID_TRL",
            f"'{trl}' is not a TRL position; expected a level 1-9 followed by a, b or c",
            {"trl": trl},
        )
    return position


def _position_response(position: TRLPosition) -> TRLPositionResponse:
    level = get_level_definition(position.level)
    sublevel = get_sublevel_definition(*position)
    return TRLPositionResponse(
        trl=_compact(position),
        label=str(position),
        level=position.level,
        sublevel=position.sublevel,
        numeric=float(calculate_numeric_trl(*position)),
        level_name=level.name,
        phase=level.phase,
        name=sublevel.name,
        description=sublevel.description,
    )


@router.get("/scale", response_model=List[TRLPositionResponse], summary="All 27 TRL positions")
async def list_scale() -> List[TRLPositionResponse]:
    return [_position_response(position) for position in iter_trl_scale()]


@router.get(
    "/{trl}",
    response_model=TRLDefinitionResponse,
    responses=_INVALID_TRL,
    summary="Definition of one TRL position",
    description="Base evidence requirements and exit criteria, plus the domain's when `domain` is given.",
)
async def get_definition(
    trl: str,
    domain: Optional[TechnologyDomain] = Query(default=None),
    provider: DomainDataProvider = Depends(get_domain_provider),
) -> TRLDefinitionResponse:
    position = _parse_or_422(trl)
    base = _position_response(position)
    next_position = get_next_trl(*position)
    previous_position = get_previous_trl(*position)

    return TRLDefinitionResponse(
        **base.model_dump(),
        evidence_requirements=get_evidence_requirements(*position, domain=domain, provider=provider),
        exit_criteria=get_exit_criteria(*position, domain=domain, provider=provider),
        typical_duration=get_sublevel_definition(*position).typical_duration,
        next_trl=_compact(next_position) if next_position else None,
        previous_trl=_compact(previous_position) if previous_position else None,
    )


@router.get(
    "/{trl}/duration",
    response_model=DurationResponse,
    responses=_INVALID_TRL,
    summary="Cumulative months from 1a to this position",
)
async def get_duration(
    trl: str,
    variant: DurationVariant = Query(default=DurationVariant.MIN),
) -> DurationResponse:
    position = _parse_or_422(trl)
    return DurationResponse(
        trl=_compact(position),
        variant=variant,
        months=calculate_cumulative_duration(*position, variant),
    )


@router.post(
    "/{trl}/evidence",
    response_model=EvidenceCheckResponse,
    responses=_INVALID_TRL,
    summary="Evidence confidence, progress and next steps for one position",
)
async def check_evidence(
    trl: str,
    payload: EvidenceCheckRequest,
    provider: DomainDataProvider = Depends(get_domain_provider),
) -> EvidenceCheckResponse:
    position = _parse_or_422(trl)
    return EvidenceCheckResponse(
        trl=_compact(position),
        confidence=calculate_evidence_confidence(
            *position, payload.submitted, domain=payload.domain, provider=provider
        ),
        progress=float(calculate_evidence_progress(
            *position, payload.completed, domain=payload.domain, provider=provider
        )),
        recommendations=recommend_next_steps(
            *position, payload.completed, domain=payload.domain, provider=provider
        ),
    )
