"""Service synthesis API routes.

Generates service modules for entities and returns them to the caller.
Nothing is written to storage; persisting the modules is up to the client.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from codesynth.api.deps import get_service_synthesizer
from codesynth.api.schemas import (
    BatchSynthesizeRequest,
    BatchSynthesizeResponse,
    EntitySchema,
    EntitySynthesisResult,
    ErrorResponse,
    ModuleResponse,
    SynthesizeRequest,
    SynthesizeResponse,
)
from codesynth.interfaces.synthesis import (
    BaseModuleSynthesizer,
    InvalidIdentifierError,
    MemberNotFoundError,
    PathResolutionError,
    SynthesisError,
    TargetNotFoundError,
    TemplateMalformedError,
    UnmappedRequiredPlaceholderError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["services"])

ERROR_CODES: dict[type[Exception], str] = {
    TargetNotFoundError: "TARGET_NOT_FOUND",
    MemberNotFoundError: "MEMBER_NOT_FOUND",
    TemplateMalformedError: "TEMPLATE_MALFORMED",
    UnmappedRequiredPlaceholderError: "UNMAPPED_REQUIRED_PLACEHOLDER",
    PathResolutionError: "PATH_RESOLUTION_FAILURE",
    InvalidIdentifierError: "INVALID_IDENTIFIER",
    FileNotFoundError: "TEMPLATE_NOT_FOUND",
}


# =============================================================================
# Helper Functions
# =============================================================================


def error_code_for(error: Exception) -> str:
    """Return the API error code of the most specific known error class."""
    for error_type in type(error).__mro__:
        if error_type in ERROR_CODES:
            return ERROR_CODES[error_type]
    return "SYNTHESIS_ERROR"


async def _synthesize(
    synthesizer: BaseModuleSynthesizer,
    entity: EntitySchema,
) -> list[ModuleResponse]:
    modules = await synthesizer.synthesize(entity.name, entity.type_name, entity.to_entity())
    return [ModuleResponse.from_module(module) for module in modules]


async def _synthesize_isolated(
    synthesizer: BaseModuleSynthesizer,
    entity: EntitySchema,
) -> EntitySynthesisResult:
    try:
        modules = await _synthesize(synthesizer, entity)
    except (SynthesisError, FileNotFoundError) as e:
        logger.warning(f"Skipping entity {entity.name}: {e}")
        return EntitySynthesisResult(
            entity_name=entity.name,
            error=ErrorResponse(detail=str(e), error_code=error_code_for(e)),
        )
    return EntitySynthesisResult(entity_name=entity.name, modules=modules)


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/synthesize",
    response_model=SynthesizeResponse,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse}},
)
async def synthesize_service(
    request: SynthesizeRequest,
    synthesizer: BaseModuleSynthesizer = Depends(get_service_synthesizer),
) -> SynthesizeResponse:
    """Generate the service and service base modules of one entity.

    Args:
        request: The entity to synthesize.
        synthesizer: The configured service synthesizer.

    Returns:
        SynthesizeResponse with the generated modules.

    Raises:
        SynthesisError: Handled by the application and reported as 422.
    """
    logger.info(f"Synthesis requested for entity: {request.entity.name}")
    modules = await _synthesize(synthesizer, request.entity)
    return SynthesizeResponse(entity_name=request.entity.name, modules=modules)


@router.post(
    "/synthesize/batch",
    response_model=BatchSynthesizeResponse,
    status_code=status.HTTP_200_OK,
)
async def synthesize_services_batch(
    request: BatchSynthesizeRequest,
    synthesizer: BaseModuleSynthesizer = Depends(get_service_synthesizer),
) -> BatchSynthesizeResponse:
    """Generate service modules for several entities concurrently.

    A failing entity is reported in its result and doesn't affect the
    others.

    Args:
        request: The entities to synthesize.
        synthesizer: The configured service synthesizer.

    Returns:
        BatchSynthesizeResponse with one result per entity, in request order.
    """
    logger.info(f"Batch synthesis requested for {len(request.entities)} entities")

    results = await asyncio.gather(
        *(_synthesize_isolated(synthesizer, entity) for entity in request.entities)
    )
    failed = sum(1 for result in results if result.error is not None)

    logger.info(f"Batch synthesis finished: {len(results) - failed} succeeded, {failed} failed")
    return BatchSynthesizeResponse(
        results=list(results),
        succeeded=len(results) - failed,
        failed=failed,
    )
