"""FastAPI dependencies for dependency injection."""

import logging

from fastapi import HTTPException, status

from codesynth.core.factory import get_factory
from codesynth.interfaces.synthesis import BaseModuleSynthesizer

logger = logging.getLogger(__name__)


def get_service_synthesizer() -> BaseModuleSynthesizer:
    """Dependency for getting the configured service synthesizer.

    Returns:
        The shared service synthesizer.

    Raises:
        HTTPException: If the configured strategies cannot be built.
    """
    try:
        return get_factory().get_service_synthesizer()
    except ValueError as e:
        logger.error(f"Invalid synthesizer configuration: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Synthesizer is misconfigured",
        ) from e
