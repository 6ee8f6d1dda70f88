"""FastAPI routers and dependencies."""

from codesynth.api.deps import get_service_synthesizer
from codesynth.api.services import router as services_router

__all__ = [
    "get_service_synthesizer",
    "services_router",
]
