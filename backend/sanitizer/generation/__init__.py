"""Generation attempt orchestration and its error types."""

from .errors import GenerationError, GenerationErrorKind
from .pricing import calculate_cost
from .coordinator import GenerationCoordinator, GenerationOutcome

__all__ = [
    "GenerationCoordinator",
    "GenerationError",
    "GenerationErrorKind",
    "GenerationOutcome",
    "calculate_cost",
]
