"""Static result served when an agent call fails."""

import logging

from config import settings
from models import AnalysisResult, DomainResult, ImplementationPlan, ResultMetadata

logger = logging.getLogger(__name__)


class ErrorRecoveryPolicy:
    """Produce one fixed, fully-populated DomainResult.

    Content comes from configuration and is validated at construction, so a
    broken override fails at startup rather than mid-request.
    """

    def __init__(
        self,
        analysis: dict[str, list[str]] | None = None,
        plan: dict[str, list[str]] | None = None,
        confidence: float | None = None,
        metadata: dict[str, str] | None = None,
    ):
        self._result = DomainResult(
            analysis_result=AnalysisResult(**(analysis if analysis is not None else settings.RECOVERY_ANALYSIS)),
            plan=ImplementationPlan(**(plan if plan is not None else settings.RECOVERY_PLAN)),
            confidence=confidence if confidence is not None else settings.RECOVERY_CONFIDENCE,
            metadata=ResultMetadata(**(metadata if metadata is not None else settings.RECOVERY_METADATA)),
            is_fallback=True,
        )

    def recover(self) -> DomainResult:
        logger.info("Serving recovery result")
        return self._result.model_copy(deep=True)
