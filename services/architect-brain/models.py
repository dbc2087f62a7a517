"""Pydantic models for agent stages and the aggregated analysis result."""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _random_token() -> str:
    return uuid.uuid4().hex[:9]


class CorrelationIdentity(BaseModel):
    """Synthetic user/session pair scoping exactly one agent call."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    session_id: str

    @classmethod
    def generate(cls, agent_id: str | None = None) -> "CorrelationIdentity":
        session_prefix = agent_id or "session"
        return cls(
            user_id=f"user{_random_token()}@test.com",
            session_id=f"{session_prefix}-{_random_token()}",
        )


class StageResponse(BaseModel):
    agent_id: str
    section_key: str
    record: dict[str, Any]
    section: dict[str, list[str]]
    confidence: float | None = None
    metadata: dict[str, Any] = {}


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    features: list[str] = Field(min_length=1)
    processes: list[str] = Field(min_length=1)
    agents: list[str] = Field(min_length=1)
    technical: list[str] = Field(min_length=1)


class ImplementationPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    agents: list[str] = Field(min_length=1)
    workflows: list[str] = Field(min_length=1)
    ui_blocks: list[str] = Field(min_length=1)
    integrations: list[str] = Field(min_length=1)


class ResultMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    processing_time: str
    version: str
    generation_time: str | None = None


class DomainResult(BaseModel):
    """Fully-populated outcome of one pipeline run.

    Every section is always present; ``is_fallback`` marks static recovery
    content served after an agent call failed.
    """

    model_config = ConfigDict(frozen=True)

    analysis_result: AnalysisResult
    plan: ImplementationPlan
    confidence: float = Field(ge=0.0, le=1.0)
    metadata: ResultMetadata
    is_fallback: bool = False

    def summary_text(self) -> str:
        """Render the result as plain text, one labelled line per field."""
        lines = []
        if self.is_fallback:
            lines.append("Fallback result (agents unavailable)")
        lines.append(f"Confidence: {round(self.confidence * 100)}%")
        lines.append(f"Processed in {self.metadata.generation_time or self.metadata.processing_time}")
        lines.append("")
        lines.append("Identified Components")
        lines.append(f"Features: {', '.join(self.analysis_result.features)}")
        lines.append(f"Processes: {', '.join(self.analysis_result.processes)}")
        lines.append(f"Required Agents: {', '.join(self.analysis_result.agents)}")
        lines.append(f"Technical: {', '.join(self.analysis_result.technical)}")
        lines.append("")
        lines.append("Implementation Plan")
        lines.append(f"Core Agents: {', '.join(self.plan.agents)}")
        lines.append(f"Workflows: {', '.join(self.plan.workflows)}")
        lines.append(f"UI Components: {', '.join(self.plan.ui_blocks)}")
        lines.append(f"Integrations: {', '.join(self.plan.integrations)}")
        return "\n".join(lines)
