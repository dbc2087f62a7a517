"""Agent pipeline: run each stage in order, then parse, backfill and aggregate.

Stage k+1's request is built from stage k's record, so stages run strictly
one after another. A transport failure at any stage abandons the run and the
recovery result is returned instead; parsing problems never abort a run.
"""

import logging
import math
import time
from typing import Any, Callable, Mapping, Protocol, Sequence

from agent_client import AgentTransportError
from config import settings
from models import CorrelationIdentity, DomainResult, StageResponse
from parsing import ResponseExtractor, scrape_labeled_list
from recovery import ErrorRecoveryPolicy
from stages import StageDefinition, default_stages

logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    async def chat(self, agent_id: str, message: str, identity: CorrelationIdentity) -> str:
        ...


def blend_confidence(values: Sequence[float | None]) -> float:
    """Mean over all executed stages; a missing confidence counts as 0."""
    if not values:
        return 0.0
    return sum(value or 0.0 for value in values) / len(values)


def _coerce_confidence(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return min(max(float(value), 0.0), 1.0)


def _as_list(value: Any) -> list[str]:
    """Normalize a record value to a list of non-empty strings."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []

    items = []
    for item in value:
        if item is None:
            continue
        text = (item if isinstance(item, str) else str(item)).strip()
        if text:
            items.append(text)
    return items


class OrchestrationPipeline:
    """Runs an ordered sequence of agent stages into one DomainResult."""

    def __init__(
        self,
        client: ChatClient,
        stages: Sequence[StageDefinition] | None = None,
        extractor: ResponseExtractor | None = None,
        field_defaults: Mapping[str, Mapping[str, list[str]]] | None = None,
        recovery: ErrorRecoveryPolicy | None = None,
        identity_factory: Callable[[str], CorrelationIdentity] | None = None,
        version: str | None = None,
    ):
        self._client = client
        self._stages = list(stages) if stages is not None else default_stages()
        self._extractor = extractor or ResponseExtractor()
        self._field_defaults = field_defaults if field_defaults is not None else settings.FIELD_DEFAULTS
        self._recovery = recovery or ErrorRecoveryPolicy()
        self._identity_factory = identity_factory or CorrelationIdentity.generate
        self._version = version or settings.RESULT_VERSION
        self._check_defaults(self._stages)

    def _check_defaults(self, stages: Sequence[StageDefinition]):
        """Every stage field needs a non-empty fallback list, or a plain-text answer can't be completed."""
        for stage in stages:
            defaults = self._field_defaults.get(stage.section_key)
            if not isinstance(defaults, Mapping):
                raise ValueError(f"no field defaults configured for section {stage.section_key!r}")
            missing = [field for field in stage.fields if not _as_list(defaults.get(field))]
            if missing:
                raise ValueError(
                    f"field defaults for section {stage.section_key!r} lack non-empty lists for: {', '.join(missing)}"
                )

    async def run(self, message: str, stages: Sequence[StageDefinition] | None = None) -> DomainResult:
        if stages is not None:
            stages = list(stages)
            self._check_defaults(stages)
        else:
            stages = self._stages
        if not stages:
            raise ValueError("pipeline needs at least one stage")

        start = time.monotonic()
        responses: list[StageResponse] = []
        request_input: Any = message

        try:
            for stage in stages:
                response = await self._run_stage(stage, stage.build_request(request_input))
                responses.append(response)
                request_input = response.record
        except AgentTransportError as e:
            logger.error(
                "Pipeline aborted at stage %d/%d (%s): %s",
                len(responses) + 1, len(stages), stages[len(responses)].name, e,
            )
            return self._recovery.recover()

        return self._assemble(responses, time.monotonic() - start)

    async def _run_stage(self, stage: StageDefinition, request: str) -> StageResponse:
        identity = self._identity_factory(stage.agent_id)
        raw = await self._client.chat(stage.agent_id, request, identity)

        parsed = self._extractor.extract(raw)
        record = dict(parsed) if isinstance(parsed, Mapping) else {"result": parsed}

        section = self._fill_section(stage, record, raw)
        record[stage.section_key] = section

        metadata = record.get("metadata")
        confidence = _coerce_confidence(record.get("confidence"))
        logger.info(
            "Stage %s completed: response=%d chars confidence=%s",
            stage.name, len(raw), confidence,
        )

        return StageResponse(
            agent_id=stage.agent_id,
            section_key=stage.section_key,
            record=record,
            section=section,
            confidence=confidence,
            metadata=metadata if isinstance(metadata, dict) else {},
        )

    def _fill_section(self, stage: StageDefinition, record: dict[str, Any], raw: str) -> dict[str, list[str]]:
        """Take each field from the record, else scrape it from raw text, else use defaults."""
        source = record.get(stage.section_key)
        if not isinstance(source, Mapping):
            source = record

        defaults = self._field_defaults.get(stage.section_key, {})
        section: dict[str, list[str]] = {}

        for field, label in stage.fields.items():
            values = _as_list(source.get(field))
            if not values:
                values = _as_list(scrape_labeled_list(raw, label))
                if values:
                    logger.debug("%s.%s missing from record, scraped %d lines", stage.section_key, field, len(values))
            if not values:
                values = _as_list(defaults.get(field))
                logger.debug("%s.%s missing from record and text, using defaults", stage.section_key, field)
            section[field] = values

        return section

    def _assemble(self, responses: list[StageResponse], elapsed: float) -> DomainResult:
        metadata: dict[str, str] = {}
        for response in responses:
            for key, value in response.metadata.items():
                if value is not None:
                    metadata.setdefault(key, str(value))
        metadata.setdefault("processing_time", f"{elapsed:.1f}s")
        metadata.setdefault("version", self._version)

        payload: dict[str, Any] = {response.section_key: response.section for response in responses}
        payload["confidence"] = blend_confidence([response.confidence for response in responses])
        payload["metadata"] = metadata

        return DomainResult.model_validate(payload)
