"""Stage definitions for the idea -> analysis -> plan pipeline.

Labels are the headings agents use when they answer in prose instead of
JSON; they drive the line scraper for fields missing from a parsed record.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from config import settings

ANALYSIS_SECTION = "analysis_result"
PLAN_SECTION = "plan"

# field -> label prefix
ANALYSIS_FIELDS: dict[str, str] = {
    "features": "Features:",
    "processes": "Processes:",
    "agents": "Agents:",
    "technical": "Technical:",
}

PLAN_FIELDS: dict[str, str] = {
    "agents": "Agents:",
    "workflows": "Workflows:",
    "ui_blocks": "UI Blocks:",
    "integrations": "Integrations:",
}


@dataclass(frozen=True)
class StageDefinition:
    """One agent call in the pipeline.

    ``build_request`` receives the pipeline's initial message for the first
    stage and the previous stage's record for every later stage.
    """

    name: str
    agent_id: str
    section_key: str
    fields: Mapping[str, str]
    build_request: Callable[[Any], str]


def pass_through(message: str) -> str:
    return message


def serialize_record(record: Any) -> str:
    return json.dumps(record, ensure_ascii=False)


def default_stages(
    analysis_agent_id: str | None = None,
    plan_agent_id: str | None = None,
) -> list[StageDefinition]:
    return [
        StageDefinition(
            name="analysis",
            agent_id=analysis_agent_id or settings.ANALYSIS_AGENT_ID,
            section_key=ANALYSIS_SECTION,
            fields=ANALYSIS_FIELDS,
            build_request=pass_through,
        ),
        StageDefinition(
            name="plan",
            agent_id=plan_agent_id or settings.PLAN_AGENT_ID,
            section_key=PLAN_SECTION,
            fields=PLAN_FIELDS,
            build_request=serialize_record,
        ),
    ]
