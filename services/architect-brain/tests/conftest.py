"""Shared test fixtures for architect brain tests."""

import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path so we can import the modules
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeChatClient:
    """Stands in for AgentClient: replays canned texts and records every call."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    async def chat(self, agent_id, message, identity):
        self.calls.append({"agent_id": agent_id, "message": message, "identity": identity})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_chat_client():
    return FakeChatClient


@pytest.fixture
def analysis_record() -> dict:
    return {
        "analysis_result": {
            "features": ["Product catalog", "Online ordering", "Bakery profiles", "Reviews"],
            "processes": ["Order intake", "Inventory sync", "Delivery scheduling", "Payouts"],
            "agents": ["Catalog Agent", "Order Agent", "Support Agent"],
            "technical": ["PostgreSQL", "REST API", "Stripe payments", "CDN for images"],
        },
        "confidence": 0.85,
        "metadata": {"processing_time": "2s", "version": "1.0"},
    }


@pytest.fixture
def plan_record() -> dict:
    return {
        "plan": {
            "agents": ["Storefront Agent", "Checkout Agent", "Notification Agent", "Analytics Agent"],
            "workflows": ["Bakery onboarding", "Order checkout", "Pickup reminders", "Weekly reports"],
            "ui_blocks": ["Bakery grid", "Cart drawer", "Order tracker", "Owner dashboard"],
            "integrations": ["Stripe", "Twilio", "Google Maps", "Mailgun"],
        },
        "confidence": 0.82,
        "metadata": {"generation_time": "3s", "version": "1.0"},
    }


@pytest.fixture
def mock_analysis_response(analysis_record: dict) -> str:
    """Agent answer with the JSON wrapped in a markdown fence and prose."""
    return "Here is my analysis of your idea:\n\n```json\n" + json.dumps(analysis_record, indent=2) + "\n```\n\nLet me know if you need more."


@pytest.fixture
def mock_plan_response(plan_record: dict) -> str:
    return json.dumps(plan_record)


@pytest.fixture
def mock_prose_plan_response() -> str:
    """Agent answer with no JSON at all, only labelled bullet lists."""
    return (
        "Implementation plan\n"
        "\n"
        "Agents:\n"
        "- Storefront Agent\n"
        "- Checkout Agent\n"
        "\n"
        "Workflows:\n"
        "• Bakery onboarding\n"
        "• Order checkout\n"
        "• Pickup reminders\n"
        "• Weekly reports\n"
        "• Refunds\n"
    )
