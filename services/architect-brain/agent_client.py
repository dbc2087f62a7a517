"""HTTP client for the hosted agent inference endpoint.

Uses an httpx AsyncClient with configurable timeouts. Calls are not retried:
any failure surfaces as an AgentTransportError and the pipeline serves
recovery content instead.
"""

import json
import logging
from typing import Any

import httpx

from config import settings
from models import CorrelationIdentity

logger = logging.getLogger(__name__)


class AgentTransportError(Exception):
    """An agent call did not complete successfully."""


class AgentServiceUnavailable(AgentTransportError):
    """Agent endpoint unreachable (connection error, timeout)."""


class AgentServiceError(AgentTransportError):
    """Agent endpoint answered with a non-success status or an unusable body."""


class AgentClient:
    """Async HTTP client for one-shot agent chat calls."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: int | None = None,
        connect_timeout: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_url = api_url or settings.AGENT_API_URL
        api_key = api_key if api_key is not None else settings.AGENT_API_KEY

        read_timeout = timeout if timeout is not None else settings.AGENT_TIMEOUT_SECONDS
        conn_timeout = connect_timeout if connect_timeout is not None else settings.AGENT_CONNECT_TIMEOUT

        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json", "x-api-key": api_key},
            timeout=httpx.Timeout(
                connect=float(conn_timeout),
                read=float(read_timeout),
                write=30.0,
                pool=30.0,
            ),
            transport=transport,
        )

    async def aclose(self):
        await self._client.aclose()

    async def chat(self, agent_id: str, message: str, identity: CorrelationIdentity) -> str:
        """Send ``message`` to ``agent_id`` and return the agent's text payload.

        Raises AgentServiceUnavailable or AgentServiceError.
        """
        payload = {
            "user_id": identity.user_id,
            "agent_id": agent_id,
            "session_id": identity.session_id,
            "message": message,
        }
        logger.info("Calling agent %s: message=%d chars", agent_id, len(message))

        data = await self._send_chat(agent_id, payload)
        return payload_text(data)

    async def _send_chat(self, agent_id: str, payload: dict) -> dict[str, Any]:
        try:
            resp = await self._client.post(self._api_url, json=payload)
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            logger.warning("Agent %s unreachable: %s", agent_id, e)
            raise AgentServiceUnavailable(f"Cannot reach agent {agent_id}: {e}") from e
        except httpx.HTTPError as e:
            logger.error("Agent %s HTTP error: %s", agent_id, e)
            raise AgentServiceError(f"Agent HTTP error: {e}") from e

        if not resp.is_success:
            logger.error("Agent %s returned HTTP %d", agent_id, resp.status_code)
            raise AgentServiceError(f"Agent {agent_id} call failed: HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Agent %s returned a non-JSON body", agent_id)
            raise AgentServiceError(f"Agent {agent_id} returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise AgentServiceError(f"Agent {agent_id} returned an unexpected envelope")
        return data


def payload_text(data: dict[str, Any]) -> str:
    """Pick the text payload out of a response envelope.

    The usual envelope carries text under ``response``; some agents answer
    with a structured ``result`` object, which is re-serialized as JSON.
    """
    value = data["response"] if "response" in data else data.get("result")
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)
