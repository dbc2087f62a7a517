"""Tests for result models and correlation identities."""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).parent.parent))

from models import AnalysisResult, CorrelationIdentity
from recovery import ErrorRecoveryPolicy


class TestCorrelationIdentity:
    def test_agent_scoped_session(self):
        identity = CorrelationIdentity.generate("68e05e51f21978807e7e9829")
        assert identity.session_id.startswith("68e05e51f21978807e7e9829-")
        assert len(identity.session_id.rsplit("-", 1)[1]) == 9
        assert identity.user_id.startswith("user")
        assert identity.user_id.endswith("@test.com")

    def test_generic_session(self):
        assert CorrelationIdentity.generate().session_id.startswith("session-")

    def test_never_reused(self):
        identities = {CorrelationIdentity.generate("agent") for _ in range(50)}
        assert len(identities) == 50


class TestDomainResult:
    def test_immutable(self):
        result = ErrorRecoveryPolicy().recover()
        with pytest.raises(ValidationError):
            result.confidence = 0.1

    def test_empty_section_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisResult(features=[], processes=["a"], agents=["b"], technical=["c"])

    def test_summary_text(self):
        summary = ErrorRecoveryPolicy().recover().summary_text()

        assert summary.startswith("Fallback result")
        assert "Confidence: 78%" in summary
        assert "Processed in 4s" in summary
        assert "Features: Feature detection, Process mapping" in summary
        assert "Integrations: Agent platform" in summary

    def test_summary_prefers_generation_time(self):
        result = ErrorRecoveryPolicy(metadata={"processing_time": "2s", "generation_time": "3s", "version": "1.0"}).recover()
        assert "Processed in 3s" in result.summary_text()
