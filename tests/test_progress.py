"""
Tests for the progress channel and event encoding
"""
import json
import pytest

from models import AuditEvent, AuditResult
from progress import ProgressChannel


async def collect(channel):
    return [event async for event in channel]


class TestProgressChannel:
    """Tests for ProgressChannel class"""

    async def test_events_are_delivered_in_order(self):
        channel = ProgressChannel()
        await channel.publish(AuditEvent.progress("one"))
        await channel.publish(AuditEvent.progress("two"))
        await channel.publish(AuditEvent.error("boom"))
        channel.close()

        events = await collect(channel)

        assert [e.to_dict() for e in events] == [
            {"progress": "one"},
            {"progress": "two"},
            {"error": "boom"},
        ]

    async def test_close_is_idempotent(self):
        channel = ProgressChannel()
        channel.close()
        channel.close()

        assert channel.closed is True
        assert await collect(channel) == []

    async def test_publish_after_close_raises(self):
        channel = ProgressChannel()
        channel.close()

        with pytest.raises(RuntimeError):
            await channel.publish(AuditEvent.progress("late"))


class TestAuditEvent:
    """Tests for event serialisation"""

    def test_progress_sse_encoding(self):
        event = AuditEvent.progress("Fetching HTML...")
        assert event.to_sse() == 'data: {"progress": "Fetching HTML..."}\n\n'
        assert event.is_terminal is False

    def test_results_event(self, sample_seo_signals):
        result = AuditResult(
            url="https://example.com",
            categories={"performance": 0.5, "seo": 1.0, "accessibility": None, "best-practices": 0.8},
            seo_data=sample_seo_signals,
            seo_score=100
        )
        event = AuditEvent.results(result)

        payload = json.loads(event.to_sse()[len("data: "):])

        assert event.is_terminal is True
        assert payload["results"]["url"] == "https://example.com"
        assert payload["results"]["seo_score"] == 100
        assert payload["results"]["categories"]["accessibility"] is None
        assert payload["results"]["seo_data"]["image_alt_tags"] == ["A widget", "Another widget"]

    def test_error_event_is_terminal(self):
        assert AuditEvent.error("nope").is_terminal is True


class TestAuditResult:
    """Tests for the audit result record"""

    def test_categories_are_read_only(self, sample_seo_signals):
        scores = {"performance": 0.5, "seo": 1.0, "accessibility": 0.9, "best-practices": 0.8}
        result = AuditResult(
            url="https://example.com",
            categories=scores,
            seo_data=sample_seo_signals,
            seo_score=100
        )

        with pytest.raises(TypeError):
            result.categories["seo"] = 0.0
        scores["seo"] = 0.0

        assert result.categories["seo"] == 1.0
        assert result.to_dict()["categories"]["seo"] == 1.0
