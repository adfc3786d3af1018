"""Tests for delivery types."""

import pytest

from notification_dispatch import (
    Channel,
    ChannelOutcome,
    DeliveryStatus,
    DispatchResult,
    RenderedContent,
)


def test_channel_outcome_sent():
    """Test creating a successful outcome."""
    outcome = ChannelOutcome.sent(Channel.EMAIL, "delivery-1")

    assert outcome.channel == Channel.EMAIL
    assert outcome.status == DeliveryStatus.SENT
    assert outcome.delivery_id == "delivery-1"
    assert outcome.reason is None
    assert outcome.delivered


def test_channel_outcome_failed():
    """Test creating a failed outcome."""
    outcome = ChannelOutcome.failed(Channel.SMS, "provider not configured", "delivery-2")

    assert outcome.status == DeliveryStatus.FAILED
    assert outcome.reason == "provider not configured"
    assert outcome.delivery_id == "delivery-2"
    assert not outcome.delivered


def test_channel_enum_values():
    """Test channel enum values and case-insensitive lookup."""
    assert Channel.APPLE_PUSH.value == "APPLE_PUSH"
    assert Channel.GOOGLE_PUSH.value == "GOOGLE_PUSH"
    assert Channel("email") is Channel.EMAIL
    assert Channel("Sms") is Channel.SMS

    with pytest.raises(ValueError):
        Channel("PAGER")


def test_channel_multi_device():
    assert Channel.APPLE_PUSH.is_multi_device
    assert Channel.GOOGLE_PUSH.is_multi_device
    assert not Channel.EMAIL.is_multi_device
    assert not Channel.SMS.is_multi_device


def test_rendered_content_to_dict_omits_absent_fields():
    assert RenderedContent(body="Hi").to_dict() == {"body": "Hi"}
    assert RenderedContent(body="Hi", subject="S", title="T").to_dict() == {
        "body": "Hi",
        "subject": "S",
        "title": "T",
    }


class TestDispatchResult:
    def test_success_when_any_channel_delivered(self):
        result = DispatchResult(
            outcomes=(
                ChannelOutcome.sent(Channel.EMAIL, "d-1"),
                ChannelOutcome.failed(Channel.SMS, "provider not configured", "d-2"),
            )
        )

        assert result.success
        assert result.delivery_ids == ["d-1"]
        assert [f.channel for f in result.failures] == [Channel.SMS]

    def test_all_failed_is_not_success(self):
        result = DispatchResult(
            outcomes=(ChannelOutcome.failed(Channel.EMAIL, "no recipient configured", "d-1"),)
        )

        assert not result.success
        assert result.delivery_ids == []

    def test_empty_result(self):
        result = DispatchResult()

        assert not result.success
        assert result.to_dict() == {"success": False, "notificationIds": []}

    def test_to_dict_reports_errors_per_channel(self):
        result = DispatchResult(
            outcomes=(
                ChannelOutcome.sent(Channel.EMAIL, "d-1"),
                ChannelOutcome.failed(Channel.SMS, "provider not configured", "d-2"),
            )
        )

        assert result.to_dict() == {
            "success": True,
            "notificationIds": ["d-1"],
            "errors": [{"channel": "SMS", "error": "provider not configured"}],
        }
