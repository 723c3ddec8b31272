from social_publisher.infrastructure.logging import (
    REDACTED,
    Timer,
    _add_correlation_id,
    _redact_secrets,
    correlation_id,
    set_correlation_id,
)


class TestRedactSecrets:
    def test_masks_top_level_token(self):
        event = _redact_secrets(None, "info", {"event": "call", "access_token": "EAAB-secret"})

        assert event == {"event": "call", "access_token": REDACTED}

    def test_masks_token_inside_params(self):
        event = _redact_secrets(
            None,
            "info",
            {"event": "call", "params": {"fields": "status_code", "access_token": "ig-token"}},
        )

        assert event["params"] == {"fields": "status_code", "access_token": REDACTED}

    def test_leaves_other_fields_untouched(self):
        event = {"event": "Account published", "account_id": "a1", "platform_post_id": "fb_1"}

        assert _redact_secrets(None, "info", dict(event)) == event


class TestCorrelationId:
    def test_added_when_set(self):
        token = correlation_id.set("")
        try:
            set_correlation_id("job-42")
            assert _add_correlation_id(None, "info", {})["correlation_id"] == "job-42"
        finally:
            correlation_id.reset(token)

    def test_omitted_when_unset(self):
        token = correlation_id.set("")
        try:
            assert "correlation_id" not in _add_correlation_id(None, "info", {})
        finally:
            correlation_id.reset(token)


class TestTimer:
    def test_measures_non_negative_duration(self):
        with Timer() as timer:
            sum(range(1000))

        assert timer.duration_ms >= 0
