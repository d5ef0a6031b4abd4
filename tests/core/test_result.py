"""Tests for delayobject.result module."""

from datetime import UTC, datetime, timedelta

import pytest

from delayobject.errors import NotReadyError
from delayobject.result import Err, Ok

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


class TestOk:
    """Test Ok result type."""

    def test_flags(self):
        result = Ok(42)
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap_variants_return_value(self):
        result = Ok("payload")
        assert result.unwrap() == "payload"
        assert result.unwrap_or("fallback") == "payload"
        assert result.unwrap_or_else(lambda e: "fallback") == "payload"

    def test_map(self):
        assert Ok(2).map(lambda x: x * 10) == Ok(20)

    def test_to_dict(self):
        assert Ok(1).to_dict() == {"ok": True, "value": 1}

    def test_repr(self):
        assert repr(Ok("x")) == "Ok('x')"

    def test_frozen(self):
        result = Ok(1)
        with pytest.raises(AttributeError):
            result.value = 2


class TestErr:
    """Test Err result type."""

    @pytest.fixture
    def not_ready(self):
        return NotReadyError(NOW + timedelta(seconds=5), now=NOW)

    def test_flags(self, not_ready):
        result = Err(not_ready)
        assert result.is_ok() is False
        assert result.is_err() is True

    def test_unwrap_raises_carried_error(self, not_ready):
        with pytest.raises(NotReadyError) as exc_info:
            Err(not_ready).unwrap()
        assert exc_info.value is not_ready

    def test_unwrap_or(self, not_ready):
        assert Err(not_ready).unwrap_or("fallback") == "fallback"

    def test_unwrap_or_else_receives_error(self, not_ready):
        result = Err(not_ready).unwrap_or_else(lambda e: e.ready_time)
        assert result == NOW + timedelta(seconds=5)

    def test_map_skips_function(self, not_ready):
        calls = []
        mapped = Err(not_ready).map(lambda x: calls.append(x))
        assert mapped.is_err()
        assert mapped.error is not_ready
        assert calls == []

    def test_to_dict_delay_error(self, not_ready):
        d = Err(not_ready).to_dict()
        assert d["ok"] is False
        assert d["error"]["error_type"] == "NotReadyError"
        assert d["error"]["category"] == "TIMING"
        assert d["error"]["retry_after"] == 5

    def test_to_dict_plain_exception(self):
        d = Err(ValueError("bad")).to_dict()
        assert d == {"ok": False, "error": {"error_type": "ValueError", "message": "bad"}}
