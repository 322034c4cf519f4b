"""Tests for settings helpers."""
import pytest

from settings import Settings, _flag


@pytest.mark.parametrize("value,expected", [("true", True), ("1", True), (" Yes ", True),
                                            ("false", False), ("0", False), ("", False)])
def test_flag(monkeypatch, value, expected):
    monkeypatch.setenv("STALE_PREVIEW_GUARD", value)
    assert _flag("STALE_PREVIEW_GUARD", "false") is expected


def test_flag_default(monkeypatch):
    monkeypatch.delenv("STALE_PREVIEW_GUARD", raising=False)
    assert _flag("STALE_PREVIEW_GUARD", "false") is False


def test_overrides():
    s = Settings(backend_url="http://cut.internal:4000", stale_preview_guard=True)
    assert s.backend_url == "http://cut.internal:4000"
    assert s.stale_preview_guard is True
    assert s.initial_scale > 0
