"""Settings — env overrides and fallback when bounds contradict each other."""

from core.config import QRCodeLimits, load_limits

_ENV = (
    "QR_TEXT_MAX_LENGTH", "QR_SIZE_MIN", "QR_SIZE_MAX", "QR_DEFAULT_SIZE",
    "QR_DEFAULT_ERROR_CORRECTION", "QR_HISTORY_DEFAULT_LIMIT", "QR_HISTORY_MAX_LIMIT",
)


def _clean(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_env(monkeypatch):
    _clean(monkeypatch)
    assert load_limits() == QRCodeLimits()


def test_consistent_overrides_are_used(monkeypatch):
    _clean(monkeypatch)
    monkeypatch.setenv("QR_SIZE_MIN", "100")
    monkeypatch.setenv("QR_SIZE_MAX", "400")
    monkeypatch.setenv("QR_DEFAULT_SIZE", "300")
    monkeypatch.setenv("QR_DEFAULT_ERROR_CORRECTION", "h")
    monkeypatch.setenv("QR_HISTORY_DEFAULT_LIMIT", "10")
    monkeypatch.setenv("QR_HISTORY_MAX_LIMIT", "50")
    limits = load_limits()
    assert (limits.size_min, limits.default_size, limits.size_max) == (100, 300, 400)
    assert limits.default_error_correction == "H"
    assert (limits.default_page_limit, limits.max_page_limit) == (10, 50)


def test_default_size_outside_bounds_falls_back(monkeypatch):
    _clean(monkeypatch)
    monkeypatch.setenv("QR_DEFAULT_SIZE", "5000")
    limits = load_limits()
    assert (limits.size_min, limits.default_size, limits.size_max) == (50, 200, 1000)


def test_inverted_size_bounds_fall_back(monkeypatch):
    _clean(monkeypatch)
    monkeypatch.setenv("QR_SIZE_MIN", "900")
    monkeypatch.setenv("QR_SIZE_MAX", "100")
    limits = load_limits()
    assert (limits.size_min, limits.size_max) == (50, 1000)


def test_page_limits_and_text_length_fall_back(monkeypatch):
    _clean(monkeypatch)
    monkeypatch.setenv("QR_HISTORY_DEFAULT_LIMIT", "500")
    monkeypatch.setenv("QR_HISTORY_MAX_LIMIT", "100")
    monkeypatch.setenv("QR_TEXT_MAX_LENGTH", "0")
    monkeypatch.setenv("QR_DEFAULT_ERROR_CORRECTION", "Z")
    limits = load_limits()
    assert (limits.default_page_limit, limits.max_page_limit) == (20, 100)
    assert limits.text_max_length == 1000
    assert limits.default_error_correction == "M"
