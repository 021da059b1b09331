import logging

import pytest

from iiifdims.logging_config import configure_logging


@pytest.mark.parametrize(
    ("env_level", "debug", "expected"),
    [
        (None, False, logging.INFO),
        (None, True, logging.DEBUG),
        ("warning", True, logging.WARNING),
        ("10", False, logging.DEBUG),
        ("bogus", False, logging.INFO),
    ],
)
def test_configure_logging_levels(
    monkeypatch: pytest.MonkeyPatch,
    env_level: str | None,
    debug: bool,
    expected: int,
) -> None:
    if env_level is None:
        monkeypatch.delenv("LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("LOG_LEVEL", env_level)

    configure_logging(debug=debug)

    app_logger = logging.getLogger("iiifdims")
    assert app_logger.level == expected
    assert app_logger.propagate is False
    assert len(app_logger.handlers) == 1
    assert logging.getLogger("iiifdims.access").level == max(expected, logging.INFO)
