"""
Tests for logging setup, canonical JSON and the exception hierarchy
"""
import json
import logging
import sys
from dataclasses import dataclass
from datetime import date

import pytest

from caelex.canon import canonical_json, content_hash, content_hash_short
from caelex.exceptions import CaelexError, ProfileValidationError, RulePackNotFoundError
from caelex.logging_config import JSONFormatter, configure_logging
from caelex.models import RiskLevel


def make_record(msg="Assessed %s", args=("pack",), **extra):
    record = logging.LogRecord(
        name="caelex.engine",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def caelex_logger():
    logger = logging.getLogger("caelex")
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if getattr(handler, "_caelex_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(level)


# =============================================================================
# Logging
# =============================================================================

class TestJSONFormatter:
    """One JSON object per record."""

    def test_base_fields(self):
        """Level, logger and the formatted message are present."""
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "caelex.engine"
        assert data["message"] == "Assessed pack"
        assert "timestamp" in data

    def test_known_extras_copied(self):
        """Known extra attributes are included; others are not."""
        record = make_record(pack_id="UK-SIA-2018", overall_score=72, unrelated="x")
        data = json.loads(JSONFormatter().format(record))
        assert data["pack_id"] == "UK-SIA-2018"
        assert data["overall_score"] == 72
        assert "unrelated" not in data

    def test_exception_included(self):
        """exc_info is rendered into the exception field."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestConfigureLogging:
    """configure_logging handler management."""

    def test_no_duplicate_handlers(self, caelex_logger):
        """Repeated calls keep a single package handler."""
        configure_logging(level="DEBUG", fmt="json")
        configure_logging(level="WARNING", fmt="text")
        handlers = [h for h in caelex_logger.handlers if getattr(h, "_caelex_handler", False)]
        assert len(handlers) == 1
        assert caelex_logger.level == logging.WARNING
        assert not isinstance(handlers[0].formatter, JSONFormatter)

    def test_json_format(self, caelex_logger):
        """The json format installs JSONFormatter."""
        logger = configure_logging(level="info", fmt="JSON")
        assert logger is caelex_logger
        handler = [h for h in logger.handlers if getattr(h, "_caelex_handler", False)][0]
        assert isinstance(handler.formatter, JSONFormatter)
        assert logger.level == logging.INFO


# =============================================================================
# Canonical JSON
# =============================================================================

@dataclass
class Sample:
    name: str
    level: RiskLevel


class TestCanon:
    """Deterministic serialization and hashing."""

    def test_sorted_compact(self):
        """Keys sorted, no whitespace."""
        assert canonical_json({"b": 1, "a": [2, 3]}) == '{"a":[2,3],"b":1}'

    def test_special_types(self):
        """Dates, enums, dataclasses and sets serialize."""
        text = canonical_json({
            "date": date(2025, 1, 1),
            "sample": Sample("x", RiskLevel.HIGH),
            "tags": {"b", "a"},
        })
        assert json.loads(text) == {
            "date": "2025-01-01",
            "sample": {"level": "high", "name": "x"},
            "tags": ["a", "b"],
        }

    def test_unserializable(self):
        """Unknown types raise TypeError."""
        with pytest.raises(TypeError):
            canonical_json({"x": object()})

    def test_hash_ignores_key_order(self):
        """Equal content hashes equally."""
        assert content_hash({"a": 1, "b": 2}) == content_hash({"b": 2, "a": 1})
        assert len(content_hash({})) == 64
        assert content_hash_short({"a": 1}) == content_hash({"a": 1})[:12]


# =============================================================================
# Exceptions
# =============================================================================

class TestExceptions:
    """CaelexError formatting."""

    def test_str(self):
        """Code, message and pack."""
        error = RulePackNotFoundError(message="Rule pack not found: X", pack_id="X")
        assert str(error) == "[CX_PACK_NOT_FOUND] Rule pack not found: X (pack: X)"

    def test_to_dict_omits_empty(self):
        """Details and pack_id only when set."""
        assert CaelexError(message="oops").to_dict() == {
            "code": "CX_INTERNAL_ERROR",
            "message": "oops",
        }
        error = ProfileValidationError(message="bad", details={"errors": []}, pack_id="P")
        assert error.to_dict() == {
            "code": "CX_PROFILE_INVALID",
            "message": "bad",
            "details": {"errors": []},
            "pack_id": "P",
        }

    def test_is_exception(self):
        """Errors can be raised and caught as CaelexError."""
        with pytest.raises(CaelexError):
            raise ProfileValidationError(message="bad")
