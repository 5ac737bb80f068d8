"""
Unit Tests for Core Utilities.
"""

import pytest

from wedding_tma.backend.core.exceptions import InvalidIdentifierError, ValidationError
from wedding_tma.backend.core.utils import parse_identifier, utc_now


class TestParseIdentifier:
    def test_returns_canonical_form(self):
        raw = "6F9619FF-8B86-D011-B42D-00C04FC964FF"
        assert parse_identifier(raw, "photo") == "6f9619ff-8b86-d011-b42d-00c04fc964ff"

    @pytest.mark.parametrize("raw", ["", "abc", "123", "6f9619ff-8b86-d011-b42d"])
    def test_rejects_malformed_values(self, raw):
        with pytest.raises(InvalidIdentifierError, match="Invalid photo ID"):
            parse_identifier(raw, "photo")

    def test_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_identifier("nope", "gallery")
        assert exc_info.value.code == "VAL_INVALID_ID"


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None
