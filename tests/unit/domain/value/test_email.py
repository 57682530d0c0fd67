"""Unit tests for the Email value object."""

import pytest
from pydantic import ValidationError

from steno.domain.value import Email


class TestEmail:
    """Tests for Email normalization and validation."""

    def test_trims_and_lower_cases(self):
        assert Email("  Jane.Doe@Example.COM ").root == "jane.doe@example.com"

    def test_serializes_as_plain_string(self):
        assert Email("jane@example.com").model_dump() == "jane@example.com"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "jane",
            "jane@",
            "@example.com",
            "jane@@example.com",
            "jane doe@example.com",
            "jane@example..com",
        ],
    )
    def test_invalid_addresses_are_rejected(self, value):
        with pytest.raises(ValidationError):
            Email(value)
