"""Tests for domain value objects (EmailAddress)."""

import pytest

from app.domain.value_objects.core import EmailAddress


class TestEmailAddress:
    """EmailAddress: stripped, lower-cased, loosely validated."""

    def test_normalizes_case_and_whitespace(self) -> None:
        assert EmailAddress("  A@X.Com ").value == "a@x.com"
        assert str(EmailAddress("Bob@Example.org")) == "bob@example.org"

    def test_equal_after_normalization(self) -> None:
        assert EmailAddress("A@x.com") == EmailAddress("a@X.COM")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            EmailAddress("   ")

    @pytest.mark.parametrize("bad", ["no-at-sign", "a@b", "a b@x.com", "a@@x.com"])
    def test_invalid_format_rejected(self, bad: str) -> None:
        with pytest.raises(ValueError, match="Invalid email"):
            EmailAddress(bad)

    def test_too_long_rejected(self) -> None:
        with pytest.raises(ValueError, match="254"):
            EmailAddress("a" * 250 + "@x.com")
