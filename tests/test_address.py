"""Tests for address extraction."""

from unittest.mock import MagicMock

import pytest
from helpers import ALICE

from imbu_faucet.faucet.address import COMMAND_TOKENS, AddressExtractor, is_valid_address


def accept_all(candidate, address_type):
    return True


class TestIsValidAddress:
    """Tests against the real SS58 codec."""

    def test_generic_substrate_address(self):
        assert is_valid_address(ALICE, 42) is True

    def test_wrong_address_type(self):
        # Polkadot addresses use type 0.
        assert is_valid_address(ALICE, 0) is False

    def test_garbage(self):
        assert is_valid_address("not-an-address", 42) is False


class TestAddressExtractor:
    """Tests for AddressExtractor.extract."""

    def test_strips_command_token(self):
        extractor = AddressExtractor(42)

        assert extractor.extract(f"/request {ALICE}") == ALICE

    @pytest.mark.parametrize("token", COMMAND_TOKENS)
    def test_every_command_token(self, token):
        extractor = AddressExtractor(42, validator=accept_all)

        assert extractor.extract(f"{token}   abc  ") == "abc"

    def test_bare_address(self):
        """Slack passes only the text after the command."""
        assert AddressExtractor(42).extract(f"  {ALICE}\n") == ALICE

    def test_token_removed_anywhere(self):
        extractor = AddressExtractor(42, validator=accept_all)

        assert extractor.extract("ab/requestc") == "abc"

    @pytest.mark.parametrize("text", ["", None, "   ", "/request", "/request   "])
    def test_empty_input(self, text):
        validator = MagicMock(return_value=True)
        extractor = AddressExtractor(42, validator=validator)

        assert extractor.extract(text) is None
        validator.assert_not_called()

    def test_invalid_address(self):
        assert AddressExtractor(42).extract("/request hello") is None

    def test_wrong_network(self):
        assert AddressExtractor(0).extract(f"/request {ALICE}") is None

    def test_validator_errors_are_rejections(self):
        validator = MagicMock(side_effect=ValueError("bad checksum"))
        extractor = AddressExtractor(42, validator=validator)

        assert extractor.extract("something") is None
        validator.assert_called_once_with("something", 42)

    def test_address_type_property(self):
        assert AddressExtractor(7).address_type == 7
