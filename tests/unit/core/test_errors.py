"""Unit tests for transfer exceptions."""

from vaultunit.core.errors import (
    MissingSourceError,
    UpgradeRequiredError,
    VaultUnitError,
)


class TestVaultUnitError:
    """Tests for VaultUnitError formatting."""

    def test_message_only(self) -> None:
        """Without details the message is shown as-is."""
        assert str(VaultUnitError("Something broke")) == "Something broke"

    def test_details_appended(self) -> None:
        """Details are appended in order."""
        error = UpgradeRequiredError("Upgrade vault", expected=1, actual=2)

        assert str(error) == "Upgrade vault (expected=1, actual=2)"
        assert error.details == {"expected": 1, "actual": 2}

    def test_hierarchy(self) -> None:
        """Every error derives from VaultUnitError."""
        assert isinstance(MissingSourceError("x"), VaultUnitError)
