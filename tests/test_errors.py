"""Tests for error types."""

from pos_pricing.errors import (
    CatalogMismatchError,
    CommandRejectedError,
    ConfigurationError,
    InvariantViolationError,
    PricingError,
)


class TestPricingError:
    """Tests for the PricingError base class."""

    def test_message_only(self) -> None:
        """Error with message only."""
        err = PricingError("something went wrong")
        assert err.message == "something went wrong"
        assert err.cause is None
        assert str(err) == "something went wrong"

    def test_with_cause(self) -> None:
        """Error with underlying cause."""
        cause = ValueError("underlying issue")
        err = PricingError("wrapper", cause)
        assert err.cause is cause
        assert str(err) == "wrapper: underlying issue"


class TestSubclasses:
    """Tests for the specific error types."""

    def test_invariant_prefix(self) -> None:
        """Invariant violations prefix their message."""
        err = InvariantViolationError("custom item discounted")
        assert str(err) == "invariant violated: custom item discounted"
        assert isinstance(err, PricingError)

    def test_catalog_mismatch_is_invariant(self) -> None:
        """Catalog drift is an invariant violation."""
        assert isinstance(CatalogMismatchError("x"), InvariantViolationError)

    def test_command_rejected(self) -> None:
        """Rejections keep the message verbatim."""
        assert str(CommandRejectedError("Sale is empty")) == "Sale is empty"

    def test_configuration_error(self) -> None:
        """Configuration errors name the variable and cause."""
        err = ConfigurationError("POS_LOG_LEVEL", ValueError("bad"))
        assert err.name == "POS_LOG_LEVEL"
        assert str(err) == "invalid configuration value for POS_LOG_LEVEL: bad"
