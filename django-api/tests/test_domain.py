"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from decimal import Decimal
from itertools import product

import pytest

from event_editor.domain import ChangeLogEntry, EventId, LifecycleState, Money, PricedItem, Slots
from event_editor.domain.errors import ErrorCode, InvalidPriceError, MissingRequiredFieldsError
from event_editor.domain.models import invalid_prices


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(Decimal("0")).amount == 0

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-1"))

    def test_money_str_drops_integral_decimals(self):
        """Whole prices render without cents."""
        assert str(Money(Decimal("100.0"))) == "$100"

    def test_money_str_keeps_cents(self):
        assert str(Money(Decimal("99.5"))) == "$99.50"

    def test_coerce_unset_values(self):
        """Unset or non-numeric prices coerce to None."""
        assert Money.coerce(None) is None
        assert Money.coerce("") is None
        assert Money.coerce("abc") is None
        assert Money.coerce(True) is None

    def test_coerce_numbers(self):
        assert Money.coerce(90) == Money(Decimal("90"))
        assert Money.coerce(90.0) == Money.coerce(90)

    @pytest.mark.parametrize("amount", ["NaN", "Infinity"])
    def test_money_rejects_non_finite_amount(self, amount):
        with pytest.raises(ValueError):
            Money(Decimal(amount))

    def test_coerce_negative_is_unset(self):
        assert Money.coerce(-5) is None


class TestSlots:
    """Tests for Slots value object."""

    def test_slots_rejects_negative_capacity(self):
        with pytest.raises(ValueError):
            Slots(filled=0, capacity=-1)

    def test_from_record_defaults(self):
        """Missing or malformed slots mean no registrations."""
        assert Slots.from_record(None) == Slots()
        assert not Slots.from_record({"capacity": 10}).has_registrations

    def test_filled_slots_mean_registrations(self):
        assert Slots.from_record({"filled": 2, "capacity": 10}).has_registrations


class TestEventId:
    """Tests for EventId value object."""

    def test_generate_uses_timestamp(self):
        assert EventId.generate(1700000000000).value == "event-1700000000000"

    def test_from_string_strips_whitespace(self):
        assert EventId.from_string(" event-1 ").value == "event-1"

    def test_from_string_rejects_key_separator(self):
        """Ids scope storage keys and may not contain ':'."""
        with pytest.raises(ValueError):
            EventId.from_string("event:1")

    def test_from_string_rejects_empty(self):
        with pytest.raises(ValueError):
            EventId.from_string("")


class TestPricedItem:
    """Tests for PricedItem parsing."""

    def test_reads_tier_prices(self):
        item = PricedItem.from_record(
            {"name": "U12", "regular": {"price": 100}, "earlyBird": {"price": 80, "deadline": "2026-03-01"}}
        )
        assert item.price("regular") == Money.coerce(100)
        assert item.price("earlyBird") == Money.coerce(80)

    def test_missing_tier_is_unset(self):
        assert PricedItem.from_record({"name": "U12"}).price("earlyBird") is None

    def test_invalid_prices_names_offending_tiers(self):
        divisions = [
            {"name": "U12", "regular": {"price": 100}, "earlyBird": {"price": -1}},
            {"name": "U14", "regular": {"price": "free"}},
            {"name": "U16", "regular": {"price": ""}},
        ]
        assert invalid_prices(divisions) == ["U12 Early Bird Price", "U14 Regular Price"]

    def test_invalid_prices_ignores_non_collections(self):
        assert invalid_prices(None) == []
        assert invalid_prices("U12") == []


class TestChangeLogEntry:
    """Tests for ChangeLogEntry persistence form."""

    def test_from_dict_reads_persisted_form(self):
        entry = ChangeLogEntry("name", "Event Title", "Old", "New", '"Old"', '"New"')
        assert ChangeLogEntry.from_dict(entry.to_dict()) == entry

    def test_from_dict_rejects_missing_keys(self):
        with pytest.raises(KeyError):
            ChangeLogEntry.from_dict({"field": "name"})

    def test_from_dict_rejects_non_string_values(self):
        data = ChangeLogEntry("name", "Event Title", "Old", "New", '"Old"', '"New"').to_dict()
        data["rawNew"] = 5
        with pytest.raises(TypeError):
            ChangeLogEntry.from_dict(data)


class TestLifecycleState:
    """Tests for derived lifecycle flags and guards."""

    def test_draft_without_registrations_can_only_be_deleted(self):
        state = LifecycleState.derive({"status": "draft"}, was_published=False, pending_changes=0)
        assert (state.can_unpublish, state.can_cancel, state.can_delete) == (False, False, True)

    def test_published_without_registrations(self):
        state = LifecycleState.derive({"status": "published"}, was_published=False, pending_changes=0)
        assert (state.can_unpublish, state.can_cancel, state.can_delete) == (True, True, False)

    def test_cancelled_draft_remembers_publication(self):
        state = LifecycleState.derive(
            {"status": "draft", "cancelledAt": "2026-03-01T09:30:00+00:00"}, was_published=False, pending_changes=0
        )
        assert state.is_cancelled
        assert not state.can_cancel
        assert state.can_delete

    def test_unpublished_changes_need_publication(self):
        assert not LifecycleState.derive({"status": "draft"}, False, 3).has_unpublished_changes
        assert LifecycleState.derive({"status": "published"}, False, 3).has_unpublished_changes
        assert not LifecycleState.derive({"status": "published"}, False, 0).has_unpublished_changes

    @pytest.mark.parametrize(
        "is_published,is_cancelled", list(product([True, False], repeat=2))
    )
    def test_registrations_block_delete_and_unpublish(self, is_published, is_cancelled):
        """With registrations, neither delete nor unpublish is ever allowed."""
        state = LifecycleState(
            is_published=is_published,
            is_cancelled=is_cancelled,
            has_registrations=True,
            has_unpublished_changes=False,
        )
        assert not state.can_delete
        assert not state.can_unpublish


class TestErrors:
    """Tests for domain errors."""

    def test_missing_fields_error_lists_fields(self):
        error = MissingRequiredFieldsError(["description", "location"])
        assert error.code is ErrorCode.MISSING_REQUIRED_FIELDS
        assert error.missing_fields == ["description", "location"]
        assert str(error) == "MISSING_REQUIRED_FIELDS: Missing required fields: description, location"

    def test_invalid_price_error_lists_prices(self):
        error = InvalidPriceError(["U12 Regular Price"])
        assert error.code is ErrorCode.INVALID_PRICE
        assert error.invalid_prices == ["U12 Regular Price"]
        assert error.message == "Invalid prices: U12 Regular Price"
