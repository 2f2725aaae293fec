"""Field-level diffing of an event record into a change log.

Most fields are compared as opaque values. Fields registered with a
dedicated ``DiffStrategy`` (the priced division collection by default)
are diffed element by element instead.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

from event_editor.domain.change_log import ChangeLog
from event_editor.domain.formatting import NOT_SET, ValueFormatter, format_price
from event_editor.domain.models import (
    DIVISIONS_FIELD,
    FIELD_DISPLAY_NAMES,
    PRICE_TIERS,
    ChangeLogEntry,
    EventRecord,
    PricedItem,
    display_name_for,
    priced_items,
)
from event_editor.domain.value_objects import Money


def serialize(value: Any) -> str:
    """Full structural serialization used for equality decisions only."""
    return json.dumps(value, sort_keys=True, default=str, separators=(",", ":"))


class DiffStrategy(ABC):
    """Writes the change entries for one field into a change log."""

    @abstractmethod
    def diff(self, log: ChangeLog, field_key: str, previous: Any, current: Any) -> None:
        ...


class ScalarDiffStrategy(DiffStrategy):
    """Whole-value comparison producing a single entry keyed by field name."""

    def __init__(self, formatter: ValueFormatter) -> None:
        self._formatter = formatter

    def diff(self, log: ChangeLog, field_key: str, previous: Any, current: Any) -> None:
        raw_old = serialize(previous)
        raw_new = serialize(current)
        if raw_old == raw_new:
            return
        log.upsert(
            ChangeLogEntry(
                field=field_key,
                display_name=display_name_for(field_key),
                old_value=self._formatter.format(field_key, previous),
                new_value=self._formatter.format(field_key, current),
                raw_old=raw_old,
                raw_new=raw_new,
            )
        )


def _price_raw(price: Money | None) -> str:
    return serialize(float(price.amount) if price is not None else None)


def _prices_raw(item: PricedItem) -> str:
    return serialize(
        {tier: (float(price.amount) if price is not None else None) for tier, price in item.prices.items()}
    )


def _restore_item(name: str, raw: str) -> PricedItem | None:
    try:
        prices = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(prices, dict):
        return None
    return PricedItem(name=name, prices={tier: Money.coerce(prices.get(tier)) for tier, _ in PRICE_TIERS})


class PricedCollectionDiffStrategy(DiffStrategy):
    """Element-aware diff of a name-keyed collection of priced items.

    Emits ``<item>_<tier>`` entries for price changes and ``<item>_added`` /
    ``<item>_removed`` entries for membership changes. A rename looks like a
    removal plus an addition. Adding then removing an item (or the reverse)
    within one session leaves no entries behind for it.
    """

    def diff(self, log: ChangeLog, field_key: str, previous: Any, current: Any) -> None:
        before = priced_items(previous)
        after = priced_items(current)

        for name, item in after.items():
            baseline = before.get(name)
            if baseline is None:
                removed = log.get(f"{name}_removed")
                if removed is not None:
                    baseline = _restore_item(name, removed.raw_old)
            for tier, label in PRICE_TIERS:
                old_price = baseline.price(tier) if baseline is not None else None
                new_price = item.price(tier)
                if baseline is None or old_price != new_price:
                    log.upsert(
                        ChangeLogEntry(
                            field=f"{name}_{tier}",
                            display_name=f"{name} {label}",
                            old_value=format_price(old_price),
                            new_value=format_price(new_price),
                            raw_old=_price_raw(old_price),
                            raw_new=_price_raw(new_price),
                        )
                    )
            if name in before:
                log.merge_existing(f"{name}_added", self._added_label(item), _prices_raw(item))

        for name, item in before.items():
            if name in after:
                continue
            for tier, _label in PRICE_TIERS:
                log.merge_existing(f"{name}_{tier}", NOT_SET, _price_raw(None))
            if not log.merge_existing(f"{name}_added", NOT_SET, serialize(None)):
                log.upsert(
                    ChangeLogEntry(
                        field=f"{name}_removed",
                        display_name=f"{name} Division",
                        old_value="exists",
                        new_value="removed",
                        raw_old=_prices_raw(item),
                        raw_new=serialize(None),
                    )
                )

        for name, item in after.items():
            if name in before:
                continue
            removed = log.get(f"{name}_removed")
            if removed is not None:
                log.merge_existing(removed.field, "exists", removed.raw_old)
                continue
            log.upsert(
                ChangeLogEntry(
                    field=f"{name}_added",
                    display_name=f"{name} Division",
                    old_value=NOT_SET,
                    new_value=self._added_label(item),
                    raw_old=serialize(None),
                    raw_new=_prices_raw(item),
                )
            )

    @staticmethod
    def _added_label(item: PricedItem) -> str:
        price = item.price("regular")
        return f"added @ {price}" if price is not None else "added"


class FieldDiffEngine:
    """Merges field-level updates of a record into a change log."""

    def __init__(
        self,
        formatter: ValueFormatter | None = None,
        strategies: Mapping[str, DiffStrategy] | None = None,
    ) -> None:
        self.formatter = formatter or ValueFormatter()
        self._default = ScalarDiffStrategy(self.formatter)
        self._strategies: dict[str, DiffStrategy] = {DIVISIONS_FIELD: PricedCollectionDiffStrategy()}
        if strategies:
            self._strategies.update(strategies)

    def register(self, field_key: str, strategy: DiffStrategy) -> None:
        self._strategies[field_key] = strategy

    def strategy_for(self, field_key: str) -> DiffStrategy:
        return self._strategies.get(field_key, self._default)

    def apply_update(
        self, log: ChangeLog, previous: EventRecord, updates: Mapping[str, Any]
    ) -> list[ChangeLogEntry]:
        """Merge ``updates`` into ``log``.

        ``previous`` must be the in-memory record as it was right before this
        update, not the published snapshot, so that new entries start from the
        value the field held when it was first touched.
        """
        for field_key, value in updates.items():
            self.strategy_for(field_key).diff(log, field_key, previous.get(field_key), value)
        log.prune()
        return log.entries

    def seed(
        self,
        log: ChangeLog,
        published: EventRecord,
        draft: EventRecord,
        fields: Iterable[str] = FIELD_DISPLAY_NAMES,
    ) -> list[ChangeLogEntry]:
        """One-shot comparison of a loaded draft against its published snapshot."""
        updates = {field_key: draft.get(field_key) for field_key in fields}
        return self.apply_update(log, published, updates)
