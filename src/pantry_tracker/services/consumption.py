"""Daily automatic consumption of auto-consume items."""

import logging
from dataclasses import dataclass, field

from pantry_tracker.domain.errors import NotFoundError
from pantry_tracker.domain.events import ItemAutoConsumed
from pantry_tracker.domain.inventory import FoodItem, Unit
from pantry_tracker.services.events import DispatchResult
from pantry_tracker.services.inventory import InventoryService

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoConsumption:
    """One consumption step taken by the daily routine."""

    food_item_id: int
    name: str
    amount: int
    unit: Unit
    depleted: bool


@dataclass
class ConsumptionReport:
    """What a single pass of the routine consumed."""

    consumed: list[AutoConsumption] = field(default_factory=list)
    skipped_item_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class _CommittedStep:
    food_item_id: int
    previous_quantity: int
    dispatched: DispatchResult


@dataclass
class ConsumptionEngine:
    """Consumes the daily amount from each group of same-named items.

    The engine keeps no record of earlier runs: invoking it twice consumes
    twice. Once-per-day semantics belong to the trigger gate. A pass is all or
    nothing, so a failed pass can be retried without consuming twice.
    """

    inventory_service: InventoryService

    def process_automatic_consumption(self) -> ConsumptionReport:
        """Run one consumption pass over all auto-consume items."""
        report = ConsumptionReport()
        committed: list[_CommittedStep] = []
        with self.inventory_service.lock:
            items = [
                item
                for item in self.inventory_service.list_food_items()
                if item.auto_consume and item.daily_consumption_amount > 0
            ]
            try:
                for name, group in _group_by_name(items).items():
                    self._process_group(name, group, report, committed)
            except Exception:
                _logger.exception(
                    "Automatic consumption failed, undoing the pass",
                    extra={"undone_steps": len(committed)},
                )
                self._undo(committed)
                raise
        _logger.info(
            "Automatic consumption processed",
            extra={
                "consumed": len(report.consumed),
                "skipped": len(report.skipped_item_ids),
            },
        )
        return report

    def _process_group(
        self,
        name: str,
        group: list[FoodItem],
        report: ConsumptionReport,
        committed: list[_CommittedStep],
    ) -> None:
        # TODO: carry the unconsumed remainder over to the next-expiring item
        # once the household confirms whether partial days should roll over.
        for item in sorted(group, key=lambda entry: entry.expiration_date):
            if item.quantity <= 0:
                continue
            amount = min(item.quantity, item.daily_consumption_amount)
            auto_consumed = ItemAutoConsumed(
                food_item_id=item.id,
                name=item.name,
                amount=amount,
                unit=item.daily_consumption_unit,
            )
            try:
                current = self.inventory_service.get_food_item(item.id)
                updated, dispatched = self.inventory_service.consume_with_events(
                    item.id, amount, follow_up=[auto_consumed]
                )
            except NotFoundError:
                _logger.warning(
                    "Auto-consume item vanished before consumption",
                    extra={"food_item_id": item.id, "group": name},
                )
                report.skipped_item_ids.append(item.id)
                continue
            committed.append(
                _CommittedStep(
                    food_item_id=item.id,
                    previous_quantity=current.quantity,
                    dispatched=dispatched,
                )
            )
            report.consumed.append(
                AutoConsumption(
                    food_item_id=item.id,
                    name=item.name,
                    amount=amount,
                    unit=item.daily_consumption_unit,
                    depleted=updated.is_depleted,
                )
            )
            return

    def _undo(self, committed: list[_CommittedStep]) -> None:
        dispatcher = self.inventory_service.dispatcher
        for step in reversed(committed):
            dispatcher.rollback(step.dispatched)
            self.inventory_service.restore_quantity(
                step.food_item_id, step.previous_quantity
            )


def _group_by_name(items: list[FoodItem]) -> dict[str, list[FoodItem]]:
    groups: dict[str, list[FoodItem]] = {}
    for item in items:
        groups.setdefault(item.name, []).append(item)
    return groups
