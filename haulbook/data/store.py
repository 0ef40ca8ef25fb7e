"""
JSON record store.

Handles:
- Reading and writing the loads and expenses collections
- Adding, editing and deleting records
- Export to a dated backup file and all-or-nothing import
- The 30-day backup reminder
"""

import datetime as dt
import json
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, Field, ValidationError
from pydantic.alias_generators import to_camel

from haulbook.core.errors import InvalidImportError, RecordNotFoundError
from haulbook.data.models.expense import Expense
from haulbook.data.models.load import Load

logger = structlog.get_logger(__name__)

BACKUP_REMINDER_DAYS = 30
BACKUP_SNOOZE_DAYS = 7


def _duplicate_ids(items: list[Any]) -> list[int]:
    seen: set[int] = set()
    duplicates: list[int] = []
    for item in items:
        if item.id in seen and item.id not in duplicates:
            duplicates.append(item.id)
        seen.add(item.id)
    return duplicates


class Records(BaseModel):
    """Snapshot of everything in the store."""

    loads: list[Load] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    last_export_date: Optional[dt.datetime] = None

    class Config:
        """Pydantic configuration."""

        alias_generator = to_camel
        populate_by_name = True


class RecordStore:
    """
    Persists loads and expenses to a single JSON file.

    Every mutation reads the file, applies the change and writes it back, so
    callers always work from a fresh snapshot. New records go to the front of
    their collection.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    # -- snapshot I/O -----------------------------------------------------

    def read(self) -> Records:
        """Load the current snapshot; an absent file is an empty store."""
        if not self.path.exists():
            return Records()
        with open(self.path, "r", encoding="utf-8") as f:
            return Records.model_validate(json.load(f))

    def write(self, records: Records) -> None:
        """Replace the stored snapshot."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(records.model_dump(mode="json", by_alias=True), f, indent=2)

    @property
    def loads(self) -> list[Load]:
        return self.read().loads

    @property
    def expenses(self) -> list[Expense]:
        return self.read().expenses

    # -- loads ------------------------------------------------------------

    def add_load(self, load: Load) -> Load:
        """Store a new load, bumping its id if it collides with an existing one."""
        records = self.read()
        ids = {existing.id for existing in records.loads}
        if load.id in ids:
            load = load.revise(id=max(ids) + 1)
        records.loads.insert(0, load)
        self.write(records)
        logger.info("load_added", load_id=load.id, miles=load.miles, revenue=str(load.revenue))
        return load

    def update_load(self, load_id: int, **changes: Any) -> Load:
        """Edit a load; revenue is re-derived from the (possibly new) miles."""
        records = self.read()
        index = self._index_of(records.loads, load_id, "load")
        updated = records.loads[index].revise(**changes)
        records.loads[index] = updated
        self.write(records)
        logger.info("load_updated", load_id=load_id, fields=sorted(changes))
        return updated

    def delete_load(self, load_id: int) -> None:
        records = self.read()
        index = self._index_of(records.loads, load_id, "load")
        del records.loads[index]
        self.write(records)
        logger.info("load_deleted", load_id=load_id)

    # -- expenses ---------------------------------------------------------

    def add_expense(self, expense: Expense) -> Expense:
        """Store a new expense, bumping its id if it collides with an existing one."""
        records = self.read()
        ids = {existing.id for existing in records.expenses}
        if expense.id in ids:
            expense = expense.revise(id=max(ids) + 1)
        records.expenses.insert(0, expense)
        self.write(records)
        logger.info(
            "expense_added",
            expense_id=expense.id,
            category=expense.category.value,
            amount=str(expense.amount),
        )
        return expense

    def update_expense(self, expense_id: int, **changes: Any) -> Expense:
        records = self.read()
        index = self._index_of(records.expenses, expense_id, "expense")
        updated = records.expenses[index].revise(**changes)
        records.expenses[index] = updated
        self.write(records)
        logger.info("expense_updated", expense_id=expense_id, fields=sorted(changes))
        return updated

    def delete_expense(self, expense_id: int) -> None:
        records = self.read()
        index = self._index_of(records.expenses, expense_id, "expense")
        del records.expenses[index]
        self.write(records)
        logger.info("expense_deleted", expense_id=expense_id)

    def clear(self) -> None:
        """Delete every load and expense. The export date is kept."""
        records = self.read()
        self.write(Records(last_export_date=records.last_export_date))
        logger.info("records_cleared", loads=len(records.loads), expenses=len(records.expenses))

    @staticmethod
    def _index_of(items: list[Any], record_id: int, record_type: str) -> int:
        for index, item in enumerate(items):
            if item.id == record_id:
                return index
        raise RecordNotFoundError(record_type, record_id)

    # -- export / import --------------------------------------------------

    def export(self, destination: Union[str, Path], now: dt.datetime) -> Path:
        """
        Write a backup file and remember when it was taken.

        Args:
            destination: File path, or a directory to place a dated file in
            now: Export timestamp

        Returns:
            Path of the written file
        """
        destination = Path(destination)
        if destination.is_dir():
            destination = destination / f"trucking-data-{now:%Y-%m-%d}.json"

        records = self.read()
        payload = records.model_dump(mode="json", by_alias=True, exclude={"last_export_date"})
        payload["exportDate"] = now.isoformat()

        with open(destination, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

        records.last_export_date = now
        self.write(records)
        logger.info(
            "records_exported",
            filepath=str(destination),
            loads=len(records.loads),
            expenses=len(records.expenses),
        )
        return destination

    def import_payload(self, payload: Any) -> Records:
        """
        Replace all loads and expenses with an exported payload.

        The whole payload is validated before anything is written.

        Raises:
            InvalidImportError: If the payload is not a record export
        """
        if not isinstance(payload, dict) or "loads" not in payload or "expenses" not in payload:
            logger.warning("import_rejected", reason="missing loads or expenses")
            raise InvalidImportError("expected 'loads' and 'expenses'")

        try:
            imported = Records.model_validate(
                {"loads": payload["loads"], "expenses": payload["expenses"]}
            )
        except ValidationError as e:
            logger.warning("import_rejected", reason="invalid record", errors=e.error_count())
            raise InvalidImportError(f"{e.error_count()} invalid record field(s)") from e

        for record_type, items in (("load", imported.loads), ("expense", imported.expenses)):
            duplicates = _duplicate_ids(items)
            if duplicates:
                logger.warning("import_rejected", reason="duplicate ids", record_type=record_type)
                raise InvalidImportError(
                    f"duplicate {record_type} id(s): {', '.join(map(str, duplicates))}"
                )

        imported.last_export_date = self.read().last_export_date
        self.write(imported)
        logger.info(
            "records_imported", loads=len(imported.loads), expenses=len(imported.expenses)
        )
        return imported

    def import_file(self, source: Union[str, Path]) -> Records:
        """Import an export file. Undecodable text or JSON is an invalid format too."""
        try:
            with open(source, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("import_rejected", reason="unreadable json", filepath=str(source))
            raise InvalidImportError("not valid JSON") from e
        return self.import_payload(payload)

    # -- backup reminder --------------------------------------------------

    def needs_backup_reminder(self, now: dt.datetime) -> bool:
        """
        Whether it has been 30+ days since the last export.

        The first check on a store that was never exported starts the clock
        instead of reminding.
        """
        records = self.read()
        if records.last_export_date is None:
            records.last_export_date = now
            self.write(records)
            return False
        return now - records.last_export_date >= dt.timedelta(days=BACKUP_REMINDER_DAYS)

    def snooze_backup_reminder(self, now: dt.datetime) -> None:
        """Push the next reminder out by a week."""
        records = self.read()
        records.last_export_date = now - dt.timedelta(
            days=BACKUP_REMINDER_DAYS - BACKUP_SNOOZE_DAYS
        )
        self.write(records)
        logger.info("backup_reminder_snoozed", next_reminder_days=BACKUP_SNOOZE_DAYS)
