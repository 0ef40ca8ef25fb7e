"""Exceptions raised by haulbook."""


class HaulbookError(Exception):
    """Base class for haulbook errors."""


class InvalidImportError(HaulbookError):
    """Import payload is not a valid record export. Nothing was applied."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        message = "Invalid file format"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RecordNotFoundError(HaulbookError, KeyError):
    """No load or expense with the requested id."""

    def __init__(self, record_type: str, record_id: int) -> None:
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f"{record_type} {record_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class InvalidPeriodError(HaulbookError, ValueError):
    """Unknown period name or an inverted date range."""
