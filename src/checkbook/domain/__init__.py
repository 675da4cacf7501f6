"""Domain layer for checkbook application."""

# Import services lazily to avoid circular dependencies with the database layer
_SERVICES = {
    "UserService": "checkbook.domain.account",
    "AccountService": "checkbook.domain.account",
    "LedgerService": "checkbook.domain.ledger",
    "BalanceService": "checkbook.domain.balance",
    "RecurrenceService": "checkbook.domain.recurrence",
    "RecurringJob": "checkbook.domain.jobs",
    "ReportService": "checkbook.domain.report",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
