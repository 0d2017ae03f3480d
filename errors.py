class LedgerError(Exception):
    """Base class for failures the views turn into a user message."""


class PersistenceError(LedgerError):
    """A create, update or delete could not be written to the store."""


class DocumentExportError(LedgerError):
    """The financial report could not be drawn or saved."""


class NotificationError(LedgerError):
    """The scheduler refused a reminder."""
