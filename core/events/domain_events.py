"""Change notifications for commitments, payments and phase budgets."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.commitments_changed: Signal[str] = Signal()  # project_id
        self.payments_changed: Signal[str] = Signal()     # owner id (commitment or cost assignment)
        self.budgets_changed: Signal[str] = Signal()      # project_id


# SINGLE global instance
domain_events = DomainEvents()
