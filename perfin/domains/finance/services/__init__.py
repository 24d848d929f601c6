from perfin.domains.finance.services.ledger_service import (
    LedgerResult,
    Reconciliation,
    reconcile_account,
    reconcile_all,
    record_transaction,
    remove_transaction,
    revise_transaction,
)

__all__ = [
    "LedgerResult",
    "Reconciliation",
    "record_transaction",
    "revise_transaction",
    "remove_transaction",
    "reconcile_account",
    "reconcile_all",
]
