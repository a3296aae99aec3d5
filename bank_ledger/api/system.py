"""
Ledger system wiring and FastAPI dependencies
"""

from typing import Optional

from ..audit import AuditTrail
from ..commands import CommandDispatcher
from ..config import LedgerConfig, get_config
from ..ledger import Ledger
from ..storage import InMemoryStorage, StorageInterface, create_storage


class LedgerSystem:
    """Ledger with its storage, audit trail and command dispatcher initialized"""

    def __init__(self, storage: Optional[StorageInterface] = None,
                 config: Optional[LedgerConfig] = None):
        self.config = config or get_config()
        self.storage = storage if storage is not None else create_storage(self.config)

        self.audit_trail = AuditTrail(self.storage) if self.config.enable_audit_logging else None
        self.ledger = Ledger(
            self.storage,
            audit_trail=self.audit_trail,
            display_precision=self.config.display_precision
        )
        self.dispatcher = CommandDispatcher(self.ledger)

    @classmethod
    def in_memory(cls, config: Optional[LedgerConfig] = None) -> 'LedgerSystem':
        return cls(storage=InMemoryStorage(), config=config)


# Global ledger system instance, created on first use
_ledger_system: Optional[LedgerSystem] = None


def get_ledger_system() -> LedgerSystem:
    global _ledger_system
    if _ledger_system is None:
        _ledger_system = LedgerSystem()
    return _ledger_system
