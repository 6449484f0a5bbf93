"""Change Ledger for GameDesk.

Records acknowledged single-field autosaves for one edit session and keeps
the running count shown to the user as "Total Changes Made".

Submodules:
    change_ledger   -- In-memory, append-only record of FieldChange entries.
"""

from gamedesk.ledger.change_ledger import ChangeLedger

__all__ = ["ChangeLedger"]
