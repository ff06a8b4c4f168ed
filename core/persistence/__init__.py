"""
EastGate Persistence — Public API
===================================
Versioned JSON state documents.
"""

from core.persistence.state_document import (
    SCHEMA_VERSION,
    UPGRADE_STEPS,
    dump_state,
    load_state,
    read_state_file,
    upgrade_document,
    write_state_file,
)

__all__ = [
    "SCHEMA_VERSION",
    "UPGRADE_STEPS",
    "dump_state",
    "load_state",
    "read_state_file",
    "upgrade_document",
    "write_state_file",
]
