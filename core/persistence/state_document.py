"""
EastGate Persistence — Versioned State Document
=================================================
Whole-system state (collections + identities + activity log) as one
JSON document carrying a schema_version.

Doctrine:
- Unknown (newer) versions fail loudly; nothing is guessed
- Older versions pass through registered upgrade steps, in order
- Loading only targets an empty store
- Loaded state goes through the same startup checks as seed data
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict

from core.audit.models import ActivityLogEntry
from core.bootstrap.errors import SystemBootstrapError
from core.bootstrap.invariants import run_startup_checks
from core.bootstrap.seed import SEED_ORDER
from core.identity.models import Identity
from core.store.codec import record_to_dict
from core.store.models import EntityKind
from core.time.clock import iso_timestamp

logger = logging.getLogger("eastgate.persistence")

SCHEMA_VERSION = 1

# Held from snapshot to replace, so files land in snapshot order.
_WRITE_LOCK = threading.Lock()

# from_version → step producing a document at from_version + 1
UPGRADE_STEPS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {}


# ══════════════════════════════════════════════════════════════
# DUMP
# ══════════════════════════════════════════════════════════════

def dump_state(store, identities) -> Dict[str, Any]:
    """Consistent snapshot, taken under the store read lock."""
    with store.read_locked():
        return {
            "schema_version": SCHEMA_VERSION,
            "saved_at": iso_timestamp(store.clock),
            "collections": {
                kind.value: [record_to_dict(record) for record in store.list(kind)]
                for kind in EntityKind
            },
            "identities": [identity.to_dict() for identity in identities.export()],
            "activity_log": [entry.to_dict() for entry in store.activity_entries()],
        }


# ══════════════════════════════════════════════════════════════
# LOAD
# ══════════════════════════════════════════════════════════════

def upgrade_document(document: Dict[str, Any]) -> Dict[str, Any]:
    version = document.get("schema_version")
    if isinstance(version, bool) or not isinstance(version, int):
        raise SystemBootstrapError(
            invariant="STATE_SCHEMA_VERSION",
            detail="state document has no integer schema_version.",
        )
    if version > SCHEMA_VERSION:
        raise SystemBootstrapError(
            invariant="STATE_SCHEMA_VERSION",
            detail=f"schema_version {version} is newer than supported {SCHEMA_VERSION}.",
        )
    while version < SCHEMA_VERSION:
        step = UPGRADE_STEPS.get(version)
        if step is None:
            raise SystemBootstrapError(
                invariant="STATE_SCHEMA_VERSION",
                detail=f"no upgrade path from schema_version {version}.",
            )
        document = step(document)
        version = document["schema_version"]
        logger.info("State document upgraded to schema_version %d.", version)
    return document


def load_state(document: Dict[str, Any], store, identities) -> None:
    document = upgrade_document(document)

    if any(store.count(kind) for kind in EntityKind) or len(store.activity):
        raise SystemBootstrapError(
            invariant="STATE_TARGET_EMPTY",
            detail="state documents load only into an empty store.",
        )

    collections = document.get("collections") or {}
    try:
        for kind in SEED_ORDER:
            records = collections.get(kind.value) or []
            if records:
                store.seed(kind, records)
        identities.restore(Identity.from_dict(item) for item in document.get("identities") or [])
        store.activity.restore(
            ActivityLogEntry.from_dict(item) for item in document.get("activity_log") or []
        )
    except (ValueError, TypeError, KeyError) as exc:
        raise SystemBootstrapError(
            invariant="STATE_RECORDS",
            detail=f"state document is malformed: {exc}",
        ) from exc

    run_startup_checks(store, identities)


# ══════════════════════════════════════════════════════════════
# FILES
# ══════════════════════════════════════════════════════════════

def write_state_file(path, store, identities) -> None:
    """Atomic replace: readers never observe a half-written file."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with _WRITE_LOCK:
        document = dump_state(store, identities)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=target.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    logger.info("State written to %s.", target)


def read_state_file(path, store, identities) -> None:
    with open(path, encoding="utf-8") as handle:
        try:
            document = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SystemBootstrapError(
                invariant="STATE_RECORDS",
                detail=f"{path} is not valid JSON: {exc}",
            ) from exc
    load_state(document, store, identities)
    logger.info("State loaded from %s.", path)
