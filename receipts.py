"""
receipts.py - Receipt Foundation Module

Every batch, config load and contract violation in the simulator is evidenced
by a receipt: a flat dict carrying its type, a UTC timestamp, the tenant and a
dual hash of the payload. All modules build receipts through emit_receipt()
and halt through StopRule.
"""

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import blake3

__all__ = [
    "DEFAULT_TENANT",
    "RECEIPT_SCHEMA",
    "StopRule",
    "dual_hash",
    "emit_receipt",
    "emit_anomaly",
    "write_receipt_jsonl",
    "write_ledger",
    "merkle",
]

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_TENANT = "monty-hall"

# Fields present on every receipt regardless of type
RECEIPT_SCHEMA = {
    "receipt_type": "str",
    "ts": "ISO8601",
    "tenant_id": "str",
    "payload_hash": "str (SHA256:BLAKE3)",
}


class StopRule(Exception):
    """Raised when a stoprule triggers. Never catch silently."""
    pass


# =============================================================================
# HASHING
# =============================================================================

def dual_hash(data: Union[bytes, str]) -> str:
    """
    SHA256:BLAKE3 digest, "sha256_hex:blake3_hex".

    Args:
        data: Bytes or text (text is UTF-8 encoded first)
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return f"{hashlib.sha256(data).hexdigest()}:{blake3.blake3(data).hexdigest()}"


def merkle(items: List[Any]) -> str:
    """
    Merkle root over JSON-serializable items.

    Odd levels duplicate their last hash. An empty list hashes the
    literal b"empty" so every batch has a root.
    """
    if not items:
        return dual_hash(b"empty")
    level = [dual_hash(json.dumps(item, sort_keys=True)) for item in items]
    while len(level) > 1:
        if len(level) % 2:
            level.append(level[-1])
        level = [dual_hash(level[i] + level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


# =============================================================================
# EMISSION
# =============================================================================

def emit_receipt(receipt_type: str, data: Dict[str, Any],
                 tenant_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Build a receipt from a JSON-serializable payload.

    The payload hash is taken over the payload alone, so two receipts with
    identical payloads share a hash even though their timestamps differ.

    Args:
        receipt_type: Type identifier, listed in the emitting module's RECEIPT_SCHEMA
        data: Payload fields, merged into the receipt at top level
        tenant_id: Overrides data["tenant_id"]; falls back to DEFAULT_TENANT

    Returns:
        dict: receipt_type, ts, tenant_id, payload_hash and the payload fields
    """
    tenant = tenant_id or data.get("tenant_id", DEFAULT_TENANT)
    return {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        "payload_hash": dual_hash(json.dumps(data, sort_keys=True, default=str)),
        **data,
        "tenant_id": tenant,
    }


def emit_anomaly(metric: str, classification: str, detail: str,
                 tenant_id: str = DEFAULT_TENANT) -> Dict[str, Any]:
    """Anomaly receipt emitted by stoprules right before they halt."""
    return emit_receipt("anomaly", {
        "metric": metric,
        "classification": classification,
        "detail": detail,
        "action": "halt",
    }, tenant_id=tenant_id)


# =============================================================================
# PERSISTENCE
# =============================================================================

def write_receipt_jsonl(receipt: Dict[str, Any], fh) -> None:
    """Append receipt as one compact JSON line to an open text handle."""
    fh.write(json.dumps(receipt, separators=(",", ":")) + "\n")


def write_ledger(receipts: Iterable[Dict[str, Any]], path: Union[str, Path]) -> int:
    """
    Append receipts to a JSONL ledger file, creating parent directories.

    Returns:
        int: Number of receipts written
    """
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with path_obj.open("a", encoding="utf-8") as fh:
        for receipt in receipts:
            write_receipt_jsonl(receipt, fh)
            written += 1
    return written
