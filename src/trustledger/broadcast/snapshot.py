"""Wire format for trust-score snapshots sent across domains.

A snapshot always has the same four keys and is encoded as compact JSON
with sorted keys, so equal snapshots produce identical payload bytes.
"""

import json
from datetime import datetime

from trustledger.trust.trust_score import TrustScoreSnapshot

SNAPSHOT_FIELDS = ("product_id", "average_rating", "total_reviews", "last_updated")


def encode_snapshot(snapshot: TrustScoreSnapshot) -> bytes:
    return json.dumps(snapshot.to_dict(), sort_keys=True, separators=(",", ":")).encode("utf-8")


def decode_snapshot(payload: bytes) -> TrustScoreSnapshot:
    data = json.loads(payload.decode("utf-8"))
    missing = [name for name in SNAPSHOT_FIELDS if name not in data]
    if missing:
        raise ValueError(f"Snapshot payload is missing fields: {', '.join(missing)}")

    last_updated = data["last_updated"]
    return TrustScoreSnapshot(
        product_id=data["product_id"],
        average_rating=int(data["average_rating"]),
        total_reviews=int(data["total_reviews"]),
        last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
    )
