import hashlib
import json
from datetime import datetime, timezone


def get_current_utc_datetime():
    return datetime.now(timezone.utc)


def device_fingerprint(identity: dict) -> str:
    """Deterministic document id for a device identity.

    Key order is fixed by ``sort_keys`` so equal identities always hash equal.
    """
    encoded = json.dumps(identity, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()
