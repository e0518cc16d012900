import logging
from typing import List, Optional
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from core.exceptions import StoreError
from core.models import DeviceInfo, IDENTITY_FIELDS
from core.utils import device_fingerprint, get_current_utc_datetime

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
DEVICE_INFOS_COLLECTION = "device_infos"


def _to_device_info(doc) -> DeviceInfo:
    data = doc.to_dict() or {}
    return DeviceInfo(
        id=doc.id,
        timestamp=data.get("timestamp"),
        **{field: data.get(field) for field in IDENTITY_FIELDS},
    )


class DeviceInfoStore:
    """Every Firestore query the service issues, against one client handle."""

    def __init__(self, client):
        self.client = client

    def latest_user_for_ip(self, ip_address) -> Optional[dict]:
        """Most recent ``users`` document for an IP address, or None.

        Errors are left to the caller; enrichment decides how to degrade.
        """
        query = (
            self.client.collection(USERS_COLLECTION)
            .where("ipAddress", "==", ip_address)
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
            .limit(1)
        )
        user_doc = next(query.stream(), None)
        return user_doc.to_dict() if user_doc else None

    def find_device_info(self, identity: dict) -> Optional[DeviceInfo]:
        query = self.client.collection(DEVICE_INFOS_COLLECTION)
        for field in IDENTITY_FIELDS:
            query = query.where(field, "==", identity.get(field))

        try:
            existing = next(query.limit(1).stream(), None)
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"Failed to look up device info: {e}") from e

        return _to_device_info(existing) if existing else None

    def create_device_info(self, identity: dict) -> bool:
        """Insert a record keyed by its fingerprint.

        Returns False when a document with the same fingerprint already exists.
        """
        record = {field: identity.get(field) for field in IDENTITY_FIELDS}
        doc_ref = self.client.collection(DEVICE_INFOS_COLLECTION).document(device_fingerprint(record))
        record["timestamp"] = get_current_utc_datetime()

        try:
            doc_ref.create(record)
        except google_exceptions.AlreadyExists:
            logger.info(f"Device info {doc_ref.id} was created concurrently, skipping insert")
            return False
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"Failed to save device info: {e}") from e

        return True

    def list_device_infos(self) -> List[DeviceInfo]:
        try:
            docs = list(self.client.collection(DEVICE_INFOS_COLLECTION).stream())
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(f"Failed to fetch device info: {e}") from e

        return [_to_device_info(doc) for doc in docs]
