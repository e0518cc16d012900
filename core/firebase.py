# core/firebase.py

from firebase_admin import initialize_app, credentials, firestore
import firebase_admin
from pathlib import Path
import logging
import time
from core.config import Settings
from core.exceptions import ConfigError, StoreConnectionError

logger = logging.getLogger(__name__)


def initialize_firebase(settings: Settings):
    """Initialize the default firebase app once and return it."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    if settings.uses_application_default:
        logger.info("🔑 Using Application Default Credentials for Firestore")
        cred = credentials.ApplicationDefault()
    else:
        # Always resolve absolute path to avoid FileNotFoundError
        service_account_path = Path(settings.database).expanduser().resolve()
        if not service_account_path.exists():
            raise ConfigError(f"Service account key not found: {service_account_path}")

        logger.info(f"🔑 Using Firebase service account key: {service_account_path}")
        cred = credentials.Certificate(str(service_account_path))

    options = {"projectId": settings.firestore_project} if settings.firestore_project else None
    app = initialize_app(cred, options)
    logger.info("✅ Firebase initialized successfully.")
    return app


def probe(client):
    # Firestore clients connect lazily, so issue a real read
    list(client.collection("users").limit(1).stream())


def connect_firestore(settings: Settings, sleep=time.sleep):
    """Return a Firestore client that has answered at least one read.

    Retries with exponential backoff, then raises StoreConnectionError.
    A ConfigError from credential loading is not retried.
    """
    delay = settings.db_connect_backoff_seconds
    last_error = None

    for attempt in range(1, settings.db_connect_retries + 1):
        try:
            initialize_firebase(settings)
            client = firestore.client()
            probe(client)
            logger.info("✅ Connected to Firestore")
            return client
        except ConfigError:
            raise
        except Exception as error:
            last_error = error
            logger.error(
                f"❌ Error connecting to Firestore (attempt {attempt}/{settings.db_connect_retries}): {error}"
            )
            if attempt < settings.db_connect_retries:
                sleep(delay)
                delay *= 2

    raise StoreConnectionError(
        f"Could not connect to Firestore after {settings.db_connect_retries} attempts"
    ) from last_error
