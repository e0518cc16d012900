import logging
from fastapi.concurrency import run_in_threadpool
from core.models import UNKNOWN_EMAIL

logger = logging.getLogger(__name__)


async def resolve_email(store, candidate_email, ip_address):
    """Swap the "Unknown" sentinel for the email of the latest user on this IP.

    Real emails come back untouched without a lookup. A failed lookup is
    logged and the sentinel is kept, so callers never see the error.
    """
    if candidate_email != UNKNOWN_EMAIL:
        return candidate_email

    try:
        user = await run_in_threadpool(store.latest_user_for_ip, ip_address)
    except Exception as e:
        logger.error(f"❌ Error fetching email from users collection for ip={ip_address}: {e}", exc_info=True)
        return candidate_email

    if user and user.get("email"):
        return user["email"]

    return candidate_email
