import asyncio
import logging
from dataclasses import dataclass
from typing import List
from fastapi.concurrency import run_in_threadpool
from core.enrichment import resolve_email
from core.models import DeviceInfo, DeviceInfoSubmission, UNKNOWN_EMAIL

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    created: bool


async def ingest_device_info(store, submission: DeviceInfoSubmission) -> IngestResult:
    identity = submission.model_dump()
    identity["email"] = await resolve_email(store, submission.email, submission.ipAddress)

    existing = await run_in_threadpool(store.find_device_info, identity)
    if existing:
        logger.info(f"Device info already stored as {existing.id}, nothing to save")
        return IngestResult(created=False)

    created = await run_in_threadpool(store.create_device_info, identity)
    if created:
        logger.info(f"✅ Saved device info for {identity['email']} ({identity['ipAddress']})")
    return IngestResult(created=created)


async def _enrich(store, info: DeviceInfo) -> DeviceInfo:
    if info.email != UNKNOWN_EMAIL:
        return info
    email = await resolve_email(store, info.email, info.ipAddress)
    # Response copy only; the stored document keeps the sentinel
    return info.model_copy(update={"email": email})


async def list_device_infos(store) -> List[DeviceInfo]:
    infos = await run_in_threadpool(store.list_device_infos)
    # gather keeps input order
    return list(await asyncio.gather(*(_enrich(store, info) for info in infos)))
