import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from core.device_info import ingest_device_info, list_device_infos
from core.models import DeviceInfoListResponse, DeviceInfoSubmission, MessageResponse
from core.store import DeviceInfoStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> DeviceInfoStore:
    return request.app.state.store


@router.post("/device-info", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_device_info(
    response: Response,
    submission: Optional[DeviceInfoSubmission] = None,
    store: DeviceInfoStore = Depends(get_store),
):
    # An empty body saves a record of nulls
    if submission is None:
        submission = DeviceInfoSubmission()

    logger.debug(f"Received data: {submission.model_dump()}")

    try:
        result = await ingest_device_info(store, submission)
    except Exception as e:
        logger.error(f"❌ Error saving device info to Firestore: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")

    if not result.created:
        response.status_code = status.HTTP_200_OK
        return {"message": "No new data to save"}

    return {"message": "Device info saved"}


@router.get("/device-info", response_model=DeviceInfoListResponse)
async def get_device_info(store: DeviceInfoStore = Depends(get_store)):
    try:
        infos = await list_device_infos(store)
    except Exception as e:
        logger.error(f"❌ Error fetching device info from Firestore: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")

    return {
        "message": "Device information retrieved successfully",
        "data": infos,
    }
