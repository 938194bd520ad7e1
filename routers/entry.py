from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import RedirectResponse

from admission import AdmissionController
from constants import AccessConfig
from dependencies import get_access_config, get_admission_controller
from schemas.rooms import EnterRoomResponse
from logging_config import get_logger

logger = get_logger(__name__)

entry_router = APIRouter(tags=["entry"])


@entry_router.get("/")
def home(error: Optional[str] = Query(None)):
    return {"message": "Room gate", "error": error}


@entry_router.get("/room")
def room_without_id():
    return RedirectResponse(url="/", status_code=307)


@entry_router.get("/room/{room_id}", response_model=EnterRoomResponse)
def enter_room(
    room_id: str,
    request: Request,
    response: Response,
    controller: AdmissionController = Depends(get_admission_controller),
    config: AccessConfig = Depends(get_access_config),
):
    # Rejections redirect home with a reason code, admissions (re)set the auth cookie.
    client_host = request.client.host if request.client else "unknown"
    logger.info(f"Room entry request for {room_id} from {client_host}")

    result = controller.admit(room_id, request.cookies.get(config.cookie_name))
    if not result.granted:
        return RedirectResponse(url=f"/?error={result.status.value}", status_code=307)

    response.set_cookie(
        key=config.cookie_name,
        value=result.token,
        path="/",
        httponly=True,
        secure=config.secure_cookie,
        samesite="lax",
    )
    return EnterRoomResponse(roomId=room_id, status=result.status.value)
