from typing import Annotated, Union

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ursol.core.dependencies import CurrentUserId, get_identity_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import VerifyRequest
from ursol.schemas.responses import VerifyResponse
from ursol.services.identity_service import IdentityService
from ursol.utils.responses import raise_http_error

router = APIRouter()


@router.post(
    "/verify",
    response_model=VerifyResponse,
    summary="Verify a World ID proof",
    operation_id="verify_world_id_proof",
    responses={400: {"model": VerifyResponse, "description": "Proof rejected by the verifier"}},
)
async def verify(
    body: VerifyRequest,
    user_id: CurrentUserId,
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
) -> Union[VerifyResponse, JSONResponse]:
    try:
        result = await identity_service.verify_proof(user_id, body.payload, body.action, body.signal)
    except AppError as e:
        raise_http_error(e)

    if result.status != status.HTTP_200_OK:
        return JSONResponse(status_code=result.status, content=result.model_dump(by_alias=True))
    return result
