from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from quote_sync.common.constants import APIPath, ErrorMessage
from quote_sync.common.dependencies import get_oauth_service
from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.exceptions import AuthError, StorageError
from quote_sync.models.oauth import CallbackDTO

router = APIRouter(prefix=APIPath.OAUTH_PREFIX, tags=["oauth"])
LOGGER = setup_logger()


@router.get(APIPath.OAUTH_CONNECT)
async def connect():
    try:
        service = get_oauth_service()
        return RedirectResponse(url=service.get_authorization_url())
    except Exception as e:
        LOGGER.exception(f"Connect error: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get(APIPath.OAUTH_CALLBACK)
async def callback(
    code: str = Query(..., description="Authorization code"),
    state: str = Query(..., description="Signed state parameter"),
    realmId: str = Query(..., description="QuickBooks realm ID"),
):
    try:
        callback_dto = CallbackDTO.from_request(code=code, state=state, realm_id=realmId)
        service = get_oauth_service()
        callback_dto = await service.handle_callback(callback_dto)
        return callback_dto.to_response()
    except ValueError as e:
        LOGGER.warning(f"OAuth callback failed - invalid request: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AuthError as e:
        LOGGER.error(f"OAuth callback failed - token exchange: {str(e)}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=ErrorMessage.TOKEN_EXCHANGE_REJECTED)
    except StorageError as e:
        LOGGER.error(f"OAuth callback failed - storage: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=ErrorMessage.CREDENTIAL_STORAGE)
    except Exception as e:
        LOGGER.exception(f"OAuth callback failed: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
