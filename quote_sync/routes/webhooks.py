import json

from fastapi import APIRouter, HTTPException, Request, status

from quote_sync.common.constants import APIPath, ErrorMessage, HTTPHeaders
from quote_sync.common.dependencies import get_reconciliation_service
from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.config import settings
from quote_sync.exceptions import StorageError, WebhookVerificationError
from quote_sync.models.notification import ChangeNotification
from quote_sync.utils.webhook_signature import verify_webhook_signature

router = APIRouter(prefix=APIPath.WEBHOOKS_PREFIX, tags=["webhooks"])
LOGGER = setup_logger()


@router.post(APIPath.QBO_WEBHOOK)
async def receive_qbo_notification(request: Request):
    body = await request.body()

    if settings.QBO_WEBHOOK_VERIFIER_TOKEN:
        try:
            verify_webhook_signature(
                body,
                request.headers.get(HTTPHeaders.INTUIT_SIGNATURE),
                settings.QBO_WEBHOOK_VERIFIER_TOKEN,
            )
        except WebhookVerificationError as e:
            LOGGER.warning(f"Webhook rejected: {str(e)}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=ErrorMessage.INVALID_SIGNATURE)

    try:
        notification = ChangeNotification.from_request(json.loads(body))
    except ValueError as e:
        LOGGER.error(f"Notification parsing failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=ErrorMessage.MALFORMED_NOTIFICATION
        )

    try:
        service = get_reconciliation_service()
        outcomes = await service.process_notification(notification)
    except StorageError as e:
        LOGGER.error(f"Notification aborted, credentials unavailable: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=ErrorMessage.CREDENTIAL_STORAGE)

    return {
        "status": "received",
        "processed": len(outcomes),
        "updated": sum(1 for outcome in outcomes if outcome.is_updated),
    }
