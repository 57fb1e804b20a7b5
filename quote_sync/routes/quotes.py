from fastapi import APIRouter, HTTPException, status

from quote_sync.common.constants import APIPath, ErrorMessage
from quote_sync.common.dependencies import get_quote_intake_service
from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.models.quote import QuoteIntakeDTO

router = APIRouter(prefix=APIPath.QUOTES_PREFIX, tags=["quotes"])
LOGGER = setup_logger()


@router.post("")
async def save_quote(quote_dto: QuoteIntakeDTO):
    try:
        service = get_quote_intake_service()
        quote_dto = await service.save_quote(quote_dto)
        return quote_dto.to_response()
    except Exception as e:
        LOGGER.exception(f"Quote intake failed: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=ErrorMessage.QUOTE_STORAGE)
