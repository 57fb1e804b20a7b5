from http import HTTPStatus

import httpx

from quote_sync.common.constants import (
    HTTPHeaders,
    QuickBooksAPI,
    QuickBooksFields,
    Timeout,
)
from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.config import settings
from quote_sync.exceptions import UnauthorizedError, UpstreamError
from quote_sync.models.invoice import Invoice, InvoiceLineUpdate


class QuickBooksInvoiceClient:
    """
    Invoice reads and price updates against the QuickBooks Online API.

    Every call is a single attempt. A 401 surfaces as UnauthorizedError so the
    caller can refresh credentials; any other failure is an UpstreamError.
    """

    def __init__(self):
        self.environment = settings.QBO_ENVIRONMENT
        self.api_base_url = (
            QuickBooksAPI.PRODUCTION_BASE_URL if self.environment == "production" else QuickBooksAPI.SANDBOX_BASE_URL
        )
        self.minor_version = settings.QBO_MINOR_VERSION
        self._log = setup_logger()

    async def fetch_invoice(self, realm_id: str, invoice_id: str, access_token: str) -> Invoice:
        url = f"{self.api_base_url}{QuickBooksAPI.INVOICE_BY_ID.format(realm_id=realm_id, invoice_id=invoice_id)}"
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    url,
                    headers=self._headers(access_token),
                    params={QuickBooksFields.MINOR_VERSION_PARAM: self.minor_version},
                    timeout=Timeout.QUICKBOOKS_INVOICE_FETCH,
                )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Invoice fetch failed for {invoice_id}: {e}") from e

        self._raise_for_status(response, f"Invoice fetch failed for {invoice_id}")

        try:
            return Invoice.from_qbo(response.json()[QuickBooksFields.INVOICE])
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError(f"Invoice {invoice_id} response could not be parsed: {e}") from e

    async def update_invoice(
        self,
        realm_id: str,
        invoice_id: str,
        sync_token: str,
        lines: list[InvoiceLineUpdate],
        access_token: str,
    ) -> None:
        url = f"{self.api_base_url}{QuickBooksAPI.INVOICE.format(realm_id=realm_id)}"
        payload = {
            QuickBooksFields.ID: invoice_id,
            QuickBooksFields.SYNC_TOKEN: sync_token,
            QuickBooksFields.SPARSE: True,
            QuickBooksFields.LINE: [line.to_qbo() for line in lines],
        }
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url,
                    headers={**self._headers(access_token), HTTPHeaders.CONTENT_TYPE: HTTPHeaders.APPLICATION_JSON},
                    params={QuickBooksFields.MINOR_VERSION_PARAM: self.minor_version},
                    json=payload,
                    timeout=Timeout.QUICKBOOKS_INVOICE_UPDATE,
                )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Invoice update failed for {invoice_id}: {e}") from e

        self._raise_for_status(response, f"Invoice update failed for {invoice_id}")

    @staticmethod
    def _headers(access_token: str) -> dict[str, str]:
        return {
            HTTPHeaders.AUTHORIZATION: f"{HTTPHeaders.BEARER_PREFIX}{access_token}",
            HTTPHeaders.ACCEPT: HTTPHeaders.APPLICATION_JSON,
        }

    def _raise_for_status(self, response: httpx.Response, message: str) -> None:
        if response.is_success:
            return

        fault = self._extract_fault(response)
        if response.status_code == HTTPStatus.UNAUTHORIZED:
            raise UnauthorizedError(f"{message}: unauthorized", status_code=response.status_code, fault=fault)
        raise UpstreamError(
            f"{message}: {response.status_code} - {response.text}",
            status_code=response.status_code,
            fault=fault,
        )

    @staticmethod
    def _extract_fault(response: httpx.Response) -> list[dict]:
        try:
            body = response.json()
        except ValueError:
            return []
        if not isinstance(body, dict):
            return []
        fault = body.get(QuickBooksFields.FAULT) or body.get(QuickBooksFields.FAULT.lower()) or {}
        if not isinstance(fault, dict):
            return []
        errors = fault.get(QuickBooksFields.ERROR) or fault.get(QuickBooksFields.ERROR.lower()) or []
        return errors if isinstance(errors, list) else []
