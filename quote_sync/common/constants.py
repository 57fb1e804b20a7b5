"""
Constants for the quote reconciliation service.
All hardcoded values should be defined here for maintainability.
"""

# ============================================================================
# WEBHOOK ENTITIES
# ============================================================================

class WebhookEntity:
    INVOICE = "Invoice"


class WebhookOperation:
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class NotificationFields:
    """QuickBooks change-notification payload field names"""
    EVENT_NOTIFICATIONS = "eventNotifications"
    DATA_CHANGE_EVENT = "dataChangeEvent"
    ENTITIES = "entities"
    REALM_ID = "realmId"
    NAME = "name"
    ID = "id"
    OPERATION = "operation"
    LAST_UPDATED = "lastUpdated"


# ============================================================================
# STATUS VALUES
# ============================================================================

class ReconciliationStatus:
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason:
    MISSING_FIELD = "missing_field"
    CUSTOMER_NOT_FOUND = "customer_not_found"
    SITE_NOT_FOUND = "site_not_found"
    QUOTE_NOT_FOUND = "quote_not_found"
    NO_MATCHING_LINES = "no_matching_lines"


class QuoteIntakeStatus:
    SAVED = "saved"


# ============================================================================
# HTTP & API
# ============================================================================

class HTTPHeaders:
    AUTHORIZATION = "Authorization"
    CONTENT_TYPE = "Content-Type"
    ACCEPT = "Accept"
    BEARER_PREFIX = "Bearer "
    APPLICATION_JSON = "application/json"
    INTUIT_SIGNATURE = "intuit-signature"


class APIPath:
    WEBHOOKS_PREFIX = "/webhooks"
    QBO_WEBHOOK = "/qbo"
    QUOTES_PREFIX = "/api/quotes"
    OAUTH_PREFIX = "/api/v1/oauth"
    OAUTH_CONNECT = "/connect"
    OAUTH_CALLBACK = "/callback"


# ============================================================================
# QUICKBOOKS SPECIFIC
# ============================================================================

class QuickBooksFields:
    """QuickBooks API response field names"""
    INVOICE = "Invoice"
    ID = "Id"
    SYNC_TOKEN = "SyncToken"
    SPARSE = "sparse"
    CUSTOMER_REF = "CustomerRef"
    BILL_ADDR = "BillAddr"
    LINE1 = "Line1"
    TXN_DATE = "TxnDate"
    LINE = "Line"
    LINE_NUM = "LineNum"
    AMOUNT = "Amount"
    DESCRIPTION = "Description"
    DETAIL_TYPE = "DetailType"
    SALES_ITEM_LINE_DETAIL = "SalesItemLineDetail"
    ITEM_REF = "ItemRef"
    QTY = "Qty"
    UNIT_PRICE = "UnitPrice"
    NAME = "name"
    VALUE = "value"
    FAULT = "Fault"
    ERROR = "Error"
    MINOR_VERSION_PARAM = "minorversion"


class QuickBooksAPI:
    """QuickBooks API paths"""
    SANDBOX_BASE_URL = "https://sandbox-quickbooks.api.intuit.com"
    PRODUCTION_BASE_URL = "https://quickbooks.api.intuit.com"
    INVOICE = "/v3/company/{realm_id}/invoice"
    INVOICE_BY_ID = "/v3/company/{realm_id}/invoice/{invoice_id}"


class CredentialFields:
    REALM_ID = "realm_id"
    ACCESS_TOKEN = "access_token"
    REFRESH_TOKEN = "refresh_token"
    REFRESHED_AT = "refreshed_at"


# ============================================================================
# ERROR MESSAGES
# ============================================================================

class ErrorMessage:
    CREDENTIALS_NOT_FOUND = "No QuickBooks credentials stored for key: {key}"
    CREDENTIALS_MALFORMED = "Stored QuickBooks credentials are malformed: {error}"
    MALFORMED_NOTIFICATION = "Malformed notification payload"
    INVALID_SIGNATURE = "Invalid webhook signature"
    CREDENTIAL_STORAGE = "Credential storage unavailable"
    QUOTE_STORAGE = "Failed to save quote"
    MISSING_CODE_OR_REALM = "Missing code or realmId in callback"
    INVALID_STATE = "Invalid or expired state"
    TOKEN_EXCHANGE_REJECTED = "Token exchange rejected"


# ============================================================================
# LOG MESSAGES
# ============================================================================

class LogMessage:
    NOTIFICATION_RECEIVED = "Notification received: events={count}"
    EVENT_IGNORED = "Ignoring event: entity={entity_type}, operation={operation}, id={entity_id}"
    INVOICE_FETCH_UNAUTHORIZED = "Invoice fetch unauthorized, refreshing token: invoice_id={invoice_id}"
    INVOICE_FETCH_FAILED = "Invoice fetch failed, skipping: invoice_id={invoice_id}, error={error}"
    TOKEN_REFRESH_FAILED = "Token refresh failed, skipping: invoice_id={invoice_id}, error={error}"
    MISSING_FIELD = "Invoice missing required field, skipping: invoice_id={invoice_id}, field={field}"
    CUSTOMER_NOT_FOUND = "No customer found, skipping: invoice_id={invoice_id}, customer={customer}"
    SITE_NOT_FOUND = "No site found, skipping: invoice_id={invoice_id}, customer_id={customer_id}, address={address}"
    QUOTE_NOT_FOUND = "No quote found, skipping: invoice_id={invoice_id}, site_id={site_id}, date={date}"
    LINE_NOT_MATCHED = "No quoted product for line, skipping: invoice_id={invoice_id}, item={item}, normalized={normalized}"
    NO_MATCHING_LINES = "No invoice lines matched quote, skipping update: invoice_id={invoice_id}, quote_id={quote_id}"
    INVOICE_UPDATED = "Invoice updated: invoice_id={invoice_id}, quote_id={quote_id}, lines={lines}"
    INVOICE_UPDATE_FAILED = "Invoice update rejected: invoice_id={invoice_id}, error={error}, fault={fault}"
    UNEXPECTED_ERROR = "Unexpected error reconciling invoice: invoice_id={invoice_id}, error={error}"
    TOKENS_REFRESHED = "Tokens refreshed: key={key}, realm_id={realm_id}, rotated_refresh_token={rotated}"
    REFRESH_ALREADY_DONE = "Refresh token already exchanged, reusing access token: key={key}"
    CREDENTIALS_SAVED = "Credentials saved: key={key}, realm_id={realm_id}"


# ============================================================================
# TIMEOUTS
# ============================================================================

class Timeout:
    """Timeout values in seconds"""
    QUICKBOOKS_INVOICE_FETCH = 15.0
    QUICKBOOKS_INVOICE_UPDATE = 20.0
    DEFAULT_HTTP = 30.0


class StateTTL:
    OAUTH_STATE_SECONDS = 600


class TokenLifetime:
    """Access token lifetime used when the token endpoint omits expires_in"""
    ACCESS_TOKEN_SECONDS = 3600
    EXPIRY_MARGIN_SECONDS = 60


# ============================================================================
# DATABASE COLUMN SIZES
# ============================================================================

class ColumnSize:
    ID = 36
    CUSTOMER_NAME = 255
    EMAIL = 255
    ADDRESS = 500
    CREDENTIALS_KEY = 100
