from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError
from quote_sync.models.invoice import Invoice, InvoiceLine, InvoiceLineUpdate
from quote_sync.models.notification import ChangeNotification
from quote_sync.models.quote import QuoteIntakeDTO
from quote_sync.models.reconciliation import ReconciliationOutcome


class TestChangeNotification:
    def test_notification_is_a_plain_request_model(self):
        notification = ChangeNotification.from_request({"entities": []})

        assert notification.events == []
        assert not hasattr(notification, "to_db_rows")

    def test_from_request_envelope(self):
        payload = {
            "eventNotifications": [
                {
                    "realmId": "realm_456",
                    "dataChangeEvent": {
                        "entities": [
                            {"name": "Invoice", "id": "130", "operation": "Create", "lastUpdated": "2024-05-01T10:00:00Z"},
                            {"name": "Customer", "id": 58, "operation": "Update"},
                        ]
                    },
                }
            ]
        }

        notification = ChangeNotification.from_request(payload)

        assert len(notification.events) == 2
        assert notification.events[0].is_invoice_create
        assert notification.events[0].realm_id == "realm_456"
        assert notification.events[1].entity_id == "58"
        assert not notification.events[1].is_invoice_create

    def test_from_request_flat_entities(self):
        notification = ChangeNotification.from_request(
            {"entities": [{"name": "Invoice", "id": "130", "operation": "Create"}]}
        )

        assert notification.events[0].entity_id == "130"
        assert notification.events[0].realm_id is None

    def test_from_request_without_entities_is_empty(self):
        assert ChangeNotification.from_request({}).events == []
        assert ChangeNotification.from_request({"eventNotifications": []}).events == []

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "text",
            {"eventNotifications": "nope"},
            {"eventNotifications": ["nope"]},
            {"eventNotifications": [{"dataChangeEvent": {"entities": {"name": "Invoice"}}}]},
            {"entities": ["Invoice"]},
        ],
    )
    def test_from_request_rejects_malformed_payload(self, payload):
        with pytest.raises(ValueError):
            ChangeNotification.from_request(payload)

    def test_from_request_rejects_entity_without_id(self):
        with pytest.raises(ValidationError):
            ChangeNotification.from_request({"entities": [{"name": "Invoice", "operation": "Create"}]})


class TestInvoice:
    def test_from_qbo_keeps_sales_lines_only(self):
        invoice = Invoice.from_qbo(
            {
                "Id": 130,
                "SyncToken": 0,
                "CustomerRef": {"value": "58", "name": " Acme Fuels "},
                "TxnDate": "2024-05-01",
                "Line": [
                    {
                        "Id": "1",
                        "Description": "Unleaded 87",
                        "DetailType": "SalesItemLineDetail",
                        "SalesItemLineDetail": {"Qty": 4, "UnitPrice": 2.5},
                    },
                    {"DetailType": "SubTotalLineDetail", "SubTotalLineDetail": {}},
                ],
            }
        )

        assert invoice.id == "130"
        assert invoice.sync_token == "0"
        assert invoice.customer_name == "Acme Fuels"
        assert invoice.bill_address_line1 is None
        assert invoice.transaction_date == date(2024, 5, 1)
        assert len(invoice.lines) == 1
        assert invoice.lines[0].product_name == "Unleaded 87"

    def test_from_qbo_unparseable_date_is_none(self):
        invoice = Invoice.from_qbo({"Id": "1", "SyncToken": "0", "TxnDate": "not-a-date"})

        assert invoice.transaction_date is None

    def test_from_qbo_requires_id(self):
        with pytest.raises(KeyError):
            Invoice.from_qbo({"SyncToken": "0"})

    def test_product_name_prefers_item_ref_name(self):
        line = InvoiceLine(description="Gas", item_ref={"value": "7", "name": "Premium"})

        assert line.product_name == "Premium"

    def test_line_update_to_qbo_without_optional_fields(self):
        update = InvoiceLineUpdate(
            quantity=Decimal("3"), unit_price=Decimal("3.333"), amount=Decimal("10.00")
        )

        assert update.to_qbo() == {
            "DetailType": "SalesItemLineDetail",
            "Amount": 10.0,
            "SalesItemLineDetail": {"Qty": 3.0, "UnitPrice": 3.333},
        }


class TestQuoteIntakeDTO:
    def test_from_request_reads_aliases(self):
        dto = QuoteIntakeDTO.from_request(
            {
                "customerName": "Acme Fuels",
                "customerEmail": "ops@acme.test",
                "siteAddress": "12 Depot Rd",
                "date": "2024-05-01",
                "products": [{"name": "87", "price": "3.10"}],
            }
        )

        assert dto.quote_date == date(2024, 5, 1)
        assert dto.products[0].price == Decimal("3.10")

    @pytest.mark.parametrize(
        "override",
        [
            {"products": []},
            {"products": [{"name": "87", "price": -1}]},
            {"date": "yesterday"},
            {"customerName": ""},
        ],
    )
    def test_from_request_rejects_invalid_quote(self, override):
        payload = {
            "customerName": "Acme Fuels",
            "customerEmail": "ops@acme.test",
            "siteAddress": "12 Depot Rd",
            "date": "2024-05-01",
            "products": [{"name": "87", "price": "3.10"}],
        }
        payload.update(override)

        with pytest.raises(ValidationError):
            QuoteIntakeDTO.from_request(payload)

    def test_to_response_requires_quote_id(self):
        dto = QuoteIntakeDTO.from_request(
            {
                "customerName": "Acme Fuels",
                "customerEmail": "ops@acme.test",
                "siteAddress": "12 Depot Rd",
                "date": "2024-05-01",
                "products": [{"name": "87", "price": "3.10"}],
            }
        )

        with pytest.raises(ValueError, match="Quote id not set"):
            dto.to_response()

        dto.quote_id = "quote_1"
        assert dto.to_response() == {"status": "saved", "quote_id": "quote_1"}


class TestReconciliationOutcome:
    def test_outcome_constructors(self):
        skipped = ReconciliationOutcome.skipped("130", "quote_not_found")
        failed = ReconciliationOutcome.failed("131", "boom")

        assert skipped.status == "skipped"
        assert skipped.reason == "quote_not_found"
        assert failed.status == "failed"
        assert not skipped.is_updated
        assert not failed.is_updated
