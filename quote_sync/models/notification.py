from pydantic import BaseModel, ConfigDict, Field

from quote_sync.common.constants import NotificationFields, WebhookEntity, WebhookOperation


class EntityChange(BaseModel):
    entity_type: str = Field(..., alias=NotificationFields.NAME)
    entity_id: str = Field(..., alias=NotificationFields.ID)
    operation: str = Field(..., alias=NotificationFields.OPERATION)
    last_updated: str | None = Field(None, alias=NotificationFields.LAST_UPDATED)
    realm_id: str | None = None

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    @property
    def is_invoice_create(self) -> bool:
        return self.entity_type == WebhookEntity.INVOICE and self.operation == WebhookOperation.CREATE


class ChangeNotification(BaseModel):
    """Inbound QuickBooks change notification, flattened to its entity events"""

    events: list[EntityChange] = []

    @classmethod
    def from_request(cls, payload) -> "ChangeNotification":
        """
        Accepts both the QuickBooks envelope
        ``{"eventNotifications": [{"realmId", "dataChangeEvent": {"entities": [...]}}]}``
        and a bare ``{"entities": [...]}`` body. Raises ValueError on a structurally
        invalid payload; absent entity lists yield an empty notification.
        """
        if not isinstance(payload, dict):
            raise ValueError("Notification payload must be a JSON object")

        events: list[EntityChange] = []
        if NotificationFields.EVENT_NOTIFICATIONS in payload:
            notifications = payload[NotificationFields.EVENT_NOTIFICATIONS] or []
            if not isinstance(notifications, list):
                raise ValueError("eventNotifications must be a list")
            for notification in notifications:
                if not isinstance(notification, dict):
                    raise ValueError("eventNotifications entries must be objects")
                realm_id = notification.get(NotificationFields.REALM_ID)
                change_event = notification.get(NotificationFields.DATA_CHANGE_EVENT) or {}
                if not isinstance(change_event, dict):
                    raise ValueError("dataChangeEvent must be an object")
                events.extend(cls._parse_entities(change_event.get(NotificationFields.ENTITIES), realm_id))
        else:
            events.extend(cls._parse_entities(payload.get(NotificationFields.ENTITIES), None))

        return cls(events=events)

    @staticmethod
    def _parse_entities(entities, realm_id: str | None) -> list[EntityChange]:
        if not entities:
            return []
        if not isinstance(entities, list):
            raise ValueError("entities must be a list")
        if not all(isinstance(entity, dict) for entity in entities):
            raise ValueError("entities entries must be objects")
        return [EntityChange.model_validate({**entity, "realm_id": realm_id}) for entity in entities]
