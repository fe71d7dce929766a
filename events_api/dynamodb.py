"""DynamoDB access for zip-code events."""
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from events_api.errors import MalformedRecordError, StoreError
from events_api.fallback import generate_fallback_events, should_use_fallback
from events_api.models import ATTR_ID, ATTR_ZIP_CODE, Event
from shared.logger import get_logger

logger = get_logger(__name__)

STORE_ERRORS = (ClientError, BotoCoreError)


def _error_code(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "")
    return type(error).__name__


async def ensure_table_exists(client, table_name: str) -> None:
    """Create the events table if it doesn't exist (idempotent)."""
    try:
        await client.describe_table(TableName=table_name)
        logger.info("dynamodb_table_exists", table_name=table_name)
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceNotFoundException":
            raise
        try:
            await client.create_table(
                TableName=table_name,
                KeySchema=[
                    {"AttributeName": ATTR_ZIP_CODE, "KeyType": "HASH"},  # Partition key
                    {"AttributeName": ATTR_ID, "KeyType": "RANGE"},  # Sort key
                ],
                AttributeDefinitions=[
                    {"AttributeName": ATTR_ZIP_CODE, "AttributeType": "S"},
                    {"AttributeName": ATTR_ID, "AttributeType": "S"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
            logger.info("dynamodb_table_created", table_name=table_name)
        except ClientError as create_error:
            logger.error(
                "dynamodb_table_creation_failed",
                table_name=table_name,
                error=str(create_error),
            )
            raise


class EventStore:
    """
    Reads and writes events in the DynamoDB events table.

    The table handle is opened once at startup and shared across requests.
    """

    def __init__(self, table):
        """
        Initialize the event store.

        Args:
            table: An open aioboto3 DynamoDB Table resource
        """
        self.table = table

    async def _query_partition(self, zip_code: str) -> List[Dict[str, Any]]:
        """Fetch every item in a zip code partition, following LastEvaluatedKey."""
        query_kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key(ATTR_ZIP_CODE).eq(zip_code),
        }
        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = await self.table.query(**query_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    return items
                query_kwargs["ExclusiveStartKey"] = last_key
        except STORE_ERRORS as e:
            raise StoreError("query", _error_code(e)) from e

    def _map_items(self, zip_code: str, items: List[Dict[str, Any]]) -> List[Event]:
        events = []
        for item in items:
            try:
                events.append(Event.from_dynamodb_item(item))
            except MalformedRecordError as e:
                logger.warning(
                    "malformed_record_skipped",
                    zip_code=zip_code,
                    event_id=item.get(ATTR_ID),
                    reason=e.reason,
                )
        return events

    async def find_events_by_zip_code(self, zip_code: str) -> List[Event]:
        """
        Find events for a zip code, falling back to placeholder events.

        Never raises for store failures: a failed query is logged and answered
        like an empty partition.

        Args:
            zip_code: Five-digit zip code (validated by the caller)

        Returns:
            Non-empty list of stored or generated events
        """
        error: Optional[StoreError] = None
        try:
            items = await self._query_partition(zip_code)
        except StoreError as e:
            logger.error(
                "events_query_failed",
                zip_code=zip_code,
                error_code=e.error_code,
                error=str(e.__cause__),
            )
            error = e
            items = []

        events = self._map_items(zip_code, items)

        if should_use_fallback(events, error):
            events = generate_fallback_events(zip_code)
            logger.info(
                "fallback_events_generated",
                zip_code=zip_code,
                reason="store_error" if error else "no_results",
                count=len(events),
            )
            return events

        logger.info("events_found", zip_code=zip_code, returned=len(events))
        return events

    async def save_event(self, event: Event) -> None:
        """
        Upsert an event; any item with the same (zipCode, id) is overwritten.

        Raises:
            StoreError: If the DynamoDB write fails
        """
        try:
            await self.table.put_item(Item=event.to_dynamodb_item())
        except STORE_ERRORS as e:
            logger.error(
                "event_save_failed",
                event_id=event.id,
                zip_code=event.zip_code,
                error=str(e),
            )
            raise StoreError("put_item", _error_code(e)) from e

        logger.info("event_saved", event_id=event.id, zip_code=event.zip_code)

    async def get_event(self, zip_code: str, event_id: str) -> Optional[Event]:
        """
        Fetch a single event by key.

        Raises:
            StoreError: If the DynamoDB read fails
            MalformedRecordError: If the stored item cannot be mapped
        """
        try:
            response = await self.table.get_item(
                Key={ATTR_ZIP_CODE: zip_code, ATTR_ID: event_id}
            )
        except STORE_ERRORS as e:
            logger.error(
                "event_get_failed",
                event_id=event_id,
                zip_code=zip_code,
                error=str(e),
            )
            raise StoreError("get_item", _error_code(e)) from e

        item = response.get("Item")
        if item is None:
            return None
        return Event.from_dynamodb_item(item)

    async def delete_event(self, zip_code: str, event_id: str) -> None:
        """
        Delete an event by key; deleting a missing event is not an error.

        Raises:
            StoreError: If the DynamoDB delete fails
        """
        try:
            await self.table.delete_item(Key={ATTR_ZIP_CODE: zip_code, ATTR_ID: event_id})
        except STORE_ERRORS as e:
            logger.error(
                "event_delete_failed",
                event_id=event_id,
                zip_code=zip_code,
                error=str(e),
            )
            raise StoreError("delete_item", _error_code(e)) from e

        logger.info("event_deleted", event_id=event_id, zip_code=zip_code)
