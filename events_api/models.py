"""Data models for zip-code events."""
import re
from datetime import datetime
from typing import Any, Dict, Optional, Union
from uuid import uuid4

from events_api.errors import MalformedRecordError, ValidationError

ZIP_CODE_PATTERN = re.compile(r"[0-9]{5}")

# YYYY-MM-DDTHH:MM[:SS[.fraction]], fraction up to nanoseconds
LOCAL_DATETIME_PATTERN = re.compile(
    r"([0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2})(?::([0-9]{2})(?:\.([0-9]{1,9}))?)?"
)

# DynamoDB attribute names
ATTR_ID = "id"
ATTR_NAME = "name"
ATTR_LOCATION = "location"
ATTR_ZIP_CODE = "zipCode"
ATTR_DATE = "date"
ATTR_DESCRIPTION = "description"
ATTR_CATEGORY = "category"
ATTR_SOURCE_URL = "sourceUrl"

REQUIRED_ATTRIBUTES = (ATTR_ID, ATTR_NAME, ATTR_LOCATION, ATTR_ZIP_CODE, ATTR_DATE)
OPTIONAL_ATTRIBUTES = (ATTR_DESCRIPTION, ATTR_CATEGORY, ATTR_SOURCE_URL)


def validate_zip_code(zip_code: Optional[str]) -> str:
    """Return the zip code unchanged, or raise ValidationError unless it is exactly five digits."""
    if zip_code is None or not ZIP_CODE_PATTERN.fullmatch(zip_code):
        raise ValidationError("zip", "zip must be exactly five digits")
    return zip_code


def parse_local_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO local date-time (YYYY-MM-DDTHH:MM:SS).

    Seconds are optional and fractions beyond microseconds are truncated.

    Raises:
        ValueError: If the value is not a valid local date-time or carries a UTC offset
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        match = LOCAL_DATETIME_PATTERN.fullmatch(value)
        if match is None:
            raise ValueError(f"invalid local date-time: {value!r}")
        minutes, seconds, fraction = match.groups()
        normalized = f"{minutes}:{seconds or '00'}"
        if fraction:
            normalized += "." + fraction[:6].ljust(6, "0")
        parsed = datetime.fromisoformat(normalized)
    else:
        raise ValueError(f"invalid local date-time: {value!r}")

    if parsed.tzinfo is not None:
        raise ValueError(f"local date-time must not carry a UTC offset: {value!r}")
    return parsed


def format_local_datetime(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


class Event:
    """Event record keyed by (zip_code, id)."""

    def __init__(
        self,
        name: str,
        location: str,
        zip_code: str,
        date_time: Union[str, datetime],
        id: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        source_url: Optional[str] = None,
    ):
        if not isinstance(name, str) or not name:
            raise ValueError("event name must be a non-empty string")
        self.id = id or str(uuid4())
        self.name = name
        self.location = location
        self.zip_code = zip_code
        self.date_time = parse_local_datetime(date_time)
        self.description = description
        self.category = category
        self.source_url = source_url

    def __repr__(self) -> str:
        return (
            f"Event(id={self.id!r}, name={self.name!r}, zip_code={self.zip_code!r}, "
            f"date_time={format_local_datetime(self.date_time)!r})"
        )

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """Convert to a flat DynamoDB item; optional fields are written only when set."""
        item = {
            ATTR_ID: self.id,
            ATTR_NAME: self.name,
            ATTR_LOCATION: self.location,
            ATTR_ZIP_CODE: self.zip_code,
            ATTR_DATE: format_local_datetime(self.date_time),
        }
        optional = {
            ATTR_DESCRIPTION: self.description,
            ATTR_CATEGORY: self.category,
            ATTR_SOURCE_URL: self.source_url,
        }
        item.update({key: value for key, value in optional.items() if value is not None})
        return item

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]) -> "Event":
        """
        Create an Event from a DynamoDB item.

        Raises:
            MalformedRecordError: If a required attribute is missing, empty or not a string,
                an optional attribute is not a string, or the date does not parse
        """
        missing = [attr for attr in REQUIRED_ATTRIBUTES if item.get(attr) is None]
        if missing:
            raise MalformedRecordError(
                f"missing attributes {', '.join(missing)}",
                missing_fields=missing,
            )

        invalid = [
            attr for attr in REQUIRED_ATTRIBUTES
            if not isinstance(item[attr], str) or not item[attr]
        ]
        invalid += [
            attr for attr in OPTIONAL_ATTRIBUTES
            if item.get(attr) is not None and not isinstance(item[attr], str)
        ]
        if invalid:
            raise MalformedRecordError(f"empty or non-string attributes {', '.join(invalid)}")

        try:
            date_time = parse_local_datetime(item[ATTR_DATE])
        except ValueError as e:
            raise MalformedRecordError(str(e)) from e

        return cls(
            id=item[ATTR_ID],
            name=item[ATTR_NAME],
            location=item[ATTR_LOCATION],
            zip_code=item[ATTR_ZIP_CODE],
            date_time=date_time,
            description=item.get(ATTR_DESCRIPTION),
            category=item.get(ATTR_CATEGORY),
            source_url=item.get(ATTR_SOURCE_URL),
        )
