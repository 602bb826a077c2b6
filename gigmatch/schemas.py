"""
Pydantic models for the documents the matching core reads.

Records arrive straight from the document store, so the models:
1. Accept the store's camelCase keys as well as snake_case names
2. Keep unknown fields around (extra='allow') so callers get them back
3. Turn malformed optional values into "absent" instead of failing

Coordinates are always (longitude, latitude), GeoJSON order.
"""
import logging
import math
from datetime import date, datetime, time, timezone
from typing import Any, List, Optional, Tuple

from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from gigmatch.exceptions import InvalidDocumentError

logger = logging.getLogger(__name__)

Coordinates = Tuple[float, float]


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a datetime from a datetime, date, ISO string or epoch millis."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # Document stores serialize dates as epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            logger.debug(f"Unparseable date value: {value!r}")
            return None
    return None


def normalize_coordinates(value: Any) -> Optional[Coordinates]:
    """Accept [lng, lat] or a GeoJSON point; anything else means no coordinates."""
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if isinstance(value, dict):
        value = value.get("coordinates")
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    lng, lat = value
    if isinstance(lng, bool) or isinstance(lat, bool):
        return None
    try:
        return float(lng), float(lat)
    except (TypeError, ValueError):
        return None


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v is not None]
    return []


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _mapping_or_none(value: Any) -> Any:
    """Sub-documents must be mappings (or models); anything else is absent."""
    if isinstance(value, (dict, BaseModel)):
        return value
    return None


def _whole_number(value: Any, default: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return int(value)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', 'yes', '1')
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


class DocumentModel(BaseModel):
    """Base for store documents: camelCase aliases, extra fields kept."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='allow',
    )

    @classmethod
    def coerce(cls, obj: Any, kind: Optional[str] = None):
        """Validate a mapping (or another model) into this model.

        Raises InvalidDocumentError for a missing record or one that is not
        a mapping at all.
        """
        kind = kind or cls.__name__
        if obj is None:
            raise InvalidDocumentError(kind, "record is missing")
        if isinstance(obj, cls):
            return obj
        if isinstance(obj, BaseModel):
            obj = obj.model_dump(by_alias=True)
        try:
            return cls.model_validate(obj)
        except ValidationError as e:
            raise InvalidDocumentError(kind, str(e)) from e


class Location(DocumentModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    coordinates: Optional[Coordinates] = None

    @field_validator('city', 'state', 'country', mode='before')
    @classmethod
    def _text(cls, v):
        return _text_or_none(v)

    @field_validator('coordinates', mode='before')
    @classmethod
    def _coordinates(cls, v):
        return normalize_coordinates(v)


class Rating(DocumentModel):
    average: float = 0.0
    total_reviews: int = 0

    @field_validator('average', mode='before')
    @classmethod
    def _average(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
            return 0
        return v

    @field_validator('total_reviews', mode='before')
    @classmethod
    def _count(cls, v):
        return _whole_number(v)


class SubscriptionFeatures(DocumentModel):
    leads_per_month: int = 5
    ai_boosted: bool = False
    location_filtering: bool = False
    skill_filtering: bool = False
    portfolio_gallery: bool = False
    group_accounts: bool = False
    priority_listing: bool = False

    @field_validator('leads_per_month', mode='before')
    @classmethod
    def _quota(cls, v):
        return _whole_number(v, default=5)

    @field_validator('ai_boosted', 'location_filtering', 'skill_filtering',
                     'portfolio_gallery', 'group_accounts', 'priority_listing', mode='before')
    @classmethod
    def _flags(cls, v):
        return _flag(v)


class SubscriptionUsage(DocumentModel):
    leads_used: int = 0
    last_reset_date: Optional[datetime] = None

    @field_validator('leads_used', mode='before')
    @classmethod
    def _used(cls, v):
        return _whole_number(v)

    @field_validator('last_reset_date', mode='before')
    @classmethod
    def _date(cls, v):
        return parse_datetime(v)


class Subscription(DocumentModel):
    """A talent's or planner's plan; tier names follow the billing catalogue."""
    tier: str = "free-basic"
    status: str = "active"
    features: SubscriptionFeatures = Field(default_factory=SubscriptionFeatures)
    usage: SubscriptionUsage = Field(default_factory=SubscriptionUsage)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('tier', 'status', mode='before')
    @classmethod
    def _names(cls, v, info):
        if isinstance(v, str):
            return v
        return "free-basic" if info.field_name == 'tier' else "active"

    @field_validator('features', 'usage', mode='before')
    @classmethod
    def _missing_is_default(cls, v, info):
        if _mapping_or_none(v) is None:
            return SubscriptionFeatures() if info.field_name == 'features' else SubscriptionUsage()
        return v

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def _dates(cls, v):
        return parse_datetime(v)


class UserProfile(DocumentModel):
    """Fields shared by every user role; also used for the viewing user."""
    id: Optional[Any] = Field(None, alias='_id')
    role: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    location: Optional[Location] = None
    subscription: Optional[Subscription] = None

    @field_validator('role', mode='before')
    @classmethod
    def _role(cls, v):
        return _text_or_none(v)

    @field_validator('skills', mode='before')
    @classmethod
    def _skills(cls, v):
        return _string_list(v)

    @field_validator('location', mode='before')
    @classmethod
    def _location(cls, v):
        # Free-text locations ("NYC") carry no coordinates
        return _mapping_or_none(v)

    @field_validator('subscription', mode='before')
    @classmethod
    def _populated_subscription(cls, v):
        # An unpopulated reference (bare id) carries no plan data
        return _mapping_or_none(v)

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self.location.coordinates if self.location else None


ViewingUser = UserProfile


class TalentProfile(UserProfile):
    category: Optional[str] = None
    subcategory: Optional[str] = None
    availability: Optional[str] = None
    rating: Rating = Field(default_factory=Rating)
    is_verified: bool = False
    is_active: bool = True
    competency_level: Optional[str] = None

    @field_validator('rating', mode='before')
    @classmethod
    def _rating(cls, v):
        return Rating() if _mapping_or_none(v) is None else v

    @field_validator('is_verified', mode='before')
    @classmethod
    def _verified(cls, v):
        return _flag(v)

    @field_validator('is_active', mode='before')
    @classmethod
    def _active(cls, v):
        return True if v is None else _flag(v)

    @field_validator('availability', 'category', 'subcategory', 'competency_level', mode='before')
    @classmethod
    def _text(cls, v):
        return _text_or_none(v)


class EventPosting(DocumentModel):
    id: Optional[Any] = Field(None, alias='_id')
    title: Optional[str] = None
    type: Optional[str] = None
    location: Optional[Location] = None
    budget: Optional[float] = None
    date: Optional[datetime] = None
    status: str = "open"
    musician_category: Optional[str] = None
    musician_types: List[str] = Field(default_factory=list)
    musician_count: Optional[int] = None
    genre: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_by: Optional[Any] = None

    @field_validator('date', mode='before')
    @classmethod
    def _date(cls, v):
        return parse_datetime(v)

    @field_validator('location', mode='before')
    @classmethod
    def _location(cls, v):
        return _mapping_or_none(v)

    @field_validator('musician_types', 'tags', mode='before')
    @classmethod
    def _lists(cls, v):
        return _string_list(v)

    @field_validator('title', 'type', 'musician_category', 'genre', mode='before')
    @classmethod
    def _text(cls, v):
        return _text_or_none(v)

    @field_validator('budget', 'musician_count', mode='before')
    @classmethod
    def _numbers(cls, v, info):
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
            return None
        if info.field_name == 'musician_count':
            return int(v)
        return v

    @field_validator('status', mode='before')
    @classmethod
    def _status(cls, v):
        return v if isinstance(v, str) else "open"

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self.location.coordinates if self.location else None
