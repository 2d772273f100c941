"""
Data models for the heritage-site editor.

Holds the named constants shared by both directions of the transform
(weekdays, languages, entry types) and the dataclasses that make up a
SiteDraft.
"""

import mimetypes
from dataclasses import dataclass, field
from typing import Optional

from heritagedesk.utils.config import config


class Weekday:
    """Canonical weekdays of the opening-hours schedule."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    ALL = [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY]

    @classmethod
    def from_number(cls, number: int) -> Optional[str]:
        """Resolve an ISO weekday number (1 = Monday) to its name."""
        if 1 <= number <= len(cls.ALL):
            return cls.ALL[number - 1]
        return None


class Language:
    """Languages the editor keeps overview, history and audio content for."""
    ENGLISH = "en"
    GUJARATI = "gu"
    HINDI = "hi"
    SPANISH = "es"

    ALL = [ENGLISH, GUJARATI, HINDI, SPANISH]

    @classmethod
    def get_display_name(cls, code: str) -> str:
        """Get human-readable name for a language code."""
        names = {
            cls.ENGLISH: "English",
            cls.GUJARATI: "Gujarati",
            cls.HINDI: "Hindi",
            cls.SPANISH: "Spanish",
        }
        return names.get(code.lower(), code.upper())


class EntryType:
    FREE = "free"
    PAID = "paid"


class SaveOption:
    DRAFT = "draft"
    APPROVAL = "approval"


class SiteStatus:
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"


class MediaType:
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"


class TransportCategory:
    TRANSPORT = "transport"
    ATTRACTION = "attraction"


DEFAULT_OPENING_TIME = "09:00"
DEFAULT_CLOSING_TIME = "18:00"
DEFAULT_CLOSED_DAYS = (Weekday.SUNDAY,)


@dataclass
class SourceFile:
    """A file attached locally in the editor, not yet uploaded."""
    name: str
    content_type: str = ""
    size: Optional[int] = None

    @property
    def mime_type(self) -> str:
        if self.content_type:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or ""


@dataclass
class OpeningDay:
    """One canonical day of the weekly schedule."""
    day: str
    is_open: bool
    opening_time: str = DEFAULT_OPENING_TIME
    closing_time: str = DEFAULT_CLOSING_TIME


@dataclass
class Amenity:
    name: str
    icon: Optional[str] = None


@dataclass
class MediaItem:
    """Gallery entry; exactly one item of a non-empty gallery is primary."""
    id: str
    source_file: Optional[SourceFile] = None
    preview_url: Optional[str] = None
    label: Optional[str] = None
    is_primary: bool = False


@dataclass
class AudioGuide:
    """Audio guide slot for one supported language."""
    language: str
    url: str = ""
    duration_seconds: Optional[int] = None
    file_name: Optional[str] = None
    source_file: Optional[SourceFile] = None

    @property
    def is_provided(self) -> bool:
        return self.source_file is not None or bool(self.url)


@dataclass
class FeeBreakup:
    visitor_type: str
    amount: float | str = 0
    notes: Optional[str] = None


@dataclass
class TransportOption:
    mode: str
    name: str = ""
    distance_km: Optional[float] = None
    notes: Optional[str] = None


@dataclass
class Attraction:
    name: str
    distance_km: Optional[float] = None
    notes: Optional[str] = None


@dataclass
class Ticketing:
    """Entry type, booking details and the fee breakdown (paid sites only)."""
    entry_type: str = EntryType.FREE
    booking_url: str = ""
    online_booking_available: bool = False
    fees: list[FeeBreakup] = field(default_factory=list)


@dataclass
class AdminMeta:
    """Reviewer-facing options; only save_option reaches the backend."""
    save_option: str = SaveOption.DRAFT
    notes: str = ""


def empty_translation_map(languages: list[str] = Language.ALL) -> dict[str, str]:
    """Scaffold with an empty entry for every supported language."""
    return {code: "" for code in languages}


def empty_audio_guides(languages: list[str] = Language.ALL) -> list[AudioGuide]:
    return [AudioGuide(language=code) for code in languages]


def default_schedule(day_order: list[str] = Weekday.ALL) -> list[OpeningDay]:
    """Create-mode schedule: open 09:00-18:00 every day except Sunday."""
    return [
        OpeningDay(day=day, is_open=day not in DEFAULT_CLOSED_DAYS)
        for day in day_order
    ]


@dataclass
class SiteDraft:
    """
    Editable representation of one heritage site during an edit session.

    Latitude and longitude are kept as the decimal strings typed in the
    editor; serialization converts them to numbers.
    """
    site_id: Optional[int] = None
    is_edit: bool = False
    name: str = ""
    short_description: str = ""
    full_description: str = ""
    address: str = ""
    area: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: str = ""
    latitude: str = ""
    longitude: str = ""
    video_360_url: str = ""
    ar_mode_available: bool = False
    site_map_url: Optional[str] = None
    opening_hours: list[OpeningDay] = field(default_factory=default_schedule)
    amenities: list[Amenity] = field(default_factory=list)
    media: list[MediaItem] = field(default_factory=list)
    audio_guides: list[AudioGuide] = field(default_factory=empty_audio_guides)
    overview_translations: dict[str, str] = field(default_factory=empty_translation_map)
    history_translations: dict[str, str] = field(default_factory=empty_translation_map)
    ticketing: Ticketing = field(default_factory=Ticketing)
    transport: list[TransportOption] = field(default_factory=list)
    attractions: list[Attraction] = field(default_factory=list)
    cultural_etiquettes: list[str] = field(default_factory=list)
    admin: AdminMeta = field(default_factory=AdminMeta)

    @classmethod
    def empty(cls) -> "SiteDraft":
        """Blank create-mode draft."""
        return cls(country=config.default_country)


__all__ = [
    'Weekday',
    'Language',
    'EntryType',
    'SaveOption',
    'SiteStatus',
    'MediaType',
    'TransportCategory',
    'SourceFile',
    'OpeningDay',
    'Amenity',
    'MediaItem',
    'AudioGuide',
    'FeeBreakup',
    'TransportOption',
    'Attraction',
    'Ticketing',
    'AdminMeta',
    'SiteDraft',
    'default_schedule',
    'empty_audio_guides',
    'empty_translation_map',
]
