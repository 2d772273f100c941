"""
Serialization Transformer - Builds the create/update request from a SiteDraft.

The request is a full replacement of the stored site: every section is sent
on every save and the backend treats it as authoritative.
"""

import logging
from dataclasses import asdict
from typing import Any, Optional

from heritagedesk.models import (
    AudioGuide,
    EntryType,
    Language,
    MediaItem,
    MediaType,
    SaveOption,
    SiteDraft,
    SiteStatus,
    TransportCategory,
)
from heritagedesk.schedule import schedule_to_visiting_hours
from heritagedesk.translations import build_translation_rows
from heritagedesk.utils.config import config

logger = logging.getLogger('HeritageDesk')


def to_number(value: Any, default: Optional[float] = 0) -> Optional[float]:
    """
    Coerce editor input to a number.

    Args:
        value: Number or numeric string
        default: Returned for blank or unparseable input

    Returns:
        int for whole numbers, float otherwise, or the default
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return int(number) if number.is_integer() else number


def _clean(value: Optional[str]) -> Optional[str]:
    """Trimmed text, or None when blank."""
    if value is None:
        return None
    return value.strip() or None


def media_type_for(item: MediaItem) -> str:
    """Media type from the attached file's MIME type, defaulting to image."""
    if item.source_file is not None:
        mime_type = item.source_file.mime_type
        if mime_type.startswith("image/"):
            return MediaType.IMAGE
        if mime_type.startswith("audio/"):
            return MediaType.AUDIO
        if mime_type.startswith("video/"):
            return MediaType.VIDEO
    return MediaType.IMAGE


def _gallery_rows(media: list[MediaItem]) -> list[dict]:
    rows = []
    for item in media:
        if not item.preview_url:
            logger.debug(f"Skipping media item {item.id} without a URL")
            continue
        media_type = media_type_for(item)
        rows.append({
            "media_type": media_type,
            "storage_url": item.preview_url,
            "thumbnail_url": item.preview_url,
            "label": item.label or None,
            "language_code": Language.ENGLISH if media_type == MediaType.AUDIO else None,
            "duration_seconds": None,
            "is_primary": bool(item.is_primary),
            "position": len(rows) + 1,
        })
    return rows


def _audio_rows(guides: list[AudioGuide], start: int) -> list[dict]:
    rows = []
    for guide in guides:
        if not guide.url:
            continue
        label = (
            (guide.source_file.name if guide.source_file else None)
            or guide.file_name
            or f"Audio guide ({guide.language.upper()})"
        )
        rows.append({
            "media_type": MediaType.AUDIO,
            "storage_url": guide.url,
            "thumbnail_url": None,
            "label": label,
            "language_code": guide.language,
            "duration_seconds": guide.duration_seconds,
            "is_primary": False,
            "position": start + len(rows) + 1,
        })
    return rows


def build_media(draft: SiteDraft) -> list[dict]:
    """
    Gallery rows followed by audio-guide rows, numbered continuously.

    The first row is forced primary when nothing else is, independently of
    the editor-level check.
    """
    gallery = _gallery_rows(draft.media)
    media = gallery + _audio_rows(draft.audio_guides, start=len(gallery))
    if media and not any(row["is_primary"] for row in media):
        media[0]["is_primary"] = True
    return media


def build_ticket_types(draft: SiteDraft) -> list[dict]:
    """Fee rows for paid sites; free sites send none."""
    if draft.ticketing.entry_type != EntryType.PAID:
        return []
    return [
        {
            "visitor_type": fee.visitor_type.strip(),
            "amount": to_number(fee.amount),
            "currency": config.currency,
            "notes": _clean(fee.notes),
        }
        for fee in draft.ticketing.fees
        if fee.visitor_type and fee.visitor_type.strip()
    ]


def build_transportation(draft: SiteDraft) -> list[dict]:
    rows = []
    for option in draft.transport:
        if not (option.name or "").strip():
            continue
        rows.append({
            "category": TransportCategory.TRANSPORT,
            "mode": option.mode or None,
            "name": option.name.strip(),
            "description": _clean(option.notes),
            "distance_km": to_number(option.distance_km, default=None),
            "travel_time_minutes": None,
            "notes": _clean(option.notes),
            "contact_info": None,
        })
    for attraction in draft.attractions:
        if not (attraction.name or "").strip():
            continue
        rows.append({
            "category": TransportCategory.ATTRACTION,
            "mode": None,
            "name": attraction.name.strip(),
            "description": _clean(attraction.notes),
            "distance_km": to_number(attraction.distance_km, default=None),
            "travel_time_minutes": None,
            "notes": _clean(attraction.notes),
            "contact_info": None,
        })
    return rows


def build_etiquettes(draft: SiteDraft) -> list[dict]:
    return [
        {
            "rule_title": text.strip(),
            "rule_description": None,
            "icon_name": None,
            "importance_level": "normal",
        }
        for text in draft.cultural_etiquettes
        if text.strip()
    ]


def status_flags(save_option: str) -> tuple[str, bool]:
    """Map the save option to (status, is_active)."""
    if save_option == SaveOption.APPROVAL:
        return SiteStatus.PENDING_REVIEW, True
    return SiteStatus.DRAFT, False


def build_site(draft: SiteDraft) -> dict:
    """Core record; location fields are also sent on the English translation row."""
    status, is_active = status_flags(draft.admin.save_option)
    ticketing = draft.ticketing
    paid = ticketing.entry_type == EntryType.PAID
    video_url = _clean(draft.video_360_url)

    return {
        "name_default": draft.name.strip(),
        "short_desc_default": _clean(draft.short_description),
        "full_desc_default": _clean(draft.full_description),
        "city": _clean(draft.city),
        "state": _clean(draft.state),
        "country": _clean(draft.country),
        "latitude": to_number(draft.latitude, default=None),
        "longitude": to_number(draft.longitude, default=None),
        "vr_link": video_url,
        "video_360_url": video_url,
        "ar_mode_available": draft.ar_mode_available,
        "is_active": is_active,
        "status": status,
        "entry_type": ticketing.entry_type,
        "entry_fee": to_number(ticketing.fees[0].amount) if paid and ticketing.fees else 0,
        "booking_url": _clean(ticketing.booking_url),
        "booking_online_available": ticketing.online_booking_available,
        "site_map_url": draft.site_map_url or None,
        "amenities": [asdict(amenity) for amenity in draft.amenities],
        "overview_translations": dict(draft.overview_translations),
        "history_translations": dict(draft.history_translations),
        "cultural_etiquettes": list(draft.cultural_etiquettes),
        "location_address": _clean(draft.address),
        "location_area": _clean(draft.area),
        "location_city": _clean(draft.city),
        "location_state": _clean(draft.state),
        "location_country": _clean(draft.country),
        "location_postal_code": _clean(draft.postal_code),
    }


def serialize_draft(draft: SiteDraft, languages: list[str] = Language.ALL) -> dict:
    """
    Build the create/update request for a draft.

    Args:
        draft: Draft to serialize
        languages: Supported language codes, in translation-row order

    Returns:
        Request dict with site, media, visitingHours, ticketTypes,
        transportation, amenities, etiquettes and translations
    """
    request = {
        "site": build_site(draft),
        "media": build_media(draft),
        "visitingHours": schedule_to_visiting_hours(draft.opening_hours),
        "ticketTypes": build_ticket_types(draft),
        "transportation": build_transportation(draft),
        "amenities": [asdict(amenity) for amenity in draft.amenities],
        "etiquettes": build_etiquettes(draft),
        "translations": build_translation_rows(
            draft.name,
            draft.overview_translations,
            draft.history_translations,
            location={
                "address": draft.address,
                "city": draft.city,
                "state": draft.state,
                "country": draft.country,
            },
            languages=languages,
        ),
    }
    logger.debug(
        f"Serialized '{draft.name}': {len(request['media'])} media, "
        f"{len(request['ticketTypes'])} ticket types, {len(request['translations'])} translations"
    )
    return request
