"""
Hydration Transformer - Turns a stored site detail into an editable SiteDraft.

The detail aggregate returned by the backend looks like:

    {
        "site": {...core record, incl. overview/history translation maps...},
        "visitingHours": [...],
        "media": [...gallery and audio rows...],
        "ticketTypes": [...],
        "transportation": [...rows tagged transport/attraction...],
    }

Optional "translations", "amenities" and "etiquettes" lists are used when the
core record does not carry the same data.
"""

import logging
from typing import Any, Optional

from heritagedesk.editors import media_editor
from heritagedesk.exceptions import LoadError
from heritagedesk.models import (
    AdminMeta,
    Amenity,
    Attraction,
    AudioGuide,
    EntryType,
    FeeBreakup,
    Language,
    MediaItem,
    MediaType,
    SaveOption,
    SiteDraft,
    Ticketing,
    TransportCategory,
    TransportOption,
    empty_translation_map,
)
from heritagedesk.schedule import normalize_schedule

logger = logging.getLogger('HeritageDesk')


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _coordinate(value: Any) -> str:
    return "" if value is None or value == "" else str(value)


def _sorted_media(rows: list[dict]) -> list[dict]:
    # Rows without a position keep their relative order after positioned ones
    return sorted(
        rows,
        key=lambda row: (row.get("position") is None, row.get("position") or 0),
    )


def _hydrate_gallery(rows: list[dict]) -> list[MediaItem]:
    gallery = [row for row in rows if row.get("media_type") != MediaType.AUDIO]
    items = [
        MediaItem(
            id=str(row["media_id"]) if row.get("media_id") is not None else f"{row.get('media_type') or 'media'}-{index}",
            preview_url=row.get("storage_url"),
            label=row.get("label"),
            is_primary=bool(row.get("is_primary")),
        )
        for index, row in enumerate(gallery)
    ]
    return media_editor.ensure_primary(items)


def _hydrate_audio_guides(rows: list[dict], languages: list[str]) -> list[AudioGuide]:
    guides = []
    for code in languages:
        match = next(
            (
                row for row in rows
                if row.get("media_type") == MediaType.AUDIO
                and (row.get("language_code") or "").lower() == code
            ),
            None,
        )
        if match is None:
            guides.append(AudioGuide(language=code))
            continue
        guides.append(AudioGuide(
            language=code,
            url=match.get("storage_url") or "",
            duration_seconds=match.get("duration_seconds"),
            file_name=match.get("label"),
        ))
    return guides


def _hydrate_translations(
    site: dict,
    rows: list[dict],
    languages: list[str],
) -> tuple[dict[str, str], dict[str, str]]:
    """
    Rebuild the overview/history maps.

    Layers, later ones winning: empty scaffold for every supported language,
    short_desc/full_desc of translation rows, the maps stored on the site.
    Languages outside the supported set are kept so a save does not drop them.
    """
    overview = empty_translation_map(languages)
    history = empty_translation_map(languages)

    for row in rows:
        code = (row.get("language_code") or "").lower()
        if not code:
            continue
        if row.get("short_desc"):
            overview[code] = row["short_desc"]
        if row.get("full_desc"):
            history[code] = row["full_desc"]

    for target, stored in (
        (overview, site.get("overview_translations")),
        (history, site.get("history_translations")),
    ):
        for code, text in (stored or {}).items():
            target[code.lower()] = _text(text)

    return overview, history


def _hydrate_transport(rows: list[dict]) -> tuple[list[TransportOption], list[Attraction]]:
    transport = [
        TransportOption(
            mode=row.get("mode") or "",
            name=_text(row.get("name")),
            distance_km=row.get("distance_km"),
            notes=row.get("notes"),
        )
        for row in rows
        if row.get("category") == TransportCategory.TRANSPORT
    ]
    attractions = [
        Attraction(
            name=_text(row.get("name")),
            distance_km=row.get("distance_km"),
            notes=row.get("notes"),
        )
        for row in rows
        if row.get("category") == TransportCategory.ATTRACTION
    ]
    return transport, attractions


def _hydrate_ticketing(site: dict, ticket_rows: list[dict]) -> Ticketing:
    entry_type = site.get("entry_type") or EntryType.FREE
    fees = []
    if entry_type == EntryType.PAID:
        fees = [
            FeeBreakup(
                visitor_type=_text(row.get("visitor_type")),
                amount=row.get("amount") if row.get("amount") is not None else 0,
                notes=row.get("notes"),
            )
            for row in ticket_rows
        ]
    elif ticket_rows:
        logger.debug(f"Dropping {len(ticket_rows)} stored fee rows for a free site")

    return Ticketing(
        entry_type=entry_type,
        booking_url=_text(site.get("booking_url")),
        online_booking_available=bool(site.get("booking_online_available")),
        fees=fees,
    )


def _hydrate_amenities(site: dict, detail: dict) -> list[Amenity]:
    rows = site.get("amenities")
    if rows is None:
        rows = detail.get("amenities") or []
    return [Amenity(name=_text(row.get("name")), icon=row.get("icon")) for row in rows]


def _hydrate_etiquettes(site: dict, detail: dict) -> list[str]:
    stored = site.get("cultural_etiquettes")
    if stored is not None:
        return [_text(text) for text in stored]
    return [
        _text(row.get("rule_title") or row.get("etiquette_text"))
        for row in detail.get("etiquettes") or []
        if row.get("rule_title") or row.get("etiquette_text")
    ]


def hydrate_draft(
    detail: Optional[dict],
    site_id: Optional[int] = None,
    languages: list[str] = Language.ALL,
) -> SiteDraft:
    """
    Convert a stored site detail aggregate into an edit-mode SiteDraft.

    Missing parts of the aggregate (visiting hours, media, ...) hydrate to
    their defaults; only a missing core record is an error.

    Args:
        detail: Aggregate with site, visitingHours, media, ticketTypes, transportation
        site_id: Site identifier (None = taken from the core record)
        languages: Supported language codes

    Returns:
        Populated SiteDraft

    Raises:
        LoadError: The aggregate has no core site record
    """
    if not detail or not detail.get("site"):
        raise LoadError("Heritage site detail has no core site record")

    site = detail["site"]
    site_id = site_id if site_id is not None else site.get("site_id")
    logger.info(f"Hydrating heritage site {site_id}: {site.get('name_default', '')}")

    media_rows = _sorted_media(detail.get("media") or [])
    overview, history = _hydrate_translations(site, detail.get("translations") or [], languages)
    transport, attractions = _hydrate_transport(detail.get("transportation") or [])

    return SiteDraft(
        site_id=site_id,
        is_edit=True,
        name=_text(site.get("name_default")),
        short_description=_text(site.get("short_desc_default")),
        full_description=_text(site.get("full_desc_default")),
        address=_text(site.get("location_address")),
        area=_text(site.get("location_area")),
        city=_text(site.get("location_city")),
        state=_text(site.get("location_state")),
        country=_text(site.get("location_country")),
        postal_code=_text(site.get("location_postal_code")),
        latitude=_coordinate(site.get("latitude")),
        longitude=_coordinate(site.get("longitude")),
        video_360_url=_text(site.get("video_360_url") or site.get("vr_link")),
        ar_mode_available=bool(site.get("ar_mode_available")),
        site_map_url=site.get("site_map_url"),
        opening_hours=normalize_schedule(detail.get("visitingHours")),
        amenities=_hydrate_amenities(site, detail),
        media=_hydrate_gallery(media_rows),
        audio_guides=_hydrate_audio_guides(media_rows, languages),
        overview_translations=overview,
        history_translations=history,
        ticketing=_hydrate_ticketing(site, detail.get("ticketTypes") or []),
        transport=transport,
        attractions=attractions,
        cultural_etiquettes=_hydrate_etiquettes(site, detail),
        admin=AdminMeta(
            save_option=SaveOption.APPROVAL if site.get("is_active") else SaveOption.DRAFT,
        ),
    )
