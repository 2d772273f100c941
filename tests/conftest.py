"""
Pytest configuration and shared fixtures.
"""

import pytest

from heritagedesk.hydration import hydrate_draft
from heritagedesk.models import SiteDraft


@pytest.fixture
def sample_detail() -> dict:
    """Stored detail aggregate of a paid site, as returned by the backend."""
    return {
        "site": {
            "site_id": 42,
            "name_default": "Rani ki Vav",
            "short_desc_default": "Stepwell on the banks of the Saraswati",
            "full_desc_default": "An 11th-century stepwell built in memory of King Bhima I.",
            "location_address": "Mohan Nagar Society",
            "location_area": "Patan",
            "location_city": "Patan",
            "location_state": "Gujarat",
            "location_country": "India",
            "location_postal_code": "384265",
            "latitude": 23.8589,
            "longitude": 72.1016,
            "vr_link": "https://example.com/vr/rani-ki-vav",
            "ar_mode_available": True,
            "entry_type": "paid",
            "booking_url": "https://example.com/book",
            "booking_online_available": True,
            "is_active": True,
            "amenities": [{"name": "Parking", "icon": "car"}],
            "cultural_etiquettes": ["Remove footwear near the well"],
            "overview_translations": {"en": "Stepwell overview", "hi": "बावड़ी"},
            "history_translations": {"en": "Built in 1063 AD"},
        },
        "visitingHours": [
            {"day_of_week": 1, "is_closed": False, "open_time": "08:00:00", "close_time": "18:00:00"},
            {"day_of_week": "Tuesday", "is_open": True, "opening_time": "08:30", "closing_time": "17:30"},
        ],
        "media": [
            {
                "media_id": 2,
                "media_type": "image",
                "storage_url": "https://cdn.example.com/2.jpg",
                "label": "Side view",
                "is_primary": False,
                "position": 2,
            },
            {
                "media_id": 1,
                "media_type": "image",
                "storage_url": "https://cdn.example.com/1.jpg",
                "label": "Front view",
                "is_primary": True,
                "position": 1,
            },
            {
                "media_id": 3,
                "media_type": "audio",
                "storage_url": "https://cdn.example.com/guide-hi.mp3",
                "label": "guide-hi.mp3",
                "language_code": "hi",
                "duration_seconds": 180,
                "position": 3,
            },
        ],
        "ticketTypes": [
            {"visitor_type": "Indian citizens", "amount": 40, "currency": "INR", "notes": None},
            {"visitor_type": "Foreign nationals", "amount": 600, "currency": "INR", "notes": "Cash only"},
        ],
        "transportation": [
            {"category": "transport", "mode": "bus", "name": "Patan bus stand", "distance_km": 2.5},
            {"category": "attraction", "name": "Sahastralinga Tank", "distance_km": 0.4, "notes": "Walkable"},
        ],
    }


@pytest.fixture
def sample_draft(sample_detail: dict) -> SiteDraft:
    """Edit-mode draft hydrated from the sample detail."""
    return hydrate_draft(sample_detail)


def request_to_detail(request: dict) -> dict:
    """Shape a create/update request like the detail aggregate the backend returns."""
    return {
        "site": dict(request["site"]),
        "visitingHours": request["visitingHours"],
        "media": request["media"],
        "ticketTypes": request["ticketTypes"],
        "transportation": request["transportation"],
    }


@pytest.fixture
def to_detail():
    """Converter from a serialized request to a detail aggregate."""
    return request_to_detail
