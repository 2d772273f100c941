"""
Draft Controller - Owns one editing session of a heritage site.

Lifecycle:
1. open()      - empty draft (create) or load + hydrate (edit)
2. edits       - field setters and collection transitions
3. completion()- checklist feedback, never blocking
4. validate()  - required fields, before any network call
5. submit()    - serialize and create/update

Each edit swaps in a new draft built by a pure transition and marks the
auto-save indicator dirty. The two network calls (load and submit) are made
sequentially and are the only I/O.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from heritagedesk import editors
from heritagedesk.client import HeritageSiteClient
from heritagedesk.completion import CompletionSummary, evaluate_completion
from heritagedesk.exceptions import LoadError, SubmitError, ValidationError
from heritagedesk.hydration import hydrate_draft
from heritagedesk.models import (
    Attraction,
    FeeBreakup,
    Language,
    MediaItem,
    SaveOption,
    SiteDraft,
    SourceFile,
    TransportOption,
)
from heritagedesk.serialization import serialize_draft, to_number
from heritagedesk.translations import TranslationFiller
from heritagedesk.utils.autosave import AutoSaveIndicator

logger = logging.getLogger('HeritageDesk')

# Scalar draft fields settable through set_field()
SCALAR_FIELDS = {
    "name", "short_description", "full_description",
    "address", "area", "city", "state", "country", "postal_code",
    "latitude", "longitude", "video_360_url", "ar_mode_available", "site_map_url",
}

TRANSLATION_KINDS = ("overview", "history")


@dataclass
class SubmitResult:
    """Outcome of a successful submit."""
    site_id: Optional[int]
    created: bool
    message: str


class DraftController:
    """
    Coordinates hydration, edits, validation and submission for one draft.
    """

    def __init__(
        self,
        client: Optional[HeritageSiteClient] = None,
        autosave: Optional[AutoSaveIndicator] = None,
        translator: Optional[TranslationFiller] = None,
    ):
        """
        Initialize the controller.

        Args:
            client: Backend client (None = default client from config)
            autosave: Auto-save indicator (None = default delay from config)
            translator: Filler used by auto_translate() (created on first use)
        """
        self.client = client or HeritageSiteClient()
        self.autosave = autosave or AutoSaveIndicator()
        self._translator = translator
        self.draft: Optional[SiteDraft] = None
        self.load_error: Optional[str] = None
        self.submit_error: Optional[str] = None
        self.last_result: Optional[SubmitResult] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_edit(self) -> bool:
        return bool(self.draft and self.draft.is_edit)

    def open(self, site_id: Optional[int] = None) -> SiteDraft:
        """
        Start a session: blank draft, or the stored site when site_id is given.

        Args:
            site_id: Site to edit (None = create mode)

        Returns:
            The session's draft

        Raises:
            LoadError: The detail could not be fetched or has no core record
        """
        self.draft = None
        self.load_error = None
        self.submit_error = None
        self.last_result = None

        if site_id is None:
            self.draft = SiteDraft.empty()
            self.autosave.mark_saved()
            return self.draft

        result = self.client.get_site_detail(site_id)
        if not result.success or not result.data or not result.data.get("site"):
            self.load_error = result.error or "Failed to load heritage site."
            logger.error(f"Could not load heritage site {site_id}: {self.load_error}")
            raise LoadError(self.load_error)

        return self.open_detail(result.data, site_id=site_id)

    def open_detail(
        self,
        detail: dict,
        site_id: Optional[int] = None,
        as_new: bool = False,
    ) -> SiteDraft:
        """
        Start a session from an already-fetched detail aggregate.

        Args:
            detail: Site detail aggregate
            site_id: Site identifier (None = taken from the core record)
            as_new: Treat the detail as a template for a new site (create mode)
        """
        try:
            draft = hydrate_draft(detail, site_id=site_id)
        except LoadError as e:
            self.load_error = str(e)
            raise
        if as_new:
            draft = replace(draft, site_id=None, is_edit=False)
        self.draft = draft
        self.autosave.mark_saved()
        return self.draft

    def close(self) -> None:
        """Discard the draft; nothing is persisted."""
        self.draft = None

    def _require_draft(self) -> SiteDraft:
        if self.draft is None:
            raise RuntimeError("No draft is open; call open() first")
        return self.draft

    def _commit(self, **changes: Any) -> SiteDraft:
        self.draft = replace(self._require_draft(), **changes)
        self.autosave.mark_dirty()
        return self.draft

    @property
    def save_status(self) -> str:
        return self.autosave.status

    # ------------------------------------------------------------------
    # Scalar fields
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: Any) -> SiteDraft:
        if name not in SCALAR_FIELDS:
            raise AttributeError(f"'{name}' is not an editable site field")
        if name in ("latitude", "longitude"):
            value = "" if value is None else str(value)
        return self._commit(**{name: value})

    # ------------------------------------------------------------------
    # Opening hours
    # ------------------------------------------------------------------

    def update_opening_day(self, day: str, **changes: Any) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(opening_hours=editors.update_opening_day(draft.opening_hours, day, **changes))

    def toggle_day(self, day: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(opening_hours=editors.toggle_day(draft.opening_hours, day))

    # ------------------------------------------------------------------
    # Media gallery
    # ------------------------------------------------------------------

    def add_media(self, *items: MediaItem) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(media=editors.media_editor.add_many(draft.media, list(items)))

    def update_media(self, media_id: str, **changes: Any) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(media=editors.media_editor.update(draft.media, media_id, **changes))

    def remove_media(self, media_id: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(media=editors.media_editor.remove(draft.media, media_id))

    def move_media(self, media_id: str, new_index: int) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(media=editors.media_editor.move(draft.media, media_id, new_index))

    def set_primary_media(self, media_id: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(media=editors.media_editor.set_primary(draft.media, media_id))

    # ------------------------------------------------------------------
    # Translations and audio guides
    # ------------------------------------------------------------------

    def set_translation(self, kind: str, language: str, text: str) -> SiteDraft:
        """
        Set overview or history text for one language.

        Args:
            kind: 'overview' or 'history'
            language: Language code
            text: New text (may be empty)
        """
        if kind not in TRANSLATION_KINDS:
            raise ValueError(f"Unknown translation kind: {kind}")
        draft = self._require_draft()
        attr = f"{kind}_translations"
        return self._commit(**{attr: editors.set_translation(getattr(draft, attr), language.lower(), text)})

    def auto_translate(self) -> SiteDraft:
        """Fill empty overview/history slots from the English text."""
        draft = self._require_draft()
        if self._translator is None:
            self._translator = TranslationFiller(languages=Language.ALL)
        return self._commit(
            overview_translations=self._translator.fill(draft.overview_translations),
            history_translations=self._translator.fill(draft.history_translations),
        )

    def update_audio_guide(self, language: str, **changes: Any) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(audio_guides=editors.audio_editor.update(draft.audio_guides, language, **changes))

    def attach_audio_file(self, language: str, source_file: SourceFile) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(audio_guides=editors.attach_audio_file(draft.audio_guides, language, source_file))

    def clear_audio_guide(self, language: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(audio_guides=editors.clear_audio_guide(draft.audio_guides, language))

    # ------------------------------------------------------------------
    # Amenities and etiquettes
    # ------------------------------------------------------------------

    def add_amenity(self, name: str, icon: Optional[str] = None) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(amenities=editors.add_amenity(draft.amenities, name, icon))

    def remove_amenity(self, index: int) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(amenities=editors.amenity_editor.remove(draft.amenities, index))

    def add_etiquette(self, text: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(cultural_etiquettes=editors.add_etiquette(draft.cultural_etiquettes, text))

    def update_etiquette(self, index: int, text: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(
            cultural_etiquettes=editors.etiquette_editor.update(draft.cultural_etiquettes, index, value=text)
        )

    def remove_etiquette(self, index: int) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(
            cultural_etiquettes=editors.etiquette_editor.remove(draft.cultural_etiquettes, index)
        )

    # ------------------------------------------------------------------
    # Ticketing
    # ------------------------------------------------------------------

    def set_entry_type(self, entry_type: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(ticketing=editors.set_entry_type(draft.ticketing, entry_type))

    def set_booking(self, booking_url: Optional[str] = None, online_available: Optional[bool] = None) -> SiteDraft:
        draft = self._require_draft()
        ticketing = draft.ticketing
        if booking_url is not None:
            ticketing = replace(ticketing, booking_url=booking_url)
        if online_available is not None:
            ticketing = replace(ticketing, online_booking_available=online_available)
        return self._commit(ticketing=ticketing)

    def add_fee(self, fee: Optional[FeeBreakup] = None) -> SiteDraft:
        draft = self._require_draft()
        fee = fee or FeeBreakup(visitor_type="New visitor type", amount=0, notes="")
        return self._commit(ticketing=editors.add_fee(draft.ticketing, fee))

    def update_fee(self, index: int, **changes: Any) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(ticketing=editors.update_fee(draft.ticketing, index, **changes))

    def remove_fee(self, index: int) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(ticketing=editors.remove_fee(draft.ticketing, index))

    # ------------------------------------------------------------------
    # Transport and nearby attractions
    # ------------------------------------------------------------------

    def add_transport(self, option: Optional[TransportOption] = None) -> SiteDraft:
        draft = self._require_draft()
        option = option or TransportOption(mode="custom", name="", distance_km=None, notes="")
        return self._commit(transport=editors.transport_editor.add(draft.transport, option))

    def update_transport(self, index: int, **changes: Any) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(transport=editors.transport_editor.update(draft.transport, index, **changes))

    def remove_transport(self, index: int) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(transport=editors.transport_editor.remove(draft.transport, index))

    def add_attraction(self, attraction: Optional[Attraction] = None) -> SiteDraft:
        draft = self._require_draft()
        attraction = attraction or Attraction(name="", distance_km=None, notes="")
        return self._commit(attractions=editors.attraction_editor.add(draft.attractions, attraction))

    def update_attraction(self, index: int, **changes: Any) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(attractions=editors.attraction_editor.update(draft.attractions, index, **changes))

    def remove_attraction(self, index: int) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(attractions=editors.attraction_editor.remove(draft.attractions, index))

    # ------------------------------------------------------------------
    # Admin options
    # ------------------------------------------------------------------

    def set_save_option(self, save_option: str) -> SiteDraft:
        if save_option not in (SaveOption.DRAFT, SaveOption.APPROVAL):
            raise ValueError(f"Unknown save option: {save_option}")
        draft = self._require_draft()
        return self._commit(admin=replace(draft.admin, save_option=save_option))

    def set_admin_notes(self, notes: str) -> SiteDraft:
        draft = self._require_draft()
        return self._commit(admin=replace(draft.admin, notes=notes))

    # ------------------------------------------------------------------
    # Feedback, validation and submission
    # ------------------------------------------------------------------

    def completion(self) -> CompletionSummary:
        return evaluate_completion(self._require_draft())

    def validate(self) -> None:
        """
        Check the fields the backend cannot do without.

        Raises:
            ValidationError: Site name is blank or a coordinate is not a number
        """
        draft = self._require_draft()
        problems = []
        if not draft.name.strip():
            problems.append("name")
        for coordinate in ("latitude", "longitude"):
            value = getattr(draft, coordinate)
            if str(value).strip() and to_number(value, default=None) is None:
                problems.append(coordinate)

        if "name" in problems:
            raise ValidationError("Site name is required before submitting.", problems)
        if problems:
            raise ValidationError(f"Invalid coordinates: {', '.join(problems)}", problems)

    def build_request(self) -> dict:
        return serialize_draft(self._require_draft())

    def submit(self) -> SubmitResult:
        """
        Validate, serialize and send the draft.

        The draft is left untouched whatever the outcome, so a failed submit
        can be retried as-is.

        Returns:
            SubmitResult for the created/updated site

        Raises:
            ValidationError: Required fields missing (nothing was sent)
            SubmitError: The backend rejected the request
        """
        draft = self._require_draft()
        self.submit_error = None
        self.validate()
        request = self.build_request()

        if draft.is_edit and draft.site_id is not None:
            result = self.client.update_site(draft.site_id, request)
            action, created = "update", False
        else:
            result = self.client.create_site(request)
            action, created = "create", True

        if not result.success:
            self.submit_error = result.error or f"Failed to {action} heritage site."
            logger.error(self.submit_error)
            raise SubmitError(self.submit_error, details=result.data)

        site_id = draft.site_id
        if created and isinstance(result.data, dict):
            site_id = result.data.get("site_id") or result.data.get("siteId") or site_id

        message = f"Heritage site {action}d successfully."
        logger.info(message)
        self.last_result = SubmitResult(site_id=site_id, created=created, message=message)
        self.autosave.mark_saved(message)
        return self.last_result
