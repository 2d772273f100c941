"""
Collection Editors - Pure transitions over the draft's ordered lists.

Every operation returns a new list and leaves its input untouched, so the
draft controller can swap collections in with dataclasses.replace() and each
transition can be tested on its own.

The same ListEditor drives fees, transport options, attractions, amenities,
etiquettes and audio guides; MediaEditor adds the single-primary rule for
the gallery.
"""

import logging
from dataclasses import is_dataclass, replace
from typing import Any, Optional, TypeVar

from heritagedesk.models import (
    Amenity,
    AudioGuide,
    EntryType,
    FeeBreakup,
    MediaItem,
    OpeningDay,
    SourceFile,
    Ticketing,
)

logger = logging.getLogger('HeritageDesk')

T = TypeVar("T")


class ListEditor:
    """
    Generic add/update/remove/move over an ordered list.

    Items are addressed by position, or by the value of `key` when the
    editor is keyed (e.g. media by id, audio guides by language).
    """

    def __init__(self, key: Optional[str] = None):
        """
        Initialize the editor.

        Args:
            key: Attribute identifying an item (None = address by index)
        """
        self.key = key

    def index_of(self, items: list[T], ref: Any) -> int:
        """
        Find the position of an item.

        Args:
            items: Current list
            ref: Index (unkeyed editors) or key value (keyed editors)

        Returns:
            Position of the item

        Raises:
            KeyError: No item has the given key value
            IndexError: Index out of range
        """
        if self.key is None:
            if not -len(items) <= ref < len(items):
                raise IndexError(f"No item at index {ref}")
            return ref % len(items)
        for index, item in enumerate(items):
            if getattr(item, self.key) == ref:
                return index
        raise KeyError(ref)

    def add(self, items: list[T], item: T) -> list[T]:
        return [*items, item]

    def update(self, items: list[T], ref: Any, **changes: Any) -> list[T]:
        """Merge `changes` into one item without reordering."""
        index = self.index_of(items, ref)
        current = items[index]
        if is_dataclass(current):
            updated = replace(current, **changes)
        else:
            # Plain values (etiquette strings) are replaced wholesale
            updated = changes["value"]
        return [updated if i == index else existing for i, existing in enumerate(items)]

    def remove(self, items: list[T], ref: Any) -> list[T]:
        index = self.index_of(items, ref)
        return [existing for i, existing in enumerate(items) if i != index]

    def move(self, items: list[T], ref: Any, new_index: int) -> list[T]:
        """Move one item to `new_index` (clamped to the list bounds)."""
        index = self.index_of(items, ref)
        result = list(items)
        item = result.pop(index)
        new_index = max(0, min(new_index, len(result)))
        result.insert(new_index, item)
        return result


class MediaEditor(ListEditor):
    """
    Gallery editor keeping exactly one primary item in a non-empty gallery.
    """

    def __init__(self):
        super().__init__(key="id")

    @staticmethod
    def ensure_primary(items: list[MediaItem]) -> list[MediaItem]:
        """
        Repair the single-primary invariant.

        The first flagged item stays primary; with none flagged the first
        item becomes primary.
        """
        if not items:
            return []
        primary_index = next((i for i, item in enumerate(items) if item.is_primary), 0)
        return [
            item if item.is_primary == (i == primary_index) else replace(item, is_primary=i == primary_index)
            for i, item in enumerate(items)
        ]

    def add(self, items: list[MediaItem], item: MediaItem) -> list[MediaItem]:
        """
        Append an item; a primary item takes over from the current one.

        Raises:
            ValueError: An item with the same id is already in the gallery
        """
        if any(existing.id == item.id for existing in items):
            raise ValueError(f"Duplicate media id: {item.id}")
        if item.is_primary:
            items = [replace(existing, is_primary=False) for existing in items]
        return self.ensure_primary([*items, item])

    def add_many(self, items: list[MediaItem], new_items: list[MediaItem]) -> list[MediaItem]:
        for item in new_items:
            items = self.add(items, item)
        return items

    def update(self, items: list[MediaItem], ref: Any, **changes: Any) -> list[MediaItem]:
        new_id = changes.get("id", ref)
        if new_id != ref and any(item.id == new_id for item in items):
            raise ValueError(f"Duplicate media id: {new_id}")
        if changes.pop("is_primary", None):
            items = self.set_primary(items, ref)
        if not changes:
            return items
        return super().update(items, ref, **changes)

    def remove(self, items: list[MediaItem], ref: Any) -> list[MediaItem]:
        remaining = super().remove(items, ref)
        return self.ensure_primary(remaining)

    def set_primary(self, items: list[MediaItem], ref: Any) -> list[MediaItem]:
        """Make `ref` the only primary item."""
        index = self.index_of(items, ref)
        return [replace(item, is_primary=i == index) for i, item in enumerate(items)]


media_editor = MediaEditor()
audio_editor = ListEditor(key="language")
fee_editor = ListEditor()
transport_editor = ListEditor()
attraction_editor = ListEditor()
amenity_editor = ListEditor()
etiquette_editor = ListEditor()


def update_opening_day(schedule: list[OpeningDay], day: str, **changes: Any) -> list[OpeningDay]:
    """Merge changes into one weekday; the day name itself cannot change."""
    changes.pop("day", None)
    return ListEditor(key="day").update(schedule, day, **changes)


def toggle_day(schedule: list[OpeningDay], day: str) -> list[OpeningDay]:
    target = schedule[ListEditor(key="day").index_of(schedule, day)]
    return update_opening_day(schedule, day, is_open=not target.is_open)


def set_translation(translations: dict[str, str], language: str, text: str) -> dict[str, str]:
    return {**translations, language: text}


def attach_audio_file(guides: list[AudioGuide], language: str, source_file: SourceFile) -> list[AudioGuide]:
    """Attach a local audio file; the stored URL is dropped until upload."""
    return audio_editor.update(
        guides,
        language,
        source_file=source_file,
        file_name=source_file.name,
        url="",
    )


def clear_audio_guide(guides: list[AudioGuide], language: str) -> list[AudioGuide]:
    return audio_editor.update(
        guides,
        language,
        source_file=None,
        file_name=None,
        url="",
        duration_seconds=None,
    )


def add_amenity(amenities: list[Amenity], name: str, icon: Optional[str] = None) -> list[Amenity]:
    """Append an amenity; blank names are ignored."""
    if not name.strip():
        return list(amenities)
    return amenity_editor.add(amenities, Amenity(name=name.strip(), icon=icon or None))


def add_etiquette(etiquettes: list[str], text: str) -> list[str]:
    """Append an etiquette rule; blank text is ignored."""
    if not text.strip():
        return list(etiquettes)
    return etiquette_editor.add(etiquettes, text.strip())


def set_entry_type(ticketing: Ticketing, entry_type: str) -> Ticketing:
    """
    Change the entry type.

    Switching to free discards the fee breakdown; switching back to paid
    starts from an empty list.
    """
    if entry_type not in (EntryType.FREE, EntryType.PAID):
        raise ValueError(f"Unknown entry type: {entry_type}")
    if entry_type == EntryType.FREE:
        if ticketing.fees:
            logger.debug(f"Discarding {len(ticketing.fees)} fee rows for free entry")
        return replace(ticketing, entry_type=entry_type, fees=[])
    return replace(ticketing, entry_type=entry_type)


def _require_paid(ticketing: Ticketing) -> None:
    if ticketing.entry_type != EntryType.PAID:
        raise ValueError("Fee rows can only be edited for paid entry")


def add_fee(ticketing: Ticketing, fee: FeeBreakup) -> Ticketing:
    """Append a fee row; free sites keep an empty fee list."""
    _require_paid(ticketing)
    return replace(ticketing, fees=fee_editor.add(ticketing.fees, fee))


def update_fee(ticketing: Ticketing, index: int, **changes: Any) -> Ticketing:
    _require_paid(ticketing)
    return replace(ticketing, fees=fee_editor.update(ticketing.fees, index, **changes))


def remove_fee(ticketing: Ticketing, index: int) -> Ticketing:
    return replace(ticketing, fees=fee_editor.remove(ticketing.fees, index))
