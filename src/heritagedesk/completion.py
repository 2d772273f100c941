"""
Completion Evaluator - Checklist of finished and missing draft sections.

Purely informational: the checklist never blocks a submission.
"""

from dataclasses import dataclass, field

from heritagedesk.models import EntryType, SiteDraft


@dataclass
class CompletionSummary:
    """Section labels split into completed and missing."""
    completed: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def progress(self) -> float:
        total = len(self.completed) + len(self.missing)
        return len(self.completed) / total if total else 0.0

    @property
    def is_complete(self) -> bool:
        return not self.missing


def _has_text(translations: dict[str, str]) -> bool:
    return any((value or "").strip() for value in translations.values())


def evaluate_completion(draft: SiteDraft) -> CompletionSummary:
    """
    Run the independent section checks over a draft.

    Args:
        draft: Draft to evaluate

    Returns:
        CompletionSummary with one entry per check
    """
    summary = CompletionSummary()

    checks = [
        (bool(draft.name.strip()), "Basic Information", "Site name"),
        (bool(draft.address.strip()), "Location Details", "Location address"),
        (bool(draft.media), "Media Gallery", "Upload at least one media item"),
        (any(day.is_open for day in draft.opening_hours), "Opening Hours", "Opening hours schedule"),
        (
            draft.ticketing.entry_type == EntryType.FREE or bool(draft.ticketing.fees),
            "Entry Fees",
            "Entry fee structure",
        ),
        (_has_text(draft.overview_translations), "Overview Translations", "Overview translations"),
        (_has_text(draft.history_translations), "History Translations", "History translations"),
    ]
    for passed, done_label, missing_label in checks:
        if passed:
            summary.completed.append(done_label)
        else:
            summary.missing.append(missing_label)

    missing_audio = [guide for guide in draft.audio_guides if not guide.is_provided]
    if missing_audio:
        summary.missing.append(f"{len(missing_audio)} audio guides missing")
    else:
        summary.completed.append("Audio Guides")

    return summary
