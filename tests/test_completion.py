"""Tests for the completion checklist."""

from dataclasses import replace

from heritagedesk.completion import CompletionSummary, evaluate_completion
from heritagedesk.models import AudioGuide, EntryType, SiteDraft, Ticketing


class TestCompletionSummary:
    """Tests for CompletionSummary."""

    def test_progress(self) -> None:
        """Test progress is the completed share."""
        summary = CompletionSummary(completed=["a", "b", "c"], missing=["d"])
        assert summary.progress == 0.75
        assert not summary.is_complete

    def test_empty(self) -> None:
        """Test an empty summary has zero progress."""
        assert CompletionSummary().progress == 0.0


class TestEvaluateCompletion:
    """Tests for evaluate_completion."""

    def test_empty_draft(self) -> None:
        """Test a blank create-mode draft."""
        summary = evaluate_completion(SiteDraft.empty())
        assert "Site name" in summary.missing
        assert "Location address" in summary.missing
        assert "Upload at least one media item" in summary.missing
        assert "Overview translations" in summary.missing
        assert "History translations" in summary.missing
        assert "4 audio guides missing" in summary.missing
        # default schedule is open Monday to Saturday; free entry needs no fees
        assert "Opening Hours" in summary.completed
        assert "Entry Fees" in summary.completed

    def test_paid_without_fees(self) -> None:
        """Test a paid site without fees misses the fee structure."""
        draft = SiteDraft(ticketing=Ticketing(entry_type=EntryType.PAID))
        assert "Entry fee structure" in evaluate_completion(draft).missing

    def test_sample_draft(self, sample_draft) -> None:
        """Test the sample site misses only three audio guides."""
        summary = evaluate_completion(sample_draft)
        assert summary.missing == ["3 audio guides missing"]
        assert len(summary.completed) == 7

    def test_complete_draft(self, sample_draft) -> None:
        """Test a draft with every audio guide is complete."""
        guides = [AudioGuide(language=code, url=f"https://cdn/{code}.mp3") for code in ("en", "gu", "hi", "es")]
        summary = evaluate_completion(replace(sample_draft, audio_guides=guides))
        assert summary.is_complete
        assert summary.progress == 1.0
        assert "Audio Guides" in summary.completed

    def test_closed_week(self, sample_draft) -> None:
        """Test a schedule with no open day misses opening hours."""
        closed = [replace(day, is_open=False) for day in sample_draft.opening_hours]
        summary = evaluate_completion(replace(sample_draft, opening_hours=closed))
        assert "Opening hours schedule" in summary.missing
