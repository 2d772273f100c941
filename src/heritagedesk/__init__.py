"""
HeritageDesk.

Editing core of the heritage-site admin console: turns stored heritage-site
details into editable drafts and drafts back into create/update requests.
"""

__version__ = "1.2.0"
__author__ = "HeritageDesk Team"

from heritagedesk.completion import CompletionSummary, evaluate_completion
from heritagedesk.controller import DraftController, SubmitResult
from heritagedesk.hydration import hydrate_draft
from heritagedesk.models import SiteDraft
from heritagedesk.schedule import normalize_schedule
from heritagedesk.serialization import serialize_draft

__all__ = [
    "DraftController",
    "SubmitResult",
    "SiteDraft",
    "CompletionSummary",
    "evaluate_completion",
    "hydrate_draft",
    "normalize_schedule",
    "serialize_draft",
    "__version__",
]
