"""
Proposal and incoming quote status enums.
"""
import enum


class ProposalStatus(str, enum.Enum):
    """Customer-facing proposal lifecycle."""
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    APPROVED = "approved"
    REJECTED = "rejected"
    CHANGES_REQUESTED = "changes_requested"


class IncomingQuoteStatus(str, enum.Enum):
    """Quotes staged from QuoteIT before they are linked to a project."""
    PENDING = "pending"
    LINKED = "linked"
    DISMISSED = "dismissed"
