"""
Dispute Case Model
"""
from typing import Dict, Any, Optional

PLATFORM_ACCOUNT = 'platform'
DRAFT_PREVIEW_LENGTH = 400

class DisputeCase:
    """
    A Stripe dispute with its generated response draft
    """

    def __init__(self, dispute_id: str, data: Dict[str, Any], draft: Optional[str],
                 account_id: Optional[str] = None):
        self.dispute_id = dispute_id
        self.data = data or {}
        self.draft = draft
        self.account_id = account_id or PLATFORM_ACCOUNT

    @property
    def is_platform(self) -> bool:
        return self.account_id == PLATFORM_ACCOUNT

    def get_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the dispute for the listing endpoint
        """
        return {
            'id': self.dispute_id,
            'account_id': self.account_id,
            'status': self.data.get('status'),
            'amount': self.data.get('amount'),
            'currency': self.data.get('currency'),
            'reason': self.data.get('reason'),
            'created': self.data.get('created'),
            'draft': preview_draft(self.draft)
        }


def preview_draft(draft: Optional[str], limit: int = DRAFT_PREVIEW_LENGTH) -> str:
    """Cut a draft to `limit` characters, marking the cut with an ellipsis"""
    if not draft:
        return ''
    if len(draft) > limit:
        return draft[:limit] + '...'
    return draft
