"""
Merchant Account Model
"""
from datetime import datetime, timezone
from typing import Dict, Any, Optional

class MerchantAccount:
    """
    A Stripe Connect account linked through the OAuth flow
    """

    def __init__(self, account_id: str, access_token: str, scope: str,
                 connected_at: Optional[datetime] = None):
        self.account_id = account_id
        self.access_token = access_token
        self.scope = scope
        self.connected_at = connected_at or datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary, leaving the access token out
        """
        return {
            'account_id': self.account_id,
            'scope': self.scope,
            'connected_at': self.connected_at.isoformat()
        }

    def __repr__(self) -> str:
        return f"MerchantAccount(account_id={self.account_id!r}, scope={self.scope!r})"
