"""
Merchant Registry - Connected Stripe accounts and their OAuth credentials
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional

from models.merchant_account import MerchantAccount
from utils.logging_config import get_logger

logger = get_logger('services.merchant_registry')

class MerchantRegistry(ABC):
    """
    Keyed store of connected accounts. Callers depend on this interface only,
    so a database-backed registry can replace the in-memory one.
    """

    @abstractmethod
    def put(self, account_id: str, access_token: str, scope: str) -> MerchantAccount:
        """Store the credentials for an account, replacing any previous ones"""

    @abstractmethod
    def get(self, account_id: str) -> Optional[MerchantAccount]:
        """Return the account or None"""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryMerchantRegistry(MerchantRegistry):
    """
    Process-local registry. Nothing survives a restart.
    """

    def __init__(self):
        self._accounts: Dict[str, MerchantAccount] = {}

    def put(self, account_id: str, access_token: str, scope: str) -> MerchantAccount:
        account = MerchantAccount(account_id=account_id, access_token=access_token, scope=scope)
        if account_id in self._accounts:
            logger.info(f"🔄 [REGISTRY] Replacing credentials for account {account_id}")
        self._accounts[account_id] = account
        return account

    def get(self, account_id: str) -> Optional[MerchantAccount]:
        return self._accounts.get(account_id)

    def __len__(self) -> int:
        return len(self._accounts)
