"""
Dispute Store - Disputes received from Stripe together with their drafts
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional

from models.dispute_case import DisputeCase
from utils.logging_config import get_logger

logger = get_logger('services.dispute_store')

class DisputeStore(ABC):
    """
    Keyed store of disputes. The account id on a record is a soft reference:
    it is never checked against the merchant registry.
    """

    @abstractmethod
    def put(self, dispute_id: str, data: Dict[str, Any], draft: Optional[str],
            account_id: Optional[str]) -> DisputeCase:
        """Store a dispute, replacing any previous record with the same id"""

    @abstractmethod
    def get(self, dispute_id: str) -> Optional[DisputeCase]:
        """Return the dispute or None"""

    @abstractmethod
    def list(self) -> List[DisputeCase]:
        """Return every stored dispute"""

    def list_summaries(self) -> List[Dict[str, Any]]:
        """Project every stored dispute into its listing summary"""
        return [case.get_summary() for case in self.list()]

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryDisputeStore(DisputeStore):
    """
    Process-local store. Listing follows insertion order.
    """

    def __init__(self):
        self._disputes: Dict[str, DisputeCase] = {}

    def put(self, dispute_id: str, data: Dict[str, Any], draft: Optional[str],
            account_id: Optional[str]) -> DisputeCase:
        case = DisputeCase(dispute_id=dispute_id, data=data, draft=draft, account_id=account_id)
        self._disputes[dispute_id] = case
        logger.info(f"💾 [STORE] Stored dispute {dispute_id} for account {case.account_id}")
        return case

    def get(self, dispute_id: str) -> Optional[DisputeCase]:
        return self._disputes.get(dispute_id)

    def list(self) -> List[DisputeCase]:
        return list(self._disputes.values())

    def __len__(self) -> int:
        return len(self._disputes)
