"""
Evidence Submitter Agent - Sends a stored draft to Stripe as dispute evidence
"""
from typing import Dict, Any, Optional

from services.service_factory import ServiceContainer
from utils.dispute_context import DisputeContext
from utils.errors import DisputeNotFoundError
from utils.logging_config import get_logger

logger = get_logger('agents.evidence_submitter')

MAX_EVIDENCE_LENGTH = 8000
PLACEHOLDER_EVIDENCE = "See attached evidence."


def build_evidence_text(draft: Optional[str]) -> str:
    """Cut the draft to what Stripe accepts, or use the placeholder when there is none"""
    return (draft or '')[:MAX_EVIDENCE_LENGTH] or PLACEHOLDER_EVIDENCE


async def submit_dispute_evidence(dispute_id: str, services: ServiceContainer) -> Dict[str, Any]:
    """
    Submit the stored draft for a dispute as uncategorized evidence.

    Raises:
        DisputeNotFoundError: If the dispute was never received; Stripe is not called
        ProviderError: If Stripe rejects the update
    """
    case = services.disputes.get(dispute_id)
    if case is None:
        logger.warning(f"⚠️ [SUBMIT] Unknown dispute {dispute_id}")
        raise DisputeNotFoundError(dispute_id)

    with DisputeContext(dispute_id, case.account_id, 'submit'):
        text = build_evidence_text(case.draft)
        account_id = None if case.is_platform else case.account_id

        logger.info(f"📤 [SUBMIT] Submitting evidence for dispute {dispute_id}")
        updated = await services.async_data.submit_evidence(dispute_id, text, account_id)
        logger.info(f"✅ [SUBMIT] Evidence accepted for dispute {dispute_id}")
        return updated
