"""
Dispute Draft Agents Package

This package contains the agent functions that handle the steps of the
dispute flow: webhook intake and evidence submission.
"""

from .dispute_intake import verify_event, handle_dispute_event, DISPUTE_CREATED, DISPUTE_CLOSED
from .evidence_submitter import submit_dispute_evidence, build_evidence_text, MAX_EVIDENCE_LENGTH

__all__ = [
    'verify_event',
    'handle_dispute_event',
    'DISPUTE_CREATED',
    'DISPUTE_CLOSED',
    'submit_dispute_evidence',
    'build_evidence_text',
    'MAX_EVIDENCE_LENGTH'
]
