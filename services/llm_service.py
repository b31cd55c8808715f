"""
LLM Service for drafting dispute responses using OpenAI API
"""
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional

import openai
from utils.logging_config import get_logger

logger = get_logger('services.llm')

DRAFT_UNAVAILABLE = "Draft unavailable."

SYSTEM_PROMPT = (
    "You are a professional chargeback analyst. Draft a persuasive, structured dispute response. "
    "Use clear headings and cite attached evidence placeholders. Keep to ~250-350 words. "
    "Do not invent facts."
)

EVIDENCE_CHECKLIST = [
    "- Order details: <attach order receipt / invoice>",
    "- Delivery/usage logs: <attach carrier delivery / tracking, access logs>",
    "- Customer comms: <attach email/chat transcripts>",
    "- Policies: <attach refund/terms/exclusions>",
]

class LLMService:
    """
    Service for drafting dispute responses. Every failure path returns text.
    """

    def __init__(self, api_key: Optional[str] = None, model: str = 'gpt-4o-mini',
                 temperature: float = 0.2):
        self.model = model
        self.temperature = temperature
        self.client = openai.OpenAI(api_key=api_key) if api_key else None

        self.metrics = {
            'calls_made': 0,
            'failures': 0,
            'fallback_used': 0,
            'avg_response_time': 0.0
        }

        if not self.client:
            logger.warning("⚠️ [LLM] OpenAI API key not found, drafts will use fallback text")

    def generate_dispute_draft(self, dispute: Dict[str, Any]) -> str:
        """
        Draft a response for a dispute, degrading to fixed text on any failure
        """
        if not isinstance(dispute, dict):
            dispute = {}
        dispute_id = dispute.get('id', 'unknown')

        if not self.client:
            self.metrics['fallback_used'] += 1
            return self._fallback_draft(dispute_id)

        logger.info(f"🤖 [LLM] Generating draft for dispute {dispute_id}")
        start_time = time.time()
        self.metrics['calls_made'] += 1

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self._build_draft_prompt(dispute)}
                ]
            )
            self._update_response_time(time.time() - start_time)
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(f"❌ [LLM] Error generating draft for dispute {dispute_id}: {e}")
            self.metrics['failures'] += 1
            return DRAFT_UNAVAILABLE

        if not isinstance(content, str) or not content.strip():
            logger.warning(f"⚠️ [LLM] Empty completion for dispute {dispute_id}")
            self.metrics['failures'] += 1
            return DRAFT_UNAVAILABLE

        logger.info(f"✅ [LLM] Draft generated for dispute {dispute_id} ({len(content)} chars)")
        return content

    def _build_draft_prompt(self, dispute: Dict[str, Any]) -> str:
        """
        Build the user message describing the dispute
        """
        evidence_details = dispute.get('evidence_details')
        due_by = evidence_details.get('due_by') if isinstance(evidence_details, dict) else None

        charge = dispute.get('charge')
        if isinstance(charge, dict):
            charge = charge.get('id')

        lines = [
            f"Dispute ID: {dispute.get('id', 'unknown')}",
            f"Reason: {dispute.get('reason') or 'unknown'}",
            f"Amount: {format_amount(dispute.get('amount'), dispute.get('currency'))}",
            f"Created: {format_timestamp(dispute.get('created'))}",
            f"Charge: {charge or 'unknown'}",
            f"Evidence due by: {format_timestamp(due_by)}",
            "",
            "Evidence available:",
            *EVIDENCE_CHECKLIST,
            "",
            "Goal: Write a structured response addressing the cardholder's claim, "
            "referencing policy and proof, and requesting dispute reversal."
        ]
        return "\n".join(lines)

    def _fallback_draft(self, dispute_id: str) -> str:
        """Fixed draft used when no completion provider is configured"""
        logger.info(f"🔄 [LLM] Using fallback draft for dispute {dispute_id}")
        return (
            f"Dispute {dispute_id}: Provide clear proof of service/delivery, customer communication, "
            f"refund policy, and terms.\n"
            f"(Draft generation is not configured; returning fallback text.)"
        )

    def _update_response_time(self, response_time: float) -> None:
        """Update average response time metric"""
        if self.metrics['calls_made'] > 0:
            self.metrics['avg_response_time'] = (
                (self.metrics['avg_response_time'] * (self.metrics['calls_made'] - 1) + response_time)
                / self.metrics['calls_made']
            )

    def get_metrics(self) -> Dict[str, Any]:
        """Get service metrics for monitoring"""
        return {
            **self.metrics,
            'success_rate': (self.metrics['calls_made'] - self.metrics['failures']) / max(self.metrics['calls_made'], 1),
            'service_status': 'healthy' if self.client else 'degraded'
        }

    def health_check(self) -> Dict[str, Any]:
        """Perform health check"""
        status = {
            'service': 'LLMService',
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'openai_configured': self.client is not None,
            'model': self.model,
            'metrics': self.get_metrics()
        }

        if not self.client:
            status['status'] = 'degraded'
            status['warning'] = 'OpenAI API key not configured, fallback drafts in use'

        return status


def format_amount(amount: Any, currency: Any) -> str:
    """Render minor units as a two-decimal amount with an uppercase currency code"""
    try:
        value = f"{float(amount) / 100:.2f}"
    except (TypeError, ValueError):
        value = 'unknown'
    code = currency.upper() if isinstance(currency, str) and currency else 'unknown'
    return f"{value} {code}"


def format_timestamp(value: Any) -> str:
    """Render a Unix timestamp as ISO-8601 UTC, or 'unknown'"""
    if value is None or isinstance(value, bool):
        return 'unknown'
    try:
        moment = datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return 'unknown'
    return moment.isoformat().replace('+00:00', 'Z')
