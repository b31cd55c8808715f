"""
Dispute scope carried through a request so log lines can be matched to Stripe
"""
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class DisputeScope:
    dispute_id: Optional[str] = None
    account_id: Optional[str] = None
    phase: Optional[str] = None


NO_SCOPE = DisputeScope()

_scope: ContextVar[DisputeScope] = ContextVar('dispute_scope', default=NO_SCOPE)


class DisputeContext:
    """
    Open a dispute scope for the enclosed block.

    The previous scope is restored on exit, including when the block raises.
    Phase changes made with `set_phase` inside the block are undone as well.
    """

    def __init__(self, dispute_id: Optional[str], account_id: Optional[str] = None,
                 phase: Optional[str] = None):
        self.scope = DisputeScope(dispute_id, account_id, phase)
        self._token = None

    def __enter__(self) -> DisputeScope:
        self._token = _scope.set(self.scope)
        return self.scope

    def __exit__(self, exc_type, exc_val, exc_tb):
        _scope.reset(self._token)


def current_scope() -> DisputeScope:
    return _scope.get()


def set_phase(phase: str):
    """Move the open scope on to the next processing step"""
    _scope.set(replace(_scope.get(), phase=phase))
