"""
Value types for LPN lock/unlock batches
Nothing here is persisted; every object lives for a single request.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

LOCK = 'lock'
UNLOCK = 'unlock'
BATCH_ACTIONS = (LOCK, UNLOCK)


class BatchValidationError(ValueError):
    """Raised when a batch is rejected before any WMS call is made"""


@dataclass(frozen=True)
class OrgSession:
    """Organization code plus the bearer token obtained for it"""
    org: str
    token: str

    @classmethod
    def from_authorization(cls, org: Optional[str], authorization: Optional[str]) -> Optional['OrgSession']:
        """Build a session from an 'Authorization: Bearer <token>' header value.

        Returns None when the scheme is not Bearer or no token is present.
        """
        parts = (authorization or '').split(' ')
        if parts[0].lower() != 'bearer':
            return None
        token = parts[1].strip() if len(parts) > 1 else ''
        if not token:
            return None
        return cls(org=(org or '').strip(), token=token)


class OutcomeKind(Enum):
    SUCCESS = 'success'
    FAILURE = 'failure'
    ASSUMED_SUCCESS = 'assumed_success'  # no success flag in the WMS payload

    @property
    def failed(self) -> bool:
        return self is OutcomeKind.FAILURE


def classify_outcome(outcome: Any) -> OutcomeKind:
    """Classify a save/delete payload; only an explicit success=False is a failure"""
    if not isinstance(outcome, dict) or 'success' not in outcome:
        return OutcomeKind.ASSUMED_SUCCESS
    if outcome['success'] is False:
        return OutcomeKind.FAILURE
    return OutcomeKind.SUCCESS


@dataclass
class BatchResult:
    """Per-entry outcomes plus aggregate counters.

    total is the number of parsed LPNs, not the number of entries: an
    unlock-all adds one entry per removed code, so success + fail can be
    larger than total.
    """
    total: int
    results: Dict[str, Any] = field(default_factory=dict)
    success: int = 0
    fail: int = 0

    def record_error(self, key: str, message: str) -> None:
        self.results[key] = {'error': message}
        self.fail += 1

    def record_outcome(self, key: str, outcome: Any) -> OutcomeKind:
        kind = classify_outcome(outcome)
        self.results[key] = outcome
        if kind.failed:
            self.fail += 1
        else:
            self.success += 1
        return kind

    def to_dict(self) -> Dict[str, Any]:
        return {
            'results': self.results,
            'success': self.success,
            'fail': self.fail,
            'total': self.total
        }
