"""
Bulk lock/unlock of LPNs through Manhattan container conditions
Each LPN is checked for existence, its current condition codes are read,
and only then is a condition saved or deleted.
"""
import logging
import re

from manhattan_integration import ManhattanIntegration
from modules.lpn_lock.models import (
    BATCH_ACTIONS, LOCK, BatchResult, BatchValidationError
)

LPN_SEPARATORS = re.compile(r'[\s,;]+')


def parse_lpns(raw_text):
    """Split user input on whitespace, commas and semicolons.

    Duplicates and case are kept as typed. A list of ids is accepted as well.
    """
    if isinstance(raw_text, (list, tuple)):
        raw_text = ' '.join(str(part) for part in raw_text)
    elif raw_text is not None and not isinstance(raw_text, str):
        raw_text = str(raw_text)
    return [part.strip() for part in LPN_SEPARATORS.split(raw_text or '') if part.strip()]


class LPNLockService:
    """Runs a lock or unlock batch against one organization"""

    def __init__(self, manhattan=None):
        self.manhattan = manhattan or ManhattanIntegration()

    def run(self, action, session, raw_lpn_text, code=None):
        """
        Lock or unlock every LPN in raw_lpn_text.

        Args:
            action: 'lock' or 'unlock'
            session: OrgSession carrying the org and bearer token
            raw_lpn_text: LPN ids separated by whitespace, commas or semicolons
            code: condition code; required for lock, optional for unlock
                  (no code on unlock removes every attached code)

        Returns:
            BatchResult

        Raises:
            BatchValidationError: bad action, no LPNs, or lock without a code
        """
        if action not in BATCH_ACTIONS:
            raise BatchValidationError(f"Unknown action: {action}")

        lpns = parse_lpns(raw_lpn_text)
        if not lpns:
            raise BatchValidationError("No LPNs")
        if action == LOCK and not code:
            raise BatchValidationError("No code")

        logging.info(f"📦 {action} batch for org {session.org}: {len(lpns)} LPN(s), code={code or 'ALL'}")

        batch = BatchResult(total=len(lpns))
        for lpn in lpns:
            if not self.manhattan.search_inventory(session.token, session.org, lpn):
                batch.record_error(lpn, "LPN does not exist")
                continue

            if action == LOCK:
                self._lock(batch, session, lpn, code)
            else:
                self._unlock(batch, session, lpn, code)

        logging.info(f"✅ {action} batch finished: {batch.success} success, {batch.fail} failed, {batch.total} total")
        return batch

    def _lock(self, batch, session, lpn, code):
        current = self.manhattan.search_conditions(session.token, session.org, lpn)
        if code in current:
            batch.record_error(lpn, f"Already locked with {code}")
            return

        outcome = self.manhattan.save_condition(session.token, session.org, lpn, code)
        batch.record_outcome(lpn, outcome)

    def _unlock(self, batch, session, lpn, code):
        current = self.manhattan.search_conditions(session.token, session.org, lpn)
        if not current:
            batch.record_error(lpn, "No condition codes")
            return

        if not code:
            for attached in current:
                if not attached:
                    continue
                outcome = self.manhattan.delete_condition(session.token, session.org, lpn, attached)
                batch.record_outcome(f"{lpn} (remove {attached})", outcome)
            return

        if code not in current:
            batch.record_error(lpn, f"Not locked with {code}")
            return

        outcome = self.manhattan.delete_condition(session.token, session.org, lpn, code)
        batch.record_outcome(lpn, outcome)
