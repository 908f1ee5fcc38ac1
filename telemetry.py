"""
Home Assistant usage webhook
Events are posted from a daemon thread; delivery problems are logged and
never reach the caller.
"""
import os
import logging
import threading
from datetime import datetime, timezone

import requests

logger = logging.getLogger('telemetry')

APP_NAME = 'lpn-unlock-app'
APP_VERSION = '2.4.0'
WEBHOOK_TIMEOUT_SEC = 5


def webhook_url():
    return os.environ.get('HA_WEBHOOK_URL', '')


def build_event_payload(event_name, metadata=None, now=None):
    """Event name and app identifiers, caller metadata, then a UTC timestamp"""
    now = now or datetime.now(timezone.utc)
    payload = {
        'event_name': event_name,
        'app_name': APP_NAME,
        'app_version': APP_VERSION
    }
    if isinstance(metadata, dict):
        payload.update(metadata)
    payload['timestamp'] = now.isoformat().replace('+00:00', 'Z')
    return payload


def send_event(payload, url=None, timeout=WEBHOOK_TIMEOUT_SEC):
    """POST one payload to the webhook. Returns True on a 2xx response.

    timeout bounds the connect and each read separately, not the whole request.
    """
    url = url or webhook_url()
    if not url:
        logger.debug("HA_WEBHOOK_URL not set, dropping event %s", payload.get('event_name'))
        return False
    try:
        response = requests.post(url, json=payload, timeout=timeout)
        if not response.ok:
            logger.warning("[HA] webhook returned %s for %s", response.status_code, payload.get('event_name'))
        return response.ok
    except requests.exceptions.Timeout:
        logger.debug("[HA] webhook timed out for %s", payload.get('event_name'))
        return False
    except requests.exceptions.RequestException as e:
        logger.warning("[HA] Failed to send webhook: %s", e)
        return False


def track_event(event_name, metadata=None, url=None):
    """Schedule an event on a background thread and return the thread"""
    payload = build_event_payload(event_name, metadata)

    def _deliver():
        try:
            send_event(payload, url=url)
        except Exception as e:
            logger.warning("[HA] webhook thread error: %s", e)

    t = threading.Thread(target=_deliver, name=f"ha-track-{event_name}", daemon=True)
    t.start()
    return t
