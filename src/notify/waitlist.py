"""Waitlist signups forwarded to a Google Apps Script webhook.

Submissions are fire-and-forget: failures are logged and reported as
False, never raised, so callers can go on to send email regardless.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from planner_config import PlannerConfig

logger = logging.getLogger(__name__)


class WaitlistStore:

    def __init__(self, config: PlannerConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.config.tax_timeout_seconds)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def submit(self, email: str, signup_type: str, page: str) -> bool:
        """Record a signup.

        Returns:
            True when the webhook accepted the row, or when no webhook is
            configured and the signup was only logged; False on any failure
        """
        if not email or not signup_type or not page:
            logger.warning("Waitlist signup missing required fields")
            return False

        row = {
            'email': email,
            'signupType': signup_type,
            'page': page,
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }
        if not self.config.google_script_url:
            logger.info("Waitlist signup (Google Sheets not configured): %s", row)
            return True

        try:
            response = self._get_client().post(self.config.google_script_url, json=row)
        except httpx.HTTPError as e:
            logger.error("Error sending to Google Sheets: %s", e)
            return False

        if response.is_error:
            logger.error("Failed to write to Google Sheets: %s %s", response.status_code, response.text)
            return False
        logger.debug("Successfully wrote waitlist signup for page %s", page)
        return True
