"""Configuration for the external collaborators.

Only the entry points (Program.py and the MCP server) read the environment.
Everything else receives a PlannerConfig through its constructor.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_TAX_API_URL = 'https://api.api-ninjas.com/v1/incometaxcalculator'
DEFAULT_SITE_URL = 'https://www.weleap.ai'
DEFAULT_EMAIL_FROM = 'WeLeap <hello@weleap.ai>'
DEFAULT_ZORI_CSV = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', 'reference', 'zori_metro.csv'))


@dataclass(frozen=True)
class PlannerConfig:
    """Settings for the tax API, waitlist, email and market-rent collaborators."""
    api_ninjas_key: Optional[str] = None
    tax_api_url: str = DEFAULT_TAX_API_URL
    tax_timeout_seconds: float = 10.0
    google_script_url: Optional[str] = None
    resend_api_key: Optional[str] = None
    email_from: str = DEFAULT_EMAIL_FROM
    site_url: str = DEFAULT_SITE_URL
    allocator_url: Optional[str] = None
    zori_csv_path: str = DEFAULT_ZORI_CSV
    tax_year: int = 2025

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'PlannerConfig':
        """Build a config from environment variables.

        Recognized variables: API_NINJAS_KEY, TAX_API_URL, TAX_API_TIMEOUT,
        GOOGLE_SCRIPT_URL, RESEND_API_KEY, EMAIL_FROM, SITE_URL,
        ALLOCATOR_URL, ZORI_CSV_PATH, PLANNER_TAX_YEAR.
        """
        env = os.environ if environ is None else environ
        timeout = env.get('TAX_API_TIMEOUT')
        tax_year = env.get('PLANNER_TAX_YEAR')
        return cls(
            api_ninjas_key=env.get('API_NINJAS_KEY') or None,
            tax_api_url=env.get('TAX_API_URL', DEFAULT_TAX_API_URL),
            tax_timeout_seconds=float(timeout) if timeout else 10.0,
            google_script_url=env.get('GOOGLE_SCRIPT_URL') or None,
            resend_api_key=env.get('RESEND_API_KEY') or None,
            email_from=env.get('EMAIL_FROM', DEFAULT_EMAIL_FROM),
            site_url=env.get('SITE_URL', DEFAULT_SITE_URL),
            allocator_url=env.get('ALLOCATOR_URL') or None,
            zori_csv_path=env.get('ZORI_CSV_PATH', DEFAULT_ZORI_CSV),
            tax_year=int(tax_year) if tax_year else 2025,
        )
