"""Leap data model.

A Leap is one recommended financial action in the savings stack. Payroll
levers (401(k) match, HSA) come first, then the post-tax routing items:
emergency fund (40%), high-APR debt (40% of what remains), and the
retirement/brokerage split of the rest.

Each category is its own dataclass so category-specific fields only exist
where they mean something.
"""

from dataclasses import asdict, dataclass
from typing import ClassVar, Optional

STATUSES = ('next', 'queued', 'complete', 'locked')
CTA_ACTIONS = ('unlock', 'edit', 'apply', 'learn_more')


@dataclass(frozen=True)
class LeapCta:
    label: str
    action: str

    def __post_init__(self):
        if self.action not in CTA_ACTIONS:
            raise ValueError(f"Unknown CTA action: {self.action}")


UNLOCK_CTA = LeapCta(label='Unlock details', action='unlock')


@dataclass(frozen=True)
class Leap:
    category: ClassVar[str] = ''
    is_payroll: ClassVar[bool] = False

    id: str
    title: str
    status: str
    subtitle: Optional[str] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    delta_value: Optional[float] = None
    timeline_text: Optional[str] = None
    impact_text: Optional[str] = None
    why_now_text: Optional[str] = None
    requires_unlock: bool = False
    cta: Optional[LeapCta] = None
    allocation_badge: Optional[str] = None

    def __post_init__(self):
        if self.status not in STATUSES:
            raise ValueError(f"Unknown leap status: {self.status}")

    def to_dict(self) -> dict:
        data = asdict(self)
        data['category'] = self.category
        data['is_payroll'] = self.is_payroll
        return data


@dataclass(frozen=True)
class MatchLeap(Leap):
    category: ClassVar[str] = 'match'
    is_payroll: ClassVar[bool] = True

    # Employee + employer dollars added per year by the recommended %
    annual_contribution_increase: Optional[float] = None


@dataclass(frozen=True)
class HsaLeap(Leap):
    category: ClassVar[str] = 'hsa'
    is_payroll: ClassVar[bool] = True

    hsa_current_annual: Optional[float] = None
    hsa_max_annual: Optional[float] = None


@dataclass(frozen=True)
class EmergencyFundLeap(Leap):
    category: ClassVar[str] = 'emergency_fund'


@dataclass(frozen=True)
class DebtLeap(Leap):
    category: ClassVar[str] = 'debt'

    debt_apr_pct: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.debt_apr_pct is not None


@dataclass(frozen=True)
class RetirementSplitLeap(Leap):
    category: ClassVar[str] = 'retirement_split'

    split_retirement_pct: Optional[float] = None
    split_brokerage_pct: Optional[float] = None


@dataclass(frozen=True)
class BrokerageLeap(Leap):
    category: ClassVar[str] = 'brokerage'
