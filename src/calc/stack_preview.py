"""Savings stack preview shown before the full plan is unlocked.

Only salary, match and contribution % are known at this point, so steps
that need debt or retirement-focus answers are marked for unlock.
"""

from dataclasses import dataclass
from typing import List, Optional

STEP_STATUSES = ('ready', 'in_progress', 'completed', 'unlock', 'later')


@dataclass
class StackPreviewStep:
    step_number: int
    name: str
    why: str
    status: str
    badge: Optional[str] = None


def get_stack_preview_steps(has_employer_match: bool, current_401k_pct: float,
                            match_pct: float) -> List[StackPreviewStep]:
    match_captured = not has_employer_match or current_401k_pct >= match_pct

    return [
        StackPreviewStep(
            step_number=1,
            name='Emergency Fund (1-month buffer first)',
            why="Start with a 1-month safety buffer. We'll extend to 3–6 months in the full plan.",
            status='ready',
        ),
        StackPreviewStep(
            step_number=2,
            name='401(k) Match: captured' if match_captured else '401(k) Match',
            why=("Guaranteed return, and you're capturing it." if match_captured
                 else 'Guaranteed return ("free money"). Capture your full match next.'),
            status='completed' if match_captured else 'in_progress',
        ),
        StackPreviewStep(
            step_number=3,
            name='High-APR Debt (APR ≥ 10%)',
            why="Interest avoided is a guaranteed return. We'll prioritize this in your full plan.",
            status='unlock',
            badge='Unlock in full plan',
        ),
        StackPreviewStep(
            step_number=4,
            name='Retirement vs Brokerage split (post-match)',
            why="Your split depends on Retirement Focus (High / Medium / Low). We'll set it in the full plan.",
            status='unlock',
            badge='Unlock in full plan',
        ),
        StackPreviewStep(
            step_number=5,
            name='Brokerage investing (later)',
            why='After the above priorities.',
            status='later',
            badge='Later',
        ),
    ]
