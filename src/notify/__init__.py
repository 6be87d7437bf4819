"""Outbound collaborators: waitlist store and email sender."""

from notify.email import EmailSender, ResendEmailSender, build_leap_plan_email, build_rent_plan_email
from notify.waitlist import WaitlistStore

__all__ = [
    'EmailSender',
    'ResendEmailSender',
    'WaitlistStore',
    'build_leap_plan_email',
    'build_rent_plan_email',
]
