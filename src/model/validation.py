"""Validation of user-supplied inputs.

Validators raise InputValidationError with a message that can be shown to
the user as-is. Nothing is computed for an input that fails validation.
"""

from typing import Any, Optional

VALID_INTENTS = ('lock_plan', 'unlock_full_stack')


class InputValidationError(ValueError):
    """Raised when a user input is missing or out of range."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def parse_number(value: Any) -> Optional[float]:
    """Parse a number from a query value; None for blank or non-numeric input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(',', '').replace('$', '')
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or number in (float('inf'), float('-inf')):
        return None
    return number


def validate_salary(value: Any) -> float:
    salary = parse_number(value)
    if salary is None:
        raise InputValidationError('salary', 'Please enter your annual salary.')
    if salary <= 0:
        raise InputValidationError('salary', 'Salary must be greater than zero.')
    return salary


def validate_state(value: Any) -> str:
    state = (value or '').strip() if isinstance(value, str) else ''
    if not state:
        raise InputValidationError('state', 'Please select your state.')
    return state.upper() if len(state) == 2 else state


def validate_intent(value: Any) -> str:
    if value not in VALID_INTENTS:
        raise InputValidationError('intent', 'Please choose what you want to do with your plan.')
    return value


def validate_email(value: Any) -> str:
    email = value.strip() if isinstance(value, str) else ''
    if not email or '@' not in email:
        raise InputValidationError('email', 'Valid email is required.')
    return email
