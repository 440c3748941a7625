"""
Validation rules for the checkout form.

These are the same rules `public/main.js` applies in the browser. Each field
has a pure validator returning an error message (or None), and `render`
combines the field values with an explicit `FormState` to decide which
errors are displayed and whether the pay button is enabled.
"""

import re
from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, FrozenSet, Mapping, Optional

FIELDS = ("name", "email", "contact", "amount")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CONTACT_RE = re.compile(r"^[6-9]\d{9}$")
AMOUNT_RE = re.compile(r"^\d+(\.\d{1,2})?$")
# Number literals the browser's Number() accepts: decimal with optional exponent, or 0x/0o/0b.
DECIMAL_LITERAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
RADIX_LITERAL_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")

MIN_AMOUNT = Decimal("1")


def normalize_contact(raw: str) -> str:
    return re.sub(r"\D", "", raw or "")


def validate_name(raw: str) -> Optional[str]:
    value = (raw or "").strip()
    if not value:
        return "Name is required."
    if len(value) < 2:
        return "Enter a valid name."
    return None


def validate_email(raw: str) -> Optional[str]:
    value = (raw or "").strip()
    if not value:
        return "Email is required."
    if not EMAIL_RE.match(value):
        return "Enter a valid email."
    return None


def validate_contact(raw: str) -> Optional[str]:
    digits = normalize_contact(raw)
    if not digits:
        return "Contact is required."
    if not CONTACT_RE.match(digits):
        return "Enter a valid 10-digit mobile number."
    return None


def _parse_amount(value: str) -> Optional[Decimal]:
    if RADIX_LITERAL_RE.match(value):
        return Decimal(int(value, 0))
    if not DECIMAL_LITERAL_RE.match(value):
        return None
    amount = Decimal(value)
    # Past the double range the browser reads Infinity
    if amount and amount.adjusted() > 308:
        return None
    return amount


def validate_amount(raw: str) -> Optional[str]:
    value = (raw or "").strip()
    if not value:
        return "Amount is required."
    amount = _parse_amount(value)
    if amount is None:
        return "Enter a valid number."
    if amount < MIN_AMOUNT:
        return "Minimum amount is ₹1.00"
    if not AMOUNT_RE.match(value):
        return "Max two decimals allowed."
    return None


VALIDATORS: Dict[str, Callable[[str], Optional[str]]] = {
    "name": validate_name,
    "email": validate_email,
    "contact": validate_contact,
    "amount": validate_amount,
}


def amount_to_paise(raw: str) -> int:
    """Rupees as typed into the form, converted for the create-order call."""
    amount = _parse_amount((raw or "").strip())
    if amount is None:
        raise ValueError(f"not an amount: {raw!r}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class FormState:
    touched: FrozenSet[str] = frozenset()
    submit_attempted: bool = False
    key_loaded: bool = False

    def touch(self, name: str) -> "FormState":
        if name not in FIELDS:
            return self
        return replace(self, touched=self.touched | {name})

    def attempt_submit(self) -> "FormState":
        return replace(self, submit_attempted=True)

    def with_key(self, loaded: bool = True) -> "FormState":
        return replace(self, key_loaded=loaded)

    def reset(self) -> "FormState":
        # After a verified payment the form clears, the key stays loaded.
        return FormState(key_loaded=self.key_loaded)


@dataclass(frozen=True)
class FormView:
    errors: Dict[str, str] = field(default_factory=dict)
    valid: Dict[str, bool] = field(default_factory=dict)
    ready: bool = False
    status: str = ""
    first_invalid: Optional[str] = None


def render(values: Mapping[str, str], state: FormState) -> FormView:
    """
    Compute what the form shows for the given values and state.

    An error is displayed only once its field has been touched (blurred) or
    a submit was attempted; before that the field is silently invalid.
    Submission is ready only when every field passes and the gateway key
    has been loaded.
    """
    errors: Dict[str, str] = {}
    valid: Dict[str, bool] = {}
    first_invalid = None

    for name in FIELDS:
        message = VALIDATORS[name](values.get(name, ""))
        valid[name] = message is None
        if message is None:
            continue
        if first_invalid is None:
            first_invalid = name
        if name in state.touched or state.submit_attempted:
            errors[name] = message

    all_valid = first_invalid is None
    ready = all_valid and state.key_loaded
    if ready:
        status = "Ready to pay"
    elif state.key_loaded:
        status = "Fix form errors"
    else:
        status = "Loading config..."

    return FormView(errors=errors, valid=valid, ready=ready, status=status, first_invalid=first_invalid)
