# snapshop/validators.py
import re
from typing import Dict, Optional

from .models import CheckoutForm, SignupForm, LoginForm

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"[0-9\s\-+()]{10,}")

MIN_PASSWORD = 6


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def is_phone(value: str) -> bool:
    return bool(PHONE_RE.fullmatch(value))


def min_length(value: str, n: int) -> bool:
    return len(value) >= n


# ---------------------------
# Checkout form
# ---------------------------
# (field, minimum length, message) for the plain length rules
_CHECKOUT_LENGTHS = (
    ("name", 2, "Please enter a valid name"),
    ("address", 10, "Please enter a complete address"),
    ("city", 2, "Please enter a valid city"),
    ("zip", 4, "Please enter a valid ZIP code"),
    ("country", 2, "Please enter a valid country"),
)


def clean_checkout(form: CheckoutForm) -> CheckoutForm:
    return CheckoutForm(**{k: v.strip() for k, v in form.model_dump().items()})


def validate_checkout(form: CheckoutForm) -> Dict[str, str]:
    """Check every rule and report every violation. Empty mapping means valid."""
    form = clean_checkout(form)
    errors: Dict[str, str] = {}
    for field, n, message in _CHECKOUT_LENGTHS:
        if not min_length(getattr(form, field), n):
            errors[field] = message
    if not is_email(form.email):
        errors["email"] = "Please enter a valid email address"
    if not is_phone(form.phone):
        errors["phone"] = "Please enter a valid phone number"
    return errors


# ---------------------------
# Auth forms
# ---------------------------
def validate_signup(form: SignupForm) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not min_length(form.name.strip(), 2):
        errors["name"] = "Name must be at least 2 characters"
    if not is_email(form.email.strip()):
        errors["email"] = "Please enter a valid email address"
    if not is_phone(form.phone.strip()):
        errors["phone"] = "Please enter a valid phone number"
    if not min_length(form.password, MIN_PASSWORD):
        errors["password"] = f"Password must be at least {MIN_PASSWORD} characters"
    if form.password != form.confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    if not form.terms:
        errors["terms"] = "Please agree to the Terms & Conditions"
    return errors


def validate_login(form: LoginForm) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not is_email(form.email.strip()):
        errors["email"] = "Please enter a valid email address"
    if not min_length(form.password, MIN_PASSWORD):
        errors["password"] = f"Password must be at least {MIN_PASSWORD} characters"
    return errors


# ---------------------------
# Password strength meter
# ---------------------------
def password_score(password: str) -> int:
    checks = (
        len(password) >= 8,
        len(password) >= 12,
        re.search(r"[a-z]", password) is not None,
        re.search(r"[A-Z]", password) is not None,
        re.search(r"[0-9]", password) is not None,
        re.search(r"[^a-zA-Z0-9]", password) is not None,
    )
    return sum(checks)


def password_strength(password: str) -> Optional[str]:
    """Advisory only, signup never blocks on it."""
    if not password:
        return None
    score = password_score(password)
    if score <= 2:
        return "weak"
    if score <= 4:
        return "medium"
    return "strong"
