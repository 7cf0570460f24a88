# snapshop/errors.py
from typing import Dict, Optional


class SnapShopError(Exception):
    """Base for every user-facing failure. Never fatal: the action is aborted
    and the user may try again."""

    status_code = 400
    detail = "request failed"
    field: Optional[str] = None
    # short message for the toast, the field errors carry the rest
    toast: Optional[str] = None

    def __init__(self, detail: Optional[str] = None, errors: Optional[Dict[str, str]] = None):
        self.detail = detail or self.detail
        self.errors: Dict[str, str] = dict(errors or {})
        if self.field and self.field not in self.errors:
            self.errors[self.field] = self.detail
        super().__init__(self.detail)

    @property
    def message(self) -> str:
        return self.toast or self.detail


class ValidationFailed(SnapShopError):
    status_code = 422
    detail = "validation failed"

    def __init__(self, errors: Dict[str, str]):
        super().__init__(errors=errors)

    @property
    def message(self) -> str:
        # a form-level error (terms) is the only one without an inline field
        return self.errors.get("terms") or "Please fix the highlighted fields"


class DuplicateEmail(SnapShopError):
    status_code = 409
    detail = "An account with this email already exists"
    field = "email"
    toast = "Email already registered. Please login."


class AccountNotFound(SnapShopError):
    status_code = 404
    detail = "No account found with this email"
    field = "email"
    toast = "Account not found. Please sign up first."


class IncorrectPassword(SnapShopError):
    status_code = 401
    detail = "Incorrect password"
    field = "password"
    toast = "Incorrect password. Please try again."


class EmptyCart(SnapShopError):
    status_code = 409
    detail = "cart empty"
    toast = "Your cart is empty"


class UnknownAction(SnapShopError):
    status_code = 400
    detail = "unknown action"
