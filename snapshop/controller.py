# snapshop/controller.py
import logging
import time
from typing import Any, Callable, Dict, Iterable, Literal, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from . import auth
from .cart import CartStore, find_line, item_count, total
from .catalog import PRODUCTS, ALL, categories, visible_products
from .checkout import checkout_summary, place_order
from .config import settings, Settings
from .database import KeyValueStore
from .errors import SnapShopError, ValidationFailed, UnknownAction
from .formatters import format_currency
from .models import (
    CartLine, FilterState, Order, Product, Redirect, Session, Toast,
    CheckoutForm, SignupForm, LoginForm, CartProductIn, QuantityDeltaIn, PasswordIn, SearchIn, FilterIn,
    Theme,
)
from .theme import load_theme, toggle_theme
from .validators import password_strength

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class AppState(BaseModel):
    """Everything the screens show. Transitions build a new AppState."""

    model_config = ConfigDict(frozen=True)

    view: Literal["storefront", "auth"] = "storefront"
    filter_state: FilterState = FilterState()
    lines: Tuple[CartLine, ...] = ()
    auth_form: Literal["login", "signup"] = "login"
    errors: Dict[str, str] = {}
    toast: Optional[Toast] = None
    redirect: Optional[Redirect] = None
    login_email: str = ""
    theme: Theme = "light"
    password_strength: Optional[str] = None
    session: Optional[Session] = None
    last_order: Optional[Order] = None


def _parse(model: Type[M], payload: Optional[Dict[str, Any]]) -> M:
    try:
        return model.model_validate(payload or {})
    except ValidationError as e:
        errors = {".".join(str(p) for p in err["loc"]) or "payload": err["msg"] for err in e.errors()}
        raise ValidationFailed(errors)


# ---------------------------
# Rendering
# ---------------------------
def _product_view(p: Product, currency: str) -> Dict[str, Any]:
    return {**p.model_dump(), "price_display": format_currency(p.price, currency)}


def _line_view(line: CartLine, currency: str) -> Dict[str, Any]:
    return {
        "id": line.product.id,
        "title": line.product.title,
        "icon": line.product.icon,
        "price": line.product.price,
        "price_display": format_currency(line.product.price, currency),
        "quantity": line.quantity,
        "line_total": line.line_total,
        "line_total_display": format_currency(line.line_total, currency),
    }


def render(state: AppState, catalog: Iterable[Product] = PRODUCTS, now: Optional[float] = None,
           config: Settings = settings) -> Dict[str, Any]:
    """Derive the view-model for the current state. Pure: no side effects."""
    catalog = tuple(catalog)
    now = time.time() if now is None else now
    currency = config.currency
    visible = visible_products(catalog, state.filter_state)
    summary = checkout_summary(state.lines, config.shipping)
    toast = state.toast if state.toast and state.toast.expires_at > now else None
    return {
        "view": state.view,
        "theme": state.theme,
        "filter": state.filter_state.model_dump(),
        "categories": [ALL, *categories(catalog)],
        "products": [_product_view(p, currency) for p in visible],
        "no_results": not visible,
        "cart": {
            "lines": [_line_view(line, currency) for line in state.lines],
            "item_count": item_count(state.lines),
            "total": total(state.lines),
            "total_display": format_currency(total(state.lines), currency),
            "empty": not state.lines,
        },
        "checkout": {
            **summary,
            "subtotal_display": format_currency(summary["subtotal"], currency),
            "shipping_display": format_currency(summary["shipping"], currency),
            "total_display": format_currency(summary["total"], currency),
            "enabled": bool(state.lines),
        },
        "auth": {
            "form": state.auth_form,
            "login_email": state.login_email,
            "password_strength": state.password_strength,
        },
        "errors": dict(state.errors),
        "toast": toast.model_dump() if toast else None,
        "session": state.session.model_dump(by_alias=True) if state.session else None,
        "last_order": {"id": state.last_order.id, "total": state.last_order.total} if state.last_order else None,
    }


# ---------------------------
# Controller
# ---------------------------
class Storefront:
    """Owns the application state and its collaborators.

    Every user action goes through handle(action, payload), which returns the
    new state; render() turns the current state into a view-model.
    """

    def __init__(self, durable: KeyValueStore, ephemeral: KeyValueStore,
                 catalog: Iterable[Product] = PRODUCTS, view: str = "storefront",
                 clock: Callable[[], float] = time.time, config: Settings = settings):
        self.durable = durable
        self.ephemeral = ephemeral
        self.catalog = tuple(catalog)
        self.clock = clock
        self.config = config
        self.cart = CartStore(durable, self.catalog)
        self.last_error: Optional[SnapShopError] = None
        self.state = AppState(
            view=view,
            lines=self.cart.lines,
            theme=load_theme(durable, config.prefers_dark),
            session=auth.current_session(durable, ephemeral),
        )
        if view == "auth":
            self.state = self._startup_guard(self.state)

        self._handlers: Dict[str, Callable[[AppState, Dict[str, Any]], AppState]] = {
            "search": self._search,
            "filter": self._filter,
            "cart.add": self._cart_add,
            "cart.remove": self._cart_remove,
            "cart.quantity": self._cart_quantity,
            "checkout": self._checkout,
            "theme.toggle": self._theme_toggle,
            "auth.show_login": self._show_login,
            "auth.show_signup": self._show_signup,
            "auth.password": self._password_input,
            "auth.signup": self._signup,
            "auth.login": self._login,
            "tick": self._tick,
        }

    # --- dispatch ---
    def handle(self, action: str, payload: Optional[Dict[str, Any]] = None) -> AppState:
        handler = self._handlers.get(action)
        if handler is None:
            raise UnknownAction(f"unknown action: {action}")
        self.last_error = None
        try:
            self.state = handler(self.state, payload or {})
        except SnapShopError as e:
            self.last_error = e
            logger.debug("%s rejected: %s", action, e.detail)
            self.state = self.state.model_copy(update={
                "errors": e.errors,
                "toast": self._toast(e.message, "error"),
            })
        return self.state

    def render(self) -> Dict[str, Any]:
        return render(self.state, self.catalog, self.clock(), self.config)

    # --- helpers ---
    def _toast(self, message: str, kind: str = "success", seconds: Optional[float] = None) -> Toast:
        seconds = self.config.toast_seconds if seconds is None else seconds
        return Toast(message=message, kind=kind, expires_at=self.clock() + seconds)

    def _redirect(self, target: str, delay: Optional[float] = None) -> Redirect:
        delay = self.config.redirect_delay if delay is None else delay
        return Redirect(target=target, due_at=self.clock() + delay)

    def _startup_guard(self, state: AppState) -> AppState:
        # the auth screen is unreachable while a session exists
        if state.session is not None and state.session.is_authenticated:
            logger.info("already signed in as %s, going to storefront", state.session.user.email)
            return state.model_copy(update={"view": "storefront"})
        return state

    # --- storefront ---
    def _search(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        req = _parse(SearchIn, payload)
        return state.model_copy(update={"filter_state": state.filter_state.model_copy(update={"query": req.query})})

    def _filter(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        req = _parse(FilterIn, payload)
        return state.model_copy(update={"filter_state": state.filter_state.model_copy(update={"category": req.category})})

    def _cart_add(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        req = _parse(CartProductIn, payload)
        before = state.lines
        lines = self.cart.add(req.product_id)
        if lines == before:
            return state
        title = find_line(lines, req.product_id).product.title
        return state.model_copy(update={"lines": lines, "toast": self._toast(f"{title} added to cart!")})

    def _cart_remove(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        req = _parse(CartProductIn, payload)
        if find_line(state.lines, req.product_id) is None:
            return state
        lines = self.cart.remove(req.product_id)
        return state.model_copy(update={"lines": lines, "toast": self._toast("Item removed from cart")})

    def _cart_quantity(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        req = _parse(QuantityDeltaIn, payload)
        if find_line(state.lines, req.product_id) is None:
            return state
        lines = self.cart.set_quantity_delta(req.product_id, req.delta)
        update: Dict[str, Any] = {"lines": lines}
        if find_line(lines, req.product_id) is None:
            update["toast"] = self._toast("Item removed from cart")
        return state.model_copy(update=update)

    def _checkout(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        state = state.model_copy(update={"errors": {}})
        form = _parse(CheckoutForm, payload)
        order = place_order(self.cart, form, shipping=self.config.shipping)
        return state.model_copy(update={
            "lines": self.cart.lines,
            "last_order": order,
            "toast": self._toast("Order placed successfully! Thank you for shopping with SnapShop.",
                                 seconds=self.config.order_toast_seconds),
        })

    def _theme_toggle(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        return state.model_copy(update={"theme": toggle_theme(self.durable, state.theme)})

    # --- auth screen ---
    def _show_login(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        return self._startup_guard(state.model_copy(update={"view": "auth", "auth_form": "login", "errors": {}}))

    def _show_signup(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        return self._startup_guard(state.model_copy(update={"view": "auth", "auth_form": "signup", "errors": {}}))

    def _password_input(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        req = _parse(PasswordIn, payload)
        return state.model_copy(update={"password_strength": password_strength(req.password)})

    def _signup(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        state = state.model_copy(update={"errors": {}})
        form = _parse(SignupForm, payload)
        account = auth.signup(self.durable, form)
        return state.model_copy(update={
            "login_email": account.email,
            "toast": self._toast("Account created successfully! Please login."),
            "redirect": self._redirect("login"),
        })

    def _login(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        state = state.model_copy(update={"errors": {}})
        form = _parse(LoginForm, payload)
        session = auth.login(self.durable, self.ephemeral, form)
        return state.model_copy(update={
            "session": session,
            "toast": self._toast("Login successful! Redirecting..."),
            "redirect": self._redirect("storefront"),
        })

    # --- timers ---
    def _tick(self, state: AppState, payload: Dict[str, Any]) -> AppState:
        now = self.clock()
        update: Dict[str, Any] = {}
        if state.toast is not None and state.toast.expires_at <= now:
            update["toast"] = None
        redirect = state.redirect
        if redirect is not None and redirect.due_at <= now:
            update["redirect"] = None
            if redirect.target == "storefront":
                update["view"] = "storefront"
            else:
                update.update({"view": "auth", "auth_form": "login", "errors": {}})
        return state.model_copy(update=update) if update else state
