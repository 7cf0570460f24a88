# sdk/snapclient.py
import requests
from typing import Optional, Any, Dict

from snapshop.config import settings


class SnapShopClient:
    """Thin client for the local storefront API.

    `session` can be any requests-compatible session; tests pass a
    fastapi TestClient so no server is needed.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: int = 10, session: Any = None):
        self.base_url = (base_url if base_url is not None else settings.api_url).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None):
        r = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def _post(self, path: str, payload: Optional[Dict[str, Any]] = None):
        r = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def reset(self):
        return self._post("/reset")

    # Products
    def list_products(self, category: Optional[str] = None, query: Optional[str] = None):
        params = {}
        if category:
            params["category"] = category
        if query:
            params["q"] = query
        return self._get("/products", params)

    def get_product(self, product_id: int):
        return self._get(f"/products/{product_id}")

    # Cart
    def view_cart(self):
        return self._get("/cart")

    def add_to_cart(self, product_id: int):
        return self._post("/cart/add", {"product_id": product_id})

    def remove_from_cart(self, product_id: int):
        return self._post("/cart/remove", {"product_id": product_id})

    def change_quantity(self, product_id: int, delta: int):
        return self._post("/cart/quantity", {"product_id": product_id, "delta": delta})

    # Checkout
    def checkout_summary(self):
        return self._get("/checkout/summary")

    def place_order(self, **fields: str):
        # validation failures come back as 422 with per-field errors; return the body
        r = self.session.post(f"{self.base_url}/checkout", json=fields, timeout=self.timeout)
        if r.status_code in (409, 422):
            return r.json()
        r.raise_for_status()
        return r.json()

    # Auth
    def signup(self, name: str, email: str, phone: str, password: str,
               confirm_password: Optional[str] = None, terms: bool = True):
        payload = {
            "name": name, "email": email, "phone": phone, "password": password,
            "confirm_password": password if confirm_password is None else confirm_password,
            "terms": terms,
        }
        return self._post("/auth/signup", payload)

    def login(self, email: str, password: str, remember_me: bool = False):
        return self._post("/auth/login", {"email": email, "password": password, "remember_me": remember_me})

    def session_info(self):
        return self._get("/auth/session")

    def password_strength(self, password: str):
        return self._post("/auth/password-strength", {"password": password})["strength"]

    # Theme
    def theme(self):
        return self._get("/theme")["theme"]

    def toggle_theme(self):
        return self._post("/theme/toggle")["theme"]

    def state(self):
        return self._get("/state")
