# snapshop/main.py
import logging
from typing import Optional, Dict, Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog import ALL, get_product, visible_products
from .config import settings
from .controller import Storefront
from .database import JsonFileStore, MemoryStore
from .errors import SnapShopError, ValidationFailed
from .formatters import format_currency
from .models import CartProductIn, QuantityDeltaIn, CheckoutForm, SignupForm, LoginForm, PasswordIn, FilterState

logger = logging.getLogger(__name__)

app = FastAPI(title="snapshop (local storefront)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # or restrict to the page serving the storefront
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Stores and the single storefront they back
# ---------------------------
DURABLE = JsonFileStore(settings.durable_path, prefix=settings.key_prefix)
EPHEMERAL = MemoryStore(prefix=settings.key_prefix)
SHOP = Storefront(DURABLE, EPHEMERAL)


@app.exception_handler(SnapShopError)
async def snapshop_error_handler(request: Request, exc: SnapShopError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "errors": exc.errors})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # same shape as the dispatcher's field errors; drop the "body"/"query" prefix
    errors = {".".join(str(p) for p in err["loc"][1:]) or "payload": err["msg"] for err in exc.errors()}
    return await snapshop_error_handler(request, ValidationFailed(errors))


def _dispatch(action: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    SHOP.handle(action, payload)
    if SHOP.last_error is not None:
        raise SHOP.last_error
    return SHOP.render()


def _product_out(p) -> Dict[str, Any]:
    return {**p.model_dump(), "price_display": format_currency(p.price)}


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/products")
async def list_products(category: str = ALL, q: str = ""):
    return [_product_out(p) for p in visible_products(SHOP.catalog, FilterState(category=category, query=q))]


@app.get("/products/{product_id}")
async def get_product_endpoint(product_id: int):
    p = get_product(SHOP.catalog, product_id)
    if not p:
        raise HTTPException(status_code=404, detail="product not found")
    return _product_out(p)


# ---------------------------
# Cart endpoints
# ---------------------------
@app.get("/cart")
async def view_cart():
    return SHOP.render()["cart"]


@app.post("/cart/add")
async def cart_add(payload: CartProductIn):
    return _dispatch("cart.add", payload.model_dump())["cart"]


@app.post("/cart/remove")
async def cart_remove(payload: CartProductIn):
    return _dispatch("cart.remove", payload.model_dump())["cart"]


@app.post("/cart/quantity")
async def cart_quantity(payload: QuantityDeltaIn):
    return _dispatch("cart.quantity", payload.model_dump())["cart"]


# ---------------------------
# Checkout (simulated)
# ---------------------------
@app.get("/checkout/summary")
async def checkout_summary():
    return SHOP.render()["checkout"]


@app.post("/checkout")
async def checkout(payload: CheckoutForm):
    _dispatch("checkout", payload.model_dump())
    order = SHOP.state.last_order
    return {"status": "order placed", "order": order.model_dump()}


# ---------------------------
# Auth endpoints
# ---------------------------
@app.post("/auth/signup", status_code=201)
async def auth_signup(payload: SignupForm):
    view = _dispatch("auth.signup", payload.model_dump())
    return {"status": "account created", "login_email": view["auth"]["login_email"]}


@app.post("/auth/login")
async def auth_login(payload: LoginForm):
    view = _dispatch("auth.login", payload.model_dump())
    return {"status": "logged in", "session": view["session"], "redirect": "storefront"}


@app.get("/auth/session")
async def auth_session():
    session = SHOP.state.session
    return {
        "authenticated": bool(session and session.is_authenticated),
        "session": session.model_dump(by_alias=True) if session else None,
    }


@app.post("/auth/password-strength")
async def auth_password_strength(payload: PasswordIn):
    view = _dispatch("auth.password", payload.model_dump())
    return {"strength": view["auth"]["password_strength"]}


# ---------------------------
# Theme
# ---------------------------
@app.get("/theme")
async def get_theme():
    return {"theme": SHOP.state.theme}


@app.post("/theme/toggle")
async def theme_toggle():
    return {"theme": _dispatch("theme.toggle")["theme"]}


# ---------------------------
# View-model of the whole screen
# ---------------------------
@app.get("/state")
async def get_state():
    return SHOP.render()


# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/reset")
async def reset_all():
    global SHOP
    DURABLE.clear()
    EPHEMERAL.clear()
    SHOP = Storefront(DURABLE, EPHEMERAL)
    logger.info("store reset")
    return {"status": "reset"}


def serve(host: str = "127.0.0.1", port: int = 8085):
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
