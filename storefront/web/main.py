from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from storefront.config import settings
from storefront.constants import PRODUCTS
from storefront.store.cart import Product
from storefront.utils.formatters import money
from storefront.web.cart_page import CartPage
from storefront.web.pages import PageRegistry

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

app = FastAPI(title="Storefront Cart")
app.state.registry = PageRegistry()

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = money

if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.middleware("http")
async def _browser_id(request: Request, call_next):
    sid = request.cookies.get(settings.session_cookie)
    issued = not sid
    if issued:
        sid = secrets.token_urlsafe(16)
    request.state.sid = sid
    response = await call_next(request)
    if issued:
        response.set_cookie(settings.session_cookie, sid, httponly=True, samesite="lax")
    return response


@app.on_event("shutdown")
def _shutdown() -> None:
    app.state.registry.close()


async def current_page(request: Request) -> CartPage:
    return await request.app.state.registry.get(request.state.sid)


def _product(product_id: str) -> Product:
    row = PRODUCTS.get(product_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Product not found")
    name, price = row
    return Product(id=product_id, name=name, price=price)


def _render(request: Request, page: CartPage, name: str, ctx: dict[str, Any]) -> HTMLResponse:
    base = {
        "session": page.session,
        "cart_count": sum(it.quantity for it in page.store.items),
    }
    base.update(ctx)
    return templates.TemplateResponse(request, name, base)


def _back(url: str = "/cart") -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


# ---------------- catalog ----------------

@app.get("/", response_class=HTMLResponse)
async def index(request: Request, page: CartPage = Depends(current_page)):
    products = [_product(pid) for pid in PRODUCTS]
    return _render(request, page, "index.html", {"products": products})


@app.get("/product/{product_id}", response_class=HTMLResponse)
async def product_detail(request: Request, product_id: str, page: CartPage = Depends(current_page)):
    product = _product(product_id)
    item = page.store.get(product_id)
    return _render(
        request,
        page,
        "product.html",
        {"product": product, "in_cart": item.quantity if item else 0},
    )


@app.post("/product/{product_id}/add")
async def product_add(product_id: str, quantity: int = Form(1), page: CartPage = Depends(current_page)):
    page.store.add_item(_product(product_id), quantity)
    return _back()


# ---------------- cart ----------------

@app.get("/cart", response_class=HTMLResponse)
async def cart(request: Request, page: CartPage = Depends(current_page)):
    return _render(request, page, "cart.html", page.context())


@app.post("/cart/quantity")
async def cart_quantity(
    product_id: str = Form(...),
    quantity: int = Form(...),
    page: CartPage = Depends(current_page),
):
    page.change_quantity(product_id, quantity)
    return _back()


@app.post("/cart/remove")
async def cart_remove(product_id: str = Form(...), page: CartPage = Depends(current_page)):
    page.remove_item(product_id)
    return _back()


@app.post("/cart/clear")
async def cart_clear(page: CartPage = Depends(current_page)):
    page.clear_cart()
    return _back()


# ---------------- coupon ----------------

@app.post("/cart/coupon")
async def coupon_apply(code: str = Form(""), page: CartPage = Depends(current_page)):
    await page.apply_coupon(code.strip())
    return _back()


@app.post("/cart/coupon/remove")
async def coupon_remove(page: CartPage = Depends(current_page)):
    page.remove_coupon()
    return _back()


# ---------------- checkout ----------------

@app.post("/cart/checkout")
async def checkout(request: Request, page: CartPage = Depends(current_page)):
    ok, result = await page.checkout()
    if not ok:
        return _back()
    # leaves the app: hosted payment page
    logger.info("browser %s -> checkout session", request.state.sid[:8])
    return RedirectResponse(url=result, status_code=303)


# ---------------- auth ----------------

@app.post("/login")
async def login(user_id: str = Form(...), page: CartPage = Depends(current_page)):
    user_id = user_id.strip()
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id is required")
    page.sessions.sign_in(user_id)
    return _back()


@app.post("/logout")
async def logout(page: CartPage = Depends(current_page)):
    page.sessions.sign_out()
    return _back()
