# cli.py
import logging
import sys
import time
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from snapshop.config import settings
from snapshop.controller import Storefront
from snapshop.database import JsonFileStore, MemoryStore

console = Console()

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

STRENGTH_STYLE = {"weak": "red", "medium": "yellow", "strong": "green"}


def build_storefront() -> Storefront:
    durable = JsonFileStore(settings.durable_path, prefix=settings.key_prefix)
    ephemeral = MemoryStore(prefix=settings.key_prefix)
    return Storefront(durable, ephemeral)


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Products Catalog",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("", width=3)
    table.add_column("Title", style="bold", width=22)
    table.add_column("Description", width=40)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Category", width=12)

    for p in products:
        table.add_row(
            str(p["id"]),
            p["icon"],
            p["title"],
            p["description"],
            p["price_display"],
            p["category"],
        )
    console.print(table)


def show_cart(cart: Dict[str, Any]):
    title = Text()
    title.append("🛒 Shopping Cart", style="bold")
    title.append(f" - {cart['item_count']} items", style="bold cyan")
    title.append(f" - Total: {cart['total_display']}", style="bold green")

    if cart["empty"]:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Product", style="bold", width=30)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Subtotal", justify="right", width=12)

    for line in cart["lines"]:
        table.add_row(
            str(line["id"]),
            f"{line['icon']} {line['title']}",
            str(line["quantity"]),
            line["price_display"],
            line["line_total_display"],
        )
    console.print(Panel(table, title=title, border_style="blue"))


def show_summary(checkout: Dict[str, Any]):
    console.print(
        Panel.fit(
            f"Subtotal: [bold]{checkout['subtotal_display']}[/bold]\n"
            f"Shipping: {checkout['shipping_display']}\n"
            f"Total:    [bold green]{checkout['total_display']}[/bold green]",
            title="🧾 Order Summary",
            border_style="green"
        )
    )


def show_errors(errors: Dict[str, str]):
    if not errors:
        return
    table = Table(box=box.SIMPLE, header_style="bold red")
    table.add_column("Field", style="bold")
    table.add_column("Problem", style="red")
    for field, message in errors.items():
        table.add_row(field, message)
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def show_toast(view: Dict[str, Any]):
    toast = view.get("toast")
    if toast:
        console.print(show_status(toast["message"], toast["kind"] == "success"))


def show_strength(strength: Optional[str]):
    if strength:
        style = STRENGTH_STYLE[strength]
        console.print(f"Password strength: [{style}]{strength.capitalize()} password[/{style}]")


# ---------------------------
# Dispatch wrapper
# ---------------------------
def run_action(shop: Storefront, action: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Dispatch one action, print the toast and any field errors, return the view-model."""
    shop.handle(action, payload)
    view = shop.render()
    show_toast(view)
    show_errors(view["errors"])
    return view


def wait_for_redirect(shop: Storefront):
    # the redirect is fire-and-forget in the browser; here we just let it come due
    redirect = shop.state.redirect
    if redirect is None:
        return
    delay = redirect.due_at - shop.clock()
    if delay > 0:
        time.sleep(delay)
    shop.handle("tick")


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer(shop: Storefront):
    ids = [str(p.id) for p in shop.catalog]
    titles = [p.title for p in shop.catalog]
    return WordCompleter(ids + titles, ignore_case=True)


def get_category_completer(view: Dict[str, Any]):
    return WordCompleter(view["categories"], ignore_case=True)


def resolve_product_id(shop: Storefront, raw: str) -> Optional[int]:
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    for p in shop.catalog:
        if p.title.lower() == raw.lower():
            return p.id
    return None


# ---------------------------
# Layout and Header
# ---------------------------
def create_header(view: Dict[str, Any]):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    who = view["session"]["user"]["name"] if view["session"] else "guest"
    header.add_row(
        f"🛍️ SnapShop · {who}",
        f"[bold blue]Storefront[/bold blue] [dim]({view['theme']} theme)[/dim]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = "", is_password: bool = False):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default,
                  is_password=is_password)


# ---------------------------
# Flows
# ---------------------------
def checkout_flow(shop: Storefront):
    view = shop.render()
    if view["cart"]["empty"]:
        console.print("[italic yellow]Your cart is empty[/italic yellow]")
        return
    show_summary(view["checkout"])
    fields = {
        "name": prompt_with_autocomplete("Full name"),
        "email": prompt_with_autocomplete("Email", default=view["session"]["user"]["email"] if view["session"] else ""),
        "phone": prompt_with_autocomplete("Phone"),
        "address": prompt_with_autocomplete("Address"),
        "city": prompt_with_autocomplete("City"),
        "zip": prompt_with_autocomplete("ZIP code"),
        "country": prompt_with_autocomplete("Country"),
    }
    view = run_action(shop, "checkout", fields)
    if view["last_order"] and not view["errors"]:
        console.print(Panel.fit(
            f"Order ID: [bold]{view['last_order']['id']}[/bold]",
            title="✅ Order Confirmation"
        ))


def signup_flow(shop: Storefront):
    view = run_action(shop, "auth.show_signup")
    if view["view"] != "auth":
        console.print(f"[yellow]Already signed in as {view['session']['user']['email']}[/yellow]")
        return
    name = prompt_with_autocomplete("Name")
    email = prompt_with_autocomplete("Email")
    phone = prompt_with_autocomplete("Phone")
    password = prompt_with_autocomplete("Password", is_password=True)
    show_strength(run_action(shop, "auth.password", {"password": password})["auth"]["password_strength"])
    confirm = prompt_with_autocomplete("Confirm password", is_password=True)
    terms = Confirm.ask("I agree to the Terms & Conditions")
    run_action(shop, "auth.signup", {
        "name": name, "email": email, "phone": phone,
        "password": password, "confirm_password": confirm, "terms": terms,
    })
    wait_for_redirect(shop)


def login_flow(shop: Storefront):
    view = run_action(shop, "auth.show_login")
    if view["view"] != "auth":
        console.print(f"[yellow]Already signed in as {view['session']['user']['email']}[/yellow]")
        return
    email = prompt_with_autocomplete("Email", default=view["auth"]["login_email"])
    password = prompt_with_autocomplete("Password", is_password=True)
    remember = Confirm.ask("Remember me?", default=False)
    run_action(shop, "auth.login", {"email": email, "password": password, "remember_me": remember})
    wait_for_redirect(shop)


# ---------------------------
# Main menu
# ---------------------------
def menu(shop: Storefront):
    console.clear()
    console.print(create_header(shop.render()))

    while True:
        shop.handle("tick")
        view = shop.render()

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "7", f"🛒 View cart ({view['cart']['item_count']})"),
            ("2", "🔍 Search products", "8", "✅ Checkout"),
            ("3", "🏷️ Filter by category", "9", "🌓 Toggle theme"),
            ("4", "➕ Add to cart", "10", "📝 Sign up"),
            ("5", "🔢 Change quantity", "11", "🔑 Log in"),
            ("6", "➖ Remove from cart", "q", "👋 Quit"),
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 12)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            f = view["filter"]
            console.print(f"[dim]category={f['category']} query={f['query']!r}[/dim]")
            if view["no_results"]:
                console.print("[italic yellow]No products match your search[/italic yellow]")
            else:
                show_products(view["products"])

        elif choice == "2":
            term = prompt_with_autocomplete("Enter search term", default=view["filter"]["query"])
            view = run_action(shop, "search", {"query": term})
            show_products(view["products"])

        elif choice == "3":
            category = prompt_with_autocomplete("Category", completer=get_category_completer(view), default="all")
            view = run_action(shop, "filter", {"category": category.strip()})
            show_products(view["products"])

        elif choice == "4":
            raw = prompt_with_autocomplete("Product ID or title", completer=get_product_completer(shop))
            pid = resolve_product_id(shop, raw)
            if pid is None:
                console.print(show_status(f"Unknown product: {raw}", False))
                continue
            view = run_action(shop, "cart.add", {"product_id": pid})
            show_cart(view["cart"])

        elif choice == "5":
            raw = prompt_with_autocomplete("Product ID or title", completer=get_product_completer(shop))
            pid = resolve_product_id(shop, raw)
            delta = IntPrompt.ask("Change by (e.g. 1 or -1)", default=1)
            if pid is not None:
                view = run_action(shop, "cart.quantity", {"product_id": pid, "delta": delta})
                show_cart(view["cart"])

        elif choice == "6":
            raw = prompt_with_autocomplete("Product ID or title", completer=get_product_completer(shop))
            pid = resolve_product_id(shop, raw)
            if pid is not None:
                view = run_action(shop, "cart.remove", {"product_id": pid})
                show_cart(view["cart"])

        elif choice == "7":
            show_cart(view["cart"])
            if not view["cart"]["empty"]:
                show_summary(view["checkout"])

        elif choice == "8":
            checkout_flow(shop)

        elif choice == "9":
            view = run_action(shop, "theme.toggle")
            console.print(f"Theme: [bold]{view['theme']}[/bold]")

        elif choice == "10":
            signup_flow(shop)

        elif choice == "11":
            login_flow(shop)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thank you for shopping with SnapShop! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        # Add a separator before next iteration
        console.print()
        console.rule(style="dim")


def main():
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    try:
        menu(build_storefront())
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
