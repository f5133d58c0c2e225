# cli.py - interactive inventory console
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from inventory.dashboard import build_dashboard
from inventory.models import Product
from sdk.pyinventory import InventoryClient

console = Console()
c = InventoryClient(base_url=os.getenv("INVENTORY_API_URL", "http://127.0.0.1:8080"))


# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], title: str = "📦 Inventory"):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=26)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Stock", justify="right", width=8)

    for p in products:
        table.add_row(
            p.get("id", "N/A"),
            p.get("name", "N/A"),
            f"${p.get('price', 0):.2f}",
            str(p.get("stock", 0)),
        )
    console.print(table)


def show_dashboard(products: List[Dict[str, Any]]):
    data = build_dashboard([Product(**p) for p in products])

    console.print(Panel.fit(
        f"💰 [bold]Total inventory value:[/bold] [green]{data.total_value}[/green]",
        title="📊 Dashboard",
        border_style="green"
    ))
    show_products([p.to_wire() for p in data.top_products], title="🏆 Top products by price")

    chart = Table(box=box.SIMPLE, header_style="bold blue")
    chart.add_column("Product", width=24)
    chart.add_column("Stock", justify="right", width=8)
    chart.add_column("", width=40)
    peak = max(data.chart_values, default=0) or 1
    for label, value in zip(data.chart_labels, data.chart_values):
        bar = "█" * max(0, int(value * 40 / peak))
        chart.add_row(label, str(value), f"[cyan]{bar}[/cyan]")
    console.print(chart)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    On failure the error is shown in the status panel and None is returned.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


def refresh_cache():
    global product_cache
    product_cache = try_api(c.list_products) or []


# ---------------------------
# Input helpers
# ---------------------------
def get_product_completer():
    if not product_cache:
        refresh_cache()
    return WordCompleter([p["id"] for p in product_cache if p.get("id")], ignore_case=True)


def find_cached(product_id: str) -> Dict[str, Any]:
    for p in product_cache:
        if p.get("id") == product_id:
            return p
    return {}


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 Inventory",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    refresh_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        options = [
            ("1", "📦 List products", "4", "🗑️ Delete product"),
            ("2", "➕ Create product", "5", "📊 Dashboard"),
            ("3", "✏️ Update product", "6", "💾 Export backup"),
            ("", "", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 7)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded")
            if products is not None:
                show_products(products)

        elif choice == "2":
            name = prompt_with_autocomplete("Product name")
            price = ask_float("💰 Price", default=10.0)
            stock = IntPrompt.ask("📦 Stock", default=1)
            resp = try_api(c.create_product, name, price, stock,
                           success_msg=f"Product '{name}' created")
            if resp:
                console.print(Panel(f"New product id: [green]{resp['inserted_id']}[/green]"))
                refresh_cache()

        elif choice == "3":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            current = find_cached(pid)
            name = prompt_with_autocomplete("Product name", default=current.get("name", ""))
            price = ask_float("💰 Price", default=current.get("price", 10.0))
            stock = IntPrompt.ask("📦 Stock", default=current.get("stock", 1))
            if try_api(c.update_product, pid, name, price, stock,
                       success_msg=f"Product {pid} updated") is not None:
                refresh_cache()

        elif choice == "4":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                if try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted") is not None:
                    refresh_cache()

        elif choice == "5":
            products = try_api(c.list_products, success_msg="Dashboard ready")
            if products is not None:
                show_dashboard(products)

        elif choice == "6":
            text = try_api(c.export, success_msg="Backup saved")
            if text:
                console.print(Panel.fit(text, title="💾 Export"))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
