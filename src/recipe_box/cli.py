from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar
import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table
from recipe_box.auth import AuthManager
from recipe_box.client import AuthenticationError, ClientError, SessionClient
from recipe_box.config import Config
from recipe_box.formatter import format_ingredient, format_recipe
from recipe_box.models import IngredientForm
from recipe_box.store import FileStore
from recipe_box.sync import RecipeEditSession, RecipeSyncService, ValidationError, form_from_state
from recipe_box.transport import HttpTransport, TransportError

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")

CLEAR = "-"


def _go_home() -> None:
    console.print("[dim]Signed out. Back to the recipe list.[/dim]")


def _show_saved(recipe_id: int) -> None:
    console.print(f"[green]✓[/green] Saved. View it with: [bold]recipe-box recipe show {recipe_id}[/bold]")


class App:
    def __init__(self, config: Config):
        self.transport = HttpTransport(config.api_base_url, timeout=config.request_timeout)
        self.client = SessionClient(self.transport)
        self.auth = AuthManager(self.client, FileStore(base_dir=config.data_dir), on_signed_out=_go_home)
        self.recipes = RecipeSyncService(self.client, on_saved=_show_saved)

    def require_user(self) -> None:
        if self.auth.user is None:
            raise AuthenticationError("You are not signed in. Run: recipe-box signin")


def _load_config() -> Config:
    try:
        return Config()
    except PydanticValidationError as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise SystemExit(1)


def _run(action: Callable[[App], Awaitable[T]]) -> T:
    config = _load_config()

    async def main() -> T:
        app = App(config)
        try:
            return await action(app)
        finally:
            await app.transport.aclose()

    try:
        return asyncio.run(main())
    except ValidationError as e:
        err_console.print("[red]Error:[/red] The recipe was not saved:")
        for message in e.errors:
            err_console.print(f"  • {message}")
        raise SystemExit(1)
    except (ClientError, TransportError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log requests and session changes")
def cli(verbose: bool):
    """Recipe Box: write, edit and browse recipes."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.option("--name", prompt=True, help="Display name shown as recipe author")
@click.option("--username", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def signup(name: str, username: str, password: str):
    """Create an account and sign in."""
    user = _run(lambda app: app.auth.sign_up(name, username, password))
    console.print(f"[green]✓[/green] Welcome, [bold]{user.username}[/bold]!")


@cli.command()
@click.option("--username", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
def signin(username: str, password: str):
    """Sign in and remember the session."""
    user = _run(lambda app: app.auth.sign_in(username, password))
    console.print(f"[green]✓[/green] Signed in as [bold]{user.username}[/bold]")


@cli.command()
def signout():
    """Forget the stored session."""

    async def action(app: App) -> None:
        app.auth.sign_out()

    _run(action)


@cli.command()
def whoami():
    """Show the signed-in user."""

    async def action(app: App) -> Optional[str]:
        if app.auth.user is None:
            return None
        user = await app.client.get_auth_user()
        return f"{app.auth.user.username} ({user.name})"

    label = _run(action)
    if label is None:
        console.print("You are not logged in.")
        return
    console.print(f"Welcome [bold]{label}[/bold]!")


@cli.group("recipe")
def recipe():
    """Browse and edit recipes."""
    pass


@recipe.command("list")
def recipe_list():
    """Show all recipes."""
    recipes = _run(lambda app: app.recipes.fetch_all())
    if not recipes:
        console.print("No recipes yet. Run [bold]recipe-box recipe create[/bold] to add one.")
        return

    table = Table(title="Recipes")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Description")
    for r in recipes:
        author = r.author.name if r.author else "—"
        table.add_row(str(r.id), r.title, author, r.description or "")
    console.print(table)


@recipe.command("show")
@click.argument("recipe_id", type=int)
def recipe_show(recipe_id: int):
    """Show one recipe."""
    detail = _run(lambda app: app.recipes.fetch_detail(recipe_id))
    console.print(format_recipe(detail), markup=False)


@recipe.command("create")
def recipe_create():
    """Write a new recipe."""

    async def action(app: App) -> int:
        app.require_user()
        session = app.recipes.edit()
        _prompt_recipe(session)
        return await app.recipes.submit(session.snapshot())

    _run(action)


@recipe.command("edit")
@click.argument("recipe_id", type=int)
def recipe_edit(recipe_id: int):
    """Edit an existing recipe."""

    async def action(app: App) -> int:
        app.require_user()
        form = await app.recipes.fetch(recipe_id)
        session = app.recipes.edit(form)
        _prompt_recipe(session)
        return await app.recipes.submit(session.snapshot())

    _run(action)


def _parse_number(text: str) -> Any:
    text = text.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return float(text)


def _prompt_number(label: str, current: Any = None) -> Any:
    default = "" if current is None else str(current)
    while True:
        raw = click.prompt(f"  {label}", default=default, show_default=bool(default))
        try:
            return _parse_number(raw)
        except ValueError:
            console.print("  [yellow]Please enter a number, or leave it blank[/yellow]")


def _prompt_text(label: str, current: Optional[str] = None) -> str:
    if current:
        label = f"{label} ('{CLEAR}' to clear)"
    text = click.prompt(f"  {label}", default=current or "", show_default=bool(current)).strip()
    return "" if text == CLEAR else text


def _prompt_recipe(session: RecipeEditSession) -> None:
    d = session.details
    console.print("\n[bold]Details[/bold] (leave optional fields blank)\n")
    session.details = form_from_state(
        {
            "id": d.id,
            "title": _prompt_text("Title", d.title),
            "description": _prompt_text("Description", d.description),
            "prepTime": _prompt_number("Prep time (seconds)", d.prep_time),
            "cookTime": _prompt_number("Cook time (seconds)", d.cook_time),
            "inactiveTime": _prompt_number("Inactive time (seconds)", d.inactive_time),
            "yieldQuantity": _prompt_number("Yield quantity", d.yield_quantity),
            "yieldUnits": _prompt_text("Yield units", d.yield_units),
        }
    )
    _prompt_ingredients(session)
    _prompt_steps(session)


def _prompt_ingredients(session: RecipeEditSession) -> None:
    console.print("\n[bold]Ingredients[/bold]\n")
    while len(session.ingredients):
        for i, ingredient in enumerate(session.ingredients, start=1):
            label = f"{ingredient.quantity} {ingredient.units} {ingredient.ingredient}"
            console.print(f"  {i}. {label}")
        raw = click.prompt(
            "  Number to delete (Enter to keep all)", default="", show_default=False
        ).strip()
        if not raw:
            break
        if not raw.isdigit() or not 1 <= int(raw) <= len(session.ingredients):
            console.print("  [yellow]No ingredient with that number[/yellow]")
            continue
        removed = session.remove_ingredient(int(raw) - 1)
        console.print(f"  [green]✓[/green] Removed: {removed.ingredient}")

    while True:
        name = click.prompt("  Ingredient (Enter to finish)", default="", show_default=False).strip()
        if not name:
            break
        ingredient = session.add_ingredient(
            IngredientForm(
                ingredient=name,
                quantity=_prompt_number("Quantity"),
                units=_prompt_text("Units"),
                preparation=_prompt_text("Preparation"),
            )
        )
        if ingredient.quantity is not None and ingredient.units:
            console.print(f"  [green]✓[/green] {format_ingredient(ingredient)}")


def _prompt_steps(session: RecipeEditSession) -> None:
    console.print("\n[bold]Steps[/bold]\n")
    while len(session.steps):
        for i, step in enumerate(session.steps, start=1):
            console.print(f"  {i}. {step.instruction}")
        if not click.confirm("  Delete the last step?", default=False):
            break
        removed = session.remove_last_step()
        console.print(f"  [green]✓[/green] Removed: {removed.instruction}")

    while True:
        number = len(session.steps) + 1
        instruction = click.prompt(
            f"  Step {number} (Enter to finish)", default="", show_default=False
        ).strip()
        if not instruction:
            break
        session.add_step(instruction)
