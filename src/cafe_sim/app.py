"""Interactive terminal front end for the cafe session."""
import random
import time

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from cafe_sim.config import FRAME_MS, RECIPE_RETRY_DELAY_MS, RECIPE_SUCCESS_DELAY_MS, REVEAL_DELAY_MS, get_seed
from cafe_sim.errors import CafeSimError
from cafe_sim.logging_config import configure_logging
from cafe_sim.models import RecipeOutcome, SubmitOutcome
from cafe_sim.motion import pose_for, render_order
from cafe_sim.quiz import current_question, progress_fraction
from cafe_sim.rating import format_stars, star_color, star_label
from cafe_sim.recipes import format_ingredient_name
from cafe_sim.session import CafeSession, Stage

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the player types q or menu inside a minigame."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def show_welcome():
    console.print(Panel(
        "[bold]Cafe Simulator[/bold]\n[dim]Cook, count, collect stars[/dim]",
        title="Welcome", border_style="magenta",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("start", "Open the cafe"),
        ("roam", "Watch the floor for a few seconds"),
        ("kitchen", "Cook the current order"),
        ("quiz", "Math time"),
        ("status", "Where am I?"),
        ("reset", "Close up and start over"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def pause(session: CafeSession, delay_ms: float, message: str) -> None:
    """Hold the message on screen, then let the session catch up."""
    with console.status(message):
        time.sleep(delay_ms / 1000)
    session.tick(delay_ms)


def run_free_roam(session: CafeSession, seconds: float) -> int:
    frames = int(seconds * 1000 / FRAME_MS)
    for _ in range(frames):
        session.tick(FRAME_MS)
    return frames


def show_agents(session: CafeSession) -> None:
    table = Table(title="Cafe Floor")
    table.add_column("Who", style="cyan")
    table.add_column("Position", justify="right")
    table.add_column("Facing")
    table.add_column("State")
    table.add_column("Bob", justify="right")
    for agent in render_order(session.agents):
        pose = pose_for(agent)
        table.add_row(
            agent.kind,
            f"({agent.x:.0f}, {agent.y:.0f})",
            "left" if agent.facing_left else "right",
            f"[green]{agent.state.value}[/green]" if agent.is_walking else agent.state.value,
            f"{pose.offset:+.1f}",
        )
    console.print(table)


def show_pantry(session: CafeSession) -> None:
    for i, ingredient in enumerate(session.catalog.pantry, 1):
        mark = "[green]✔[/green]" if ingredient in session.selection else " "
        console.print(f"  {mark} [cyan]{i})[/cyan] {format_ingredient_name(ingredient)}")


def run_kitchen(session: CafeSession) -> bool:
    """Let the player cook until the order is right. Returns True once served."""
    recipe = session.enter_kitchen()
    console.print(Panel(f"[bold]{recipe.name}[/bold]", title="Order", border_style="magenta"))
    pantry = session.catalog.pantry
    choices = [str(i) for i in range(1, len(pantry) + 1)] + ["done"]
    while True:
        show_pantry(session)
        try:
            choice = session_prompt(
                "Toggle an ingredient or [bold]done[/bold]",
                choices=choices + list(EXIT_WORDS), show_choices=False,
            )
        except SessionExitRequested:
            session.leave_kitchen()
            raise
        if choice != "done":
            session.toggle_ingredient(pantry[int(choice) - 1])
            continue
        outcome = session.submit_recipe()
        if outcome is RecipeOutcome.MATCH:
            console.print(f"[green]Success! {recipe.name} created![/green]")
            pause(session, RECIPE_SUCCESS_DELAY_MS, "Plating...")
            return True
        console.print("[red]Wrong ingredients! Try again.[/red]")
        pause(session, RECIPE_RETRY_DELAY_MS, "Clearing the counter...")


def show_result(session: CafeSession) -> None:
    result = session.result
    if result.stars is None:
        dish = result.recipe.name if result.recipe else "Nothing"
        console.print(Panel(f"{dish} served!", title="Result", border_style="green"))
        return
    color = star_color(result.stars)
    console.print(Panel(
        f"[{color}]{format_stars(result.stars)}[/{color}]  [bold]{star_label(result.stars)}[/bold]\n"
        f"{result.correct_count}/{result.question_count} correct in {result.total_elapsed:.1f}s",
        title="Math Time Results", border_style=color,
    ))


def progress_bar(fraction: float, width: int) -> str:
    filled = round(fraction * width)
    return "▓" * filled + "░" * (width - filled)


def run_quiz(session: CafeSession) -> int:
    """Play the quiz to the end and return the star rating."""
    if session.stage is Stage.QUIZ_CHALLENGE:
        quiz = session.quiz
    else:
        quiz = session.start_quiz()
    console.print(f"\n[bold]Math Time[/bold] ({quiz.question_count} questions)\n")
    while session.stage is Stage.QUIZ_CHALLENGE:
        question = current_question(quiz)
        console.print(
            f"[bold]Question {quiz.index + 1} of {quiz.question_count}[/bold] "
            f"[magenta]{progress_bar(progress_fraction(quiz), quiz.question_count)}[/magenta]  "
            f"[dim]Time: {session.quiz_elapsed():.1f}s[/dim]"
        )
        console.print(f"  [magenta]{question.text}[/magenta]")
        result = session.answer(session_prompt("Your answer"))
        if result.outcome is SubmitOutcome.CORRECT:
            console.print("[green]Correct![/green]\n")
        elif result.outcome is SubmitOutcome.RETRY:
            console.print("[yellow]Almost! Try again~[/yellow]")
        elif result.outcome is SubmitOutcome.REVEALED:
            console.print(f"[dim]The answer is {result.revealed_answer}![/dim]")
            pause(session, REVEAL_DELAY_MS, "Next question coming up...")
    show_result(session)
    return session.result.stars


def show_status(session: CafeSession) -> None:
    console.print(f"Stage: [bold]{session.stage.value}[/bold]")
    if session.stage is Stage.FREE_ROAM:
        show_agents(session)
    elif session.stage is Stage.RESULT:
        show_result(session)


def cmd_start(session: CafeSession):
    session.start()
    console.print("[green]The cafe is open![/green]")
    show_agents(session)


def cmd_roam(session: CafeSession):
    seconds = IntPrompt.ask("Seconds to watch", default=3)
    run_free_roam(session, seconds)
    show_agents(session)


def cmd_kitchen(session: CafeSession):
    if run_kitchen(session):
        show_result(session)


def cmd_quiz(session: CafeSession):
    run_quiz(session)


def main():
    logger = configure_logging()
    seed = get_seed()
    logger.info("Starting cafe simulator (seed=%s)", seed)
    session = CafeSession(rng=random.Random(seed))

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="start").strip().lower()
        try:
            if choice == "start":
                cmd_start(session)
            elif choice == "roam":
                cmd_roam(session)
            elif choice == "kitchen":
                cmd_kitchen(session)
            elif choice == "quiz":
                cmd_quiz(session)
            elif choice == "status":
                show_status(session)
            elif choice == "reset":
                session.reset()
                console.print("[dim]Cafe closed. Type start to open again.[/dim]")
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Thanks for visiting![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Back to the menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except CafeSimError as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
