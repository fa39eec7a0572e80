"""
Scripted demonstration: asks two questions, the second of which can only
be answered if the model remembers the first.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from convo import ConversationSession

FILM_EXPERT = "You are a film expert"


def run_demo(session: ConversationSession, console: Console = None) -> None:
    console = console or Console()

    questions = session.generate_sample_questions("Questions about films in the 1960s", 3, 10)
    console.print(Panel("\n".join(f"• {escape(q)}" for q in questions), title="Sample questions"))

    response = session.ask_question(FILM_EXPERT, "What are the three best Quentin Tarantino movies?")
    console.print(Panel(escape(response), title="Response"))

    # "he" only resolves to Tarantino through the retained window
    response = session.ask_question(FILM_EXPERT, "How old is he")
    console.print(Panel(escape(response), title="Response"))

    console.print(Panel(escape(session.render()), title="Conversation History"))
