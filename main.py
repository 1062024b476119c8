"""SurvivalFox — terminal chat launcher.

Reads a question per line and prints the answer with its sources.
Lines starting with "/" are commands; see HELP_TEXT.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from survivalfox.config import ConfigError, load_settings
from survivalfox.controller import ConversationController
from survivalfox.render import format_error, header_line, render_message, render_sources, render_transcript
from survivalfox.spoiler import DEFAULT_SPOILER_LEVEL
from survivalfox.storage import ConversationStore, GameStore, IdentityStore, LocalStorage

HELP_TEXT = """Befehle
/new              Neues Thema (Thread und Verlauf leeren)
/game <id>        Spiel wechseln (valheim, starrupture)
/spoiler <0-100>  Spoiler-Stufe setzen
/sources <n>      Quellen der n-ten Antwort anzeigen
/help             Diese Hilfe
/quit             Beenden"""


def build_controller(args: argparse.Namespace) -> ConversationController:
    settings = load_settings()
    data_dir = args.data_dir or settings.data_dir
    local = LocalStorage(data_dir)

    request_options = {}
    developer_mode = True if args.developer_mode else settings.developer_mode
    if developer_mode is not None:
        request_options["developer_mode"] = developer_mode

    controller = ConversationController(
        identity=IdentityStore(local),
        conversation=ConversationStore(local),
        games=GameStore(local),
        gateway=settings.make_gateway(),
        default_spoiler_level=args.spoiler,
        request_options=request_options,
    )
    controller.start()
    if args.game:
        controller.select_game(args.game)
    return controller


def print_status(controller: ConversationController) -> None:
    print(header_line(controller.theme, controller.session_id, controller.thread_id))
    print(f"Spoiler: {controller.spoiler_label} ({controller.spoiler_level})")


def handle_command(controller: ConversationController, line: str) -> bool:
    """Run one slash command. Returns False when the loop should stop."""
    cmd, _, arg = line[1:].partition(" ")
    arg = arg.strip()

    if cmd in ("quit", "exit"):
        return False
    if cmd == "help":
        print(HELP_TEXT)
    elif cmd == "new":
        controller.reset_thread()
        print("Neuer Thread.")
        print_status(controller)
    elif cmd == "game" and arg:
        controller.select_game(arg)
        print_status(controller)
    elif cmd == "spoiler" and arg:
        try:
            controller.set_spoiler_level(float(arg))
        except ValueError:
            print(f"Keine Zahl: {arg}")
        print_status(controller)
    elif cmd == "sources" and arg.isdigit():
        answers = [m for m in controller.messages if m.role == "assistant"]
        index = int(arg) - 1
        if 0 <= index < len(answers):
            controller.show_sources(answers[index].id)
            print(render_sources(controller.active_sources) or "Keine Quellen.")
        else:
            print(f"Keine Antwort Nr. {arg}")
    else:
        print(f"Unbekannter Befehl: {line}")
    return True


async def chat_loop(controller: ConversationController) -> None:
    print_status(controller)
    print()
    print(render_transcript(controller.messages))

    while True:
        try:
            line = await asyncio.to_thread(input, "\n> ")
        except EOFError:
            break
        line = line.strip()
        if not line:
            continue
        if line.startswith("/"):
            if not handle_command(controller, line):
                break
            continue

        controller.input_text = line
        answer = await controller.ask()
        if answer is not None:
            print()
            print(render_message(answer))
        elif controller.error is not None:
            print(format_error(controller.error), file=sys.stderr)


def main():
    parser = argparse.ArgumentParser(description="SurvivalFox terminal chat")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="On-device storage directory (default: DATA_DIR or ./data)")
    parser.add_argument("--game", default=None,
                        help="Select a game before starting (clears history if it changes)")
    parser.add_argument("--spoiler", type=float, default=DEFAULT_SPOILER_LEVEL,
                        help="Initial spoiler level, 0-100 (snapped to 0/33/66/100)")
    parser.add_argument("--developer-mode", action="store_true",
                        help="Ask the backend for developer output")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        controller = build_controller(args)
    except ConfigError as e:
        print(e, file=sys.stderr)
        sys.exit(2)

    try:
        asyncio.run(chat_loop(controller))
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
