import getpass
import logging

from dotenv import load_dotenv

from casefile.config import Settings
from casefile.engine import MysteryEngine, Session
from casefile.errors import CompletionError, InvalidTransitionError, WorldGenerationError
from casefile.llm import get_llm_connector
from casefile.media.local_store import LocalMediaStore
from casefile.services.state_service import current_mode
from casefile.setup.world_gen_service import run_inline
from casefile.utils.logger_config import setup_logging

logger = logging.getLogger(__name__)

HELP = """\
Commands:
  new [theme]      generate a new mystery
  worlds           list your stored mysteries
  play <world_id>  start a new game in a stored mystery
  people           list the characters
  talk <id>        start talking to a character
  say <text>       say something to the current character
  leave            end the conversation / leave the courtroom
  accuse <text>    present your solution to the judge
  clues            list the clues you have found
  quit"""


def _print_people(session: Session):
    for character in session.world.characters.values():
        print(f"  {character.id:<20} {character.name} ({character.role})")


def _print_clues(session: Session):
    if not session.state.clues_found:
        print("  No clues yet.")
    for clue_id in session.state.clues_found:
        clue = session.world.get_clue(clue_id)
        print(f"  {clue.name}: {clue.description}")


def run(engine: MysteryEngine, owner: str):
    session = None
    print(HELP)
    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        command, _, arg = line.partition(" ")
        arg = arg.strip()

        try:
            if command == "quit":
                break
            elif command == "new":
                generated = engine.generate_world(owner, theme=arg or None)
                print(f"{generated.world.mystery.title} [{generated.world_id}]")
                session = engine.new_game(owner, generated.world_id)
                print(generated.world.mystery.description)
            elif command == "worlds":
                for record in engine.list_worlds(owner):
                    print(f"  {record.id}  {record.title}: {record.description}")
            elif command == "play":
                session = engine.new_game(owner, arg)
                if session is None:
                    print("World not found.")
                else:
                    print(session.world.mystery.description)
            elif session is None:
                print("Start or load a mystery first.")
            elif command == "people":
                _print_people(session)
            elif command == "clues":
                _print_clues(session)
            elif command == "talk":
                problem = engine.select_character(session, arg)
                if problem:
                    print(problem)
                    continue
                turn = engine.talk(session)
                print(turn.response or "...")
            elif command == "say":
                turn = engine.talk(session, arg)
                if turn is None:
                    print("You are not talking to anyone.")
                else:
                    print(turn.response or "...")
            elif command == "leave":
                engine.leave(session)
            elif command == "accuse":
                verdict = engine.solve(session, arg)
                print(f"JUDGE: {verdict.response}")
                if verdict.solved:
                    print("Case closed.")
            else:
                print(HELP)
        except InvalidTransitionError as e:
            print(e)
        except WorldGenerationError as e:
            print(f"This mystery could not be generated: {e}")
        except CompletionError as e:
            logger.error(f"Provider error: {e}")
            print("The story is temporarily unavailable, try again.")

        if session is not None:
            logger.debug(f"Mode: {current_mode(session.state).value}")


if __name__ == "__main__":
    setup_logging()
    load_dotenv()
    settings = Settings.from_env()
    engine = MysteryEngine(
        get_llm_connector(settings),
        settings,
        media_store=LocalMediaStore(settings.media_dir),
        scheduler=run_inline,
    )
    run(engine, getpass.getuser())
