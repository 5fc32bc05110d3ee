"""
Interactive console menu for managing users.

Run with: python -m user_registry.console  (or the ``user-registry`` script)
"""

import logging
import sys
from typing import Optional, TextIO

from user_registry.config import load_settings
from user_registry.database import build_engine, init_db
from user_registry.errors import InvalidInput, OperationFailed, RecordNotFound
from user_registry.logging_config import configure_logging
from user_registry.models.user import User
from user_registry.persistence.user_gateway import UserGateway
from user_registry.services.user_service import UserService

logger = logging.getLogger(__name__)

MENU = """=== USER SERVICE MENU ===
1. Create user
2. Find user by id
3. List all users
4. Update user
5. Delete user
0. Exit"""


class EndOfInput(Exception):
    """Raised when the input stream is exhausted"""

    pass


def format_user(user: User) -> str:
    created = user.created_at.isoformat() if user.created_at else None
    return f"User(id={user.id}, name={user.name}, email={user.email}, age={user.age}, created_at={created})"


class UserConsole:
    """Text menu over UserService. Reads commands from ``stdin`` until 0 or end of input."""

    def __init__(self, service: UserService, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._service = service
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout

    def run(self) -> None:
        actions = {
            "1": self.create_user,
            "2": self.find_user_by_id,
            "3": self.list_all_users,
            "4": self.update_user,
            "5": self.delete_user,
        }
        while True:
            self._print(MENU)
            try:
                choice = self._read_line("Choose: ")
                if choice == "0":
                    self._print("Bye!")
                    return
                action = actions.get(choice)
                if action is None:
                    self._print("Unknown command. Please choose 0-5.")
                else:
                    action()
            except EndOfInput:
                self._print("")
                self._print("Bye!")
                return
            self._print("")

    # ------------------------------------------------------------------
    # Menu actions
    # ------------------------------------------------------------------

    def create_user(self) -> None:
        name = self._read_line("Name: ")
        email = self._read_line("Email: ")
        age = self._read_int("Age: ")
        try:
            user_id = self._service.create(name, email, age)
        except (InvalidInput, OperationFailed) as e:
            self._print(f"ERROR: {e}")
            return
        self._print(f"User created. id={user_id}")

    def find_user_by_id(self) -> None:
        user_id = self._read_int("Enter id: ")
        try:
            user = self._service.find_by_id(user_id)
        except (InvalidInput, OperationFailed) as e:
            self._print(f"ERROR: {e}")
            return
        if user is None:
            self._print("User not found.")
        else:
            self._print(f"Found: {format_user(user)}")

    def list_all_users(self) -> None:
        try:
            users = self._service.find_all()
        except OperationFailed as e:
            self._print(f"ERROR: {e}")
            return
        if not users:
            self._print("No users in database.")
            return
        for user in users:
            self._print(format_user(user))

    def update_user(self) -> None:
        user_id = self._read_int("Enter id to update: ")
        try:
            existing = self._service.find_by_id(user_id)
            if existing is None:
                self._print("User not found.")
                return
            self._print(f"Current: {format_user(existing)}")

            new_name = self._read_line("New name: ")
            new_email = self._read_line("New email: ")
            new_age = self._read_int("New age: ")
            self._service.update_by_id(user_id, new_name, new_email, new_age)
        except RecordNotFound:
            self._print("User not found.")
            return
        except (InvalidInput, OperationFailed) as e:
            self._print(f"ERROR: {e}")
            return
        self._print("Updated.")

    def delete_user(self) -> None:
        user_id = self._read_int("Enter id to delete: ")
        try:
            self._service.delete_by_id(user_id)
        except RecordNotFound:
            self._print("User not found.")
            return
        except (InvalidInput, OperationFailed) as e:
            self._print(f"ERROR: {e}")
            return
        self._print("Deleted.")

    # ------------------------------------------------------------------
    # Input helpers
    # ------------------------------------------------------------------

    def _print(self, text: str) -> None:
        self._out.write(text + "\n")

    def _read_line(self, prompt: str) -> str:
        self._out.write(prompt)
        self._out.flush()
        line = self._in.readline()
        if line == "":
            raise EndOfInput()
        return line.strip()

    def _read_int(self, prompt: str) -> int:
        while True:
            raw = self._read_line(prompt)
            try:
                return int(raw)
            except ValueError:
                self._print("Please enter a valid number.")


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    engine = build_engine(settings.database_url, echo=settings.sql_echo)
    try:
        init_db(engine)
        logger.info("Database ready at %s", engine.url)
        UserConsole(UserService(UserGateway(engine))).run()
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
