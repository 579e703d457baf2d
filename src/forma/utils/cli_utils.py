"""
Command registry and parser construction for the ``forma`` CLI.

Commands are plain functions taking a ``CLIContext`` and returning an exit
code. They are registered under a parent group (``payments approve``) and the
parser is built from the registry, so adding a command never touches
``create_parser``.
"""

import argparse
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any

from forma.config.types import AppConfig

if TYPE_CHECKING:
    from forma.services.app_state import AppState


@dataclass
class CLIContext:
    """Everything a command handler gets."""
    args: argparse.Namespace
    logger: logging.Logger
    config: AppConfig
    parser: argparse.ArgumentParser
    state: "AppState"

Handler = Callable[[CLIContext], int]

class CommandCategory(Enum):
    """Sections of the ``--help`` command overview."""
    AUTH = "Account"
    LIST = "Browse"
    MANAGE = "Manage"
    BILLING = "Billing"
    SETTINGS = "Settings"

@dataclass
class CommandMetadata:
    name: str
    help_text: str
    category: CommandCategory
    handler: Handler
    options: list[dict[str, Any]] = field(default_factory=list)
    parent_command: str | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.parent_command} {self.name}" if self.parent_command else self.name

@dataclass(frozen=True)
class CommandGroup:
    name: str
    help_text: str
    category: CommandCategory

def option_dest(option: dict[str, Any]) -> str:
    """Namespace attribute argparse stores an option under."""
    return option['name'].lstrip('-').replace('-', '_')

class CLIOptionFactory:
    """Options shared by several commands."""

    @staticmethod
    def create_format_option() -> dict[str, Any]:
        return {
            'name': '--format',
            'choices': ['text', 'json'],
            'default': 'text',
            'help': 'Print a table (text) or JSON for scripts (default: text)'
        }

    @staticmethod
    def create_status_option(statuses: list[str]) -> dict[str, Any]:
        return {
            'name': '--status',
            'choices': ['all', *statuses],
            'default': 'all',
            'help': 'Only show records with this status (default: all)'
        }

    @staticmethod
    def create_search_option() -> dict[str, Any]:
        return {
            'name': '--search',
            'default': '',
            'help': 'Case- and accent-insensitive text search'
        }

    @staticmethod
    def create_date_argument(name: str = 'date') -> dict[str, Any]:
        return {'name': name, 'type': date.fromisoformat, 'help': 'Day in YYYY-MM-DD format'}

    @staticmethod
    def create_month_options() -> list[dict[str, Any]]:
        """``--year``/``--month`` pair; both default to the current month."""
        return [
            {'name': '--year', 'type': int, 'help': 'Calendar year', 'validator': lambda x: 1900 <= x <= 9999},
            {'name': '--month', 'type': int, 'help': 'Calendar month, 1-12', 'validator': lambda x: 1 <= x <= 12},
        ]

class CommandRegistry:
    """Registered commands keyed by qualified name.

    Several groups share subcommand names (``list``, ``receipt``), so the key
    is ``"parent name"``.
    """

    _commands: dict[str, CommandMetadata] = {}

    @classmethod
    def register(
        cls,
        name: str,
        help_text: str,
        category: CommandCategory,
        options: list[dict[str, Any]] | None = None,
        parent_command: str | None = None
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            command = CommandMetadata(name, help_text, category, handler, list(options or []), parent_command)
            cls._commands[command.qualified_name] = command
            return handler
        return decorator

    @classmethod
    def get_command(cls, name: str, parent_command: str | None = None) -> CommandMetadata | None:
        return cls._commands.get(f"{parent_command} {name}" if parent_command else name)

    @classmethod
    def get_subcommands(cls, parent_command: str) -> list[str]:
        return [c.name for c in cls._commands.values() if c.parent_command == parent_command]

    @classmethod
    def commands(cls) -> list[CommandMetadata]:
        return list(cls._commands.values())

def validate_args(args: argparse.Namespace, command: CommandMetadata) -> list[str]:
    """Run the ``validator`` of each option that was given a value."""
    errors = []
    for option in command.options:
        check = option.get('validator')
        value = getattr(args, option_dest(option), None)
        if check is None or value is None:
            continue
        try:
            valid = bool(check(value))
        except (TypeError, ValueError):
            valid = False
        if not valid:
            errors.append(f"Invalid value for {option['name']}: {value}")
    return errors

def add_common_options(parser: argparse.ArgumentParser) -> None:
    """Options accepted before any command."""
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to stderr')
    parser.add_argument('--log-file', help='Also write debug logs to this file')
    parser.add_argument(
        '--config-dir',
        help='Directory containing config.yaml (default: $FORMA_CONFIG_DIR or ~/.config/forma)'
    )

class CLIBuilder:
    """Builds the two-level ``forma <group> <command>`` parser."""

    # Option keys that are ours, not argparse's
    _CUSTOM_FIELDS = {'validator'}

    def __init__(self, description: str, prog: str | None = None):
        self.parser = argparse.ArgumentParser(
            prog=prog,
            description=description,
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        self.subparsers = self.parser.add_subparsers(dest='command', required=True, metavar='<group>')
        self._groups: dict[str, CommandGroup] = {}
        self._group_parsers: dict[str, argparse._SubParsersAction[Any]] = {}
        self._commands: list[CommandMetadata] = []
        add_common_options(self.parser)

    def add_group(self, group: CommandGroup) -> None:
        """Declare a group before its commands so it gets its own help text."""
        self._groups[group.name] = group

    def _group_parser(self, name: str) -> "argparse._SubParsersAction[Any]":
        if name not in self._group_parsers:
            group = self._groups.get(name)
            parser = self.subparsers.add_parser(name, help=group.help_text if group else f"{name.capitalize()} commands")
            self._group_parsers[name] = parser.add_subparsers(
                dest=f"{name}_subcommand", required=True, metavar='<command>'
            )
        return self._group_parsers[name]

    def add_command(self, command: CommandMetadata) -> None:
        if command.parent_command:
            parser = self._group_parser(command.parent_command).add_parser(command.name, help=command.help_text)
        else:
            parser = self.subparsers.add_parser(command.name, help=command.help_text)

        for option in command.options:
            kwargs = {k: v for k, v in option.items() if k != 'name' and k not in self._CUSTOM_FIELDS}
            name = option['name']
            if not name.startswith('-'):
                name = option_dest(option).lower()
            parser.add_argument(name, **kwargs)

        parser.set_defaults(func=command.handler, command_metadata=command)
        self._commands.append(command)

    def _overview(self) -> str:
        lines = []
        for category in CommandCategory:
            names = [c.qualified_name for c in self._commands if c.category is category]
            if names:
                lines.append(f"{category.value}: {', '.join(names)}")
        return "\n".join(lines)

    def build(self) -> argparse.ArgumentParser:
        self.parser.epilog = self._overview()
        return self.parser

def create_command_group(name: str, help_text: str, category: CommandCategory) -> Callable[[type[Any]], type[Any]]:
    """Class decorator naming the group whose commands the class holds."""
    def decorator(cls: type[Any]) -> type[Any]:
        cls.command_group = CommandGroup(name, help_text, category)
        return cls
    return decorator
