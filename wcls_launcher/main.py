"""Command-line entry point for the language server launcher.

Loads settings, configures logging and resolves (or runs) the Web
Components language server.
"""

import argparse
import getpass
import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from .config.paths import get_log_file_path
from .config.credentials import TokenStore
from .config.settings import ENV_SERVER_PATH, LauncherSettings, SettingsManager
from .server.session import LanguageServerSession
from .updater.exceptions import BinaryUnavailableError
from .updater.installer import DownloadProgress
from .utils.logging import setup_logging


class Launcher:
    """
    Launcher controller.

    Builds the effective settings and one session, and implements the CLI
    commands on top of them.
    """

    def __init__(
        self,
        settings: Optional[LauncherSettings] = None,
        workspace_root: Optional[Path] = None,
        verbose: bool = False,
        log_file: Optional[Path] = None,
    ):
        if settings is None:
            settings = SettingsManager().load().with_environment()
        self._settings = settings

        level = "DEBUG" if verbose else settings.log_level
        self._logger = setup_logging(level=level, log_file=log_file)

        self._session = LanguageServerSession(
            settings,
            workspace_root=workspace_root,
            progress_callback=self._on_progress,
        )
        self._last_percent = -1

    @property
    def session(self) -> LanguageServerSession:
        return self._session

    def _on_progress(self, progress: DownloadProgress) -> None:
        percent = int(progress.percentage)
        if percent // 10 != self._last_percent // 10:
            self._logger.info(f"Downloading {progress.asset_name}: {percent}%")
        self._last_percent = percent

    def resolve(self, as_json: bool = False) -> int:
        command = self._session.resolve_command()
        if as_json:
            payload = command.to_dict()
            payload["initializationOptions"] = self._session.initialization_options()
            print(json.dumps(payload, indent=2))
        else:
            print(subprocess.list2cmdline(command.argv))
        return 0

    def run(self) -> int:
        command = self._session.resolve_command()
        env = dict(os.environ)
        env.update(command.env)
        self._logger.info(f"Starting language server: {command.argv}")
        completed = subprocess.run(command.argv, env=env)
        return completed.returncode

    def version(self) -> int:
        installed = self._session.resolver.installer.installed_version()
        print(installed or "not installed")
        return 0

    def clean(self) -> int:
        removed = self._session.resolver.installer.clear()
        print(f"Removed {removed} files from {self._session.layout.root}")
        return 0

    def close(self) -> None:
        self._session.close()


def token_command(args: argparse.Namespace, store: Optional[TokenStore] = None) -> int:
    """Store or remove the GitHub token used for the release feed."""
    store = store or TokenStore()
    if args.action == "set":
        token = args.value or getpass.getpass("GitHub token: ")
        if not token.strip():
            print("Error: empty token", file=sys.stderr)
            return 2
        if not store.save_token(token.strip()):
            print("Error: could not store the token in the system keyring", file=sys.stderr)
            return 1
        print("Token stored")
        return 0

    if not store.delete_token():
        print("Error: no stored token to remove", file=sys.stderr)
        return 1
    print("Token removed")
    return 0


def _parse_setting_value(value: str):
    try:
        return json.loads(value)
    except ValueError:
        return value


def settings_command(args: argparse.Namespace, manager: Optional[SettingsManager] = None) -> int:
    """Show, change or reset the saved settings file."""
    manager = manager or SettingsManager()
    if args.action == "reset":
        manager.reset()
        print(f"Settings reset to defaults ({manager.config_path})")
        return 0

    settings = manager.load()
    if args.action == "show":
        print(json.dumps(settings.to_dict(), indent=2))
        return 0

    data = settings.to_dict()
    if args.key not in data:
        print(f"Error: unknown setting '{args.key}'", file=sys.stderr)
        return 2
    data[args.key] = _parse_setting_value(args.value)
    manager.save(LauncherSettings.from_dict(data))
    print(f"{args.key} = {json.dumps(data[args.key])}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wcls-launcher",
        description="Resolve, update and launch the Web Components language server",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--log-file", type=Path, default=None, help="Also log to this file"
    )
    parser.add_argument(
        "--log", action="store_true", help="Also log to the default log file"
    )

    subparsers = parser.add_subparsers(dest="command")

    resolve_parser = subparsers.add_parser(
        "resolve", help="Print the command line that starts the server"
    )
    resolve_parser.add_argument("--workspace", type=Path, help="Workspace root")
    resolve_parser.add_argument("--json", action="store_true", help="Print as JSON")

    run_parser = subparsers.add_parser("run", help="Resolve and run the server on stdio")
    run_parser.add_argument("--workspace", type=Path, help="Workspace root")

    subparsers.add_parser("version", help="Print the installed server version")
    subparsers.add_parser("clean", help="Remove the managed server install")

    token_parser = subparsers.add_parser("token", help="Manage the stored GitHub token")
    token_actions = token_parser.add_subparsers(dest="action", required=True)
    token_set = token_actions.add_parser("set", help="Store a token in the system keyring")
    token_set.add_argument("value", nargs="?", help="Token (prompted for if omitted)")
    token_actions.add_parser("clear", help="Remove the stored token")

    settings_parser = subparsers.add_parser("settings", help="Show or change saved settings")
    settings_actions = settings_parser.add_subparsers(dest="action", required=True)
    settings_actions.add_parser("show", help="Print the saved settings as JSON")
    settings_set = settings_actions.add_parser("set", help="Change one saved setting")
    settings_set.add_argument("key", help="Setting name, e.g. allow_prerelease")
    settings_set.add_argument("value", help="New value (JSON, or a plain string)")
    settings_actions.add_parser("reset", help="Restore the default settings")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Launcher entry point.

    Returns:
        Exit code (0 for success)
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        return 2

    launcher = None
    try:
        if args.command == "token":
            return token_command(args)
        if args.command == "settings":
            return settings_command(args)

        log_file = args.log_file
        if log_file is None and args.log:
            log_file = get_log_file_path()
        launcher = Launcher(
            workspace_root=getattr(args, "workspace", None),
            verbose=args.verbose,
            log_file=log_file,
        )
        if args.command == "resolve":
            return launcher.resolve(as_json=args.json)
        if args.command == "run":
            return launcher.run()
        if args.command == "version":
            return launcher.version()
        return launcher.clean()
    except BinaryUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(
            f"Set {ENV_SERVER_PATH} to use a language server installed elsewhere.",
            file=sys.stderr,
        )
        return 1
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1
    finally:
        if launcher is not None:
            launcher.close()


if __name__ == "__main__":
    sys.exit(main())
