"""
cli — command-line interface for user-manager.

Entry points
────────────
  python -m user_manager        (via user_manager/__main__.py)
  user-manager                  (via pyproject.toml [project.scripts])

Subcommands: list | show | add | update | delete | export | import | clear | gui
"""

from user_manager.cli.main import build_parser, cmd_export, cmd_import, cmd_list, main

__all__ = ["build_parser", "cmd_list", "cmd_export", "cmd_import", "main"]
