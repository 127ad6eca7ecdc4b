"""Command line interface for flashcard-tools.

* :mod:`flashcard_tools.cli.args` builds the parser and its sub-commands.
* :mod:`flashcard_tools.cli.orchestrator` loads configuration, opens the store
  and dispatches each command against a :class:`~flashcard_tools.lookup.TermResolver`.
* :mod:`flashcard_tools.cli.main` is the console-script entry point.
"""

from . import args, orchestrator

__all__ = ["args", "orchestrator"]
