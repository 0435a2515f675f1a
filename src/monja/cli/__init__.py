"""monja CLI: layered dotfile sets synced between a repo and $HOME."""

from ._helpers import main  # noqa: F401  (entry point)

# Import command modules to register Click commands with the main group.
from . import _sync, _sets  # noqa: F401
