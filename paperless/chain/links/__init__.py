"""Link exports for the command chain."""
from .base import Link
from .cmd import Cmd
from .chain import CmdChain, run_cmd_chain

__all__ = [
    "Link",
    "Cmd",
    "CmdChain",
    "run_cmd_chain",
]
