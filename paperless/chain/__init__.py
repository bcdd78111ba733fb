"""Sandboxed command chain engine."""

from .errors import ChainError
from .links import Cmd, CmdChain, Link, run_cmd_chain
from .models import Environment, Status
from .pool import ChainPool
from .script import parse_script

__all__ = [
    "ChainError",
    "ChainPool",
    "Cmd",
    "CmdChain",
    "Environment",
    "Link",
    "Status",
    "parse_script",
    "run_cmd_chain",
]
