"""CLI command implementations."""

from prr.commands.apply import cmd_apply
from prr.commands.edit import cmd_edit
from prr.commands.get import cmd_get
from prr.commands.remove import cmd_remove
from prr.commands.status import cmd_status
from prr.commands.submit import cmd_submit

__all__ = ["cmd_apply", "cmd_edit", "cmd_get", "cmd_remove", "cmd_status", "cmd_submit"]
