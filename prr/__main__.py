"""CLI entry point for prr.

Usage:
    prr [--config PATH] <command> [options]

Commands:
    get      Fetch a pull request and create a review file
    edit     Open a review file in the editor
    submit   Parse a review file and post it to GitHub
    status   List reviews and their state
    remove   Delete review files
    apply    Apply a pull request's diff to the local checkout
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from prr.commands.apply import cmd_apply
from prr.commands.edit import cmd_edit
from prr.commands.get import cmd_get
from prr.commands.remove import cmd_remove
from prr.commands.status import cmd_status
from prr.commands.submit import cmd_submit
from prr.infrastructure.config import Config, ConfigError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="prr",
        description="Review GitHub pull requests from your editor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  prr get danobi/prr/24
  prr edit danobi/prr/24
  prr submit --debug danobi/prr/24
  prr remove --submitted
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: $PRR_CONFIG or $XDG_CONFIG_HOME/prr/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # get command
    parser_get = subparsers.add_parser("get", help="Fetch a pull request to review")
    parser_get.add_argument("pr", help="Pull request (URL, owner/repo/N, owner/repo#N, or N)")
    parser_get.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite a review that has unsubmitted comments",
    )
    parser_get.add_argument(
        "--open",
        action="store_true",
        help="Open the review file in the editor",
    )

    # edit command
    parser_edit = subparsers.add_parser("edit", help="Open a review file in the editor")
    parser_edit.add_argument("pr", help="Pull request to edit")

    # submit command
    parser_submit = subparsers.add_parser("submit", help="Submit a review to GitHub")
    parser_submit.add_argument("pr", help="Pull request to submit")
    parser_submit.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Print the requests instead of sending them",
    )

    # status command
    parser_status = subparsers.add_parser("status", help="List reviews and their state")
    parser_status.add_argument(
        "-n",
        "--no-titles",
        action="store_true",
        help="Omit the header line",
    )

    # remove command
    parser_remove = subparsers.add_parser("remove", help="Delete review files")
    parser_remove.add_argument("prs", nargs="*", help="Pull requests to remove")
    parser_remove.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Remove even if a review has unsubmitted comments",
    )
    parser_remove.add_argument(
        "-s",
        "--submitted",
        action="store_true",
        help="Also remove every submitted review",
    )

    # apply command
    parser_apply = subparsers.add_parser("apply", help="Apply a PR diff to the working directory")
    parser_apply.add_argument("pr", help="Pull request to apply")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = Config.load(config_path=args.config)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 1

    # Route to command implementations with explicit parameters
    if args.command == "get":
        return cmd_get(pr=args.pr, config=config, force=args.force, open_editor=args.open)

    elif args.command == "edit":
        return cmd_edit(pr=args.pr, config=config)

    elif args.command == "submit":
        return cmd_submit(pr=args.pr, config=config, debug=args.debug)

    elif args.command == "status":
        return cmd_status(config=config, no_titles=args.no_titles)

    elif args.command == "remove":
        return cmd_remove(
            prs=args.prs,
            config=config,
            force=args.force,
            submitted=args.submitted,
        )

    elif args.command == "apply":
        return cmd_apply(pr=args.pr, config=config)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
