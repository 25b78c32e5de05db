#!/usr/bin/env python3
"""
SweetProcess API - Command Line Entry Point

Calls the SweetProcess API and prints the JSON result.

Usage:
    python -m src.main procedures --team-id 1 --search onboarding
    python -m src.main users --status active
    python -m src.main delete-team-user 3
    python -m src.main --verbose task-instances --completed

Environment Variables:
    SWEETPROCESS_API_TOKEN  - SweetProcess API token (required)
    SWEETPROCESS_BASE_URL   - API root (default: https://www.sweetprocess.com/api/v1)
    SWEETPROCESS_TIMEOUT    - Request timeout in seconds (default: 30)
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path for imports if running as script
if __name__ == "__main__" and __package__ is None:
    PROJECT_ROOT = Path(__file__).parent.parent
    sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import load_settings, ConfigurationError
from src.sweetprocess.client import SweetProcessClient, SweetProcessAPIError
from src.sweetprocess.models import ProcedureFilter, TaskInstanceFilter, UserFilter


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for the application.

    Logs go to stderr so stdout carries only the JSON result.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Reduce noise from external libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def _key_value(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Call the SweetProcess API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m src.main procedures --tag hr --tag onboarding
    python -m src.main task-instances --user https://www.sweetprocess.com/api/v1/users/1/
    python -m src.main invite team view 1 https://www.sweetprocess.com/api/v1/users/3/
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose/debug logging",
    )

    parser.add_argument(
        "--env",
        type=Path,
        help="Path to .env file (default: .env in current directory)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    procedures = commands.add_parser("procedures", help="List procedures")
    procedures.add_argument("--team-id", type=int)
    procedures.add_argument("--search")
    procedures.add_argument("--tag", action="append", help="Repeat for several tags")
    procedures.add_argument("--policy-id", type=int)
    procedures.add_argument("--visible-to-user", type=int)
    procedures.add_argument("--ordering")

    tasks = commands.add_parser("task-instances", help="List task instances")
    tasks.add_argument("--template-id", type=int)
    tasks.add_argument("--user", help="API URL of the assignee")
    tasks.add_argument("--content-type")
    tasks.add_argument("--object-id", type=int)
    completed = tasks.add_mutually_exclusive_group()
    completed.add_argument("--completed", dest="completed", action="store_true", default=None)
    completed.add_argument("--not-completed", dest="completed", action="store_false")
    tasks.add_argument("--due-lte", help="ISO-8601 date")
    tasks.add_argument("--due-gte", help="ISO-8601 date")

    users = commands.add_parser("users", help="List users")
    users.add_argument("--team-id", type=int)
    users.add_argument("--exclude-team-id", type=int)
    users.add_argument("--id", type=int, action="append")
    users.add_argument("--exclude-id", type=int, action="append")
    users.add_argument("--status", action="append")

    invite_user = commands.add_parser("invite-user", help="Invite a user")
    invite_user.add_argument("name")
    invite_user.add_argument("email")
    invite_user.add_argument("--super-manager", action="store_true")

    update_user = commands.add_parser("update-user", help="Update a user")
    update_user.add_argument("user_id", type=int)
    update_user.add_argument("--name")
    update_user.add_argument("--email")
    update_user.add_argument(
        "--field",
        type=_key_value,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Any other field to set",
    )

    delete_user = commands.add_parser("delete-user", help="Delete a user")
    delete_user.add_argument("user_id", type=int)

    invite = commands.add_parser("invite", help="Create an invitation")
    invite.add_argument("content_type")
    invite.add_argument("permission")
    invite.add_argument("object_id", type=int)
    invite.add_argument("to_user", help="API URL of the invited user")
    invite.add_argument("--no-mail", action="store_true", help="Do not send an email")

    delete_team_user = commands.add_parser("delete-team-user", help="Remove a user from a team")
    delete_team_user.add_argument("team_user_id", type=int)

    return parser


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def run_command(client: SweetProcessClient, args: argparse.Namespace) -> int:
    """
    Dispatch a parsed command to the client and print its result.

    Returns:
        Exit code
    """
    command = args.command

    if command == "delete-user":
        return _report_status(client.delete_user(args.user_id))
    if command == "delete-team-user":
        return _report_status(client.delete_team_user(args.team_user_id))

    if command == "procedures":
        result = client.get_procedures(ProcedureFilter(
            team_id=args.team_id,
            search=args.search,
            tag=args.tag,
            policy_id=args.policy_id,
            visible_to_user=args.visible_to_user,
            ordering=args.ordering,
        ))
    elif command == "task-instances":
        result = client.get_task_instances(TaskInstanceFilter(
            template_id=args.template_id,
            user=args.user,
            content_type=args.content_type,
            object_id=args.object_id,
            completed=args.completed,
            due_lte=args.due_lte,
            due_gte=args.due_gte,
        ))
    elif command == "users":
        result = client.get_users(UserFilter(
            team_id=args.team_id,
            exclude_team_id=args.exclude_team_id,
            id=args.id,
            exclude_id=args.exclude_id,
            status=args.status,
        ))
    elif command == "invite-user":
        result = client.invite_user(args.name, args.email, is_super_manager=args.super_manager)
    elif command == "update-user":
        data = dict(args.field)
        if args.name is not None:
            data["name"] = args.name
        if args.email is not None:
            data["email"] = args.email
        if not data:
            logging.getLogger(__name__).error("Nothing to update")
            return 1
        result = client.update_user(args.user_id, data)
    elif command == "invite":
        result = client.create_invitation(
            send_mail=not args.no_mail,
            content_type=args.content_type,
            permission=args.permission,
            object_id=args.object_id,
            to_user_id=args.to_user,
        )
    else:
        raise ValueError(f"Unknown command: {command}")

    # stdout carries only the result
    print(json.dumps(result, indent=2))
    return 0


def _report_status(status: int) -> int:
    print(status)
    return 0 if 200 <= status < 300 else 1


def main(argv=None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    # Load configuration
    try:
        settings = load_settings(env_file=args.env)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Please check your .env file or environment variables")
        return 1

    # --verbose wins over LOG_LEVEL
    if not args.verbose:
        logging.getLogger().setLevel(settings.log_level)

    try:
        # Client session is closed on exit
        with SweetProcessClient.from_config(settings.sweetprocess) as client:
            return run_command(client, args)
    except SweetProcessAPIError as e:
        logger.error(f"SweetProcess API error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
