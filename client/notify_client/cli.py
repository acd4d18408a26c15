import argparse
import dataclasses
import functools
import json
import logging
import os
import sys
from typing import List, Tuple

import requests

from .client import NotifyClient
from .config import NotifyConfig, get_default_config_path, write_config
from .credentials import parse_credential
from .errors import NotifyError
from .logging_config import setup_logging
from .payload import (Personalisation, email_reply_to_id, reference,
                      sms_sender_id, status_callback)

logger = logging.getLogger(__name__)


def parse_personalisation(values: List[str]) -> List[Tuple[str, str]]:
    """Turn repeated ``key=value`` arguments into (key, value) pairs"""
    pairs = []
    for value in values or []:
        if '=' not in value:
            raise ValueError(f"personalisation must be key=value, got {value!r}")
        key, _, item = value.partition('=')
        pairs.append((key, item))
    return pairs


def common_options(args: argparse.Namespace) -> list:
    options = []
    if args.reference:
        options.append(reference(args.reference))
    if args.status_callback_url:
        options.append(status_callback(args.status_callback_url, args.status_callback_bearer_token))
    if args.personalisation:
        options.append(Personalisation(parse_personalisation(args.personalisation)))
    return options


def load_client(args: argparse.Namespace) -> NotifyClient:
    config = NotifyConfig(args.config)
    logger.debug(f"Using Notify API at {config.base_url}")
    return NotifyClient.from_config(config)


def print_result(result) -> None:
    if isinstance(result, list):
        data = [dataclasses.asdict(item) for item in result]
    else:
        data = dataclasses.asdict(result)
    print(json.dumps(data, indent=2))


def run_command(func):
    """Report client and transport failures on stderr instead of a traceback"""
    @functools.wraps(func)
    def wrapper(args: argparse.Namespace) -> int:
        try:
            return func(args)
        except NotifyError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except requests.exceptions.RequestException as e:
            print(f"Connection failed: {e}", file=sys.stderr)
            return 1
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return wrapper


@run_command
def cmd_send_sms(args: argparse.Namespace) -> int:
    """Send an SMS message"""
    options = common_options(args)
    if args.sms_sender_id:
        options.append(sms_sender_id(args.sms_sender_id))

    client = load_client(args)
    print_result(client.send_sms(args.template_id, args.phone_number, *options))
    return 0


@run_command
def cmd_send_email(args: argparse.Namespace) -> int:
    """Send an email"""
    options = common_options(args)
    if args.email_reply_to_id:
        options.append(email_reply_to_id(args.email_reply_to_id))

    client = load_client(args)
    print_result(client.send_email(args.template_id, args.email_address, *options))
    return 0


@run_command
def cmd_template(args: argparse.Namespace) -> int:
    """Fetch a template, optionally at a given version"""
    client = load_client(args)
    if args.version is not None:
        print_result(client.get_template_version(args.template_id, args.version))
    else:
        print_result(client.get_template_by_id(args.template_id))
    return 0


@run_command
def cmd_templates(args: argparse.Namespace) -> int:
    """List templates"""
    client = load_client(args)
    print_result(client.get_all_templates(args.type))
    return 0


@run_command
def cmd_preview(args: argparse.Namespace) -> int:
    """Render a template with personalisation"""
    options = []
    if args.personalisation:
        options.append(Personalisation(parse_personalisation(args.personalisation)))

    client = load_client(args)
    print_result(client.generate_template_preview(args.template_id, *options))
    return 0


@run_command
def cmd_test_connection(args: argparse.Namespace) -> int:
    """Test connection to the Notify API"""
    client = load_client(args)
    templates = client.get_all_templates()
    print(f"Connection successful! Service {client.service_id} has {len(templates)} templates")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize the client config file"""
    if args.config_dir:
        config_path = os.path.join(args.config_dir, "config.json")
    else:
        config_path = get_default_config_path()

    print(f"Initializing Notify client in: {os.path.dirname(config_path) or '.'}")

    if os.path.exists(config_path) and not args.force:
        print(f"File already exists: {config_path}")
        print("Use --force to overwrite existing files")
        return 1

    try:
        parse_credential(args.api_key)
    except NotifyError as e:
        print(f"Invalid API key: {e}", file=sys.stderr)
        return 1

    try:
        write_config(config_path, args.api_key, args.base_url, args.timeout)
    except OSError as e:
        print(f"Failed to create config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config file: {config_path}")
    return 0


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Config file path (default: NOTIFY_API_CONFIG or config directory)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests to stderr (default: False)")


def add_send_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--reference", help="Your own identifier for this notification")
    parser.add_argument("--personalisation", "-p", action="append", metavar="KEY=VALUE",
                        help="Template placeholder value (repeatable)")
    parser.add_argument("--status-callback-url", help="URL that receives delivery receipts")
    parser.add_argument("--status-callback-bearer-token", help="Bearer token sent to the status callback URL")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="notify-cli", description="Notify API client utilities")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create the client config file", description="Create the configuration directory and write the API key and base URL to config.json.")
    p_init.add_argument("api_key", help="Notify API key")
    p_init.add_argument("--config-dir", help="Config directory (default: the directory of NOTIFY_API_CONFIG, else XDG_CONFIG_HOME/notify_client or ~/.config/notify_client)")
    p_init.add_argument("--base-url", help="Notify API base URL (default: https://rest-api.notify.gov.au)")
    p_init.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")
    p_init.add_argument("--force", action="store_true", help="Overwrite existing files")
    p_init.set_defaults(func=cmd_init, verbose=False)

    p_test = sub.add_parser("test", help="Test connection to the Notify API", description="Test the API key and connection by listing templates.")
    add_common_arguments(p_test)
    p_test.set_defaults(func=cmd_test_connection)

    p_sms = sub.add_parser("send-sms", help="Send an SMS message", description="Send a templated SMS message to a phone number.")
    p_sms.add_argument("template_id", help="Template id")
    p_sms.add_argument("phone_number", help="Recipient phone number")
    add_send_arguments(p_sms)
    p_sms.add_argument("--sms-sender-id", help="Id of the SMS sender to use")
    add_common_arguments(p_sms)
    p_sms.set_defaults(func=cmd_send_sms)

    p_email = sub.add_parser("send-email", help="Send an email", description="Send a templated email to an address.")
    p_email.add_argument("template_id", help="Template id")
    p_email.add_argument("email_address", help="Recipient email address")
    add_send_arguments(p_email)
    p_email.add_argument("--email-reply-to-id", help="Id of the reply-to address")
    add_common_arguments(p_email)
    p_email.set_defaults(func=cmd_send_email)

    p_template = sub.add_parser("template", help="Fetch a template", description="Fetch a template by id, optionally at a specific version.")
    p_template.add_argument("template_id", help="Template id")
    p_template.add_argument("--version", type=int, default=None, help="Template version (default: latest)")
    add_common_arguments(p_template)
    p_template.set_defaults(func=cmd_template)

    p_templates = sub.add_parser("templates", help="List templates", description="List all templates of the service.")
    p_templates.add_argument("--type", choices=["sms", "email"], default=None, help="Only list templates of this type")
    add_common_arguments(p_templates)
    p_templates.set_defaults(func=cmd_templates)

    p_preview = sub.add_parser("preview", help="Preview a template", description="Render a template with personalisation without sending it.")
    p_preview.add_argument("template_id", help="Template id")
    p_preview.add_argument("--personalisation", "-p", action="append", metavar="KEY=VALUE",
                           help="Template placeholder value (repeatable)")
    add_common_arguments(p_preview)
    p_preview.set_defaults(func=cmd_preview)

    return p


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    if bool(getattr(args, "status_callback_url", None)) != bool(getattr(args, "status_callback_bearer_token", None)):
        parser.error("--status-callback-url and --status-callback-bearer-token must be given together")
    setup_logging("DEBUG" if args.verbose else None)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
