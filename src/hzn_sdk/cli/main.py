"""Command-line interface for hzn-utils."""

from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Any, Sequence

from hzn_sdk.auth import org_and_creds, resolve_exchange_auth, set_whether_using_api_key
from hzn_sdk.client import LocalAgentClient, RegistryClient
from hzn_sdk.config import get_exchange_url
from hzn_sdk.decode import PRETTY_STRING, RAW_TEXT
from hzn_sdk.errors import EXIT_CLI_GENERAL_ERROR, HznSDKError, NotFoundError, ParseError
from hzn_sdk.files import confirm_remove, read_json_file
from hzn_sdk.ids import form_exchange_id_for_service, trim_org
from hzn_sdk.options import GlobalOptions
from hzn_sdk.output import sanitize_error_text

EXIT_SUCCESS = 0
HTTP_NOT_FOUND = 404


def _sdk_version() -> str:
    try:
        return pkg_version("hzn-sdk")
    except PackageNotFoundError:
        return "0.0.0+local"


def _add_codes_argument(parser: argparse.ArgumentParser, default_help: str) -> None:
    parser.add_argument(
        "--code",
        dest="codes",
        action="append",
        type=int,
        default=None,
        help=f"Acceptable HTTP code; repeat for more, the first one is success ({default_help})",
    )


def _add_body_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--body-file",
        default="-",
        help="JSON body file, '-' for stdin. /* */ comments and $VARS are expanded",
    )
    parser.add_argument(
        "--raw-body",
        action="store_true",
        help="Upload the file contents as-is instead of sending them as JSON",
    )


def _add_exchange_auth_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-u", "--user-pw", default="", help="Exchange user:password")
    parser.add_argument("-n", "--node-id-tok", default="", help="Exchange node id:token")
    parser.add_argument("-o", "--org", default="", help="Org to prefix the credentials with")
    parser.add_argument(
        "--exchange-url",
        default=None,
        help="Exchange base URL override (default from HZN_EXCHANGE_URL or the agent config)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hzn-utils")
    parser.add_argument(
        "--version",
        action="version",
        version=f"hzn-utils {_sdk_version()}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Trace REST calls and their HTTP codes on stderr",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not send PUT, POST or DELETE requests; report them as successful",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    version = sub.add_parser("version", help="Show CLI version")
    version.add_argument("--json", action="store_true", help="Print version details as JSON")

    agent = sub.add_parser("agent", help="Call the local agent REST API")
    agent_sub = agent.add_subparsers(dest="agent_command", required=True)
    agent_get = agent_sub.add_parser("get", help="GET a local agent resource")
    agent_get.add_argument("path", help="Route below the agent base URL, e.g. node")
    _add_codes_argument(agent_get, "default: 200")
    agent_get.add_argument("--raw", action="store_true", help="Print the body unformatted")
    for method in ("put", "post"):
        agent_put = agent_sub.add_parser(method, help=f"{method.upper()} to the local agent")
        agent_put.add_argument("path")
        _add_codes_argument(agent_put, "default: 200, 201, 204")
        _add_body_arguments(agent_put)
    agent_delete = agent_sub.add_parser("delete", help="DELETE a local agent resource")
    agent_delete.add_argument("path")
    _add_codes_argument(agent_delete, "default: 200, 204")
    agent_delete.add_argument("-f", "--force", action="store_true", help="Skip the confirmation")

    exchange = sub.add_parser("exchange", help="Call the exchange REST API")
    exchange_sub = exchange.add_subparsers(dest="exchange_command", required=True)
    exchange_url = exchange_sub.add_parser("url", help="Show the resolved exchange URL")
    exchange_url.add_argument("--json", action="store_true")
    exchange_get = exchange_sub.add_parser("get", help="GET an exchange resource")
    exchange_get.add_argument("path", help="Route below the exchange base URL, e.g. orgs/myorg")
    _add_exchange_auth_arguments(exchange_get)
    _add_codes_argument(exchange_get, "default: 200, 404")
    exchange_get.add_argument("--raw", action="store_true", help="Print the body unformatted")
    for method in ("put", "post"):
        exchange_put = exchange_sub.add_parser(method, help=f"{method.upper()} to the exchange")
        exchange_put.add_argument("path")
        _add_exchange_auth_arguments(exchange_put)
        _add_codes_argument(exchange_put, "default: 200, 201")
        _add_body_arguments(exchange_put)
    exchange_delete = exchange_sub.add_parser("delete", help="DELETE an exchange resource")
    exchange_delete.add_argument("path")
    _add_exchange_auth_arguments(exchange_delete)
    _add_codes_argument(exchange_delete, "default: 204")
    exchange_delete.add_argument("-f", "--force", action="store_true")

    util = sub.add_parser("util", help="Resource id helpers")
    util_sub = util.add_subparsers(dest="util_command", required=True)
    exchange_id = util_sub.add_parser("exchange-id", help="Form the exchange id of a service")
    exchange_id.add_argument("url")
    exchange_id.add_argument("version")
    exchange_id.add_argument("arch")
    util_trim = util_sub.add_parser("trim-org", help="Split <org>/<id> into org and id")
    util_trim.add_argument("org")
    util_trim.add_argument("id")

    return parser


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {sanitize_error_text(message)}", file=stderr)
    return code


def _read_body(args, *, stdin, stderr) -> Any:
    raw = read_json_file(args.body_file, stdin=stdin, stderr=stderr)
    if args.raw_body:
        return raw
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ParseError(f"failed to unmarshal bytes from {args.body_file}: {exc}") from exc


def _run_version(*, as_json: bool, stdout) -> int:
    payload = {"cli": "hzn-utils", "sdk_version": _sdk_version()}
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
        return EXIT_SUCCESS
    print(f"hzn-utils {payload['sdk_version']}", file=stdout)
    return EXIT_SUCCESS


def _run_agent(*, args, options: GlobalOptions, stdin, stdout, stderr) -> int:
    client = LocalAgentClient(options=options, stderr=stderr)
    command = args.agent_command
    try:
        if command == "get":
            codes = args.codes or [200]
            result = client.get(args.path, codes, RAW_TEXT if args.raw else PRETTY_STRING)
            if result.body is not None:
                print(result.body, file=stdout)
            return EXIT_SUCCESS

        if command in ("put", "post"):
            body = _read_body(args, stdin=stdin, stderr=stderr)
            codes = args.codes or [200, 201, 204]
            result = client.put_post(command.upper(), args.path, codes, body)
            if result.text:
                print(result.text, file=stdout)
            return EXIT_SUCCESS

        if command == "delete":
            if not args.force and not confirm_remove(
                f"Are you sure you want to delete {args.path} from the Horizon agent?",
                stdin=stdin,
                stdout=stdout,
            ):
                return EXIT_SUCCESS
            client.delete(args.path, args.codes or [200, 204])
            return EXIT_SUCCESS
    except HznSDKError as exc:
        return _print_error(stderr, "agent error", str(exc), code=exc.exit_code)

    print("unknown command", file=stderr)
    return EXIT_CLI_GENERAL_ERROR


def _exchange_credentials(args, options: GlobalOptions, stderr) -> tuple[str, GlobalOptions]:
    creds = resolve_exchange_auth(args.user_pw, args.node_id_tok)
    options = set_whether_using_api_key(options, creds, stderr=stderr)
    if args.org:
        creds = org_and_creds(args.org, creds, options)
    return creds, options


def _run_exchange(*, args, options: GlobalOptions, stdin, stdout, stderr) -> int:
    command = args.exchange_command
    try:
        if command == "url":
            url = get_exchange_url(options, stderr=stderr)
            if args.json:
                print(json.dumps({"exchange_url": url}, sort_keys=True), file=stdout)
            else:
                print(url, file=stdout)
            return EXIT_SUCCESS

        creds, options = _exchange_credentials(args, options, stderr)
        base_url = args.exchange_url or get_exchange_url(options, stderr=stderr)
        client = RegistryClient(base_url=base_url.rstrip("/"), options=options, stderr=stderr)

        if command == "get":
            codes = args.codes or [200, HTTP_NOT_FOUND]
            result = client.get(args.path, creds, codes, RAW_TEXT if args.raw else PRETTY_STRING)
            if result.code == HTTP_NOT_FOUND and result.code != codes[0]:
                raise NotFoundError(f"{args.path} not found in the exchange")
            if result.body is not None:
                print(result.body, file=stdout)
            return EXIT_SUCCESS

        if command in ("put", "post"):
            body = _read_body(args, stdin=stdin, stderr=stderr)
            codes = args.codes or [200, 201]
            result = client.put_post(command.upper(), args.path, creds, codes, body)
            if result.text:
                print(result.text, file=stdout)
            return EXIT_SUCCESS

        if command == "delete":
            if not args.force and not confirm_remove(
                f"Are you sure you want to delete {args.path} from the exchange?",
                stdin=stdin,
                stdout=stdout,
            ):
                return EXIT_SUCCESS
            client.delete(args.path, creds, args.codes or [204])
            return EXIT_SUCCESS
    except HznSDKError as exc:
        return _print_error(stderr, "exchange error", str(exc), code=exc.exit_code)

    print("unknown command", file=stderr)
    return EXIT_CLI_GENERAL_ERROR


def _run_util(*, args, stdout, stderr) -> int:
    try:
        if args.util_command == "exchange-id":
            print(form_exchange_id_for_service(args.url, args.version, args.arch), file=stdout)
            return EXIT_SUCCESS
        if args.util_command == "trim-org":
            org, resource_id = trim_org(args.org, args.id)
            print(json.dumps({"id": resource_id, "org": org}, sort_keys=True), file=stdout)
            return EXIT_SUCCESS
    except HznSDKError as exc:
        return _print_error(stderr, "input error", str(exc), code=exc.exit_code)

    print("unknown command", file=stderr)
    return EXIT_CLI_GENERAL_ERROR


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin=sys.stdin,
    stdout=sys.stdout,
    stderr=sys.stderr,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    options = GlobalOptions(verbose=args.verbose, dry_run=args.dry_run)

    if args.command == "version":
        return _run_version(as_json=args.json, stdout=stdout)

    if args.command == "agent":
        return _run_agent(args=args, options=options, stdin=stdin, stdout=stdout, stderr=stderr)

    if args.command == "exchange":
        return _run_exchange(args=args, options=options, stdin=stdin, stdout=stdout, stderr=stderr)

    if args.command == "util":
        return _run_util(args=args, stdout=stdout, stderr=stderr)

    print("unknown command", file=stderr)
    return EXIT_CLI_GENERAL_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
