# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""hypertyper CLI: issue one request and report the classified result."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import load_client_config
from ..errors import ConfigError, ErrorKind, HTTPError, error_kind_to_reason
from ..factory import ClientFactory
from ..http.models import HttpResponse, Method
from ..log import setup_logging
from ..result import Err

CLI_TEXT_TRUNCATION_BYTES = 4096

EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.STATUS: 1,
    ErrorKind.CONFIG: 2,
    ErrorKind.TRANSPORT: 3,
    ErrorKind.TIMEOUT: 4,
    ErrorKind.DECODE: 5,
    ErrorKind.SERIALIZATION: 5,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hypertyper", description="Issue a single HTTP request")
    parser.add_argument("method", type=str.upper, choices=[m.value for m in Method], help="HTTP method")
    parser.add_argument("url", help="Absolute URL, or a path resolved against HYPERTYPER_BASE_URL")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Request header (repeatable; later values win)",
    )
    parser.add_argument("-d", "--data", help="Request body sent verbatim")
    parser.add_argument("--timeout", type=float, help="Timeout in seconds (overrides HYPERTYPER_HTTP_TIMEOUT)")
    parser.add_argument(
        "-k",
        "--insecure",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--no-redirects", action="store_true", help="Do not follow redirects")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output a JSON envelope instead of the raw body",
    )
    parser.add_argument("--log-level", help="Logging level (default: HYPERTYPER_LOG_LEVEL or WARNING)")
    return parser


def parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Header must look like NAME:VALUE, got {raw!r}")
    return name.strip(), value.strip()


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    suffix_bytes = suffix.encode("utf-8")
    keep = max_bytes - len(suffix_bytes)
    if keep <= 0:
        return suffix_bytes[:max_bytes].decode("utf-8", errors="ignore")
    prefix = raw[:keep].decode("utf-8", errors="ignore")
    return prefix + suffix


def _response_envelope(response: HttpResponse) -> dict[str, Any]:
    return {
        "ok": True,
        "status_code": response.status_code,
        "url": response.url,
        "headers": dict(response.headers),
        "body": _truncate_text_bytes(response.text, CLI_TEXT_TRUNCATION_BYTES),
    }


def _error_envelope(error: HTTPError) -> dict[str, Any]:
    details = error.to_dict()
    if isinstance(details.get("body"), str):
        details["body"] = _truncate_text_bytes(details["body"], CLI_TEXT_TRUNCATION_BYTES)
    return {"ok": False, "error": details}


def _print_json(payload: dict[str, Any]) -> None:
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _report_error(error: HTTPError, *, as_json: bool) -> int:
    if as_json:
        _print_json(_error_envelope(error))
    else:
        print(f"[hypertyper] {error.kind.value}: {error} ({error_kind_to_reason(error.kind)})", file=sys.stderr)
    return EXIT_CODES.get(error.kind, 1)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        headers = dict(parse_header(raw) for raw in args.header)
    except ValueError as exc:
        parser.error(str(exc))

    overrides: dict[str, Any] = {}
    if args.insecure:
        overrides["verify_tls"] = False
    if args.no_redirects:
        overrides["follow_redirects"] = False
    if args.timeout is not None:
        overrides["timeout"] = args.timeout

    try:
        factory = ClientFactory(load_client_config(**overrides))
    except ConfigError as exc:
        return _report_error(exc, as_json=args.json)

    with factory.build() as client:
        result = client.send(args.method, args.url, headers=headers, body=args.data)

    if isinstance(result, Err):
        return _report_error(result.error, as_json=args.json)

    response = result.value
    if args.json:
        _print_json(_response_envelope(response))
    else:
        sys.stdout.buffer.write(response.content)
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
