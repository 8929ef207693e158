"""Reconcile management API clients and grants from the command line.

This module serves as a CLI wrapper around auth0_sync.core.management.
Reconciled state is printed as JSON on stdout; persisting it between runs
is left to the caller.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from auth0_sync.config import load_settings
from auth0_sync.core.management import (
    AccessGrant,
    AccessGrantReconciler,
    ApplicationClient,
    ApplicationClientReconciler,
    CredentialInput,
    ManagementClient,
    ResourceState,
    authenticate,
    unmanaged,
)
from auth0_sync.core.management.exceptions import ManagementError
from scripts import audit


def _add_client_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", required=True)
    parser.add_argument("--description", default="")
    parser.add_argument("--first-party", action="store_true")
    parser.add_argument("--ip-header-trusted", action="store_true",
                        help="Trust the token endpoint IP header")
    parser.add_argument("--cross-origin-auth", action="store_true")
    parser.add_argument("--sso", action="store_true")
    parser.add_argument("--token-endpoint-auth-method", default="")
    parser.add_argument("--grant-type", action="append", default=[], dest="grant_types")
    parser.add_argument("--app-type", default="")
    parser.add_argument("--custom-login-page-on", action="store_true")
    parser.add_argument("--callback", action="append", default=[], dest="callbacks")


def _add_grant_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--client-id", required=True)
    parser.add_argument("--audience", required=True)
    parser.add_argument("--scope", nargs="+", required=True)


def _desired_client(args: argparse.Namespace) -> ApplicationClient:
    return ApplicationClient(
        name=args.name,
        description=args.description,
        is_first_party=args.first_party,
        is_token_endpoint_ip_header_trusted=args.ip_header_trusted,
        cross_origin_auth=args.cross_origin_auth,
        sso=args.sso,
        token_endpoint_auth_method=args.token_endpoint_auth_method,
        grant_types=tuple(args.grant_types),
        app_type=args.app_type,
        custom_login_page_on=args.custom_login_page_on,
        callbacks=tuple(args.callbacks),
    )


def _desired_grant(args: argparse.Namespace) -> AccessGrant:
    return AccessGrant(client_id=args.client_id, audience=args.audience, scope=tuple(args.scope))


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Management API reconciliation helper")
    parser.add_argument("--domain", default=settings.domain)
    parser.add_argument("--api-client-id", default=settings.client_id)
    parser.add_argument("--api-client-secret", default=settings.client_secret)
    parser.add_argument("--access-token", default=settings.access_token)
    parser.add_argument("--timeout", type=float, default=settings.request_timeout)
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--operator", default="automation",
                        help="Operator identifier for audit logs (default: automation)")

    sub = parser.add_subparsers(dest="cmd")

    cc = sub.add_parser("client-create")
    _add_client_fields(cc)

    cr = sub.add_parser("client-read")
    cr.add_argument("--id", required=True)

    cu = sub.add_parser("client-update")
    cu.add_argument("--id", required=True)
    _add_client_fields(cu)

    cd = sub.add_parser("client-delete")
    cd.add_argument("--id", required=True)

    gc = sub.add_parser("grant-create")
    _add_grant_fields(gc)

    gr = sub.add_parser("grant-read")
    gr.add_argument("--id", required=True)
    gr.add_argument("--client-id", required=True)
    gr.add_argument("--audience", required=True)

    gu = sub.add_parser("grant-update")
    gu.add_argument("--id", required=True)
    _add_grant_fields(gu)

    gd = sub.add_parser("grant-delete")
    gd.add_argument("--id", required=True)

    return parser


def _run(args: argparse.Namespace, client: ManagementClient) -> ResourceState:
    kind, _, action = args.cmd.partition("-")
    if kind == "client":
        reconciler = ApplicationClientReconciler(client)
        if action == "create":
            return reconciler.create(unmanaged(), _desired_client(args))
        current = ResourceState(identity=args.id)
        if action == "update":
            return reconciler.update(current, _desired_client(args))
    else:
        reconciler = AccessGrantReconciler(client)
        if action == "create":
            return reconciler.create(unmanaged(), _desired_grant(args))
        if action == "read":
            current = ResourceState(
                identity=args.id,
                attributes=AccessGrant(client_id=args.client_id, audience=args.audience),
            )
        else:
            current = ResourceState(identity=args.id)
        if action == "update":
            return reconciler.update(current, _desired_grant(args))

    if action == "read":
        return reconciler.read(current)
    return reconciler.delete(current)


def main() -> None:
    """Command-line entry point."""
    try:
        parser = build_parser()
    except RuntimeError as e:
        print(f"[config] Error: {e}", file=sys.stderr)
        sys.exit(1)
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.cmd:
        parser.print_help()
        return

    if not args.domain:
        parser.error("Missing management API domain")

    credentials = CredentialInput(
        access_token=args.access_token or "",
        client_id=args.api_client_id or "",
        client_secret=args.api_client_secret or "",
    )
    if not credentials.usable:
        parser.error("Must supply --access-token, or both --api-client-id and --api-client-secret")

    try:
        session = authenticate(args.domain, credentials, timeout=args.timeout)
    except ManagementError as e:
        print(f"[auth] Error: {e}", file=sys.stderr)
        sys.exit(1)

    kind, _, action = args.cmd.partition("-")
    identity = getattr(args, "id", "")
    try:
        with ManagementClient(session, timeout=args.timeout) as client:
            state = _run(args, client)
    except ManagementError as e:
        print(f"[{kind}] Error: {e}", file=sys.stderr)
        if action != "read":
            audit.safe_log_reconcile_event(
                action, kind, identity,
                operator=args.operator,
                domain=args.domain,
                details={"error": str(e)},
                success=False,
            )
        sys.exit(1)

    if action == "read" and not state.managed:
        print(f"[{kind}] {identity} no longer exists; recreate on next reconciliation", file=sys.stderr)
        audit.safe_log_reconcile_event(
            "drift", kind, identity, operator=args.operator, domain=args.domain, success=True
        )
    elif action != "read":
        audit.safe_log_reconcile_event(
            action, kind, state.identity or identity,
            operator=args.operator,
            domain=args.domain,
            success=True,
        )

    print(json.dumps(state.to_dict(include_secret=(action == "create")), indent=2))


if __name__ == "__main__":
    main()
