import argparse
import json

import uvicorn

from narrative_audit.api.app import create_app
from narrative_audit.auth.tokens import SignedTokenCodec
from narrative_audit.config.settings import Settings
from narrative_audit.database.connection import close_pool, init_pool
from narrative_audit.logging.logger import Log
from narrative_audit.pipeline.orchestrator import build_orchestrator


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="narrative-audit",
        description="Narrative audit worker: analyze recent uploads and deliver reports.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=None, help="Bind address (default: API_HOST).")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT).")

    analyze = commands.add_parser("analyze", help="Run one analysis synchronously.")
    analyze.add_argument("user_id", help="User whose recent uploads are analyzed.")

    issue = commands.add_parser("issue-token", help="Print a signed upload token.")
    issue.add_argument("user_id", help="User the token is issued for.")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse command -> configure logging -> dispatch."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, settings.log_format)

    if args.command == "issue-token":
        codec = SignedTokenCodec(
            settings.upload_token_secret,
            ttl_hours=settings.upload_token_ttl_hours,
        )
        print(codec.issue(args.user_id))
        return 0

    init_pool(settings)
    try:
        orchestrator = build_orchestrator(settings)
        if args.command == "analyze":
            outcome = orchestrator.run(args.user_id)
            print(json.dumps(outcome.to_payload(), indent=2))
            return 0 if outcome.success else 1

        uvicorn.run(
            create_app(orchestrator),
            host=args.host or settings.api_host,
            port=args.port or settings.api_port,
            log_config=None,
        )
        return 0
    finally:
        close_pool()


if __name__ == "__main__":
    raise SystemExit(main())
