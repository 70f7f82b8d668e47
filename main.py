"""
Command line entry point for the Site Auditor
"""
import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace

from config import config
from monitoring import setup_logging
from progress import ProgressChannel
from site_auditor import SiteAuditor

logger = logging.getLogger(__name__)

def create_cli():
    """Create command line interface"""
    parser = argparse.ArgumentParser(description="Site Auditor - single page SEO audits")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    audit_parser = subparsers.add_parser("audit", help="Audit a single URL")
    audit_parser.add_argument("url", help="URL to audit")
    audit_parser.add_argument("--keyword", help="Target keyword for density calculation")

    server_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    server_parser.add_argument("--host", default=config.host, help="Bind address")
    server_parser.add_argument("--port", type=int, default=config.port, help="Server port")

    return parser

async def audit_url(url: str, keyword: str = None) -> int:
    """Audit a URL, printing every event as a JSON line; returns an exit code"""
    audit_config = replace(config, target_keyword=keyword) if keyword else config
    auditor = SiteAuditor(audit_config)
    channel = ProgressChannel()

    task = asyncio.create_task(auditor.run(url, channel))
    async for event in channel:
        print(json.dumps(event.to_dict(), indent=2 if event.is_terminal else None))
    result = await task
    return 0 if result else 1

def run():
    """Main application entry point"""
    parser = create_cli()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    if args.command == "audit":
        try:
            sys.exit(asyncio.run(audit_url(args.url, args.keyword)))
        except KeyboardInterrupt:
            print("\nInterrupted by user")
            sys.exit(130)

    elif args.command == "serve":
        import uvicorn

        logger.info(f"Starting server on {args.host}:{args.port}")
        uvicorn.run("api:app", host=args.host, port=args.port, log_level=config.log_level.lower())

if __name__ == "__main__":
    run()
