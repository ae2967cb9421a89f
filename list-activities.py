#!/usr/bin/env python3
"""List every activity submitted to the MVP activities API."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from mvp_activities.client import (
    EMAIL_ENV_VAR,
    TOKEN_ENV_VAR,
    MVPActivitiesClient,
    MVPAPIError,
    MVPConfigurationError,
)
from mvp_activities.listing import (
    format_activity_line,
    sort_activities_by_date,
    write_activities_json,
)

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)
logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List the activities submitted to your MVP profile."
    )
    parser.add_argument(
        "--token",
        default=os.environ.get(TOKEN_ENV_VAR),
        help=f"MVP API bearer token (default: ${TOKEN_ENV_VAR}).",
    )
    parser.add_argument(
        "--email",
        default=os.environ.get(EMAIL_ENV_VAR),
        help=f"Email associated to the MVP profile (default: ${EMAIL_ENV_VAR}).",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the full activity payloads to this JSON file instead of printing.",
    )
    parser.add_argument(
        "--sort",
        choices=("asc", "desc", "none"),
        default="none",
        help="Sort activities by date (default: %(default)s, keeps API order).",
    )
    return parser.parse_args(argv)


def main(
    argv: Optional[List[str]] = None,
    *,
    client: Optional[MVPActivitiesClient] = None,
) -> int:
    args = parse_args(argv)

    try:
        client = client or MVPActivitiesClient(args.token, args.email)
        client.init()
        result = client.fetch_submitted_activities()
    except MVPConfigurationError as exc:
        logger.error("missing_configuration", error=str(exc))
        return 1
    except MVPAPIError as exc:
        logger.error("mvp_api_error", status_code=exc.status_code, error=str(exc))
        return 1

    activities = result.activities
    if args.sort != "none":
        activities = sort_activities_by_date(
            activities, descending=args.sort == "desc"
        )

    if args.output:
        written = write_activities_json(activities, args.output)
        logger.info(
            "dump_complete",
            total=len(activities),
            requests=result.total_requests,
            output=str(Path(written)),
        )
        return 0

    for activity in activities:
        print(format_activity_line(activity))

    logger.info(
        "listing_complete",
        total=len(activities),
        filtered_count=result.filtered_count,
        requests=result.total_requests,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
