"""Command-line entry point: run an aggregated job search and print the results."""

import argparse
import json
import logging
import sys
from typing import Optional

from job_aggregator.config import AppConfig, load_config, validate_config
from job_aggregator.errors import JobAggregatorError
from job_aggregator.llm.client import JSONModel
from job_aggregator.pipeline import SearchOutcome, build_session
from job_aggregator.profile.linkedin_profile import load_linkedin_profile
from job_aggregator.profile.models import Profile
from job_aggregator.profile.normalizer import add_cv, add_linkedin
from job_aggregator.profile.resume_parser import load_cv_profile
from job_aggregator.utils.logging_config import setup_logging
from job_aggregator.utils.text_processing import split_csv

logger = logging.getLogger("job_aggregator")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Job Aggregator - search LinkedIn, Upwork, Indeed, Behance and Freelancer in one go",
    )
    parser.add_argument("query", help="What you are looking for, e.g. \"remote React developer\"")
    parser.add_argument(
        "--config", default=None,
        help="Path to config file (default: environment variables only)",
    )
    parser.add_argument("--cv", metavar="PATH", help="CV file (.pdf, .docx, .txt, .md) used as profile context")
    parser.add_argument("--linkedin", metavar="URL", help="LinkedIn profile URL used as profile context")
    parser.add_argument(
        "--sources", metavar="A,B",
        help="Comma-separated platforms to search (default: all)",
    )
    parser.add_argument(
        "--auto", action="store_true",
        help="Let the AI pick which platforms to search",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def load_profile(args: argparse.Namespace, config: AppConfig, llm: JSONModel) -> Optional[Profile]:
    """Build the profile from the CV and/or LinkedIn sources given on the command line."""
    profile = None

    if args.linkedin:
        logger.info("Importing LinkedIn profile: %s", args.linkedin)
        linkedin_profile = load_linkedin_profile(args.linkedin, config.api_keys.enrichlayer_api_key)
        profile = add_linkedin(profile, linkedin_profile)

    if args.cv:
        logger.info("Parsing CV from: %s", args.cv)
        cv_profile = load_cv_profile(args.cv, llm, config.llm.cv_temperature)
        profile = add_cv(profile, cv_profile)

    return profile


def print_outcome(outcome: SearchOutcome) -> None:
    if outcome.selection is not None:
        print(f"\nSources: {', '.join(outcome.selection.selected)} ({outcome.selection.reasoning})")

    for source, records in outcome.by_source().items():
        print(f"\n=== {source} ({len(records)}) ===")
        for record in records:
            line = f"- {record.title}"
            if record.company:
                line += f" @ {record.company}"
            if record.location:
                line += f" [{record.location}]"
            if record.salary:
                line += f" {record.salary}"
            print(line)
            if record.url:
                print(f"  {record.url}")

    if outcome.errors:
        print("\nFailed sources:")
        for source, message in outcome.errors.items():
            print(f"  {source}: {message}")

    print(f"\nTotal: {len(outcome.results)} results")


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_dir, "DEBUG" if args.verbose else config.log_level)

    for warning in validate_config(config):
        logger.warning("Config: %s", warning)

    try:
        session = build_session(config)
        profile = load_profile(args, config, session.llm)
        platforms = split_csv(args.sources) if args.sources else None
        outcome = session.search(args.query, profile=profile, platforms=platforms, auto_select=args.auto)
    except JobAggregatorError as e:
        logger.error("Search failed: %s", e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        print_outcome(outcome)
    return 0


if __name__ == "__main__":
    sys.exit(main())
