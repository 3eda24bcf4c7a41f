"""Command line entry point."""
import argparse
import asyncio
import getpass
import json
import sys
from dataclasses import replace
from pathlib import Path
from decimal import Decimal
from typing import Optional, Tuple

from budgetwise.auth.provider import HttpAuthProvider
from budgetwise.config.manager import ContextManager, InsightContext
from budgetwise.config.settings import AppSettings
from budgetwise.llm.models import SpendingAnalysis
from budgetwise.orchestrator.pipeline import InsightPipeline
from budgetwise.orchestrator.tips import generate_budget_goals, get_personalized_tips
from budgetwise.utils.exceptions import BudgetWiseError, ValidationError
from budgetwise.utils.logger import configure_logging, get_logger
from budgetwise.utils.numbers import format_number, to_decimal

logger = get_logger()

COMMANDS = ["insights", "set-goal", "show-goals", "clear-goals", "login", "logout", "tips"]


def _parse_goal(text: str) -> Tuple[str, Decimal]:
    """Parse CATEGORY=AMOUNT."""
    category, sep, amount = text.partition("=")
    if not sep or not category.strip():
        raise argparse.ArgumentTypeError(f"Expected CATEGORY=AMOUNT, got {text!r}")
    try:
        return category.strip(), to_decimal(amount.strip(), category.strip())
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _parse_amount(text: str) -> Decimal:
    try:
        return to_decimal(text, "amount")
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _build_context(args: argparse.Namespace, manager: ContextManager) -> InsightContext:
    """Stored context with command line overrides applied."""
    context = manager.load_context() or InsightContext()

    if args.budget_goal is not None:
        context = replace(context, budget_goal=args.budget_goal)
    for category, amount in args.goal or []:
        context = context.with_category_goal(category, amount)

    is_valid, message = manager.validate_context(context)
    if not is_valid:
        raise ValidationError(message)

    if context.is_token_expired():
        logger.warning("Stored session has expired; run 'budgetwise login' again")

    return context


def insights_command(args: argparse.Namespace, settings: AppSettings, manager: ContextManager) -> None:
    """Generate and print a spending analysis."""
    context = _build_context(args, manager)
    pipeline = InsightPipeline.from_settings(settings, context, demo=args.demo, offline=args.offline)
    analysis = asyncio.run(pipeline.generate_insights(context))

    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2))
    else:
        _print_analysis(analysis)


def _print_analysis(analysis: SpendingAnalysis) -> None:
    """Print formatted analysis."""
    print(f"\nOverall score: {analysis.overall_score}/100 ({analysis.source})")
    print(analysis.summary)
    print(f"Total spending: {format_number(analysis.total_spending)}")

    if not analysis.insights:
        print("\nNo insights.")
        return

    print(f"\n{'Priority':<8} {'Category':<16} {'Savings':>10}  Insight")
    print("-" * 90)
    for insight in analysis.insights:
        print(
            f"{insight.priority:<8} {insight.category:<16} "
            f"{format_number(insight.potential_savings):>10}  {insight.insight}"
        )
        if insight.recommendation:
            print(f"{'':<37}{insight.recommendation}")
        if insight.suggested_budget is not None:
            print(f"{'':<37}Suggested budget: {format_number(insight.suggested_budget)}")


def set_goal_command(args: argparse.Namespace, manager: ContextManager) -> None:
    """Store an overall budget goal or a category goal."""
    context = manager.load_context() or InsightContext()

    if args.budget is not None:
        context = replace(context, budget_goal=args.budget)
    if args.category:
        if args.amount is None:
            raise ValidationError("--amount is required with --category")
        context = context.with_category_goal(args.category, args.amount)
    if args.budget is None and not args.category:
        raise ValidationError("Use --budget AMOUNT or --category NAME --amount AMOUNT")

    is_valid, message = manager.validate_context(context)
    if not is_valid:
        raise ValidationError(message)

    manager.save_context(context)
    print("✓ Goals saved")
    show_goals_command(manager)


def show_goals_command(manager: ContextManager) -> None:
    """Print stored goals."""
    context = manager.load_context() or InsightContext()

    budget = format_number(context.budget_goal) if context.budget_goal is not None else "Not set"
    print(f"\nMonthly budget goal: {budget}")

    if not context.category_goals:
        print("No category goals set.")
        return

    print(f"\n{'Category':<20} {'Goal':>10}")
    print("-" * 31)
    for category, amount in context.category_goals.items():
        print(f"{category:<20} {format_number(amount):>10}")


def login_command(args: argparse.Namespace, settings: AppSettings, manager: ContextManager) -> None:
    """Log in and store the session token."""
    email = args.email or input("Email: ")
    password = getpass.getpass("Password: ")

    provider = HttpAuthProvider(settings.api_base_url, timeout=settings.api_timeout_seconds)
    session = asyncio.run(provider.login(email, password))

    context = manager.load_context() or InsightContext()
    context = replace(
        context,
        auth_token=session.token,
        subject=session.subject,
        token_expires_at=session.expires_at
    )
    manager.save_context(context)
    print(f"✓ Logged in as {session.email or email} (expires {session.expires_at.isoformat()})")


def logout_command(manager: ContextManager) -> None:
    """Forget the stored session."""
    context = manager.load_context() or InsightContext()
    manager.save_context(context.without_session())
    print("✓ Logged out")


def tips_command(args: argparse.Namespace) -> None:
    """Print personalized tips and suggested goals."""
    print("\nTips:")
    for tip in get_personalized_tips():
        print(f"  [{tip.icon}] {tip.text}")

    print("\nSuggested goals:")
    for goal in generate_budget_goals(args.savings_target):
        print(f"  {goal.goal:<28} {format_number(goal.target):>10}  ({goal.timeframe})")


def _load_settings(config_path: Optional[str]) -> AppSettings:
    settings = AppSettings.load(Path(config_path) if config_path else None)
    configure_logging(settings.log_level, settings.log_max_file_size_mb, settings.log_backup_count)
    return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BudgetWise spending insights")
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="insights",
        help="Command to execute (default: insights)"
    )
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--demo", action="store_true", help="Use built-in demo data instead of the API")
    parser.add_argument("--offline", action="store_true", help="Skip the model, rule-based analysis only")
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")
    parser.add_argument("--budget-goal", type=_parse_amount, help="Monthly budget goal for this run")
    parser.add_argument(
        "--goal",
        type=_parse_goal,
        action="append",
        metavar="CATEGORY=AMOUNT",
        help="Category goal for this run (repeatable)"
    )
    parser.add_argument("--budget", type=_parse_amount, help="Monthly budget goal to store (set-goal)")
    parser.add_argument("--category", help="Category name (set-goal)")
    parser.add_argument("--amount", type=_parse_amount, help="Category goal amount (set-goal)")
    parser.add_argument("--email", help="Account email (login)")
    parser.add_argument("--savings-target", type=_parse_amount, help="Savings target for suggested goals (tips)")
    return parser


def main(argv=None):
    """Main entry point for BudgetWise."""
    args = build_parser().parse_args(argv)

    try:
        settings = _load_settings(args.config)
        manager = ContextManager(settings.context_file)

        if args.command == "insights":
            insights_command(args, settings, manager)
        elif args.command == "set-goal":
            set_goal_command(args, manager)
        elif args.command == "show-goals":
            show_goals_command(manager)
        elif args.command == "clear-goals":
            manager.clear_goals()
            print("✓ Cleared all goals")
        elif args.command == "login":
            login_command(args, settings, manager)
        elif args.command == "logout":
            logout_command(manager)
        elif args.command == "tips":
            tips_command(args)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except (BudgetWiseError, FileNotFoundError) as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
