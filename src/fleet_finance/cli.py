"""Command-line interface for Fleet Finance."""

import argparse
import sys

from fleet_finance import __version__
from fleet_finance.config import get_settings
from fleet_finance.exceptions import FleetFinanceError
from fleet_finance.formatting import format_currency, format_percentage
from fleet_finance.services.amortization import build_schedule, quote_financing
from fleet_finance.services.line_items import compute_aggregate, totals_for
from fleet_finance.services.validation import (
    ParseResult,
    parse_decimal,
    parse_financing,
    parse_line_item,
)


def _print_errors(result: ParseResult) -> int:
    for error in result.errors:
        print(f"Error: {error.message}")
    return 1


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    print(f"Fleet Finance v{__version__}")
    return 0


def cmd_line_totals(args: argparse.Namespace) -> int:
    """Compute invoice or bill totals from QTY:PRICE:RATE line specs."""
    items = []
    for index, raw in enumerate(args.line, start=1):
        parts = raw.split(":")
        if len(parts) != 3:
            print(f"Error: line {index} must be QTY:PRICE:RATE, got {raw!r}")
            return 1
        result = parse_line_item(*parts)
        if not result.ok:
            return _print_errors(result)
        items.append(result.unwrap())

    line_totals = [totals_for(item) for item in items]
    print(f"{'#':>3}  {'Qty':>6}  {'Unit Price':>14}  {'Tax %':>7}  {'Tax':>12}  {'Total':>14}")
    for index, (item, totals) in enumerate(zip(items, line_totals), start=1):
        print(
            f"{index:>3}  {item.quantity:>6}  {format_currency(item.unit_price):>14}  "
            f"{format_percentage(item.tax_rate):>7}  {format_currency(totals.tax_amount):>12}  "
            f"{format_currency(totals.total):>14}"
        )

    document = compute_aggregate(line_totals)
    print()
    print(f"Subtotal: {format_currency(document.subtotal)}")
    print(f"Tax:      {format_currency(document.tax)}")
    print(f"Total:    {format_currency(document.total)}")
    return 0


def cmd_quote(args: argparse.Namespace) -> int:
    """Estimate monthly payments for financing a vehicle."""
    settings = get_settings()
    result = parse_financing(
        args.price,
        args.down_payment if args.down_payment is not None else settings.default_down_payment,
        args.rate if args.rate is not None else settings.default_annual_rate,
        args.term if args.term is not None else settings.default_term_months,
    )
    if not result.ok:
        return _print_errors(result)

    quote = result.unwrap()
    try:
        payment = quote_financing(quote)
    except FleetFinanceError as e:
        print(f"Error: {e.message}")
        return 1

    print("Payment Summary")
    print(f"  Vehicle Price:   {format_currency(quote.price)}")
    print(f"  Down Payment:    {format_currency(quote.down_payment)}")
    print(f"  Amount Financed: {format_currency(payment.loan_amount)}")
    print(f"  Interest Rate:   {format_percentage(quote.annual_rate)}")
    print(f"  Term:            {quote.term_months} months")
    print(f"  Monthly Payment: {format_currency(payment.monthly_payment)}")
    print(f"  Total Interest:  {format_currency(payment.total_interest)}")
    print(f"  Total Cost:      {format_currency(payment.total_cost)}")
    return 0


def cmd_schedule(args: argparse.Namespace) -> int:
    """Print a month-by-month repayment schedule."""
    settings = get_settings()
    amount = parse_decimal(args.amount, "loan_amount")
    if not amount.ok:
        return _print_errors(amount)

    try:
        rows = build_schedule(
            amount.unwrap(),
            args.rate if args.rate is not None else settings.default_annual_rate,
            args.term if args.term is not None else settings.default_term_months,
        )
    except FleetFinanceError as e:
        print(f"Error: {e.message}")
        return 1

    print(f"{'Month':>5}  {'Payment':>12}  {'Principal':>12}  {'Interest':>12}  {'Balance':>14}")
    for row in rows:
        print(
            f"{row.period:>5}  {format_currency(row.payment):>12}  "
            f"{format_currency(row.principal):>12}  {format_currency(row.interest):>12}  "
            f"{format_currency(row.balance):>14}"
        )
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "fleet_finance.api.app:create_app",
        factory=True,
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=settings.api_reload,
        workers=settings.api_workers,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fleet-finance",
        description="Fleet Finance - invoice totals and vehicle financing calculators",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    totals_parser = subparsers.add_parser(
        "line-totals", help="Compute invoice or bill totals"
    )
    totals_parser.add_argument(
        "--line",
        "-l",
        action="append",
        required=True,
        metavar="QTY:PRICE:RATE",
        help="Line item as quantity:unit price:tax rate percent (repeatable)",
    )
    totals_parser.set_defaults(func=cmd_line_totals)

    quote_parser = subparsers.add_parser(
        "quote", help="Estimate vehicle financing payments"
    )
    quote_parser.add_argument("--price", "-p", required=True, help="Vehicle price")
    quote_parser.add_argument("--down-payment", "-D", default=None, help="Down payment")
    quote_parser.add_argument("--rate", "-r", default=None, help="Annual rate in percent")
    quote_parser.add_argument("--term", "-t", default=None, help="Term in months")
    quote_parser.set_defaults(func=cmd_quote)

    schedule_parser = subparsers.add_parser(
        "schedule", help="Print a loan repayment schedule"
    )
    schedule_parser.add_argument("--amount", "-a", required=True, help="Amount financed")
    schedule_parser.add_argument("--rate", "-r", default=None, help="Annual rate in percent")
    schedule_parser.add_argument("--term", "-t", default=None, help="Term in months")
    schedule_parser.set_defaults(func=cmd_schedule)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Port")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
