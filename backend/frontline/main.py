"""
frontline-quote — price a Frontline system from the command line.

Builds a factory-default quote session, applies the requested inputs in
order (family, size, preset, margins, cost/price, add-ons, subscription)
and prints either the JSON export or the summary rows.

    frontline-quote --family LV2 --size L --preset ci --adder booster --annual-billing
"""
import argparse
import logging
import sys
from typing import List, Optional

from frontline import config
from frontline.models.pricing_schema import Adder
from frontline.services.export_engine import format_usd
from frontline.services.logging_config import ROOT_LOGGER, setup_logging_from_env
from frontline.services.quote_session import QuoteSession

logger = logging.getLogger(f"{ROOT_LOGGER}.cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="frontline-quote", description="Frontline pricing calculator")
    p.add_argument("--family", choices=["MP3", "LV2"])
    p.add_argument("--size", choices=["S", "M", "L"])
    p.add_argument("--preset", choices=sorted(config.GM_PRESETS))
    p.add_argument("--cost", help="System cost (edits cost; price follows GM)")
    p.add_argument("--margin", help="System target GM, e.g. 0.45")
    p.add_argument("--price", help="System price (edits price; GM follows)")
    p.add_argument("--adder-margin", help="Shared add-on GM")
    p.add_argument("--adder", action="append", default=[], choices=[a.value for a in Adder],
                   help="Enable an add-on (repeatable)")
    p.add_argument("--no-foam", action="store_true", help="Disable the default Foam add-on")
    p.add_argument("--adder-size", action="append", default=[], metavar="ADDER=SIZE",
                   help="Size override, e.g. foam=XL (repeatable)")
    p.add_argument("--vertical", choices=sorted(config.VERTICALS))
    p.add_argument("--high-usage", action="store_true")
    p.add_argument("--annual-billing", action="store_true")
    p.add_argument("--format", choices=["json", "summary"], default="json")
    return p


def run(args: argparse.Namespace) -> QuoteSession:
    """Apply parsed arguments to a fresh session, in calculator event order."""
    session = QuoteSession()
    if args.family:
        session.set_family(args.family)
    if args.size:
        session.set_size(args.size)
    if args.preset:
        session.apply_preset(args.preset)
    if args.margin is not None:
        session.edit_margin(args.margin)
    if args.adder_margin is not None:
        session.set_adder_margin(args.adder_margin)
    if args.cost is not None:
        session.edit_cost(args.cost)
    if args.price is not None:
        session.edit_price(args.price)
    if args.no_foam:
        session.set_adder_enabled(Adder.FOAM, False)
    for adder in args.adder:
        session.set_adder_enabled(adder, True)
    for item in args.adder_size:
        adder, _, size = item.partition("=")
        session.set_adder_size(adder.strip().lower(), size.strip().upper() or None)
    if args.vertical:
        session.set_vertical(args.vertical)
    if args.high_usage:
        session.set_high_usage(True)
    if args.annual_billing:
        session.set_annual_billing(True)
    return session


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging_from_env()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        session = run(args)
    except (KeyError, ValueError) as e:
        logger.error(f"Could not build quote: {e}")
        parser.exit(2, f"frontline-quote: error: {e}\n")

    if args.format == "summary":
        for label, value in session.summary_rows():
            print(f"{label:<24}{value:>14}")
    else:
        print(session.snapshot_json())
    logger.debug(f"Quote printed: one-time {format_usd(session.quote().totals.one_time_total)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
