from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd
from dotenv import load_dotenv

from amazon_product_api.client.config import load_paapi_config_from_env
from amazon_product_api.client.paapi_client import MAX_ASINS_PER_REQUEST, ProductApiClient
from amazon_product_api.export.excel_export import export_products_to_excel
from amazon_product_api.export.flat_export import products_to_dataframe
from amazon_product_api.models.offers import PricePolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amazon_product_api.run",
        description="Fetch Amazon products by ASIN (PA-API 5.0 GetItems) and print a price table.",
    )
    parser.add_argument("asins", nargs="+", metavar="ASIN")
    parser.add_argument("--excel", type=Path, default=None, help="also export to this .xlsx path")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in PricePolicy],
        default=PricePolicy.BUY_BOX.value,
        help="which offer sets the current price (default: buy_box)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    load_dotenv(override=True)
    print("amazon_product_api.run: starting")

    client = ProductApiClient(load_paapi_config_from_env())
    policy = PricePolicy(args.policy)

    items = []
    for start in range(0, len(args.asins), MAX_ASINS_PER_REQUEST):
        batch = args.asins[start:start + MAX_ASINS_PER_REQUEST]
        items.extend(client.get_items(batch, policy=policy))
    print("Items returned:", len(items))

    df = products_to_dataframe(items)
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(df[["asin", "title", "price_amount", "price_currency", "discount_percentage", "has_prime"]])

    if args.excel is not None:
        result = export_products_to_excel(df, output_path=args.excel)
        print(f"Excel written: {result.path} ({result.total_rows} rows, {result.discounted_rows} discounted)")


if __name__ == "__main__":
    main()
