"""Example: Count unique sales for a month of exported lines

This example demonstrates how to go from stored sales rows to unique-sale
counts, globally and by advisor type.

Prerequisites:
- A CSV export of the ventas table (one row per document line)
- Optionally, a CSV of advisor profiles with codigo_asesor and tipo_asesor
"""

import logging
import sys
from pathlib import Path

import pandas as pd

from ventas_core import group_and_count_sales, group_and_count_sales_by_advisor
from ventas_core.advisors import build_advisor_type_map

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

ventas_csv = Path(sys.argv[1] if len(sys.argv) > 1 else "data/ventas_2024-03.csv")  # MODIFY AS NEEDED
profiles_csv = Path(sys.argv[2] if len(sys.argv) > 2 else "data/profiles.csv")

ventas = pd.read_csv(ventas_csv, dtype=str)

# Exclude "OTROS" (rebates, leases) from sales totals, as the dashboards do
ventas = ventas[ventas["tipo_venta"].fillna("").str.upper() != "OTROS"]

result = group_and_count_sales(ventas)
print(f"Unique sales: {result.total_sales_count}")
print(f"Net value:    {result.total_sales_value:,.0f}")
print("\nBy sale type:")
print(result.to_frame(by="type").to_string(index=False))
print("\nBy payment method:")
print(result.to_frame(by="payment_method").to_string(index=False))

if profiles_csv.exists():
    profiles = pd.read_csv(profiles_csv, dtype=str)
    advisor_types = build_advisor_type_map(profiles.to_dict("records"))
    by_advisor = group_and_count_sales_by_advisor(ventas, advisor_types)

    print("\nBy advisor type:")
    for label, bucket in by_advisor.by_advisor_type.items():
        print(f"  {label:<9} {bucket.count:>6} {bucket.value:>16,.0f}")

    print("\nTop advisors:")
    print(by_advisor.advisors_frame().head(10).to_string(index=False))
