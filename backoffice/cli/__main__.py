# backoffice/cli/__main__.py
from __future__ import annotations

import argparse

from .seed_demo import seed_demo


def main() -> None:
    p = argparse.ArgumentParser(prog="backoffice")
    p.add_argument("--property-code", default="DEMO-001")
    p.add_argument("--monthly-rental", type=float, default=12000.0)
    p.add_argument("--periods", type=int, default=12)
    p.add_argument("--no-sample-rent", action="store_true")
    args = p.parse_args()

    out = seed_demo(
        property_code=args.property_code,
        monthly_rental=args.monthly_rental,
        periods=args.periods,
        create_sample_rent=(not args.no_sample_rent),
    )
    print(
        {
            "ok": True,
            "owner_id": out.owner_id,
            "tenant_id": out.tenant_id,
            "property_id": out.property_id,
            "rent_id": out.rent_id,
        }
    )


if __name__ == "__main__":
    main()
