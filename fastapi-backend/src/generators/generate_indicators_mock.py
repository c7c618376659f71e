#!/usr/bin/env python3
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from kiosk.mock import synth_performance_indicators
from kiosk.formatting import format_currency


def summarize(payload: Dict[str, Any]) -> str:
    rows: List[Dict[str, Any]] = payload["indicators"]
    if not rows:
        return "0 indicators"
    latest = rows[-1]
    return (
        f"{len(rows)} indicators, {rows[0]['created_at'][:10]} .. {latest['created_at'][:10]}, "
        f"latest MRR {format_currency(latest['monthly_recurring_revenue'])}"
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Write a mock /performance-indicators payload as JSON")
    p.add_argument("--days", type=int, default=400, help="number of daily indicator rows")
    p.add_argument("--seed", type=int, default=0, help="random seed (same seed, same series)")
    p.add_argument("--out", type=str, default="-", help="output file, '-' for stdout")
    args = p.parse_args(argv)
    if args.days < 1:
        p.error("--days must be at least 1")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    payload = synth_performance_indicators(days=args.days, seed=args.seed)

    body = json.dumps(payload, indent=2)
    if args.out == "-":
        sys.stdout.write(body + "\n")
    else:
        Path(args.out).write_text(body + "\n", encoding="utf-8")
    print(summarize(payload), file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
