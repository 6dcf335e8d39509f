"""Prove the auction and ledger rules with Z3 and report the outcome.

Exits non-zero if any property fails, so it can gate CI.
"""

import argparse
import sys

from gavel.verification.properties import AuctionVerifier, VerificationResult


def _report(r: VerificationResult) -> None:
    label = "[PASS] PROVED" if r.holds else "[FAIL] NOT PROVED"
    print(f"\n{label}: {r.property_name} ({r.solver_time_ms:.1f}ms)")
    print(f"  {r.description}")
    if r.counterexample:
        for name, value in sorted(r.counterexample.items()):
            print(f"    {name} = {value}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Verify auction rules with Z3")
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        help="run a single check by property name (repeatable)",
    )
    args = parser.parse_args()

    verifier = AuctionVerifier()
    results = verifier.verify_all()
    if args.only:
        results = [r for r in results if r.property_name in args.only]
        if not results:
            print(f"No property named {', '.join(args.only)}")
            return 2

    print("=" * 70)
    print("AUCTION RULE VERIFICATION")
    print("=" * 70)
    for r in results:
        _report(r)

    failed = [r.property_name for r in results if not r.holds]
    print("\n" + "=" * 70)
    print(f"{len(results) - len(failed)}/{len(results)} properties proved")
    if failed:
        print(f"Failed: {', '.join(failed)}")
    print("=" * 70)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
