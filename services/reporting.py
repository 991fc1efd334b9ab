from __future__ import annotations

from typing import Any, Dict


def print_summary(outcome: Any) -> None:
    """Print summary of one sync run."""
    meta: Dict[str, Any] = getattr(outcome, "meta", {}) or {}

    print("\n" + "="*60)
    print("DRIVER ROSTER SYNC - SUMMARY")
    print("="*60)
    print(f"Run ID: {outcome.run_id}")
    print(f"Status: {outcome.status}")
    print(f"Duration: {outcome.duration_ms} ms")
    print()
    print("Counts:")
    print(f"  Drivers Fetched: {outcome.fetched}")
    print(f"  Drivers With Dispatcher: {meta.get('assigned_drivers', 0)}")
    print(f"  Payloads Skipped: {meta.get('skipped_drivers', 0)}")
    print(f"  Rows Written: {outcome.written}")
    print(f"  Rows Failed: {outcome.failed}")
    if outcome.error:
        print()
        print(f"Error: {outcome.error}")
    print("="*60)
