"""
run_all.py
----------
Runs the arrest map pipeline scripts in order.
Execute from the project root:

    python run_all.py

Optional flags:
    python run_all.py --from 02   # retrain and redraw, skip cleaning
    python run_all.py --only 03   # redraw the maps only
    python run_all.py --list      # show the steps and exit

Each script runs in its own interpreter with the project root on
PYTHONPATH, so `arrestmap` imports work without installing the
package first.
"""

import argparse
import os
import subprocess
import sys
import time

ROOT = os.path.dirname(os.path.abspath(__file__))

SCRIPTS = [
    ("01", "processing/01_clean_incidents.py",   "raw incidents → arrests_clean.csv"),
    ("02", "processing/02_train_model.py",       "label index, split, LightGBM, evaluation"),
    ("03", "processing/03_grid_predictions.py",  "grid inference and maps"),
    ("04", "processing/04_precompute_summary.py", "dashboard aggregations"),
]


def script_env() -> dict:
    env = dict(os.environ)
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = ROOT if not existing else os.pathsep.join([ROOT, existing])
    return env


def select_scripts(from_script: str | None, only_scripts: list | None) -> list:
    """
    Resolve --from / --only to a list of (number, path, description).

    Raises:
        ValueError: --from names a step that does not exist.
    """
    numbers = [n for n, _, _ in SCRIPTS]

    if only_scripts:
        selected = [s for s in SCRIPTS if s[0] in only_scripts]
        not_found = set(only_scripts) - {n for n, _, _ in selected}
        if not_found:
            print(f"Warning: script numbers not found: {', '.join(sorted(not_found))}")
        return selected

    if from_script:
        if from_script not in numbers:
            raise ValueError(
                f"Script '{from_script}' not found. Valid numbers: {', '.join(numbers)}"
            )
        return SCRIPTS[numbers.index(from_script):]

    return list(SCRIPTS)


def run_script(number: str, path: str) -> bool:
    """Run a single script. Returns True on success, False on failure."""
    print(f"\n{'='*60}")
    print(f"  [{number}] {path}")
    print(f"{'='*60}")
    start = time.time()

    # Output streams straight to the terminal.
    result = subprocess.run([sys.executable, path], cwd=ROOT, env=script_env())

    elapsed = round(time.time() - start, 1)
    if result.returncode == 0:
        print(f"\n  ✓ Completed in {elapsed}s")
        return True
    print(f"\n  ✗ FAILED (exit code {result.returncode}) after {elapsed}s")
    return False


def main():
    parser = argparse.ArgumentParser(description="Run the SF arrest map pipeline")
    parser.add_argument(
        "--from", dest="from_script", metavar="N",
        help="Start from script N (e.g. --from 02 skips cleaning)"
    )
    parser.add_argument(
        "--only", dest="only_scripts", metavar="N", nargs="+",
        help="Run only the specified script numbers (e.g. --only 03 04)"
    )
    parser.add_argument(
        "--list", action="store_true",
        help="List the pipeline steps and exit"
    )
    args = parser.parse_args()

    if args.list:
        for number, path, description in SCRIPTS:
            print(f"  [{number}] {path:<38} {description}")
        return

    try:
        scripts_to_run = select_scripts(args.from_script, args.only_scripts)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not scripts_to_run:
        print("No scripts to run.")
        sys.exit(0)

    overall_start = time.time()
    results = {}

    for number, path, _ in scripts_to_run:
        results[number] = run_script(number, path)
        if not results[number]:
            print(f"\nPipeline stopped at script {number}.")
            print(f"Fix the error above and rerun with:  python run_all.py --from {number}")
            break

    total = round(time.time() - overall_start, 1)
    passed = sum(results.values())
    failed = len(results) - passed

    print(f"\n{'='*60}")
    print(f"  Pipeline summary  ({total}s total)")
    print(f"{'='*60}")
    for number, path, _ in scripts_to_run:
        if number in results:
            icon = "✓" if results[number] else "✗"
            print(f"  {icon} [{number}] {path}")
        else:
            print(f"  - [{number}] {path}  (skipped)")

    print()
    if failed:
        print(f"  {passed} passed, {failed} failed.")
        sys.exit(1)
    print(f"  All {passed} scripts passed.")
    print("\n  Maps are in outputs/maps/. Start the dashboard with:  streamlit run app.py")


if __name__ == "__main__":
    main()
