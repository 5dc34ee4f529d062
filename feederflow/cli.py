"""Command line entry point: read the feeder tables and report the power-flow state."""

from __future__ import annotations

import argparse
import sys
from os import PathLike
from pathlib import Path
from typing import Optional, Sequence, Union

from feederflow.parsers import (
    parse_capacitors,
    parse_distributed_loads,
    parse_lines,
    parse_loads,
    parse_phase_configs,
    parse_transformers,
)
from feederflow.solver import SolverResult, solve
from feederflow.ybus import assemble_ybus, build_node_index, build_ybus_map

DEFAULT_DATA_DIR = "../feeder34/data"
DIAGNOSTIC_NODE = "844"

LINE_FILE = "line_data.csv"
CONFIG_FILE = "line_matrices.csv"
SPOT_LOAD_FILE = "spot_load_data.csv"
DIST_LOAD_FILE = "distributed_load_data.csv"
CAPACITOR_FILE = "cap_data.csv"
TRANSFORMER_FILE = "transformer_data.csv"


def _fmt(value: float) -> str:
    return f"{value:.5f}"


def _power_line(value: complex) -> str:
    return f"   Ph A: {_fmt(value.real)} W + j{_fmt(value.imag)} VAr"


def run(data_dir: Union[str, "PathLike[str]"]) -> SolverResult:
    """Read the feeder tables from ``data_dir``, solve and print diagnostics."""
    print("--- IEEE 34-Bus: Newton-Raphson Engine ---\n")

    base = Path(data_dir)
    branches = parse_lines(base / LINE_FILE)
    configs = parse_phase_configs(base / CONFIG_FILE)
    spot_loads = parse_loads(base / SPOT_LOAD_FILE)
    dist_loads = parse_distributed_loads(base / DIST_LOAD_FILE)
    capacitors = parse_capacitors(base / CAPACITOR_FILE)
    transformers = parse_transformers(base / TRANSFORMER_FILE)

    node_to_index = build_node_index(branches)
    ybus_map = build_ybus_map(branches, configs, capacitors, transformers, node_to_index)
    ybus = assemble_ybus(ybus_map, len(node_to_index))

    print("🚀 Launching Mismatch Calculator & Jacobian Builder...")
    print("   -> Assembling the Full Jacobian Matrix...")
    results = solve(ybus, spot_loads, dist_loads, node_to_index)
    dimension = len(results.jacobian)
    print(f"   -> Jacobian successfully built with size {dimension}x{dimension}!")

    test_node = node_to_index.get(DIAGNOSTIC_NODE)
    if test_node is not None:
        print(f"\n📊 --- NODE {DIAGNOSTIC_NODE} DIAGNOSTICS ---")
        print("1. Target Load (S_spec):")
        print(_power_line(results.s_spec[test_node][0]))
        print("\n2. Actual Power Flowing (S_calc):")
        print(_power_line(results.s_calc[test_node][0]))
        print("\n3. Total Mismatch (Delta S):")
        print(_power_line(results.mismatch[test_node][0]))

    print("\n🧮 --- JACOBIAN DIAGNOSTICS ---")
    print(f"Jacobian Rows: {dimension}")
    print(f"Jacobian Cols: {len(results.jacobian[0]) if results.jacobian else 0}")
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="feederflow",
        description="Evaluate the power-flow mismatch and Jacobian of a feeder at flat start.",
    )
    parser.add_argument(
        "data_dir",
        nargs="?",
        default=DEFAULT_DATA_DIR,
        help=f"directory holding the feeder CSV tables (default: {DEFAULT_DATA_DIR})",
    )
    args = parser.parse_args(argv)

    try:
        run(args.data_dir)
    except Exception as exc:  # report any failure the way the tool always has
        print(f"❌ ERROR: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())