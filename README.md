# feederflow

`feederflow` models unbalanced three-phase distribution feeders. It reads a feeder described in CSV files and builds the bus admittance matrix (Y-bus) out of 3x3 phase blocks. It then evaluates the power-flow state at a flat start. That state is made up of the specified and calculated power injections, the power mismatch at every node and the full real-valued Newton-Raphson Jacobian.

It needs only the Python standard library and runs on Python 3.10 or later.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
feederflow [DATA_DIR]
```

`DATA_DIR` is a directory that holds the feeder's CSV files. If it is left out, it defaults to `../feeder34/data`. The directory must contain these files:

| File                        | Contents                                                      |
|-----------------------------|---------------------------------------------------------------|
| `line_data.csv`             | node A, node B, length in feet, configuration id              |
| `line_matrices.csv`         | configuration id, phase row (`A`, `B` or `C`), then R and X for three columns, then B for three columns |
| `spot_load_data.csv`        | node, load model, kW and kVAr for each of the three phases    |
| `distributed_load_data.csv` | node A, node B, load model, kW and kVAr for each phase        |
| `cap_data.csv`              | node, kVAr on phase A, B and C                                |
| `transformer_data.csv`      | name, kVA, high-side kV, low-side kV, %R, %X                  |

The first line of every file is a header and is skipped.

The command prints the following:

- For node `844`, if the feeder has that node: the target load, the calculated power and the mismatch on phase A.
- The number of rows and columns of the Jacobian.

If anything fails, for example a file that cannot be opened, the command prints `❌ ERROR: ...` to standard error. The exit status is 0 in every case.

## Library use

```python
from feederflow.parsers import (
    parse_lines, parse_phase_configs, parse_loads,
    parse_distributed_loads, parse_capacitors, parse_transformers,
)
from feederflow.ybus import build_node_index, build_ybus_map, assemble_ybus
from feederflow.solver import solve

branches = parse_lines("data/line_data.csv")
configs = parse_phase_configs("data/line_matrices.csv")
capacitors = parse_capacitors("data/cap_data.csv")
transformers = parse_transformers("data/transformer_data.csv")
spot_loads = parse_loads("data/spot_load_data.csv")
dist_loads = parse_distributed_loads("data/distributed_load_data.csv")

node_to_index = build_node_index(branches)
ybus_map = build_ybus_map(branches, configs, capacitors, transformers, node_to_index)
ybus = assemble_ybus(ybus_map, len(node_to_index))

result = solve(ybus, spot_loads, dist_loads, node_to_index)
```

`feederflow.cli.run(data_dir)` does the same work as the command on a directory of CSV files. It also prints the same report, and it returns the `SolverResult`.

### Parsers (`feederflow.parsers`)

- `parse_lines` returns a list of `Branch`. It skips any row whose length is not a number.
- `parse_phase_configs` returns a dict of `PhaseConfig` keyed by configuration id. It reads one matrix row per line.
- `parse_loads` returns a dict of `Load` keyed by node.
- `parse_distributed_loads` returns a list of `DistributedLoad`.
- `parse_capacitors` returns a dict of `Capacitor` keyed by node.
- `parse_transformers` returns a dict of `Transformer` keyed by name.
- `parse_regulators` returns a list of `Regulator`.

The following errors are raised:

- A file that cannot be opened raises `OSError`.
- A malformed number in the load, distributed-load, capacitor, regulator or transformer tables raises `ValueError`.

The record types are dataclasses in `feederflow.models`.

### Y-bus (`feederflow.ybus`)

- `build_node_index(branches)` numbers the nodes in the order in which they first appear. The first node becomes index 0, the slack node.
- `build_ybus_map(...)` returns nested `{row: {col: MatrixDense}}` blocks. Each branch is handled according to its configuration id:
  - If the id names a line configuration, the branch is a line. Its per-mile impedance matrix is scaled by its length and inverted. Only the phases that are present, meaning those with a non-zero diagonal, take part in the inversion.
  - Otherwise, if the id names a transformer, it is stamped as a transformer. Its admittance is computed on the high-side base impedance, and its turns ratio is `kv_high / kv_low`.
  - If the id names neither, a `RuntimeWarning` is issued and the blocks stay zero.
- Capacitors add shunt susceptance on a 24.9 kV base to the diagonal block of their node.
- `assemble_ybus(ybus_map, num_nodes)` compresses the map into a `MatrixSparseCSR` of 3x3 blocks.

### Solver (`feederflow.solver`)

`solve` starts every node at `flat_start` voltages. These are balanced, at 24.9 kV line-to-line, with phase A at 0°, B at −120° and C at +120°. It returns a `SolverResult` with these fields:

- `voltages`: the flat-start voltages, per node and per phase.
- `s_spec`: the specified injections. Loads are negative injections, and each distributed load is split evenly between its two end nodes.
- `s_calc`: the injections calculated from the Y-bus and the voltages.
- `mismatch`: `s_spec - s_calc`. It is zero at node 0.
- `jacobian`: a real matrix of size `6 * (num_nodes - 1)`, built by `build_jacobian`. For node `i` and phase `p`, the P row is `(i - 1) * 6 + 2 * p` and the Q row follows it. Angle derivatives go in even columns and magnitude derivatives in odd columns.

### Linear algebra (`feederflow.linalg`)

- `Vector`: a fixed-size vector that supports scalar multiplication, addition and subtraction.
- `MatrixDense`: a dense matrix indexed as `m[row, col]`. It supports addition, products with vectors and matrices, `scaled` and a phase-aware 3x3 `inverse`.
- `MatrixSparseCSR`: a sparse matrix filled with `add_value` and compressed by `build_csr`. It can be multiplied by a `Vector`, and it exposes `values`, `col_indices`, `row_ptr` and `row_entries`.

## Limitations

- `solve` evaluates the state at the flat start only. It does not solve the Jacobian system, update the voltages or iterate to convergence, so it does not produce a converged power flow.
- Every load is treated as a constant-power injection. The load model column is read but not applied.
- Line charging (the `B` matrices) is read but not added to the Y-bus.
- Regulators can be parsed but are not modelled in the network.