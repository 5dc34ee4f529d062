"""Assembly of the three-phase bus admittance matrix (Y-bus)."""

from __future__ import annotations

import warnings
from typing import Iterable, Mapping

from feederflow.linalg import MatrixDense, MatrixSparseCSR
from feederflow.models import Branch, Capacitor, PhaseConfig, Transformer

YBusMap = dict[int, dict[int, MatrixDense]]

_FEET_PER_MILE = 5280.0
_CAPACITOR_BASE_KV = 24.9


def _zero_block() -> MatrixDense:
    block = MatrixDense(3, 3)
    for row in range(3):
        for col in range(3):
            block[row, col] = 0j
    return block


def _diagonal_block(value: complex) -> MatrixDense:
    block = _zero_block()
    for phase in range(3):
        block[phase, phase] = value
    return block


def _ensure(ybus: YBusMap, row: int, col: int) -> None:
    ybus.setdefault(row, {}).setdefault(col, _zero_block())


def _add(ybus: YBusMap, row: int, col: int, block: MatrixDense) -> None:
    ybus[row][col] = ybus[row][col] + block


def build_node_index(branches: Iterable[Branch]) -> dict[str, int]:
    """Number nodes in order of first appearance across the branches."""
    index: dict[str, int] = {}
    for branch in branches:
        for node in (branch.node_a, branch.node_b):
            index.setdefault(node, len(index))
    return index


def build_ybus_map(
    branches: Iterable[Branch],
    configs: Mapping[str, PhaseConfig],
    capacitors: Mapping[str, Capacitor],
    transformers: Mapping[str, Transformer],
    node_to_index: Mapping[str, int],
) -> YBusMap:
    """Build the Y-bus as nested ``{row: {col: 3x3 block}}`` dictionaries.

    Each branch is stamped as a line (if its ``config_id`` names a line
    configuration) or as a transformer; unknown configurations raise a
    ``RuntimeWarning`` and leave zero blocks. Capacitors add shunt
    susceptance on the diagonal block of their node.
    """
    ybus: YBusMap = {}

    for branch in branches:
        i = node_to_index[branch.node_a]
        j = node_to_index[branch.node_b]
        for row, col in ((i, i), (j, j), (i, j), (j, i)):
            _ensure(ybus, row, col)

        config = configs.get(branch.config_id)
        if config is not None:
            z_line = config.z_matrix.scaled(branch.length_ft / _FEET_PER_MILE)
            y_line = z_line.inverse()
            neg_y_line = y_line.scaled(complex(-1.0, 0.0))
            _add(ybus, i, i, y_line)
            _add(ybus, j, j, y_line)
            _add(ybus, i, j, neg_y_line)
            _add(ybus, j, i, neg_y_line)
            continue

        tx = transformers.get(branch.config_id)
        if tx is not None:
            z_base = (tx.kv_high * tx.kv_high * 1000.0) / tx.kva
            z_actual = complex(
                (tx.r_percent / 100.0) * z_base,
                (tx.x_percent / 100.0) * z_base,
            )
            y_high = 1.0 / z_actual
            ratio = tx.kv_high / tx.kv_low
            _add(ybus, i, i, _diagonal_block(y_high))
            _add(ybus, j, j, _diagonal_block(y_high * (ratio * ratio)))
            _add(ybus, i, j, _diagonal_block(-y_high * ratio))
            _add(ybus, j, i, _diagonal_block(-y_high * ratio))
            continue

        warnings.warn(f"Config {branch.config_id} missing!", RuntimeWarning, stacklevel=2)

    z_base = (_CAPACITOR_BASE_KV * _CAPACITOR_BASE_KV) / 1000.0
    for node_name, cap in capacitors.items():
        if node_name not in node_to_index:
            continue
        i = node_to_index[node_name]

        y_cap = _zero_block()
        for phase, kvar in enumerate(cap.kvar):
            if kvar > 0:
                y_cap[phase, phase] = complex(0.0, (kvar / 1000.0) / z_base)

        _ensure(ybus, i, i)
        _add(ybus, i, i, y_cap)

    return ybus


def assemble_ybus(ybus_map: Mapping[int, Mapping[int, MatrixDense]], num_nodes: int) -> MatrixSparseCSR:
    """Compress a Y-bus map into a ``num_nodes`` x ``num_nodes`` CSR matrix of blocks."""
    matrix = MatrixSparseCSR(num_nodes, num_nodes)
    for row, columns in ybus_map.items():
        for col, block in columns.items():
            matrix.add_value(row, col, block)
    matrix.build_csr()
    return matrix