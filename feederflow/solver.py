"""Power-flow state at a flat start: injections, mismatch and Jacobian."""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from feederflow.linalg import MatrixSparseCSR
from feederflow.models import DistributedLoad, Load

PhaseVector = list[complex]
RealMatrix = list[list[float]]

_SOURCE_KV_LINE = 24.9
_SOURCE_VOLTAGE_MAG = _SOURCE_KV_LINE * 1000.0 / math.sqrt(3.0)
_PHASE_ANGLES_DEG = (0.0, -120.0, 120.0)
_SLACK = 0


@dataclass
class SolverResult:
    """Per-node, per-phase results plus the real-valued Jacobian."""

    voltages: list[PhaseVector]
    s_spec: list[PhaseVector]
    s_calc: list[PhaseVector]
    mismatch: list[PhaseVector]
    jacobian: RealMatrix


def flat_start(num_nodes: int) -> list[PhaseVector]:
    """Balanced nominal line-to-neutral voltages (A at 0, B at -120, C at +120 degrees)."""
    if num_nodes < 0:
        raise ValueError("number of nodes must not be negative")
    phases = [cmath.rect(_SOURCE_VOLTAGE_MAG, math.radians(a)) for a in _PHASE_ANGLES_DEG]
    return [list(phases) for _ in range(num_nodes)]


def _zero_phases(num_nodes: int) -> list[PhaseVector]:
    return [[0j, 0j, 0j] for _ in range(num_nodes)]


def build_jacobian(
    ybus: MatrixSparseCSR,
    voltages: Sequence[Sequence[complex]],
    s_calc: Sequence[Sequence[complex]],
    num_nodes: int,
) -> RealMatrix:
    """Assemble dP/dQ derivatives with respect to angle and magnitude.

    Node 0 is the slack bus and has no rows or columns. For node ``i`` and
    phase ``p`` the P row is ``(i - 1) * 6 + 2 * p`` and the Q row follows it;
    angle columns are even and magnitude columns odd in the same layout.
    """
    if num_nodes < 1:
        raise ValueError("the network needs at least one node")

    dimension = (num_nodes - 1) * 6
    jacobian = [[0.0] * dimension for _ in range(dimension)]

    for i in range(1, num_nodes):
        for k, block in ybus.row_entries(i):
            if k == _SLACK:
                continue
            for p_i in range(3):
                v_i = voltages[i][p_i]
                row_p = (i - 1) * 6 + 2 * p_i
                for p_k in range(3):
                    y = block[p_i, p_k]
                    if i == k and p_i == p_k:
                        s_i = s_calc[i][p_i]
                        d_theta = 1j * s_i - 1j * v_i * (y * v_i).conjugate()
                        v_dir = v_i / abs(v_i)
                        d_vmag = v_dir * (s_i / v_i).conjugate() + v_i * (y * v_dir).conjugate()
                    else:
                        v_k = voltages[k][p_k]
                        d_theta = -1j * v_i * (y * v_k).conjugate()
                        d_vmag = v_i * (y * (v_k / abs(v_k))).conjugate()

                    col_theta = (k - 1) * 6 + 2 * p_k
                    jacobian[row_p][col_theta] = d_theta.real
                    jacobian[row_p + 1][col_theta] = d_theta.imag
                    jacobian[row_p][col_theta + 1] = d_vmag.real
                    jacobian[row_p + 1][col_theta + 1] = d_vmag.imag

    return jacobian


def _specified_power(
    spot_loads: Mapping[str, Load],
    dist_loads: Iterable[DistributedLoad],
    node_to_index: Mapping[str, int],
) -> list[PhaseVector]:
    s_spec = _zero_phases(len(node_to_index))

    for node_name, load in spot_loads.items():
        i = node_to_index.get(node_name)
        if i is None:
            continue
        for phase in range(3):
            s_spec[i][phase] += complex(-load.kw[phase] * 1000.0, -load.kvar[phase] * 1000.0)

    for d_load in dist_loads:
        if d_load.node_a not in node_to_index or d_load.node_b not in node_to_index:
            continue
        node_a = node_to_index[d_load.node_a]
        node_b = node_to_index[d_load.node_b]
        for phase in range(3):
            half = complex(-0.5 * d_load.kw[phase] * 1000.0, -0.5 * d_load.kvar[phase] * 1000.0)
            s_spec[node_a][phase] += half
            s_spec[node_b][phase] += half

    return s_spec


def _calculated_power(
    ybus: MatrixSparseCSR, voltages: Sequence[Sequence[complex]], num_nodes: int
) -> list[PhaseVector]:
    s_calc = _zero_phases(num_nodes)
    for i in range(num_nodes):
        entries = list(ybus.row_entries(i))
        for p_i in range(3):
            current = 0j
            for j, block in entries:
                for p_j in range(3):
                    current += block[p_i, p_j] * voltages[j][p_j]
            s_calc[i][p_i] = voltages[i][p_i] * current.conjugate()
    return s_calc


def solve(
    ybus: MatrixSparseCSR,
    spot_loads: Mapping[str, Load],
    dist_loads: Iterable[DistributedLoad],
    node_to_index: Mapping[str, int],
) -> SolverResult:
    """Evaluate injections, mismatch and Jacobian at a flat-start voltage profile.

    Loads count as negative injections; a distributed load is split evenly
    between its two end nodes. The slack node 0 carries no mismatch.
    """
    num_nodes = len(node_to_index)
    voltages = flat_start(num_nodes)
    s_spec = _specified_power(spot_loads, dist_loads, node_to_index)
    s_calc = _calculated_power(ybus, voltages, num_nodes)

    mismatch = _zero_phases(num_nodes)
    for i in range(1, num_nodes):
        mismatch[i] = [spec - calc for spec, calc in zip(s_spec[i], s_calc[i])]

    jacobian = build_jacobian(ybus, voltages, s_calc, num_nodes)
    return SolverResult(voltages, s_spec, s_calc, mismatch, jacobian)