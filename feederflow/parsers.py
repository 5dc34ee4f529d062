"""Readers for the feeder's comma-separated data tables."""

from __future__ import annotations

import math
import re
from os import PathLike
from typing import Union

from feederflow.models import (
    Branch,
    Capacitor,
    DistributedLoad,
    Load,
    PhaseConfig,
    Regulator,
    Transformer,
)

StrPath = Union[str, "PathLike[str]"]

_BLANK_CHARS = "\r\n\t "
_PHASE_ROWS = {"B": 1, "C": 2}
_INT_LIMIT = 2**31

_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*([+-]?)(?:"
    r"((?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
    r"|(inf(?:inity)?)"
    r"|(nan)(?:\([0-9A-Za-z_]*\))?)",
    re.IGNORECASE,
)
_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _to_float(text: str) -> float:
    """Parse the leading number of ``text``, ignoring whatever follows it."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid number: {text!r}")
    sign, digits, infinity, _ = match.groups()
    if digits is not None:
        value = float(sign + digits)
        if math.isinf(value):
            raise ValueError(f"number out of range: {text!r}")
        return value
    if infinity is not None:
        return float(sign + "inf")
    return float(sign + "nan")


def _to_int(text: str) -> int:
    """Parse the leading integer of ``text``, ignoring whatever follows it."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid integer: {text!r}")
    value = int(match.group(1))
    if not -_INT_LIMIT <= value < _INT_LIMIT:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _fields(line: str, count: int) -> list[str]:
    """Split ``line`` on commas into exactly ``count`` fields, padding with ''."""
    parts = line.split(",")[:count]
    return parts + [""] * (count - len(parts))


def _data_lines(path: StrPath, label: str) -> list[str]:
    """Return the lines of ``path`` after its header line."""
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise OSError(f"Could not open {label}: {path}") from exc
    return text.split("\n")[1:]


def _is_blank(line: str) -> bool:
    return not line.strip(_BLANK_CHARS)


def _phase_triples(numbers: list[float]) -> tuple[tuple[float, ...], tuple[float, ...]]:
    """Split interleaved kW/kVAr values into per-phase kW and kVAr tuples."""
    return tuple(numbers[0::2]), tuple(numbers[1::2])


def parse_lines(path: StrPath) -> list[Branch]:
    """Read line sections; rows whose length is not a number are skipped."""
    branches = []
    for line in _data_lines(path, "file"):
        if not line:
            continue
        node_a, node_b, length, config_id = _fields(line, 4)
        try:
            length_ft = _to_float(length)
        except ValueError:
            continue
        if config_id.endswith("\r"):
            config_id = config_id[:-1]
        branches.append(Branch(node_a, node_b, length_ft, config_id))
    return branches


def parse_phase_configs(path: StrPath) -> dict[str, PhaseConfig]:
    """Read line configurations, one matrix row (phase A, B or C) per line.

    A row that fails to parse keeps the entries read before the failure.
    """
    configs: dict[str, PhaseConfig] = {}
    for line in _data_lines(path, "file"):
        if not line:
            continue
        fields = _fields(line, 11)
        config_id, phase = fields[0], fields[1]
        row = _PHASE_ROWS.get(phase, 0)
        if config_id not in configs:
            configs[config_id] = PhaseConfig(config_id)
        config = configs[config_id]

        numbers = iter(fields[2:])
        try:
            for col in range(3):
                resistance = _to_float(next(numbers))
                reactance = _to_float(next(numbers))
                config.z_matrix[row, col] = complex(resistance, reactance)
            for col in range(3):
                config.b_matrix[row, col] = complex(0.0, _to_float(next(numbers)))
        except ValueError:
            continue
    return configs


def parse_loads(path: StrPath) -> dict[str, Load]:
    """Read spot loads keyed by node; a later row for a node replaces an earlier one."""
    loads: dict[str, Load] = {}
    for line in _data_lines(path, "Load file"):
        if _is_blank(line):
            continue
        node, model, *rest = _fields(line, 8)
        kw, kvar = _phase_triples([_to_float(value) for value in rest])
        loads[node] = Load(node, model, kw, kvar)
    return loads


def parse_distributed_loads(path: StrPath) -> list[DistributedLoad]:
    """Read loads spread along line sections, in file order."""
    loads = []
    for line in _data_lines(path, "Distributed Load file"):
        if _is_blank(line):
            continue
        node_a, node_b, model, *rest = _fields(line, 9)
        kw, kvar = _phase_triples([_to_float(value) for value in rest])
        loads.append(DistributedLoad(node_a, node_b, model, kw, kvar))
    return loads


def parse_capacitors(path: StrPath) -> dict[str, Capacitor]:
    """Read shunt capacitors keyed by node."""
    capacitors: dict[str, Capacitor] = {}
    for line in _data_lines(path, "Capacitor file"):
        if _is_blank(line):
            continue
        node, *rest = _fields(line, 4)
        capacitors[node] = Capacitor(node, tuple(_to_float(value) for value in rest))
    return capacitors


def parse_regulators(path: StrPath) -> list[Regulator]:
    """Read voltage regulator settings, in file order."""
    regulators = []
    for line in _data_lines(path, "Regulator file"):
        if _is_blank(line):
            continue
        reg_id, from_node, to_node, phase, *rest = _fields(line, 10)
        phase_number = _to_int(phase)
        v_hold, r_volt, x_volt, pt_ratio, ct_rate, bandwidth = (
            _to_float(value) for value in rest
        )
        regulators.append(
            Regulator(
                reg_id,
                from_node,
                to_node,
                phase_number,
                v_hold,
                r_volt,
                x_volt,
                pt_ratio,
                ct_rate,
                bandwidth,
            )
        )
    return regulators


def parse_transformers(path: StrPath) -> dict[str, Transformer]:
    """Read transformers keyed by name."""
    transformers: dict[str, Transformer] = {}
    for line in _data_lines(path, "Transformer file"):
        if not line:
            continue
        name, *rest = _fields(line, 6)
        kva, kv_high, kv_low, r_percent, x_percent = (_to_float(value) for value in rest)
        transformers[name] = Transformer(name, kva, kv_high, kv_low, r_percent, x_percent)
    return transformers