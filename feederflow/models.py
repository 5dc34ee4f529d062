"""Records describing the feeder: lines, loads, capacitors, regulators, transformers."""

from __future__ import annotations

from dataclasses import dataclass, field

from feederflow.linalg import MatrixDense

PhaseValues = tuple[float, float, float]

_ZERO_PHASES: PhaseValues = (0.0, 0.0, 0.0)


def _phase_matrix() -> MatrixDense:
    return MatrixDense(3, 3)


def _three_phases(name: str, values) -> PhaseValues:
    result = tuple(float(v) for v in values)
    if len(result) != 3:
        raise ValueError(f"{name} needs exactly 3 phase values, got {len(result)}")
    return result  # type: ignore[return-value]


@dataclass
class Branch:
    """A line section between two nodes; ``config_id`` names a line config or transformer."""

    node_a: str
    node_b: str
    length_ft: float
    config_id: str
    z_abc: MatrixDense = field(default_factory=_phase_matrix)
    y_abc: MatrixDense = field(default_factory=_phase_matrix)


@dataclass
class Capacitor:
    """Shunt capacitor bank rated in kVAr per phase (A, B, C)."""

    node: str
    kvar: PhaseValues = _ZERO_PHASES

    def __post_init__(self) -> None:
        self.kvar = _three_phases("kvar", self.kvar)


@dataclass
class DistributedLoad:
    """Load spread along the section between two nodes."""

    node_a: str
    node_b: str
    model: str
    kw: PhaseValues = _ZERO_PHASES
    kvar: PhaseValues = _ZERO_PHASES

    def __post_init__(self) -> None:
        self.kw = _three_phases("kw", self.kw)
        self.kvar = _three_phases("kvar", self.kvar)


@dataclass
class Load:
    """Spot load at a node; ``model`` is e.g. ``Y-PQ`` or ``D-Z``."""

    node: str
    model: str
    kw: PhaseValues = _ZERO_PHASES
    kvar: PhaseValues = _ZERO_PHASES

    def __post_init__(self) -> None:
        self.kw = _three_phases("kw", self.kw)
        self.kvar = _three_phases("kvar", self.kvar)


@dataclass
class PhaseConfig:
    """Per-length series impedance and shunt susceptance matrices of a line configuration."""

    config_id: str
    z_matrix: MatrixDense = field(default_factory=_phase_matrix)
    b_matrix: MatrixDense = field(default_factory=_phase_matrix)


@dataclass
class Regulator:
    """Step voltage regulator settings."""

    id: str
    from_node: str
    to_node: str
    phase: int
    v_hold: float
    r_volt: float
    x_volt: float
    pt_ratio: float
    ct_rate: float
    bandwidth: float


@dataclass
class Transformer:
    """Two-winding transformer rating and percent impedance."""

    name: str
    kva: float
    kv_high: float
    kv_low: float
    r_percent: float
    x_percent: float