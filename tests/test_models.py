import pytest

from feederflow.models import (
    Branch,
    Capacitor,
    DistributedLoad,
    Load,
    PhaseConfig,
    Regulator,
    Transformer,
)


def test_branch_phase_matrices_are_3x3_and_independent():
    first = Branch("800", "802", 2580.0, "300")
    second = Branch("802", "806", 1730.0, "300")
    assert (first.z_abc.rows(), first.z_abc.cols()) == (3, 3)
    assert (first.y_abc.rows(), first.y_abc.cols()) == (3, 3)
    first.z_abc[0, 0] = complex(1.0, 2.0)
    assert second.z_abc[0, 0] == 0.0
    assert first.y_abc[0, 0] == 0.0


def test_phase_config_matrices_are_separate():
    config = PhaseConfig("300")
    config.z_matrix[1, 2] = complex(0.5, 0.25)
    assert config.b_matrix[1, 2] == 0.0
    assert config.z_matrix[1, 2] == complex(0.5, 0.25)
    assert config.config_id == "300"


def test_load_phases_become_float_tuples():
    load = Load("860", "Y-PQ", [20, 20, 20], [16, 16, 16])
    assert load.kw == (20.0, 20.0, 20.0)
    assert load.kvar == (16.0, 16.0, 16.0)
    assert all(isinstance(v, float) for v in load.kw)


@pytest.mark.parametrize("kw", [(1.0, 2.0), (1.0, 2.0, 3.0, 4.0)])
def test_load_rejects_wrong_phase_count(kw):
    with pytest.raises(ValueError):
        Load("860", "Y-PQ", kw, (0.0, 0.0, 0.0))


def test_distributed_load_fields_and_validation():
    dl = DistributedLoad("802", "806", "Y-PQ", (0, 30, 25), (0, 15, 14))
    assert dl.kw == (0.0, 30.0, 25.0)
    assert dl.kvar == (0.0, 15.0, 14.0)
    with pytest.raises(ValueError):
        DistributedLoad("802", "806", "Y-PQ", (0, 30, 25), (0, 15))


def test_capacitor_defaults_and_validation():
    assert Capacitor("844").kvar == (0.0, 0.0, 0.0)
    cap = Capacitor("848", (150, 150, 150))
    assert cap.kvar == (150.0, 150.0, 150.0)
    with pytest.raises(ValueError):
        Capacitor("848", (150.0,))


def test_regulator_holds_settings():
    reg = Regulator("1", "814", "850", 1, 122.0, 2.7, 1.6, 120.0, 100.0, 2.0)
    assert reg.from_node == "814"
    assert reg.to_node == "850"
    assert reg.phase == 1
    assert reg.bandwidth == 2.0


def test_transformer_equality_by_value():
    a = Transformer("XFM-1", 500.0, 24.9, 4.16, 1.9, 4.08)
    b = Transformer("XFM-1", 500.0, 24.9, 4.16, 1.9, 4.08)
    assert a == b
    assert a.kv_high / a.kv_low == b.kv_high / b.kv_low