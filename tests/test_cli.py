import pytest

from feederflow.cli import main, run


def _write_feeder(directory):
    (directory / "line_data.csv").write_text(
        "Node A,Node B,Length(ft.),Config.\n"
        "800,844,5280,300\n"
        "844,846,2640,XFM-1\n"
    )
    (directory / "line_matrices.csv").write_text(
        "Config,Phase,R1,X1,R2,X2,R3,X3,B1,B2,B3\n"
        "300,A,1.0,1.0,0.2,0.5,0.2,0.5,5.0,-1.0,-1.0\n"
        "300,B,0.2,0.5,1.0,1.0,0.2,0.5,-1.0,5.0,-1.0\n"
        "300,C,0.2,0.5,0.2,0.5,1.0,1.0,-1.0,-1.0,5.0\n"
    )
    (directory / "spot_load_data.csv").write_text(
        "Node,Load,Ph-1 kW,Ph-1 kVAr,Ph-2 kW,Ph-2 kVAr,Ph-3 kW,Ph-3 kVAr\n"
        "844,Y-PQ,135,105,135,105,135,105\n"
    )
    (directory / "distributed_load_data.csv").write_text(
        "Node A,Node B,Load,Ph-1 kW,Ph-1 kVAr,Ph-2 kW,Ph-2 kVAr,Ph-3 kW,Ph-3 kVAr\n"
        "844,846,Y-PQ,0,0,25,12,20,11\n"
    )
    (directory / "cap_data.csv").write_text(
        "Node,Ph-A,Ph-B,Ph-C\n"
        "844,100,100,100\n"
    )
    (directory / "transformer_data.csv").write_text(
        "Name,kVA,kV-high,kV-low,R%,X%\n"
        "XFM-1,500,24.9,4.16,1.9,4.08\n"
    )


def test_run_reports_diagnostics(tmp_path, capsys):
    _write_feeder(tmp_path)
    result = run(tmp_path)
    out = capsys.readouterr().out

    assert "--- IEEE 34-Bus: Newton-Raphson Engine ---" in out
    assert "NODE 844 DIAGNOSTICS" in out
    assert "Ph A: -135000.00000 W + j-105000.00000 VAr" in out
    assert len(result.jacobian) == (3 - 1) * 6
    assert f"Jacobian Rows: {len(result.jacobian)}" in out
    assert f"Jacobian Cols: {len(result.jacobian[0])}" in out


def test_run_mismatch_consistent_with_printed_state(tmp_path, capsys):
    _write_feeder(tmp_path)
    result = run(tmp_path)
    capsys.readouterr()
    node = 1
    for p in range(3):
        assert result.mismatch[node][p] == pytest.approx(
            result.s_spec[node][p] - result.s_calc[node][p]
        )
    assert result.mismatch[0] == [0j, 0j, 0j]


def test_run_without_diagnostic_node(tmp_path, capsys):
    _write_feeder(tmp_path)
    (tmp_path / "line_data.csv").write_text(
        "Node A,Node B,Length(ft.),Config.\n"
        "800,802,5280,300\n"
    )
    result = run(tmp_path)
    out = capsys.readouterr().out
    assert "DIAGNOSTICS ---\n1." not in out
    assert "NODE 844" not in out
    assert len(result.jacobian) == 6


def test_run_missing_files_raises(tmp_path):
    with pytest.raises(OSError):
        run(tmp_path / "absent")


def test_main_reports_error_and_returns_zero(tmp_path, capsys):
    status = main([str(tmp_path / "absent")])
    captured = capsys.readouterr()
    assert status == 0
    assert "❌ ERROR:" in captured.err
    assert "Could not open" in captured.err


def test_main_runs_on_data_dir(tmp_path, capsys):
    _write_feeder(tmp_path)
    status = main([str(tmp_path)])
    captured = capsys.readouterr()
    assert status == 0
    assert "JACOBIAN DIAGNOSTICS" in captured.out
    assert "ERROR" not in captured.err