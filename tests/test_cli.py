"""
Command Line Tests
==================

Tests for the camtrap-sim entry point.
"""

import json

import pytest

from camtrap_sim.cli import main


@pytest.fixture
def trapresult_csv(tmp_path):
    """Small trap result file with four cameras."""
    path = tmp_path / "trapresult.csv"
    path.write_text(
        "Lon,Lat,Group_size,Date,Time\n"
        "0,0,2,2015-06-01,20:11:00\n"
        "400,0,1,2015-06-01,21:40:12\n"
        "0,0,1,2015-06-02,05:02:30\n"
        "0,400,0,2015-06-02,12:00:00\n"
        "400,400,3,2015-06-03,22:15:47\n"
    )
    return path


class TestCli:
    """Tests for cli.main."""
    
    def test_simulate_then_estimate(self, tmp_path, trapresult_csv, capsys):
        """simulate writes a table that estimate can use."""
        sim_path = tmp_path / "sim.csv"
        code = main(
            [
                "simulate",
                "--observations", str(trapresult_csv),
                "--output", str(sim_path),
                "--individuals", "2",
                "--iterations", "2",
                "--steps", "100",
                "--seed", "1",
            ]
        )
        assert code == 0
        assert sim_path.exists()
        
        code = main(
            [
                "estimate",
                "--simulation", str(sim_path),
                "--observations", str(trapresult_csv),
                "--trees", "10",
            ]
        )
        assert code == 0
        summary = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert set(summary) == {"lower", "median", "upper", "mean"}
    
    def test_density(self, trapresult_csv, capsys):
        """density prints the Rowcliffe summary."""
        code = main(
            [
                "density",
                "--observations", str(trapresult_csv),
                "--radius-km", "0.02",
                "--angle", "40",
                "--speed", "2",
                "--duration", "40",
            ]
        )
        assert code == 0
        summary = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert set(summary) == {"Density", "SD"}
    
    def test_missing_file_returns_error(self, tmp_path):
        """Pipeline errors become a non-zero exit code."""
        code = main(
            [
                "estimate",
                "--simulation", str(tmp_path / "missing.csv"),
                "--observations", str(tmp_path / "missing.csv"),
            ]
        )
        assert code == 1
    
    def test_invalid_observation_row_returns_error(self, tmp_path):
        """A negative group size ends the run with exit code 1."""
        path = tmp_path / "bad.csv"
        path.write_text(
            "Lon,Lat,Group_size,Date,Time\n"
            "0,0,1,2015-06-01,20:11:00\n"
            "0,0,-1,2015-06-01,21:40:12\n"
        )
        code = main(
            [
                "simulate",
                "--observations", str(path),
                "--output", str(tmp_path / "sim.csv"),
                "--individuals", "1",
                "--iterations", "1",
                "--steps", "10",
            ]
        )
        assert code == 1
        assert not (tmp_path / "sim.csv").exists()
