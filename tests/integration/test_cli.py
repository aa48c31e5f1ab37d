"""Integration tests for the innerbag command line."""

from __future__ import annotations

import numpy as np
import pytest

from innerbag.cli import load_weights, main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the CLI from an empty directory with no config file."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestGenerateCommand:
    def test_generate_bags(self, workdir, capsys):
        assert main(["generate", "-n", "12", "-b", "3", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Stream 1/1" in out
        assert "Fingerprint" in out
        assert "12.0" not in out

    def test_generate_flat(self, workdir, capsys):
        assert main(["generate", "-n", "5", "-b", "0"]) == 0
        out = capsys.readouterr().out
        assert "5/5" in out

    def test_generate_is_reproducible(self, workdir, capsys):
        main(["generate", "-n", "30", "-b", "2", "--seed", "9"])
        first = capsys.readouterr().out
        main(["generate", "-n", "30", "-b", "2", "--seed", "9"])
        second = capsys.readouterr().out
        assert first == second

    def test_multiple_streams(self, workdir, capsys):
        assert main(["generate", "-n", "8", "-b", "1", "--streams", "2"]) == 0
        out = capsys.readouterr().out
        assert "Stream 1/2" in out
        assert "Stream 2/2" in out

    def test_weights_file(self, workdir, capsys):
        np.save(workdir / "w.npy", np.array([1.0, 2.0, 3.0, 4.0]))
        assert main(["generate", "-n", "4", "-b", "0", "-w", "w.npy"]) == 0
        assert "10" in capsys.readouterr().out

    def test_zero_weights_fail(self, workdir, capsys):
        (workdir / "w.txt").write_text("0 0 0\n")
        assert main(["generate", "-n", "3", "-b", "2", "-w", "w.txt"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_weight_count_mismatch(self, workdir, capsys):
        (workdir / "w.txt").write_text("1 2\n")
        assert main(["generate", "-n", "3", "-w", "w.txt"]) == 1
        assert "2 weights for 3 samples" in capsys.readouterr().err

    def test_missing_weights_file(self, workdir, capsys):
        assert main(["generate", "-n", "3", "-w", "nope.txt"]) == 1

    def test_zero_samples(self, workdir, capsys):
        assert main(["generate", "-n", "0"]) == 1

    def test_negative_bags(self, workdir, capsys):
        assert main(["generate", "-n", "3", "-b", "-1"]) == 1

    def test_bags_from_config(self, workdir, capsys):
        (workdir / ".innerbag.toml").write_text("[bagging]\ninner_bags = 2\nseed = 3\n")
        assert main(["generate", "-n", "4"]) == 0
        out = capsys.readouterr().out
        assert "seed 3" in out


class TestConfigCommand:
    def test_show_defaults(self, workdir, capsys):
        assert main(["config"]) == 0
        assert "Profile: default" in capsys.readouterr().out

    def test_show_profile(self, workdir, capsys):
        (workdir / ".innerbag.toml").write_text(
            "[bagging]\nseed = 5\n\n[profiles.fast]\ninner_bags = 0\n"
        )
        assert main(["--profile", "fast", "config"]) == 0
        out = capsys.readouterr().out
        assert "Profile: fast" in out
        assert "seed: 5" in out

    def test_unknown_profile(self, workdir, capsys):
        assert main(["--profile", "missing", "config"]) == 1
        assert "Unknown profile" in capsys.readouterr().err


class TestLoadWeights:
    def test_text(self, tmp_path):
        path = tmp_path / "w.txt"
        path.write_text("0.5\n1.5\n")
        assert load_weights(path).tolist() == [0.5, 1.5]

    def test_single_value_text(self, tmp_path):
        path = tmp_path / "w.txt"
        path.write_text("2.0\n")
        assert load_weights(path).tolist() == [2.0]

    def test_npy(self, tmp_path):
        np.save(tmp_path / "w.npy", np.array([[1.0], [2.0]]))
        assert load_weights(tmp_path / "w.npy").tolist() == [1.0, 2.0]
