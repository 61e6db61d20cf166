"""End-to-end tests for the pipeline and the run_analysis script."""

import importlib.util
import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from ecostats import config
from ecostats.pipeline import run_pipeline
from ecostats.sampling import make_rng, sample_truncated_normal

FIGURES = ["figure1.jpg", "figure2.jpg", "figure3.jpg"]


# Recorded from a seed-10, n-20 run
GOLDEN_FIRST_ELEVATION = 557.278831480914
GOLDEN_ELEVATION_PARAMS = {"const": 123.75745818874444, "elevation": -0.18978786751303636}
GOLDEN_TUKEY = [
    ("Cedar", "Douglas-fir", 12.20),
    ("Cedar", "Hemlock", 0.05),
    ("Douglas-fir", "Hemlock", -12.15),
]


class RecordingStream:
    """Delegates to a seeded generator and records the size of every draw."""

    def __init__(self, seed):
        self.rng = make_rng(seed)
        self.sizes = []

    def random(self, size):
        self.sizes.append(size)
        return self.rng.random(size)


@pytest.fixture(scope="module")
def two_runs(tmp_path_factory):
    """Two independent runs with the default seed, in separate folders."""
    first = tmp_path_factory.mktemp("run1")
    second = tmp_path_factory.mktemp("run2")
    return (first, run_pipeline(seed=10, output_dir=first, tables=True),
            second, run_pipeline(seed=10, output_dir=second))


def _load_script():
    path = Path(__file__).resolve().parent.parent / "scripts" / "run_analysis.py"
    spec = importlib.util.spec_from_file_location("run_analysis", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestArtifacts:

    def test_exactly_three_figures(self, two_runs):
        out_dir, result, _, _ = two_runs
        jpgs = sorted(p.name for p in out_dir.glob("*.jpg"))
        assert jpgs == FIGURES
        for name in FIGURES:
            assert (out_dir / name).stat().st_size > 0
        assert [p.name for p in result.figures] == FIGURES

    def test_tables_written(self, two_runs):
        out_dir, result, _, _ = two_runs
        tables_dir = out_dir / config.TABLES_SUBDIR
        for name in config.TABLE_FILES.values():
            assert (tables_dir / name).exists()
        assert len(result.tables) == len(config.TABLE_FILES)

        tukey = pd.read_csv(tables_dir / config.TABLE_FILES["tukey_birds"])
        assert len(tukey) == 3

        summary = json.loads((tables_dir / config.TABLE_FILES["run_summary"]).read_text())
        assert summary["seed"] == 10
        assert summary["models"]["elevation"]["params"]["elevation"] < 0

    def test_no_tables_by_default(self, two_runs):
        _, _, out_dir, result = two_runs
        assert not (out_dir / config.TABLES_SUBDIR).exists()
        assert result.tables == []


class TestReproducibility:

    def test_figures_byte_identical(self, two_runs):
        first, _, second, _ = two_runs
        for name in FIGURES:
            assert (first / name).read_bytes() == (second / name).read_bytes()

    def test_datasets_identical(self, two_runs):
        _, a, _, b = two_runs
        pd.testing.assert_frame_equal(a.elevation, b.elevation)
        pd.testing.assert_frame_equal(a.birds_long, b.birds_long)

    def test_coefficients_identical(self, two_runs):
        _, a, _, b = two_runs
        for label in a.models:
            np.testing.assert_array_equal(a.models[label].params.values, b.models[label].params.values)
        pd.testing.assert_frame_equal(a.anova.pairwise, b.anova.pairwise)

    def test_first_elevation_is_first_draw(self, two_runs):
        """The first value of the run is the first draw on a fresh seed-10 stream."""
        _, result, _, _ = two_runs
        first = sample_truncated_normal(count=20, rng=make_rng(10), **config.ELEVATION)[0]
        assert result.elevation["elevation"].iloc[0] == first

    def test_other_seed_differs(self, tmp_path):
        result = run_pipeline(seed=11, output_dir=tmp_path)
        reference = sample_truncated_normal(count=20, rng=make_rng(10), **config.ELEVATION)
        assert result.elevation["elevation"].iloc[0] != reference[0]


class TestGoldenRun:

    def test_first_elevation(self, two_runs):
        _, result, _, _ = two_runs
        assert result.elevation["elevation"].iloc[0] == pytest.approx(GOLDEN_FIRST_ELEVATION, rel=1e-12)

    def test_elevation_coefficients(self, two_runs):
        _, result, _, _ = two_runs
        params = result.models["elevation"].params
        assert list(params.index) == ["const", "elevation"]
        for term, value in GOLDEN_ELEVATION_PARAMS.items():
            assert params[term] == pytest.approx(value, rel=1e-12, abs=1e-12)

    def test_tukey_mean_differences(self, two_runs):
        _, result, _, _ = two_runs
        pairs = result.anova.pairwise
        assert list(zip(pairs["group1"], pairs["group2"])) == [(a, b) for a, b, _ in GOLDEN_TUKEY]
        assert list(pairs["meandiff"]) == pytest.approx([d for _, _, d in GOLDEN_TUKEY], abs=1e-9)

    def test_summary_file_matches(self, two_runs):
        out_dir, _, _, _ = two_runs
        summary = json.loads((out_dir / config.TABLES_SUBDIR / config.TABLE_FILES["run_summary"]).read_text())
        assert summary["first_elevation"] == pytest.approx(GOLDEN_FIRST_ELEVATION, rel=1e-12)
        saved = summary["models"]["elevation"]["params"]
        for term, value in GOLDEN_ELEVATION_PARAMS.items():
            assert saved[term] == pytest.approx(value, rel=1e-12, abs=1e-12)


class TestStreamInjection:

    def test_injected_stream_drives_whole_run(self, tmp_path):
        stream = RecordingStream(10)
        result = run_pipeline(output_dir=tmp_path, rng=stream)

        # elevation, harvest noise, cedar, fir noise, hemlock noise, jitter
        assert stream.sizes == [20, 20, 20, 20, 20, 60]
        assert result.elevation["elevation"].iloc[0] == pytest.approx(GOLDEN_FIRST_ELEVATION, rel=1e-12)
        assert sorted(p.name for p in tmp_path.glob("*.jpg")) == FIGURES

    def test_injected_stream_matches_seeded_run(self, two_runs, tmp_path):
        first, seeded, _, _ = two_runs
        injected = run_pipeline(seed=10, output_dir=tmp_path, rng=make_rng(10))

        pd.testing.assert_frame_equal(injected.elevation, seeded.elevation)
        pd.testing.assert_frame_equal(injected.anova.pairwise, seeded.anova.pairwise)
        assert (tmp_path / "figure3.jpg").read_bytes() == (first / "figure3.jpg").read_bytes()

    def test_injected_stream_wins_over_seed(self, tmp_path):
        result = run_pipeline(seed=11, output_dir=tmp_path, rng=make_rng(10))
        assert result.seed == 11
        assert result.elevation["elevation"].iloc[0] == pytest.approx(GOLDEN_FIRST_ELEVATION, rel=1e-12)


class TestReports:

    def test_stdout_report(self, tmp_path, capsys):
        run_pipeline(seed=10, output_dir=tmp_path)
        out = capsys.readouterr().out

        assert "QUALITY CONTROL REPORT" in out
        assert "❌" not in out
        assert "OLS Regression Results" in out
        assert "[ANOVA] birds ~ tree" in out
        assert "[Tukey HSD] pairwise differences (3 pairs)" in out
        assert "ANALYSIS COMPLETE" in out

    def test_config_banner(self, tmp_path, capsys):
        config.print_config(seed=7, output_dir=tmp_path)
        out = capsys.readouterr().out

        assert "PIPELINE CONFIGURATION" in out
        assert f"OUTPUT DIR: {tmp_path.resolve()}" in out
        assert "Seed: 7" in out
        assert "ROOT" not in out

    def test_slope_negative(self, two_runs):
        _, result, _, _ = two_runs
        assert result.models["elevation"].params["elevation"] < 0


class TestScript:

    def test_main_writes_figures(self, tmp_path):
        module = _load_script()
        assert module.main(["--seed", "10", "--output-dir", str(tmp_path)]) == 0
        assert sorted(p.name for p in tmp_path.glob("*.jpg")) == FIGURES

    def test_main_reports_export_failure(self, tmp_path, capsys):
        module = _load_script()
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        assert module.main(["--output-dir", str(blocker / "sub")]) == 1
        assert "ERROR:" in capsys.readouterr().err
