"""
Pipeline module: synthesize -> QC -> model -> render -> export, in one pass.
"""

from dataclasses import dataclass, field
from pathlib import Path

import matplotlib.pyplot as plt

from . import config
from .categories import Climate, TreeSpecies, labels
from .errors import ExportError
from .io import export, file_size_mb, save_csv, save_json
from .modeling import fit_anova, fit_ols
from .plotting import PlotKind, PlotSpec, TrendMethod, render
from .qc import (
    check_bounds,
    check_cyclic_labels,
    check_integer_counts,
    check_linear_relationship,
    check_noise_bound,
    check_row_count,
    print_qc_report,
)
from .report import model_comparison, print_anova, print_ols, print_section, run_summary
from .sampling import make_rng
from .synthesis import bird_long_form, build_bird_dataset, build_elevation_dataset


@dataclass
class PipelineResult:
    seed: int
    elevation: object
    birds_wide: object
    birds_long: object
    models: dict
    anova: object
    figures: list = field(default_factory=list)
    tables: list = field(default_factory=list)


FIGURE_SPECS = {
    "elevation_harvest": [
        PlotSpec(PlotKind.LINE, x="elevation", y="harvesting",
                 xlabel="Elevation (m)", ylabel="Timber harvesting",
                 title="Harvesting vs. elevation (deterministic)"),
        PlotSpec(PlotKind.SCATTER_TREND, x="elevation", y="harvesting_random",
                 xlabel="Elevation (m)", ylabel="Timber harvesting",
                 title="Harvesting vs. elevation (with noise)", trend=TrendMethod.OLS),
    ],
    "harvest_by_climate": PlotSpec(
        PlotKind.SCATTER_TREND, x="elevation", y="harvesting_random", hue="climate",
        xlabel="Elevation (m)", ylabel="Timber harvesting",
        title="Harvesting vs. elevation by climate", trend=TrendMethod.OLS,
    ),
    "birds_by_tree": PlotSpec(
        PlotKind.BOX_JITTER, x="tree", y="birds",
        xlabel="Tree species", ylabel="Bird density",
        title="Bird density by tree species",
    ),
}


def _qc_checks(elevation, birds_wide, birds_long, n):
    return [
        ("Elevation rows", check_row_count, {"df": elevation, "expected": n}),
        ("Elevation bounds", check_bounds,
         {"df": elevation, "col": "elevation",
          "lower": config.ELEVATION["lower"], "upper": config.ELEVATION["upper"]}),
        ("Deterministic harvesting", check_linear_relationship,
         {"df": elevation, "x_col": "elevation", "y_col": "harvesting",
          "slope": config.HARVEST_SLOPE, "intercept": config.HARVEST_INTERCEPT}),
        ("Harvesting noise", check_noise_bound,
         {"df": elevation, "noisy_col": "harvesting_random", "base_col": "harvesting",
          "lower": config.HARVEST_NOISE["lower"], "upper": config.HARVEST_NOISE["upper"]}),
        ("Climate labels", check_cyclic_labels,
         {"df": elevation, "col": "climate", "labels": labels(Climate)}),
        ("Bird rows", check_row_count, {"df": birds_wide, "expected": n}),
        ("Bird counts", check_integer_counts, {"df": birds_wide, "cols": ["cedar", "fir", "hemlock"]}),
        ("Tree labels", check_cyclic_labels,
         {"df": birds_long, "col": "tree", "labels": labels(TreeSpecies)}),
    ]


def _export_tables(result, output_dir):
    tables_dir = output_dir / config.TABLES_SUBDIR
    saved = [
        save_csv(result.models["elevation"].coefficients, tables_dir / config.TABLE_FILES["ols_elevation"]),
        save_csv(result.models["elevation_climate"].coefficients,
                 tables_dir / config.TABLE_FILES["ols_elevation_climate"]),
        save_csv(result.anova.anova_table, tables_dir / config.TABLE_FILES["anova_birds"]),
        save_csv(result.anova.pairwise, tables_dir / config.TABLE_FILES["tukey_birds"]),
        save_json(
            run_summary(result.seed, result.elevation, result.models, result.anova, result.figures),
            tables_dir / config.TABLE_FILES["run_summary"],
        ),
    ]
    for path in saved:
        print(f"✓ Saved: {path}")
    return saved


def run_pipeline(seed=None, output_dir=None, n=config.N_ROWS, tables=False, rng=None):
    """
    Run the whole analysis once.

    Args:
        seed: Seed for the single random stream (config.SEED when None)
        output_dir: Folder for figures (config.OUTPUT_DIR when None)
        n: Rows per synthesized dataset
        tables: Also write coefficient/ANOVA/Tukey tables and a JSON summary
        rng: Random stream to draw from instead of make_rng(seed); only
             needs a random(size) method

    Returns:
        PipelineResult
    """
    seed = config.SEED if seed is None else seed
    output_dir = Path(config.OUTPUT_DIR if output_dir is None else output_dir)

    if config.VERBOSE:
        config.print_config(seed=seed, output_dir=output_dir)

    # ------------------------------------------------------------------------
    # 1. SYNTHESIZE
    # ------------------------------------------------------------------------
    print_section("SYNTHESIZING DATA")
    rng = make_rng(seed) if rng is None else rng
    elevation = build_elevation_dataset(rng, n=n)
    birds_wide = build_bird_dataset(rng, n=n)
    birds_long = bird_long_form(birds_wide)

    print(f"\n[DATA] Elevation/harvesting: {len(elevation)} rows")
    print(elevation.head().to_string())
    print(f"\n[DATA] Bird density: {len(birds_wide)} plots, {len(birds_long)} long-form rows")
    print(birds_wide.head().to_string())

    qc_passed = print_qc_report(_qc_checks(elevation, birds_wide, birds_long, n))
    assert qc_passed, "Synthesized datasets failed QC checks"

    # ------------------------------------------------------------------------
    # 2. MODEL
    # ------------------------------------------------------------------------
    print_section("OLS ESTIMATION")
    models = {
        "elevation": fit_ols(elevation, "harvesting_random", ["elevation"]),
        "elevation_climate": fit_ols(elevation, "harvesting_random", ["elevation", "climate"]),
    }
    print_ols(models["elevation"], "Model A")
    print_ols(models["elevation_climate"], "Model B")

    print_section("MODEL COMPARISON")
    print(model_comparison({"Model A": models["elevation"],
                            "Model B": models["elevation_climate"]}).to_string(index=False))

    print_section("ANOVA: BIRD DENSITY BY TREE SPECIES")
    anova = fit_anova(birds_long, "birds", "tree", alpha=config.TUKEY_ALPHA)
    print_anova(anova)

    result = PipelineResult(
        seed=seed,
        elevation=elevation,
        birds_wide=birds_wide,
        birds_long=birds_long,
        models=models,
        anova=anova,
    )

    # ------------------------------------------------------------------------
    # 3. RENDER & EXPORT
    # ------------------------------------------------------------------------
    print_section("CREATING FIGURES")
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(output_dir, e) from e

    datasets = {
        "elevation_harvest": elevation,
        "harvest_by_climate": elevation,
        "birds_by_tree": birds_long,
    }
    for name, specs in FIGURE_SPECS.items():
        fig = render(datasets[name], specs, rng=rng)
        try:
            path = export(fig, output_dir / config.FIGURE_FILES[name])
        finally:
            plt.close(fig)
        result.figures.append(path)
        print(f"✓ Saved: {path} ({file_size_mb(path) * 1024:.1f} KB)")

    if tables:
        print_section("EXPORTING TABLES")
        result.tables = _export_tables(result, output_dir)

    print_section("✓ ANALYSIS COMPLETE")
    return result
