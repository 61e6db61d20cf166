"""
Configuration module: paths, seed, distribution parameters, and global settings.
"""

from pathlib import Path
import os

# ============================================================================
# OUTPUT PATHS
# ============================================================================

# Figures land in the working directory unless overridden
OUTPUT_DIR = Path(os.environ.get("ECOSTATS_OUTPUT_DIR", "."))
TABLES_SUBDIR = "tables"

# Output files (fixed names, relative to OUTPUT_DIR)
FIGURE_FILES = {
    "elevation_harvest": "figure1.jpg",
    "harvest_by_climate": "figure2.jpg",
    "birds_by_tree": "figure3.jpg",
}

TABLE_FILES = {
    "ols_elevation": "ols_elevation.csv",
    "ols_elevation_climate": "ols_elevation_climate.csv",
    "anova_birds": "anova_birds.csv",
    "tukey_birds": "tukey_birds.csv",
    "run_summary": "run_summary.json",
}

# ============================================================================
# REPRODUCIBILITY
# ============================================================================

DEFAULT_SEED = 10
SEED = int(os.environ.get("ECOSTATS_SEED", DEFAULT_SEED))

# ============================================================================
# ELEVATION / HARVESTING DATASET
# ============================================================================

N_ROWS = 20

ELEVATION = {"lower": 0, "upper": 1500, "mean": 200, "stddev": 200}
HARVEST_SLOPE = -1 / 6
HARVEST_INTERCEPT = 120
HARVEST_NOISE = {"lower": -50, "upper": 50, "mean": 0, "stddev": 25}

# ============================================================================
# BIRD DENSITY DATASET
# ============================================================================

CEDAR = {"lower": 1, "upper": 20, "mean": 5, "stddev": 3}
FIR_SLOPE = 3
HEMLOCK_SLOPE = 1
# Asymmetric bounds kept as given: fir [-1, 1], hemlock [-1, 2]
FIR_NOISE = {"lower": -1, "upper": 1, "mean": 0, "stddev": 1}
HEMLOCK_NOISE = {"lower": -1, "upper": 2, "mean": 0, "stddev": 1}

# ============================================================================
# MODELING & PLOTTING
# ============================================================================

TUKEY_ALPHA = 0.05
JITTER_WIDTH = 0.15
FIGURE_DPI = 100  # matplotlib default
FIGURE_SIZE = (6.4, 4.8)  # matplotlib default

# ============================================================================
# LOGGING & VERBOSITY
# ============================================================================

VERBOSE = True

def print_config(seed=None, output_dir=None):
    """Print all configuration settings."""
    seed = SEED if seed is None else seed
    output_dir = OUTPUT_DIR if output_dir is None else Path(output_dir)
    print("\n" + "=" * 80)
    print("PIPELINE CONFIGURATION")
    print("=" * 80)
    print(f"\n📂 OUTPUT DIR: {output_dir.resolve()}")
    print(f"\n🎲 Seed: {seed}")
    print(f"   Rows per dataset: {N_ROWS}")
    print(f"   Elevation: {ELEVATION}")
    print(f"   Harvest noise: {HARVEST_NOISE}")
    print(f"   Cedar: {CEDAR}")
    print(f"   Fir noise: {FIR_NOISE}")
    print(f"   Hemlock noise: {HEMLOCK_NOISE}")
    print(f"\n✓ Configuration loaded successfully")
    print("=" * 80 + "\n")
