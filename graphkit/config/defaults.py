"""Default configuration: single source of truth for default analysis parameters."""

from graphkit.config.options import AnalysisConfig

# Instantiated with all-default values: n=200, K=4, p_in=0.2, p_out=0.01,
# alpha=15, beta=20, resolution=1.0, seed=42.
DEFAULT_CONFIG = AnalysisConfig()
