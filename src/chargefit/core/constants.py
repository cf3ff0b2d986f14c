"""Core constants for chargefit estimation, filtering and fitting.

Thresholds that shape the fitting heuristics. Values that users are
expected to tune (uncertainty weighting, outlier thresholds) are exposed
through :mod:`chargefit.core.domain.config`; the defaults there mirror the
values below.
"""

# =============================================================================
# Data requirements
# =============================================================================

MIN_FIT_POINTS = 5
"""Minimum number of samples required to attempt any fit or filter."""

N_MODEL_PARAMS = 5
"""Number of free model parameters (A, m, gamma, beta, B)."""

# =============================================================================
# Robust statistics
# =============================================================================

MAD_TO_SIGMA = 1.4826
"""Scale factor making the median absolute deviation normal-consistent."""

MAD_FLOOR = 1e-12
"""Smallest usable dispersion; smaller MAD values are replaced."""

# =============================================================================
# Residual model safety floors (applied inside residual evaluation only)
# =============================================================================

SAFE_GAMMA_FLOOR = 1e-12
"""Lower bound on |gamma| when evaluating the model."""

SAFE_BETA_FLOOR = 0.1
"""Lower bound on |beta| when evaluating the model."""

DENOMINATOR_FLOOR = 1e-12
"""Lower bound on the base 1 + ((x - m) / gamma)^2."""

# =============================================================================
# Parameter estimation (all widths in units of the pixel spacing)
# =============================================================================

ESTIMATE_AMPLITUDE_RANGE_FRACTION = 0.1
"""Physics-based amplitude is floored at this fraction of the data range."""

ESTIMATE_WEIGHT_FRACTION = 0.1
"""Only points with weight above this fraction of the amplitude enter the width moment."""

ESTIMATE_GAMMA_MIN = 0.3
ESTIMATE_GAMMA_MAX = 3.0
"""Clamp for the physics-based gamma estimate."""

ESTIMATE_GAMMA_ROBUST_MIN = 0.5
"""Minimum gamma for the robust statistical estimate."""

ESTIMATE_GAMMA_DEFAULT = 0.7
"""Gamma used by the conservative fallback estimate."""

# =============================================================================
# Outlier filtering (thresholds in MAD units)
# =============================================================================

OUTLIER_CONSERVATIVE_THRESHOLD = 2.5
OUTLIER_LENIENT_THRESHOLD = 3.0
OUTLIER_RETRY_THRESHOLD = 4.0
"""Threshold of the single lenient retry when fewer than half the samples survive."""

# =============================================================================
# Bounds for the least-squares search
# =============================================================================

AMPLITUDE_MIN_FRACTION = 0.01
AMPLITUDE_MAX_FACTOR = 100.0
AMPLITUDE_MAX_CHARGE_FACTOR = 1.5
CENTER_RANGE = 3.0
STAGE_TWO_CENTER_RANGE = 0.5
GAMMA_MIN = 0.05
GAMMA_MAX = 4.0
BETA_MIN = 0.2
BETA_MAX = 4.0
STAGE_ONE_BETA_MIN = 0.9
STAGE_ONE_BETA_MAX = 1.1
BASELINE_AMPLITUDE_FRACTION = 0.5
BASELINE_SELF_FACTOR = 2.0

ACCEPT_BETA_MIN = 0.1
ACCEPT_BETA_MAX = 5.0
"""Open interval a converged beta must lie in for the fit to be accepted."""

PARAMETER_TOLERANCE = 1e-15
"""Step-size termination tolerance (``xtol``) shared by every solver configuration."""

# =============================================================================
# Uncertainty estimation
# =============================================================================

CHARGE_UNCERTAINTY_FRACTION = 0.05
"""Per-sample uncertainty as a fraction of the dataset maximum charge."""

MIN_UNCERTAINTY_VALUE = 1e-20
"""Default floor on the per-sample uncertainty."""

COVARIANCE_NULL_SPACE_RANK = 2
"""Maximum number of ill-conditioned directions dropped from the covariance."""

MAX_AMPLITUDE_ERROR_RATIO = 10.0
MAX_CENTER_ERROR_SPACINGS = 5.0
"""Sanity limits a covariance-derived error set must satisfy."""

PSEUDO_P_VALUE_SCALE = 10.0
"""Reduced chi-square at which the pseudo p-value reaches zero."""

# =============================================================================
# Drivers
# =============================================================================

GROUPING_TOLERANCE = 0.1
"""Rows/columns are grouped when coordinates agree within this fraction of the spacing."""

DIAGONAL_TOLERANCE = 0.5
"""Samples belong to a diagonal when within this fraction of the spacing."""

DIAGONAL_PITCH_FACTOR = 1.41421356237
"""Centre-to-centre pitch along a diagonal, in units of the pixel spacing."""
