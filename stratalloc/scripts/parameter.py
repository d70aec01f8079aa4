# Shared defaults for survey design calculations

# Confidence level as percentage, as accepted by AllocationInputs
DEFAULT_CONFIDENCE_LEVEL = 95.0

# Tabulated two-sided z-scores, keyed by confidence level (0-1)
FIXED_Z_SCORES = {
    0.90: 1.645,
    0.95: 1.960,
    0.99: 2.576,
}

# Column names of the stratum table
STRATUM_COLUMNS = ("stratum", "Nh", "Sh", "Ch", "Th", "Wh")

# Tolerance used when checking that weights sum to one
WEIGHT_TOLERANCE = 1e-9

# Reference survey: four strata with growing variability and unit cost
# (id, population size, std dev, cost per unit, time per unit in hours)
REFERENCE_STRATA = (
    (1, 4000, 10.0, 4.0, 1.0),
    (2, 3000, 20.0, 6.0, 1.5),
    (3, 2000, 30.0, 8.0, 2.0),
    (4, 1000, 40.0, 10.0, 2.5),
)
REFERENCE_MARGIN_OF_ERROR = 1.5
REFERENCE_CONFIDENCE_Z = 1.96
