# Louvain driver defaults
DEFAULT_IMPROVEMENT_EPSILON = 1e-6
DEFAULT_RESOLUTION = 1.0

# The resolution parameter t is only meaningful on [-1, 1]; t = 1 reduces to modularity
RESOLUTION_MIN = -1.0
RESOLUTION_MAX = 1.0

# Marks a node that has been removed from its community mid-relocation
UNASSIGNED = -1

# Reporting
DEFAULT_STABILITY_RUNS = 10
TINY_COMMUNITY_SIZE = 5
STRONG_STRUCTURE_QUALITY = 0.4
