"""
stablecohorts: resolvability flags for vegetation cohorts.

Subpackages
-----------
stablecohorts.core
    State containers, classifier configuration, and the cohort classifier /
    hierarchy walker.
stablecohorts.library
    Vectorized resolvability kernel.
"""

__version__ = "0.1.0"
