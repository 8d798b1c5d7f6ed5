"""
Algorithm configuration shared by DSATUR, TabuCol and HEA.

Defaults: three colors, a population of ten, fifty generations and short
tabu refinements (tenure 5, 20 iterations).
"""

from dataclasses import asdict, dataclass

from .errors import InvalidParameterError


@dataclass(frozen=True)
class AlgorithmParams:
    """Parameters for one HEA run (and the DSATUR/TabuCol calls it makes)."""

    k: int = 3  # Target number of colors
    pop_size: int = 10  # Population size (p)
    max_iter_hea: int = 50  # Generation budget
    alpha: float = 2.0  # Reserved for saturation tie-break weighting, passed through
    tabu_tenure: int = 5  # Base tabu tenure (t)
    max_iter_tabu: int = 20  # Iteration budget per TabuCol call

    def __post_init__(self):
        if self.k < 1:
            raise InvalidParameterError(f"k must be >= 1, got {self.k}")
        if self.pop_size < 1:
            raise InvalidParameterError(f"pop_size must be >= 1, got {self.pop_size}")
        if self.max_iter_hea < 1:
            raise InvalidParameterError(f"max_iter_hea must be >= 1, got {self.max_iter_hea}")
        if self.max_iter_tabu < 1:
            raise InvalidParameterError(f"max_iter_tabu must be >= 1, got {self.max_iter_tabu}")
        if self.tabu_tenure < 0:
            raise InvalidParameterError(f"tabu_tenure must be >= 0, got {self.tabu_tenure}")

    def to_dict(self) -> dict:
        """Get parameters as a plain dictionary (for JSON export)."""
        return asdict(self)
