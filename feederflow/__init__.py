"""Three-phase feeder modelling: CSV parsers, Y-bus assembly and flat-start power-flow evaluation."""

__version__ = "0.1.0"

__all__ = ["linalg", "models", "parsers", "ybus", "solver", "cli"]