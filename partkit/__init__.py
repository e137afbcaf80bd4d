"""Graph and mesh I/O, synthetic load changes and partition-driven graph redistribution."""

__version__ = "0.1.0"

__all__ = ["adapt", "dglio", "dglmove", "dglwrite", "graphio", "meshio"]