"""lintbridge — editor diagnostics bridge for external C/C++ validators."""

__version__ = "0.1.0"
