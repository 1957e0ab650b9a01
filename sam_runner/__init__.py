"""Run JSON event fixtures against the functions of a SAM template."""

__version__ = "0.1.0"
