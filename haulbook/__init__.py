"""haulbook - owner-operator load, expense and profit tracking."""

__version__ = "0.1.0"
