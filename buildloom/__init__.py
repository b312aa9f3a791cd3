"""buildloom — compose build tasks from a declarative project descriptor."""

__version__ = "0.1.0"
