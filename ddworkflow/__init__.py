"""Direct debit workflow driver: runs the direct debit BPMN process on an embedded engine."""

__version__ = "1.0.0"
