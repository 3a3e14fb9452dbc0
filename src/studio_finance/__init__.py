"""Team member payable/pending reconciliation for studio back-offices."""

__version__ = "0.1.0"
