"""Speed & Form - weekly training tracker for coaches and athletes."""

__version__ = "0.1.0"
