"""
Burn relay: submits emitBurn transactions on behalf of callers.
"""

__version__ = "1.0.0"
