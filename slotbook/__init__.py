"""
slotbook - appointment slot computation and staff auto-assignment.
"""
__version__ = "1.0.0"
