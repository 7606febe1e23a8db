"""
Schedule builder - collect weekly availability for students and educators.
"""

__version__ = "0.1.0"
