"""
ClearView - title search for Hillsborough County official records.
"""
__version__ = "0.1.0"
