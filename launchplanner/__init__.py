"""
launchplanner - business-day scheduling for product launch roadmaps.
"""

__version__ = "0.1.0"
