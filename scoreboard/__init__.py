"""Real-time two-team scoreboard broadcast server"""

__version__ = "1.0.0"
