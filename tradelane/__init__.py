"""
TRADELANE - weather-aware voyage estimation for trade routes.

Estimates weather-affected ship speed, fuel consumption and voyage
cost along fixed trade routes, and simulates voyages waypoint by
waypoint.
"""

__version__ = "1.0.0"
