"""
Indoor Navigation Core Package.

RSSI beacon positioning and A* route planning for indoor navigation.

Package structure:
- proto: Value types and result schemas (points, anchors, samples, routes)
- localization: Signal model, signal filters, trilateration, position solver
- navigation: Way-point graph, occupancy grid, A* route planner
- metrics: Diagnostics, counters, histograms
"""

__version__ = "0.1.0"
__author__ = "Indoor Navigation Team"
