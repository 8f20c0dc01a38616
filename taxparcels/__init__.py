"""
taxparcels: pull named tax parcels out of county GIS exports
"""

__version__ = "0.1.0"
