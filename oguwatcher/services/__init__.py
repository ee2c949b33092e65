"""
Relay services: routing, fan-out and background helpers.
"""
