"""
Relay state: connections, registry and the control protocol.
"""
