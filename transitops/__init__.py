"""
TransitOps: simulated transit operations backend.
"""
