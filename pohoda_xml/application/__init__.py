"""Application layer for the Pohoda XML connector.

Holds the ports (protocols) the infrastructure adapters implement.
"""
