"""Infrastructure layer for the Pohoda XML connector.

This layer contains the streaming data pack writer and reader and the
logging adapters. It implements the ports defined in the application layer.
"""

__all__ = []
