from .structure import AsymmetricUnit, Chain

__all__ = ["AsymmetricUnit", "Chain"]
