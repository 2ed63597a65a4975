"""
This module implements the reconstruction of a crystal lattice around an
asymmetric unit: unit cells (`UnitCell`), space groups (`SpaceGroup`),
symmetry operations in fractional coordinates (`SymmetryOperation`),
operators combined with cell translations (`CrystalTransform`) and the
search for unique interfaces (`CrystalBuilder`).
"""

from .crystal_builder import CrystalBuilder, SearchObserver, find_interfaces
from .crystal_info import ConfigurationError, CrystallographicInfo
from .crystal_transform import CrystalTransform
from .space_group import SpaceGroup
from .symmetry_operation import SymmetryOperation
from .unit_cell import UnitCell

__all__ = [
    "ConfigurationError",
    "CrystalBuilder",
    "CrystalTransform",
    "CrystallographicInfo",
    "SearchObserver",
    "SpaceGroup",
    "SymmetryOperation",
    "UnitCell",
    "find_interfaces",
]
