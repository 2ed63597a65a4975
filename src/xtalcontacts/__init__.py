from .core import AsymmetricUnit, Chain
from .crystal import (
    CrystalBuilder,
    CrystalTransform,
    CrystallographicInfo,
    SpaceGroup,
    UnitCell,
    find_interfaces,
)
from .contacts import StructureInterface, StructureInterfaceList

__version__ = "0.1.0"

__all__ = [
    "AsymmetricUnit",
    "Chain",
    "CrystalBuilder",
    "CrystalTransform",
    "CrystallographicInfo",
    "SpaceGroup",
    "StructureInterface",
    "StructureInterfaceList",
    "UnitCell",
    "find_interfaces",
]
