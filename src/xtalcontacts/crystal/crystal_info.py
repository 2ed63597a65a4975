import logging
import numpy as np
from .space_group import SpaceGroup
from .unit_cell import UnitCell

LOG = logging.getLogger(__name__)

# tolerance on fractional coordinates when matching operators against the table
_MATCH_TOLERANCE = 1e-4


class ConfigurationError(ValueError):
    """Raised when an interface search is configured inconsistently."""


class CrystallographicInfo:
    """
    The crystallographic metadata accompanying an asymmetric unit:
    the unit cell, the space group and whether the entry is to be treated
    as a crystal at all.

    Args:
        unit_cell (UnitCell, optional): the unit cell of the crystal
        space_group (SpaceGroup, optional): the space group of the crystal
        crystallographic (bool, optional): explicitly state whether the entry is
            crystallographic. If not given, the entry is crystallographic when both a
            unit cell and a space group are present and the unit cell is not the
            1 x 1 x 1 placeholder used for NMR entries.
    """

    def __init__(self, unit_cell=None, space_group=None, crystallographic=None):
        self.unit_cell = unit_cell
        self.space_group = space_group
        if crystallographic is None:
            crystallographic = (
                unit_cell is not None
                and space_group is not None
                and not unit_cell.is_dummy
            )
        self.is_crystallographic = bool(crystallographic)
        self._fractional = None
        self._orthonormal = None

    def validate(self):
        "Raise a ConfigurationError if this entry claims to be a crystal without a cell or space group"
        if not self.is_crystallographic:
            return
        if self.space_group is None:
            raise ConfigurationError("Crystallographic entry has no space group")
        if self.unit_cell is None:
            raise ConfigurationError("Crystallographic entry has no unit cell")

    @property
    def num_operators(self) -> int:
        "Number of symmetry operators to apply, 1 if not crystallographic"
        if not self.is_crystallographic:
            return 1
        return self.space_group.multiplicity

    def transformations_fractional(self):
        "(4, 4) Seitz matrices in fractional coordinates, identity first"
        if not self.is_crystallographic:
            return [np.eye(4)]
        if self._fractional is None:
            self._fractional = self.space_group.transformations()
        return self._fractional

    def transformations_orthonormal(self):
        "(4, 4) transformation matrices in Cartesian coordinates, identity first"
        if not self.is_crystallographic:
            return [np.eye(4)]
        if self._orthonormal is None:
            self._orthonormal = [
                self.unit_cell.orthonormal_matrix(m)
                for m in self.transformations_fractional()
            ]
        return self._orthonormal

    def translation_orthonormal(self, translation) -> np.ndarray:
        """
        The Cartesian vector of an integer lattice translation.

        Args:
            translation (Tuple[int, int, int]): the (a, b, c) cell translation

        Returns:
            np.ndarray: (3,) Cartesian translation vector
        """
        translation = np.asarray(translation, dtype=np.float64)
        if not self.is_crystallographic or not np.any(translation):
            return np.zeros(3)
        return self.unit_cell.to_cartesian(translation)

    def find_transform(self, matrix_fractional):
        """
        Identify a fractional transformation as one of the space group
        operators followed by an integer cell translation.

        Args:
            matrix_fractional (np.ndarray): (4, 4) transformation in fractional coordinates

        Returns:
            Tuple[int, Tuple[int, int, int]] or None: the operator index and the
            cell translation, or None if no operator matches
        """
        rotation = matrix_fractional[:3, :3]
        translation = matrix_fractional[:3, 3]
        for i, op in enumerate(self.transformations_fractional()):
            if not np.allclose(op[:3, :3], rotation, atol=_MATCH_TOLERANCE):
                continue
            shift = translation - op[:3, 3]
            cell = np.round(shift)
            if np.allclose(shift, cell, atol=_MATCH_TOLERANCE):
                return i, tuple(int(x) for x in cell)
        return None

    @classmethod
    def from_parameters(cls, cell_parameters=None, space_group=None, crystallographic=None):
        """
        Construct crystallographic information from CRYST1-like values.

        Args:
            cell_parameters (array_like, optional): (a, b, c, alpha, beta, gamma), angles in degrees
            space_group (str or int, optional): space group symbol e.g. 'P 21 21 21' or number
            crystallographic (bool, optional): see `CrystallographicInfo`

        Returns:
            CrystallographicInfo: the new object
        """
        unit_cell = None
        if cell_parameters is not None:
            unit_cell = UnitCell.from_parameters(cell_parameters)
        sg = None
        if isinstance(space_group, SpaceGroup):
            sg = space_group
        elif isinstance(space_group, str) and not space_group.strip().isdigit():
            sg = SpaceGroup.from_symbol(space_group)
            # 'R 3' is often written for a cell given on hexagonal axes
            if sg.choice == "R" and unit_cell is not None and np.allclose(
                unit_cell.angles_deg, (90.0, 90.0, 120.0), atol=1e-2
            ):
                LOG.info("Using hexagonal axes for '%s' with cell %s", space_group, unit_cell)
                sg = SpaceGroup(sg.international_tables_number, choice="H")
        elif space_group is not None:
            sg = SpaceGroup(int(space_group))
        return cls(unit_cell=unit_cell, space_group=sg, crystallographic=crystallographic)

    def __repr__(self):
        if not self.is_crystallographic:
            return "<{}: not crystallographic>".format(self.__class__.__name__)
        symbol = self.space_group.symbol if self.space_group is not None else None
        return "<{}: {} {}>".format(self.__class__.__name__, symbol, self.unit_cell)
