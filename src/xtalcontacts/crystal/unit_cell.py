import logging
import numpy as np

LOG = logging.getLogger(__name__)

# PDB entries from non-diffraction experiments carry a placeholder CRYST1 record
_DUMMY_CELL_PARAMETERS = (1.0, 1.0, 1.0, 90.0, 90.0, 90.0)


def _lattice_vectors(lengths, angles):
    """
    Row major lattice vectors for the given cell parameters, in the
    PDB convention: a along x, b in the xy plane.

    Args:
        lengths (array_like): (a, b, c) in Angstroms
        angles (array_like): (alpha, beta, gamma) in radians

    Returns:
        np.ndarray: (3, 3) array with vector a in row 0 etc.
    """
    a, b, c = lengths
    cos_alpha, cos_beta, cos_gamma = np.cos(angles)
    sin_gamma = np.sin(angles[2])
    cx = c * cos_beta
    cy = c * (cos_alpha - cos_beta * cos_gamma) / sin_gamma
    cz = np.sqrt(max(c * c - cx * cx - cy * cy, 0.0))
    return np.array(
        [
            [a, 0.0, 0.0],
            [b * cos_gamma, b * sin_gamma, 0.0],
            [cx, cy, cz],
        ]
    )


class UnitCell:
    """
    The lattice of a crystal, used to move coordinates and symmetry
    operators between fractional and Cartesian (orthonormal) space.

    Coordinates are row vectors: `cartesian = fractional @ direct`.

    Args:
        vectors (array_like): (3, 3) lattice vectors a, b, c as rows, in Angstroms

    Attributes:
        direct (np.ndarray): (3, 3) lattice vectors as rows
        inverse (np.ndarray): (3, 3) inverse of `direct`
        lengths (np.ndarray): (a, b, c) in Angstroms
        angles (np.ndarray): (alpha, beta, gamma) in radians
    """

    def __init__(self, vectors):
        self.set_vectors(np.asarray(vectors, dtype=np.float64))

    def set_vectors(self, vectors):
        "Replace the lattice vectors, updating the derived parameters"
        if vectors.shape != (3, 3):
            raise ValueError("Lattice vectors must be a (3, 3) array")
        self.direct = vectors
        self.inverse = np.linalg.inv(vectors)
        self.lengths = np.linalg.norm(vectors, axis=1)
        unit = vectors / self.lengths[:, np.newaxis]
        cosines = [np.dot(unit[1], unit[2]), np.dot(unit[2], unit[0]), np.dot(unit[0], unit[1])]
        self.angles = np.arccos(np.clip(cosines, -1.0, 1.0))

    @property
    def lattice(self) -> np.ndarray:
        "alias for `direct`"
        return self.direct

    @property
    def reciprocal_lattice(self) -> np.ndarray:
        "Reciprocal lattice vectors as rows (without the 2 pi factor)"
        return self.inverse.T

    @property
    def direct_homogeneous(self) -> np.ndarray:
        "(4, 4) matrix taking homogeneous fractional column vectors to Cartesian"
        m = np.eye(4)
        m[:3, :3] = self.direct.T
        return m

    @property
    def inverse_homogeneous(self) -> np.ndarray:
        "(4, 4) matrix taking homogeneous Cartesian column vectors to fractional"
        m = np.eye(4)
        m[:3, :3] = self.inverse.T
        return m

    def to_cartesian(self, coords: np.ndarray) -> np.ndarray:
        """
        Convert fractional coordinates to Cartesian coordinates.

        Args:
            coords (array_like): (N, 3) or (3,) fractional coordinates

        Returns:
            np.ndarray: Cartesian coordinates with the same shape
        """
        return np.dot(coords, self.direct)

    def to_fractional(self, coords: np.ndarray) -> np.ndarray:
        """
        Convert Cartesian coordinates to fractional coordinates.

        Args:
            coords (array_like): (N, 3) or (3,) Cartesian coordinates

        Returns:
            np.ndarray: fractional coordinates with the same shape
        """
        return np.dot(coords, self.inverse)

    def orthonormal_matrix(self, seitz: np.ndarray) -> np.ndarray:
        """
        The Cartesian form of a (4, 4) operator acting on fractional
        coordinates.

        Args:
            seitz (np.ndarray): (4, 4) Seitz matrix in fractional coordinates

        Returns:
            np.ndarray: (4, 4) matrix acting on Cartesian column vectors
        """
        return np.dot(self.direct_homogeneous, np.dot(seitz, self.inverse_homogeneous))

    def fractional_matrix(self, matrix: np.ndarray) -> np.ndarray:
        "Inverse of `orthonormal_matrix`"
        return np.dot(self.inverse_homogeneous, np.dot(matrix, self.direct_homogeneous))

    def volume(self) -> float:
        "Cell volume in cubic Angstroms"
        return abs(float(np.linalg.det(self.direct)))

    @property
    def a(self) -> float:
        return self.lengths[0]

    @property
    def b(self) -> float:
        return self.lengths[1]

    @property
    def c(self) -> float:
        return self.lengths[2]

    @property
    def angles_deg(self) -> np.ndarray:
        "(alpha, beta, gamma) in degrees"
        return np.degrees(self.angles)

    @property
    def alpha_deg(self) -> float:
        return self.angles_deg[0]

    @property
    def beta_deg(self) -> float:
        return self.angles_deg[1]

    @property
    def gamma_deg(self) -> float:
        return self.angles_deg[2]

    @property
    def parameters(self) -> np.ndarray:
        "(a, b, c, alpha, beta, gamma) with angles in degrees, as in a CRYST1 record"
        return np.hstack((self.lengths, self.angles_deg))

    @property
    def is_dummy(self) -> bool:
        "True for the 1 x 1 x 1 Angstrom placeholder cell written for NMR/EM entries"
        return np.allclose(self.parameters, _DUMMY_CELL_PARAMETERS, atol=1e-3)

    @classmethod
    def from_lengths_and_angles(cls, lengths, angles, unit="radians"):
        """
        Build a cell from its edge lengths and inter-axial angles.

        Args:
            lengths (array_like): (a, b, c) in Angstroms, all positive
            angles (array_like): (alpha, beta, gamma)
            unit (str, optional): 'radians' (default) or 'degrees'

        Returns:
            UnitCell: the new cell

        Raises:
            ValueError: if any length is not positive
        """
        lengths = np.asarray(lengths, dtype=np.float64)
        angles = np.asarray(angles, dtype=np.float64)
        if np.any(lengths <= 0):
            raise ValueError("Unit cell lengths must be positive, got {}".format(lengths))
        if unit == "degrees":
            angles = np.radians(angles)
        elif np.any(np.abs(angles) > np.pi):
            LOG.warning(
                "Angles %s passed to UnitCell.from_lengths_and_angles look like degrees",
                angles,
            )
        return cls(_lattice_vectors(lengths, angles))

    @classmethod
    def from_parameters(cls, parameters):
        """
        Build a cell from (a, b, c, alpha, beta, gamma) as found in a
        PDB CRYST1 record, with the angles in degrees.
        """
        if len(parameters) != 6:
            raise ValueError("Require three lengths and three angles, got {}".format(parameters))
        return cls.from_lengths_and_angles(parameters[:3], parameters[3:], unit="degrees")

    @classmethod
    def cubic(cls, length):
        return cls(np.eye(3) * length)

    @classmethod
    def orthorhombic(cls, a, b, c):
        return cls(np.diag((a, b, c)))

    @classmethod
    def hexagonal(cls, a, c):
        "Cell with a = b, gamma = 120 degrees"
        return cls.from_lengths_and_angles((a, a, c), (90, 90, 120), unit="degrees")

    def __repr__(self):
        return "<{}: ({:.3f},{:.3f},{:.3f},{:.2f},{:.2f},{:.2f})>".format(
            self.__class__.__name__, *self.parameters
        )
