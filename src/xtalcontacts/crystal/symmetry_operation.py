from fractions import Fraction
import logging
import re
import numpy as np

LOG = logging.getLogger(__name__)

_AXES = "xyz"
_TERM_REGEX = re.compile(r"([+-]?)([^+-]+)")

CENTERING_TRANSLATIONS = {
    "primitive": (),
    "body": ((1 / 2, 1 / 2, 1 / 2),),
    "rcenter": ((2 / 3, 1 / 3, 1 / 3), (1 / 3, 2 / 3, 2 / 3)),  # obverse, hexagonal axes
    "face": ((0, 1 / 2, 1 / 2), (1 / 2, 0, 1 / 2), (1 / 2, 1 / 2, 0)),
    "aface": ((0, 1 / 2, 1 / 2),),
    "bface": ((1 / 2, 0, 1 / 2),),
    "cface": ((1 / 2, 1 / 2, 0),),
}


def _encode_row(coefficients, shift):
    shift = Fraction(float(shift)).limit_denominator(12)
    term = str(shift) if shift != 0 else ""
    for axis, coefficient in zip(_AXES, coefficients):
        if coefficient:
            term += ("-" if coefficient < 0 else "+") + axis
    return term


def encode_symm_str(rotation, translation):
    """
    Write a rotation (entries -1, 0, 1) and a rational translation
    as a CIF style operator e.g. 1/2-x,z-1/3,-y. Translations outside
    of [0, 1) are written as they are, so cell shifts are preserved.

    >>> encode_symm_str(((-1, 0, 0), (0, 0, 1), (0, 1, 0)), (0, 0.5, 1/3))
    '-x,1/2+z,1/3+y'
    >>> encode_symm_str(((1, 0, 0), (0, 1, 0), (0, 0, 1)), (-1, 0, 1.5))
    '-1+x,+y,3/2+z'

    Args:
        rotation (array_like): (3, 3) rotation in fractional coordinates
        translation (array_like): (3,) translation in fractional coordinates

    Returns:
        str: the operator string
    """
    return ",".join(_encode_row(r, t) for r, t in zip(rotation, translation))


def decode_symm_str(s):
    """
    Read a CIF/PDB style operator such as '1/2+x, y, -z-0.25'.

    >>> encode_symm_str(*decode_symm_str("x,y,z"))
    '+x,+y,+z'
    >>> encode_symm_str(*decode_symm_str("-x+y,-x,z+2/3"))
    '-x+y,-x,2/3+z'

    Args:
        s (str): the operator string

    Returns:
        Tuple[np.ndarray, np.ndarray]: (3, 3) rotation and (3,) translation, the
        translation reduced to [0, 1)

    Raises:
        ValueError: if the string does not have three components or a term is not understood
    """
    rows = s.lower().replace(" ", "").split(",")
    if len(rows) != 3:
        raise ValueError("Expected 3 comma separated components in '{}'".format(s))
    rotation = np.zeros((3, 3))
    translation = np.zeros(3)
    for i, row in enumerate(rows):
        for sign, term in _TERM_REGEX.findall(row):
            factor = -1 if sign == "-" else 1
            if term in _AXES:
                rotation[i, _AXES.index(term)] = factor
            else:
                translation[i] += factor * float(Fraction(term))
    return rotation, translation % 1


class SymmetryOperation:
    """
    A space group symmetry operation in fractional coordinates: a
    rotation followed by a translation.

    Args:
        rotation (array_like): (3, 3) rotation matrix
        translation (array_like): (3,) translation vector, reduced to [0, 1)
    """

    rotation: np.ndarray
    translation: np.ndarray

    def __init__(self, rotation, translation):
        self.rotation = np.asarray(rotation, dtype=np.float64)
        self.translation = np.asarray(translation, dtype=np.float64) % 1
        # values within rounding of 1.0 should wrap to 0
        self.translation[np.isclose(self.translation, 1.0)] = 0.0

    @property
    def seitz_matrix(self) -> np.ndarray:
        "(4, 4) augmented matrix of this operation"
        s = np.eye(4)
        s[:3, :3] = self.rotation
        s[:3, 3] = self.translation
        return s

    @property
    def key(self):
        "Hashable integer form: the rotation entries and the translation in twelfths"
        return tuple(np.round(self.rotation).astype(int).ravel()) + tuple(
            np.round(self.translation * 12).astype(int) % 12
        )

    def inverted(self):
        "This operation combined with inversion through the origin"
        return SymmetryOperation(-self.rotation, -self.translation)

    def apply(self, coordinates: np.ndarray) -> np.ndarray:
        """
        Apply this operation to fractional coordinates.

        Args:
            coordinates (np.ndarray): (N, 3) fractional coordinates

        Returns:
            np.ndarray: (N, 3) transformed fractional coordinates
        """
        return np.dot(coordinates, self.rotation.T) + self.translation

    def __add__(self, value):
        "A copy of this operation with `value` added to its translation"
        return SymmetryOperation(self.rotation, self.translation + np.asarray(value))

    def is_identity(self) -> bool:
        return np.allclose(self.rotation, np.eye(3)) and np.allclose(self.translation, 0.0)

    def __str__(self):
        return encode_symm_str(self.rotation, self.translation)

    def __lt__(self, other):
        return self.key < other.key

    def __eq__(self, other):
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        return "<{}: {}>".format(self.__class__.__name__, self)

    @classmethod
    def from_string_code(cls, code: str):
        "Construct from an operator string e.g. '-x,y+1/2,-z'"
        return cls(*decode_symm_str(code))

    @classmethod
    def from_seitz_matrix(cls, seitz):
        "Construct from a (4, 4) augmented matrix in fractional coordinates"
        seitz = np.asarray(seitz)
        return cls(seitz[:3, :3], seitz[:3, 3])

    @classmethod
    def identity(cls):
        return cls(np.eye(3), np.zeros(3))


def expanded_symmetry_list(symops, centering):
    """
    Add the lattice centering translations to a list of symmetry operations.
    The given operations come first, in order, followed by their copies
    under each centering translation; duplicates are dropped.

    Args:
        symops (List[SymmetryOperation]): operations without centering
        centering (str): one of the keys of `CENTERING_TRANSLATIONS` e.g. 'body', 'face'

    Returns:
        List[SymmetryOperation]: the expanded list

    Raises:
        ValueError: if the centering is not known
    """
    if centering not in CENTERING_TRANSLATIONS:
        raise ValueError("Unknown lattice centering '{}'".format(centering))
    full_symops = list(symops)
    for t in CENTERING_TRANSLATIONS[centering]:
        full_symops += [s + t for s in symops]
    seen = set()
    result = []
    for s in full_symops:
        if s.key not in seen:
            seen.add(s.key)
            result.append(s)
    LOG.debug("Expanded %d symops to %d with %s centering", len(symops), len(result), centering)
    return result
