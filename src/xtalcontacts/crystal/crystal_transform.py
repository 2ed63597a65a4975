import logging
import numpy as np
from .symmetry_operation import encode_symm_str

LOG = logging.getLogger(__name__)

# Absolute tolerance on each of the 12 meaningful entries of the product of two
# fractional matrices (entries are integers and multiples of 1/12)
EQUIVALENCE_TOLERANCE = 1e-6

_MAX_FOLD = 6


class CrystalTransform:
    """
    A space group operator followed by an integer unit cell translation,
    i.e. the transformation taking the asymmetric unit in the origin cell to
    one of its copies in the crystal lattice.

    Two transforms are the same transform if and only if they have the same
    operator index and cell translation (see `signature`). They are
    *equivalent* if their matrices are mutual inverses, which is a weaker,
    geometric relation: the interfaces they generate are identical.

    Args:
        crystal_info (CrystallographicInfo, optional): crystallographic information providing
            the operators; `None` (or non-crystallographic information) only permits the identity
        transform_id (int, optional): index of the operator (0 is always the identity)
        translation (Tuple[int, int, int], optional): integer cell translation (a, b, c)

    Attributes:
        matrix (np.ndarray): (4, 4) transformation acting on Cartesian coordinates
        matrix_fractional (np.ndarray): (4, 4) transformation acting on fractional coordinates
    """

    def __init__(self, crystal_info=None, transform_id=0, translation=(0, 0, 0)):
        self.crystal_info = crystal_info
        self.transform_id = int(transform_id)
        self.translation = tuple(int(x) for x in translation)
        if len(self.translation) != 3:
            raise ValueError("Cell translation must have 3 components")

        if crystal_info is None or not crystal_info.is_crystallographic:
            if self.transform_id != 0 or any(self.translation):
                raise ValueError(
                    "Only the identity transform exists without crystallographic information"
                )
            self.matrix_fractional = np.eye(4)
            self.matrix = np.eye(4)
            return

        if not 0 <= self.transform_id < crystal_info.num_operators:
            raise ValueError(
                "Operator index {} out of range [0, {})".format(
                    self.transform_id, crystal_info.num_operators
                )
            )
        self.matrix_fractional = crystal_info.transformations_fractional()[
            self.transform_id
        ].copy()
        self.matrix_fractional[:3, 3] += self.translation
        self.matrix = crystal_info.transformations_orthonormal()[self.transform_id].copy()
        self.matrix[:3, 3] += crystal_info.translation_orthonormal(self.translation)

    @property
    def signature(self):
        "The (operator index, a, b, c) identity of this transform"
        return (self.transform_id,) + self.translation

    @property
    def sort_key(self):
        "Ordering key (a, b, c, operator index) matching the order of the lattice search"
        return self.translation + (self.transform_id,)

    @property
    def rotation(self) -> np.ndarray:
        "The (3, 3) rotation part in fractional coordinates"
        return self.matrix_fractional[:3, :3]

    @property
    def xyz_string(self) -> str:
        "CIF style string of this transform including its cell translation e.g. '-x,1/2+y,-1-z'"
        return encode_symm_str(
            np.round(self.matrix_fractional[:3, :3]).astype(int),
            self.matrix_fractional[:3, 3],
        )

    def translated(self, translation):
        """
        A copy of this transform with an additional cell translation.

        Args:
            translation (Tuple[int, int, int]): the (a, b, c) translation to add

        Returns:
            CrystalTransform: the translated transform
        """
        new_translation = tuple(t + int(x) for t, x in zip(self.translation, translation))
        return CrystalTransform(self.crystal_info, self.transform_id, new_translation)

    def is_equivalent(self, other) -> bool:
        """
        Whether this transform and `other` are mutual inverses, i.e. their
        product is the identity within `EQUIVALENCE_TOLERANCE`.
        """
        product = np.dot(self.matrix_fractional, other.matrix_fractional)
        return bool(
            np.all(np.abs(product[:3, :] - np.eye(4)[:3, :]) < EQUIVALENCE_TOLERANCE)
        )

    def is_self_equivalent(self) -> bool:
        "Whether this transform is its own inverse (involutory), e.g. a 2-fold with no translation"
        return self.is_equivalent(self)

    def is_identity(self) -> bool:
        "The identity operator in the origin cell"
        return self.transform_id == 0 and not any(self.translation)

    def is_pure_translation(self) -> bool:
        "Whether this transform has no rotation part but some translation (lattice or centering)"
        return np.allclose(self.rotation, np.eye(3)) and not np.allclose(
            self.matrix_fractional[:3, 3], 0.0
        )

    @property
    def fold(self) -> int:
        """
        The order of the rotation part (1 for pure translations, 2 for
        2-folds and 2_1 screws etc.), or 0 if the rotation is not
        crystallographic.
        """
        power = np.eye(3)
        for k in range(1, _MAX_FOLD + 1):
            power = np.dot(power, self.rotation)
            if np.allclose(power, np.eye(3)):
                return k
        return 0

    def is_infinite_generator(self) -> bool:
        """
        Whether repeated application of this transform never returns an object
        to its starting position: the case for pure lattice translations and
        screw axes. An interface between a chain and such an image of itself
        generates an unbounded assembly (a fibre or layer).
        """
        fold = self.fold
        if fold == 0:
            return False
        power = np.linalg.matrix_power(self.matrix_fractional, fold)
        return not np.allclose(power[:3, 3], 0.0, atol=EQUIVALENCE_TOLERANCE)

    def _from_fractional(self, matrix_fractional):
        if self.crystal_info is None or not self.crystal_info.is_crystallographic:
            if np.allclose(matrix_fractional, np.eye(4)):
                return CrystalTransform(self.crystal_info)
            return None
        found = self.crystal_info.find_transform(matrix_fractional)
        if found is None:
            return None
        transform_id, translation = found
        return CrystalTransform(self.crystal_info, transform_id, translation)

    def inverse(self):
        """
        The transform whose matrix is the inverse of this one.

        Returns:
            CrystalTransform or None: the inverse, or None if it is not one of the
            operators available (i.e. the operators do not form a group)
        """
        return self._from_fractional(np.linalg.inv(self.matrix_fractional))

    def compose(self, other):
        """
        The transform equal to applying `other` first, then this transform.

        Returns:
            CrystalTransform or None: the composed transform, or None if it is not
            one of the operators available
        """
        return self._from_fractional(np.dot(self.matrix_fractional, other.matrix_fractional))

    def canonical(self):
        "The member of the pair (self, inverse) that comes first in search order"
        inverse = self.inverse()
        if inverse is None or self.sort_key <= inverse.sort_key:
            return self
        return inverse

    def apply(self, positions: np.ndarray) -> np.ndarray:
        """
        Apply this transform to Cartesian coordinates, returning a new array.

        Args:
            positions (np.ndarray): (N, 3) array of Cartesian coordinates

        Returns:
            np.ndarray: (N, 3) array of transformed Cartesian coordinates
        """
        return np.dot(positions, self.matrix[:3, :3].T) + self.matrix[:3, 3]

    def __eq__(self, other):
        if not isinstance(other, CrystalTransform):
            return NotImplemented
        return self.signature == other.signature

    def __hash__(self):
        return hash(self.signature)

    def __lt__(self, other):
        return self.sort_key < other.sort_key

    def __repr__(self):
        return "<{}: {} [{},{},{}] {}>".format(
            self.__class__.__name__, self.transform_id, *self.translation, self.xyz_string
        )
