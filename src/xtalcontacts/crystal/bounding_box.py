import logging
import numpy as np

LOG = logging.getLogger(__name__)


class BoundingBox:
    """
    An axis aligned bounding box in Cartesian coordinates.

    A box built from no points is empty (lower = +inf, upper = -inf) and
    overlaps nothing.

    Attributes:
        lower (np.ndarray): (3,) minimum corner
        upper (np.ndarray): (3,) maximum corner
    """

    def __init__(self, lower, upper):
        self.lower = np.asarray(lower, dtype=np.float64)
        self.upper = np.asarray(upper, dtype=np.float64)

    @classmethod
    def from_points(cls, points, padding=0.0):
        """
        The bounding box of a set of points, optionally enlarged.

        Args:
            points (np.ndarray): (N, 3) Cartesian coordinates
            padding (float, optional): margin added on every side (default 0)

        Returns:
            BoundingBox: the bounding box
        """
        if len(points) == 0:
            return cls.empty()
        return cls(np.min(points, axis=0) - padding, np.max(points, axis=0) + padding)

    @classmethod
    def empty(cls):
        return cls(np.full(3, np.inf), np.full(3, -np.inf))

    @classmethod
    def union(cls, boxes):
        "The smallest box enclosing all of `boxes`"
        boxes = list(boxes)
        if not boxes:
            return cls.empty()
        return cls(
            np.min([b.lower for b in boxes], axis=0),
            np.max([b.upper for b in boxes], axis=0),
        )

    @property
    def is_empty(self) -> bool:
        return bool(np.any(self.lower > self.upper))

    def overlaps(self, other, cutoff=0.0) -> bool:
        """
        Whether this box and `other` come within `cutoff` of each other
        along all three axes. Never false for two point sets having a
        pair of points within `cutoff` of each other.

        Args:
            other (BoundingBox): the other box
            cutoff (float, optional): distance margin (default 0)

        Returns:
            bool: True if the boxes overlap within the margin
        """
        return bool(
            np.all(self.lower <= other.upper + cutoff)
            and np.all(self.upper >= other.lower - cutoff)
        )

    def translated(self, vector):
        "A copy of this box shifted by a Cartesian vector"
        return BoundingBox(self.lower + vector, self.upper + vector)

    def __repr__(self):
        return "<{}: {} {}>".format(
            self.__class__.__name__,
            np.array2string(self.lower, precision=3),
            np.array2string(self.upper, precision=3),
        )


class UnitCellBoundingBox:
    """
    Bounding boxes of every chain of the asymmetric unit under every
    symmetry operator, i.e. of all the chains in one unit cell.

    The boxes are computed once from the atoms; boxes for any neighbouring
    cell are obtained with `translated`, which only shifts the corners.

    Attributes:
        lower (np.ndarray): (M, N, 3) minimum corners for M operators and N chains
        upper (np.ndarray): (M, N, 3) maximum corners
    """

    def __init__(self, lower, upper):
        self.lower = np.asarray(lower, dtype=np.float64)
        self.upper = np.asarray(upper, dtype=np.float64)
        # union over chains, per operator
        self._au_lower = np.min(self.lower, axis=1) if self.num_chains else None
        self._au_upper = np.max(self.upper, axis=1) if self.num_chains else None

    @property
    def num_operators(self) -> int:
        return self.lower.shape[0]

    @property
    def num_chains(self) -> int:
        return self.lower.shape[1]

    @classmethod
    def from_chains(cls, chains, operators, include_hetero=True, padding=0.0):
        """
        Calculate the bounding boxes of all chains under all operators.

        Args:
            chains (List[Chain]): the N chains of the asymmetric unit
            operators (List[np.ndarray]): M (4, 4) transformations in Cartesian coordinates
            include_hetero (bool, optional): whether hetero atoms are enclosed (default True)
            padding (float, optional): margin added on every side of each box (default 0)

        Returns:
            UnitCellBoundingBox: the boxes for the origin cell
        """
        lower = np.full((len(operators), len(chains), 3), np.inf)
        upper = np.full((len(operators), len(chains), 3), -np.inf)
        for j, chain in enumerate(chains):
            positions = chain.positions[chain.contact_atom_mask(include_hetero)]
            if len(positions) == 0:
                LOG.debug("Chain %s has no atoms for contact calculation", chain.chain_id)
                continue
            for n, op in enumerate(operators):
                transformed = np.dot(positions, op[:3, :3].T) + op[:3, 3]
                lower[n, j] = np.min(transformed, axis=0) - padding
                upper[n, j] = np.max(transformed, axis=0) + padding
        return cls(lower, upper)

    def translated(self, vector):
        """
        A copy of these boxes for the cell displaced by a Cartesian vector.

        Args:
            vector (np.ndarray): (3,) Cartesian translation

        Returns:
            UnitCellBoundingBox: the translated boxes
        """
        return UnitCellBoundingBox(self.lower + vector, self.upper + vector)

    def chain_bounding_box(self, operator, chain) -> BoundingBox:
        "The box of chain `chain` under operator `operator`"
        return BoundingBox(self.lower[operator, chain], self.upper[operator, chain])

    def au_bounding_box(self, operator) -> BoundingBox:
        "The box of the whole asymmetric unit under operator `operator`"
        if not self.num_chains:
            return BoundingBox.empty()
        return BoundingBox(self._au_lower[operator], self._au_upper[operator])

    def __repr__(self):
        return "<{}: {} operators x {} chains>".format(
            self.__class__.__name__, self.num_operators, self.num_chains
        )
