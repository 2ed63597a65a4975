import logging
from collections import namedtuple
import numpy as np
from scipy.spatial import cKDTree as KDTree

LOG = logging.getLogger(__name__)

AtomContact = namedtuple("AtomContact", "i j distance")


class AtomContactSet:
    """
    The atom pairs, one atom from each of two chains, that lie within
    a distance cutoff of each other.

    Attributes:
        i (np.ndarray): indices of the contacting atoms in the first chain
        j (np.ndarray): indices of the contacting atoms in the second chain
        distances (np.ndarray): distances between each pair (Angstroms)
        cutoff (float): the cutoff used to find the contacts
    """

    def __init__(self, i, j, distances, cutoff):
        order = np.lexsort((j, i))
        self.i = np.asarray(i, dtype=np.int64)[order]
        self.j = np.asarray(j, dtype=np.int64)[order]
        self.distances = np.asarray(distances, dtype=np.float64)[order]
        self.cutoff = cutoff

    def __len__(self):
        return len(self.distances)

    def __iter__(self):
        for i, j, d in zip(self.i, self.j, self.distances):
            yield AtomContact(int(i), int(j), float(d))

    def __bool__(self):
        return len(self) > 0

    @property
    def pairs(self):
        "Set of (i, j) index pairs in contact"
        return set(zip(self.i.tolist(), self.j.tolist()))

    @property
    def min_distance(self) -> float:
        "The closest contact distance, inf if there are no contacts"
        if not len(self):
            return np.inf
        return float(np.min(self.distances))

    def has_contacts_within(self, distance) -> bool:
        "Whether any contact is closer than `distance`"
        return bool(np.any(self.distances <= distance))

    def atoms_in_first(self) -> np.ndarray:
        "Unique indices of the contacting atoms in the first chain"
        return np.unique(self.i)

    def atoms_in_second(self) -> np.ndarray:
        "Unique indices of the contacting atoms in the second chain"
        return np.unique(self.j)

    def __repr__(self):
        return "<{}: {} contacts, cutoff={:.2f}>".format(
            self.__class__.__name__, len(self), self.cutoff
        )


def atoms_in_contact(positions_a, positions_b, cutoff, indices_a=None, indices_b=None):
    """
    Find all pairs of atoms (one from each set) within `cutoff` of each other.

    Args:
        positions_a (np.ndarray): (N, 3) Cartesian coordinates of the first set
        positions_b (np.ndarray): (M, 3) Cartesian coordinates of the second set
        cutoff (float): distance cutoff (Angstroms), pairs with distance <= cutoff are returned
        indices_a (np.ndarray, optional): indices to report for the rows of `positions_a`
        indices_b (np.ndarray, optional): indices to report for the rows of `positions_b`

    Returns:
        AtomContactSet: the contacting pairs
    """
    if indices_a is None:
        indices_a = np.arange(len(positions_a))
    if indices_b is None:
        indices_b = np.arange(len(positions_b))
    if len(positions_a) == 0 or len(positions_b) == 0:
        return AtomContactSet([], [], [], cutoff)
    tree_a = KDTree(positions_a)
    tree_b = KDTree(positions_b)
    dists = tree_a.sparse_distance_matrix(tree_b, max_distance=cutoff, output_type="ndarray")
    return AtomContactSet(indices_a[dists["i"]], indices_b[dists["j"]], dists["v"], cutoff)


def chains_in_contact(chain_a, chain_b, cutoff, include_hetero=True):
    """
    Find the atom contacts between two chains, excluding hydrogens and
    optionally hetero atoms. Reported indices refer to the full atom arrays
    of the chains.

    Args:
        chain_a (Chain): the first chain
        chain_b (Chain): the second chain
        cutoff (float): distance cutoff (Angstroms)
        include_hetero (bool, optional): whether hetero atoms are considered (default True)

    Returns:
        AtomContactSet: the contacting pairs
    """
    idx_a = chain_a.contact_atom_indices(include_hetero)
    idx_b = chain_b.contact_atom_indices(include_hetero)
    return atoms_in_contact(
        chain_a.positions[idx_a],
        chain_b.positions[idx_b],
        cutoff,
        indices_a=idx_a,
        indices_b=idx_b,
    )
