"""Interfaces between pairs of chains and collections of them."""
import logging
import numpy as np

LOG = logging.getLogger(__name__)


class StructureInterface:
    """
    An interface: a chain of the original asymmetric unit together with a
    (possibly symmetry related) chain it contacts.

    Args:
        chains (Tuple[Chain, Chain]): the original chain and the transformed chain
        chain_indices (Tuple[int, int]): indices of both chains in the asymmetric unit
        contacts (AtomContactSet): the contacting atom pairs
        transforms (Tuple[CrystalTransform, CrystalTransform]): the transform of each
            chain, the first always being the identity

    Attributes:
        id (int): 1 based identifier, assigned by `StructureInterfaceList.sort`
    """

    def __init__(self, chains, chain_indices, contacts, transforms):
        self.chains = tuple(chains)
        self.chain_indices = tuple(int(x) for x in chain_indices)
        self.contacts = contacts
        self.transforms = tuple(transforms)
        self.id = None

    @property
    def chain_ids(self):
        return tuple(c.chain_id for c in self.chains)

    @property
    def transform(self):
        "The transform generating the second chain"
        return self.transforms[1]

    @property
    def key(self):
        "(i, j, signature of the transform) identifying this interface"
        return self.chain_indices + (self.transform.signature,)

    @property
    def num_contacts(self) -> int:
        return len(self.contacts)

    @property
    def min_distance(self) -> float:
        return self.contacts.min_distance

    @property
    def atoms(self):
        "The atom positions of the original and the transformed chain"
        return self.chains[0].positions, self.chains[1].positions

    def is_infinite(self) -> bool:
        """
        True if this interface relates a chain to an image of itself under
        a screw axis or lattice translation, and so repeats indefinitely.
        """
        return (
            self.chain_indices[0] == self.chain_indices[1]
            and self.transform.is_infinite_generator()
        )

    def summary(self) -> dict:
        "A JSON serializable description of this interface"
        return {
            "id": self.id,
            "chains": list(self.chain_ids),
            "operator": self.transform.transform_id,
            "translation": list(self.transform.translation),
            "transform": self.transform.xyz_string,
            "num_contacts": self.num_contacts,
            "min_distance": round(self.min_distance, 3),
            "infinite": self.is_infinite(),
        }

    def __repr__(self):
        return "<{} {}: {}-{} {} contacts={}>".format(
            self.__class__.__name__,
            self.id,
            self.chain_ids[0],
            self.chain_ids[1],
            self.transform.xyz_string,
            self.num_contacts,
        )


class StructureInterfaceList:
    """
    An unordered collection of interfaces, with at most one interface
    per (i, j, transform) key.
    """

    def __init__(self, interfaces=None):
        self._interfaces = {}
        if interfaces is not None:
            self.extend(interfaces)

    def add(self, interface) -> bool:
        """
        Add an interface unless one with the same key is already present.

        Returns:
            bool: True if the interface was added
        """
        key = interface.key
        if key in self._interfaces:
            LOG.debug("Interface %s already present", key)
            return False
        self._interfaces[key] = interface
        return True

    def extend(self, interfaces) -> int:
        "Add several interfaces, returning how many were new"
        return sum(self.add(x) for x in interfaces)

    def __len__(self):
        return len(self._interfaces)

    def __iter__(self):
        return iter(list(self._interfaces.values()))

    def __getitem__(self, idx):
        return list(self._interfaces.values())[idx]

    def __contains__(self, key):
        return key in self._interfaces

    @property
    def keys(self):
        return set(self._interfaces.keys())

    def sort(self):
        """
        Order the interfaces by decreasing number of contacts (ties broken
        by key) and assign ids 1..n in that order.
        """
        ordered = sorted(
            self._interfaces.values(), key=lambda x: (-x.num_contacts, x.key)
        )
        self._interfaces = {}
        for i, interface in enumerate(ordered, start=1):
            interface.id = i
            self._interfaces[interface.key] = interface

    def get_by_id(self, interface_id):
        for interface in self._interfaces.values():
            if interface.id == interface_id:
                return interface
        raise KeyError(interface_id)

    def contact_counts(self) -> np.ndarray:
        return np.array([x.num_contacts for x in self._interfaces.values()], dtype=int)

    def __repr__(self):
        return "<{}: {} interfaces>".format(self.__class__.__name__, len(self))
