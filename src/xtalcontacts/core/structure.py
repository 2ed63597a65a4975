import json
import logging
from pathlib import Path
import numpy as np
from xtalcontacts.crystal.crystal_info import CrystallographicInfo

LOG = logging.getLogger(__name__)

_HYDROGEN_SYMBOLS = ("H", "D")


class Chain:
    """
    Storage class for one chain (molecule) of an asymmetric unit: an
    ordered set of atoms with Cartesian coordinates.

    Chains are never modified in place by the interface search; symmetry
    copies are produced by `Chain.transformed`.

    Attributes:
        chain_id (str): identifier of this chain e.g. 'A'
        positions (np.ndarray): (N, 3) array of Cartesian coordinates (Angstroms)
        elements (np.ndarray): (N,) array of element symbols
        hetero (np.ndarray): (N,) boolean array, True for hetero atoms (HETATM records)
        labels (np.ndarray): (N,) array of atom labels
        properties (dict): additional keyword arguments given at construction
    """

    positions: np.ndarray
    elements: np.ndarray
    hetero: np.ndarray
    labels: np.ndarray

    def __init__(self, chain_id, positions, elements=None, hetero=None, labels=None, **kwargs):
        """
        Initialize a new chain.

        Arguments:
            chain_id (str): identifier of the chain
            positions (array_like): (N, 3) array of Cartesian coordinates
            elements (array_like, optional): N element symbols, defaults to carbon
            hetero (array_like, optional): N booleans flagging hetero atoms, defaults to False
            labels (array_like, optional): N atom labels, defaults to the element symbol and
                a running number
            **kwargs: Additional properties to store in this chain
        """
        self.chain_id = str(chain_id)
        positions = np.asarray(positions, dtype=np.float64)
        if positions.size == 0:
            positions = positions.reshape(0, 3)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(
                "Chain {} positions must be an (N, 3) array, got shape {}".format(
                    self.chain_id, positions.shape
                )
            )
        self.positions = positions
        natoms = len(positions)
        if elements is None:
            elements = ["C"] * natoms
        if hetero is None:
            hetero = np.zeros(natoms, dtype=bool)
        self.elements = np.array([str(x).strip().capitalize() for x in elements])
        self.hetero = np.asarray(hetero, dtype=bool)
        if labels is None:
            labels = ["{}{}".format(el, i) for i, el in enumerate(self.elements, start=1)]
        self.labels = np.array(labels)
        for name in ("elements", "hetero", "labels"):
            if len(getattr(self, name)) != natoms:
                raise ValueError(
                    "Chain {}: {} has length {}, expected {}".format(
                        self.chain_id, name, len(getattr(self, name)), natoms
                    )
                )
        self.properties = {}
        self.properties.update(kwargs)

    def __len__(self):
        return len(self.positions)

    def __iter__(self):
        for atom in zip(self.elements, self.positions):
            yield atom

    def contact_atom_mask(self, include_hetero=True) -> np.ndarray:
        """
        Mask of the atoms taking part in contact calculations: all
        non-hydrogen atoms, optionally excluding hetero atoms.

        Args:
            include_hetero (bool, optional): whether hetero atoms are included (default True)

        Returns:
            np.ndarray: (N,) boolean mask
        """
        mask = ~np.isin(self.elements, _HYDROGEN_SYMBOLS)
        if not include_hetero:
            mask &= ~self.hetero
        return mask

    def contact_atom_indices(self, include_hetero=True) -> np.ndarray:
        "Indices of the atoms given by `contact_atom_mask`"
        return np.flatnonzero(self.contact_atom_mask(include_hetero=include_hetero))

    def transformed(self, transform):
        """
        A copy of this chain with coordinates transformed.

        Args:
            transform (CrystalTransform or np.ndarray): a transform with an `apply` method,
                or a (4, 4) matrix acting on Cartesian coordinates

        Returns:
            Chain: a new chain sharing labels and elements with this one
        """
        if hasattr(transform, "apply"):
            positions = transform.apply(self.positions)
        else:
            matrix = np.asarray(transform)
            positions = np.dot(self.positions, matrix[:3, :3].T) + matrix[:3, 3]
        return Chain(
            self.chain_id,
            positions,
            elements=self.elements,
            hetero=self.hetero,
            labels=self.labels,
            **self.properties
        )

    @property
    def centroid(self) -> np.ndarray:
        "Mean position of the atoms in this chain"
        return np.mean(self.positions, axis=0)

    @classmethod
    def from_dict(cls, d):
        """
        Construct a chain from a dictionary with keys `id`, `positions` and
        optionally `elements`, `hetero` and `labels`.
        """
        return cls(
            d["id"],
            d["positions"],
            elements=d.get("elements"),
            hetero=d.get("hetero"),
            labels=d.get("labels"),
        )

    def __repr__(self):
        return "<{} {}: {} atoms>".format(self.__class__.__name__, self.chain_id, len(self))


class AsymmetricUnit:
    """
    Storage class for the chains of an asymmetric unit, along with the
    crystallographic information needed to rebuild the lattice around it.

    Attributes:
        chains (List[Chain]): the N chains, in order
        crystal_info (CrystallographicInfo): unit cell and space group information
        name (str): an optional name for this entry
    """

    def __init__(self, chains, crystal_info=None, name=None):
        self.chains = list(chains)
        if crystal_info is None:
            crystal_info = CrystallographicInfo(crystallographic=False)
        self.crystal_info = crystal_info
        self.name = name

    def __len__(self):
        return len(self.chains)

    def __iter__(self):
        return iter(self.chains)

    def __getitem__(self, idx):
        return self.chains[idx]

    @property
    def is_crystallographic(self) -> bool:
        "Whether the lattice should be reconstructed for this entry"
        return self.crystal_info.is_crystallographic

    @property
    def chain_ids(self):
        "Identifiers of the chains in order"
        return [c.chain_id for c in self.chains]

    @classmethod
    def from_dict(cls, d):
        """
        Construct an asymmetric unit from a dictionary such as

        ```
        {
            "name": "1abc",
            "cell": [a, b, c, alpha, beta, gamma],
            "space_group": "P 21 21 21",
            "crystallographic": true,
            "chains": [{"id": "A", "positions": [[x, y, z], ...]}, ...]
        }
        ```

        where `cell`, `space_group` and `crystallographic` are optional and
        angles are in degrees.
        """
        crystal_info = CrystallographicInfo.from_parameters(
            cell_parameters=d.get("cell"),
            space_group=d.get("space_group"),
            crystallographic=d.get("crystallographic"),
        )
        chains = [Chain.from_dict(c) for c in d["chains"]]
        LOG.debug("Read %d chains, %s", len(chains), crystal_info)
        return cls(chains, crystal_info=crystal_info, name=d.get("name"))

    @classmethod
    def from_json(cls, filename):
        "Read an asymmetric unit from a JSON file in the format of `from_dict`"
        path = Path(filename)
        d = json.loads(path.read_text())
        d.setdefault("name", path.stem)
        return cls.from_dict(d)

    def __repr__(self):
        return "<{}: {} chains, {}>".format(
            self.__class__.__name__, len(self.chains), self.crystal_info
        )
