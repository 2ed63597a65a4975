"""
Space groups for macromolecular crystals, read from a bundled table
(`sgdata.json`) of the Sohncke groups (plus P-1) met in the PDB.
"""
import json
import logging
import os
from collections import namedtuple
import numpy as np
from .symmetry_operation import SymmetryOperation, expanded_symmetry_list

LOG = logging.getLogger(__name__)

SpaceGroupData = namedtuple("SpaceGroupData", "number short full choice centering symops")


def _normalize_symbol(symbol):
    return symbol.replace(" ", "").replace("_", "").upper()


def _load_table(filename):
    with open(filename) as f:
        raw = json.load(f)
    return {int(k): [SpaceGroupData._make(x) for x in v] for k, v in raw.items()}


def _entry_symmetry_operations(entry):
    # the table lists operations without their centering translations
    symops = [SymmetryOperation.from_string_code(s) for s in entry.symops]
    return expanded_symmetry_list(symops, entry.centering)


SG_FROM_NUMBER = _load_table(os.path.join(os.path.dirname(__file__), "sgdata.json"))

SG_FROM_SYMBOL = {}
SG_FROM_SYMOPS = {}
for _entries in SG_FROM_NUMBER.values():
    for _entry in _entries:
        SG_FROM_SYMBOL[_normalize_symbol(_entry.short)] = _entry
        SG_FROM_SYMBOL[_normalize_symbol(_entry.full)] = _entry
        _keys = frozenset(s.key for s in _entry_symmetry_operations(_entry))
        SG_FROM_SYMOPS[_keys] = _entry


class SpaceGroup:
    """
    A crystallographic space group: its symbols and the symmetry
    operations of one unit cell, in fractional coordinates.

    Groups in the bundled table can be constructed from their number or
    symbol; any other set of operations can still be wrapped with
    `SpaceGroup.from_symmetry_operations`.

    Args:
        international_tables_number (int): number from 1 to 230
        choice (str, optional): setting, for groups tabulated with more than one
            i.e. 'H' (hexagonal axes, the default) or 'R' for rhombohedral groups

    Attributes:
        symbol (str): short Hermann-Mauguin symbol e.g. 'P212121'
        full_symbol (str): full symbol e.g. 'P 21 21 21', as used in PDB files
        centering (str): lattice centering e.g. 'primitive', 'cface', 'face'
        symmetry_operations (List[SymmetryOperation]): the operations of this group

    Raises:
        ValueError: for numbers outside 1-230 or not in the bundled table
    """

    def __init__(self, international_tables_number, choice=""):
        number = int(international_tables_number)
        if not 1 <= number <= 230:
            raise ValueError("Space group number must be between [1, 230], got {}".format(number))
        entries = SG_FROM_NUMBER.get(number)
        if entries is None:
            raise ValueError(
                "Space group {} is not tabulated, construct it from "
                "its symmetry operations instead".format(number)
            )
        matching = [x for x in entries if not choice or x.choice == choice]
        if not matching:
            raise ValueError("No setting '{}' for space group {}".format(choice, number))
        entry = matching[0]
        self._set_data(entry, _entry_symmetry_operations(entry))

    def _set_data(self, entry, symmetry_operations):
        self.international_tables_number = entry.number
        self.symbol = entry.short
        self.full_symbol = entry.full
        self.choice = entry.choice
        self.centering = entry.centering
        self.symmetry_operations = symmetry_operations

    @property
    def multiplicity(self) -> int:
        "Number of operations, i.e. of asymmetric units in the unit cell"
        return len(self.symmetry_operations)

    def __len__(self):
        return self.multiplicity

    @property
    def centrosymmetric(self) -> bool:
        return SymmetryOperation.identity().inverted() in self.symmetry_operations

    def ordered_symmetry_operations(self):
        """
        The symmetry operations with the identity moved to the front,
        the order of the others preserved.

        Raises:
            ValueError: if the group has no identity operation
        """
        identities = [s for s in self.symmetry_operations if s.is_identity()]
        if not identities:
            raise ValueError("Space group has no identity operation")
        return identities[:1] + [s for s in self.symmetry_operations if not s.is_identity()]

    def transformations(self):
        "(4, 4) Seitz matrices in fractional coordinates, identity first"
        return [s.seitz_matrix for s in self.ordered_symmetry_operations()]

    def is_closed(self) -> bool:
        "Whether all products of operations are again operations of this group, modulo lattice translations"
        keys = set(s.key for s in self.symmetry_operations)
        for a in self.symmetry_operations:
            for b in self.symmetry_operations:
                product = np.dot(a.seitz_matrix, b.seitz_matrix)
                if SymmetryOperation.from_seitz_matrix(product).key not in keys:
                    return False
        return True

    def __eq__(self, other):
        return set(self.symmetry_operations) == set(other.symmetry_operations)

    def __hash__(self):
        return hash(frozenset(self.symmetry_operations))

    def __repr__(self):
        return "<{} {}: {}>".format(
            self.__class__.__name__, self.international_tables_number, self.full_symbol
        )

    @classmethod
    def from_symmetry_operations(cls, symops):
        """
        The space group having exactly the given operations. The identity
        is added if missing. When the operations match no tabulated group
        the result has number 0 and empty symbols.

        Args:
            symops (List[SymmetryOperation]): the operations

        Returns:
            SpaceGroup: the space group
        """
        symops = list(symops)
        if not any(s.is_identity() for s in symops):
            LOG.debug("Adding identity to %d symmetry operations", len(symops))
            symops.insert(0, SymmetryOperation.identity())
        entry = SG_FROM_SYMOPS.get(frozenset(s.key for s in symops))
        if entry is not None:
            return cls(entry.number, choice=entry.choice)
        LOG.debug("No tabulated space group for %d symmetry operations", len(symops))
        sg = cls.__new__(cls)
        sg._set_data(SpaceGroupData(0, "", "", "", "primitive", [str(s) for s in symops]), symops)
        return sg

    @classmethod
    def from_symbol(cls, symbol):
        """
        Look up a space group by symbol, as written in a PDB CRYST1 record
        ('P 21 21 21', 'P 1 21 1', 'H 3') or in short form ('P212121').
        Case, whitespace and underscores are ignored.

        Raises:
            ValueError: if the symbol is not in the bundled table
        """
        entry = SG_FROM_SYMBOL.get(_normalize_symbol(symbol))
        if entry is None:
            raise ValueError("Could not find matching space group for '{}'".format(symbol))
        return cls(entry.number, choice=entry.choice)
