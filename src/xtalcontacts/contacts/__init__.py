"""Atom contacts between chains and the interfaces they form."""

from .atom_contacts import AtomContactSet, atoms_in_contact, chains_in_contact
from .interface import StructureInterface, StructureInterfaceList

__all__ = [
    "AtomContactSet",
    "StructureInterface",
    "StructureInterfaceList",
    "atoms_in_contact",
    "chains_in_contact",
]
