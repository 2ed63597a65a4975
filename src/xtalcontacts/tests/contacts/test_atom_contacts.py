import logging
import unittest
import numpy as np
from xtalcontacts.core import Chain
from xtalcontacts.contacts import AtomContactSet, atoms_in_contact, chains_in_contact

LOG = logging.getLogger(__name__)


class AtomContactsTestCase(unittest.TestCase):
    def test_atoms_in_contact(self):
        a = np.array([[0.0, 0.0, 0.0], [5.0, 0.0, 0.0]])
        b = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [20.0, 0.0, 0.0]])
        contacts = atoms_in_contact(a, b, 1.5)
        self.assertEqual(len(contacts), 2)
        self.assertEqual(contacts.pairs, {(0, 0), (0, 1)})
        # coincident atoms are contacts too
        self.assertAlmostEqual(contacts.min_distance, 0.0)
        self.assertTrue(contacts.has_contacts_within(0.5))
        np.testing.assert_array_equal(contacts.atoms_in_first(), [0])
        np.testing.assert_array_equal(contacts.atoms_in_second(), [0, 1])
        distances = [c.distance for c in contacts]
        np.testing.assert_allclose(distances, [1.0, 0.0])

    def test_no_contacts(self):
        a = np.array([[0.0, 0.0, 0.0]])
        b = np.array([[10.0, 0.0, 0.0]])
        contacts = atoms_in_contact(a, b, 5.0)
        self.assertFalse(contacts)
        self.assertEqual(contacts.min_distance, np.inf)
        empty = atoms_in_contact(np.zeros((0, 3)), b, 5.0)
        self.assertEqual(len(empty), 0)

    def test_reported_indices(self):
        a = np.array([[0.0, 0.0, 0.0]])
        b = np.array([[1.0, 0.0, 0.0]])
        contacts = atoms_in_contact(a, b, 2.0, indices_a=np.array([7]), indices_b=np.array([3]))
        self.assertEqual(list(contacts), [(7, 3, 1.0)])

    def test_chains_in_contact(self):
        a = Chain("A", [[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]], elements=["N", "H"])
        b = Chain(
            "B",
            [[3.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.5, 0.0, 0.0]],
            elements=["C", "D", "Zn"],
            hetero=[False, False, True],
        )
        contacts = chains_in_contact(a, b, 3.5)
        self.assertEqual(contacts.pairs, {(0, 0), (0, 2)})
        contacts = chains_in_contact(a, b, 3.5, include_hetero=False)
        self.assertEqual(contacts.pairs, {(0, 0)})
        self.assertAlmostEqual(contacts.min_distance, 3.0)

    def test_sorted(self):
        s = AtomContactSet([2, 0, 0], [1, 5, 3], [1.0, 2.0, 3.0], 4.0)
        self.assertEqual([(c.i, c.j) for c in s], [(0, 3), (0, 5), (2, 1)])
        np.testing.assert_allclose(s.distances, [3.0, 2.0, 1.0])
