import logging
import unittest
from xtalcontacts.core import Chain
from xtalcontacts.contacts import (
    StructureInterface,
    StructureInterfaceList,
    chains_in_contact,
)
from xtalcontacts.crystal import CrystallographicInfo, CrystalTransform

LOG = logging.getLogger(__name__)


class StructureInterfaceTestCase(unittest.TestCase):
    def setUp(self):
        self.info = CrystallographicInfo.from_parameters((10, 10, 10, 90, 90, 90), "P 1 21 1")
        self.chain = Chain("A", [[1.0, 0.0, 0.0], [1.0, 2.5, 0.0], [1.0, 5.0, 0.0]])
        self.identity = CrystalTransform(self.info)

    def _interface(self, transform, cutoff=4.0):
        other = self.chain.transformed(transform)
        contacts = chains_in_contact(self.chain, other, cutoff)
        return StructureInterface(
            (self.chain, other), (0, 0), contacts, (self.identity, transform)
        )

    def test_properties(self):
        screw = CrystalTransform(self.info, 1)
        interface = self._interface(screw)
        self.assertEqual(interface.chain_ids, ("A", "A"))
        self.assertEqual(interface.key, (0, 0, (1, 0, 0, 0)))
        self.assertEqual(interface.num_contacts, 3)
        self.assertAlmostEqual(interface.min_distance, 2.0)
        self.assertTrue(interface.is_infinite())
        self.assertIsNone(interface.id)
        summary = interface.summary()
        self.assertEqual(summary["chains"], ["A", "A"])
        self.assertEqual(summary["operator"], 1)
        self.assertEqual(summary["translation"], [0, 0, 0])
        self.assertEqual(summary["transform"], "-x,1/2+y,-z")
        self.assertTrue(summary["infinite"])

    def test_list(self):
        screw = CrystalTransform(self.info, 1)
        shift = CrystalTransform(self.info, 0, (0, 1, 0))
        first = self._interface(screw)
        interfaces = StructureInterfaceList([first])
        self.assertFalse(interfaces.add(self._interface(screw)))
        self.assertTrue(interfaces.add(self._interface(shift, cutoff=6.0)))
        self.assertEqual(len(interfaces), 2)
        self.assertIn(first.key, interfaces)
        self.assertEqual(interfaces.extend([self._interface(screw)]), 0)

        interfaces.sort()
        counts = interfaces.contact_counts()
        self.assertTrue(all(counts[:-1] >= counts[1:]))
        self.assertEqual([x.id for x in interfaces], [1, 2])
        self.assertIs(interfaces.get_by_id(1), interfaces[0])
        with self.assertRaises(KeyError):
            interfaces.get_by_id(3)
