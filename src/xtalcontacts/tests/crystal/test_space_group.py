import logging
import unittest
import numpy as np
from xtalcontacts.crystal import SpaceGroup, SymmetryOperation

LOG = logging.getLogger(__name__)

# operations per unit cell of the 65 Sohncke groups, rhombohedral ones on hexagonal axes
SOHNCKE_MULTIPLICITY = {
    1: 1, 3: 2, 4: 2, 5: 4,
    16: 4, 17: 4, 18: 4, 19: 4, 20: 8, 21: 8, 22: 16, 23: 8, 24: 8,
    75: 4, 76: 4, 77: 4, 78: 4, 79: 8, 80: 8,
    89: 8, 90: 8, 91: 8, 92: 8, 93: 8, 94: 8, 95: 8, 96: 8, 97: 16, 98: 16,
    143: 3, 144: 3, 145: 3, 146: 9,
    149: 6, 150: 6, 151: 6, 152: 6, 153: 6, 154: 6, 155: 18,
    168: 6, 169: 6, 170: 6, 171: 6, 172: 6, 173: 6,
    177: 12, 178: 12, 179: 12, 180: 12, 181: 12, 182: 12,
    195: 12, 196: 48, 197: 24, 198: 12, 199: 24,
    207: 24, 208: 24, 209: 96, 210: 96, 211: 48, 212: 24, 213: 24, 214: 48,
}


class SpaceGroupTestCase(unittest.TestCase):
    def test_construction(self):
        sg = SpaceGroup(19)
        self.assertEqual(sg.symbol, "P212121")
        self.assertEqual(sg.full_symbol, "P 21 21 21")
        self.assertEqual(sg.multiplicity, 4)
        self.assertEqual(len(sg), 4)
        self.assertFalse(sg.centrosymmetric)
        self.assertTrue(SpaceGroup(2).centrosymmetric)

    def test_bad_numbers(self):
        for number in (0, 231):
            with self.assertRaises(ValueError):
                SpaceGroup(number)
        # tabulated only for the common macromolecular groups
        with self.assertRaises(ValueError):
            SpaceGroup(14)
        with self.assertRaises(ValueError):
            SpaceGroup(4, choice="z")

    def test_from_symbol(self):
        self.assertEqual(SpaceGroup.from_symbol("P 21 21 21").international_tables_number, 19)
        self.assertEqual(SpaceGroup.from_symbol("p212121").international_tables_number, 19)
        self.assertEqual(SpaceGroup.from_symbol("P 1 21 1").international_tables_number, 4)
        self.assertEqual(SpaceGroup.from_symbol("P21").international_tables_number, 4)
        self.assertEqual(SpaceGroup.from_symbol("H 3").international_tables_number, 146)
        self.assertEqual(SpaceGroup.from_symbol("C 1 2 1").multiplicity, 4)
        with self.assertRaises(ValueError):
            SpaceGroup.from_symbol("P 42/n b c")
        for number in SOHNCKE_MULTIPLICITY:
            sg = SpaceGroup(number)
            self.assertEqual(SpaceGroup.from_symbol(sg.full_symbol), sg, msg=sg.full_symbol)
            found = SpaceGroup.from_symbol(sg.symbol)
            self.assertEqual(found.international_tables_number, number, msg=sg.symbol)

    def test_common_protein_symbols(self):
        for symbol, number in (
            ("P 63", 173),
            ("P 41 2 2", 91),
            ("P 43 2 2", 95),
            ("P 42 21 2", 94),
            ("I 41", 80),
            ("P 31 1 2", 151),
            ("P 62 2 2", 180),
            ("I 2 3", 197),
            ("F 2 2 2", 22),
            ("P 65", 170),
        ):
            self.assertEqual(SpaceGroup.from_symbol(symbol).international_tables_number, number)

    def test_multiplicity(self):
        for number, multiplicity in SOHNCKE_MULTIPLICITY.items():
            sg = SpaceGroup(number)
            self.assertEqual(sg.multiplicity, multiplicity, msg=str(number))
            self.assertEqual(len(set(sg.symmetry_operations)), multiplicity, msg=str(number))
            self.assertFalse(sg.centrosymmetric, msg=str(number))

    def test_rhombohedral_settings(self):
        hexagonal = SpaceGroup(146)
        self.assertEqual(hexagonal.choice, "H")
        self.assertEqual(hexagonal.multiplicity, 9)
        rhombohedral = SpaceGroup.from_symbol("R 3")
        self.assertEqual(rhombohedral.choice, "R")
        self.assertEqual(rhombohedral.multiplicity, 3)
        self.assertTrue(rhombohedral.is_closed())
        self.assertNotEqual(rhombohedral, hexagonal)
        r32 = SpaceGroup(155, choice="R")
        self.assertEqual(r32.multiplicity, 6)
        self.assertTrue(r32.is_closed())
        self.assertEqual(SpaceGroup.from_symbol("H 3 2"), SpaceGroup(155))

    def test_closed(self):
        for number in SOHNCKE_MULTIPLICITY:
            self.assertTrue(SpaceGroup(number).is_closed(), msg=str(number))
        self.assertTrue(SpaceGroup(2).is_closed())

    def test_ordered_symmetry_operations(self):
        for number in (1, 4, 19, 146, 152, 198):
            sg = SpaceGroup(number)
            ops = sg.ordered_symmetry_operations()
            self.assertTrue(ops[0].is_identity())
            self.assertEqual(len(ops), sg.multiplicity)
            transformations = sg.transformations()
            np.testing.assert_allclose(transformations[0], np.eye(4))

    def test_from_symmetry_operations(self):
        ops = [SymmetryOperation.from_string_code(s) for s in ("-x,y+1/2,-z",)]
        sg = SpaceGroup.from_symmetry_operations(ops)
        self.assertEqual(sg.international_tables_number, 4)
        self.assertEqual(sg, SpaceGroup(4))

        ops = [SymmetryOperation.from_string_code(s) for s in ("x,y,z", "x+1/4,y,z")]
        sg = SpaceGroup.from_symmetry_operations(ops)
        self.assertEqual(sg.international_tables_number, 0)
        self.assertEqual(sg.multiplicity, 2)
        self.assertFalse(sg.is_closed())

    def test_operation_strings(self):
        lines = [str(s) for s in SpaceGroup(4).ordered_symmetry_operations()]
        self.assertEqual(lines, ["+x,+y,+z", "-x,1/2+y,-z"])
