import logging
import unittest
import numpy as np
from xtalcontacts.crystal import (
    ConfigurationError,
    CrystallographicInfo,
    SpaceGroup,
    UnitCell,
)

LOG = logging.getLogger(__name__)


class CrystallographicInfoTestCase(unittest.TestCase):
    def test_detection(self):
        info = CrystallographicInfo(UnitCell.cubic(10.0), SpaceGroup(4))
        self.assertTrue(info.is_crystallographic)
        self.assertEqual(info.num_operators, 2)
        nmr = CrystallographicInfo(UnitCell.cubic(1.0), SpaceGroup(1))
        self.assertFalse(nmr.is_crystallographic)
        self.assertEqual(nmr.num_operators, 1)
        self.assertFalse(CrystallographicInfo(UnitCell.cubic(10.0)).is_crystallographic)
        forced = CrystallographicInfo(UnitCell.cubic(10.0), SpaceGroup(4), crystallographic=False)
        self.assertFalse(forced.is_crystallographic)

    def test_validate(self):
        info = CrystallographicInfo(unit_cell=UnitCell.cubic(10.0), crystallographic=True)
        with self.assertRaises(ConfigurationError):
            info.validate()
        info = CrystallographicInfo(space_group=SpaceGroup(4), crystallographic=True)
        with self.assertRaises(ConfigurationError):
            info.validate()
        CrystallographicInfo(crystallographic=False).validate()

    def test_transformations(self):
        info = CrystallographicInfo.from_parameters((10.0, 20.0, 30.0, 90, 90, 90), "P 1 21 1")
        frac = info.transformations_fractional()
        ortho = info.transformations_orthonormal()
        self.assertEqual(len(frac), 2)
        np.testing.assert_allclose(ortho[0], np.eye(4), atol=1e-12)
        np.testing.assert_allclose(ortho[1][:3, 3], (0.0, 10.0, 0.0), atol=1e-8)
        np.testing.assert_allclose(
            info.translation_orthonormal((1, -1, 2)), (10.0, -20.0, 60.0), atol=1e-8
        )
        np.testing.assert_allclose(info.translation_orthonormal((0, 0, 0)), np.zeros(3))

        nc = CrystallographicInfo(crystallographic=False)
        self.assertEqual(len(nc.transformations_orthonormal()), 1)
        np.testing.assert_allclose(nc.translation_orthonormal((1, 1, 1)), np.zeros(3))

    def test_find_transform(self):
        info = CrystallographicInfo.from_parameters((10.0, 10.0, 10.0, 90, 90, 90), 4)
        m = info.transformations_fractional()[1].copy()
        m[:3, 3] += (2, -1, 0)
        self.assertEqual(info.find_transform(m), (1, (2, -1, 0)))
        m[1, 3] += 0.25
        self.assertIsNone(info.find_transform(m))
        self.assertEqual(info.find_transform(np.eye(4)), (0, (0, 0, 0)))

    def test_from_parameters(self):
        info = CrystallographicInfo.from_parameters((10.0, 10.0, 10.0, 90, 90, 90), "19")
        self.assertEqual(info.space_group.international_tables_number, 19)
        info = CrystallographicInfo.from_parameters(None, None)
        self.assertFalse(info.is_crystallographic)
        self.assertEqual(repr(info), "<CrystallographicInfo: not crystallographic>")

    def test_rhombohedral_symbol_on_hexagonal_cell(self):
        info = CrystallographicInfo.from_parameters((80.0, 80.0, 60.0, 90, 90, 120), "R 3")
        self.assertEqual(info.space_group.choice, "H")
        self.assertEqual(info.num_operators, 9)
        info = CrystallographicInfo.from_parameters((50.0, 50.0, 50.0, 80, 80, 80), "R 3")
        self.assertEqual(info.space_group.choice, "R")
        self.assertEqual(info.num_operators, 3)
        info = CrystallographicInfo.from_parameters((80.0, 80.0, 60.0, 90, 90, 120), "P 63")
        self.assertEqual(info.num_operators, 6)
