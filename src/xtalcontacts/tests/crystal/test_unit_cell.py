import logging
import unittest
import numpy as np
from xtalcontacts.crystal import SpaceGroup, UnitCell

LOG = logging.getLogger(__name__)


class UnitCellTestCase(unittest.TestCase):
    def test_unit_cell_lattice(self):
        c = UnitCell.cubic(2.0)
        np.testing.assert_allclose(c.lattice, 2.0 * np.eye(3), atol=1e-8)
        np.testing.assert_allclose(c.reciprocal_lattice, 0.5 * np.eye(3), atol=1e-8)
        self.assertAlmostEqual(c.volume(), 8.0)

    def test_coordinate_transforms(self):
        c = UnitCell.cubic(2.0)
        np.testing.assert_allclose(
            c.to_fractional(np.eye(3)), 0.5 * np.eye(3), atol=1e-8
        )
        np.testing.assert_allclose(c.to_cartesian(np.eye(3)), 2 * np.eye(3), atol=1e-8)
        hexagonal = UnitCell.hexagonal(3.0, 5.0)
        pts = np.random.rand(10, 3)
        np.testing.assert_allclose(
            hexagonal.to_fractional(hexagonal.to_cartesian(pts)), pts, atol=1e-8
        )

    def test_parameters(self):
        c = UnitCell.from_parameters((30.0, 40.0, 50.0, 90.0, 100.0, 90.0))
        np.testing.assert_allclose(c.parameters, (30.0, 40.0, 50.0, 90.0, 100.0, 90.0))
        self.assertAlmostEqual(c.beta_deg, 100.0)
        self.assertAlmostEqual(c.a, 30.0)
        np.testing.assert_allclose(c.direct[0], (30.0, 0.0, 0.0), atol=1e-8)
        with self.assertRaises(ValueError):
            UnitCell.from_parameters((30.0, 40.0, 50.0))
        with self.assertRaises(ValueError):
            UnitCell.from_lengths_and_angles((0.0, 1.0, 1.0), (90, 90, 90), unit="degrees")
        with self.assertRaises(ValueError):
            UnitCell(np.eye(2))

    def test_handle_bad_angles(self):
        with self.assertLogs("xtalcontacts.crystal.unit_cell", level="WARNING"):
            UnitCell.from_lengths_and_angles([2.0] * 3, [90] * 3)

    def test_dummy_cell(self):
        self.assertTrue(UnitCell.cubic(1.0).is_dummy)
        self.assertFalse(UnitCell.cubic(10.0).is_dummy)

    def test_orthonormal_matrix(self):
        c = UnitCell.hexagonal(40.0, 60.0)
        for seitz in SpaceGroup(152).transformations():
            m = c.orthonormal_matrix(seitz)
            rotation = m[:3, :3]
            # rotations stay rotations in Cartesian space
            np.testing.assert_allclose(np.dot(rotation, rotation.T), np.eye(3), atol=1e-8)
            np.testing.assert_allclose(np.abs(np.linalg.det(rotation)), 1.0)
            np.testing.assert_allclose(c.fractional_matrix(m), seitz, atol=1e-8)
            frac = np.random.rand(5, 3)
            expected = c.to_cartesian(np.dot(frac, seitz[:3, :3].T) + seitz[:3, 3])
            cart = np.dot(c.to_cartesian(frac), rotation.T) + m[:3, 3]
            np.testing.assert_allclose(cart, expected, atol=1e-8)

    def test_repr(self):
        c = UnitCell.cubic(2.0)
        self.assertEqual(str(c), "<UnitCell: (2.000,2.000,2.000,90.00,90.00,90.00)>")
