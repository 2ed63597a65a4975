import numpy as np


def cartesian_product(*arrays) -> np.ndarray:
    """
    Efficiently calculate the Cartesian product of the
    provided vectors A x B x C ... etc. This will maintain
    order in loops from the right most array.

    Args:
        *arrays (array_like): 1D arrays to use for the Cartesian product

    Returns:
        np.ndarray: The Cartesian product of the provided vectors.
    """
    arrays = [np.asarray(a) for a in arrays]
    la = len(arrays)
    dtype = np.result_type(*arrays)
    arr = np.empty([len(a) for a in arrays] + [la], dtype=dtype)
    for i, a in enumerate(np.ix_(*arrays)):
        arr[..., i] = a
    return arr.reshape(-1, la)


def cell_translations(num_cells):
    """
    All integer cell translations (a, b, c) with each component in
    [-num_cells, num_cells], ordered with c varying fastest.

    >>> cell_translations(1)[:2]
    [(-1, -1, -1), (-1, -1, 0)]
    >>> len(cell_translations(2))
    125

    Args:
        num_cells (int): the number of neighbouring cells in each direction

    Returns:
        List[Tuple[int, int, int]]: the translations
    """
    r = np.arange(-num_cells, num_cells + 1)
    return [tuple(int(x) for x in t) for t in cartesian_product(r, r, r)]
