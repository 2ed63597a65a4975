"""
Reconstruction of the crystal lattice around an asymmetric unit and
enumeration of all the unique interfaces (contacting pairs of chains)
within it.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
import numpy as np
from xtalcontacts.contacts.atom_contacts import chains_in_contact
from xtalcontacts.contacts.interface import StructureInterface, StructureInterfaceList
from xtalcontacts.util.num import cell_translations
from .bounding_box import UnitCellBoundingBox
from .crystal_info import ConfigurationError
from .crystal_transform import CrystalTransform

LOG = logging.getLogger(__name__)

# Number of neighbouring cells searched in each direction. Only overlapping
# bounding boxes are examined in detail, so extra cells add very little to the
# runtime. A scan of the whole PDB found interfaces as far as the 11th neighbour.
DEFAULT_NUM_CELLS = 12

DEFAULT_INTERFACE_DISTANCE_CUTOFF = 5.5


class SearchStatistics:
    """
    Counters describing the work done by one interface search.

    Attributes:
        pairs_considered (int): chain pairs examined after the symmetry based skips
        contact_trials (int): chain pairs whose boxes overlapped, i.e. exact contact calculations
        skipped_au_no_overlap (int): (cell, operator) combinations rejected by asymmetric unit boxes
        skipped_chains_no_overlap (int): chain pairs rejected by chain boxes
        skipped_redundant (int): transforms skipped as the inverse of one already evaluated
        skipped_self_equivalent (int): chain pairs skipped for involutory transforms
        transforms_evaluated (int): transforms whose chain pairs were examined
        interfaces_found (int): number of unique interfaces
        elapsed (float): wall time in seconds
    """

    COUNTERS = (
        "pairs_considered",
        "contact_trials",
        "skipped_au_no_overlap",
        "skipped_chains_no_overlap",
        "skipped_redundant",
        "skipped_self_equivalent",
        "transforms_evaluated",
        "interfaces_found",
    )

    def __init__(self):
        for name in self.COUNTERS:
            setattr(self, name, 0)
        self.elapsed = 0.0

    def __iadd__(self, other):
        for name in self.COUNTERS:
            setattr(self, name, getattr(self, name) + getattr(other, name))
        self.elapsed += other.elapsed
        return self

    def as_dict(self) -> dict:
        d = {name: getattr(self, name) for name in self.COUNTERS}
        d["elapsed"] = self.elapsed
        return d

    def __repr__(self):
        return "<{}: {} trials, {} interfaces>".format(
            self.__class__.__name__, self.contact_trials, self.interfaces_found
        )


class SearchObserver:
    """
    Receives progress of an interface search. All methods do nothing by
    default; subclasses override those they need. Methods are always
    called from the thread running the search.
    """

    def search_started(self, builder, statistics):
        pass

    def transform_evaluated(self, transform, pairs_considered, interfaces):
        pass

    def cell_finished(self, cell):
        pass

    def search_finished(self, interfaces, statistics):
        pass


class LoggingSearchObserver(SearchObserver):
    "Report the progress of a search through the `logging` module"

    def __init__(self, logger=LOG, level=logging.INFO):
        self.logger = logger
        self.level = level

    def search_started(self, builder, statistics):
        n = builder.num_chains
        neighbours = (2 * builder.effective_num_cells + 1) ** 3 - 1
        au_trials = n * (n - 1) // 2
        trials = n * builder.num_operators * n * neighbours
        self.logger.log(self.level, "Chain clash trials within original AU: %d", au_trials)
        self.logger.log(
            self.level,
            "Chain clash trials between the original AU and %d neighbouring "
            "unit cells (radius %d) (%d chains x %d operators x %d chains): %d",
            neighbours,
            builder.effective_num_cells,
            n,
            builder.num_operators,
            n,
            trials,
        )
        self.logger.log(self.level, "Total trials: %d", au_trials + trials)

    def transform_evaluated(self, transform, pairs_considered, interfaces):
        self.logger.log(
            self.level,
            "%s self-equivalent=%s: %d interfaces (%d chain pairs)",
            transform,
            transform.is_self_equivalent(),
            len(interfaces),
            pairs_considered,
        )

    def search_finished(self, interfaces, statistics):
        self.logger.log(
            self.level,
            "%d chain-chain clash trials done. Time %.3fs",
            statistics.contact_trials,
            statistics.elapsed,
        )
        self.logger.log(self.level, "  skipped (not overlapping AUs)       : %d", statistics.skipped_au_no_overlap)
        self.logger.log(self.level, "  skipped (not overlapping chains)    : %d", statistics.skipped_chains_no_overlap)
        self.logger.log(self.level, "  skipped (sym redundant op pairs)    : %d", statistics.skipped_redundant)
        self.logger.log(self.level, "  skipped (sym redundant self op)     : %d", statistics.skipped_self_equivalent)
        self.logger.log(self.level, "Found %d interfaces.", len(interfaces))


class VisitedTransforms:
    """
    The transforms evaluated so far in a sequential search, keyed by
    signature. A transform whose inverse has been visited is redundant;
    the inverse is then forgotten, as it cannot be matched again.
    """

    def __init__(self):
        self._visited = {}

    def __len__(self):
        return len(self._visited)

    def __contains__(self, transform):
        return transform.signature in self._visited

    def _pop_equivalent(self, transform):
        inverse = transform.inverse()
        if inverse is not None:
            return self._visited.pop(inverse.signature, None)
        # operators not closed under inversion, compare matrices directly
        for signature, visited in self._visited.items():
            if transform.is_equivalent(visited):
                return self._visited.pop(signature)
        return None

    def is_redundant(self, transform) -> bool:
        """
        Check whether `transform` is the inverse of a transform already
        visited; if not, record it as visited.

        Returns:
            bool: True if the transform is redundant
        """
        partner = self._pop_equivalent(transform)
        if partner is not None:
            LOG.debug("Skipping redundant transformation %s, equivalent to %s", transform, partner)
            return True
        self._visited[transform.signature] = transform
        return False


def canonical_redundancy_filter(num_cells):
    """
    A stateless redundancy test for a search over [-num_cells, num_cells]^3:
    a transform is redundant if its inverse is also searched and comes
    first in search order. Safe to call concurrently.

    Args:
        num_cells (int): the number of neighbouring cells searched in each direction

    Returns:
        Callable[[CrystalTransform], bool]: the test
    """

    def is_redundant(transform):
        inverse = transform.inverse()
        if inverse is None or not inverse.sort_key < transform.sort_key:
            return False
        if max(abs(x) for x in inverse.translation) > num_cells:
            return False
        LOG.debug("Skipping redundant transformation %s, inverse of %s", transform, inverse)
        return True

    return is_redundant


class CrystalBuilder:
    """
    Find the interfaces of an asymmetric unit within its crystal by
    applying the space group operators and neighbouring cell translations,
    pruning with bounding boxes and discarding symmetry redundant
    transforms before calculating atom contacts.

    Args:
        asymmetric_unit (AsymmetricUnit): the chains and crystallographic information
        num_cells (int, optional): neighbouring cells searched in each direction
            (default `DEFAULT_NUM_CELLS`); ignored (0) for non-crystallographic entries
        include_hetero (bool, optional): whether hetero atoms take part in contacts (default True)
        verbose (bool, optional): report progress and counters through logging (default False)
        observer (SearchObserver or List[SearchObserver], optional): additional progress observers
        nthreads (int, optional): number of worker threads; above 1 cells are searched
            concurrently (default 1)
        padding (float, optional): margin added on every side of the chain bounding
            boxes before the overlap tests, in Angstroms (default 0)

    Raises:
        ConfigurationError: for a negative `num_cells` or `padding`, `nthreads` < 1,
            or an entry claiming to be crystallographic without a space group or unit cell
    """

    def __init__(
        self,
        asymmetric_unit,
        num_cells=DEFAULT_NUM_CELLS,
        include_hetero=True,
        verbose=False,
        observer=None,
        nthreads=1,
        padding=0.0,
    ):
        if num_cells < 0:
            raise ConfigurationError("Number of cells must be >= 0, got {}".format(num_cells))
        if nthreads < 1:
            raise ConfigurationError("Number of threads must be >= 1, got {}".format(nthreads))
        if not np.isfinite(padding) or padding < 0:
            raise ConfigurationError("Padding must be >= 0, got {}".format(padding))
        asymmetric_unit.crystal_info.validate()
        self.asymmetric_unit = asymmetric_unit
        self.crystal_info = asymmetric_unit.crystal_info
        self.chains = list(asymmetric_unit.chains)
        self.num_chains = len(self.chains)
        self.num_operators = self.crystal_info.num_operators
        self.num_cells = int(num_cells)
        self.include_hetero = include_hetero
        self.verbose = verbose
        self.nthreads = int(nthreads)
        self.padding = float(padding)
        if observer is None:
            self.observers = []
        elif isinstance(observer, SearchObserver):
            self.observers = [observer]
        else:
            self.observers = list(observer)
        if verbose:
            self.observers.insert(0, LoggingSearchObserver())
        self.statistics = SearchStatistics()

    @property
    def effective_num_cells(self) -> int:
        "The search radius in cells, 0 when the entry is not crystallographic"
        if not self.crystal_info.is_crystallographic:
            return 0
        return self.num_cells

    def _notify(self, method, *args):
        for observer in self.observers:
            getattr(observer, method)(*args)

    def get_unique_interfaces(self, cutoff=DEFAULT_INTERFACE_DISTANCE_CUTOFF):
        """
        Find all unique interfaces, i.e. pairs of chains from the original
        asymmetric unit and any of its symmetry copies in the surrounding
        cells having at least one pair of atoms within `cutoff`.

        Args:
            cutoff (float, optional): the contact distance cutoff in Angstroms (default 5.5)

        Returns:
            StructureInterfaceList: the unique interfaces

        Raises:
            ConfigurationError: if the cutoff is not a positive finite number
        """
        if not np.isfinite(cutoff) or cutoff <= 0:
            raise ConfigurationError("Cutoff must be a positive distance, got {}".format(cutoff))
        start = time.perf_counter()
        statistics = SearchStatistics()
        interfaces = StructureInterfaceList()

        operators = self.crystal_info.transformations_orthonormal()
        bb_grid = UnitCellBoundingBox.from_chains(
            self.chains, operators, include_hetero=self.include_hetero, padding=self.padding
        )
        num_cells = self.effective_num_cells
        cells = cell_translations(num_cells)
        LOG.debug(
            "Searching %d cells x %d operators for %d chains, cutoff %.2f",
            len(cells),
            self.num_operators,
            self.num_chains,
            cutoff,
        )
        self._notify("search_started", self, statistics)

        if self.nthreads == 1:
            is_redundant = VisitedTransforms().is_redundant
            for cell in cells:
                result = self._evaluate_cell(cell, bb_grid, cutoff, is_redundant)
                self._collect(cell, result, interfaces, statistics)
        else:
            is_redundant = canonical_redundancy_filter(num_cells)
            with ThreadPoolExecutor(self.nthreads) as e:
                results = e.map(
                    lambda cell: self._evaluate_cell(cell, bb_grid, cutoff, is_redundant),
                    cells,
                )
                for cell, result in zip(cells, results):
                    self._collect(cell, result, interfaces, statistics)

        statistics.interfaces_found = len(interfaces)
        statistics.elapsed = time.perf_counter() - start
        self.statistics = statistics
        self._notify("search_finished", interfaces, statistics)
        return interfaces

    def _collect(self, cell, result, interfaces, statistics):
        evaluated, cell_statistics = result
        for transform, pairs_considered, found in evaluated:
            interfaces.extend(found)
            self._notify("transform_evaluated", transform, pairs_considered, found)
        statistics += cell_statistics
        self._notify("cell_finished", cell)

    def _evaluate_cell(self, cell, bb_grid, cutoff, is_redundant):
        statistics = SearchStatistics()
        evaluated = []
        bb_grid_trans = bb_grid.translated(self.crystal_info.translation_orthonormal(cell))
        au_box = bb_grid.au_bounding_box(0)
        for n in range(self.num_operators):
            if not au_box.overlaps(bb_grid_trans.au_bounding_box(n), cutoff):
                statistics.skipped_au_no_overlap += 1
                continue
            transform = CrystalTransform(self.crystal_info, n, cell)
            if is_redundant(transform):
                statistics.skipped_redundant += 1
                continue
            statistics.transforms_evaluated += 1
            pairs_considered, found = self._evaluate_transform(
                transform, bb_grid, bb_grid_trans, cutoff, statistics
            )
            evaluated.append((transform, pairs_considered, found))
        return evaluated, statistics

    def _evaluate_transform(self, transform, bb_grid, bb_grid_trans, cutoff, statistics):
        self_equivalent = transform.is_self_equivalent()
        identity = transform.is_identity()
        n = transform.transform_id
        reference = CrystalTransform(self.crystal_info)
        transformed_chains = {}
        pairs_considered = 0
        found = []
        for j in range(self.num_chains):
            for i in range(self.num_chains):
                if self_equivalent and j > i:
                    statistics.skipped_self_equivalent += 1
                    continue
                if identity and i == j:
                    continue
                pairs_considered += 1
                box_i = bb_grid.chain_bounding_box(0, i)
                if not box_i.overlaps(bb_grid_trans.chain_bounding_box(n, j), cutoff):
                    statistics.skipped_chains_no_overlap += 1
                    continue
                statistics.contact_trials += 1
                if j not in transformed_chains:
                    chain_j = self.chains[j]
                    transformed_chains[j] = chain_j if identity else chain_j.transformed(transform)
                chain_i = self.chains[i]
                chain_j = transformed_chains[j]
                contacts = chains_in_contact(
                    chain_i, chain_j, cutoff, include_hetero=self.include_hetero
                )
                if contacts:
                    found.append(
                        StructureInterface(
                            (chain_i, chain_j), (i, j), contacts, (reference, transform)
                        )
                    )
        statistics.pairs_considered += pairs_considered
        return pairs_considered, found


def find_interfaces(asymmetric_unit, cutoff=DEFAULT_INTERFACE_DISTANCE_CUTOFF, **kwargs):
    """
    Convenience wrapper: the unique interfaces of an asymmetric unit,
    sorted by decreasing number of contacts.

    Args:
        asymmetric_unit (AsymmetricUnit): the chains and crystallographic information
        cutoff (float, optional): the contact distance cutoff in Angstroms (default 5.5)
        **kwargs: passed to `CrystalBuilder`

    Returns:
        StructureInterfaceList: the unique interfaces
    """
    interfaces = CrystalBuilder(asymmetric_unit, **kwargs).get_unique_interfaces(cutoff)
    interfaces.sort()
    return interfaces
