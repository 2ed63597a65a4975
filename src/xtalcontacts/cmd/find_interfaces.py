import json
import logging
import sys
from pathlib import Path
from xtalcontacts import AsymmetricUnit
from xtalcontacts.crystal import ConfigurationError, SearchObserver
from xtalcontacts.crystal.crystal_builder import (
    DEFAULT_INTERFACE_DISTANCE_CUTOFF,
    DEFAULT_NUM_CELLS,
    CrystalBuilder,
)

LOG = logging.getLogger("xtalcontacts-interfaces")


class ProgressSearchObserver(SearchObserver):
    "Show a progress bar over the unit cells searched"

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.bar = None

    def search_started(self, builder, statistics):
        from tqdm import tqdm

        total = (2 * builder.effective_num_cells + 1) ** 3
        self.bar = tqdm(total=total, desc="Searching cells", unit="cell", **self.kwargs)

    def cell_finished(self, cell):
        if self.bar is not None:
            self.bar.update(1)

    def search_finished(self, interfaces, statistics):
        if self.bar is not None:
            self.bar.set_postfix(interfaces=len(interfaces))
            self.bar.close()
            self.bar = None


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(
        description="Find the unique interfaces of an asymmetric unit within its crystal"
    )
    parser.add_argument("input", help="JSON description of the asymmetric unit")
    parser.add_argument("-o", "--output", default=None, help="write the results to this JSON file")
    parser.add_argument(
        "-c",
        "--cutoff",
        type=float,
        default=DEFAULT_INTERFACE_DISTANCE_CUTOFF,
        help="atom contact distance cutoff (Angstroms)",
    )
    parser.add_argument(
        "-n",
        "--num-cells",
        type=int,
        default=DEFAULT_NUM_CELLS,
        help="neighbouring cells to search in each direction",
    )
    parser.add_argument(
        "--no-hetatm", action="store_true", help="exclude hetero atoms from contacts"
    )
    parser.add_argument(
        "--padding",
        type=float,
        default=0.0,
        help="extra margin on the chain bounding boxes (Angstroms)",
    )
    parser.add_argument("-t", "--threads", type=int, default=1)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--progress", action="store_true", help="show a progress bar")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level)

    try:
        asym = AsymmetricUnit.from_json(args.input)
    except (OSError, ValueError, KeyError) as e:
        LOG.error("Could not read asymmetric unit from '%s': %s", args.input, e)
        sys.exit(1)
    LOG.debug("Loaded %s from %s", asym, args.input)

    observers = [ProgressSearchObserver()] if args.progress else []
    try:
        builder = CrystalBuilder(
            asym,
            num_cells=args.num_cells,
            include_hetero=not args.no_hetatm,
            verbose=args.verbose,
            observer=observers,
            nthreads=args.threads,
            padding=args.padding,
        )
        interfaces = builder.get_unique_interfaces(args.cutoff)
    except ConfigurationError as e:
        LOG.error("Invalid configuration: %s", e)
        sys.exit(1)
    interfaces.sort()

    result = {
        "name": asym.name,
        "cutoff": args.cutoff,
        "num_cells": builder.effective_num_cells,
        "interfaces": [x.summary() for x in interfaces],
        "statistics": builder.statistics.as_dict(),
    }
    text = json.dumps(result, indent=2)
    if args.output is None:
        sys.stdout.write(text + "\n")
    else:
        Path(args.output).write_text(text)
        LOG.info("Wrote %d interfaces to %s", len(interfaces), args.output)


if __name__ == "__main__":
    main()
