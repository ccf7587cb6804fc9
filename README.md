# hysort

Density-based outlier detection on a grid of hypercubes.

Every point of a dataset is mapped to a hypercube by cutting each dimension
of `[0, 1]` into `bins` equal cells. Identical hypercubes are grouped, and
each distinct hypercube gets a *neighbourhood density*: the number of points
in hypercubes whose coordinates differ from its own by at most one in every
dimension (itself included). A point's outlier score is

    (max_density - density) / max_density

so points in sparse regions score close to 1 and points in the densest
region score 0.

Densities can be computed by a naive all-pairs scan or by one of three
sorted-hypercube trees (simple, locality optimised, locality and traversal
optimised), which skip hypercubes that cannot be neighbours.

## Installation

    pip install .

To run the tests:

    pip install .[test]
    pytest

## Command line

    hysort N DIM BIN MINSPLIT NORMALIZE FILE APPROACH TREE_SELECT [--plain]

* `N` – number of lines to read from the file
* `DIM` – number of values per point
* `BIN` – number of cells per dimension
* `MINSPLIT` – a tree node is split further only when it spans more than
  `MINSPLIT` distinct hypercubes
* `NORMALIZE` – `1` to scale every dimension to `[0, 1]`, `0` to use values as is
* `FILE` – comma-separated dataset, one point per line
* `APPROACH` – `0` for the naive strategy, `1` for a tree
* `TREE_SELECT` – `1` simple tree, `2` locality optimised tree,
  `3` locality and traversal optimised tree (`0` is accepted and, with
  `APPROACH` 1, also selects the locality and traversal optimised tree)
* `--plain` – group the raw hypercube coordinates instead of reordering the
  dimensions by spread and packing the coordinates into 64-bit blocks

Invalid values end the command with a usage message. A file that cannot be
opened, or that holds fewer than `N` rows of `DIM` values, is reported on
standard error and the command exits with status 1.

The command prints the chosen settings, the dimension-spread report (mean,
standard deviation and coefficient of variation of the per-dimension
deviations, and whether the dimensions were reordered), the strategy in use,
and the time spent in total, building the hypercubes and computing densities.
It does not print or save the outlier scores themselves; use the library for
those.

## Library use

```python
from hysort.dataset import load_dataset, normalize
from hysort.density import Strategy
from hysort.detector import detect

rows = normalize(load_dataset("points.csv", n=1000, dim=4))
result = detect(rows, bins=5, min_split=0, strategy=Strategy.TRAVERSAL_TREE, encoded=True)

print(result.scores)        # one score per input point
print(result.max_density)
```

`detect` returns a `DetectionResult` holding the scores, the distinct
hypercubes in sorted order with their point counts, point indices and
densities, the strategy used, the variance report (or `None` when
`encoded=False`) and the timings in seconds. `strategy` may also be given as
the strategy's value: `"Naive"`, `"Simple"`, `"Locality optimized"` or
`"Locality and traversal optimized"`.

The lower-level pieces:

* `hysort.dataset` – `load_dataset` (raises `DatasetError`), `normalize`,
  `dimension_spread` (returns a `VarianceReport`), `reorder_by_variance`
* `hysort.encoding` – `find_k`, `hypercube_coordinates` and
  `HypercubeCodec`, which packs hypercube coordinates into 64-bit blocks
  (`encode`) and unpacks them (`decode`)
* `hysort.tree` – `TreeNode`, `FastTreeNode`, `build_linear_tree`,
  `build_locality_tree`, `build_traversal_tree`
* `hysort.density` – `Strategy`, `is_immediate_neighbor`, `naive_density`,
  `tree_density`, `fast_tree_density`, `neighborhood_density`,
  `outlier_scores`
* `hysort.detector` – `group_hypercubes`, `detect` and `DetectionResult`
* `hysort.cli` – `parse_args` and `main`, the command above