# knowhere

Support code for vector similarity search and for measuring how good its
results are:

- `knowhere.errors`: the `Status` enum and `KnowhereError`, the exception
  raised on failure; its `status` attribute says what went wrong.
  `located_message` prefixes a message with a function, file base name and
  line.
- `knowhere.metric`: `MetricType` (L2, IP, HAMMING, JACCARD, TANIMOTO,
  SUBSTRUCTURE, SUPERSTRUCTURE) and `parse_metric`, which accepts any case.
- `knowhere.range_util`: `RangeSearchResult` (lims, labels, distances) and
  functions to filter and merge range-search hits: `distance_in_range`,
  `count_valid`, `filter_range_result`, `filter_one_query`,
  `merge_range_results`.
- `knowhere.factory`: `IndexFactory`, a registry that builds indexes by name,
  and `get_factory` for the process-wide instance.
- `knowhere.recall`: `GroundTruth`, with recall, hit, accuracy and distance
  checks for k-NN and range results, and `normalize` for unit-length rows.
- `knowhere.binary_set`: `write_binary_set` / `read_binary_set` for named
  binary blobs in one file, and `index_file_name`.
- `knowhere.dataset_name`: parsing of benchmark dataset names such as
  `sift-128-euclidean` into `AnnTestName`.

## Installation

```
pip install .
```

Python 3.10 or later and NumPy are required.

## Examples

Range bounds: for distance metrics a hit is kept when
`range_filter <= d < radius`; for inner product when
`radius < d <= range_filter`.

```python
from knowhere.range_util import RangeSearchResult, distance_in_range, filter_range_result

assert distance_in_range(0.5, 1.0, 0.0, False)
assert not distance_in_range(1.0, 1.0, 0.0, False)

result = RangeSearchResult(
    lims=[0, 3, 4],
    labels=[7, 2, 9, 5],
    distances=[0.2, 1.5, 0.7, 3.0],
)
kept = filter_range_result(result, is_ip=False, radius=1.0, range_filter=0.0)
print(kept.lims.tolist())    # [0, 2, 2]
print(kept.labels.tolist())  # [7, 9]
```

Recall against ground truth:

```python
from knowhere.recall import GroundTruth

truth = GroundTruth(ids=[[1, 2, 3], [4, 5, 6]])
print(truth.calc_recall([1, 9, 3, 4, 5, 0], nq=2, k=3))  # 0.666...
```

Metrics, dataset names and index files:

```python
from knowhere.binary_set import index_file_name, read_binary_set, write_binary_set
from knowhere.dataset_name import parse_range_test_name
from knowhere.metric import MetricType, parse_metric

assert parse_metric("l2") is MetricType.L2

name = parse_range_test_name("sift-128-euclidean-range")
print(name.dim, name.metric, name.metric_type, name.file_name)
# 128 euclidean MetricType.L2 sift-128-euclidean-range.hdf5

path = index_file_name("sift-128-euclidean", "IVF_FLAT", [1024])
# 'sift-128-euclidean_IVF_FLAT_1024.index'
write_binary_set(path, {"index": b"\x01\x02"})
assert read_binary_set(path) == {"index": b"\x01\x02"}
```

Errors are raised as `KnowhereError`; an unknown metric name, for example,
carries `Status.INVALID_METRIC_TYPE`.

## What this package does not do

It performs no search of its own: there is no brute-force or index-based
k-NN or range search over vectors. The factory only holds the builders you
register. It does not validate or coerce search parameters, keep global
tuning settings, or time operations. It does not read HDF5 files: the
dataset-name parser gives the file name, but loading the vectors and ground
truth is up to you, and the recall measures work on arrays you supply.

## Running the tests

```
pip install ".[test]"
pytest
```