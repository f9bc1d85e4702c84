# dvision

Computer vision utilities built on NumPy and SciPy: BRIEF binary
descriptors, patch extraction, RANSAC estimation of fundamental matrices
and homographies, and readers and writers for several reconstruction file
formats.

## Installation

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### Descriptors and images

- `dvision.brief`
  - `Brief(nbits=256, patch_size=48, pair_type=PairType.RANDOM_CLOSE)` draws
    a random test pattern when created. `compute(image, points, treat_image=True)`
    (also available by calling the object) returns one boolean NumPy array per
    point. Points are `KeyPoint` objects or `(x, y)` pairs. With `treat_image`
    the image is converted to grayscale if it has colour channels and smoothed
    with a 9x9 Gaussian. Without it the image must already be a 2-D `uint8`
    array, or `DVisionError` is raised.
  - `export_pairs()` returns `(x1, y1, x2, y2)`. `import_pairs(x1, y1, x2, y2)`
    replaces the pattern, and the descriptor length follows it.
  - `Brief.distance(a, b)` gives the Hamming distance.
  - `Brief256(patch_size=48, pair_type=...)` has a fixed length of 256 bits,
    and its `import_pairs` accepts exactly 256 pairs.
  - `PairType.RANDOM` draws both points of a pair around the patch centre.
    `PairType.RANDOM_CLOSE` draws the second point close to the first.
- `dvision.imagefunctions`
  - `KeyPoint(x, y, size=0.0, angle=-1.0)` describes a keypoint. An angle of -1
    means it has no orientation.
  - `get_patch(image, center, patch_size)` returns a copy of the square around
    `center = (x, y)`, cropped to the image. The result is empty if the image
    is empty or the patch starts beyond it.
  - `get_keypoint_patch(image, keypoint, final_size=-1, rectify_orientation=True, use_cartesian_angle=False)`
    uses the keypoint size as the diameter. It rotates the patch to cancel the
    keypoint angle if the keypoint has one and `rectify_orientation` is set.
    It resizes the patch bilinearly to `final_size` x `final_size` when
    `final_size` is not negative.

### Geometry

- `dvision.fsolver`
  - `FSolver(cols=1, rows=1)` estimates F with `x1' F x2 = 0` from at least 8
    correspondences.
  - `find_fundamental_mat(p1, p2, reprojection_error, min_points=9, compute_f=True, probability=0.99, max_its=500)`
    returns `(F, status)`. `status[i]` is 1 for inliers and 0 otherwise.
    `F` is `None` when no consistent matrix is found. With
    `compute_f=False` the search stops at the first acceptable model and the
    identity is returned in place of F.
  - `check_fundamental_mat(...)` returns only whether such a matrix exists.
  - `normalize_points(points)` turns 2xN, 3xN, Nx2 or Nx3 input into 3xN
    homogeneous float64 coordinates.
- `dvision.hsolver`
  - `HSolver(cols=1, rows=1)` estimates H with `x1 ~ H x2` from at least 4
    correspondences.
  - `find_homography(p1, p2, reprojection_error, min_points=5, compute_h=True, probability=0.99, max_its=500)`
    returns `(H, status)`. A point counts as an inlier when its *squared*
    transfer error is at most `reprojection_error`.
  - `check_homography(...)` returns only whether such a homography exists.

### File formats

- `dvision.bundlecamera`
  - `BundleCamera(f, k1, k2, rotation, translation)` holds one camera in the
    bundle.out text format.
  - `camera.save(filename, comment="")` writes a file holding that one camera.
  - `BundleCamera.load(filename)` reads the first camera of a file.
  - `read_cameras(filename)` reads every camera and `save_cameras(filename, cameras)`
    writes them all.
- `dvision.pmvscamera`
  - `PmvsCamera(P)` holds a 3x4 projection matrix.
  - `read_camera(filename)` and `save_camera(filename, camera)` handle a
    `CONTOUR` file.
  - `read_camera_dir(filedir)` reads every `.txt` file of a directory, in name
    order.
  - `save_camera_dir(filedir, cameras, name_format="%08d.txt")` writes one file
    per camera.
- `dvision.patchfile`
  - `Patch` holds a patch's homogeneous position, normal, consistency values
    and its strong and weak visibility lists.
  - `read_patches(filename)` and `save_patches(filename, patches)` read and
    write patch files, and `patch_count(filename)` returns the declared count.
  - `read_visibility(filename, use_weak_list=False)` returns, for each image
    index, the indices of the points seen in that image.
- `dvision.plyfile`
  - `PLYPoint` holds position, normal and colour.
  - `read_ply(filename)` returns the points that follow `end_header`.
  - `save_ply(filename, points)` writes an ASCII PLY file.
  - `ply_point_count(filename)` reads the `element vertex` count from the
    third header line.
- `dvision.pixelpointfile`
  - `PixelPoint(u, v, x, y, z, idx)` pairs a pixel with a 3D point and an index.
  - `save_pixel_points(filename, points)` writes the points.
    `read_pixel_points(filename)` reads them and stops at the first incomplete
    or malformed entry.
- `dvision.matches`
  - `save_matches(filename, c1, c2)` writes two index lists to a small
    `%YAML:1.0` file under the keys `c0` and `c1`.
  - `load_matches(filename)` returns them as `(c0, c1)`. A missing key gives an
    empty list.

### Helpers

- `dvision.mathfuncs`: `mean`, `stdev` (sample, N-1), `median`, `minimum`,
  `maximum`, `signed_angle` and `absolute_angle`.
- `dvision.stl`
  - `remove_indices` and `remove_by_status` return a copy without the chosen
    items, optionally without keeping the order.
  - `index_sort` and `arrange` work with sort orders, and `format_vector` /
    `print_vector` print lists.
- `dvision.random`
  - The module has one shared generator with `seed_rand`, `seed_rand_once`,
    `random_value`, `random_int` and `random_gaussian_value`.
  - `UnrepeatedRandomizer(low, high)` returns every integer of the range once
    before it starts over.

Errors specific to the package are raised as `dvision.errors.DVisionError`.
Invalid arguments raise `ValueError`.

## Reproducible results

`Brief` and the solvers call `seed_rand_once()`, which seeds the shared
generator from the clock the first time it runs. To get repeatable test
patterns and RANSAC samples, call `dvision.random.seed_rand_once(seed)` before
anything else draws numbers. You can also call `seed_rand(seed)` at any point
after the generator has been seeded once.

## Example

```python
import numpy as np
from dvision.brief import Brief, PairType
from dvision.imagefunctions import KeyPoint
from dvision.hsolver import HSolver

image = (np.random.rand(120, 160) * 255).astype(np.uint8)
brief = Brief(256, 48, PairType.RANDOM_CLOSE)
descriptors = brief.compute(image, [KeyPoint(80.0, 60.0)])
print(Brief.distance(descriptors[0], descriptors[0]))  # 0

solver = HSolver(160, 120)
p1 = np.random.rand(20, 2) * 100
p2 = p1 + 5.0
H, status = solver.find_homography(p1, p2, 1.0)
```

## What it does not do

The package is a library only: it provides no command-line tools. It does not
detect keypoints or match descriptors; keypoints must be supplied by the
caller. Images are plain NumPy arrays; the package neither loads nor saves
image files.