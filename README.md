# cupra_scene

The logic behind an animated car showcase: a Wavefront OBJ/MTL loader that
produces flat per-vertex arrays ready for upload to a GPU, 4x4 transform
helpers, an orbiting camera, the tick-driven animation of the scene, and the
page flow of a small quiz shown alongside it.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Loading a model

```python
from cupra_scene.model import Model

model = Model()
model.load("Models/Cupra.obj")
model.dump_stats()
```

`Model.load` reads `v`, `vn`, `f`, `mtllib` and `usemtl` lines. Polygonal
faces are split into triangle fans, and faces may be written as `v`, `v/t`,
`v//n` or `v/t/n` (texture coordinates are ignored). A normal is computed for
every face. After loading, the model holds:

- `vertices` and `normals`: the raw data as `(N, 3)` arrays,
- `faces`: a list of `Face` objects with zero-based vertex and normal indices,
  a material index and the face normal,
- `vbo_vertices`, `vbo_normals`, `vbo_matamb`, `vbo_matdiff`, `vbo_matspec`
  and `vbo_matshin`: flat `float32` arrays with one entry (three components,
  or one for shininess) per triangle corner. Where the file gives normals,
  the corners use them; otherwise they get the face normal.

Materials are kept in a `MaterialLibrary`, whose entry 0 is the default
`Material`. `MaterialLibrary.load` appends the materials of an MTL file
(`newmtl`, `Ns`, `Ka`, `Kd`, `Ks`), and `MaterialLibrary.find` returns the
index of a material by name, or 0 when no material has that name. The library
file named by `mtllib` is looked up next to the OBJ file.

`Model.load` raises `OSError` when the file cannot be read and `ValueError` on
malformed data or face indices that point past the vertex or normal lists.
`dump_stats` prints the counts of vertices, normals and faces; `dump_model`
prints the loaded data back in OBJ syntax.

### Command line

```
cupra-model Models/Cupra.obj
cupra-model --dump Models/Cupra.obj Models/legoman.obj
```

For each file it prints the statistics, and with `--dump` the model itself.
The exit status is 1 if any file could not be loaded.

## Geometry

`cupra_scene.geometry` works with 4x4 numpy matrices acting on column
vectors. `identity`, `translate`, `rotate` (angle in radians) and `scale`
(a single number scales uniformly) each multiply the given matrix on the
right; `perspective(fovy, aspect, near, far)` builds a projection with a
depth range of -1 to 1. A full transform is composed as
`projection @ view @ model`.

`compute_vertex_normals(vertices, normals)` takes flat position and normal
buffers and gives every corner the normalised mean of the normals of all
corners at the same position. `terrain_mesh()` and `house_mesh()` return the
positions and colours of the built-in ground square and little house.

## Camera

`cupra_scene.camera.Camera` looks at a centre point from a fixed distance,
with Euler angles in degrees. `resize(width, height)` sets the aspect ratio
(a non-positive height raises `ValueError`), `press` and `drag` orbit the
camera from pointer positions (ignored while `test_active` is set, and the
pitch only changes while it stays strictly between 0 and 90 degrees), and
`approach_expected` turns each angle one step towards its expected value the
short way round. `view_matrix` and `projection_matrix` give the matrices to
draw with.

## Scene

`cupra_scene.scene.Scene` holds the animated state. Each `heartbeat` call
advances it by one tick: the camera turns towards its target while a test is
running, the road scrolls once `car_move` has been called, and the figure
walks through its phases. `start_widget` advances the story one step; later
steps (`legoman_walk2`, `legoman_walk3`, `car_move`) are handed to the
`schedule(delay_ms, callback)` callable given to the constructor, or queued in
`pending` when there is none. Callables in `next_listeners` are called when
the figure finishes a walk. `cupra_transform`, `legoman_transform`,
`road_transform`, `terrain_transform` and `background_transform` return the
model matrix of each object.

`HouseScene` is the simpler scene: `key_press("S")` enlarges the house,
`key_press("D")` shrinks it, any other key returns `False`, and
`model_matrix` gives the current scaling.

## Quiz

`cupra_scene.quiz.QuizForm` moves through the pages with `step`, sets the
question picture on pages 2, 4 and 6 and the final score text on page 7, and
calls its `animation_listeners` on every step. `add_score` adds points and
`go_to_end_page` shows the page reached. `AnswerLabel` records the chosen
answer with `select_correct` / `select_wrong`; `confirm` sets the verdict text
and style, passes 1 or 0 points to its `score_listeners` and schedules
`next_page`, which calls its `next_page_listeners`. `RadioChoice.mark_correct`
highlights an option.

## What this package does not do

It opens no window and draws nothing: there is no OpenGL context, no shader
loading and no widgets. It provides the data, matrices and state that a
renderer and a user interface would use, and leaves timers, input events and
drawing to the caller.