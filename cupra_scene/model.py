"""Loading of Wavefront OBJ models and their MTL material libraries.

A loaded model keeps its raw vertex and normal data, the list of triangular
faces (polygons are split into fans) and flat per-vertex arrays ready to be
uploaded as vertex buffers: positions, normals and the ambient, diffuse,
specular and shininess terms of each vertex's material.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Iterator, Sequence

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_MATERIAL_NAME = "__load_object_default_material__"


def _rgba(*values: float) -> list[float]:
    return list(values)


@dataclass
class Material:
    """Phong material: RGBA colours for each term plus a shininess exponent."""

    name: str = DEFAULT_MATERIAL_NAME
    ambient: list[float] = field(default_factory=lambda: _rgba(0.1, 0.1, 0.1, 1.0))
    diffuse: list[float] = field(default_factory=lambda: _rgba(0.7, 0.7, 0.0, 1.0))
    specular: list[float] = field(default_factory=lambda: _rgba(1.0, 1.0, 1.0, 1.0))
    shininess: float = 64.0


@dataclass
class Face:
    """A triangle: zero-based vertex indices, optional normal indices, material and face normal."""

    v: tuple[int, int, int]
    n: tuple[int, ...] = ()
    mat: int = 0
    normal: tuple[float, float, float] = (0.0, 0.0, 0.0)


def _floats(tokens: Sequence[str], count: int, what: str) -> list[float]:
    try:
        values = [float(token) for token in tokens[:count]]
    except ValueError as exc:
        raise ValueError(f"malformed {what}: {' '.join(tokens)!r}") from exc
    if len(values) < count:
        raise ValueError(f"{what} needs {count} values, got {len(values)}")
    return values


class MaterialLibrary:
    """An ordered collection of materials; index 0 always holds the default material."""

    def __init__(self) -> None:
        self.materials: list[Material] = [Material()]

    def __len__(self) -> int:
        return len(self.materials)

    def __getitem__(self, index: int) -> Material:
        return self.materials[index]

    def __iter__(self) -> Iterator[Material]:
        return iter(self.materials)

    def load(self, filename: str | Path) -> None:
        """Append the materials defined in an MTL file.

        Attribute lines modify the most recently defined material.
        Raises OSError if the file cannot be read.
        """
        with Path(filename).open(encoding="utf-8") as handle:
            for line in handle:
                tokens = line.split()
                if not tokens or tokens[0].startswith("#"):
                    continue
                keyword, args = tokens[0], tokens[1:]
                current = self.materials[-1]
                if keyword == "newmtl":
                    self.materials.append(Material(name=args[0] if args else ""))
                elif keyword == "Ns":
                    current.shininess = _floats(args, 1, "Ns")[0]
                elif keyword == "Ka":
                    current.ambient[:3] = _floats(args, 3, "Ka")
                elif keyword == "Kd":
                    current.diffuse[:3] = _floats(args, 3, "Kd")
                elif keyword == "Ks":
                    current.specular[:3] = _floats(args, 3, "Ks")
                else:
                    logger.debug("MTL line of type %s is not supported, skipped", keyword)

    def find(self, name: str) -> int:
        """Index of the first material called ``name``, or 0 if there is none."""
        return next(
            (index for index, material in enumerate(self.materials) if material.name == name),
            0,
        )


class _FaceFormat(Enum):
    V = auto()
    VT = auto()
    VN = auto()
    VTN = auto()

    @classmethod
    def of(cls, token: str) -> "_FaceFormat":
        first = token.find("/")
        if first < 0:
            return cls.V
        second = token.find("/", first + 1)
        if second == first + 1:
            return cls.VN
        if second < 0:
            return cls.VT
        return cls.VTN

    @property
    def has_normals(self) -> bool:
        return self in (_FaceFormat.VN, _FaceFormat.VTN)


def _index(text: str, token: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise ValueError(f"malformed face element {token!r}") from exc
    if value < 1:
        raise ValueError(f"face index must be positive in {token!r}")
    return value - 1


def _face_element(token: str, fmt: _FaceFormat) -> tuple[int, int | None]:
    parts = token.split("/")
    vertex = _index(parts[0], token)
    if not fmt.has_normals:
        return vertex, None
    if len(parts) < 3 or not parts[2]:
        raise ValueError(f"face element {token!r} lacks a normal index")
    if fmt is _FaceFormat.VN and parts[1]:
        raise ValueError(f"face element {token!r} is not of the form v//n")
    return vertex, _index(parts[2], token)


class Model:
    """A triangle mesh read from an OBJ file."""

    def __init__(self, materials: MaterialLibrary | None = None) -> None:
        self.materials = materials if materials is not None else MaterialLibrary()
        self.vertices = np.zeros((0, 3))
        self.normals = np.zeros((0, 3))
        self.faces: list[Face] = []
        self.vbo_vertices = np.zeros(0, dtype=np.float32)
        self.vbo_normals = np.zeros(0, dtype=np.float32)
        self.vbo_matamb = np.zeros(0, dtype=np.float32)
        self.vbo_matdiff = np.zeros(0, dtype=np.float32)
        self.vbo_matspec = np.zeros(0, dtype=np.float32)
        self.vbo_matshin = np.zeros(0, dtype=np.float32)
        # Faces seen before any usemtl refer to the first material of the library file.
        self._material = 1
        self._warned: set[str] = set()

    def _warn_once(self, key: str, message: str) -> None:
        if key not in self._warned:
            self._warned.add(key)
            logger.warning(message)

    def load(self, filename: str | Path) -> None:
        """Replace the model's contents with those of an OBJ file.

        Raises OSError if the file cannot be read and ValueError on malformed data.
        """
        path = Path(filename)
        with path.open(encoding="utf-8") as handle:
            lines = handle.read().splitlines()

        vertices: list[list[float]] = []
        normals: list[list[float]] = []
        faces: list[Face] = []
        for line in lines:
            stripped = line.lstrip()
            if not stripped:
                continue
            kind, rest = stripped[0], stripped[1:]
            if kind == "#" or kind in "gso":
                continue
            if kind == "v":
                self._parse_vertex_info(rest, vertices, normals)
            elif kind == "f":
                faces.extend(self._parse_face(rest.split()))
            elif kind == "m":
                self._parse_material_library(rest.split(), path)
            elif kind == "u":
                tokens = rest.split()
                if not tokens or tokens[0] != "semtl":
                    logger.warning("unknown line of type 'u%s', ignoring it", tokens[0] if tokens else "")
                else:
                    self._material = self.materials.find(tokens[1] if len(tokens) > 1 else "")
            else:
                logger.warning("unknown line of type '%s', ignoring it", kind)

        self.vertices = np.array(vertices, dtype=np.float64).reshape(-1, 3)
        self.normals = np.array(normals, dtype=np.float64).reshape(-1, 3)
        self._check_indices(faces)
        self.faces = self._with_face_normals(faces)
        self._fill_buffers()

    def _parse_vertex_info(
        self, rest: str, vertices: list[list[float]], normals: list[list[float]]
    ) -> None:
        kind = rest[:1]
        tokens = rest[1:].split()
        if kind == " ":
            vertices.append(_floats(tokens, 3, "vertex"))
        elif kind == "n":
            normals.append(_floats(tokens, 3, "normal"))
        elif kind == "t":
            self._warn_once("vt", "texture coordinates are not supported, ignoring them")
        else:
            logger.warning("unknown vertex info of type '%s', ignoring it", kind)

    def _parse_face(self, tokens: list[str]) -> list[Face]:
        if len(tokens) < 3:
            raise ValueError(f"a face needs at least three vertices, got {len(tokens)}")
        fmt = _FaceFormat.of(tokens[0])
        if fmt is _FaceFormat.VT:
            self._warn_once("fvt", "v/t face found: texture coordinates ignored")
        elif fmt is _FaceFormat.VTN:
            self._warn_once("fvtn", "v/t/n face found: texture coordinates ignored")
        elements = [_face_element(token, fmt) for token in tokens]
        first, *others = elements
        faces = []
        previous = others[0]
        for current in others[1:]:
            corners = (first, previous, current)
            faces.append(
                Face(
                    v=tuple(vertex for vertex, _ in corners),
                    n=tuple(normal for _, normal in corners) if fmt.has_normals else (),
                    mat=self._material,
                )
            )
            previous = current
        return faces

    def _parse_material_library(self, tokens: list[str], path: Path) -> None:
        if not tokens or tokens[0] != "tllib":
            logger.warning("unknown line of type 'm%s', ignoring it", tokens[0] if tokens else "")
            return
        library = path.parent / (tokens[1] if len(tokens) > 1 else "")
        try:
            self.materials.load(library)
        except OSError:
            logger.error("Cannot load MTL file %s", library)

    def _check_indices(self, faces: list[Face]) -> None:
        for face in faces:
            if max(face.v) >= len(self.vertices):
                raise ValueError(f"face refers to missing vertex {max(face.v) + 1}")
            if face.n and max(face.n) >= len(self.normals):
                raise ValueError(f"face refers to missing normal {max(face.n) + 1}")

    def _with_face_normals(self, faces: list[Face]) -> list[Face]:
        if not faces:
            return []
        index = np.array([face.v for face in faces], dtype=np.intp)
        p0, p1, p2 = (self.vertices[index[:, k]] for k in range(3))
        cross = np.cross(p1 - p0, p2 - p1)
        with np.errstate(divide="ignore", invalid="ignore"):
            unit = cross / np.linalg.norm(cross, axis=1, keepdims=True)
        return [
            Face(v=face.v, n=face.n, mat=face.mat, normal=tuple(float(c) for c in normal))
            for face, normal in zip(faces, unit)
        ]

    def _material_of(self, face: Face) -> Material:
        if 0 <= face.mat < len(self.materials):
            return self.materials[face.mat]
        return self.materials[0]

    def _fill_buffers(self) -> None:
        index = np.array([face.v for face in self.faces], dtype=np.intp).reshape(-1, 3)
        self.vbo_vertices = self.vertices[index].astype(np.float32).reshape(-1)

        def corner_normals(face: Face) -> list[Sequence[float]]:
            if len(self.normals) and face.n:
                return [self.normals[n] for n in face.n]
            return [face.normal] * 3

        normals = [row for face in self.faces for row in corner_normals(face)]
        self.vbo_normals = np.array(normals, dtype=np.float32).reshape(-1)

        materials = [self._material_of(face) for face in self.faces]

        def per_vertex(values: list[Sequence[float]], width: int) -> np.ndarray:
            table = np.array(values, dtype=np.float32).reshape(-1, width)
            return np.repeat(table, 3, axis=0).reshape(-1)

        self.vbo_matamb = per_vertex([m.ambient[:3] for m in materials], 3)
        self.vbo_matdiff = per_vertex([m.diffuse[:3] for m in materials], 3)
        self.vbo_matspec = per_vertex([m.specular[:3] for m in materials], 3)
        self.vbo_matshin = per_vertex([[m.shininess] for m in materials], 1)

    def dump_stats(self) -> None:
        """Print the number of vertices, normals and faces."""
        nv = self.vertices.size
        nn = self.normals.size
        print("Model Stats:")
        print(f"Vertices:   {nv} components [{nv / 3:g} vertices]")
        print(f"Normals:    {nn} components [{nn / 3:g} normals]")
        print(f"Faces:      {len(self.faces)}")

    def dump_model(self) -> None:
        """Print the model back in OBJ syntax (vertices, normals and triangles)."""
        for vertex in self.vertices:
            print("v " + " ".join(f"{c:g}" for c in vertex))
        for normal in self.normals:
            print("vn " + " ".join(f"{c:g}" for c in normal))
        for face in self.faces:
            if face.n:
                corners = (f"{v + 1}//{n + 1}" for v, n in zip(face.v, face.n))
            else:
                corners = (str(v + 1) for v in face.v)
            print("f " + " ".join(corners))


def main(argv: Sequence[str] | None = None) -> int:
    """Load OBJ files and print their statistics (and optionally their contents)."""
    parser = argparse.ArgumentParser(description="Inspect Wavefront OBJ models.")
    parser.add_argument("files", nargs="+", help="OBJ files to load")
    parser.add_argument("--dump", action="store_true", help="also print the loaded model")
    args = parser.parse_args(argv)
    status = 0
    for filename in args.files:
        model = Model()
        try:
            model.load(filename)
        except OSError:
            print(f"Cannot load OBJ file {filename}", file=sys.stderr)
            status = 1
            continue
        except ValueError as exc:
            print(f"{filename}: {exc}", file=sys.stderr)
            status = 1
            continue
        model.dump_stats()
        if args.dump:
            model.dump_model()
    return status


if __name__ == "__main__":
    sys.exit(main())