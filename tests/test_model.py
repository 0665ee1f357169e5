import numpy as np
import pytest

from cupra_scene.model import (
    DEFAULT_MATERIAL_NAME,
    Face,
    Material,
    MaterialLibrary,
    Model,
    main,
)

TRIANGLE = "v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n"
QUAD = "# quad\nv 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\n\nf 1 2 3 4\n"


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def load(tmp_path, text, name="m.obj"):
    model = Model()
    model.load(write(tmp_path, name, text))
    return model


def test_default_material_values():
    material = Material()
    assert material.name == DEFAULT_MATERIAL_NAME
    assert material.ambient == pytest.approx([0.1, 0.1, 0.1, 1.0])
    assert material.diffuse == pytest.approx([0.7, 0.7, 0.0, 1.0])
    assert material.specular == pytest.approx([1.0, 1.0, 1.0, 1.0])
    assert material.shininess == 64


def test_triangle_vertices_and_face(tmp_path):
    model = load(tmp_path, TRIANGLE)
    assert model.vertices.shape == (3, 3)
    assert len(model.faces) == 1
    assert model.faces[0].v == (0, 1, 2)
    assert model.faces[0].n == ()


def test_face_normal_is_unit_and_perpendicular(tmp_path):
    model = load(tmp_path, TRIANGLE)
    normal = np.array(model.faces[0].normal)
    assert np.linalg.norm(normal) == pytest.approx(1.0)
    assert normal @ np.array([1.0, 0.0, 0.0]) == pytest.approx(0.0)
    assert normal @ np.array([0.0, 1.0, 0.0]) == pytest.approx(0.0)


def test_polygon_is_split_into_fan(tmp_path):
    model = load(tmp_path, QUAD)
    assert [face.v for face in model.faces] == [(0, 1, 2), (0, 2, 3)]


def test_buffer_sizes(tmp_path):
    model = load(tmp_path, QUAD)
    faces = len(model.faces)
    for buffer in (
        model.vbo_vertices,
        model.vbo_normals,
        model.vbo_matamb,
        model.vbo_matdiff,
        model.vbo_matspec,
    ):
        assert buffer.shape == (9 * faces,)
    assert model.vbo_matshin.shape == (3 * faces,)


def test_vertex_buffer_follows_faces(tmp_path):
    model = load(tmp_path, QUAD)
    expected = np.concatenate([model.vertices[list(face.v)].reshape(-1) for face in model.faces])
    assert np.allclose(model.vbo_vertices, expected)


def test_default_material_used_without_library(tmp_path):
    model = load(tmp_path, TRIANGLE)
    assert np.allclose(model.vbo_matdiff.reshape(-1, 3), [0.7, 0.7, 0.0])
    assert np.allclose(model.vbo_matshin, 64)


def test_face_normals_fill_normal_buffer(tmp_path):
    model = load(tmp_path, TRIANGLE)
    rows = model.vbo_normals.reshape(-1, 3)
    assert np.allclose(rows, model.faces[0].normal)


def test_vn_faces_use_file_normals(tmp_path):
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\nvn 0 0 1\nvn 1 0 0\nf 1//2 2//2 3//1\n"
    model = load(tmp_path, text)
    assert model.faces[0].n == (1, 1, 0)
    rows = model.vbo_normals.reshape(-1, 3)
    assert np.allclose(rows, [[1, 0, 0], [1, 0, 0], [0, 0, 1]])


def test_vtn_faces_ignore_texture(tmp_path):
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\nvt 0 0\nvn 0 0 1\nf 1/1/1 2/1/1 3/1/1\n"
    model = load(tmp_path, text)
    assert model.faces[0].v == (0, 1, 2)
    assert model.faces[0].n == (0, 0, 0)


def test_vt_faces(tmp_path):
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\nv 0 0 1\nf 1/1 2/1 3/1 4/1\n"
    model = load(tmp_path, text)
    assert [face.v for face in model.faces] == [(0, 1, 2), (0, 2, 3)]


def test_material_library_and_usemtl(tmp_path):
    write(tmp_path, "scene.mtl", "newmtl red\nKa 0.2 0 0\nKd 1 0 0\nKs 0.5 0.5 0.5\nNs 10\n")
    text = "mtllib scene.mtl\nv 0 0 0\nv 1 0 0\nv 0 1 0\nusemtl red\nf 1 2 3\n"
    model = load(tmp_path, text)
    assert model.faces[0].mat == model.materials.find("red")
    assert np.allclose(model.vbo_matdiff.reshape(-1, 3), [1, 0, 0])
    assert np.allclose(model.vbo_matamb.reshape(-1, 3), [0.2, 0, 0])
    assert np.allclose(model.vbo_matspec.reshape(-1, 3), [0.5, 0.5, 0.5])
    assert np.allclose(model.vbo_matshin, 10)


def test_faces_before_usemtl_take_first_library_material(tmp_path):
    write(tmp_path, "scene.mtl", "newmtl blue\nKd 0 0 1\n")
    model = load(tmp_path, "mtllib scene.mtl\n" + TRIANGLE)
    assert model.faces[0].mat == 1
    assert np.allclose(model.vbo_matdiff.reshape(-1, 3), [0, 0, 1])


def test_missing_material_library_is_not_fatal(tmp_path):
    model = load(tmp_path, "mtllib absent.mtl\n" + TRIANGLE)
    assert len(model.faces) == 1
    assert len(model.materials) == 1


def test_material_library_find(tmp_path):
    library = MaterialLibrary()
    library.load(write(tmp_path, "a.mtl", "# comment\n\nnewmtl first\nnewmtl second\nillum 2\n"))
    assert [m.name for m in library] == [DEFAULT_MATERIAL_NAME, "first", "second"]
    assert library.find("second") == 2
    assert library.find("nothing") == 0


def test_material_attributes_apply_to_last_defined(tmp_path):
    library = MaterialLibrary()
    library.load(write(tmp_path, "a.mtl", "newmtl a\nnewmtl b\nKd 0.25 0.5 0.75\n"))
    assert library[2].diffuse[:3] == pytest.approx([0.25, 0.5, 0.75])
    assert library[2].diffuse[3] == pytest.approx(1.0)
    assert library[1].diffuse == Material().diffuse


def test_material_library_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        MaterialLibrary().load(tmp_path / "nope.mtl")


def test_missing_obj_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Model().load(tmp_path / "nope.obj")


def test_face_with_too_few_vertices(tmp_path):
    with pytest.raises(ValueError):
        load(tmp_path, "v 0 0 0\nv 1 0 0\nf 1 2\n")


def test_face_with_missing_vertex(tmp_path):
    with pytest.raises(ValueError):
        load(tmp_path, "v 0 0 0\nv 1 0 0\nf 1 2 9\n")


def test_malformed_vertex(tmp_path):
    with pytest.raises(ValueError):
        load(tmp_path, "v 0 x 0\n")


def test_reload_replaces_contents(tmp_path):
    model = Model()
    model.load(write(tmp_path, "q.obj", QUAD))
    model.load(write(tmp_path, "t.obj", TRIANGLE))
    assert len(model.faces) == 1
    assert model.vertices.shape == (3, 3)


def test_ignored_lines(tmp_path):
    text = "o thing\ng group\ns off\n" + TRIANGLE
    model = load(tmp_path, text)
    assert len(model.faces) == 1


def test_dump_stats(tmp_path, capsys):
    load(tmp_path, QUAD).dump_stats()
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Model Stats:"
    assert out[1] == "Vertices:   12 components [4 vertices]"
    assert out[3] == "Faces:      2"


def test_dump_model_round_trip(tmp_path, capsys):
    text = "v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nvn 0 0 1\nf 1//1 2//1 3//1 4//1\n"
    original = load(tmp_path, text)
    original.dump_model()
    dumped = capsys.readouterr().out
    copy = load(tmp_path, dumped, name="copy.obj")
    assert np.allclose(copy.vertices, original.vertices)
    assert np.allclose(copy.normals, original.normals)
    assert [(f.v, f.n) for f in copy.faces] == [(f.v, f.n) for f in original.faces]


def test_face_dataclass_defaults():
    face = Face(v=(0, 1, 2))
    assert face.n == ()
    assert face.mat == 0


def test_main_prints_stats(tmp_path, capsys):
    path = write(tmp_path, "m.obj", TRIANGLE)
    assert main([str(path)]) == 0
    assert "Faces:      1" in capsys.readouterr().out


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.obj")]) == 1
    assert "Cannot load OBJ file" in capsys.readouterr().err