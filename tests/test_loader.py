"""End-to-end tests: URDF file in, registered KinBody out."""

from pathlib import Path

import jax
import numpy as np
import pytest

from urdf_kinbody import ConversionError, ConversionResult, Environment, ErrorKind, convert_model, load
from urdf_kinbody.convert import UriResolver
from urdf_kinbody.core import GeometryType, KinBody, KinJointType
from urdf_kinbody.io import load_joint_order, parse_urdf

FIXTURES = Path(__file__).parent / "fixtures"
PACKAGES = FIXTURES / "packages"


@pytest.fixture
def resolver(monkeypatch):
    monkeypatch.setenv("ROS_PACKAGE_PATH", str(PACKAGES))
    monkeypatch.delenv("AMENT_PREFIX_PATH", raising=False)
    return UriResolver()


def test_load_two_link_robot():
    """Two links, one revolute joint, no joint order file."""
    env = Environment()
    body = load(str(FIXTURES / "two_link.urdf"), environment=env)

    assert isinstance(body, KinBody)
    assert body.name == "urdf"
    assert len(body.links) == 2
    assert len(body.joints) == 1
    assert body.link_names == ("base", "arm")

    shoulder = body.get_joint("shoulder")
    assert shoulder.link0 == "base"
    assert shoulder.link1 == "arm"
    assert shoulder.joint_type == KinJointType.ROTATIONAL
    assert shoulder.active is True
    assert shoulder.lower_limit == -1.57
    assert shoulder.upper_limit == 1.57
    assert shoulder.max_velocity == 2.0
    assert shoulder.max_effort == 10.0
    np.testing.assert_allclose(shoulder.axis, [0.0, 0.0, 1.0])

    assert env.get_body("urdf") is body
    assert env.bodies == (body,)


def test_load_arm_with_joint_order(resolver):
    env = Environment()
    body = load(str(FIXTURES / "arm.urdf"), str(FIXTURES / "arm_order.yaml"),
                environment=env, resolver=resolver, name="arm")

    assert body.joint_names == ("finger_slide", "shoulder", "elbow", "wrist_mount")
    assert body.link_names == ("base_link", "upper_arm", "forearm", "tool", "finger")
    assert body.dof == 3
    assert [j.name for j in body.active_joints] == ["finger_slide", "shoulder", "elbow"]
    assert env.get_body("arm") is body


def test_collision_mesh_loaded_from_package(resolver):
    body = load(str(FIXTURES / "arm.urdf"), resolver=resolver)

    collision, visual = body.get_link("upper_arm").geometries
    assert collision.geom_type == GeometryType.TRIMESH
    assert collision.filename_collision == str(PACKAGES / "arm_description" / "meshes" / "wedge.stl")
    assert collision.mesh_collision.indices.shape == (4, 3)
    assert collision.mesh_collision.vertices.shape[1] == 3

    assert visual.geom_type == GeometryType.SPHERE
    assert visual.filename_render == collision.filename_collision
    np.testing.assert_allclose(visual.diffuse_color, [1.0, 0.5, 0.0, 1.0])


def test_missing_package_degrades_gracefully(monkeypatch, caplog):
    monkeypatch.delenv("ROS_PACKAGE_PATH", raising=False)
    monkeypatch.delenv("AMENT_PREFIX_PATH", raising=False)
    body = load(str(FIXTURES / "arm.urdf"), resolver=UriResolver())

    collision, visual = body.get_link("upper_arm").geometries
    assert collision.filename_collision == ""
    assert collision.mesh_collision.is_empty
    assert visual.filename_render == ""
    assert "Unable to find package [arm_description]" in caplog.text


def test_missing_joint_order_file_is_not_an_error():
    body = load(str(FIXTURES / "two_link.urdf"), str(FIXTURES / "no_such_order.yaml"))
    assert body.joint_names == ("shoulder",)


def test_convert_model_reports_errors_as_values():
    model = parse_urdf(str(FIXTURES / "planar.urdf"))
    result = convert_model(model)

    assert isinstance(result, ConversionResult)
    assert not result.ok
    assert result.error.kind == ErrorKind.UNSUPPORTED_JOINT_TYPE
    assert result.links == ()
    assert result.joints == ()


def test_convert_model_success():
    model = parse_urdf(str(FIXTURES / "two_link.urdf"))
    result = convert_model(model, {"shoulder": 0})
    assert result.ok
    assert [link.name for link in result.links] == ["base", "arm"]
    assert [joint.name for joint in result.joints] == ["shoulder"]


@pytest.mark.parametrize("filename, kind", [
    ("planar.urdf", ErrorKind.UNSUPPORTED_JOINT_TYPE),
    ("capsule.urdf", ErrorKind.UNSUPPORTED_GEOMETRY),
    ("broken.urdf", ErrorKind.PARSE_FAILED),
])
def test_load_raises_and_adds_nothing(filename, kind):
    env = Environment()
    with pytest.raises(ConversionError) as excinfo:
        load(str(FIXTURES / filename), environment=env)
    assert excinfo.value.kind == kind
    assert env.bodies == ()


def test_duplicate_body_name_rejected():
    env = Environment()
    load(str(FIXTURES / "two_link.urdf"), environment=env)
    with pytest.raises(ValueError):
        load(str(FIXTURES / "two_link.urdf"), environment=env)


def test_convert_model_rejects_boolean_order_slot():
    model = parse_urdf(str(FIXTURES / "two_link.urdf"))
    result = convert_model(model, {"shoulder": True})
    assert not result.ok
    assert result.error.kind == ErrorKind.INVALID_JOINT_ORDER
    assert result.joints == ()


def test_body_lookup_of_missing_name_raises_value_error():
    body = load(str(FIXTURES / "two_link.urdf"), environment=Environment())
    with pytest.raises(ValueError, match="Link 'elbow' not found"):
        body.get_link("elbow")
    with pytest.raises(ValueError, match="Joint 'elbow' not found"):
        body.get_joint("elbow")


def test_create_kinbody_checks_link_references():
    env = Environment()
    result = convert_model(parse_urdf(str(FIXTURES / "two_link.urdf")))
    with pytest.raises(ValueError, match="unknown link 'base'"):
        env.create_kinbody(result.links[1:], result.joints, name="partial")


def test_read_trimesh_failures_return_none(tmp_path):
    env = Environment()
    assert env.read_trimesh("") is None
    assert env.read_trimesh(str(tmp_path / "missing.stl")) is None


# Files that exist but that trimesh cannot turn into a mesh
UNREADABLE_MESHES = [
    ("truncated.stl", b"solid\x00\x00\x00\x07\x00\x00\x00\xff\xfe"),
    ("mesh.xyzunknown", b"not a mesh format\n"),
    ("part.dae", b"<?xml version='1.0'?><COLLADA><library_geometries>"),
]


@pytest.mark.parametrize("filename, content", UNREADABLE_MESHES)
def test_read_trimesh_unreadable_file_returns_none(tmp_path, filename, content):
    path = tmp_path / filename
    path.write_bytes(content)
    assert Environment().read_trimesh(str(path)) is None


@pytest.mark.parametrize("filename, content", UNREADABLE_MESHES)
def test_unreadable_collision_mesh_is_not_fatal(tmp_path, caplog, filename, content):
    """A collision mesh that cannot be loaded leaves an empty mesh, not a failed conversion."""
    mesh_path = tmp_path / filename
    mesh_path.write_bytes(content)
    urdf_path = tmp_path / "robot.urdf"
    urdf_path.write_text(f"""<?xml version="1.0"?>
<robot name="one_link">
  <link name="body">
    <collision>
      <geometry><mesh filename="file://{mesh_path}"/></geometry>
    </collision>
  </link>
</robot>
""")

    result = convert_model(parse_urdf(str(urdf_path)))

    assert result.ok
    (collision,) = result.links[0].geometries
    assert collision.geom_type == GeometryType.TRIMESH
    assert collision.filename_collision == str(mesh_path)
    assert collision.mesh_collision.is_empty
    assert "Link[body]: Failed loading collision mesh" in caplog.text


def test_kinbody_is_pytree():
    """A built body can be flattened and rebuilt by JAX."""
    body = load(str(FIXTURES / "two_link.urdf"), environment=Environment())
    leaves, treedef = jax.tree_util.tree_flatten(body)
    rebuilt = jax.tree_util.tree_unflatten(treedef, leaves)
    assert rebuilt.link_names == body.link_names
    assert rebuilt.joint_names == body.joint_names
    np.testing.assert_array_equal(rebuilt.get_joint("shoulder").anchor,
                                  body.get_joint("shoulder").anchor)


def test_load_joint_order_file():
    assert load_joint_order(str(FIXTURES / "arm_order.yaml")) == {"finger_slide": 0, "shoulder": 1}
    assert load_joint_order(None) is None
    assert load_joint_order(str(FIXTURES / "no_such_order.yaml")) is None


@pytest.mark.parametrize("text", [
    "joints: [a, b]\n",
    "joints:\n  a: first\n",
    "- just\n- a list\n",
    "joints: {a: 0\n",
])
def test_malformed_joint_order_file_is_ignored(tmp_path, caplog, text):
    path = tmp_path / "order.yaml"
    path.write_text(text)
    assert load_joint_order(str(path)) is None
    assert "Ignoring" in caplog.text


def test_joint_order_without_joints_key(tmp_path):
    path = tmp_path / "order.yaml"
    path.write_text("adjacent: []\n")
    assert load_joint_order(str(path)) is None
