import json

import pytest

from telebridge.node import Node
from telebridge.protocol import (
    encode_data_field,
    encode_id_assign,
    encode_node_name,
    encode_publish,
)


@pytest.fixture
def sent():
    return []


@pytest.fixture
def node(sent):
    return Node(lambda topic, payload: sent.append((topic, payload)))


def test_default_name_is_robot(node):
    assert node.name == "robot"


def test_set_node_name(node):
    node.set_node_name("Swerve_Robot")
    assert node.name == "Swerve_Robot"


def test_id_assign_creates_zeroed_field(node):
    node.set_id_assign(0, "imu")
    assert node.get_name_assign(0) == "imu"
    assert node.data == {"imu": 0}
    assert node.id_assign == [{"id": 0, "value": "imu"}]


def test_id_assign_reassign_updates_existing_entry(node):
    node.set_id_assign(1, "encoder_x")
    node.set_id_assign(1, "encoder_y")
    assert node.id_assign == [{"id": 1, "value": "encoder_y"}]
    assert node.get_name_assign(1) == "encoder_y"
    assert "encoder_x" in node.data


def test_get_name_assign_missing_is_empty(node):
    assert node.get_name_assign(7) == ""


def test_set_data_field_unknown_id_fails(node):
    assert node.set_data_field(3, 1.5) is False
    assert node.data == {}


def test_set_data_field_known_id(node):
    node.set_id_assign(2, "encoder_y")
    assert node.set_data_field(2, -4.25) is True
    assert node.data["encoder_y"] == -4.25


def test_publish_id_assign_wire_json(node, sent):
    node.set_id_assign(0, "imu")
    node.publish_id_assign()
    assert sent == [("robot/id_assign", '[{"id":0,"value":"imu"}]')]
    assert json.loads(sent[0][1]) == node.id_assign
    assert node.get_name_assign(0) == "imu"


def test_handle_full_session(node, sent):
    chunk = (
        encode_node_name("Swerve_Robot")
        + encode_id_assign(0, "imu")
        + encode_id_assign(1, "encoder_x")
        + encode_data_field(0, 12.5)
        + encode_data_field(1, -3.0)
        + encode_publish()
    )
    node.handle(chunk)
    assert node.name == "Swerve_Robot"
    topics = [topic for topic, _ in sent]
    assert topics == [
        "Swerve_Robot/data",
        "Swerve_Robot/id_assign",
        "Swerve_Robot/id_assign",
        "Swerve_Robot/data",
    ]
    assert json.loads(sent[0][1]) == {}
    assert json.loads(sent[2][1]) == [
        {"id": 0, "value": "imu"},
        {"id": 1, "value": "encoder_x"},
    ]
    assert json.loads(sent[-1][1]) == {"imu": 12.5, "encoder_x": -3.0}


def test_handle_data_field_for_unassigned_id_is_ignored(node, sent):
    node.handle(encode_data_field(5, 2.0) + encode_publish())
    assert node.data == {}
    assert len(sent) == 1


def test_handle_truncated_data_field_is_ignored(node):
    node.set_id_assign(0, "imu")
    node.handle(encode_data_field(0, 9.0)[:-3])
    assert node.data == {"imu": 0}


def test_handle_ignores_noise(node, sent):
    node.handle(b"\x00\x01\xff\x10garbage")
    assert sent == []
    assert node.name == "robot"


def test_handle_id_assign_without_id_byte_is_ignored(node, sent):
    node.handle(bytes((0xFF, 0x52)))
    assert sent == []
    assert node.id_assign == []


def test_data_property_is_a_copy(node):
    node.set_id_assign(0, "imu")
    snapshot = node.data
    snapshot["imu"] = 99
    assert node.data["imu"] == 0