import pytest

from planetgen.generation.coordinates import (
    CoordinateBox,
    SpaceCoordinates,
    child_box,
    split_bounds,
    split_count,
    split_index,
    tile_bounds,
    tile_index,
)


def child_boxes(box, factor):
    """Every child of ``box`` at one subdivision step."""
    per_axis = [
        [split_bounds(lo, hi, index, factor) for index in range(split_count(lo, hi, factor))]
        for lo, hi in zip(box.min.as_tuple(), box.max.as_tuple())
    ]
    return [
        CoordinateBox(SpaceCoordinates(x_lo, y_lo, z_lo), SpaceCoordinates(x_hi, y_hi, z_hi))
        for x_lo, x_hi in per_axis[0]
        for y_lo, y_hi in per_axis[1]
        for z_lo, z_hi in per_axis[2]
    ]


@pytest.mark.parametrize("lo, hi", [(0, 0), (-3, 3), (-2, 1), (5, 17), (-10, -4)])
@pytest.mark.parametrize("factor", [2, 3, 4])
def test_axis_split_partitions_without_gaps(lo, hi, factor):
    covered = []
    for index in range(split_count(lo, hi, factor)):
        start, end = split_bounds(lo, hi, index, factor)
        assert start <= end
        covered.extend(range(start, end + 1))
        for value in range(start, end + 1):
            assert split_index(lo, hi, value, factor) == index
    assert covered == list(range(lo, hi + 1))


def test_tiles_truncate_at_axis_end():
    assert tile_index(-3, 3, 3) == 2
    assert tile_bounds(-3, 3, 2, 3) == (3, 3)
    assert tile_bounds(-3, 3, 0, 3) == (-3, -1)


def test_centered_box_contains_origin():
    box = CoordinateBox.centered((7, 5, 4))
    assert box.min == SpaceCoordinates(-3, -2, -2)
    assert box.max == SpaceCoordinates(3, 2, 1)
    assert box.size == (7, 5, 4)
    assert box.volume == 140
    assert box.contains(SpaceCoordinates(0, 0, 0))
    assert not box.contains(SpaceCoordinates(4, 0, 0))


def test_single_hex_box():
    box = CoordinateBox.centered((1, 1, 1))
    assert box.min == box.max == SpaceCoordinates(0, 0, 0)
    assert list(box.iter_coordinates()) == [SpaceCoordinates(0, 0, 0)]


def test_empty_box_is_rejected():
    with pytest.raises(ValueError):
        CoordinateBox(SpaceCoordinates(1, 0, 0), SpaceCoordinates(0, 0, 0))


def test_child_boxes_partition_parent():
    parent = CoordinateBox(SpaceCoordinates(-2, 0, 5), SpaceCoordinates(2, 3, 5))
    children = child_boxes(parent, 2)

    assert sum(child.volume for child in children) == parent.volume
    for coord in parent.iter_coordinates():
        holders = [child for child in children if child.contains(coord)]
        assert len(holders) == 1
        _, box = child_box(parent, coord, 2)
        assert box == holders[0]


def test_coordinates_serialize_as_xyz():
    coord = SpaceCoordinates(-4, 0, 12)
    assert coord.to_dict() == {"x": -4, "y": 0, "z": 12}
    assert SpaceCoordinates.from_dict(coord.to_dict()) == coord
    box = CoordinateBox.centered((3, 3, 3))
    assert CoordinateBox.from_dict(box.to_dict()) == box
