import pytest

from vaultgen.dungeon import ALL_DIRECTIONS, ORIGIN, Coord, Direction, Door


def test_opposites_are_symmetric():
    for d in ALL_DIRECTIONS:
        assert d.opposite().opposite() is d
        assert d.opposite() is not d


@pytest.mark.parametrize(
    "direction,expected",
    [
        (Direction.NORTH, Coord(0, 1)),
        (Direction.SOUTH, Coord(0, -1)),
        (Direction.EAST, Coord(1, 0)),
        (Direction.WEST, Coord(-1, 0)),
    ],
)
def test_target_coordinate_offsets(direction, expected):
    assert Door(ORIGIN, direction).target_coordinate() == expected


def test_matching_direction_is_opposite_side():
    door = Door(Coord(3, 4), Direction.EAST, 2)
    assert door.matching_direction() is Direction.WEST


def test_is_matching_requires_facing_doors():
    a = Door(Coord(0, 0), Direction.NORTH)
    b = Door(Coord(0, 1), Direction.SOUTH)
    assert a.is_matching(b) and b.is_matching(a)
    # Adjacent but pointing the wrong way
    assert not a.is_matching(Door(Coord(0, 1), Direction.NORTH))
    # Same side, wrong cell
    assert not a.is_matching(Door(Coord(1, 1), Direction.SOUTH))


def test_horizontal_flags():
    assert Door(ORIGIN, Direction.EAST).is_horizontal()
    assert Door(ORIGIN, Direction.WEST).is_horizontal()
    assert not Door(ORIGIN, Direction.NORTH).is_horizontal()


def test_parse_accepts_names_and_letters():
    assert Direction.parse("north") is Direction.NORTH
    assert Direction.parse("W") is Direction.WEST
    assert Direction.parse(" East ") is Direction.EAST
    assert Direction.parse(Direction.SOUTH) is Direction.SOUTH
    with pytest.raises(ValueError):
        Direction.parse("up")
    with pytest.raises(ValueError):
        Direction.parse(3)


def test_door_to_dict():
    assert Door(Coord(1, -2), Direction.WEST, 3).to_dict() == {
        "x": 1,
        "y": -2,
        "direction": "west",
        "distance": 3,
    }
