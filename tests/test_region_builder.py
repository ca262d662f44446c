import pytest

from lockstep.topology import Connector, Level, Sector, build_topology_map
from tests.topology_test_utils import (
    BRANCHING_TREE,
    CHAIN_OF_FIVE,
    DOOR_IN_ROOM,
    DOUBLE_DOOR,
    RING,
    SINGLE_ROOM,
    STEM_AND_RING,
    THREE_ROOMS,
    build,
)

ALL_LEVELS = [
    THREE_ROOMS,
    RING,
    STEM_AND_RING,
    CHAIN_OF_FIVE,
    DOOR_IN_ROOM,
    SINGLE_ROOM,
    DOUBLE_DOOR,
    BRANCHING_TREE,
]


def test_three_rooms_ids_follow_flood_order():
    _, t = build(THREE_ROOMS)
    assert [type(o) for o in t.objects] == [Sector, Connector, Sector, Connector, Sector]
    assert [s.seed for s in t.sectors] == [(1, 1), (5, 2), (9, 2)]
    assert [s.cell_count for s in t.sectors] == [9, 9, 9]
    assert [(c.pos, c.sector1, c.sector2) for c in t.connectors] == [((4, 2), 0, 2), ((8, 2), 2, 4)]


@pytest.mark.parametrize("text", ALL_LEVELS)
def test_every_walkable_cell_and_door_is_owned(text):
    level, t = build(text)
    floor = 0
    for x in range(level.width):
        for y in range(level.height):
            if level.is_wall(x, y):
                assert t.get_object_id((x, y)) == -1, f"wall {x}-{y} was claimed"
            elif level.has_door_at((x, y)):
                t.get_connector((x, y))
            else:
                floor += 1
                assert t.sector_id_at((x, y)) is not None, f"floor {x}-{y} has no sector"
    assert sum(s.cell_count for s in t.sectors) == floor


@pytest.mark.parametrize("text", ALL_LEVELS)
def test_connector_membership_is_symmetric(text):
    _, t = build(text)
    for c in t.connectors:
        if c.is_dummy():
            assert all(c.id not in s.connectors for s in t.sectors)
            continue
        assert c.id in t.get_sector(c.sector1).connectors
        assert c.id in t.get_sector(c.sector2).connectors
    for s in t.sectors:
        for cid in s.connectors:
            assert t.get_connector(cid).other_side(s.id) is not None


@pytest.mark.parametrize("text", ALL_LEVELS)
def test_dead_end_means_exactly_one_connector(text):
    _, t = build(text)
    for s in t.sectors:
        assert s.is_dead_end() == (len(s.connectors) == 1), f"sector {s.id}"


def test_door_inside_one_room_stays_dummy():
    _, t = build(DOOR_IN_ROOM)
    assert len(t.sectors) == 1
    assert len(t.connectors) == 1
    c = t.connectors[0]
    assert c.pos == (3, 2)
    assert c.is_dummy()
    assert not c.gut
    assert t.sectors[0].connectors == []
    assert not t.sectors[0].is_dead_end()


def test_door_touched_only_diagonally_is_not_a_connector():
    level = Level.from_ascii(["#####", "#.###", "##+##", "#####"])
    t = build_topology_map(level, level, level.seed_cell)
    assert len(t.sectors) == 1
    assert t.connectors == []
    assert t.get_object_id((2, 2)) == -1


def test_door_leading_into_wall_gets_no_second_side():
    level = Level.from_ascii(["#####", "#..+#", "#####"])
    t = build_topology_map(level, level, level.seed_cell)
    assert len(t.sectors) == 1
    assert len(t.connectors) == 1
    assert t.connectors[0].is_dummy()


def test_marked_seed_starts_the_fill():
    text = THREE_ROOMS.replace("#...#...#...#\n#############", "#...#...#..>#\n#############")
    level = Level.from_ascii(text)
    assert level.seed_cell == (11, 3)
    t = build_topology_map(level, level, level.seed_cell)
    assert t.sectors[0].seed == (11, 3)
    assert t.sector_id_at((10, 2)) == 0
    assert len(t.sectors) == 3


def test_walled_seed_builds_nothing():
    level = Level.from_ascii(SINGLE_ROOM)
    t = build_topology_map(level, level, (0, 0))
    assert t.sectors == []
    assert t.connectors == []


def test_back_to_back_doors_reach_the_room_beyond():
    _, t = build(DOUBLE_DOOR)
    assert [s.seed for s in t.sectors] == [(1, 1), (6, 2), (10, 2)]
    assert [(c.pos, c.sector1, c.sector2) for c in t.connectors] == [
        ((4, 2), 0, None),
        ((5, 2), 0, 3),
        ((9, 2), 3, 5),
    ]
    assert t.sector_id_at((7, 2)) == 3
    assert t.sectors[0].connectors == [2]
