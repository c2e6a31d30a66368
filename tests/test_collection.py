import pytest

from framespot import FRAME, Spot, SpotCollection


# =============================================================================
# PROXIMITY QUERIES
# =============================================================================

def test_scenario_queries(scenario, origin) -> None:
    collection, a, b, c = scenario

    assert collection.get_closest_spot(origin, 0) is a
    assert collection.get_n_closest_spots(origin, 0, 5) == [a, b]
    assert collection.get_n_spots() == 3
    assert collection.get_frame(c) == 1
    assert collection.get_frame(Spot(0.0, 1.0)) is None


def test_empty_frame_queries(scenario, origin) -> None:
    collection, _, _, _ = scenario
    collection.put(2, [])

    assert collection.get_closest_spot(origin, 2) is None
    assert collection.get_n_closest_spots(origin, 2, 3) == []


def test_absent_frame_behaves_as_empty(scenario, origin) -> None:
    collection, _, _, _ = scenario

    assert collection.get_closest_spot(origin, 42) is None
    assert collection.get_n_closest_spots(origin, 42, 3) == []
    assert list(collection.iter_frame(42)) == []
    assert 42 not in collection


def test_closest_spot_minimises_distance() -> None:
    spots = [Spot(5.0, 5.0), Spot(-1.0, 2.0), Spot(3.0, -4.0), Spot(0.5, 0.5)]
    collection = SpotCollection({7: spots})
    location = Spot(0.0, 0.0)

    closest = collection.get_closest_spot(location, 7)
    assert closest is spots[3]
    assert all(closest.square_distance_to(location) <= s.square_distance_to(location) for s in spots)


def test_closest_spot_tie_goes_to_first() -> None:
    first = Spot(1.0, 0.0)
    second = Spot(-1.0, 0.0)
    collection = SpotCollection({0: [first, second]})

    assert collection.get_closest_spot(Spot(0.0, 0.0), 0) is first


def test_n_closest_keeps_equidistant_spots() -> None:
    east = Spot(1.0, 0.0)
    west = Spot(-1.0, 0.0)
    north = Spot(0.0, 1.0)
    far = Spot(5.0, 5.0)
    collection = SpotCollection({0: [far, east, west, north]})

    result = collection.get_n_closest_spots(Spot(0.0, 0.0), 0, 4)
    assert result == [east, west, north, far]
    assert len(set(result)) == 4


def test_n_closest_sorted_and_truncated() -> None:
    spots = [Spot(float(x), 0.0) for x in (9, 3, 7, 1, 5)]
    collection = SpotCollection({0: spots})
    location = Spot(0.0, 0.0)

    result = collection.get_n_closest_spots(location, 0, 3)
    assert [s.x for s in result] == [1.0, 3.0, 5.0]

    d2 = [s.square_distance_to(location) for s in collection.get_n_closest_spots(location, 0, 10)]
    assert d2 == sorted(d2)
    assert len(d2) == 5


def test_n_closest_zero_and_negative(scenario, origin) -> None:
    collection, _, _, _ = scenario
    assert collection.get_n_closest_spots(origin, 0, 0) == []
    with pytest.raises(ValueError):
        collection.get_n_closest_spots(origin, 0, -1)


def test_queries_are_idempotent(scenario, origin) -> None:
    collection, _, _, c = scenario
    assert collection.get_n_closest_spots(origin, 0, 2) == collection.get_n_closest_spots(origin, 0, 2)
    assert collection.get_closest_spot(origin, 1) is collection.get_closest_spot(origin, 1)
    assert collection.get_all_spots() == collection.get_all_spots()
    assert collection.get_frame(c) == collection.get_frame(c)


# =============================================================================
# ENUMERATION
# =============================================================================

def test_all_spots_in_frame_order() -> None:
    a, b, c, d = (Spot(float(i), 0.0) for i in range(4))
    collection = SpotCollection()
    collection.put(5, [c, d])
    collection.put(-1, [a])
    collection.put(2, [b])

    assert collection.get_all_spots() == [a, b, c, d]
    assert list(collection) == [a, b, c, d]
    assert len(collection.get_all_spots()) == collection.get_n_spots()
    assert collection.get_n_spots() == sum(len(v) for v in collection.values())


def test_iteration_restarts_from_current_state(scenario) -> None:
    collection, a, b, c = scenario
    assert list(collection) == [a, b, c]

    d = Spot(3.0, 3.0)
    collection.add(d, 3)
    assert list(collection) == [a, b, c, d]
    assert list(collection.iter_frame(0)) == [a, b]


# =============================================================================
# MUTATION
# =============================================================================

def test_add_creates_frame_and_stamps_feature() -> None:
    collection = SpotCollection()
    spot = Spot(1.0, 1.0)
    collection.add(spot, 4)

    assert collection.frames() == [4]
    assert collection[4] == [spot]
    assert spot.get_feature(FRAME) == 4


def test_remove_spot(scenario) -> None:
    collection, a, b, c = scenario

    assert collection.remove_spot(b) is True
    assert collection.get_frame(b) is None
    assert collection.remove_spot(b) is False
    assert collection.remove_spot(c, frame=0) is False
    assert collection.remove_spot(c, frame=1) is True
    assert collection.get_n_spots() == 1
    # frame stays, now empty
    assert 1 in collection


def test_put_returns_previous(scenario) -> None:
    collection, a, b, c = scenario
    replacement = [Spot(1.0, 1.0)]

    assert collection.put(0, replacement) == [a, b]
    assert collection.put(9, []) is None
    assert collection.get(0) is replacement
    assert collection.frames() == [0, 1, 9]


def test_remove_frame(scenario) -> None:
    collection, a, b, c = scenario

    assert collection.remove(0) == [a, b]
    assert collection.remove(0) is None
    assert collection.frames() == [1]
    with pytest.raises(KeyError):
        del collection[0]
    del collection[1]
    assert collection.is_empty()


def test_frame_holding_none_keeps_keys_unique() -> None:
    collection = SpotCollection({0: [Spot(0.0, 0.0)]})

    assert collection.put(1, None) is None
    assert collection.put(1, []) is None
    assert collection.frames() == [0, 1]

    collection.put(2, None)
    assert collection.remove(2) is None
    assert collection.frames() == [0, 1]
    assert collection.get_n_spots() == 1
    assert len(collection.get_all_spots()) == 1
    assert [frame for frame, _ in collection.items()] == [0, 1]

    collection.put(3, None)
    assert list(collection) == collection.get_all_spots()
    assert collection.get_closest_spot(Spot(0.0, 0.0), 3) is None
    del collection[3]
    assert 3 not in collection
    assert collection.frames() == [0, 1]


def test_mapping_protocol(scenario) -> None:
    collection, a, b, c = scenario

    assert len(collection) == 2
    assert 0 in collection and collection.contains_frame(1)
    assert collection.contains_spots([c])
    assert not collection.contains_spots([a])
    assert collection.get(5) is None
    assert collection.get(5, []) == []
    with pytest.raises(KeyError):
        collection[5]

    collection[3] = [Spot(0.0, 0.0)]
    assert collection.items()[-1][0] == 3

    collection.clear()
    assert len(collection) == 0
    assert collection.first_frame() is None
    assert collection.last_frame() is None


def test_constructor_sorts_frames() -> None:
    collection = SpotCollection({3: [], 1: [], 2: []})
    assert collection.frames() == [1, 2, 3]
    assert collection.first_frame() == 1
    assert collection.last_frame() == 3


# =============================================================================
# RANGES
# =============================================================================

def test_sub_ranges_are_half_open() -> None:
    collection = SpotCollection({f: [Spot(float(f), 0.0)] for f in range(6)})

    assert collection.sub_map(1, 4).frames() == [1, 2, 3]
    assert collection.head_map(2).frames() == [0, 1]
    assert collection.tail_map(4).frames() == [4, 5]
    assert collection.sub_map(10, 20).is_empty()


def test_sub_ranges_share_spot_lists() -> None:
    collection = SpotCollection({0: [], 1: []})
    view = collection.tail_map(1)
    spot = Spot(0.0, 0.0)
    view.add(spot, 1)

    assert collection[1] == [spot]


def test_from_spots_keeps_order() -> None:
    a, b, c = Spot(0, 0), Spot(1, 1), Spot(2, 2)
    collection = SpotCollection.from_spots([(1, b), (0, a), (1, c)])

    assert collection.frames() == [0, 1]
    assert collection[1] == [b, c]
    assert collection.get_frame(c) == 1
