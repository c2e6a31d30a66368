import pytest

from framespot import Spot, SpotCollection


@pytest.fixture
def origin():
    return Spot(0.0, 0.0, name="origin")


@pytest.fixture
def scenario():
    """Frame 0 -> [A(0,0), B(10,0)], frame 1 -> [C(0,1)]."""
    a = Spot(0.0, 0.0, name="A")
    b = Spot(10.0, 0.0, name="B")
    c = Spot(0.0, 1.0, name="C")
    collection = SpotCollection({0: [a, b], 1: [c]})
    return collection, a, b, c


@pytest.fixture
def make_movers():
    """Factory for collections of straight movers, one spot per start per frame."""
    def _make(n_frames, starts, velocity=(1.0, 0.0)):
        collection = SpotCollection()
        for frame in range(n_frames):
            for x0, y0 in starts:
                collection.add(Spot(x0 + velocity[0] * frame, y0 + velocity[1] * frame), frame)
        return collection
    return _make
