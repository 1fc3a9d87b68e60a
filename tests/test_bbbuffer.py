import pytest

from mnemabi.bbbuffer import (
    BBBuffer,
    BBQueueError,
    GrantInProgress,
    InsufficientSize,
)


def _split(size):
    bb = BBBuffer(size)
    return bb, bb.take_producer(), bb.take_consumer()


def _push(prod, data, used=None):
    grant = prod.grant_exact(len(data))
    grant.buf()[:] = data
    grant.commit(len(data) if used is None else used)


def _assert_empty(cons):
    with pytest.raises(InsufficientSize):
        cons.read()


def test_errors_are_caught_through_base_class():
    _, prod, _ = _split(6)
    with pytest.raises(BBQueueError) as too_big:
        prod.grant_exact(7)
    assert isinstance(too_big.value, InsufficientSize)

    prod.grant_exact(2)
    with pytest.raises(BBQueueError) as busy:
        prod.grant_exact(1)
    assert isinstance(busy.value, GrantInProgress)


def test_fresh_buffer_is_zeroed():
    bb = BBBuffer(6)
    assert bytes(bb.ring.buf) == bytes(6)
    assert len(bb) == 6


def test_grant_exact_then_no_room():
    _, prod, _ = _split(6)
    grant = prod.grant_exact(4)
    assert len(grant) == len(grant.buf()) == 4
    grant.commit(4)
    with pytest.raises(InsufficientSize):
        prod.grant_exact(3)


def test_grant_max_remaining_shrinks_at_end():
    _, prod, cons = _split(6)
    grant = prod.grant_max_remaining(4)
    assert len(grant.buf()) == 4
    grant.commit(4)

    rgrant = cons.read()
    assert len(rgrant.buf()) == 4
    rgrant.release(4)

    grant = prod.grant_max_remaining(3)
    assert len(grant.buf()) == 2
    grant.commit(2)


@pytest.mark.parametrize("used", [4, 100])
def test_written_bytes_are_read_back(used):
    _, prod, cons = _split(6)
    _push(prod, bytes([1, 2, 3, 4]), used)
    assert bytes(cons.read().buf()) == bytes([1, 2, 3, 4])


def test_read_on_empty_buffer_fails_and_clears_flag():
    bb, _, cons = _split(6)
    _assert_empty(cons)
    assert bb.ring.read_in_progress is False


@pytest.mark.parametrize("method", ["grant_exact", "grant_max_remaining"])
def test_second_write_grant_is_refused(method):
    bb, prod, cons = _split(8)
    first = prod.grant_exact(2)
    with pytest.raises(GrantInProgress):
        getattr(prod, method)(1)
    assert bb.ring.write_in_progress is True
    first.buf()[:] = b"ok"
    first.commit(2)
    assert bytes(cons.read().buf()) == b"ok"


@pytest.mark.parametrize("method", ["read", "split_read"])
def test_second_read_grant_is_refused(method):
    bb, prod, cons = _split(8)
    _push(prod, b"abc")
    rgrant = cons.read()
    with pytest.raises(GrantInProgress):
        getattr(cons, method)()
    assert bb.ring.read_in_progress is True
    assert bytes(rgrant.buf()) == b"abc"


@pytest.mark.parametrize(
    "attempt",
    [
        lambda prod, cons: prod.grant_exact(1),
        lambda prod, cons: prod.grant_max_remaining(1),
        lambda prod, cons: cons.read(),
    ],
    ids=["grant_exact", "grant_max_remaining", "read"],
)
def test_zero_sized_buffer_has_no_room(attempt):
    bb, prod, cons = _split(0)
    with pytest.raises(InsufficientSize):
        attempt(prod, cons)
    assert bb.ring.write_in_progress is False
    assert bb.ring.read_in_progress is False
    assert (bb.ring.write, bb.ring.read) == (0, 0)


@pytest.mark.parametrize("method", ["grant_exact", "grant_max_remaining"])
def test_negative_sizes_are_rejected(method):
    bb, prod, _ = _split(6)
    with pytest.raises(ValueError):
        getattr(prod, method)(-1)
    assert (bb.ring.write, bb.ring.reserve) == (0, 0)


def test_failed_grant_does_not_leave_grant_in_progress():
    bb, prod, _ = _split(4)
    with pytest.raises(InsufficientSize):
        prod.grant_exact(5)
    assert bb.ring.write_in_progress is False
    assert len(prod.grant_exact(4)) == 4


def test_grant_exact_wraps_around():
    _, prod, cons = _split(6)
    _push(prod, b"abcd")
    cons.read().release(4)
    _push(prod, b"xyz")

    rgrant = cons.read()
    assert bytes(rgrant.buf()) == b"xyz"
    rgrant.release(3)
    _assert_empty(cons)


def test_split_read_covers_both_regions():
    _, prod, cons = _split(6)
    _push(prod, b"abcde")
    cons.read().release(3)
    _push(prod, b"fg")

    split = cons.split_read()
    first, second = split.bufs()
    assert bytes(first) + bytes(second) == b"defg"
    assert split.combined_len() == len(b"defg")
    split.release(split.combined_len())
    _assert_empty(cons)


def test_split_read_without_wrap_has_empty_second_region():
    _, prod, cons = _split(8)
    _push(prod, b"abc")
    first, second = cons.split_read().bufs()
    assert (bytes(first), bytes(second)) == (b"abc", b"")


def test_dropped_write_grant_commits_nothing():
    bb, prod, cons = _split(6)
    with prod.grant_exact(3) as grant:
        grant.buf()[:] = b"abc"
    assert bb.ring.write_in_progress is False
    _assert_empty(cons)


def test_dropped_write_grant_commits_configured_amount():
    _, prod, cons = _split(6)
    with prod.grant_exact(4) as grant:
        grant.buf()[:] = b"wxyz"
        grant.to_commit(2)
    assert bytes(cons.read().buf()) == b"wx"


def test_dropped_read_grant_releases_configured_amount():
    _, prod, cons = _split(6)
    _push(prod, b"wxyz")
    with cons.read() as rgrant:
        rgrant.to_release(1)
    assert bytes(cons.read().buf()) == b"xyz"


def test_many_round_trips_preserve_order():
    _, prod, cons = _split(16)
    received = bytearray()
    sent = bytearray()
    for i in range(50):
        chunk = bytes([i % 256]) * (1 + i % 5)
        _push(prod, chunk)
        sent += chunk
        while True:
            try:
                rgrant = cons.read()
            except InsufficientSize:
                break
            received += bytes(rgrant.buf())
            rgrant.release(len(rgrant))
    assert received == sent