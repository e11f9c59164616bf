"""Tests for the FrameSet streaming buffer."""

import pytest

from asciiplay.frames import FrameSet


class TestFrameSet:
    """Tests for FrameSet."""

    def test_fifo_order(self, frames):
        """Test FIFO order."""
        frame_set = FrameSet()
        frame_set.add(frames[0]).add(frames[1]).finalize()

        assert frame_set.next() is frames[0]
        assert frame_set.next() is frames[1]
        assert not frame_set.has_next()
        assert frame_set.finalized
        assert frame_set.exhausted

    def test_total_length_counts_adds(self, frames):
        """Test total length counts adds."""
        frame_set = FrameSet()
        for frame in frames:
            frame_set.add(frame)
        frame_set.finalize()
        frame_set.next()
        frame_set.sub_set(0, 1)

        assert frame_set.total_length == 3
        assert frame_set.length == 2
        assert len(frame_set) == 2

    def test_add_after_finalize(self, frames):
        """Test add after finalize."""
        frame_set = FrameSet().finalize()
        with pytest.raises(RuntimeError):
            frame_set.add(frames[0])
        assert frame_set.total_length == 0

    def test_next_on_empty(self):
        """Test next on empty."""
        frame_set = FrameSet()
        with pytest.raises(IndexError):
            frame_set.next()
        assert frame_set.length == 0
        assert not frame_set.finalized

        frame_set.finalize()
        with pytest.raises(IndexError):
            frame_set.next()

    def test_empty_set_is_not_exhausted_until_finalized(self):
        """Test empty set is not exhausted until finalized."""
        frame_set = FrameSet()
        assert not frame_set.exhausted
        frame_set.finalize()
        assert frame_set.exhausted

    def test_finalize_notifies_once(self):
        """Test finalize notifies once."""
        frame_set = FrameSet()
        calls = []
        frame_set.on("finalize", lambda: calls.append("finalize"))

        frame_set.finalize()
        frame_set.finalize()

        assert calls == ["finalize"]

    def test_add_and_next_events(self, frames):
        """Test add and next events."""
        frame_set = FrameSet()
        added, taken = [], []
        frame_set.on("add", added.append)
        subscription = frame_set.on("next", taken.append)

        frame_set.add(frames[0]).add(frames[1])
        frame_set.next()
        subscription.unsubscribe()
        frame_set.next()

        assert added == [frames[0], frames[1]]
        assert taken == [frames[0]]

    def test_sub_set_is_detached(self, frames):
        """Test sub set is detached."""
        frame_set = FrameSet()
        for frame in frames:
            frame_set.add(frame)
        frame_set.finalize()

        sub_set = frame_set.sub_set(1)

        assert sub_set.total_length == 2
        assert sub_set.finalized
        assert sub_set.next() is frames[1]
        assert frame_set.length == 3

    def test_sub_set_of_open_set(self, frames):
        """Test sub set of open set."""
        frame_set = FrameSet(frames)
        sub_set = frame_set.sub_set(0, 2)
        assert not sub_set.finalized
        sub_set.add(frames[2])
        assert sub_set.total_length == 3
