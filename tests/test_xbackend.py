"""Tests for the X11 message encoding helpers."""

from layout_keeper.xbackend import (
    MOVERESIZE_FLAGS,
    SOURCE_PAGER,
    STATE_ADD,
    STATE_REMOVE,
    pack_client_data,
    state_messages,
)


class TestPackClientData:
    """Test client message payloads."""

    def test_pads_to_five_slots(self):
        assert pack_client_data([1, 2]) == [1, 2, 0, 0, 0]

    def test_negative_coordinates_wrap_to_unsigned(self):
        data = pack_client_data([MOVERESIZE_FLAGS, -1920, -10, 800, 600])

        assert data == [0xF00, 0xFFFFF880, 0xFFFFFFF6, 800, 600]

    def test_truncates_extra_values(self):
        assert pack_client_data(range(8)) == [0, 1, 2, 3, 4]


class TestStateMessages:
    """Test _NET_WM_STATE splitting."""

    def test_two_flags_fit_one_message(self):
        assert state_messages((10, 11), False) == [[STATE_REMOVE, 10, 11, SOURCE_PAGER, 0]]

    def test_odd_count_pads_last_message(self):
        assert state_messages((10, 11, 12), True) == [
            [STATE_ADD, 10, 11, SOURCE_PAGER, 0],
            [STATE_ADD, 12, 0, SOURCE_PAGER, 0],
        ]

    def test_order_and_duplicates_kept(self):
        messages = state_messages((12, 10, 12), True)

        assert [m[1:3] for m in messages] == [[12, 10], [12, 0]]

    def test_no_flags_no_messages(self):
        assert state_messages((), True) == []
