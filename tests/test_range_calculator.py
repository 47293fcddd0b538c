import pytest

from pagegrid.utils.range_calculator import (EMPTY_RANGE, VisibleRange,
                                             calculate_visible_range)


def test_initial_range_at_offset_zero():
    visible = calculate_visible_range(0, 400, 60, 5, 1000)

    assert visible == VisibleRange(0, 12)
    assert len(visible) == 13


def test_range_after_scrolling_pulls_back_by_overscan():
    visible = calculate_visible_range(3000, 400, 60, 5, 1000)

    assert visible.start_index == 45
    assert visible.end_index == 62


def test_range_is_clamped_to_last_row():
    visible = calculate_visible_range(59_900, 400, 60, 5, 1000)

    assert visible.end_index == 999
    assert visible.start_index == 993


def test_offset_far_past_content_still_yields_valid_range():
    visible = calculate_visible_range(1_000_000, 400, 60, 5, 10)

    assert 0 <= visible.start_index <= visible.end_index <= 9


@pytest.mark.parametrize("offset", [0, 1, 59, 60, 61, 599, 3000, 12345, 59_600])
@pytest.mark.parametrize("total_rows", [1, 7, 20, 1000])
def test_range_bounds_hold_for_any_offset(offset, total_rows):
    visible = calculate_visible_range(offset, 400, 60, 5, total_rows)

    assert 0 <= visible.start_index <= visible.end_index <= total_rows - 1


def test_more_overscan_never_shrinks_the_range():
    previous = calculate_visible_range(3000, 400, 60, 0, 1000)
    for overscan in range(1, 30):
        current = calculate_visible_range(3000, 400, 60, overscan, 1000)
        assert current.start_index <= previous.start_index
        assert current.end_index >= previous.end_index
        previous = current


def test_empty_dataset_gives_empty_range():
    visible = calculate_visible_range(0, 400, 60, 5, 0)

    assert visible is EMPTY_RANGE
    assert visible.empty
    assert list(visible) == []


def test_negative_offset_is_treated_as_top():
    assert calculate_visible_range(-500, 400, 60, 5, 1000) == VisibleRange(0, 12)


def test_non_positive_row_height_is_rejected():
    with pytest.raises(ValueError):
        calculate_visible_range(0, 400, 0, 5, 1000)
