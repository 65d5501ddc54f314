"""Tests for layer 2: nesting, size buckets, shape labels."""

import pytest

from petrilens.engine.colonies import classify_colonies
from petrilens.engine.context import ShapeType, SizeCategory
from petrilens.engine.layer2.s2_01_nesting import detect_nesting
from petrilens.engine.layer2.s2_02_size_buckets import bucket_sizes, median_size
from petrilens.engine.layer2.s2_03_shape_labels import classify_shape
from petrilens.engine.layer3.s3_01_summary import effective_count
from tests.conftest import make_colony


def _row_of(sizes):
    """Colonies side by side, 30 px apart, no containment."""
    return [make_colony(i + 1, s, (i * 30, i * 30 + 19, 0, 19)) for i, s in enumerate(sizes)]


def test_nested_square_in_square():
    big = make_colony(1, 1600, (0, 39, 0, 39))
    small = make_colony(2, 100, (15, 24, 15, 24))
    classify_colonies([big, small])

    assert small.is_nested_in_parent is True
    assert small.parent_id == big.id
    assert big.is_nested_in_parent is None
    assert big.parent_id is None
    # The parent drops out of the count; only the larger blob's multiplier
    # value survives, carried by the child
    assert effective_count([big, small]) == big.count_multiplier == 1


def test_nesting_needs_size_ratio():
    big = make_colony(1, 150, (0, 39, 0, 39))
    small = make_colony(2, 100, (15, 24, 15, 24))
    assert detect_nesting([big, small]) == 0
    assert small.is_nested_in_parent is None


def test_first_containing_parent_wins():
    outer = make_colony(1, 4000, (0, 99, 0, 99))
    middle = make_colony(2, 1000, (10, 60, 10, 60))
    inner = make_colony(3, 50, (20, 25, 20, 25))
    assert detect_nesting([outer, middle, inner]) == 2

    assert middle.parent_id == 1
    # Both outer and middle contain inner; the lower index claims it
    assert inner.parent_id == 1


def test_nested_child_can_still_be_a_parent():
    outer = make_colony(1, 4000, (0, 99, 0, 99))
    middle = make_colony(2, 1000, (10, 60, 10, 60))
    inner = make_colony(3, 50, (20, 25, 20, 25))
    # middle precedes outer in the list, so it claims inner
    detect_nesting([middle, inner, outer])
    assert inner.parent_id == 2
    assert middle.parent_id == 1


def test_size_buckets_against_median():
    colonies = _row_of([50, 50, 50, 50, 400])
    classify_colonies(colonies)

    assert median_size(colonies) == 50
    assert colonies[4].count_multiplier == 4
    assert colonies[4].size_category == SizeCategory.LARGE_4X
    for col in colonies[:4]:
        assert col.count_multiplier == 1
        assert col.size_category == SizeCategory.AVERAGE
    assert effective_count(colonies) == 8


def test_size_buckets_all_categories():
    colonies = _row_of([10, 20, 20, 45, 90])
    bucket_sizes(colonies, median_size(colonies))
    assert [c.size_category for c in colonies] == [
        SizeCategory.BELOW_AVERAGE,
        SizeCategory.AVERAGE,
        SizeCategory.AVERAGE,
        SizeCategory.LARGE_2X,
        SizeCategory.LARGE_4X,
    ]
    assert [c.count_multiplier for c in colonies] == [1, 1, 1, 2, 4]


def test_median_is_upper_middle_for_even_counts():
    assert median_size(_row_of([10, 20, 30, 40])) == 30
    assert median_size([]) == 0


def test_nested_colonies_skip_large_buckets_only():
    parent = make_colony(1, 4000, (0, 99, 0, 99))
    small_child = make_colony(2, 12, (10, 13, 10, 12))
    big_child = make_colony(3, 100, (40, 59, 40, 59))
    others = [make_colony(i, 20, (200 + i * 10, 205 + i * 10, 0, 5)) for i in range(4, 7)]
    colonies = [parent, small_child, big_child, *others]
    classify_colonies(colonies)

    assert median_size(colonies) == 20
    assert small_child.is_nested_in_parent is True
    assert big_child.is_nested_in_parent is True
    # Nested colonies still get the Below Average / Average label
    assert small_child.size_category == SizeCategory.BELOW_AVERAGE
    # 100 px is 5x the median, but nested colonies never become Large
    assert big_child.size_category == SizeCategory.AVERAGE
    assert big_child.count_multiplier == 1
    assert parent.size_category == SizeCategory.LARGE_4X
    # parent excluded, both children and the three others count once each
    assert effective_count(colonies) == 5


@pytest.mark.parametrize(
    "circularity, density, expected",
    [
        (0.81, 0.1, ShapeType.ROUND),
        (0.8, 0.1, ShapeType.OVAL),
        (0.61, 0.9, ShapeType.OVAL),
        (0.6, 0.81, ShapeType.IRREGULAR_COMPACT),
        (0.6, 0.8, ShapeType.IRREGULAR_SPARSE),
    ],
)
def test_shape_labels(circularity, density, expected):
    assert classify_shape(circularity, density) == expected


def test_shapes_label_nested_colonies_too():
    big = make_colony(1, 1600, (0, 39, 0, 39), circularity=0.9)
    small = make_colony(2, 100, (15, 24, 15, 24), circularity=0.7)
    classify_colonies([big, small])
    assert big.shape_type == ShapeType.ROUND
    assert small.shape_type == ShapeType.OVAL


def test_classify_empty_list():
    assert classify_colonies([]) == []
