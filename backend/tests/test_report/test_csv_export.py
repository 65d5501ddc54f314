"""Tests for the colony CSV export."""

from petrilens.engine.context import ShapeType
from petrilens.report.csv_export import colonies_to_csv
from tests.conftest import make_colony

HEADER = (
    "Colony ID,Color RGB,Size (px),Size Category,Count Multiplier,Is Nested,"
    "Shape,Circularity,Density,Centroid X,Centroid Y,Width,Height"
)


def test_header_only_when_empty():
    assert colonies_to_csv([]) == HEADER


def test_rows_formatting():
    top = make_colony(
        1, 80, (0, 9, 0, 9),
        color_r=12, color_g=34, color_b=56,
        circularity=0.785398, centroid_x=4.5, centroid_y=4.25,
        shape_type=ShapeType.ROUND,
    )
    nested = make_colony(2, 12, (3, 6, 3, 5), is_nested_in_parent=True, parent_id=1)

    lines = colonies_to_csv([top, nested]).split("\n")

    assert lines[0] == HEADER
    assert lines[1] == '1,"12,34,56",80,Average,1,No,Round,0.785,80.0,4.5,4.3,10,10'
    assert lines[2].startswith('2,"200,200,200",12,Average,1,Yes (Parent: 1),Unknown,')
    assert len(lines) == 3


def test_no_trailing_newline():
    assert not colonies_to_csv([make_colony(1, 10, (0, 4, 0, 4))]).endswith("\n")
