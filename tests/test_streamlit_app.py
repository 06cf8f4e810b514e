from streamlit_app import chart_rows


def _point(label, minutes, quality=75):
    return {"date": "2024-01-15", "label": label, "duration_minutes": minutes, "quality": quality}


def test_same_day_points_keep_their_own_bars():
    rows = chart_rows([_point("Jan 15", 360, 50), _point("Jan 15", 540, 90)])
    assert len(rows) == 2
    assert rows[0]["point"] != rows[1]["point"]
    assert [r["duration_minutes"] for r in rows] == [360, 540]


def test_rows_sort_in_chart_order():
    chart = [_point(f"Jan {day}", 400 + day) for day in range(1, 12)]
    points = [r["point"] for r in chart_rows(chart)]
    assert sorted(points) == points
    assert points[0] == "01. Jan 1"


def test_empty_chart():
    assert chart_rows([]) == []
