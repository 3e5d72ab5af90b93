from spoonplanner.charts import create_energy_chart, COLOR_OVER, COLOR_WITHIN


def test_energy_chart_written(tmp_path):
    out = tmp_path / "week.png"
    colors = create_energy_chart([3, 16, 0, 0, 0, 0, 15], 15, str(out), title="Jan 6 - Jan 12, 2025")
    assert out.exists() and out.stat().st_size > 0
    assert colors[1] == COLOR_OVER
    assert colors[6] == COLOR_WITHIN


def test_energy_chart_empty_week(tmp_path):
    out = tmp_path / "empty.png"
    create_energy_chart([0] * 7, 15, str(out))
    assert out.exists()
