import csv

from seasonfx.perf_hud import PerformanceHUD


def test_performance_hud_ema_smoothing():
    hud = PerformanceHUD(enabled=True, alpha=0.1)
    hud.begin_frame()
    hud._t_start -= 0.010  # pretend 10ms of work
    hud.end_frame()
    first = hud.last_sample
    assert first is not None
    assert 9.5 <= first.work_ms <= 10.5
    assert first.avg_work_ms == first.work_ms

    hud.begin_frame()
    hud._t_start -= 0.030
    hud.end_frame()
    # EMA: 0.1 * 30 + 0.9 * 10 = 12.0
    assert 11.5 <= hud.last_sample.avg_work_ms <= 12.5


def test_disabled_hud_records_nothing():
    hud = PerformanceHUD(enabled=False)
    hud.begin_frame()
    hud.end_frame(counts={"particles": 3})
    assert hud.last_sample is None
    assert hud.lines() == []


def test_counts_and_fps_appear_in_lines():
    class Clock:
        def get_fps(self):
            return 59.5

    hud = PerformanceHUD()
    hud.begin_frame()
    hud.end_frame(counts={"particles": 140, "ripples": 4}, clock=Clock())
    lines = hud.lines()
    assert "fps 59.5" in lines
    assert "particles 140" in lines
    assert "ripples 4" in lines


def test_csv_log(tmp_path):
    path = tmp_path / "perf.csv"
    hud = PerformanceHUD(log_path=str(path))
    for _ in range(3):
        hud.begin_frame()
        hud.end_frame(counts={"particles": 90})
    hud.close()
    with open(path, newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["timestamp", "work_ms", "avg_work_ms", "fps", "counts"]
    assert len(rows) == 4
    assert rows[1][4] == '{"particles": 90}'
