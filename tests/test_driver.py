# tests/test_driver.py
import cv2

from pipeline.decisions import Decision, ScriptedDecisions, skip_all
from pipeline.driver import build_tracker, process_frames, run_frames
from regions.recorder import read_records


def _collect(frames, decide):
    """Run the generator and keep every FrameResult it yields."""
    seen = []

    def _decide(result):
        seen.append(result)
        return decide(result)

    summary = run_frames(frames, _decide)
    return seen, summary


def test_small_motion_keeps_color_and_saves(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([
        [(20, 20, 20), (90, 60, 20)],
        [(25, 22, 20), (95, 58, 20)],
        [(25, 22, 20), (20, 90, 25)],          # second square jumps far away
    ])
    out = tmp_path / 'out'
    out.mkdir()
    seen, summary = _collect(process_frames(inp, out, fixed_cfg), skip_all)

    assert [r.index for r in seen] == [1, 2, 3]
    f1, f2, f3 = seen
    assert len(f1.accepted) == 2 and len(f2.accepted) == 2

    def color_near(result, x, y):
        for r, c in zip(result.accepted, result.colors):
            if abs(r.centroid[0] - x) < 15 and abs(r.centroid[1] - y) < 15:
                return c
        raise AssertionError(f"no region near {(x, y)}")

    assert color_near(f1, 30, 30) == color_near(f2, 35, 32) == color_near(f3, 35, 32)
    assert color_near(f1, 100, 70) == color_near(f2, 105, 68)
    assert color_near(f3, 32, 102) not in (color_near(f2, 35, 32), color_near(f2, 105, 68))

    assert summary.frames_seen == 3 and summary.frames_saved == 3
    for i in (1, 2, 3):
        assert cv2.imread(str(out / f"img{i}p3.png")) is not None
    saved = cv2.imread(str(out / "img1p3.png"))
    assert (saved != f1.frame).any()               # annotations were drawn


def test_annotation_leaves_frame_untouched(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([[(20, 20, 20)]])
    seen, _ = _collect(process_frames(inp, tmp_path, fixed_cfg), skip_all)
    r = seen[0]
    assert r.frame is not r.annotated
    assert set(r.frame.reshape(-1).tolist()) <= {0, 255}
    assert (r.annotated != r.frame).any()


def test_label_records_all_regions_but_tracks_accepted(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([
        [(0, 40, 30), (50, 20, 20), (100, 70, 20)],   # first square touches the left edge
    ])
    ds = tmp_path / 'features.csv'
    (tmp_path / "out").mkdir()
    tracker = build_tracker(fixed_cfg)
    frames = process_frames(inp, tmp_path / "out", fixed_cfg, dataset_path=ds, tracker=tracker)
    seen, summary = _collect(frames, ScriptedDecisions([Decision.label_as('square')]))

    r = seen[0]
    assert len(r.regions) == 3
    assert r.regions[0].touches_boundary and r.regions[0].area == 900
    assert len(r.accepted) == 2

    df = read_records(ds)
    assert df['label'].tolist() == ['square'] * 3
    assert df['area'].tolist() == [900, 400, 400]
    assert summary.records_written == 3 and summary.labeled_frames == [1]

    assert len(tracker.previous_regions) == 2
    assert not any(p.touches_boundary for p in tracker.previous_regions)
    assert tracker.previous_colors == r.colors


def test_labels_accumulate_across_frames(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([[(20, 20, 20)], [(22, 20, 20)], [(24, 20, 20)]])
    ds = tmp_path / 'features.csv'
    script = ScriptedDecisions([Decision.label_as('a'), Decision.skip(), Decision.label_as('b')])
    _collect(process_frames(inp, tmp_path, fixed_cfg, dataset_path=ds), script)
    assert read_records(ds)['label'].tolist() == ['a', 'b']


def test_exit_stops_before_saving(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([[(20, 20, 20)], [(22, 20, 20)], [(24, 20, 20)]])
    out = tmp_path / 'out'
    out.mkdir()
    ds = tmp_path / 'features.csv'
    seen, summary = _collect(process_frames(inp, out, fixed_cfg, dataset_path=ds),
                             ScriptedDecisions([Decision.skip(), Decision.exit()]))
    assert [r.index for r in seen] == [1, 2]
    assert summary.interrupted
    assert (out / 'img1p3.png').exists()
    assert not (out / 'img2p3.png').exists()
    assert not (out / 'img3p3.png').exists()
    assert not ds.exists()


def test_unreadable_frame_is_skipped(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([[(20, 20, 20)], [(22, 20, 20)], [(24, 20, 20)]])
    (inp / 'img2p3.png').write_bytes(b'garbage')
    out = tmp_path / 'out'
    out.mkdir()
    seen, summary = _collect(process_frames(inp, out, fixed_cfg), skip_all)
    assert [r.index for r in seen] == [1, 3]
    assert summary.frames_seen == 3 and summary.frames_skipped == 1 and summary.frames_saved == 2
    assert not (out / 'img2p3.png').exists()


def test_save_failure_does_not_stop_run(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([[(20, 20, 20)], [(22, 20, 20)]])
    seen, summary = _collect(process_frames(inp, tmp_path / 'missing', fixed_cfg), skip_all)
    assert len(seen) == 2
    assert summary.frames_saved == 0


def test_same_input_same_colors(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([[(20, 20, 20), (90, 60, 20)], [(100, 20, 15)]])
    runs = []
    for _ in range(2):
        seen, _ = _collect(process_frames(inp, tmp_path, fixed_cfg), skip_all)
        runs.append([r.colors for r in seen])
    assert runs[0] == runs[1]


def test_max_regions_cap(tmp_path, fixed_cfg, write_frames):
    fixed_cfg['regions']['max_regions'] = 2
    inp = write_frames([[(10, 10, 12), (40, 10, 20), (80, 10, 16), (20, 60, 25)]])
    seen, _ = _collect(process_frames(inp, tmp_path, fixed_cfg), skip_all)
    assert [r.area for r in seen[0].accepted] == [625, 400]
    assert len(seen[0].regions) == 4


def test_no_frames(tmp_path, fixed_cfg):
    seen, summary = _collect(process_frames(tmp_path, tmp_path, fixed_cfg), skip_all)
    assert seen == [] and summary.frames_seen == 0


def test_label_without_dataset_is_ignored(tmp_path, fixed_cfg, write_frames, capsys):
    inp = write_frames([[(20, 20, 20)]])
    _, summary = _collect(process_frames(inp, tmp_path, fixed_cfg),
                          ScriptedDecisions([Decision.label_as('x')]))
    assert summary.records_written == 0 and summary.frames_saved == 1
    assert 'no dataset file' in capsys.readouterr().err


def test_bad_label_is_ignored(tmp_path, fixed_cfg, write_frames):
    inp = write_frames([[(20, 20, 20)]])
    ds = tmp_path / 'features.csv'
    _, summary = _collect(process_frames(inp, tmp_path, fixed_cfg, dataset_path=ds),
                          ScriptedDecisions([Decision.label_as('a,b')]))
    assert summary.records_written == 0
    assert not ds.exists()
