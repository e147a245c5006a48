"""Tests for keeper selection and move reasons."""

from pathlib import Path

from dupetier.grouping import find_duplicate_groups
from dupetier.resolve import MB, build_plan, build_reason, deciding_dimension, pick_keeper


class TestPickKeeper:
    def test_lossless_wins(self, make_file) -> None:
        mp3 = make_file(0, "A - T.mp3", kbps=320, size=50 * MB)
        flac = make_file(1, "A - T.flac", kbps=900, size=20 * MB)
        assert pick_keeper([mp3, flac]) is flac

    def test_bitrate_then_size(self, make_file) -> None:
        low = make_file(0, "A - T.mp3", kbps=192, size=9 * MB)
        high = make_file(1, "A - T (1).mp3", kbps=320, size=8 * MB)
        big = make_file(2, "A - T (2).mp3", kbps=320, size=10 * MB)
        assert pick_keeper([low, high, big]) is big

    def test_tie_goes_to_first_scanned(self, make_file) -> None:
        a = make_file(3, "A - T.mp3")
        b = make_file(1, "A - T.mp3", root=Path("/library/other"))
        assert pick_keeper([a, b]) is b
        assert pick_keeper([b, a]) is b


class TestReasons:
    def test_format(self, make_file) -> None:
        flac = make_file(0, "Artist - Track (Club Mix).flac", kbps=1411)
        mp3 = make_file(1, "Artist - Track (Club Mix).mp3", kbps=320)
        assert build_reason(flac, mp3) == (
            "Exact title match: 'Artist - Track (Club Mix)'; format: FLAC (lossless) vs MP3 (lossy)"
        )

    def test_bitrate(self, make_file) -> None:
        keeper = make_file(0, "A - T.mp3", kbps=320)
        other = make_file(1, "A - T.mp3", kbps=128)
        assert deciding_dimension(keeper, other) == "bitrate: 320 vs 128 kbps"

    def test_unknown_bitrate(self, make_file) -> None:
        keeper = make_file(0, "A - T.mp3", kbps=128)
        other = make_file(1, "A - T.mp3", kbps=None)
        assert deciding_dimension(keeper, other) == "bitrate: 128 vs unknown kbps"

    def test_size_in_megabytes(self, make_file) -> None:
        keeper = make_file(0, "A - T.mp3", size=2 * MB)
        other = make_file(1, "A - T.mp3", size=MB)
        assert deciding_dimension(keeper, other) == "size: 2.00 MB vs 1.00 MB"

    def test_size_falls_back_to_bytes(self, make_file) -> None:
        keeper = make_file(0, "A - T.mp3", size=2000)
        other = make_file(1, "A - T.mp3", size=1000)
        assert deciding_dimension(keeper, other) == "size: 2000 vs 1000 bytes"

    def test_identical(self, make_file) -> None:
        keeper = make_file(0, "A - T.mp3")
        other = make_file(1, "A - T.mp3")
        assert deciding_dimension(keeper, other) == "identical quality, kept first scanned file"


class TestPlan:
    def _files(self, make_file):
        return [
            make_file(0, "A - One.mp3", kbps=128),
            make_file(1, "A - One.flac", kbps=1000),
            make_file(2, "A - One (Original Mix).mp3", kbps=320),
            make_file(3, "B - Two.mp3"),
            make_file(4, "B - Two.mp3", root=Path("/library/dupes")),
        ]

    def test_decisions_point_at_keeper(self, make_file) -> None:
        plan = build_plan(find_duplicate_groups(self._files(make_file)))
        assert len(plan.groups) == 2
        first, second = plan.groups
        assert first.keeper.index == 1
        assert [d.path.name for d in first.decisions] == ["A - One.mp3", "A - One (Original Mix).mp3"]
        assert all(d.keeper == first.keeper.path for d in first.decisions)
        assert second.keeper.index == 3
        assert [d.root.name for d in second.decisions] == ["dupes"]

    def test_keeper_never_discarded(self, make_file) -> None:
        plan = build_plan(find_duplicate_groups(self._files(make_file)))
        for group in plan.groups:
            assert all(member is not group.keeper for member, _ in group.discards)
            assert len(group.discards) == len(group.decisions)

    def test_render_is_stable(self, make_file) -> None:
        files = self._files(make_file)
        text = build_plan(find_duplicate_groups(files)).render()
        assert text == build_plan(find_duplicate_groups(list(reversed(files)))).render()
        lines = text.splitlines()
        assert lines[0] == "Keep: /library/A - One.flac"
        assert lines[1] == "  Move: /library/A - One.mp3"
        assert lines[2].startswith("    Reason: Exact title match: 'A - One';")

    def test_empty(self) -> None:
        plan = build_plan([])
        assert plan.decisions == []
        assert plan.render() == ""
