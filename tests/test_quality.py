"""Tests for quality scoring and bitrate tiers."""

from itertools import product
from pathlib import Path

import pytest

from dupetier.models import AudioFormat, AudioProperties, BitrateTier
from dupetier.quality import (
    bitrate_records,
    classify_bitrate,
    is_lossless,
    quality_score,
    summarize_bitrates,
)


def _props(fmt: AudioFormat = AudioFormat.MP3, kbps: int | None = 320, size: int = 1000) -> AudioProperties:
    return AudioProperties(format=fmt, bitrate_kbps=kbps, file_size_bytes=size)


class TestQualityScore:
    def test_lossless_formats(self) -> None:
        assert is_lossless(AudioFormat.FLAC)
        assert is_lossless(AudioFormat.WAV)
        assert not is_lossless(AudioFormat.MP3)
        assert not is_lossless(AudioFormat.OTHER)

    def test_flac_beats_mp3_regardless_of_bitrate(self) -> None:
        flac = quality_score(_props(AudioFormat.FLAC, 700, 10))
        mp3 = quality_score(_props(AudioFormat.MP3, 320, 10_000_000))
        assert flac > mp3

    def test_bitrate_then_size(self) -> None:
        assert quality_score(_props(kbps=320, size=1)) > quality_score(_props(kbps=256, size=999))
        assert quality_score(_props(kbps=320, size=2)) > quality_score(_props(kbps=320, size=1))

    def test_missing_bitrate_ranks_as_zero(self) -> None:
        score = quality_score(_props(kbps=None))
        assert score.bitrate_kbps == 0
        assert quality_score(_props(kbps=64)) > score

    def test_total_order_is_transitive(self) -> None:
        scores = [
            quality_score(_props(fmt, kbps, size))
            for fmt, kbps, size in product(
                [AudioFormat.FLAC, AudioFormat.MP3], [None, 128, 320, 1411], [100, 200]
            )
        ]
        for a, b, c in product(scores, repeat=3):
            if a >= b and b >= c:
                assert a >= c
        for a, b in product(scores, repeat=2):
            assert a <= b or b <= a


class TestClassifyBitrate:
    @pytest.mark.parametrize("kbps,tier", [
        (1500, BitrateTier.HIGH_RES),
        (9216, BitrateTier.HIGH_RES),
        (1499, BitrateTier.LOSSLESS),
        (700, BitrateTier.LOSSLESS),
        (699, BitrateTier.UNCLASSIFIED),
        (401, BitrateTier.UNCLASSIFIED),
        (400, BitrateTier.HIGH),
        (256, BitrateTier.HIGH),
        (255, BitrateTier.STANDARD),
        (160, BitrateTier.STANDARD),
        (159, BitrateTier.LOW),
        (64, BitrateTier.LOW),
        (63, BitrateTier.UNCLASSIFIED),
        (0, BitrateTier.UNCLASSIFIED),
    ])
    def test_boundaries(self, kbps: int, tier: BitrateTier) -> None:
        assert classify_bitrate(kbps) is tier

    def test_missing_bitrate(self) -> None:
        assert classify_bitrate(None) is BitrateTier.UNCLASSIFIED


class TestSummary:
    def test_summary_statistics(self) -> None:
        records = bitrate_records([
            (Path("a.mp3"), _props(kbps=320)),
            (Path("b.flac"), _props(AudioFormat.FLAC, kbps=1411)),
            (Path("c.mp3"), _props(kbps=None)),
        ])
        summary = summarize_bitrates(records)
        assert summary.total_files == 3
        assert summary.files_with_bitrate == 2
        assert summary.average_bitrate == pytest.approx(865.5)
        assert summary.min_bitrate == 320
        assert summary.max_bitrate == 1411
        assert summary.tier_counts == {
            BitrateTier.LOSSLESS: 1,
            BitrateTier.HIGH: 1,
            BitrateTier.UNCLASSIFIED: 1,
        }
        assert summary.percentage(BitrateTier.HIGH) == pytest.approx(100 / 3)

    def test_records_keep_format(self) -> None:
        [record] = bitrate_records([(Path("b.flac"), _props(AudioFormat.FLAC, kbps=1411))])
        assert record.format is AudioFormat.FLAC
        assert record.tier is BitrateTier.LOSSLESS

    def test_empty(self) -> None:
        summary = summarize_bitrates([])
        assert summary.total_files == 0
        assert summary.average_bitrate == 0.0
        assert summary.percentage(BitrateTier.LOW) == 0.0
