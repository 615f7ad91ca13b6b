import logging

import pytest

from pageweight.analyzers.byte_weight import (
    META,
    aggregate_records,
    compute_audit,
    has_exceeded_js_bundle_size,
    rank_results,
)
from pageweight.analyzers.scoring import compute_log_normal_score
from pageweight.models.schemas import ItemType, NetworkRecord, ResourceType, ScoreOptions


class TestScenarios:
    def test_large_script_is_flagged(self):
        records = [
            NetworkRecord(
                url="a.js",
                scheme="http",
                finished=True,
                transfer_size=200000,
                resource_type=ResourceType.SCRIPT,
            )
        ]
        outcome = compute_audit(records, throughput=100)

        assert outcome.raw_value == 200000
        assert outcome.total_completed_requests == 1
        assert outcome.top_results[0].flagged is True
        assert outcome.top_results[0].total_ms == 2000.0

    def test_data_uri_excluded(self):
        records = [
            NetworkRecord(
                url="b.png",
                scheme="data",
                finished=True,
                transfer_size=5000,
                resource_type=ResourceType.IMAGE,
            )
        ]
        outcome = compute_audit(records, throughput=100)

        assert outcome.raw_value == 0
        assert outcome.total_completed_requests == 0
        assert outcome.top_results == []

    def test_unfinished_excluded(self):
        records = [
            NetworkRecord(
                url="c.js",
                scheme="http",
                finished=False,
                transfer_size=999999,
                resource_type=ResourceType.SCRIPT,
            )
        ]
        outcome = compute_audit(records, throughput=100)

        assert outcome.raw_value == 0
        assert outcome.total_completed_requests == 0

    def test_ties_keep_encounter_order(self, make_record):
        records = [make_record(url=f"https://example.com/{i}.js") for i in range(15)]
        outcome = compute_audit(records, throughput=100)

        assert outcome.raw_value == 15000
        assert outcome.total_completed_requests == 15
        assert [item.url for item in outcome.top_results] == [
            f"https://example.com/{i}.js" for i in range(10)
        ]


class TestBundleSize:
    def test_threshold_is_exclusive(self, make_record):
        assert not has_exceeded_js_bundle_size(make_record(transfer_size=174080))
        assert has_exceeded_js_bundle_size(make_record(transfer_size=174081))

    @pytest.mark.parametrize(
        "resource_type",
        [ResourceType.IMAGE, ResourceType.STYLESHEET, ResourceType.DOCUMENT, ResourceType.OTHER],
    )
    def test_non_scripts_never_flagged(self, make_record, resource_type):
        record = make_record(transfer_size=10_000_000, resource_type=resource_type)
        assert not has_exceeded_js_bundle_size(record)

    def test_custom_threshold(self, make_record):
        record = make_record(transfer_size=60_000)
        assert has_exceeded_js_bundle_size(record, threshold=50_000)

        outcome = compute_audit([record], 100, ScoreOptions(bundle_size_threshold=50_000))
        assert outcome.top_results[0].flagged


class TestAggregation:
    def test_total_counts_every_included_record(self, make_record):
        sizes = [100 * (i + 1) for i in range(25)]
        records = [make_record(url=f"r{i}", transfer_size=s) for i, s in enumerate(sizes)]
        records.append(make_record(url="inline", transfer_size=10**6, scheme="data"))
        records.append(make_record(url="pending", transfer_size=10**6, finished=False))

        outcome = compute_audit(records, throughput=100)

        assert outcome.raw_value == sum(sizes)
        assert outcome.total_completed_requests == 25
        assert len(outcome.top_results) == 10
        assert [item.total_bytes for item in outcome.top_results] == sorted(sizes, reverse=True)[:10]

    def test_sorted_descending_stable(self, make_record):
        records = [
            make_record(url="small", transfer_size=10),
            make_record(url="big-1", transfer_size=500),
            make_record(url="mid", transfer_size=200),
            make_record(url="big-2", transfer_size=500),
        ]
        results, total = aggregate_records(records, throughput=10)

        assert total == 1210
        assert [r.url for r in results] == ["small", "big-1", "mid", "big-2"]
        assert [r.url for r in rank_results(results)] == ["big-1", "big-2", "mid", "small"]

    def test_idempotent(self, make_record):
        records = [make_record(url=f"r{i}", transfer_size=i * 7) for i in range(12)]

        first = aggregate_records(records, throughput=3)
        second = aggregate_records(records, throughput=3)

        assert first == second

    @pytest.mark.parametrize("throughput", [0, None, float("nan"), float("inf")])
    def test_missing_throughput_gives_zero_time(self, make_record, throughput):
        results, _ = aggregate_records([make_record(transfer_size=5000)], throughput)
        assert results[0].total_ms == 0.0

    def test_empty_records(self):
        outcome = compute_audit([], throughput=100)

        assert outcome.raw_value == 0
        assert outcome.score == 1.0
        assert outcome.display_value == "Total size was 0 KB"

    def test_top_n_option(self, make_record):
        records = [make_record(url=f"r{i}", transfer_size=i) for i in range(8)]
        outcome = compute_audit(records, 100, ScoreOptions(top_n=3))

        assert [item.url for item in outcome.top_results] == ["r7", "r6", "r5"]
        assert outcome.total_completed_requests == 8


class TestOutcome:
    def test_score_matches_curve(self, make_record):
        records = [make_record(url=f"r{i}", transfer_size=300_000) for i in range(12)]
        options = ScoreOptions()
        outcome = compute_audit(records, 100, options)

        expected = compute_log_normal_score(3_600_000, options.score_podr, options.score_median)
        assert outcome.score == expected

    def test_custom_calibration(self, make_record):
        records = [make_record(transfer_size=200_000)]
        options = ScoreOptions(score_podr=100_000, score_median=200_000)

        assert compute_audit(records, 100, options).score == pytest.approx(0.5)

    def test_display_value(self, make_record):
        outcome = compute_audit([make_record(transfer_size=200000)], 100)
        assert outcome.display_value == "Total size was 195 KB"

    def test_details_table(self, make_record):
        outcome = compute_audit([make_record(transfer_size=2048)], 100)
        details = outcome.details

        assert details.type == "table"
        assert [h.item_type for h in details.headings] == [ItemType.URL, ItemType.BYTES, ItemType.MS]
        bytes_heading = details.headings[1]
        assert bytes_heading.display_unit == "kb"
        assert bytes_heading.granularity == 1
        assert details.items == outcome.top_results

    def test_report(self, make_record):
        report = compute_audit([make_record(transfer_size=2048)], 100).to_report()

        assert report["raw_value"] == 2048
        assert report["extended_info"]["total_completed_requests"] == 1
        assert report["details"]["headings"][0] == {"key": "url", "item_type": "url", "text": "URL"}

    def test_warns_without_throughput(self, make_record, caplog):
        with caplog.at_level(logging.WARNING, logger="pageweight.analyzers.byte_weight"):
            compute_audit([make_record()], throughput=None)
        assert "Throughput unavailable" in caplog.text

    def test_nan_throughput(self, make_record):
        outcome = compute_audit([make_record(transfer_size=5000)], float("nan"))

        assert outcome.raw_value == 5000
        assert outcome.top_results[0].total_ms == 0.0


def test_meta():
    assert META.name == "total-byte-weight"
    assert META.score_display_mode == "numeric"
    assert META.required_artifacts == ["devtoolsLogs"]
