import pytest

from envyoink.config.presets import PRESETS, Ecosystem
from envyoink.metrics.scan_metrics import ScanMetrics
from envyoink.scan.pipeline import run_scan
from envyoink.utils.exceptions import ConfigError, NoCaptureGroupError, UndecodableFileError

JS = list(PRESETS[Ecosystem.JS])


def test_multi_pattern_union(make_tree):
    root = make_tree({'app.js': 'a = process.env.FOO;\nb = process.env["BAR"];\n'})
    report = run_scan(root, JS)
    assert report.names == ['BAR', 'FOO']
    assert report.files_scanned == 1
    assert report.ok


def test_dedup_across_files(make_tree):
    root = make_tree({
        'a.js': 'process.env.API_KEY\nprocess.env.API_KEY\n',
        'lib/b.js': 'process.env.API_KEY\nprocess.env.PORT\n',
    })
    report = run_scan(root, JS)
    assert report.names == ['API_KEY', 'PORT']
    assert report.matches == 4
    assert {p.name: n for p, n in report.per_file.items()} == {'a.js': 2, 'b.js': 2}


def test_hidden_files_never_contribute(make_tree):
    root = make_tree({
        '.git/config': 'process.env.FROM_GIT\n',
        '.env.local.js': 'process.env.FROM_DOTFILE\n',
        'src/index.js': 'process.env.VISIBLE\n',
    })
    assert run_scan(root, JS).names == ['VISIBLE']


def test_no_matches_empty_result(make_tree):
    root = make_tree({'README.md': 'hello\n'})
    report = run_scan(root, JS)
    assert report.names == []
    assert report.files_scanned == 1


def test_missing_root_records_warning(tmp_path):
    report = run_scan(tmp_path / 'missing', JS)
    assert report.names == []
    assert report.files_scanned == 0
    assert report.warnings and 'not found' in report.warnings[0]


def test_skip_policy_continues_past_binary(make_tree):
    root = make_tree({
        'a.js': 'process.env.BEFORE\n',
        'b.png': b'\x89PNG\r\n\x1a\n\xff\xd8\xff',
        'c.js': 'process.env.AFTER\n',
    })
    metrics = ScanMetrics()
    report = run_scan(root, JS, on_error='skip', metrics=metrics)
    assert report.names == ['AFTER', 'BEFORE']
    assert [(e.path.name, e.kind) for e in report.errors] == [('b.png', 'undecodable')]
    assert not report.ok
    # one error per file, not one per pattern
    assert metrics.value('envyoink_extract_errors_total', {'kind': 'undecodable'}) == 1


def test_abort_policy_raises(make_tree):
    root = make_tree({'a.js': 'process.env.A\n', 'b.bin': b'\xff\xff'})
    with pytest.raises(UndecodableFileError):
        run_scan(root, JS, on_error='abort')


def test_no_capture_group_propagates_even_when_skipping(make_tree):
    root = make_tree({'a.txt': 'FOO\n'})
    with pytest.raises(NoCaptureGroupError):
        run_scan(root, [r'FOO(BAR)?'], on_error='skip')


def test_exclude_passed_through(make_tree):
    root = make_tree({'node_modules/x.js': 'process.env.DEP\n', 'a.js': 'process.env.OWN\n'})
    assert run_scan(root, JS, exclude=['node_modules']).names == ['OWN']


def test_idempotent(make_tree):
    root = make_tree({'z.js': 'process.env.Z\n', 'a/b.js': 'process.env["Y"]\nprocess.env.X\n'})
    assert run_scan(root, JS).names == run_scan(root, JS).names == ['X', 'Y', 'Z']


def test_metrics_counters(make_tree):
    root = make_tree({'a.js': 'process.env.A\nprocess.env.A\n', 'b.js': 'process.env.B\n'})
    m = ScanMetrics()
    run_scan(root, JS, metrics=m)
    assert m.value('envyoink_files_scanned_total') == 2
    assert m.value('envyoink_names_extracted_total') == 3
    assert m.value('envyoink_unique_names') == 2


def test_invalid_arguments():
    with pytest.raises(ConfigError):
        run_scan('.', JS, on_error='retry')
    with pytest.raises(ConfigError):
        run_scan('.', [])
    with pytest.raises(ConfigError):
        run_scan('.', ['(unclosed'])


def test_pattern_without_group_rejected_before_scanning(make_tree):
    root = make_tree({'a.js': 'nothing here\n'})
    with pytest.raises(ConfigError, match='no capture group'):
        run_scan(root, [r'process\.env\.[A-Z_]+'])
