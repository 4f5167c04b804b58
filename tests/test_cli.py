from envyoink.cli import EXIT_CONFIG, EXIT_EXTRACT, EXIT_OK, EXIT_OUTPUT, main


def _run(root, out, *extra):
    return main(['-d', str(root), '-o', str(out), *extra])


def _names(path):
    lines = path.read_text(encoding='utf-8').splitlines()
    assert all(line.endswith('=') for line in lines)
    return [line[:-1] for line in lines]


def test_js_preset_writes_example(make_tree, tmp_path):
    root = make_tree({'src/app.js': 'value = process.env.API_KEY;\nx = process.env["BAR"]\n'})
    out = tmp_path / 'out'
    assert _run(root, out, '--preset', 'JS') == EXIT_OK
    assert (out / '.env.example').read_text(encoding='utf-8') == 'API_KEY=\nBAR=\n'


def test_no_duplicate_lines(make_tree, tmp_path):
    root = make_tree({f'f{i}.py': 'os.environ["SHARED"]\nos.environ.get("SHARED")\n' for i in range(5)})
    assert _run(root, tmp_path, '--preset', 'Python') == EXIT_OK
    names = _names(tmp_path / '.env.example')
    assert names == ['SHARED']
    assert len(names) == len(set(names))


def test_custom_example_file_name_and_overwrite(make_tree, tmp_path):
    root = make_tree({'main.go': 'os.Getenv("PORT")\n'})
    target = tmp_path / '.env.sample'
    target.write_text('STALE=1\n', encoding='utf-8')
    assert _run(root, tmp_path, '--preset', 'go', '-e', '.env.sample') == EXIT_OK
    assert target.read_text(encoding='utf-8') == 'PORT=\n'


def test_zero_matches_writes_empty_file(make_tree, tmp_path):
    root = make_tree({'main.rs': 'fn main() {}\n'})
    assert _run(root, tmp_path, '--preset', 'Rust') == EXIT_OK
    assert (tmp_path / '.env.example').read_text(encoding='utf-8') == ''


def test_missing_workspace_warns_and_writes_empty(tmp_path, capsys):
    rc = _run(tmp_path / 'does-not-exist', tmp_path, '--preset', 'JS')
    assert rc == EXIT_OK
    assert (tmp_path / '.env.example').read_text(encoding='utf-8') == ''
    assert 'not found' in capsys.readouterr().err


def test_non_capturing_custom_pattern_is_an_error(make_tree, tmp_path, capsys):
    root = make_tree({'a.js': 'process.env.API_KEY\n'})
    rc = _run(root, tmp_path, '-p', r'process\.env\.[A-Z_]+')
    assert rc == EXIT_CONFIG
    assert not (tmp_path / '.env.example').exists()
    assert 'no capture group' in capsys.readouterr().err


def test_bad_regex_is_config_error(make_tree, tmp_path):
    root = make_tree({'a.js': 'x\n'})
    assert _run(root, tmp_path, '-p', '([') == EXIT_CONFIG
    assert not (tmp_path / '.env.example').exists()


def test_no_selection_is_config_error(make_tree, tmp_path):
    root = make_tree({'a.js': 'x\n'})
    assert _run(root, tmp_path) == EXIT_CONFIG


def test_abort_policy_writes_nothing(make_tree, tmp_path):
    root = make_tree({'a.js': 'process.env.A\n', 'blob.bin': b'\xff\x00\xff'})
    out = tmp_path / 'out'
    assert _run(root, out, '--preset', 'JS', '--on-error', 'abort') == EXIT_EXTRACT
    assert not (out / '.env.example').exists()


def test_skip_policy_default(make_tree, tmp_path):
    root = make_tree({'a.js': 'process.env.A\n', 'blob.bin': b'\xff\x00\xff'})
    assert _run(root, tmp_path, '--preset', 'JS') == EXIT_OK
    assert _names(tmp_path / '.env.example') == ['A']


def test_output_error(make_tree, tmp_path):
    root = make_tree({'a.js': 'process.env.A\n'})
    blocker = tmp_path / 'file'
    blocker.write_text('x')
    assert _run(root, blocker, '--preset', 'JS') == EXIT_OUTPUT


def test_stdout_mode(make_tree, tmp_path, capsys):
    root = make_tree({'a.js': 'process.env.B\nprocess.env.A\n'})
    assert _run(root, tmp_path, '--preset', 'JS', '--stdout') == EXIT_OK
    assert capsys.readouterr().out == 'A=\nB=\n'
    assert not (tmp_path / '.env.example').exists()


def test_config_file_presets_and_exclude(make_tree, tmp_path):
    root = make_tree({
        'app.rb': "ENV['SECRET_KEY_BASE']\n",
        'vendor/gem.rb': "ENV['VENDORED']\n",
    })
    cfg = tmp_path / 'envyoink.yaml'
    cfg.write_text(
        "preset: Ruby\n"
        "exclude: [vendor]\n"
        "presets:\n"
        "  Ruby:\n"
        "    - ENV\\[['\"]([^'\"]+)['\"]\\]\n",
        encoding='utf-8',
    )
    assert _run(root, tmp_path, '--config', str(cfg)) == EXIT_OK
    assert _names(tmp_path / '.env.example') == ['SECRET_KEY_BASE']


def test_metrics_file(make_tree, tmp_path):
    root = make_tree({'a.js': 'process.env.A\n'})
    prom = tmp_path / 'metrics' / 'envyoink.prom'
    assert _run(root, tmp_path, '--preset', 'JS', '--metrics-file', str(prom)) == EXIT_OK
    text = prom.read_text(encoding='utf-8')
    assert 'envyoink_files_scanned_total 1.0' in text
    assert 'envyoink_unique_names 1.0' in text


def test_summary_and_list_presets(make_tree, tmp_path, capsys):
    root = make_tree({'a.js': 'process.env.A\n'})
    assert _run(root, tmp_path, '--preset', 'JS', '--summary') == EXIT_OK
    err = capsys.readouterr().err
    assert 'files=1' in err and 'unique=1' in err
    assert main(['--list-presets']) == EXIT_OK
    out = capsys.readouterr().out
    for tag in ('JS', 'Python', 'Rust', 'Go'):
        assert tag in out
