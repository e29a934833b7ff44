"""
Tests for CLI entry point - direct main() calls and one subprocess run.
"""

import json
import subprocess
import sys
import tempfile

import pytest
from pathlib import Path

from cli import main

PROJECT_ROOT = Path(__file__).parent.parent.parent

CONFIG_YAML = """
series:
  returns:
    candidates: [Returns.csv]
  risk_free:
    candidates: [RF.csv]
    unit: percent
  benchmark:
    candidates: [SP500.csv]
"""


@pytest.fixture
def temp_workspace(monkeypatch):
    """Temp workspace with a config file and three source CSVs."""
    for var in ('RETURNS_SOURCES_CONFIG', 'RETURNS_BASE_URL', 'REQUESTS_TIMEOUT_S', 'FUND_INCEPTION_DATE'):
        monkeypatch.delenv(var, raising=False)

    with tempfile.TemporaryDirectory() as temp_dir:
        workspace = Path(temp_dir)
        (workspace / 'sources.yml').write_text(CONFIG_YAML)
        (workspace / 'Returns.csv').write_text("Date,Return\n2024-01-10,0.01\n2024-02-12,-0.02\n")
        (workspace / 'RF.csv').write_text("Date,Value\n2024-01-01,4.0\n")
        (workspace / 'SP500.csv').write_text("Date,Return\n10.01.2024,0.004\n12.02.2024,-0.01\n")
        yield workspace


class TestMain:
    """Tests for main function."""

    def test_quiet_run(self, temp_workspace, capsys):
        exit_code = main(['analyze', '--config', str(temp_workspace / 'sources.yml'), '--quiet'])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == 'Analysis complete'

    def test_full_output(self, temp_workspace, capsys):
        exit_code = main(['analyze', '--config', str(temp_workspace / 'sources.yml')])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert '## Important Statistics' in out
        assert '| 2024 | 1.00% | -2.00% |' in out

    def test_writes_metrics_and_report(self, temp_workspace):
        metrics_path = temp_workspace / 'metrics.json'
        report_path = temp_workspace / 'report.md'

        exit_code = main([
            'analyze',
            '--config', str(temp_workspace / 'sources.yml'),
            '--output', str(metrics_path),
            '--report', str(report_path),
            '--quiet',
        ])

        assert exit_code == 0
        with open(metrics_path) as f:
            assert json.load(f)['status'] == 'completed'
        assert report_path.read_text().startswith('# Fund Performance Report')

    def test_missing_config(self, temp_workspace, capsys):
        exit_code = main(['analyze', '--config', str(temp_workspace / 'missing.yml')])

        assert exit_code == 1
        assert 'not found' in capsys.readouterr().err

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestSubprocess:
    """Runs the script the way a user would."""

    def test_cli_script(self, temp_workspace):
        result = subprocess.run(
            [sys.executable, str(PROJECT_ROOT / 'cli.py'), 'analyze',
             '--config', str(temp_workspace / 'sources.yml'), '--quiet'],
            capture_output=True,
            text=True,
            cwd=str(temp_workspace)
        )

        assert result.returncode == 0
        assert 'Analysis complete' in result.stdout
