"""Tests for the command line entry point."""

import json
from unittest.mock import patch

import pytest

import saas_idea_scanner


@pytest.fixture
def run_cli(mock_storage_paths, tmp_path, monkeypatch):
    """Run main() with the given arguments inside a temp directory."""
    monkeypatch.chdir(tmp_path)

    def _run(*args):
        monkeypatch.setattr('sys.argv', ['saas_idea_scanner.py', *args])
        saas_idea_scanner.main()
        return tmp_path

    return _run


class TestMain:
    """Tests for main()."""

    def test_writes_text_and_json_reports(self, run_cli, capsys, healthcare_idea):
        out_dir = run_cli(healthcare_idea)

        printed = capsys.readouterr().out
        assert 'SAAS IDEA ANALYSIS REPORT' in printed
        text_files = list(out_dir.glob('saas_analysis_*.txt'))
        json_files = list(out_dir.glob('saas_analysis_*.json'))
        assert len(text_files) == 1
        assert len(json_files) == 1
        data = json.loads(json_files[0].read_text(encoding='utf-8'))
        assert data['version'] == '2.0'
        assert data['analysis']['originalIdea'] == healthcare_idea

    def test_schema_argument(self, run_cli):
        out_dir = run_cli('A CRM for plumbers', 'legacy')

        json_file = next(out_dir.glob('saas_analysis_*.json'))
        data = json.loads(json_file.read_text(encoding='utf-8'))
        assert data['analysis']['schema'] == 'legacy'

    def test_saves_to_local_history(self, run_cli, mock_storage_paths):
        run_cli('A CRM for plumbers')

        from idea_scanner import local_history_store
        with local_history_store(mock_storage_paths['history_db_path']) as store:
            assert len(store.get_all()) == 1

    def test_unknown_schema_exits(self, run_cli):
        with pytest.raises(SystemExit) as exc_info:
            run_cli('A CRM for plumbers', 'vertical')
        assert exc_info.value.code == 2

    def test_blank_idea_exits(self, run_cli):
        with pytest.raises(SystemExit) as exc_info:
            run_cli('   ')
        assert exc_info.value.code == 1

    def test_no_arguments_serves(self, run_cli):
        with patch('saas_idea_scanner.launch_server') as launch:
            run_cli()
        launch.assert_called_once()
