"""
Tests for the command line front end
"""

import pytest

from tradedesk import cli
from tradedesk.core.exceptions import ConfigurationError
from tradedesk.strategies.access import Plan


class TestParseAssignments:

    def test_pairs(self):
        assert cli.parse_assignments(['fast_period=8', 'comment=a=b']) == {
            'fast_period': '8',
            'comment': 'a=b',
        }

    @pytest.mark.parametrize("item", ['fast_period', '=8'])
    def test_malformed(self, item):
        with pytest.raises(ConfigurationError):
            cli.parse_assignments([item])


class TestApplyParameters:

    def test_multiselect_split_on_commas(self, editor):
        editor.open_create()
        editor.select_type('premium_grid')

        cli.apply_parameters(editor, {'sessions': 'asian, new_york', 'levels': '3'})

        assert editor.draft.parameters['sessions'] == ['asian', 'new_york']
        assert editor.draft.parameters['levels'] == '3'

    def test_unknown_parameter(self, editor):
        editor.open_create()

        with pytest.raises(ConfigurationError, match="Unknown parameter 'levels'"):
            cli.apply_parameters(editor, {'levels': '3'})


def test_access_from_args():
    args = cli.build_parser().parse_args(['--plan', 'premium', '--superuser', 'catalog'])
    access = cli.access_from_args(args)

    assert access.plan is Plan.PREMIUM
    assert access.has_premium_access is True


def test_catalog_command(capsys, monkeypatch):
    monkeypatch.delenv('TRADEDESK_CATALOG_PATH', raising=False)

    assert cli.main(['--plan', 'free', 'catalog']) == 0

    out = capsys.readouterr().out
    assert "ma_crossover: " in out
    assert "bollinger_breakout: " in out
    assert "(premium, upgrade required)" in out
    assert "    fast_period [number]" in out


def test_bad_catalog_path(capsys, monkeypatch, tmp_path):
    monkeypatch.setenv('TRADEDESK_CATALOG_PATH', str(tmp_path / "missing.yaml"))

    assert cli.main(['catalog']) == 1
    assert "Error:" in capsys.readouterr().err
