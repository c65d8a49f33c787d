# tests/test_config.py

import unittest
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.config import DEFAULT_SETTINGS, Config
from floatchat.data.mock_data import PROFILES, ParameterProfile, TableRow, validate_profile, validate_profiles


class TestConfig:
    """Test cases for the configuration manager"""

    @pytest.fixture(autouse=True)
    def setup_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        self.tmp_path = tmp_path
        self.config = Config()

    def test_defaults_without_file(self):
        assert self.config.config_path is None
        assert self.config.get('chat.reply_delay_ms') == DEFAULT_SETTINGS['chat']['reply_delay_ms']
        assert self.config.get('export.prefix') == 'argo-export'
        assert self.config.get('missing.key', 'fallback') == 'fallback'

    def test_set_and_get(self):
        self.config.set('chat.reply_delay_ms', 0)
        self.config.set('new.section.value', 'x')
        assert self.config.get_reply_delay() == 0.0
        assert self.config.get('new.section.value') == 'x'

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv('FLOATCHAT_CHAT_REPLY_DELAY_MS', '250')
        monkeypatch.setenv('FLOATCHAT_CHAT_CANCEL_SUPERSEDED', 'true')
        assert self.config.get('chat.reply_delay_ms') == 250
        assert self.config.get('chat.cancel_superseded') is True
        assert self.config.get_reply_delay() == 0.25

    def test_environment_override_keeps_string_settings(self, monkeypatch):
        monkeypatch.setenv('FLOATCHAT_APP_VERSION', '1.0')
        monkeypatch.setenv('FLOATCHAT_EXPORT_PREFIX', '2024')
        monkeypatch.setenv('FLOATCHAT_MAP_ZOOM_START', '6')
        assert self.config.get('app.version') == '1.0'
        assert self.config.get('export.prefix') == '2024'
        assert self.config.get('map.zoom_start') == 6

    def test_load_config_merges_over_defaults(self):
        path = self.tmp_path / 'custom.yaml'
        path.write_text("chat:\n  reply_delay_ms: 10\nexport:\n  prefix: custom\n", encoding='utf-8')

        self.config.load_config(str(path))
        assert self.config.get('chat.reply_delay_ms') == 10
        assert self.config.get('chat.cancel_superseded') is False
        assert self.config.get('export.prefix') == 'custom'
        assert self.config.get('map.zoom_start') == 4

    def test_settings_file_is_discovered(self):
        (self.tmp_path / 'config').mkdir()
        (self.tmp_path / 'config' / 'settings.yaml').write_text("app:\n  title: Test\n", encoding='utf-8')
        assert Config().get('app.title') == 'Test'

    def test_export_dir_is_created(self):
        self.config.set('export.directory', str(self.tmp_path / 'out'))
        assert self.config.get_export_dir().is_dir()


class TestMockData(unittest.TestCase):
    def test_table_and_chart_depths_match(self):
        self.assertEqual(validate_profiles(), {'temperature': True, 'salinity': True, 'oxygen': True})

    def test_mismatched_profile_rejected(self):
        broken = ParameterProfile(
            name='temperature', display_label='Temperature', unit='°C',
            table_rows=(TableRow('0m', '28.5 °C'), TableRow('75m', '20.0 °C')),
            chart_points=PROFILES['temperature'].chart_points[:2],
            color='#ff7f50'
        )
        with self.assertRaises(ValueError):
            validate_profile(broken)

    def test_value_at_depth(self):
        self.assertEqual(PROFILES['oxygen'].value_at(500), '0.3 ml/L')
        self.assertIsNone(PROFILES['oxygen'].value_at(250))


if __name__ == '__main__':
    unittest.main()
