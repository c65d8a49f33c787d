# tests/test_nlp.py

import unittest
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.chat.messages import MessageKind
from floatchat.data.mock_data import PROFILES, SEED_FLOATS
from floatchat.nlp.query_interpreter import (
    GREETING_REPLY, QueryInterpreter, extract_depth, extract_parameters, is_greeting
)


class TestQueryParsing(unittest.TestCase):
    def test_single_parameter(self):
        self.assertEqual(extract_parameters("show me temperature"), ['temperature'])

    def test_no_keyword_returns_all(self):
        self.assertEqual(extract_parameters("what is happening in the ocean"),
                         ['temperature', 'salinity', 'oxygen'])

    def test_parameters_keep_fixed_order(self):
        self.assertEqual(extract_parameters("OXYGEN and Temperature"), ['temperature', 'oxygen'])

    def test_depth_extraction(self):
        self.assertEqual(extract_depth("What is the salinity at 500m?"), 500)
        self.assertEqual(extract_depth("oxygen at 100 M"), 100)
        self.assertIsNone(extract_depth("salinity near equator"))

    def test_greetings(self):
        self.assertTrue(is_greeting("Hello there"))
        self.assertTrue(is_greeting("  hey"))
        self.assertFalse(is_greeting("show temperature"))


class TestQueryInterpreter:
    """Test cases for reply construction"""

    @pytest.fixture(autouse=True)
    def setup_interpreter(self):
        self.interpreter = QueryInterpreter()

    def test_temperature_replies(self):
        replies = self.interpreter.respond("temperature profile please")

        assert [r.kind for r in replies] == [MessageKind.TEXT, MessageKind.TABLE, MessageKind.CHART]
        chart = replies[2].payload
        assert chart.parameter == 'temperature'
        assert chart.matched == ('temperature',)
        assert chart.query == "temperature profile please"
        assert chart.points == PROFILES['temperature'].chart_points

    def test_no_keyword_replies_for_every_parameter(self):
        replies = self.interpreter.respond("tell me about the ocean")
        charts = [r for r in replies if r.kind is MessageKind.CHART]
        assert [c.payload.parameter for c in charts] == ['temperature', 'salinity', 'oxygen']

    def test_greeting_never_looks_up_data(self):
        result = self.interpreter.interpret("hi, show me salinity")
        assert result.greeting
        assert result.profiles == {}

        replies = self.interpreter.build_replies(result)
        assert len(replies) == 1
        assert replies[0].content == GREETING_REPLY

    def test_non_alphabetic_query_gets_no_reply(self):
        assert self.interpreter.respond("1234 !!") == []

    def test_depth_narrative(self):
        replies = self.interpreter.respond("What is the salinity at 500m?")
        assert replies[0].content == "At 500m, salinity is 35.2 PSU."

    def test_depth_without_reading(self):
        replies = self.interpreter.respond("temperature at 300m")
        assert replies[0].content.startswith("No temperature reading at exactly 300m.")

    def test_same_query_is_idempotent(self):
        first = self.interpreter.respond("compare oxygen at 100m")
        second = self.interpreter.respond("compare oxygen at 100m")
        assert first == second

    def test_selected_float_adds_metadata(self):
        replies = self.interpreter.respond("salinity", selected_float=SEED_FLOATS[0])
        metadata = replies[-1]
        assert metadata.kind is MessageKind.METADATA
        assert metadata.payload.float_id == 'ARGO-3901234'
        assert metadata.payload.fields['Name'] == 'Chagos Basin'

    def test_export_request_adds_download(self):
        replies = self.interpreter.respond("export the temperature data")
        download = replies[-1]
        assert download.kind is MessageKind.DOWNLOAD
        assert download.payload.filename.startswith('argo-export-')
        assert download.payload.filename.endswith('.json')
        assert b'"vizData"' in download.payload.data

    def test_custom_profiles_restrict_matches(self):
        interpreter = QueryInterpreter(profiles={'oxygen': PROFILES['oxygen']})
        result = interpreter.interpret("anything at all")
        assert result.parameters == ('oxygen',)


if __name__ == '__main__':
    unittest.main()
