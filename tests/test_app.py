from __future__ import annotations

import os
import shutil
import tempfile
import unittest
from unittest import mock

import requests
import streamlit as st
from loguru import logger
from streamlit.testing.v1 import AppTest

from covid_chart.state import ERROR_MESSAGE, Phase

APP = os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, "app.py")
URL = "http://example.test/daily.json"
RAW = [
    {"date": 20240101, "positiveIncrease": 1000, "deathIncrease": 10},
    {"date": 20240102, "positiveIncrease": 2000, "deathIncrease": 20},
]


def _response(payload=None, status_error=None):
    response = mock.Mock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    response.json.return_value = payload
    return response


class AppFlowTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.log_dir = tempfile.mkdtemp()

    @classmethod
    def tearDownClass(cls) -> None:
        logger.remove()
        st.cache_resource.clear()
        shutil.rmtree(cls.log_dir, ignore_errors=True)

    def setUp(self) -> None:
        env = mock.patch.dict(os.environ, {"COVID_CHART_DATA_URL": URL, "COVID_CHART_LOG_DIR": self.log_dir})
        env.start()
        self.addCleanup(env.stop)
        patcher = mock.patch("covid_chart.data.requests.get")
        self.get = patcher.start()
        self.addCleanup(patcher.stop)

    def _app(self) -> AppTest:
        return AppTest.from_file(APP, default_timeout=30)

    def test_server_error_shows_retry_and_retry_refetches(self) -> None:
        self.get.side_effect = [
            _response(status_error=requests.HTTPError("500 Server Error")),
            _response(payload=RAW),
        ]
        at = self._app().run()

        self.assertFalse(at.exception)
        self.assertEqual(at.error[0].value, ERROR_MESSAGE)
        self.assertEqual(at.button(key="retry").label, "Retry")
        self.assertEqual(len(at.get("plotly_chart")), 0)
        self.assertIs(at.session_state["view_state"].phase, Phase.ERRORED)

        at.button(key="retry").click().run()

        self.assertFalse(at.exception)
        self.assertEqual(self.get.call_count, 2)
        self.assertEqual(self.get.call_args_list[0], self.get.call_args_list[1])
        self.assertEqual(len(at.error), 0)
        self.assertEqual(len(at.get("plotly_chart")), 1)
        self.assertIs(at.session_state["view_state"].phase, Phase.READY)

    def test_theme_toggle_keeps_range(self) -> None:
        self.get.return_value = _response(payload=RAW)
        at = self._app().run()
        at.button(key="days_60").click().run()
        at.button(key="theme_toggle").click().run()

        view = at.session_state["view_state"]
        self.assertFalse(at.exception)
        self.assertTrue(view.dark_mode)
        self.assertEqual(view.days_to_show, 60)
        self.assertEqual(self.get.call_count, 3)
        self.assertEqual(len(at.get("plotly_chart")), 1)

    def test_rerun_without_changes_does_not_refetch(self) -> None:
        self.get.return_value = _response(payload=RAW)
        at = self._app().run()
        at.run()

        self.assertFalse(at.exception)
        self.assertEqual(self.get.call_count, 1)
        self.assertEqual(at.session_state["view_state"].loads, 1)


if __name__ == "__main__":
    unittest.main()
