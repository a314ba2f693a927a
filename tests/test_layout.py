from __future__ import annotations

import unittest

from covid_chart.config import ChartConfig
from covid_chart.layout import Dimensions, FixedLayout, Margin, MeasuredLayout, bounded, layout_for


class LayoutTests(unittest.TestCase):
    def test_fixed_layout_subtracts_margins(self) -> None:
        self.assertEqual(FixedLayout().dimensions(), Dimensions(1080, 480))
        self.assertFalse(FixedLayout.responsive)

    def test_measured_height_is_sixty_percent_of_width(self) -> None:
        self.assertEqual(MeasuredLayout(measure=lambda: 500).dimensions(), Dimensions(380, 180))

    def test_measured_height_is_capped(self) -> None:
        self.assertEqual(MeasuredLayout(measure=lambda: 1500).dimensions(), Dimensions(1380, 480))
        self.assertTrue(MeasuredLayout.responsive)

    def test_measure_runs_on_every_call(self) -> None:
        widths = iter([800, 1000])
        layout = MeasuredLayout(measure=lambda: next(widths))
        self.assertEqual(layout.dimensions().width, 680)
        self.assertEqual(layout.dimensions().width, 880)

    def test_tiny_container_never_goes_negative(self) -> None:
        self.assertEqual(MeasuredLayout(measure=lambda: 100).dimensions(), Dimensions(0, 0))

    def test_custom_margin(self) -> None:
        self.assertEqual(bounded(200, 100, Margin(10, 10, 10, 10)), Dimensions(180, 80))

    def test_layout_for_config(self) -> None:
        self.assertIsInstance(layout_for(ChartConfig()), FixedLayout)
        measured = layout_for(ChartConfig(layout="responsive", container_width=900))
        self.assertIsInstance(measured, MeasuredLayout)
        self.assertEqual(measured.dimensions(), Dimensions(780, 420))


if __name__ == "__main__":
    unittest.main()
