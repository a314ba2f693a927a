from covid_chart.data import DataUnavailableError, Record, load_dataset, normalize_records
from covid_chart.figure import build_figure
from covid_chart.scene import Scene, build_scene, clear_highlight, highlight_bar

__all__ = [
    "DataUnavailableError",
    "Record",
    "Scene",
    "build_figure",
    "build_scene",
    "clear_highlight",
    "highlight_bar",
    "load_dataset",
    "normalize_records",
]
