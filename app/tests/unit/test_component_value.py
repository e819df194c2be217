"""Tests for models/component_value.py and models/analysis_result.py."""

import pytest
from models.analysis_result import (
    AnalysisKind,
    NoDataResult,
    OperatingPointResult,
    PlotSeries,
    PublishedResult,
    TransientResult,
)
from models.component_value import ComponentValue
from simulation.errors import UnsupportedAnalysis


class TestComponentValueParse:
    @pytest.mark.parametrize(
        "text, magnitude, suffix",
        [
            ("4.7k", "4.7", "k"),
            ("100meg", "100", "meg"),
            ("5", "5", ""),
            (" 10m ", "10", "m"),
            ("1e-6", "1e-6", ""),
            ("2.2e3p", "2.2e3", "p"),
        ],
    )
    def test_split(self, text, magnitude, suffix):
        assert ComponentValue.parse(text) == ComponentValue(magnitude, suffix)

    def test_dict_round_trip(self):
        value = ComponentValue("47", "u")
        assert value.to_dict() == {"magnitude": "47", "unit_suffix": "u"}
        assert ComponentValue.from_dict(value.to_dict()) == value

    def test_from_dict_defaults_suffix(self):
        assert ComponentValue.from_dict({"magnitude": 5}) == ComponentValue("5", "")

    def test_is_immutable(self):
        value = ComponentValue("1", "k")
        with pytest.raises(AttributeError):
            value.magnitude = "2"


class TestAnalysisKind:
    @pytest.mark.parametrize(
        "command, kind",
        [
            ("op", AnalysisKind.OPERATING_POINT),
            (".OP", AnalysisKind.OPERATING_POINT),
            ("tran 0.1u 100u", AnalysisKind.TRANSIENT),
            ("  ac dec 20 0.1 100meg", AnalysisKind.FREQUENCY_SWEEP),
        ],
    )
    def test_from_command(self, command, kind):
        assert AnalysisKind.from_command(command) is kind

    @pytest.mark.parametrize("command", ["", "   ", "dc V1 0 5 0.1", "transient 1u 1m"])
    def test_unsupported(self, command):
        with pytest.raises(UnsupportedAnalysis):
            AnalysisKind.from_command(command)


class TestResults:
    def test_plot_series_lengths_must_match(self):
        with pytest.raises(ValueError):
            PlotSeries(x=(1.0, 2.0), y=(1.0,), label="v", kind=AnalysisKind.TRANSIENT)

    def test_plot_series_len(self):
        assert len(PlotSeries(x=(1.0,), y=(2.0,), label="v", kind=AnalysisKind.TRANSIENT)) == 1

    def test_text_joins_lines(self):
        result = TransientResult(kind=AnalysisKind.TRANSIENT, lines=("a", "b"))
        assert result.text == "a\nb"
        assert result.has_data

    def test_no_data_message(self):
        result = NoDataResult(kind=AnalysisKind.TRANSIENT, lines=("No data for tran analysis",))
        assert not result.has_data
        assert result.message == "No data for tran analysis"
        assert NoDataResult(kind=AnalysisKind.TRANSIENT).message == ""

    def test_published_result_defaults(self):
        published = PublishedResult(result=TransientResult(kind=AnalysisKind.TRANSIENT))
        assert published.series is None
        assert published.netlist == ""

    def test_operating_point_copies_and_freezes_mappings(self):
        voltages = {"V(2)": 2.5}
        result = OperatingPointResult(kind=AnalysisKind.OPERATING_POINT, node_voltages=voltages)
        voltages["V(2)"] = 0.0
        assert result.node_voltages == {"V(2)": 2.5}
        with pytest.raises(TypeError):
            result.node_voltages["V(4)"] = 1.0
        assert result.branch_currents_ma == {}
