import pytest

from shams.models import (
    AdvancedStringConfigInput,
    Location,
    OptimalDesignInput,
    StringConfigInput,
    WireSizeInput,
)
from shams.narration import NarrationError
from shams.pipelines import (
    optimize_design,
    suggest_advanced_string_configuration,
    suggest_string_configuration,
    suggest_wire_size,
)


class RecordingNarrator:
    def __init__(self, reply="شرح"):
        self.reply = reply
        self.contexts = []

    def narrate(self, context, instructions=""):
        self.contexts.append((context, instructions))
        return self.reply


class FailingNarrator:
    def narrate(self, context, instructions=""):
        raise NarrationError("quota exhausted")


WIRE = WireSizeInput(current=20, voltage=48, distance=15, voltage_drop_percentage=3)


def _advanced(**overrides):
    values = dict(
        vmp=42.5, voc=50.5, temp_coefficient=-0.32, mppt_min=200, mppt_max=800,
        inverter_max_volt=1000, min_temp=-5, max_temp=65, target_system_size=10,
        panel_wattage=550, isc=13.5, inverter_max_current=30,
    )
    values.update(overrides)
    return AdvancedStringConfigInput(**values)


def test_wire_size_narration_receives_computed_values():
    narrator = RecordingNarrator()
    suggestion = suggest_wire_size(WIRE, narrator)

    assert suggestion.result.recommended_wire_size_mm2 == 10
    assert suggestion.reasoning.text == "شرح"
    context, instructions = narrator.contexts[0]
    assert context["recommended_wire_size_mm2"] == 10
    assert context["current"] == 20
    assert instructions


def test_wire_size_fallback_mentions_selected_size():
    suggestion = suggest_wire_size(WIRE, FailingNarrator())

    assert suggestion.reasoning.is_fallback
    assert "10 مم²" in suggestion.reasoning.text
    assert suggestion.result.recommended_wire_size_mm2 == 10


def test_wire_size_fallback_warns_when_clamped():
    data = WireSizeInput(current=200, voltage=12, distance=50, voltage_drop_percentage=1)
    suggestion = suggest_wire_size(data)
    assert "تنبيه" in suggestion.reasoning.text


def test_numbers_do_not_depend_on_narrator():
    with_ai = suggest_wire_size(WIRE, RecordingNarrator())
    without_ai = suggest_wire_size(WIRE, FailingNarrator())
    assert with_ai.result == without_ai.result


def test_string_configuration_common_errors():
    suggestion = suggest_string_configuration(
        StringConfigInput(panel_voltage=40, panel_current=10, desired_voltage=400, desired_current=32),
        FailingNarrator(),
    )
    assert suggestion.result.panels_per_string == 10
    assert suggestion.result.parallel_strings == 4
    assert "القطبية" in suggestion.common_wiring_errors.text


def test_advanced_string_explanation():
    narrator = RecordingNarrator()
    suggestion = suggest_advanced_string_configuration(_advanced(), narrator)

    assert suggestion.design.optimal_panels == 12
    context, _ = narrator.contexts[0]
    assert context["is_feasible"] is True
    assert context["optimal_panels"] == 12


def test_infeasible_string_fallback():
    suggestion = suggest_advanced_string_configuration(_advanced(mppt_min=900))
    assert not suggestion.design.is_feasible
    assert "لا يوجد تكوين آمن" in suggestion.explanation.text


def test_optimize_design_context_and_fallback():
    data = OptimalDesignInput(surface_area=100, location=Location.AMMAN, monthly_consumption=500, budget=2000)

    narrator = RecordingNarrator()
    suggestion = optimize_design(data, narrator)
    context, _ = narrator.contexts[0]
    assert context["limiting_factor"] == "budget"
    assert context["panel_config"]["panel_count"] == suggestion.design.panel_config.panel_count
    assert "projection" not in context

    fallback = optimize_design(data, FailingNarrator())
    assert fallback.reasoning.is_fallback
    assert "ميزانيتك" in fallback.reasoning.text
    assert fallback.design == suggestion.design


@pytest.mark.parametrize("surface_area,phrase", [(100, "استهلاكك"), (20, "المساحة المتاحة")])
def test_optimize_design_template_names_limiting_factor(surface_area, phrase):
    data = OptimalDesignInput(surface_area=surface_area, location="irbid", monthly_consumption=500)
    suggestion = optimize_design(data)
    assert phrase in suggestion.reasoning.text
    assert "إربد" in suggestion.reasoning.text


class TimeoutNarrator:
    def narrate(self, context, instructions=""):
        raise TimeoutError("transport timed out")


def test_any_narrator_exception_falls_back_to_template():
    data = OptimalDesignInput(surface_area=100, location=Location.AMMAN, monthly_consumption=500)

    suggestion = optimize_design(data, TimeoutNarrator())
    assert suggestion.reasoning.is_fallback
    assert suggestion.design.panel_config.panel_count == 6

    wire = suggest_wire_size(WIRE, TimeoutNarrator())
    assert wire.reasoning.is_fallback
    assert wire.result.recommended_wire_size_mm2 == 10
