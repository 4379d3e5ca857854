"""
Narrated suggestions: calculator result plus an Arabic explanation.

Numbers always come from the calculation layer and are final before the
narrator is asked for text. Every suggestion carries a template explanation
built from the same numbers, used when narration is unavailable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from shams.calculations.financial import format_payback_period
from shams.calculations.optimizer import calculate_optimal_design
from shams.calculations.strings import (
    calculate_advanced_string_configuration,
    calculate_string_configuration,
)
from shams.calculations.wire_size import calculate_wire_size, required_wire_area_mm2
from shams.knowledge.jordan_data import STANDARD_WIRE_SIZES_MM2, get_location_name_ar
from shams.models import (
    AdvancedStringConfigInput,
    LimitingFactor,
    OptimalDesignInput,
    OptimalDesignResult,
    StringConfigInput,
    StringConfigResult,
    StringDesign,
    WireSizeInput,
    WireSizeResult,
)
from shams.narration import Narration, Narrator, narrate_or_fallback

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Result Models
# -------------------------------------------------------------------
@dataclass(frozen=True)
class WireSizeSuggestion:
    result: WireSizeResult
    reasoning: Narration


@dataclass(frozen=True)
class StringConfigSuggestion:
    result: StringConfigResult
    common_wiring_errors: Narration


@dataclass(frozen=True)
class StringDesignSuggestion:
    design: StringDesign
    explanation: Narration


@dataclass(frozen=True)
class DesignSuggestion:
    design: OptimalDesignResult
    reasoning: Narration


# -------------------------------------------------------------------
# Instructions
# -------------------------------------------------------------------
WIRE_SIZE_INSTRUCTIONS = (
    "اشرح سبب اختيار مقطع السلك الموصى به، وأهمية اختيار الحجم الصحيح، "
    "والمخاطر المترتبة على استخدام مقطع أصغر (فقدان الطاقة، ارتفاع الحرارة، خطر الحريق)."
)

STRING_CONFIG_INSTRUCTIONS = (
    "اذكر أخطاء التوصيل الشائعة التي يرتكبها الفنيون ويجب تجنبها "
    "بناءً على التهيئة المقترحة للسلاسل."
)

STRING_DESIGN_INSTRUCTIONS = (
    "اشرح نافذة عدد الألواح الآمنة لكل سلسلة عند أدنى وأعلى درجة حرارة، "
    "وسبب اختيار العدد الأمثل، وهل تيار المصفوفة ضمن حدود العاكس."
)

DESIGN_INSTRUCTIONS = (
    "قدّم شرحاً خطوة بخطوة: ابدأ بحجم النظام النهائي، ثم وضّح سبب اختياره بمقارنة "
    "الاستهلاك مع قيود المساحة والميزانية، ثم برّر اختيار المكونات، واختم بالعائد المالي."
)


# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------
def wire_size_template(data: WireSizeInput, result: WireSizeResult) -> str:
    area = required_wire_area_mm2(data.current, data.voltage, data.distance, data.voltage_drop_percentage)
    lines = [
        f"المقطع النظري المطلوب هو {area:.2f} مم² لتيار {data.current:g} أمبير "
        f"على مسافة {data.distance:g} متر وهبوط جهد مسموح {data.voltage_drop_percentage:g}% من {data.voltage:g} فولت.",
        f"تم اختيار المقطع القياسي {result.recommended_wire_size_mm2:g} مم²، "
        f"وهبوط الجهد الفعلي عليه {result.voltage_drop:.2f} فولت والطاقة المفقودة {result.power_loss:.2f} واط.",
    ]
    if area > STANDARD_WIRE_SIZES_MM2[-1]:
        lines.append(
            f"تنبيه: المقطع المحسوب يتجاوز أكبر مقطع قياسي ({STANDARD_WIRE_SIZES_MM2[-1]:g} مم²)، "
            "يُنصح بتقصير المسافة أو رفع جهد النظام أو تقسيم الحمل على أكثر من كابل."
        )
    lines.append("استخدام مقطع أصغر يرفع الفقد وحرارة الكابل ويزيد خطر الحريق.")
    return "\n".join(lines)


COMMON_WIRING_ERRORS_TEMPLATE = "\n".join([
    "• عكس القطبية عند توصيل الألواح أو السلاسل.",
    "• توصيل ألواح بمواصفات مختلفة في نفس السلسلة.",
    "• توصيل سلاسل متوازية بأطوال (عدد ألواح) مختلفة.",
    "• استخدام موصلات MC4 غير متوافقة أو غير محكمة الإغلاق.",
    "• إهمال فيوزات السلاسل عند وجود أكثر من سلسلتين على التوازي.",
])


def string_design_template(design: StringDesign) -> str:
    if not design.is_feasible:
        return (
            "لا يوجد تكوين آمن ممكن: الحد الأدنى للألواح "
            f"({design.min_panels}) أكبر من الحد الأقصى ({design.max_panels}). "
            "يرجى التحقق من توافق الألواح مع العاكس."
        )
    array = design.array_config
    current_note = (
        "التيار الكلي ضمن حدود العاكس."
        if array.is_current_safe
        else "تحذير: التيار الكلي يتجاوز الحد الأقصى لتيار العاكس."
    )
    return "\n".join([
        f"المدى الآمن لكل سلسلة من {design.min_panels} إلى {design.max_panels} لوح، "
        f"والعدد الموصى به {design.optimal_panels} لوح.",
        f"جهد السلسلة الأقصى عند أدنى حرارة {design.max_string_voc_at_min_temp:.1f} فولت، "
        f"وجهد السلسلة الأدنى عند أعلى حرارة {design.min_string_vmp_at_max_temp:.1f} فولت.",
        f"المصفوفة: {array.total_panels} لوح في {array.parallel_strings} سلاسل متوازية "
        f"بتيار {array.total_current:.1f} أمبير. {current_note}",
    ])


def design_template(data: OptimalDesignInput, design: OptimalDesignResult) -> str:
    size = design.summary.optimized_system_size
    if design.limiting_factor == LimitingFactor.CONSUMPTION:
        why = "تم تحديد حجم النظام لتغطية استهلاكك الشهري بالكامل، وهو يتناسب مع المساحة المتاحة"
        if data.budget is not None:
            why += " ومع ميزانيتك"
        why += "."
    elif design.limiting_factor == LimitingFactor.AREA:
        why = f"هذا هو أكبر نظام يمكن تركيبه على المساحة المتاحة البالغة {data.surface_area:g} م²."
    else:
        why = f"هذا هو أكبر نظام يمكن تركيبه ضمن ميزانيتك البالغة {data.budget:g} دينار."

    panels = design.panel_config
    inverter = design.inverter_config
    finance = design.financial_analysis
    return "\n".join([
        f"تم تحديد حجم النظام الأمثل بـ {size:g} كيلوواط في {get_location_name_ar(data.location)}. {why}",
        f"يتكون النظام من {panels.panel_count} لوح بقدرة {panels.panel_wattage:g} واط "
        f"({panels.total_dc_power:g} kWp) وعاكس بقدرة {inverter.recommended_size} ({inverter.phase}).",
        f"التكلفة التقديرية {finance.total_investment:,.0f} دينار، وفترة الاسترداد "
        f"{format_payback_period(finance.payback_period_months)}، "
        f"وصافي الربح خلال 25 سنة {finance.net_profit_25_years:,.0f} دينار.",
    ])


# -------------------------------------------------------------------
# Suggestions
# -------------------------------------------------------------------
def suggest_wire_size(data: WireSizeInput, narrator: Optional[Narrator] = None) -> WireSizeSuggestion:
    result = calculate_wire_size(data)
    reasoning = narrate_or_fallback(
        narrator,
        {**data.to_dict(), **result.to_dict()},
        wire_size_template(data, result),
        WIRE_SIZE_INSTRUCTIONS,
    )
    return WireSizeSuggestion(result=result, reasoning=reasoning)


def suggest_string_configuration(data: StringConfigInput, narrator: Optional[Narrator] = None) -> StringConfigSuggestion:
    result = calculate_string_configuration(data)
    errors = narrate_or_fallback(
        narrator,
        {**data.to_dict(), **result.to_dict()},
        COMMON_WIRING_ERRORS_TEMPLATE,
        STRING_CONFIG_INSTRUCTIONS,
    )
    return StringConfigSuggestion(result=result, common_wiring_errors=errors)


def suggest_advanced_string_configuration(
    data: AdvancedStringConfigInput,
    narrator: Optional[Narrator] = None,
) -> StringDesignSuggestion:
    design = calculate_advanced_string_configuration(data)
    if not design.is_feasible:
        logger.info(f"No feasible string length: {design.reason}")
    explanation = narrate_or_fallback(
        narrator,
        {**data.to_dict(), **design.to_dict(), "is_feasible": design.is_feasible},
        string_design_template(design),
        STRING_DESIGN_INSTRUCTIONS,
    )
    return StringDesignSuggestion(design=design, explanation=explanation)


def optimize_design(data: OptimalDesignInput, narrator: Optional[Narrator] = None) -> DesignSuggestion:
    design = calculate_optimal_design(data)

    # The 25-year tables are left out of the narration context
    context = {
        "inputs": data.to_dict(),
        "summary": design.summary.to_dict(),
        "panel_config": design.panel_config.to_dict(),
        "inverter_config": design.inverter_config.to_dict(),
        "wiring_config": design.wiring_config.to_dict(),
        "limiting_factor": design.limiting_factor.value,
        "constraint_sizes_kw": design.constraint_sizes,
        "payback": format_payback_period(design.financial_analysis.payback_period_months),
    }
    reasoning = narrate_or_fallback(
        narrator,
        context,
        design_template(data, design),
        DESIGN_INSTRUCTIONS,
    )
    return DesignSuggestion(design=design, reasoning=reasoning)
