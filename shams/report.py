"""
Report book: summary cards collected from the calculators, plus Excel export.

A card is {id, type, summary, values}. Card ids are "<kind>-<suffix>"; a card
whose id prefix and summary match one already in the book is ignored, so
re-running a calculator with the same inputs does not duplicate it.
"""
from __future__ import annotations

import io
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd
import xlsxwriter

from shams.calculations.financial import format_payback_period
from shams.models import (
    AreaPackingResult,
    BatteryBankInput,
    BatteryBankResult,
    FinancialViabilityInput,
    FinancialViabilityResult,
    InverterSizingResult,
    OptimalDesignResult,
    PanelCountResult,
    StringConfigResult,
    StringDesign,
    WireSizeInput,
    WireSizeResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportCard:
    id: str
    type: str
    summary: str
    values: Dict[str, str] = field(default_factory=dict)

    @property
    def prefix(self) -> str:
        return self.id.split("-")[0]

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "type": self.type,
            "summary": self.summary,
            "values": dict(self.values),
        }


class ReportBook:
    """Ordered collection of report cards."""

    def __init__(self):
        self._cards: List[ReportCard] = []

    @property
    def cards(self) -> List[ReportCard]:
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def add(self, card: ReportCard) -> bool:
        """Append a card; False when an equivalent card is already present."""
        for existing in self._cards:
            if existing.prefix == card.prefix and existing.summary == card.summary:
                logger.debug(f"Duplicate report card ignored: {card.id}")
                return False
        self._cards.append(card)
        return True

    def remove(self, card_id: str) -> bool:
        before = len(self._cards)
        self._cards = [c for c in self._cards if c.id != card_id]
        return len(self._cards) < before

    def clear(self) -> None:
        self._cards = []


def _new_id(kind: str) -> str:
    return f"{kind}-{uuid.uuid4().hex[:12]}"


# -------------------------------------------------------------------
# Card builders
# -------------------------------------------------------------------
def wire_size_card(data: WireSizeInput, result: WireSizeResult, card_id: Optional[str] = None) -> ReportCard:
    return ReportCard(
        id=card_id or _new_id("wire"),
        type="حاسبة مقطع الأسلاك",
        summary=f"سلك بمقطع {result.recommended_wire_size_mm2:g} مم² لتيار {data.current:g} أمبير على مسافة {data.distance:g} متر.",
        values={
            "مقطع السلك الموصى به": f"{result.recommended_wire_size_mm2:g} مم²",
            "هبوط الجهد": f"{result.voltage_drop:.2f} V",
            "الطاقة المفقودة": f"{result.power_loss:.2f} W",
        },
    )


def area_production_card(result: AreaPackingResult, card_id: Optional[str] = None) -> ReportCard:
    return ReportCard(
        id=card_id or _new_id("area"),
        type="حاسبة الإنتاج حسب المساحة",
        summary=f"{result.max_panels} لوح بقدرة إجمالية {result.total_power_kw:g} kWp.",
        values={
            "عدد الألواح": f"{result.max_panels} لوح",
            "طريقة التركيب": "عمودي" if result.final_orientation.value == "portrait" else "أفقي",
            "عدد الصفوف": f"{result.row_count} × {result.panels_per_string}",
            "الإنتاج اليومي": f"{result.daily_energy_kwh:g} kWh",
            "الإنتاج الشهري": f"{result.monthly_energy_kwh:g} kWh",
            "الإنتاج السنوي": f"{result.yearly_energy_kwh:g} kWh",
        },
    )


def panel_count_card(result: PanelCountResult, card_id: Optional[str] = None) -> ReportCard:
    return ReportCard(
        id=card_id or _new_id("sizer"),
        type="حاسبة حجم النظام",
        summary=f"{result.required_panels} لوح لتغطية استهلاك {result.total_kwh:g} kWh شهرياً.",
        values={
            "عدد الألواح المطلوب": f"{result.required_panels} لوح",
            "الاستهلاك الشهري": f"{result.total_kwh:g} kWh",
            "الاستهلاك اليومي": f"{result.daily_kwh:g} kWh",
        },
    )


def inverter_card(total_dc_power: float, result: InverterSizingResult, card_id: Optional[str] = None) -> ReportCard:
    return ReportCard(
        id=card_id or _new_id("inverter"),
        type="أداة تحديد حجم العاكس",
        summary=f"عاكس بين {result.min_inverter_size:.2f}-{result.max_inverter_size:.2f} kW لنظام {total_dc_power:g} kWp.",
        values={
            "حجم العاكس الموصى به": f"بين {result.min_inverter_size:.2f} و {result.max_inverter_size:.2f} kW",
            "الحد الأدنى لجهد العاكس": f"{result.recommended_voc:.0f} V",
            "الحد الأدنى لتيار العاكس": f"{result.recommended_isc:.2f} A",
            "نوع الشبكة": result.grid_phase_label,
        },
    )


def battery_card(data: BatteryBankInput, result: BatteryBankResult, card_id: Optional[str] = None) -> ReportCard:
    return ReportCard(
        id=card_id or _new_id("battery"),
        type="حاسبة تخزين الطاقة",
        summary=f"بنك بطاريات {result.required_bank_energy_kwh:g} kWh يتكون من {result.total_batteries} بطارية.",
        values={
            "إجمالي الطاقة المطلوبة": f"{result.required_bank_energy_kwh:g} kWh",
            "السعة المطلوبة بالأمبير/ساعة": f"{result.required_bank_capacity_ah:g} Ah @ {data.system_voltage:g}V",
            "إجمالي عدد البطاريات": f"{result.total_batteries} بطارية",
            "طريقة التوصيل": f"{result.batteries_in_series} بطارية على التوالي، {result.parallel_strings} سلسلة على التوازي",
        },
    )


def string_config_card(result: StringConfigResult, card_id: Optional[str] = None) -> ReportCard:
    return ReportCard(
        id=card_id or _new_id("string"),
        type="حاسبة توصيل السلاسل",
        summary=f"{result.panels_per_string} لوح لكل سلسلة، {result.parallel_strings} سلسلة على التوازي.",
        values={
            "ألواح لكل سلسلة": f"{result.panels_per_string}",
            "سلاسل على التوازي": f"{result.parallel_strings}",
        },
    )


def string_design_card(design: StringDesign, card_id: Optional[str] = None) -> ReportCard:
    values = {
        "المدى الآمن لكل سلسلة": f"{design.min_panels} - {design.max_panels} لوح",
        "أقصى جهد للسلسلة (أدنى حرارة)": f"{design.max_string_voc_at_min_temp:.1f} V",
        "أدنى جهد للسلسلة (أعلى حرارة)": f"{design.min_string_vmp_at_max_temp:.1f} V",
    }
    if not design.is_feasible:
        summary = "لا يوجد تكوين آمن للسلاسل مع هذا العاكس."
    else:
        array = design.array_config
        summary = f"{design.optimal_panels} لوح لكل سلسلة، {array.parallel_strings} سلسلة على التوازي."
        values.update({
            "العدد الأمثل لكل سلسلة": f"{design.optimal_panels} لوح",
            "إجمالي الألواح": f"{array.total_panels} لوح",
            "التيار الكلي": f"{array.total_current:.1f} A",
            "حالة التيار": "آمن" if array.is_current_safe else "يتجاوز حد العاكس",
        })
    return ReportCard(
        id=card_id or _new_id("advstring"),
        type="حاسبة السلاسل المتقدمة",
        summary=summary,
        values=values,
    )


def financial_card(data: FinancialViabilityInput, result: FinancialViabilityResult, card_id: Optional[str] = None) -> ReportCard:
    payback = format_payback_period(result.payback_period_months)
    return ReportCard(
        id=card_id or _new_id("financial"),
        type="حاسبة الجدوى المالية",
        summary=f"إنتاج سنوي {result.total_annual_production:.0f} kWh، فترة استرداد {payback}.",
        values={
            "حجم النظام": f"{data.system_size:g} kWp",
            "التكلفة التقديرية": f"{result.total_investment:.0f} دينار",
            "الإنتاج السنوي (السنة الأولى)": f"{result.total_annual_production:.0f} kWh",
            "الإيرادات السنوية (السنة الأولى)": f"{result.annual_revenue:.0f} دينار",
            "فترة الاسترداد": payback,
            "صافي الربح (25 سنة)": f"{result.net_profit_25_years:.0f} دينار",
        },
    )


def design_card(design: OptimalDesignResult, card_id: Optional[str] = None) -> ReportCard:
    summary = design.summary
    return ReportCard(
        id=card_id or _new_id("design"),
        type="مُحسِّن التصميم",
        summary=f"نظام {summary.optimized_system_size:g} kWp بتكلفة {summary.total_cost:.0f} دينار.",
        values={
            "حجم النظام": f"{summary.optimized_system_size:g} kWp",
            "عدد الألواح": f"{design.panel_config.panel_count} × {design.panel_config.panel_wattage:g} W",
            "العاكس": f"{design.inverter_config.recommended_size} ({design.inverter_config.phase})",
            "التوصيل": f"{design.wiring_config.panels_per_string} لوح × {design.wiring_config.parallel_strings} سلسلة",
            "العامل المحدد": design.limiting_factor.value,
            "فترة الاسترداد": format_payback_period(design.financial_analysis.payback_period_months),
            "صافي الربح (25 سنة)": f"{summary.twenty_five_year_profit:.0f} دينار",
        },
    )


# -------------------------------------------------------------------
# Tables
# -------------------------------------------------------------------
def monthly_breakdown_frame(result: FinancialViabilityResult) -> pd.DataFrame:
    return pd.DataFrame(
        [m.to_dict() for m in result.monthly_breakdown],
        columns=["month", "sun_hours", "production", "revenue"],
    )


def cash_flow_frame(result: FinancialViabilityResult) -> pd.DataFrame:
    return pd.DataFrame(
        [p.to_dict() for p in result.cash_flow_analysis],
        columns=["year", "cash_flow"],
    )


def cards_frame(book: ReportBook) -> pd.DataFrame:
    rows = []
    for card in book.cards:
        for label, value in card.values.items():
            rows.append({
                "type": card.type,
                "summary": card.summary,
                "item": label,
                "value": value,
            })
    return pd.DataFrame(rows, columns=["type", "summary", "item", "value"])


# -------------------------------------------------------------------
# Excel export
# -------------------------------------------------------------------
def _open_workbook(output_path: Optional[str]):
    if output_path:
        return xlsxwriter.Workbook(output_path), None
    buffer = io.BytesIO()
    return xlsxwriter.Workbook(buffer, {"in_memory": True}), buffer


def _header_format(workbook):
    return workbook.add_format({
        'bold': True,
        'font_color': 'white',
        'bg_color': '#4CAF50',
        'border': 1
    })


def _write_frame(worksheet, df: pd.DataFrame, headers: List[str], header_format, cell_format, start_row: int = 0) -> int:
    for col, header in enumerate(headers):
        worksheet.write(start_row, col, header, header_format)
    for row, record in enumerate(df.to_dict("records"), start=start_row + 1):
        for col, value in enumerate(record.values()):
            worksheet.write(row, col, value, cell_format)
    return start_row + len(df) + 1


def _close(workbook, buffer) -> Optional[bytes]:
    workbook.close()
    if buffer:
        buffer.seek(0)
        return buffer.getvalue()
    return None


def export_report_book(book: ReportBook, output_path: Optional[str] = None) -> Optional[bytes]:
    """
    Write the report book to an Excel workbook, one row per card value.

    Args:
        book (ReportBook): Cards to export.
        output_path (str | None): Path to save the workbook. If None, returns bytes.
    """
    workbook, buffer = _open_workbook(output_path)
    worksheet = workbook.add_worksheet("التقرير")
    worksheet.right_to_left()

    header_format = _header_format(workbook)
    cell_format = workbook.add_format({'border': 1})

    df = cards_frame(book)
    _write_frame(worksheet, df, ["الأداة", "الملخص", "البند", "القيمة"], header_format, cell_format)

    worksheet.set_column(0, 0, 25)  # Tool
    worksheet.set_column(1, 1, 50)  # Summary
    worksheet.set_column(2, 2, 30)  # Item
    worksheet.set_column(3, 3, 30)  # Value

    logger.info(f"Exported report book with {len(book)} cards")
    return _close(workbook, buffer)


def export_financial_projection(result: FinancialViabilityResult, output_path: Optional[str] = None) -> Optional[bytes]:
    """
    Write a financial projection to an Excel workbook.

    Sheets: summary, monthly production for the first year, and the 25-year
    cumulative cash flow.
    """
    workbook, buffer = _open_workbook(output_path)
    header_format = _header_format(workbook)
    cell_format = workbook.add_format({'border': 1})
    money_format = workbook.add_format({'border': 1, 'num_format': '#,##0.00'})

    summary_sheet = workbook.add_worksheet("Summary")
    summary_sheet.right_to_left()
    summary_rows = [
        ("إجمالي الاستثمار (دينار)", result.total_investment),
        ("الإنتاج السنوي (kWh)", result.total_annual_production),
        ("الإيرادات السنوية (دينار)", result.annual_revenue),
        ("صافي الربح خلال 25 سنة (دينار)", result.net_profit_25_years),
    ]
    summary_sheet.write(0, 0, "البند", header_format)
    summary_sheet.write(0, 1, "القيمة", header_format)
    for row, (label, value) in enumerate(summary_rows, start=1):
        summary_sheet.write(row, 0, label, cell_format)
        summary_sheet.write_number(row, 1, value, money_format)
    # Payback may be infinite, so it goes in as text
    row = len(summary_rows) + 1
    summary_sheet.write(row, 0, "فترة الاسترداد", cell_format)
    summary_sheet.write_string(row, 1, format_payback_period(result.payback_period_months), cell_format)
    summary_sheet.set_column(0, 0, 35)
    summary_sheet.set_column(1, 1, 20)

    monthly_sheet = workbook.add_worksheet("Monthly")
    monthly_sheet.right_to_left()
    _write_frame(
        monthly_sheet,
        monthly_breakdown_frame(result),
        ["الشهر", "ساعات الذروة", "الإنتاج (kWh)", "الإيرادات (دينار)"],
        header_format,
        cell_format,
    )
    monthly_sheet.set_column(0, 3, 18)

    cash_sheet = workbook.add_worksheet("Cash Flow")
    _write_frame(
        cash_sheet,
        cash_flow_frame(result),
        ["Year", "Cumulative Cash Flow (JOD)"],
        header_format,
        cell_format,
    )
    cash_sheet.set_column(0, 0, 10)
    cash_sheet.set_column(1, 1, 28)

    return _close(workbook, buffer)
