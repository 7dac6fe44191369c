import logging
from pathlib import Path
from typing import Iterable, List, Optional

import flet as ft

from gpacalc.config.settings import settings
from gpacalc.core.export import EXPORT_FILENAME, export_csv
from gpacalc.core.gpa import evaluate, format_gpa, summary_note
from gpacalc.core.models import CourseEntry, FieldTag, GradeType, ValidationError


logger = logging.getLogger(__name__)


class CourseRow:
    """Input controls for one course; remembers nothing beyond what is typed."""

    def __init__(self, on_remove) -> None:
        self.name = ft.TextField(hint_text="Course name (optional)", expand=3)
        self.grade_type = ft.Dropdown(
            width=140,
            value=GradeType.LETTER.value,
            options=[ft.dropdown.Option(gt.value, gt.label) for gt in GradeType],
        )
        self.grade = ft.TextField(hint_text="A, B+, 92...", expand=2)
        self.credits = ft.TextField(hint_text="3", width=110, keyboard_type=ft.KeyboardType.NUMBER)
        self.control = ft.Row(
            controls=[
                self.name,
                self.grade_type,
                self.grade,
                self.credits,
                ft.IconButton(icon=ft.Icons.CLOSE, tooltip="Remove course", on_click=lambda _: on_remove(self)),
            ]
        )

    def to_entry(self) -> CourseEntry:
        return CourseEntry(
            name=self.name.value or "",
            grade_type=self.grade_type.value or GradeType.LETTER.value,
            raw_grade=self.grade.value or "",
            raw_credits=self.credits.value or "",
        )

    def clear(self) -> None:
        self.name.value = ""
        self.grade.value = ""
        self.credits.value = ""

    def field_controls(self, tags: Iterable[FieldTag]) -> List[ft.Control]:
        by_tag = {
            FieldTag.GRADE: self.grade,
            FieldTag.CREDITS: self.credits,
            FieldTag.GRADE_TYPE: self.grade_type,
        }
        return [by_tag[tag] for tag in tags]

    def clear_highlight(self) -> None:
        for control in (self.grade, self.credits, self.grade_type):
            control.border_color = None


def build_calculator_view(page: ft.Page, export_dir: Optional[str] = None) -> ft.View:
    rows: List[CourseRow] = []
    rows_column = ft.Column(spacing=8)
    errors_column = ft.Column(spacing=4)
    status = ft.Text()
    gpa_text = ft.Text(size=40, weight=ft.FontWeight.BOLD)
    note_text = ft.Text()
    result_box = ft.Container(
        visible=False,
        padding=16,
        border_radius=8,
        bgcolor=ft.Colors.BLUE_50,
        content=ft.Column(controls=[ft.Text("Your GPA"), gpa_text, note_text]),
    )
    target_dir = Path(export_dir or settings.export_dir)

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def clear_errors() -> None:
        errors_column.controls.clear()
        status.value = ""
        for row in rows:
            row.clear_highlight()

    def show_errors(errors: Iterable[ValidationError]) -> None:
        errors_column.controls.clear()
        for error in errors:
            errors_column.controls.append(ft.Text(error.message, color=ft.Colors.RED_400))

    def highlight(errors: Iterable[ValidationError]) -> None:
        for error in errors:
            if error.row_index is None:
                continue
            for control in rows[error.row_index].field_controls(error.fields):
                control.border_color = ft.Colors.RED_400

    def hide_result() -> None:
        result_box.visible = False

    def remove_row(row: CourseRow) -> None:
        if len(rows) > 1:
            rows.remove(row)
            rows_column.controls.remove(row.control)
        else:
            row.clear()
        page.update()

    def add_row() -> None:
        row = CourseRow(on_remove=remove_row)
        rows.append(row)
        rows_column.controls.append(row.control)

    def add_initial_rows() -> None:
        for _ in range(settings.initial_rows):
            add_row()

    def on_add(_):
        add_row()
        page.update()

    def on_calculate(_):
        clear_errors()
        evaluation = evaluate([row.to_entry() for row in rows])
        if not evaluation.ok:
            highlight(evaluation.errors)
            show_errors(evaluation.errors)
            hide_result()
            page.update()
            return

        result = evaluation.result
        gpa_text.value = format_gpa(result.gpa)
        note_text.value = summary_note(result.total_credits)
        result_box.visible = True
        page.update()

    def on_reset(_):
        clear_errors()
        hide_result()
        rows.clear()
        rows_column.controls.clear()
        add_initial_rows()
        page.update()

    def on_export(_):
        clear_errors()
        exported = export_csv([row.to_entry() for row in rows])
        highlight(exported.errors)
        if not exported.ok:
            show_errors([exported.error])
            page.update()
            return

        path = target_dir / EXPORT_FILENAME
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(exported.csv, encoding="utf-8", newline="")
        except OSError as exc:
            logger.exception("Failed to write %s", path)
            set_status(f"Failed to export: {exc}")
        else:
            logger.info("Exported %d course(s) to %s", len(exported.rows), path)
            set_status(f"Exported {len(exported.rows)} course(s) to {path}", is_error=False)
        page.update()

    add_initial_rows()

    return ft.View(
        route="/",
        controls=[
            ft.AppBar(title=ft.Text("GPA Calculator")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Text("Courses", size=22, weight=ft.FontWeight.BOLD),
                        ft.Text("Enter letter grades (A, A-, B+, ...) or percentages (0-100) with credit hours."),
                        rows_column,
                        ft.Row(
                            controls=[
                                ft.Button("Add course", on_click=on_add),
                                ft.Button("Calculate", on_click=on_calculate),
                                ft.Button("Reset", on_click=on_reset),
                                ft.Button("Export CSV", on_click=on_export),
                            ]
                        ),
                        errors_column,
                        status,
                        result_box,
                    ],
                ),
            ),
        ],
    )
