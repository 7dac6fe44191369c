import logging

import flet as ft

from gpacalc.config.settings import settings
from gpacalc.ui.views.calculator_view import build_calculator_view


def main(page: ft.Page) -> None:
    page.title = "GPA Calculator"
    page.views.clear()
    page.views.append(build_calculator_view(page))
    page.update()


def run() -> None:
    logging.basicConfig(level=settings.log_level)
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if settings.web_mode else ft.AppView.FLET_APP,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
