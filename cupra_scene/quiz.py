"""State of the quiz pages that frame the scene.

The form pages through an introduction, three image questions and a final
page showing the score. Answer labels judge the chosen answer, report a point
and ask for the next page after a delay.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

Callback = Callable[[], None]
Scheduler = Callable[[int, Callback], None]

ANSWER_DELAY_MS = 2000
FINAL_PAGE = 7

QUESTION_IMAGES = (
    "./Imagenes/a.jpg",
    "./Imagenes/b.png",
    "./Imagenes/c.jpg",
)

_QUESTION_LABELS = {2: ("question1", 0), 4: ("question2", 1), 6: ("question3", 2)}

CORRECT_STYLE = 'QLabel {color: rgb(29, 178, 253); font: 20pt "Sans Serif";}'
WRONG_STYLE = 'QLabel {color: rgb(255, 0, 0); font: 20pt "Sans Serif";}'
CORRECT_CHOICE_STYLE = "background-color: green;"


@dataclass(frozen=True)
class Picture:
    """An image shown in a label, fitted inside a box keeping its aspect ratio."""

    path: str
    width: int
    height: int


class QuizForm:
    """Page sequence of the quiz with the running score."""

    def __init__(self, images: tuple[str, ...] = QUESTION_IMAGES) -> None:
        self.images = images
        self.page = 0
        self.current_page = 0
        self.score = 0
        self.result_text = ""
        self.pictures: dict[str, Picture] = {
            "intro": Picture("./Imagenes/ini.png", 600, 343),
            "logo": Picture("./Imagenes/HackUPC.png", 600 // 2, 343 // 2),
        }
        self.animation_listeners: list[Callback] = []

    def step(self) -> None:
        """Go to the next page, showing its question image or the final score."""
        self.page += 1
        self.current_page = self.page
        if self.page in _QUESTION_LABELS:
            label, index = _QUESTION_LABELS[self.page]
            self.pictures[label] = Picture(self.images[index], 600, 200)
        elif self.page == FINAL_PAGE:
            self.result_text = str(self.score)
        for listener in list(self.animation_listeners):
            listener()

    def add_score(self, points: int) -> None:
        """Add points to the score."""
        self.score += points

    def go_to_end_page(self) -> None:
        """Show the page the form has reached."""
        self.current_page = self.page


class AnswerLabel:
    """Label that tells whether the selected answer is right."""

    def __init__(self, schedule: Scheduler | None = None) -> None:
        self.answer = False
        self.text = ""
        self.style_sheet = ""
        self.score_listeners: list[Callable[[int], None]] = []
        self.next_page_listeners: list[Callback] = []
        self.pending: list[tuple[int, Callback]] = []
        self._schedule: Scheduler = schedule or self._queue

    def _queue(self, delay_ms: int, callback: Callback) -> None:
        self.pending.append((delay_ms, callback))

    def select_correct(self) -> None:
        """The correct answer was chosen."""
        self.answer = True

    def select_wrong(self) -> None:
        """A wrong answer was chosen."""
        self.answer = False

    def confirm(self) -> None:
        """Show the verdict, report the point earned and schedule the next page."""
        if self.answer:
            self.text = "Congratulations!"
            self.style_sheet = CORRECT_STYLE
            points = 1
        else:
            self.text = "Wrong!"
            self.style_sheet = WRONG_STYLE
            points = 0
        for listener in list(self.score_listeners):
            listener(points)
        self._schedule(ANSWER_DELAY_MS, self.next_page)

    def next_page(self) -> None:
        """Ask for the next page."""
        for listener in list(self.next_page_listeners):
            listener()


class RadioChoice:
    """Answer option that can be highlighted as the correct one."""

    def __init__(self) -> None:
        self.style_sheet = ""

    def mark_correct(self) -> None:
        """Highlight this option."""
        self.style_sheet = CORRECT_CHOICE_STYLE