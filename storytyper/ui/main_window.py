from __future__ import annotations

from typing import Callable, Dict, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from storytyper.core.config import EngineConfig
from storytyper.core.engine import LiveStats, Renderer, TypingSessionEngine
from storytyper.core.feedback import Recommendation
from storytyper.core.models import SessionResult
from storytyper.core.phases import Phase, SessionPhase
from storytyper.core.profile import ProfileStore
from storytyper.core.sentences import SentenceBank
from storytyper.ui.colors import HomeColors, timer_color
from storytyper.ui.formatting import format_remaining, result_lines, sentence_html

DURATION_CHOICES = (30, 60, 120, 300)

_COUNTDOWN_INTERVAL_MS = 1000
_GAME_POLL_INTERVAL_MS = 100


def _primary_button_style() -> str:
    return f"""
        QPushButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {HomeColors.PRIMARY_LIGHT}, stop:1 {HomeColors.PRIMARY});
            color: white;
            padding: 10px 18px;
            border: none;
            border-radius: 12px;
            font-weight: 600;
            font-size: 15px;
        }}
        QPushButton:hover {{ background: {HomeColors.PRIMARY}; }}
        QPushButton:disabled {{ background: #b0bec5; }}
    """


def _secondary_button_style() -> str:
    return f"""
        QPushButton {{
            background: #fafafa;
            color: {HomeColors.TEXT_PRIMARY};
            padding: 10px 18px;
            border: 1px solid #e0e0e0;
            border-radius: 12px;
            font-weight: 600;
            font-size: 14px;
        }}
        QPushButton:hover {{
            border-color: {HomeColors.PRIMARY};
            color: {HomeColors.PRIMARY};
        }}
    """


def _button(text: str, on_click: Callable[[], None], primary: bool = True) -> QPushButton:
    button = QPushButton(text)
    button.setCursor(Qt.PointingHandCursor)
    button.setStyleSheet(_primary_button_style() if primary else _secondary_button_style())
    button.clicked.connect(lambda _checked=False: on_click())
    return button


def _title(text: str, size: int = 28) -> QLabel:
    label = QLabel(text)
    label.setAlignment(Qt.AlignCenter)
    label.setWordWrap(True)
    label.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-size: {size}px; font-weight: 800;")
    return label


def _screen() -> tuple[QWidget, QVBoxLayout]:
    widget = QWidget()
    layout = QVBoxLayout(widget)
    layout.setContentsMargins(48, 40, 48, 40)
    layout.setSpacing(18)
    layout.addStretch(1)
    return widget, layout


class _WindowRenderer(Renderer):
    """Forwards engine notifications to the window."""

    def __init__(self, window: MainWindow) -> None:
        self._window = window

    def show_phase(self, phase: SessionPhase) -> None:
        self._window.on_phase(phase)

    def show_countdown(self, count: int, message: str) -> None:
        self._window.on_countdown(count, message)

    def show_sentence(self, sentence: str) -> None:
        self._window.on_sentence(sentence)

    def show_progress(self, stats: LiveStats) -> None:
        self._window.on_progress(stats)

    def show_result(self, result: SessionResult, recommendation: Recommendation) -> None:
        self._window.on_result(result, recommendation)


class MainWindow(QMainWindow):
    """Single window with one stacked page per session phase.

    The window owns the two timers the engine relies on: a 1 s countdown
    tick and a 100 ms poll that detects the end of the session.
    """

    def __init__(
        self,
        sentences: SentenceBank,
        profile_store: ProfileStore,
        config: Optional[EngineConfig] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Story Typer")
        self.setMinimumSize(900, 600)
        self._sentence: str = ""
        self._pages: Dict[Phase, QWidget] = {}

        self._countdown_timer = QTimer(self)
        self._countdown_timer.setInterval(_COUNTDOWN_INTERVAL_MS)
        self._countdown_timer.timeout.connect(self._on_countdown_timer)
        self._game_timer = QTimer(self)
        self._game_timer.setInterval(_GAME_POLL_INTERVAL_MS)
        self._game_timer.timeout.connect(self._on_game_timer)

        self._engine = TypingSessionEngine(
            sentences,
            profiles=profile_store,
            renderer=_WindowRenderer(self),
            config=config,
        )
        self._build_ui()
        self._engine.initialize()

    @property
    def engine(self) -> TypingSessionEngine:
        return self._engine

    # -- layout ------------------------------------------------------------

    def _build_ui(self) -> None:
        self._stack = QStackedWidget()
        self._stack.setStyleSheet(
            f"QStackedWidget {{ background: qlineargradient(x1:0, y1:0, x2:0, y2:1,"
            f" stop:0 {HomeColors.BG_TOP}, stop:1 {HomeColors.BG_BOTTOM}); }}"
        )
        self.setCentralWidget(self._stack)

        welcome = self._build_welcome_page()
        language = self._build_language_page()
        duration = self._build_duration_page()
        countdown = self._build_countdown_page()
        game = self._build_game_page()
        results = self._build_results_page()
        for page in (welcome, language, duration, countdown, game, results):
            self._stack.addWidget(page)

        self._pages = {
            Phase.IDLE: welcome,
            Phase.AWAITING_NAME: welcome,
            Phase.AWAITING_LANGUAGE: language,
            Phase.AWAITING_DURATION: duration,
            Phase.COUNTDOWN: countdown,
            Phase.PLAYING: game,
            Phase.TIME_UP: game,
            Phase.SHOWING_RESULTS: results,
        }

    def _build_welcome_page(self) -> QWidget:
        page, layout = _screen()
        layout.addWidget(_title("Welcome to Story Typer!"))
        layout.addWidget(_title("What's your name?", size=18))

        self._name_input = QLineEdit()
        self._name_input.setPlaceholderText("Your name")
        self._name_input.setAlignment(Qt.AlignCenter)
        self._name_input.setStyleSheet(
            f"QLineEdit {{ padding: 10px; font-size: 18px; border-radius: 12px;"
            f" border: 2px solid {HomeColors.PRIMARY_LIGHT}; background: white; }}"
        )
        self._name_input.textEdited.connect(self._on_name_edited)
        self._name_input.returnPressed.connect(self._on_name_submitted)
        layout.addWidget(self._name_input)

        self._continue_button = _button("Continue", self._on_name_submitted)
        self._continue_button.setEnabled(False)
        layout.addWidget(self._continue_button, 0, Qt.AlignHCenter)
        layout.addStretch(1)
        return page

    def _build_language_page(self) -> QWidget:
        page, layout = _screen()
        layout.addWidget(_title("Choose a language"))
        row = QHBoxLayout()
        row.setSpacing(12)
        for language in self._engine.languages():
            row.addWidget(_button(language.name, lambda code=language.code: self._on_language_chosen(code)))
        layout.addLayout(row)
        layout.addWidget(_button("Start over", self._engine.new_session, primary=False), 0, Qt.AlignHCenter)
        layout.addStretch(1)
        return page

    def _build_duration_page(self) -> QWidget:
        page, layout = _screen()
        layout.addWidget(_title("How long do you want to practise?"))
        row = QHBoxLayout()
        row.setSpacing(12)
        for seconds in DURATION_CHOICES:
            row.addWidget(_button(format_remaining(seconds), lambda s=seconds: self._on_duration_chosen(s)))
        layout.addLayout(row)
        layout.addWidget(_button("Start over", self._engine.new_session, primary=False), 0, Qt.AlignHCenter)
        layout.addStretch(1)
        return page

    def _build_countdown_page(self) -> QWidget:
        page, layout = _screen()
        self._countdown_label = _title("", size=96)
        self._countdown_label.setStyleSheet(f"color: {HomeColors.PRIMARY}; font-size: 96px; font-weight: 900;")
        self._countdown_message = _title("", size=22)
        layout.addWidget(self._countdown_label)
        layout.addWidget(self._countdown_message)
        layout.addStretch(1)
        return page

    def _build_game_page(self) -> QWidget:
        page, layout = _screen()

        stats = QHBoxLayout()
        self._timer_label = _title("", size=24)
        self._wpm_label = _title("0 WPM", size=24)
        self._accuracy_label = _title("100%", size=24)
        for label in (self._timer_label, self._wpm_label, self._accuracy_label):
            stats.addWidget(label)
        layout.addLayout(stats)

        self._sentence_label = QLabel("")
        self._sentence_label.setTextFormat(Qt.RichText)
        self._sentence_label.setWordWrap(True)
        self._sentence_label.setAlignment(Qt.AlignCenter)
        self._sentence_label.setStyleSheet(
            f"QLabel {{ background: {HomeColors.CARD_BG}; border-radius: 18px; padding: 24px;"
            f" font-size: 30px; font-family: monospace; }}"
        )
        layout.addWidget(self._sentence_label)

        self._typing_input = QLineEdit()
        self._typing_input.setPlaceholderText("Start typing here...")
        self._typing_input.setStyleSheet(
            f"QLineEdit {{ padding: 12px; font-size: 22px; border-radius: 12px;"
            f" border: 2px solid {HomeColors.PRIMARY}; background: white; font-family: monospace; }}"
        )
        self._typing_input.textEdited.connect(self._on_typing_edited)
        layout.addWidget(self._typing_input)

        self._game_banner = _title("", size=26)
        layout.addWidget(self._game_banner)
        layout.addWidget(_button("Quit", self._on_quit, primary=False), 0, Qt.AlignHCenter)
        layout.addStretch(1)
        return page

    def _build_results_page(self) -> QWidget:
        page, layout = _screen()
        self._results_title = _title("")
        layout.addWidget(self._results_title)
        self._results_label = _title("", size=20)
        layout.addWidget(self._results_label)
        self._recommendation_label = QLabel("")
        self._recommendation_label.setWordWrap(True)
        self._recommendation_label.setAlignment(Qt.AlignCenter)
        self._recommendation_label.setStyleSheet(f"color: {HomeColors.TEXT_SECONDARY}; font-size: 16px;")
        layout.addWidget(self._recommendation_label)

        row = QHBoxLayout()
        row.addWidget(_button("Play again", self._engine.restart))
        row.addWidget(_button("Change settings", self._engine.change_settings, primary=False))
        row.addWidget(_button("New player", self._engine.new_session, primary=False))
        layout.addLayout(row)
        layout.addStretch(1)
        return page

    # -- user input ----------------------------------------------------------

    def _on_name_edited(self, text: str) -> None:
        self._continue_button.setEnabled(self._engine.set_user_name(text))

    def _on_name_submitted(self) -> None:
        if self._continue_button.isEnabled():
            self._engine.proceed_to_language()

    def _on_language_chosen(self, code: str) -> None:
        self._engine.set_language(code)
        self._engine.proceed_to_duration()

    def _on_duration_chosen(self, seconds: int) -> None:
        self._engine.set_duration(seconds)
        self._engine.start_countdown()

    def _on_typing_edited(self, text: str) -> None:
        self._engine.update_typing(text)

    def _on_quit(self) -> None:
        self._engine.abandon()
        self._engine.initialize()

    def _on_countdown_timer(self) -> None:
        self._engine.countdown_tick()

    def _on_game_timer(self) -> None:
        if not self._engine.check_time():
            self._set_remaining(self._engine.remaining_time())

    # -- engine notifications ------------------------------------------------

    def on_phase(self, phase: SessionPhase) -> None:
        page = self._pages.get(phase.kind)
        if page is not None:
            self._stack.setCurrentWidget(page)

        if phase.kind is Phase.COUNTDOWN:
            if not self._countdown_timer.isActive():
                self._countdown_timer.start()
        else:
            self._countdown_timer.stop()

        if phase.kind is Phase.PLAYING:
            self._game_banner.setText("")
            if not self._game_timer.isActive():
                self._game_timer.start()
            self._typing_input.setEnabled(True)
            self._typing_input.setFocus()
        else:
            self._game_timer.stop()

        if phase.kind is Phase.TIME_UP:
            self._typing_input.setEnabled(False)
            self._game_banner.setText("Time's up!")
        elif phase.kind is Phase.AWAITING_NAME:
            self._name_input.setText(self._engine.user_name)
            self._continue_button.setEnabled(bool(self._engine.user_name))
            self._name_input.setFocus()

    def on_countdown(self, count: int, message: str) -> None:
        self._countdown_label.setText(str(count))
        self._countdown_message.setText(message)

    def on_sentence(self, sentence: str) -> None:
        self._sentence = sentence
        self._typing_input.setMaxLength(max(1, len(sentence)))
        self._typing_input.clear()
        self._sentence_label.setText(sentence_html(sentence, ()))

    def on_progress(self, stats: LiveStats) -> None:
        self._sentence_label.setText(sentence_html(self._sentence, stats.char_states))
        self._wpm_label.setText(f"{stats.wpm:.0f} WPM")
        self._accuracy_label.setText(f"{stats.accuracy:.0f}%")
        self._set_remaining(stats.remaining)

    def on_result(self, result: SessionResult, recommendation: Recommendation) -> None:
        name = self._engine.user_name
        self._results_title.setText(f"Well done, {name}!" if name else "Well done!")
        self._results_label.setText("\n".join(result_lines(result)))
        self._recommendation_label.setText(str(recommendation))

    def _set_remaining(self, remaining: float) -> None:
        self._timer_label.setText(format_remaining(remaining))
        self._timer_label.setStyleSheet(
            f"color: {timer_color(remaining)}; font-size: 24px; font-weight: 800;"
        )
