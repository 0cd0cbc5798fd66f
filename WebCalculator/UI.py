# UI.py
""""PySide6 user interface for the calculator.

Structure
---------
- Calculator UI: main window with working line, display, button grid and history panel
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Build window, display, layout and buttons
- Translate button clicks and key presses into CalculatorSession input
- Dispatch the expression to the EvaluationClient in a worker thread
- Re-render display and history from DisplayProjector after every change
- Clipboard integration (copy result, paste expression) and spoken transcripts


Responsibilities (Settings)
---------------------------

- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input (e.g. positive timeout)
- Save and apply theme changes immediately


Threading Note
--------------
The HTTP call is executed off the UI thread in Worker(QObject), so the UI stays responsive.
Outcomes are emitted via a Qt signal and applied back in the UI thread. The session drops
outcomes that arrive after the user changed the expression.
"""""

import sys
import logging
import threading

import pyperclip
from PySide6 import QtWidgets
from PySide6.QtCore import Qt, QObject, Signal

from . import error as E
from . import config_manager as config_manager
from . import DisplayProjector as DisplayProjector
from . import VoiceInput as VoiceInput
from .EvaluationClient import EvaluationClient
from .Session import CalculatorSession

logger = logging.getLogger(__name__)

EMPTY_HISTORY_TEXT = "No calculations yet"


class Worker(QObject):
    """""

    Runs one evaluation on a separate thread and emits the outcome back to the
    Calculator UI together with the ticket it belongs to.

    """""

    job_finished = Signal(object, object)

    def __init__(self, client, ticket):
        super().__init__()
        self.client = client
        self.ticket = ticket

    def run_Calc(self):
        # EvaluationClient.evaluate never raises; every path ends in an outcome
        outcome = self.client.evaluate(self.ticket.expression)
        self.job_finished.emit(self.ticket, outcome)


class SettingsDialog(QtWidgets.QDialog):
    """""

    Settings window. Boolean settings become checkboxes, everything else an
    input field showing the current value as placeholder.

    """""

    settings_saved = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(340, 260)

        main_layout = QtWidgets.QVBoxLayout(self)

        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox
            else:
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(description + ":")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))
                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():
            old_value = setting_value_list[key_value]

            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()
                continue

            new_value_str = widget.text().strip()
            if new_value_str == "":
                continue  # Blank keeps the old value

            try:
                if isinstance(old_value, int):
                    new_value = int(new_value_str)
                    if new_value <= 0:
                        raise ValueError(f"'{new_value}' is too small. Minimum is 1.")
                elif isinstance(old_value, float):
                    new_value = float(new_value_str)
                else:
                    new_value = new_value_str
            except ValueError as e:
                logger.warning(f"[Settings] Invalid input for {key_value}: {e}")
                QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                               f"Error in input for '{key_value}':\n\n{e}\n\nPlease correct your input.")
                return

            setting_value_list[key_value] = new_value

        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error",
                                           "Settings could not be saved (error in config_manager).")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class CalculatorWindow(QtWidgets.QWidget):

    def __init__(self, session=None):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")

        # --- 2. Session ---
        if session is None:
            session = CalculatorSession(EvaluationClient.from_settings(self.setting_value_list))
        self.session = session
        self.session.ledger.changed.connect(self.render_history)
        self.thread_active = False
        self.button_objects = {}

        # --- 3. Window Setup ---
        self.setWindowTitle("Calculator")
        self.resize(640, 520)
        outer_h_layout = QtWidgets.QHBoxLayout(self)
        main_v_layout = QtWidgets.QVBoxLayout()
        outer_h_layout.addLayout(main_v_layout, 3)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # --- 4. Display Setup (working line above the main display) ---
        self.working_line = QtWidgets.QLabel("")
        self.working_line.setAlignment(Qt.AlignmentFlag.AlignRight)
        main_v_layout.addWidget(self.working_line)

        self.display = QtWidgets.QLineEdit("0")
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(36)
        self.display.setFont(font)
        main_v_layout.addWidget(self.display, 1)

        # --- 5. Button Grid Setup ---
        button_container = QtWidgets.QWidget()
        main_v_layout.addWidget(button_container, 3)
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(0)
        button_grid.setContentsMargins(0, 0, 0, 0)

        # (text, row, column)
        self.buttons = [
            ('⚙️', 0, 0), ('📋', 0, 1), ('🎤', 0, 2), ('C', 0, 3), ('<', 0, 4),
            ('sin(', 1, 0), ('(', 1, 1), (')', 1, 2), ('^', 1, 3), ('÷', 1, 4),
            ('cos(', 2, 0), ('7', 2, 1), ('8', 2, 2), ('9', 2, 3), ('×', 2, 4),
            ('tan(', 3, 0), ('4', 3, 1), ('5', 3, 2), ('6', 3, 3), ('-', 3, 4),
            ('sqrt(', 4, 0), ('1', 4, 1), ('2', 4, 2), ('3', 4, 3), ('+', 4, 4),
            ('log(', 5, 0), ('ln(', 5, 1), ('0', 5, 2), ('.', 5, 3), ('=', 5, 4),
        ]

        for text, row, col in self.buttons:
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)

            if text == '=':
                button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
            if text == '⚙️':
                button.clicked.connect(self.open_settings)
            else:
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))

            button_grid.addWidget(button, row, col)
            self.button_objects[text] = button

        # --- 6. History Panel ---
        history_v_layout = QtWidgets.QVBoxLayout()
        outer_h_layout.addLayout(history_v_layout, 2)
        history_v_layout.addWidget(QtWidgets.QLabel("History"))
        self.history_list = QtWidgets.QListWidget()
        self.history_list.itemClicked.connect(self.replay_history_item)
        history_v_layout.addWidget(self.history_list, 1)
        clear_history_button = QtWidgets.QPushButton("Clear history")
        clear_history_button.clicked.connect(self.session.clear_history)
        history_v_layout.addWidget(clear_history_button)

        self.update_darkmode()
        self.render_display()
        self.render_history()

    # --- Input ---

    def keyPressEvent(self, event):
        key_names = {
            Qt.Key.Key_Return: "=", Qt.Key.Key_Enter: "=",
            Qt.Key.Key_Backspace: "<", Qt.Key.Key_Escape: "C",
        }
        value = key_names.get(event.key(), event.text())
        if value and (value in key_names.values() or value in "0123456789.+-*/^()"):
            self.handle_button_press(value)
            return
        super().keyPressEvent(event)

    def handle_button_press(self, value):
        if value == '=':
            self.start_evaluation()
            return

        if value == '📋':
            self.handle_clipboard()
            return

        if value == '🎤':
            self.handle_transcript()
            return

        try:
            self.session.press(value)
        except E.InvalidInput as e:
            logger.warning(f"[UI] {E.describe(e)}")
        self.render_display()

    def handle_clipboard(self):
        # Shift held: paste expression, otherwise copy the display
        modifiers = QtWidgets.QApplication.keyboardModifiers()
        if modifiers & Qt.KeyboardModifier.ShiftModifier:
            self.load_text(pyperclip.paste())
        else:
            pyperclip.copy(self.display.text())

    def handle_transcript(self):
        # Dictation happens outside the app; the transcript arrives as text
        transcript, ok = QtWidgets.QInputDialog.getText(self, "Voice input", "Transcript:")
        if ok and transcript.strip():
            self.load_text(VoiceInput.transcript_to_expression(transcript))

    def load_text(self, text):
        try:
            self.session.load_expression(text)
        except E.InvalidInput as e:
            self.show_error_box(e)
        self.render_display()

    # --- Evaluation ---

    def start_evaluation(self):
        if self.thread_active:
            logger.info("[UI] A calculation is already running")
            return

        ticket = self.session.begin_evaluation()
        if ticket is None:
            return

        self.thread_active = True
        self.update_return_button()

        worker_instance = Worker(self.session.client, ticket)
        worker_instance.job_finished.connect(self.Calc_result)
        self._worker = worker_instance  # Keep a reference until the signal arrives
        my_thread = threading.Thread(target=worker_instance.run_Calc, daemon=True)
        my_thread.start()

    def Calc_result(self, ticket, outcome):
        self.thread_active = False
        self._worker = None
        self.update_return_button()

        applied = self.session.finish_evaluation(ticket, outcome)
        if applied and getattr(outcome, "code", "").startswith("3"):
            # Transport problems get a dialog, bad expressions only show 'Error'
            self.show_error_box(E.TransportFailure(outcome.message, code=outcome.code, equation=ticket.expression))
        self.render_display()

    # --- Rendering ---

    def render_display(self):
        main_line, working_line = self.session.display()
        self.display.setText(main_line)
        self.working_line.setText(working_line)

    def render_history(self):
        self.history_list.clear()
        entries = self.session.ledger.entries()
        if not entries:
            placeholder = QtWidgets.QListWidgetItem(EMPTY_HISTORY_TEXT)
            placeholder.setFlags(Qt.ItemFlag.NoItemFlags)
            self.history_list.addItem(placeholder)
            return

        for entry, (expression_line, result_line) in zip(entries, DisplayProjector.format_history(entries)):
            item = QtWidgets.QListWidgetItem(f"{expression_line}\n{result_line}")
            item.setData(Qt.ItemDataRole.UserRole, entry)
            self.history_list.addItem(item)

    def replay_history_item(self, item):
        entry = item.data(Qt.ItemDataRole.UserRole)
        if entry is None:
            return
        self.session.replay(entry)
        self.render_display()

    def update_return_button(self):
        return_button = self.button_objects.get('=')
        if not return_button:
            return

        if self.thread_active == True:
            return_button.setStyleSheet("background-color: #FF0000; color: white; font-weight: bold;")
            return_button.setText("...")
        else:
            return_button.setStyleSheet("background-color: #007bff; color: white; font-weight: bold;")
            return_button.setText("=")
        return_button.update()

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            for text, button in self.button_objects.items():
                if text != '=':
                    button.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
            self.setStyleSheet("background-color: #121212; color: white;")
            self.display.setStyleSheet("background-color: #121212; color: white; font-weight: bold;")
        else:
            for text, button in self.button_objects.items():
                if text != '=':
                    button.setStyleSheet("font-weight: normal;")
            self.setStyleSheet("")
            self.display.setStyleSheet("font-weight: bold;")
        self.update_return_button()

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.exec()

        # Reload so theme and transport changes apply immediately
        self.setting_value_list = config_manager.load_setting_value("all")
        try:
            self.session.client = EvaluationClient.from_settings(self.setting_value_list)
        except E.ConfigurationError as e:
            # Keep the previous client until the setting is fixed
            self.show_error_box(e)
        self.update_darkmode()

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QMessageBox { background-color: #121212; color: white; }
                QLabel { color: white; }
                QPushButton { background-color: #2e2e2e; color: white; border: 1px solid #444444; padding: 5px 15px; }
            """
        return ""

    def show_error_box(self, error):
        error_box = QtWidgets.QMessageBox(self)
        error_box.setIcon(QtWidgets.QMessageBox.Critical)
        error_box.setWindowTitle(E.Error_Dictionary.get(error.code[:1], "Calculation error"))
        error_box.setText(E.describe(error))
        error_box.setInformativeText(f"Details: {error.message}\nEquation: {error.equation}")
        error_box.setStandardButtons(QtWidgets.QMessageBox.Ok)
        error_box.setStyleSheet(self.get_message_box_stylesheet())
        error_box.exec()


def main():
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())
