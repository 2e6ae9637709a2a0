"""
PyQt6 HEX Field Decoder - paste or load HEX, define bit-fields, read values
Field layouts can be saved as named templates in a local SQLite database
"""

import logging

from PyQt6.QtWidgets import (QApplication, QMainWindow, QWidget, QVBoxLayout,
                             QHBoxLayout, QPushButton, QLabel, QFileDialog,
                             QMessageBox, QComboBox, QLineEdit, QGroupBox,
                             QSplitter, QTextEdit, QTableWidget, QTableWidgetItem,
                             QHeaderView)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from .codec import EmptyInput, OddLength
from .config import AppConfig
from .decoder import decode
from .fields import FieldRow, default_field_row
from .hexfile import HEX_FILE_FILTER, read_hex_file
from .templates import TemplateNotFound, TemplateStoreError

logger = logging.getLogger(__name__)

NAME_COLUMN = 0
START_COLUMN = 1
LENGTH_COLUMN = 2

TEMPLATE_PLACEHOLDER = "-- select template --"


class FieldTableWidget(QTableWidget):
    """Editable name / start bit / length table"""

    def __init__(self, default_length=8):
        super().__init__(0, 3)
        self.default_length = default_length
        self.setHorizontalHeaderLabels(["Name", "Start bit", "Length"])
        self.horizontalHeader().setSectionResizeMode(NAME_COLUMN, QHeaderView.ResizeMode.Stretch)
        self.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.setSelectionMode(QTableWidget.SelectionMode.ExtendedSelection)
        self.setAlternatingRowColors(True)

    def add_row(self, row=None):
        """Append a row; without an argument the next consecutive field is added."""
        index = self.rowCount()
        if row is None:
            row = default_field_row(index, self.default_length)
        self.insertRow(index)
        self.setItem(index, NAME_COLUMN, QTableWidgetItem(str(row.name)))
        self.setItem(index, START_COLUMN, QTableWidgetItem(str(row.start)))
        self.setItem(index, LENGTH_COLUMN, QTableWidgetItem(str(row.length)))

    def remove_selected_rows(self):
        selected = sorted({index.row() for index in self.selectionModel().selectedRows()}, reverse=True)
        for row in selected:
            self.removeRow(row)
        return len(selected)

    def set_rows(self, rows):
        self.setRowCount(0)
        for row in rows:
            self.add_row(row)

    def rows(self):
        """Current rows as FieldRow; empty cells come back as None"""
        def text_at(r, c):
            item = self.item(r, c)
            return item.text() if item is not None else None

        return [
            FieldRow(text_at(r, NAME_COLUMN), text_at(r, START_COLUMN), text_at(r, LENGTH_COLUMN))
            for r in range(self.rowCount())
        ]


class ResultTableWidget(QTableWidget):
    """Read-only name / bits / value table"""

    def __init__(self, font_size=10):
        super().__init__(0, 3)
        self.setHorizontalHeaderLabels(["Name", "Bits", "Value"])
        self.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.setFont(QFont("Courier", font_size))
        self.setAlternatingRowColors(True)

    def set_results(self, results):
        self.setRowCount(0)
        for result in results:
            row = self.rowCount()
            self.insertRow(row)
            self.setItem(row, 0, QTableWidgetItem(result.name))
            self.setItem(row, 1, QTableWidgetItem(result.bits))
            value_item = QTableWidgetItem(result.display_value)
            value_item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            self.setItem(row, 2, value_item)


class FieldDecoderWindow(QMainWindow):
    def __init__(self, store, config=None):
        super().__init__()
        self.config = config or AppConfig()
        # None when the database could not be opened; templates are disabled then
        self.store = store

        self.setWindowTitle("HEX Field Decoder")
        self.setGeometry(100, 100, self.config.ui.window_width, self.config.ui.window_height)

        self.init_ui()
        self.apply_theme()
        self.load_templates_list()
        self.field_table.add_row()

    def init_ui(self):
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        main_layout.addWidget(splitter)

        left_panel = self.create_left_panel()
        splitter.addWidget(left_panel)

        right_panel = self.create_right_panel()
        splitter.addWidget(right_panel)

        splitter.setSizes([420, 680])

    def apply_theme(self):
        self.setStyleSheet("""
            QMainWindow { background-color: #e6f2ff; }
            QGroupBox {
                background-color: #cce5ff;
                border: 2px solid #3399ff;
                border-radius: 5px;
                margin-top: 10px;
                font-weight: bold;
            }
            QGroupBox::title { subcontrol-origin: margin; left: 10px; padding: 0 5px; }
            QPushButton { background-color: #3399ff; color: white; border: none; padding: 5px; border-radius: 3px; }
            QPushButton:hover { background-color: #66b3ff; }
        """)

    def create_left_panel(self):
        widget = QWidget()
        layout = QVBoxLayout(widget)

        # Templates
        template_group = QGroupBox("Template")
        template_layout = QVBoxLayout()

        self.template_list = QComboBox()
        self.template_list.currentIndexChanged.connect(self.template_selection_changed)
        template_layout.addWidget(self.template_list)

        name_layout = QHBoxLayout()
        name_layout.addWidget(QLabel("Name:"))
        self.template_name = QLineEdit()
        self.template_name.setPlaceholderText("e.g., Header, Status word")
        name_layout.addWidget(self.template_name)
        template_layout.addLayout(name_layout)

        buttons_layout = QHBoxLayout()
        self.save_template_button = QPushButton("💾 Save")
        self.save_template_button.clicked.connect(self.save_template)
        buttons_layout.addWidget(self.save_template_button)

        self.load_template_button = QPushButton("📂 Load")
        self.load_template_button.clicked.connect(self.load_template_selection)
        buttons_layout.addWidget(self.load_template_button)
        template_layout.addLayout(buttons_layout)

        template_group.setLayout(template_layout)
        layout.addWidget(template_group)

        # Fields
        fields_group = QGroupBox("Fields")
        fields_layout = QVBoxLayout()

        self.field_table = FieldTableWidget(self.config.ui.default_field_length)
        fields_layout.addWidget(self.field_table)

        field_buttons = QHBoxLayout()
        btn_add_field = QPushButton("➕ Add Field")
        btn_add_field.clicked.connect(self.add_field_row)
        field_buttons.addWidget(btn_add_field)

        btn_remove_field = QPushButton("➖ Remove Selected")
        btn_remove_field.clicked.connect(self.remove_selected_field_rows)
        field_buttons.addWidget(btn_remove_field)
        fields_layout.addLayout(field_buttons)

        fields_group.setLayout(fields_layout)
        layout.addWidget(fields_group)

        return widget

    def create_right_panel(self):
        widget = QWidget()
        layout = QVBoxLayout(widget)

        input_group = QGroupBox("HEX Input")
        input_layout = QVBoxLayout()

        self.hex_input = QTextEdit()
        self.hex_input.setAcceptRichText(False)
        self.hex_input.setFont(QFont("Courier", self.config.ui.font_size))
        self.hex_input.setPlaceholderText("FF 0A 1B ... (spaces and line breaks are ignored)")
        input_layout.addWidget(self.hex_input)

        input_buttons = QHBoxLayout()
        btn_open = QPushButton("📂 Open File")
        btn_open.clicked.connect(self.load_hex_from_file)
        input_buttons.addWidget(btn_open)

        self.decode_button = QPushButton("▶ Decode")
        self.decode_button.clicked.connect(self.decode_hex)
        input_buttons.addWidget(self.decode_button)
        input_layout.addLayout(input_buttons)

        input_group.setLayout(input_layout)
        layout.addWidget(input_group)

        result_group = QGroupBox("Results")
        result_layout = QVBoxLayout()
        self.result_table = ResultTableWidget(self.config.ui.font_size)
        result_layout.addWidget(self.result_table)
        result_group.setLayout(result_layout)
        layout.addWidget(result_group)

        self.status_label = QLabel("Ready")
        layout.addWidget(self.status_label)

        return widget

    # ---- fields -------------------------------------------------------

    def add_field_row(self):
        self.field_table.add_row()

    def remove_selected_field_rows(self):
        removed = self.field_table.remove_selected_rows()
        if removed:
            self.status_label.setText(f"Removed {removed} field(s)")

    # ---- hex input ----------------------------------------------------

    def load_hex_from_file(self):
        filename, _ = QFileDialog.getOpenFileName(self, "Open HEX File", "", HEX_FILE_FILTER)
        if not filename:
            return

        try:
            contents = read_hex_file(filename)
        except OSError as e:
            logger.warning("Failed to open %s: %s", filename, e)
            QMessageBox.warning(self, "File", f"Failed to open file: {e}")
            return

        self.hex_input.setPlainText(contents)
        self.status_label.setText(f"Loaded {filename.split('/')[-1]}")

    def decode_hex(self):
        outcome = decode(self.hex_input.toPlainText(), self.field_table.rows())

        if outcome.error is not None:
            # Keep the previous results on screen, nothing was decoded
            if isinstance(outcome.error, EmptyInput):
                QMessageBox.information(self, "HEX", str(outcome.error))
            elif isinstance(outcome.error, OddLength):
                QMessageBox.warning(self, "HEX", str(outcome.error))
            else:
                QMessageBox.critical(self, "HEX", str(outcome.error))
            self.status_label.setText(f"Decode failed: {outcome.error}")
            return

        self.result_table.set_results(outcome.results)
        self.status_label.setText(
            f"Decoded {len(outcome.results)} of {self.field_table.rowCount()} field(s)"
        )

    # ---- templates ----------------------------------------------------

    def load_templates_list(self):
        self.template_list.blockSignals(True)
        self.template_list.clear()
        self.template_list.addItem(TEMPLATE_PLACEHOLDER)
        if self.store is not None:
            try:
                self.template_list.addItems(self.store.list_names())
            except TemplateStoreError as e:
                logger.warning("Failed to list templates: %s", e)
                self.status_label.setText(str(e))
        self.template_list.blockSignals(False)

    def save_template(self):
        if self.store is None:
            QMessageBox.warning(self, "Database", "Template database is unavailable.")
            return

        name = self.template_name.text().strip()
        if not name:
            QMessageBox.information(self, "Template", "Enter a template name.")
            return

        try:
            count = self.store.save(name, self.field_table.rows())
        except TemplateStoreError as e:
            QMessageBox.warning(self, "Template", f"Failed to save template: {e}")
            return

        self.load_templates_list()
        index = self.template_list.findText(name)
        if index >= 0:
            self.template_list.blockSignals(True)
            self.template_list.setCurrentIndex(index)
            self.template_list.blockSignals(False)
        self.status_label.setText(f"Template '{name}' saved ({count} fields)")
        QMessageBox.information(self, "Template", "Template saved.")

    def template_selection_changed(self, index):
        if index <= 0:
            return
        self.load_template_by_name(self.template_list.itemText(index))

    def load_template_selection(self):
        name = self.template_list.currentText()
        if not name or self.template_list.currentIndex() == 0:
            QMessageBox.information(self, "Template", "Select a template from the list.")
            return
        self.load_template_by_name(name)

    def load_template_by_name(self, name):
        if self.store is None:
            return

        try:
            definitions = self.store.load(name)
        except (TemplateNotFound, TemplateStoreError) as e:
            QMessageBox.warning(self, "Template", f"Failed to load template: {e}")
            return

        self.template_name.setText(name)
        self.field_table.set_rows(FieldRow.from_definition(d) for d in definitions)
        self.status_label.setText(f"Template '{name}' loaded ({len(definitions)} fields)")


def run(store, config=None, argv=None):
    app = QApplication.instance() or QApplication(argv or [])
    window = FieldDecoderWindow(store, config)
    window.show()
    return app.exec()
