"""
Settings page state.

SettingsView gathers everything the settings template renders: the dark mode
toggle, the reset shelves dialog, the export link and the import upload.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from flask import current_app, url_for

from . import theme
from .dialogs import ResetShelvesDialog
from .services.book_service import BookService, BookSerializationError
from .services.json_import_service import JsonImportService
from .utils.resource_registry import ResourceRegistry, StreamResource

logger = logging.getLogger(__name__)

ENABLE_DARK_MODE = theme.ENABLE_DARK_MODE
DISABLE_DARK_MODE = theme.DISABLE_DARK_MODE
APPEARANCE = "Appearance:"
MY_BOOKS = "My books:"
CLEAR_SHELVES = "Reset shelves"
EXPORT_BOOKS = "Export"
IMPORT_BOOKS = "Import Books"
DROP_IMPORT_BOOKS = "Drop to import books"

JSON_CONTENT_TYPE = 'application/json'


@dataclass
class UploadSettings:
    """How the import upload widget behaves."""
    accepted_file_types: Tuple[str, ...] = (JSON_CONTENT_TYPE,)
    max_files: int = 1
    auto_upload: bool = False
    drop_label: str = DROP_IMPORT_BOOKS
    upload_button_label: str = IMPORT_BOOKS

    @property
    def accept(self) -> str:
        """Value for the file input's ``accept`` attribute."""
        return ','.join(self.accepted_file_types)

    @property
    def allows_multiple(self) -> bool:
        return self.max_files > 1


class SettingsView:
    appearance_heading = APPEARANCE
    my_books_heading = MY_BOOKS
    clear_shelves_label = CLEAR_SHELVES
    export_books_label = EXPORT_BOOKS

    def __init__(self, book_service: BookService, json_import_service: JsonImportService,
                 registry: ResourceRegistry, resource_owner: str, dark_mode_on: bool = False,
                 with_export: bool = True):
        self.book_service = book_service
        self.json_import_service = json_import_service
        self.registry = registry
        self.resource_owner = resource_owner

        self.dark_mode_on = dark_mode_on
        self.dark_mode_toggle_checked = False
        self.dark_mode_label = ENABLE_DARK_MODE
        self.reset_shelves_dialog: Optional[ResetShelvesDialog] = None
        self.export_books_href = ""
        self.upload = UploadSettings()

        self.set_dark_mode_state()
        if with_export:
            self.configure_export_books_anchor()
        self.configure_upload()

    def set_dark_mode_state(self) -> None:
        self.dark_mode_toggle_checked = self.dark_mode_on
        self.update_dark_mode_label()

    def update_dark_mode_label(self) -> None:
        self.dark_mode_label = theme.dark_mode_label(self.dark_mode_on)

    def toggle_dark_mode(self) -> bool:
        """Flip the theme at the UI root and keep toggle and label in step."""
        self.dark_mode_on = not self.dark_mode_on
        theme.set_dark_mode(self.dark_mode_on)
        self.set_dark_mode_state()
        return self.dark_mode_on

    def open_reset_shelves_dialog(self) -> ResetShelvesDialog:
        """Open the one reset dialog for this page, bound to the book service."""
        self.reset_shelves_dialog = ResetShelvesDialog(self.book_service)
        self.reset_shelves_dialog.open_dialog()
        return self.reset_shelves_dialog

    def configure_export_books_anchor(self) -> None:
        self.export_books_href = self.generate_json_resource()

    def configure_upload(self) -> None:
        self.upload.auto_upload = False
        self.upload.accepted_file_types = (JSON_CONTENT_TYPE,)
        self.upload.max_files = 1

    def generate_json_resource(self) -> str:
        """Register the JSON export for download; empty string if it cannot be built."""
        try:
            json_representation = self.book_service.get_json_representation_for_books_as_string().encode('utf-8')
        except BookSerializationError as e:
            logger.error(f"Cannot create json resource. {e}")
            return ""

        resource = StreamResource(
            name=current_app.config.get('EXPORT_FILENAME', 'bookExport.json'),
            data=json_representation,
            content_type=JSON_CONTENT_TYPE,
        )
        token = self.registry.register(resource, owner=self.resource_owner)
        return url_for('settings.download_export', token=token)
