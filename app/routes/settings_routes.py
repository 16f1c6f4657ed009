"""
Settings routes: appearance, reset shelves, and JSON export/import of the collection.
"""

from io import BytesIO

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, send_file, current_app, abort

from app import theme
from app.forms import ImportBooksForm, ResetShelvesForm, DarkModeForm
from app.services import get_book_service, get_json_import_service, BookImportError
from app.settings_view import SettingsView
from app.utils.resource_registry import get_resource_registry, current_resource_owner

settings_bp = Blueprint('settings', __name__)

RESET_SHELVES_DIALOG = 'reset-shelves'


def _build_settings_view(with_export: bool = True) -> SettingsView:
    return SettingsView(
        book_service=get_book_service(),
        json_import_service=get_json_import_service(),
        registry=get_resource_registry(),
        resource_owner=current_resource_owner(),
        dark_mode_on=theme.is_dark_mode(),
        with_export=with_export,
    )


@settings_bp.route('/')
def settings():
    """Settings page."""
    view = _build_settings_view()
    if request.args.get('dialog') == RESET_SHELVES_DIALOG:
        view.open_reset_shelves_dialog()

    return render_template(
        'settings.html',
        view=view,
        import_form=ImportBooksForm(),
        reset_form=ResetShelvesForm(),
        dark_mode_form=DarkModeForm(),
        book_count=view.book_service.count(),
    )


@settings_bp.route('/dark-mode', methods=['POST'])
def toggle_dark_mode():
    """Toggle the dark theme for this session."""
    try:
        view = _build_settings_view(with_export=False)
        dark_mode_on = view.toggle_dark_mode()
        current_app.logger.debug(f"Dark mode {'enabled' if dark_mode_on else 'disabled'}")
    except Exception as e:
        current_app.logger.error(f"Error toggling theme: {e}")
        if request.is_json:
            return jsonify({
                'success': False,
                'error': 'Failed to toggle theme'
            }), 500
        flash('Could not change the theme.', 'danger')
        return redirect(url_for('settings.settings'))

    if request.is_json:
        return jsonify({
            'success': True,
            'dark_mode': dark_mode_on,
            'label': view.dark_mode_label,
            'theme': theme.current_theme()
        })
    return redirect(url_for('settings.settings'))


@settings_bp.route('/reset-shelves', methods=['POST'])
def reset_shelves():
    """Confirm the reset shelves dialog."""
    form = ResetShelvesForm()
    if not form.validate_on_submit():
        flash('Reset shelves was not confirmed.', 'warning')
        return redirect(url_for('settings.settings'))

    try:
        view = _build_settings_view(with_export=False)
        dialog = view.open_reset_shelves_dialog()
        deleted = dialog.confirm()
        get_resource_registry().release_owner(current_resource_owner())
        flash(f'Shelves reset. {deleted} book{"s" if deleted != 1 else ""} removed.', 'success')
    except Exception as e:
        current_app.logger.error(f"Error resetting shelves: {e}")
        flash('Error resetting shelves.', 'danger')

    return redirect(url_for('settings.settings'))


@settings_bp.route('/export/<token>')
def download_export(token):
    """Stream a registered export document."""
    resource = get_resource_registry().get(token)
    if resource is None:
        abort(404)

    return send_file(
        BytesIO(resource.data),
        mimetype=resource.content_type,
        as_attachment=True,
        download_name=resource.name,
    )


@settings_bp.route('/import', methods=['POST'])
def import_books():
    """Handle the upload of a single JSON file."""
    form = ImportBooksForm()
    if not form.validate_on_submit():
        for errors in form.errors.values():
            for error in errors:
                flash(error, 'danger')
        return redirect(url_for('settings.settings'))

    upload = form.books_file.data
    try:
        result = get_json_import_service().on_upload_succeeded(upload.filename, upload.mimetype, upload.stream)
    except BookImportError as e:
        current_app.logger.warning(f"JSON import rejected: {e}")
        flash(f'Import failed: {e}', 'danger')
        return redirect(url_for('settings.settings'))
    except Exception as e:
        current_app.logger.error(f"Error importing books: {e}")
        flash('Error importing books.', 'danger')
        return redirect(url_for('settings.settings'))

    flash(f'Imported {result.imported} book{"s" if result.imported != 1 else ""}.', 'success' if result.imported else 'info')
    if result.skipped:
        flash(f'Skipped {result.skipped} invalid entr{"ies" if result.skipped != 1 else "y"}: ' + '; '.join(result.errors[:5]), 'warning')
    return redirect(url_for('settings.settings'))
