"""End-to-end tests for the settings blueprint using the Flask test client."""
import io
import json

from app.domain.models import ShelfName
from app.services import BookSerializationError
from app.settings_view import SettingsView


def _export_href(html):
    marker = 'id="export-books" href="'
    start = html.index(marker) + len(marker)
    return html[start:html.index('"', start)]


def test_settings_page_renders(client):
    response = client.get('/settings/')
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert '<title>Settings | Book Project</title>' in html
    assert 'Appearance:' in html
    assert 'My books:' in html
    assert 'Reset shelves' in html
    assert 'Enable dark mode' in html
    assert 'data-theme="light"' in html
    assert '<dialog' not in html


def test_upload_widget_is_single_json_file_with_submit_button(client):
    html = client.get('/settings/').get_data(as_text=True)

    assert 'accept="application/json"' in html
    assert 'multiple' not in html
    assert 'Drop to import books' in html
    assert 'id="import-books-button"' in html


def test_dark_mode_toggle_json(client):
    response = client.post('/settings/dark-mode', json={})
    assert response.get_json() == {
        'success': True,
        'dark_mode': True,
        'label': 'Disable dark mode',
        'theme': 'dark',
    }

    html = client.get('/settings/').get_data(as_text=True)
    assert 'data-theme="dark"' in html
    assert 'Disable dark mode' in html
    assert 'checked' in html

    response = client.post('/settings/dark-mode', json={})
    assert response.get_json()['dark_mode'] is False
    assert 'data-theme="light"' in client.get('/settings/').get_data(as_text=True)


def test_dark_mode_toggle_form_redirects(client):
    response = client.post('/settings/dark-mode')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/settings/')


def test_reset_link_opens_exactly_one_dialog(client):
    html = client.get('/settings/?dialog=reset-shelves').get_data(as_text=True)

    assert html.count('<dialog') == 1
    assert 'Are you sure you want to reset all shelves?' in html


def test_confirming_reset_removes_all_books(client, book_service, book_factory):
    book_service.save(book_factory(title='Dune'))
    book_service.save(book_factory(title='Emma', shelf=ShelfName.READ))

    response = client.post('/settings/reset-shelves', data={'submit': 'confirm'}, follow_redirects=True)

    assert response.status_code == 200
    assert 'Shelves reset. 2 books removed.' in response.get_data(as_text=True)
    assert book_service.count() == 0


def test_export_download_streams_json_attachment(client, book_service, book_factory):
    book_service.save(book_factory(title='Dune', shelf=ShelfName.READ))
    href = _export_href(client.get('/settings/').get_data(as_text=True))
    assert href

    response = client.get(href)

    assert response.status_code == 200
    assert response.mimetype == 'application/json'
    assert 'bookExport.json' in response.headers['Content-Disposition']
    assert 'attachment' in response.headers['Content-Disposition']
    data = json.loads(response.get_data(as_text=True))
    assert [b['title'] for b in data] == ['Dune']


def test_export_link_is_empty_when_serialization_fails(client, book_service, monkeypatch):
    def _fail():
        raise BookSerializationError('boom')

    monkeypatch.setattr(book_service, 'get_json_representation_for_books_as_string', _fail)
    response = client.get('/settings/')

    assert response.status_code == 200
    assert _export_href(response.get_data(as_text=True)) == ''


def test_unknown_export_token_is_404(client):
    assert client.get('/settings/export/does-not-exist').status_code == 404


def test_export_links_from_two_tabs_both_download(client):
    first = _export_href(client.get('/settings/').get_data(as_text=True))
    second = _export_href(client.get('/settings/').get_data(as_text=True))

    assert first != second
    assert client.get(first).status_code == 200
    assert client.get(second).status_code == 200


def test_reset_releases_every_export_link_of_the_session(client):
    links = [_export_href(client.get('/settings/').get_data(as_text=True)) for _ in range(2)]

    client.post('/settings/reset-shelves', data={'submit': 'confirm'})

    assert all(client.get(link).status_code == 404 for link in links)


def _count_serializations(book_service, monkeypatch):
    calls = []
    original = book_service.get_json_representation_for_books_as_string

    def _counting():
        calls.append(1)
        return original()

    monkeypatch.setattr(book_service, 'get_json_representation_for_books_as_string', _counting)
    return calls


def test_reset_does_not_build_an_export(client, book_service, book_factory, monkeypatch):
    book_service.save(book_factory(title='Dune'))
    calls = _count_serializations(book_service, monkeypatch)

    response = client.post('/settings/reset-shelves', data={'submit': 'confirm'})

    assert response.status_code == 302
    assert calls == []
    assert book_service.count() == 0


def test_dark_mode_toggle_goes_through_settings_view(client, book_service, monkeypatch):
    calls = _count_serializations(book_service, monkeypatch)
    toggles = []
    original = SettingsView.toggle_dark_mode

    def _tracking(view):
        toggles.append(view)
        return original(view)

    monkeypatch.setattr(SettingsView, 'toggle_dark_mode', _tracking)
    response = client.post('/settings/dark-mode', json={})

    assert response.get_json()['label'] == 'Disable dark mode'
    assert len(toggles) == 1
    assert toggles[0].dark_mode_label == 'Disable dark mode'
    assert calls == []


def test_import_upload_adds_books(client, book_service):
    payload = json.dumps([
        {'title': 'Emma', 'author': 'Jane Austen', 'shelf': 'READ'},
        {'title': '', 'author': 'Nobody'},
    ]).encode('utf-8')

    response = client.post(
        '/settings/import',
        data={'books_file': (io.BytesIO(payload), 'books.json', 'application/json')},
        content_type='multipart/form-data',
        follow_redirects=True,
    )
    html = response.get_data(as_text=True)

    assert 'Imported 1 book.' in html
    assert 'Skipped 1 invalid entry' in html
    assert [b.title for b in book_service.find_all()] == ['Emma']


def test_import_keeps_good_entries_around_bad_values(client, book_service):
    payload = json.dumps([
        {'title': 'Emma', 'author': 'Jane Austen'},
        {'title': 'Huge', 'author': 'A B', 'number_of_pages': 10 ** 20},
        {'title': 'Odd', 'author': {'first_name': 123, 'last_name': 'X'}},
        {'title': 'Dune', 'author': 'Frank Herbert'},
    ]).encode('utf-8')

    response = client.post(
        '/settings/import',
        data={'books_file': (io.BytesIO(payload), 'books.json', 'application/json')},
        content_type='multipart/form-data',
        follow_redirects=True,
    )
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert 'Imported 2 books.' in html
    assert 'Skipped 2 invalid entries' in html
    assert sorted(b.title for b in book_service.find_all()) == ['Dune', 'Emma']


def test_import_rejects_non_json_file(client, book_service):
    response = client.post(
        '/settings/import',
        data={'books_file': (io.BytesIO(b'title,author'), 'books.csv', 'text/csv')},
        content_type='multipart/form-data',
        follow_redirects=True,
    )

    assert 'Only .json files can be imported.' in response.get_data(as_text=True)
    assert book_service.count() == 0


def test_import_reports_malformed_json(client, book_service):
    response = client.post(
        '/settings/import',
        data={'books_file': (io.BytesIO(b'{broken'), 'books.json', 'application/json')},
        content_type='multipart/form-data',
        follow_redirects=True,
    )

    assert 'Import failed: Invalid JSON' in response.get_data(as_text=True)
    assert book_service.count() == 0


def test_import_without_file_is_rejected(client):
    response = client.post('/settings/import', data={}, follow_redirects=True)
    assert 'Please choose a JSON file to import.' in response.get_data(as_text=True)


def test_library_groups_books_by_shelf(client, book_service, book_factory):
    book_service.save(book_factory(title='Dune', shelf=ShelfName.READING))

    html = client.get('/').get_data(as_text=True)

    assert 'My books (1)' in html
    assert 'id="shelf-reading"' in html
    assert 'Dune' in html


def test_health(client):
    assert client.get('/health').get_json() == {'status': 'healthy'}
