import os
import secrets
import platform
from dotenv import load_dotenv
from cachelib.file import FileSystemCache

# Load environment variables from .env file(s)
# 1) Project root .env
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))

def ensure_data_directory():
    """Ensure data directory exists with proper permissions (cross-platform)"""
    data_dir = os.environ.get('BOOK_PROJECT_DATA_DIR') or os.path.join(basedir, 'data')

    os.makedirs(data_dir, exist_ok=True)

    sessions_dir = os.path.join(data_dir, 'flask_sessions')
    os.makedirs(sessions_dir, exist_ok=True)

    # Only set Unix permissions on non-Windows systems
    if platform.system() != "Windows":
        try:
            # 755 = rwxr-xr-x
            os.chmod(data_dir, 0o755)
            os.chmod(sessions_dir, 0o755)
        except (OSError, PermissionError):
            # Ignore permission errors (common on some systems)
            pass

    return data_dir

# Initialize data directory
data_dir = ensure_data_directory()

# 2) Overlay data/.env so settings saved at runtime persist via the mounted volume
data_env_path = os.path.join(data_dir, '.env')
if os.path.exists(data_env_path):
    load_dotenv(dotenv_path=data_env_path, override=True)


class Config:
    # Expose data directory path for other modules
    DATA_DIR = data_dir
    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # For development, generate a temporary secret key
        # In production, always set SECRET_KEY environment variable
        if os.environ.get('FLASK_ENV') == 'development' or os.environ.get('FLASK_DEBUG'):
            SECRET_KEY = secrets.token_hex(32)
            print("⚠️  WARNING: Using temporary SECRET_KEY for development. Set SECRET_KEY in .env for production!")
        else:
            # All Gunicorn workers must share the same key or sessions and
            # CSRF tokens break between requests.
            raise ValueError("No SECRET_KEY set for Flask application. Please set it in your .env file.")

    # CSRF Settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour
    WTF_CSRF_SSL_STRICT = False  # Allow CSRF over HTTP for development

    # Session cookie settings
    SESSION_COOKIE_SECURE = False  # Set to True only in production with HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_PERMANENT = False
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # Flask-Session Configuration (server-side sessions hold the theme preference)
    SESSION_TYPE = 'cachelib'
    SESSION_KEY_PREFIX = 'bookproject:'
    SESSION_CACHELIB = FileSystemCache(
        cache_dir=os.path.join(data_dir, 'flask_sessions'),
        threshold=500,  # Maximum number of sessions to store
    )

    # Kuzu Database Configuration
    KUZU_DB_PATH = os.environ.get('KUZU_DB_PATH') or os.path.join(data_dir, 'kuzu')
    KUZU_DB_NAME = os.environ.get('KUZU_DB_NAME', 'books.kuzu')

    # File uploads
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max import file

    # Application settings
    SITE_NAME = os.environ.get('SITE_NAME', 'Book Project')

    # Book export settings
    EXPORT_FILENAME = os.environ.get('EXPORT_FILENAME', 'bookExport.json')
    EXPORT_RESOURCE_TTL_SECONDS = int(os.environ.get('EXPORT_RESOURCE_TTL_SECONDS', 600))
    EXPORT_RESOURCES_PER_SESSION = int(os.environ.get('EXPORT_RESOURCES_PER_SESSION', 5))

    # Python logging level (DEBUG, INFO, WARNING, ERROR)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'ERROR').upper()


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SECRET_KEY = 'testing-secret-key'
    LOG_LEVEL = 'DEBUG'
