"""i18n-finder - hardcoded UI string detection and translation key management."""

# Load .env so I18N_FINDER_CONFIG, I18N_FINDER_DISABLE_PROGRESS, etc. are set
# for any entry point (CLI, pytest, scripts) that imports i18n_finder.
from dotenv import load_dotenv

load_dotenv()

# Keep in sync with pyproject.toml [project] version.
__version__ = "0.1.0"
