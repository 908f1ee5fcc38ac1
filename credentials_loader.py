import os
import json
import logging

logger = logging.getLogger(__name__)

CREDENTIAL_KEYS = [
    "MANHATTAN_AUTH_HOST",
    "MANHATTAN_API_HOST",
    "MANHATTAN_CLIENT_ID",
    "MANHATTAN_SECRET",
    "MANHATTAN_PASSWORD",
    "MANHATTAN_USERNAME_BASE",
    "MANHATTAN_TIMEOUT",
    "MANHATTAN_VERIFY_SSL",
    "HA_WEBHOOK_URL",
    "VERCEL_API_TOKEN",
    "STATSIG_CLIENT_KEY",
    "STATSIG_CLIENT_SDK_KEY",
]


def credential_paths():
    """Candidate locations for credential.json, in lookup order"""
    return [
        r"C:\tmp\manhattan_login\credential.json",  # Windows path
        "/tmp/manhattan_login/credential.json",     # Linux path
        os.path.join(os.path.expanduser("~"), "tmp", "manhattan_login", "credential.json")
    ]


def load_credentials(json_paths=None):
    """
    Load Manhattan credentials from a JSON file instead of a .env file.

    Checks the locations from credential_paths() (or json_paths when given)
    and falls back to environment variables if no file can be read.
    Non-empty values are exported to os.environ so the integration classes
    can read them directly.

    Returns:
        dict: Dictionary of credentials
    """
    credentials = {}

    if json_paths is None:
        json_paths = credential_paths()

    json_loaded = False
    for json_path in json_paths:
        if os.path.exists(json_path):
            try:
                with open(json_path, 'r', encoding='utf-8') as f:
                    credentials = json.load(f)
                logger.info(f"✅ Credentials loaded from JSON file: {json_path}")
                json_loaded = True
                break
            except (OSError, ValueError) as e:
                logger.warning(f"⚠️ Failed to load credentials from {json_path}: {e}")

    if not json_loaded:
        logger.warning("⚠️ No credential.json file found in any location, falling back to environment variables")
        credentials = {key: os.environ.get(key, "") for key in CREDENTIAL_KEYS}

    for key, value in credentials.items():
        if value:  # Only set if value exists
            os.environ[key] = str(value)

    return credentials


def get_credential(key, default=None):
    """
    Get a specific credential value.

    Args:
        key (str): Credential key name
        default: Default value if credential not found

    Returns:
        str: Credential value
    """
    value = os.environ.get(key)
    if value:
        return value

    credentials = load_credentials()
    return credentials.get(key) or default
