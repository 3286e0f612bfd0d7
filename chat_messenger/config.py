"""Client configuration values."""
import os
from pathlib import Path

DEFAULT_SERVER_URL = os.environ.get("CHAT_MESSENGER_SERVER_URL", "http://localhost:18080")
REQUEST_TIMEOUT = 30
STORAGE_FILE = Path.home() / ".chat_messenger_client.json"
LOG_FILE = Path.home() / ".chat_messenger_client.log"
