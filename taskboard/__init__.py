# Task board: card model, in-memory store, and JSON API.
#
# Components:
#   schema.py  - Data model (Card, CardStatus, CardUpdate, CardSnapshot)
#   store.py   - In-memory card store (CRUD + batch status update)
#   errors.py  - Exception types (ValidationError, NotFound, ConfigError)
#   config.py  - YAML/env configuration for the server
#   server.py  - Flask JSON API and process entry point

__version__ = "1.0.0"

from .errors import TaskBoardError, ValidationError, NotFound, ConfigError
from .schema import Card, CardStatus, CardUpdate, CardSnapshot, STATUS_LABELS
from .store import CardStore, BoardListing
