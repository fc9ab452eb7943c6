import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB
MONGO_URI = os.getenv("MONGO_URI", "mongodb://127.0.0.1:27017")
MONGO_DB = os.getenv("MONGO_DB", "CodePrep")

# Local snapshot written by collect.py
DATA_DIR = os.getenv("DATA_DIR", "data")

# "json" reads the snapshot, "mongo" queries the database directly
DATA_SOURCE = os.getenv("DATA_SOURCE", "json").lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Size of the recent / accepted submission feeds
RECENT_LIMIT = int(os.getenv("RECENT_LIMIT", "40"))
