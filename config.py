import os
from dotenv import load_dotenv

load_dotenv()

# Tripolis API configuration
API_URL = os.environ.get("TRIPOLIS_API_URL", "").strip()
CLIENT = os.environ.get("TRIPOLIS_CLIENT", "").strip()
USERNAME = os.environ.get("TRIPOLIS_USERNAME", "").strip()
PASSWORD = os.environ.get("TRIPOLIS_PASSWORD", "").strip()
REQUEST_TIMEOUT = int(os.environ.get("TRIPOLIS_TIMEOUT", "30"))

# Default contact database
DATABASE = os.environ.get("TRIPOLIS_DATABASE", "").strip()

# Group subscription status counted as active
SUBSCRIPTION_STATUS = os.environ.get("TRIPOLIS_SUBSCRIPTION_STATUS", "SUBSCRIBED")

# Raise on unknown fields in create/update instead of dropping them
STRICT_FIELDS = os.environ.get("TRIPOLIS_STRICT_FIELDS", "").strip().lower() in ("1", "true", "yes")

