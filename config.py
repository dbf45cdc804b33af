import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./credit_ledger.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Payment registration: attempts before CONCURRENT_MODIFICATION
    CREDIT_MAX_RETRIES = int(data.get("CREDIT_MAX_RETRIES", 3))

    # Risk tiers (usage percentage of the credit limit)
    RISK_ALERT_THRESHOLD = data.get("RISK_ALERT_THRESHOLD", 70)
    RISK_CRITICAL_THRESHOLD = data.get("RISK_CRITICAL_THRESHOLD", 90)

    # Invariant alerts (debt underflow, audit discrepancies)
    INVARIANT_ALERT_WEBHOOK = data.get("INVARIANT_ALERT_WEBHOOK", None)

    # Ledger Audit Configuration
    LEDGER_AUDIT_ENABLED = bool(data.get("LEDGER_AUDIT_ENABLED", True))
    LEDGER_AUDIT_INTERVAL_SECONDS = data.get("LEDGER_AUDIT_INTERVAL_SECONDS", 86400)  # Daily
