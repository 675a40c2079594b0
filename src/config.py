"""
Configuration module for the Depot Sales backend
Environment-agnostic: Works locally, in Docker, and on Google Cloud
Loads environment variables and validates configuration
"""
import os
import json
import tempfile
from pathlib import Path
from dotenv import load_dotenv

# Get project root directory (parent of src/)
PROJECT_ROOT = Path(__file__).parent.parent

# Load environment variables from .env file (if exists - local dev only)
env_file = PROJECT_ROOT / '.env'
if env_file.exists():
    load_dotenv(env_file)

# ═══════════════════════════════════════════════════════════════════
# ENVIRONMENT DETECTION
# ═══════════════════════════════════════════════════════════════════

def detect_environment() -> str:
    """
    Detect which environment we're running in

    Returns:
        'cloud_run', 'kubernetes', 'docker', or 'local'
    """
    # Cloud Run sets K_SERVICE
    if os.getenv('K_SERVICE'):
        return 'cloud_run'

    # Kubernetes sets KUBERNETES_SERVICE_HOST
    if os.getenv('KUBERNETES_SERVICE_HOST'):
        return 'kubernetes'

    # Docker typically has /.dockerenv file
    if Path('/.dockerenv').exists():
        return 'docker'

    return 'local'

RUNTIME_ENVIRONMENT = detect_environment()

# ═══════════════════════════════════════════════════════════════════
# SERVICE ACCOUNT RESOLUTION
# ═══════════════════════════════════════════════════════════════════

def resolve_service_account_info() -> dict:
    """
    Resolve the Google service-account key from the server-side environment.
    Priority order:
    1. JSON string in GOOGLE_SERVICE_ACCOUNT_KEY (secret mounted as env var)
    2. Key file at GOOGLE_SERVICE_ACCOUNT_FILE (or config/service_account.json)

    Returns:
        The decoded key as a dict. The key is read fresh on every call so a
        rotated secret is picked up without a restart.

    Raises:
        ValueError: if no source is configured or the JSON cannot be decoded.
    """
    raw_key = os.getenv('GOOGLE_SERVICE_ACCOUNT_KEY')
    if raw_key:
        try:
            return json.loads(raw_key)
        except json.JSONDecodeError as e:
            raise ValueError(f"GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON: {e}")

    key_file = os.getenv('GOOGLE_SERVICE_ACCOUNT_FILE', str(PROJECT_ROOT / 'config' / 'service_account.json'))
    if not os.path.isabs(key_file):
        key_file = str(PROJECT_ROOT / key_file)
    if os.path.exists(key_file):
        with open(key_file, 'r', encoding='utf-8') as fh:
            try:
                return json.load(fh)
            except json.JSONDecodeError as e:
                raise ValueError(f"Service account file {key_file} is not valid JSON: {e}")

    raise ValueError(
        "No service account credentials found. Set one of:\n"
        "  - GOOGLE_SERVICE_ACCOUNT_KEY (JSON string)\n"
        "  - GOOGLE_SERVICE_ACCOUNT_FILE (path to JSON file)\n"
        "  - Place service_account.json in config/ folder"
    )

# ═══════════════════════════════════════════════════════════════════
# WRITABLE PATHS - Handle containerized environments
# ═══════════════════════════════════════════════════════════════════

def get_writable_path(folder_name: str) -> str:
    """Get a writable path that works in all environments"""
    env_path = os.getenv(folder_name.upper() + '_FOLDER')
    if env_path:
        if os.path.isabs(env_path):
            path = Path(env_path)
        else:
            path = PROJECT_ROOT / env_path
    else:
        path = PROJECT_ROOT / folder_name

    # In containers, /app might be read-only; use /tmp as fallback
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except (PermissionError, OSError):
            path = Path(tempfile.gettempdir()) / 'depot_sales' / folder_name
            path.mkdir(parents=True, exist_ok=True)

    return str(path)

# ═══════════════════════════════════════════════════════════════════
# CONFIGURATION VALUES
# ═══════════════════════════════════════════════════════════════════

# Google Sheets access
SHEETS_SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
SHEETS_HTTP_TIMEOUT_SECONDS = float(os.getenv('SHEETS_HTTP_TIMEOUT_SECONDS', '20'))

# Default workbook layout (overridable per account through the config store)
DEFAULT_SPREADSHEET_ID = os.getenv('DEFAULT_SPREADSHEET_ID', '1Ljddx01jdNdy7KPhO_8BCUMRmQ-iTznyA03DkJYOhMU')
DEFAULT_SALES_SHEET_GID = os.getenv('DEFAULT_SALES_SHEET_GID', '311399969')
DEFAULT_PRICE_SHEET_GID = os.getenv('DEFAULT_PRICE_SHEET_GID', '1324216461')
DEFAULT_PAYMENTS_SHEET_GID = os.getenv('DEFAULT_PAYMENTS_SHEET_GID', '495567720')
DEFAULT_DRIVERS = [
    d.strip() for d in os.getenv('DEFAULT_DRIVERS', 'DEPOT BULK,ALABI MUSIBAU,LAWAL WILLIAMS').split(',')
    if d.strip()
]
DEFAULT_COMPANY_NAME = os.getenv('DEFAULT_COMPANY_NAME', 'Depot Sales Company')
DEFAULT_COMPANY_ADDRESS = os.getenv('DEFAULT_COMPANY_ADDRESS', 'Warehouse 1 - A Load Out')
DEFAULT_COMPANY_PHONE = os.getenv('DEFAULT_COMPANY_PHONE', '+234 XXX XXX XXXX')
DEFAULT_LOADER_NAME = os.getenv('DEFAULT_LOADER_NAME', 'Auto')
DEFAULT_SUBMITTED_BY = os.getenv('DEFAULT_SUBMITTED_BY', 'Auto')

# Sheet row constants
WAREHOUSE_LABEL = os.getenv('WAREHOUSE_LABEL', 'Warehouse 1 - A')
OPERATION_LABEL = 'Load Out'
BANK_TRANSFER_LABEL = os.getenv('BANK_TRANSFER_LABEL', 'BANK TRANSFER')
POS_LABEL = 'POS'
USE_NOW_FLAG = 'YES'
TRANSACTION_DATE_FORMAT = '%d/%m/%Y'

# Sales tab column layout (one row per cart item)
SALES_COLUMNS = [
    'Timestamp',
    'Transaction_Date',
    'Warehouse',
    'Operation',
    'SKU_Name',
    'SKU_Qty',
    'SKU_Price',
    'Total_Amount',
    'Pack_Type',
    'Driver',
    'Loader_1',
    'Loader_2',
    'Submitted_By',
    'Customer_Name',
    'Customer_Address',
    'Customer_Phone',
    'Payment_Method',
    'Amount_Paid',
    'Balance',
]

# Payments tab column layout (one row per order)
PAYMENT_COLUMNS = [
    'Timestamp',
    'Delivery_Date',
    'Bank',
    'Warehouse',
    'Driver',
    'Customer_Name',
    'Amount',
    'Use_Now',
    'Forwarded_Date',
    'New_Date',
    'Submitted_By',
]

# Local configuration store
DATA_FOLDER = get_writable_path('data')
TEMP_FOLDER = get_writable_path('temp')
LOCAL_CONFIG_PATH = os.getenv('LOCAL_CONFIG_PATH', str(Path(DATA_FOLDER) / 'app_config.json'))

# Monitoring Configuration
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FOLDER = get_writable_path('logs')
LOG_FILE_MAX_MB = int(os.getenv('LOG_FILE_MAX_MB', '10'))
LOG_FILE_BACKUP_COUNT = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))

# ═══════════════════════════════════════════════════════════════════
# REST API (FastAPI + Swagger + JWT Auth)
# ═══════════════════════════════════════════════════════════════════

API_PORT = int(os.getenv('API_PORT', '8000'))
API_HOST = os.getenv('API_HOST', '0.0.0.0')

# Cloud Run sets PORT to the single port it routes traffic to
_cloud_run_port = os.getenv('PORT')
if _cloud_run_port:
    API_PORT = int(_cloud_run_port)

# JWT configuration
API_JWT_SECRET = os.getenv('API_JWT_SECRET', '')
API_JWT_ALGORITHM = os.getenv('API_JWT_ALGORITHM', 'HS256')
API_JWT_EXPIRY_MINUTES = int(os.getenv('API_JWT_EXPIRY_MINUTES', '30'))
API_JWT_REFRESH_EXPIRY_DAYS = int(os.getenv('API_JWT_REFRESH_EXPIRY_DAYS', '7'))

# CORS configuration (comma-separated origins)
API_CORS_ORIGINS = os.getenv('API_CORS_ORIGINS', 'http://localhost:3000').split(',')

# SQLite database holding staff accounts and their own configuration records
API_USER_DB_PATH = os.getenv('API_USER_DB_PATH', str(PROJECT_ROOT / 'data' / 'users.db'))

# Rate limiting
API_RATE_LIMIT_PER_MINUTE = int(os.getenv('API_RATE_LIMIT_PER_MINUTE', '60'))
# Only honour X-Forwarded-For / X-Real-IP when a trusted proxy sets them
API_TRUST_PROXY_HEADERS = os.getenv('API_TRUST_PROXY_HEADERS', 'false').lower() == 'true'

# Submitted orders kept in memory for receipt lookups (oldest dropped first)
API_RECENT_ORDER_LIMIT = int(os.getenv('API_RECENT_ORDER_LIMIT', '500'))


def validate_config():
    """Validate that all required configuration is present"""
    errors = []

    print(f"[CONFIG] Runtime environment: {RUNTIME_ENVIRONMENT}")

    if not API_JWT_SECRET:
        errors.append("API_JWT_SECRET is not set")

    if not DEFAULT_DRIVERS:
        errors.append("DEFAULT_DRIVERS must contain at least one driver")

    try:
        resolve_service_account_info()
    except ValueError as e:
        errors.append(str(e))

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(errors))

    return True


if __name__ == "__main__":
    try:
        validate_config()
        print("[OK] Configuration validated successfully")
    except ValueError as e:
        print(f"[FAIL] Configuration validation failed:\n{e}")
