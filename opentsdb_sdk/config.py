"""
Configuration settings for the OpenTSDB SDK.
"""
import os

# Server configuration
SERVER_URL = os.getenv('OPENTSDB_URL', 'http://localhost:4242')
PUT_ENDPOINT = '/api/put'

# HTTP client configuration
CONNECT_TIMEOUT_MS = int(os.getenv('OPENTSDB_CONNECT_TIMEOUT_MS', '5000'))
READ_TIMEOUT_MS = int(os.getenv('OPENTSDB_READ_TIMEOUT_MS', '5000'))
MAX_WORKERS = int(os.getenv('OPENTSDB_MAX_WORKERS', '4'))  # transport threads
SUCCESS_STATUS = 204  # OpenTSDB answers a successful put with "No Content"

# Batch configuration
# Large puts are known to fail on OpenTSDB, 5 - 10 metrics per request is safe
BATCH_SIZE_LIMIT = int(os.getenv('OPENTSDB_BATCH_SIZE_LIMIT', '10'))

# Reporter configuration
REPORT_INTERVAL = int(os.getenv('OPENTSDB_REPORT_INTERVAL', '60'))  # seconds

# Logging configuration
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
