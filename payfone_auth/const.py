"""Constants for the Payfone device authentication client."""

from __future__ import annotations

VERSION = "1.0.0"

# "What is my IP" service used by the optional device IP leg
DEVICE_IP_URL = "https://device.payfone.com:4443/whatismyip"

# Sprint carrier template (plain HTTP, scheme swap only)
SPRINT_INSECURE_PREFIX = "http://oap7"

# T-Mobile carrier templates: insecure prefix -> secure step-down prefix
TMO_PROD_URL = "http://device.payfone.com/mobileauth/2014/07/01/deviceAuthenticate"
TMO_STAGING_URL = "http://device.staging.payfone.com/mobileauth/2014/07/01/deviceAuthenticate"
TMO_SECURE_PROD_URL = "https://device.payfone.com:4443/mobileauth/2014/07/01/secureAuthStepDown"
TMO_SECURE_STAGING_URL = "https://device.staging.payfone.com:4443/mobileauth/2014/07/01/secureAuthStepDown"

# AT&T SNAP flow selector
PFFLOW_PARAM = "pfflow"
PFFLOW_POST = "2"

# Query parameters
PARAM_DEVICE_IP = "deviceIp"
PARAM_VFP = "vfp"
PARAM_DATA = "data"
AUTH_MARKER_PARAM = "r"
AUTH_MARKER_VALUE = "f"

# Separator between remembered vfp and base64 body in the POST flow token
COMBINED_TOKEN_SEPARATOR = "___"

# Redirect chasing limit for a single authentication
DEFAULT_MAX_REDIRECTS = 10

# Progress checkpoints (percent complete)
PROGRESS_STARTING = 5
PROGRESS_DEVICE_IP = 16
PROGRESS_START_URL = 33
PROGRESS_AUTH_CALL = 55
PROGRESS_FINISH_URL = 75
PROGRESS_NOTIFYING = 98
PROGRESS_COMPLETE = 100

# Completion status codes
STATUS_SUCCESS = 0
STATUS_UNKNOWN_ERROR = 1
STATUS_NO_DATA = 2
STATUS_MISSING_TOKEN = 3
STATUS_INVALID_RESPONSE = 4
STATUS_TOO_MANY_REDIRECTS = 5
STATUS_NETWORK_ERROR = 500

NETWORK_ERROR_DESCRIPTION = "A network error occurred."

# Narration truncation lengths
LOG_URL_CHARS = 20
LOG_VFP_CHARS = 10
